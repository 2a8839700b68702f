"""
Unit registry and wheel constants for gearing calculations.

Uses pint so that inch, millimetre and speed conversions are done by the
registry rather than by hand-typed factors.
"""

import math

import pint

# Create a shared unit registry for the entire application
ureg = pint.UnitRegistry()

# Shorthand for creating quantities
Q_ = ureg.Quantity

# Reference wheel for gear inches and development
WHEEL_DIAMETER = Q_(27, "inch")
WHEEL_DIAMETER_IN = WHEEL_DIAMETER.magnitude
WHEEL_RADIUS_MM = (WHEEL_DIAMETER / 2).to("mm").magnitude
WHEEL_CIRCUMFERENCE_M = (math.pi * WHEEL_DIAMETER).to("m").magnitude

CADENCES_RPM = (60, 80, 90, 100, 120)


def magnitude_in(quantity: pint.Quantity, unit: str) -> float:
    """Get the magnitude of a quantity in specified units."""
    return quantity.to(unit).magnitude


def speed_at_cadence(development_m: float, cadence_rpm: float, unit: str = "km/h") -> float:
    """
    Road speed for a distance per crank revolution at a cadence.

    Args:
        development_m: Distance travelled per crank revolution (m)
        cadence_rpm: Crank revolutions per minute
        unit: Target speed unit ("km/h" or "mph")

    Returns:
        Speed in the requested unit
    """
    return magnitude_in(Q_(development_m * cadence_rpm, "m/min"), unit)
