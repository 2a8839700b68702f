"""
Gear metrics for a single chainring/cog combination.

All sizing metrics are referenced to a 27 inch wheel:
- Ratio: chainring / cog
- Gear inches: ratio * 27
- Development: metres travelled per crank revolution
- Gain ratio: wheel radius / crank length * ratio (Sheldon Brown)
- Speed at 60, 80, 90, 100 and 120 rpm

ASSUMPTIONS:
- Fixed nominal wheel size, independent of tire choice
- No drivetrain slip; efficiency only scales delivered power
"""

import math

from cranksmith.errors import InvalidInputError
from cranksmith.models.outputs import GearCalculation, SpeedAtCadence
from cranksmith.models.settings import SpeedUnit
from cranksmith.physics.geometry import calculate_chain_angle, efficiency_from_angle
from cranksmith.physics.units import (
    CADENCES_RPM,
    WHEEL_CIRCUMFERENCE_M,
    WHEEL_DIAMETER_IN,
    WHEEL_RADIUS_MM,
    speed_at_cadence,
)

DEFAULT_CRANK_LENGTH_MM = 172.5

# Upper gain ratio bound (exclusive) and riding it suits
GAIN_RATIO_BANDS = (
    (2.5, "Very Low (steep climbing)"),
    (3.5, "Low (climbing)"),
    (4.5, "Medium-Low (rolling terrain)"),
    (5.5, "Medium (general riding)"),
    (6.5, "Medium-High (fast riding)"),
    (7.5, "High (racing/sprinting)"),
    (math.inf, "Very High (time trial/sprinting)"),
)


def calculate_ratio(chainring: int, cog: int) -> float:
    """
    Gear ratio of a chainring/cog pair.

    Raises:
        InvalidInputError: If either tooth count is not positive
    """
    if chainring <= 0:
        raise InvalidInputError(f"chainring must have positive teeth, got {chainring}")
    if cog <= 0:
        raise InvalidInputError(f"cog must have positive teeth, got {cog}")
    return chainring / cog


def calculate_gear_inches(ratio: float) -> float:
    """Gear inches on the 27 inch reference wheel."""
    return ratio * WHEEL_DIAMETER_IN


def calculate_development(ratio: float) -> float:
    """Metres travelled per crank revolution."""
    return ratio * WHEEL_CIRCUMFERENCE_M


def calculate_gain_ratio(ratio: float, crank_length_mm: float) -> float:
    """
    Gain ratio: distance the bike moves per unit of pedal travel.

    Raises:
        InvalidInputError: If crank length is not positive and finite
    """
    if not math.isfinite(crank_length_mm) or crank_length_mm <= 0:
        raise InvalidInputError(
            f"crank length must be positive and finite, got {crank_length_mm}"
        )
    return ratio * WHEEL_RADIUS_MM / crank_length_mm


def interpret_gain_ratio(gain_ratio: float) -> str:
    """Describe the kind of riding a gain ratio suits."""
    for limit, description in GAIN_RATIO_BANDS:
        if gain_ratio < limit:
            return description
    return GAIN_RATIO_BANDS[-1][1]


def calculate_speeds(development_m: float, unit: SpeedUnit = SpeedUnit.KMH) -> SpeedAtCadence:
    """Speed at every reference cadence, all computed together."""
    speeds = [speed_at_cadence(development_m, rpm, unit.value) for rpm in CADENCES_RPM]
    return SpeedAtCadence(**{f"rpm{rpm}": v for rpm, v in zip(CADENCES_RPM, speeds)})


def calculate_gear(
    chainring: int,
    cog: int,
    *,
    front_chain_line_mm: float,
    rear_chain_line_mm: float,
    chainstay_length_mm: float,
    crank_length_mm: float = DEFAULT_CRANK_LENGTH_MM,
    speed_unit: SpeedUnit = SpeedUnit.KMH,
    front_index: int = 0,
    rear_index: int = 0,
    gear_number: int = 1,
) -> GearCalculation:
    """
    Compute every metric for one chainring/cog combination.

    Args:
        chainring: Chainring teeth
        cog: Cog teeth
        front_chain_line_mm: Front chainline including bottom bracket adjustment
        rear_chain_line_mm: Chainline of this cog
        chainstay_length_mm: Chainstay length for the bike type
        crank_length_mm: Crank arm length
        speed_unit: Unit for speed-at-cadence values
        front_index: Ring position in the setup
        rear_index: Cog position on the cassette
        gear_number: 1-based position in traversal order

    Returns:
        Fully populated GearCalculation

    Raises:
        InvalidInputError: For non-positive teeth, non-positive or non-finite
            dimensions, or if any result is not finite
    """
    ratio = calculate_ratio(chainring, cog)
    development = calculate_development(ratio)
    angle = calculate_chain_angle(front_chain_line_mm, rear_chain_line_mm, chainstay_length_mm)

    values = {
        "ratio": ratio,
        "gear_inches": calculate_gear_inches(ratio),
        "gain_ratio": calculate_gain_ratio(ratio, crank_length_mm),
        "development_m": development,
        "cross_chain_angle_deg": angle,
        "efficiency": efficiency_from_angle(angle),
    }
    speeds = calculate_speeds(development, speed_unit)

    bad = [k for k, v in values.items() if not math.isfinite(v)]
    bad += [
        k for k, v in (
            ("chain_line_mm", front_chain_line_mm),
            ("rear_chain_line_mm", rear_chain_line_mm),
        )
        if not math.isfinite(v)
    ]
    bad += [k for k, v in speeds.model_dump().items() if not math.isfinite(v)]
    if bad:
        raise InvalidInputError(f"{chainring}x{cog} produced non-finite values: {', '.join(bad)}")

    return GearCalculation(
        chainring=chainring,
        cog=cog,
        front_index=front_index,
        rear_index=rear_index,
        gear_number=gear_number,
        speed_at_cadence=speeds,
        speed_unit=speed_unit,
        chain_line_mm=front_chain_line_mm,
        rear_chain_line_mm=rear_chain_line_mm,
        gain_ratio_description=interpret_gain_ratio(values["gain_ratio"]),
        **values,
    )
