"""
Gearing and chainline calculations.

Unit-aware (pint) helpers for ratios, gear inches, gain ratio, development,
speed at cadence, cross-chain angle and chain efficiency.
"""

from cranksmith.physics.units import ureg, Q_, CADENCES_RPM, speed_at_cadence
from cranksmith.physics.geometry import (
    ChainlineGeometry,
    calculate_chain_angle,
    efficiency_from_angle,
    standard_chain_line,
    chainstay_length,
    cassette_cog_spacing,
    hub_spacing_chain_line,
    bottom_bracket_spec,
    calculate_cog_positions,
    resolve_chainline_geometry,
    IdealChainLine,
    calculate_ideal_chain_line,
)
from cranksmith.physics.gearing import (
    DEFAULT_CRANK_LENGTH_MM,
    calculate_ratio,
    calculate_gear_inches,
    calculate_development,
    calculate_gain_ratio,
    calculate_speeds,
    calculate_gear,
    interpret_gain_ratio,
)

__all__ = [
    # Units
    "ureg",
    "Q_",
    "CADENCES_RPM",
    "speed_at_cadence",
    # Geometry
    "ChainlineGeometry",
    "calculate_chain_angle",
    "efficiency_from_angle",
    "standard_chain_line",
    "chainstay_length",
    "cassette_cog_spacing",
    "hub_spacing_chain_line",
    "bottom_bracket_spec",
    "calculate_cog_positions",
    "resolve_chainline_geometry",
    "IdealChainLine",
    "calculate_ideal_chain_line",
    # Gearing
    "DEFAULT_CRANK_LENGTH_MM",
    "calculate_ratio",
    "calculate_gear_inches",
    "calculate_development",
    "calculate_gain_ratio",
    "calculate_speeds",
    "calculate_gear",
    "interpret_gain_ratio",
]
