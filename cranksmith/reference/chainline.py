"""
Chainline reference data.

Industry-typical values for chainlines, bottom bracket shells, hub spacing,
cassette cog pitch, chainstay lengths and the cross-chain efficiency model.

ASSUMPTIONS:
- Chainlines are measured from the frame centerline to the sprocket plane (mm)
- One representative chainstay length per bike type (no frame geometry)
- Bottom bracket adjustments are relative to a 68 mm threaded BSA shell
"""

import math
from dataclasses import dataclass

from cranksmith.reference.tables import ReferenceTable


@dataclass(frozen=True)
class BottomBracketSpec:
    """Shell dimensions of a bottom bracket standard."""
    shell_width_mm: float
    chain_line_adjustment_mm: float
    press_fit: bool
    common_use: str = ""


@dataclass(frozen=True)
class CrossChainBand:
    """One band of the cross-chain classification."""
    name: str
    max_angle_deg: float
    efficiency: float
    description: str


STANDARD_CHAIN_LINES_MM = ReferenceTable(
    "standard chainline",
    {
        "road": 43.5,
        "gravel": 46.0,
        "mtb": 52.0,
        "hybrid": 43.5,
        "bmx": 42.0,
        "track": 42.0,
    },
    default_key="road",
)

BOTTOM_BRACKETS = ReferenceTable(
    "bottom bracket",
    {
        "BSA": BottomBracketSpec(68.0, 0.0, False, "Road, older MTB"),
        "ITA": BottomBracketSpec(70.0, 1.0, False, "Italian road bikes"),
        "BB30": BottomBracketSpec(70.0, 1.0, True, "Road, CX, some MTB"),
        "PF30": BottomBracketSpec(70.0, 1.0, True, "Road, CX, gravel"),
        "BB86": BottomBracketSpec(86.5, 0.0, True, "Road, CX, gravel"),
        "BB90": BottomBracketSpec(90.0, 11.0, True, "Trek, some Specialized"),
        "BB92": BottomBracketSpec(92.0, 12.0, True, "MTB, some road"),
        "PF92": BottomBracketSpec(92.0, 12.0, True, "MTB"),
        "T47": BottomBracketSpec(68.0, 0.0, False, "Modern road, gravel"),
        "BB107": BottomBracketSpec(107.0, 19.5, True, "Cannondale Lefty"),
    },
    default_key="BSA",
)

# Rear chainline by hub spacing (mm)
HUB_SPACING_CHAIN_LINES_MM = ReferenceTable(
    "hub spacing",
    {
        120: 42.0,  # Track / single speed
        126: 43.5,  # Vintage road
        130: 43.5,  # Modern road
        135: 46.0,  # Traditional MTB
        142: 46.0,  # Thru-axle
        148: 52.0,  # Boost
        150: 52.0,  # DH
        157: 56.5,  # Super Boost
    },
    default_key=130,
)

# Center-to-center cog pitch by speed count (mm)
CASSETTE_COG_SPACING_MM = ReferenceTable(
    "cassette cog spacing",
    {
        7: 5.0,
        8: 4.8,
        9: 4.34,
        10: 3.95,
        11: 3.74,
        12: 3.35,
        13: 3.15,
    },
    default_key=11,
)

CHAINSTAY_LENGTHS_MM = ReferenceTable(
    "chainstay length",
    {
        "road": 410.0,
        "gravel": 425.0,
        "mtb": 435.0,  # Hardtail
        "mtb_fs": 445.0,
        "bmx": 365.0,
        "track": 395.0,
        "tt": 405.0,
    },
    default_key="road",
)

CROSS_CHAIN_BANDS = (
    CrossChainBand("optimal", 0.5, 0.98, "Perfect chain line"),
    CrossChainBand("good", 2.0, 0.975, "Excellent efficiency"),
    CrossChainBand("acceptable", 4.0, 0.95, "Good for general riding"),
    CrossChainBand("poor", 6.0, 0.935, "Avoid under load"),
    CrossChainBand("avoid", math.inf, 0.91, "Extreme cross-chain"),
)

# Partition limits used by the analyzer
STRAIGHT_CHAIN_MAX_DEG = 2.0
CROSS_CHAIN_MAX_DEG = 4.0

# Linear chain efficiency model
BASE_EFFICIENCY = 0.98
EFFICIENCY_LOSS_PER_DEGREE = 0.003
EXTREME_ANGLE_DEG = 5.0
EXTREME_ANGLE_PENALTY = 0.02
MIN_EFFICIENCY = 0.85

# Front chainline deviation from the bike-type standard (mm)
CHAINLINE_INFO_DEVIATION_MM = 2.0
CHAINLINE_WARNING_DEVIATION_MM = 5.0

# Efficiency above which a gear is usable, and above which it is optimal
USABLE_EFFICIENCY = 0.95
OPTIMAL_EFFICIENCY = 0.975

# Gears closer than this in ratio count as duplicates
DUPLICATE_RATIO_TOLERANCE = 0.05

# Share of gears that should run a straight chain
MIN_STRAIGHT_CHAIN_SHARE = 0.6


def cross_chain_band(angle_deg: float) -> CrossChainBand:
    """Return the first band whose limit covers the angle."""
    for band in CROSS_CHAIN_BANDS:
        if angle_deg <= band.max_angle_deg:
            return band
    return CROSS_CHAIN_BANDS[-1]
