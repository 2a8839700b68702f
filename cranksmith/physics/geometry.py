"""
Chainline geometry for cross-chain angle and efficiency.

Provides:
- Chain angle from front/rear chainline offset and chainstay length
- Linear efficiency model from chain angle
- Fallback lookups for standard chainline, chainstay, cog pitch,
  hub spacing and bottom bracket adjustment
- Lateral cog positions and the resolved geometry of a whole setup
- Ideal front chainline for a cassette

ASSUMPTIONS:
- The chain runs in a straight line from ring to cog (no sag or wrap)
- All chainrings share the crankset's chainline
- Largest cog is innermost; cogs are evenly pitched around the rear chainline
- One chainstay length per bike type (no frame geometry modeling)
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

from cranksmith.errors import InvalidInputError
from cranksmith.models.setup import DrivetrainSetup
from cranksmith.reference.chainline import (
    BASE_EFFICIENCY,
    BOTTOM_BRACKETS,
    CASSETTE_COG_SPACING_MM,
    CHAINSTAY_LENGTHS_MM,
    EFFICIENCY_LOSS_PER_DEGREE,
    EXTREME_ANGLE_DEG,
    EXTREME_ANGLE_PENALTY,
    HUB_SPACING_CHAIN_LINES_MM,
    MIN_EFFICIENCY,
    STANDARD_CHAIN_LINES_MM,
    BottomBracketSpec,
)
from cranksmith.reference.tables import LookupResult

logger = logging.getLogger(__name__)


@dataclass
class ChainlineGeometry:
    """Chainline numbers resolved for one setup (all in mm)."""
    front_chain_line_mm: float
    rear_center_mm: float
    chainstay_length_mm: float
    cog_spacing_mm: float
    cog_positions_mm: list[float]
    bottom_bracket: Optional[BottomBracketSpec] = None
    fallbacks: list[LookupResult] = field(default_factory=list)


def calculate_chain_angle(
    front_chain_line_mm: float,
    rear_chain_line_mm: float,
    chainstay_length_mm: float,
) -> float:
    """
    Calculate the cross-chain angle.

    angle = atan(|front - rear| / chainstay), in degrees

    Args:
        front_chain_line_mm: Chainring plane offset from centerline
        rear_chain_line_mm: Cog plane offset from centerline
        chainstay_length_mm: Bottom bracket to rear axle distance

    Returns:
        Chain angle in degrees (>= 0)

    Raises:
        InvalidInputError: If chainstay length is not positive and finite
    """
    if not math.isfinite(chainstay_length_mm) or chainstay_length_mm <= 0:
        raise InvalidInputError(
            f"chainstay length must be positive and finite, got {chainstay_length_mm}"
        )
    offset = abs(front_chain_line_mm - rear_chain_line_mm)
    return math.degrees(math.atan(offset / chainstay_length_mm))


def efficiency_from_angle(angle_deg: float) -> float:
    """
    Estimate drivetrain efficiency from chain angle.

    Starts at 98% and loses 0.3% per degree, with a further 2% penalty
    beyond 5 degrees. Never drops below 85%.

    Args:
        angle_deg: Cross-chain angle in degrees

    Returns:
        Efficiency fraction in [0.85, 0.98]
    """
    efficiency = BASE_EFFICIENCY - abs(angle_deg) * EFFICIENCY_LOSS_PER_DEGREE
    if abs(angle_deg) > EXTREME_ANGLE_DEG:
        efficiency -= EXTREME_ANGLE_PENALTY
    return max(MIN_EFFICIENCY, efficiency)


def standard_chain_line(bike_type) -> LookupResult:
    """Standard front chainline for a bike type (falls back to road)."""
    return STANDARD_CHAIN_LINES_MM.lookup(bike_type)


def chainstay_length(bike_type) -> LookupResult:
    """Typical chainstay length for a bike type (falls back to road)."""
    return CHAINSTAY_LENGTHS_MM.lookup(bike_type)


def cassette_cog_spacing(speeds: int) -> LookupResult:
    """Cog pitch for a speed count (falls back to 11-speed)."""
    return CASSETTE_COG_SPACING_MM.lookup(speeds)


def hub_spacing_chain_line(hub_spacing_mm: float) -> LookupResult:
    """Rear chainline for a hub spacing (falls back to 130 mm road)."""
    return HUB_SPACING_CHAIN_LINES_MM.lookup(hub_spacing_mm)


def bottom_bracket_spec(standard: str) -> LookupResult:
    """Shell spec for a bottom bracket standard (falls back to BSA)."""
    return BOTTOM_BRACKETS.lookup(standard)


@dataclass
class IdealChainLine:
    """Front chainline that best matches a cassette."""
    front_chain_line_mm: float
    reasoning: str


def ideal_chain_line(speeds: int, rear_center_mm: float) -> IdealChainLine:
    """
    Ideal front chainline for a cassette centered on `rear_center_mm`.

    The straightest average chain comes from putting the rings in line with
    the middle of the cassette.
    """
    return IdealChainLine(
        front_chain_line_mm=rear_center_mm,
        reasoning=(
            f"For best chain line with {speeds}-speed cassette, front chain line "
            f"should be {rear_center_mm:.1f}mm to match rear centerline"
        ),
    )


def calculate_ideal_chain_line(speeds: int, hub_spacing_mm: float = 130) -> IdealChainLine:
    """Ideal front chainline for a cassette on a hub of the given spacing."""
    return ideal_chain_line(speeds, hub_spacing_chain_line(hub_spacing_mm).value)


def calculate_cog_positions(
    cogs: list[int],
    cog_spacing_mm: float,
    rear_center_mm: float,
) -> list[float]:
    """
    Lateral chainline of each cog, in the cassette's declared order.

    The largest cog sits innermost and the stack is centered on the rear
    chainline. Equal cogs keep their declared order.

    Args:
        cogs: Cog teeth as declared on the cassette
        cog_spacing_mm: Center-to-center cog pitch
        rear_center_mm: Chainline of the middle of the cassette

    Returns:
        List of cog chainlines matching `cogs`
    """
    n = len(cogs)
    outward = sorted(range(n), key=lambda i: (-cogs[i], i))
    positions = [0.0] * n
    for rank, idx in enumerate(outward):
        positions[idx] = rear_center_mm + (rank - (n - 1) / 2) * cog_spacing_mm
    return positions


def resolve_chainline_geometry(setup: DrivetrainSetup) -> ChainlineGeometry:
    """
    Resolve front/rear chainlines and chainstay length for a setup.

    Front chainline is the crankset's plus the bottom bracket adjustment when
    a bottom bracket override is given. The rear centerline comes from the
    hub spacing table when hub spacing is given, otherwise from the bike
    type's standard chainline.

    Args:
        setup: Drivetrain setup

    Returns:
        ChainlineGeometry with any fallback lookups recorded
    """
    fallbacks: list[LookupResult] = []

    def _use(result: LookupResult) -> LookupResult:
        if result.fallback:
            fallbacks.append(result)
        return result

    front = setup.crankset.chain_line_mm
    bb_spec = None
    if setup.bottom_bracket:
        bb = _use(bottom_bracket_spec(setup.bottom_bracket))
        bb_spec = bb.value
        front += bb_spec.chain_line_adjustment_mm

    if setup.hub_spacing_mm is not None:
        rear_center = _use(hub_spacing_chain_line(setup.hub_spacing_mm)).value
    else:
        rear_center = _use(standard_chain_line(setup.bike_type)).value

    chainstay = _use(chainstay_length(setup.bike_type)).value
    spacing = _use(cassette_cog_spacing(setup.cassette.speeds)).value
    positions = calculate_cog_positions(setup.cassette.cogs, spacing, rear_center)

    if fallbacks:
        logger.debug("Chainline geometry used %d fallback lookup(s)", len(fallbacks))

    return ChainlineGeometry(
        front_chain_line_mm=front,
        rear_center_mm=rear_center,
        chainstay_length_mm=chainstay,
        cog_spacing_mm=spacing,
        cog_positions_mm=positions,
        bottom_bracket=bb_spec,
        fallbacks=fallbacks,
    )
