"""
Drivetrain analyzer.

Runs the compatibility engine and the gear calculator over every
chainring/cog combination of a setup and adds aggregate statistics:
distinct ratios, range, step sizes, a de-duplicated set of recommended
gears, duplicate ratio groups, the usable gear range and a straight /
cross-chain / avoid partition with chainline advice.

Gears are reported in traversal order (rings as declared, then cogs as
declared). Statistics work on an explicit (ratio, index) sort so that ties
always resolve to the earlier gear.
"""

import logging
import math
from typing import Optional

from cranksmith.compatibility.engine import CompatibilityEngine
from cranksmith.errors import InvalidInputError
from cranksmith.models.outputs import (
    ChainlineAnalysis,
    DrivetrainAnalysis,
    DuplicateGearGroup,
    GearCalculation,
)
from cranksmith.models.settings import AnalysisSettings, DEFAULT_SETTINGS
from cranksmith.models.setup import DrivetrainSetup, validate_setup
from cranksmith.physics.gearing import calculate_gear
from cranksmith.physics.geometry import (
    ChainlineGeometry,
    ideal_chain_line,
    resolve_chainline_geometry,
)
from cranksmith.reference.chainline import (
    CHAINLINE_WARNING_DEVIATION_MM,
    CROSS_CHAIN_MAX_DEG,
    DUPLICATE_RATIO_TOLERANCE,
    MIN_STRAIGHT_CHAIN_SHARE,
    OPTIMAL_EFFICIENCY,
    STRAIGHT_CHAIN_MAX_DEG,
    USABLE_EFFICIENCY,
)

logger = logging.getLogger(__name__)


def sort_by_ratio(gears: list[GearCalculation]) -> list[tuple[float, int]]:
    """(ratio, index) pairs in ascending ratio order, ties by index."""
    return sorted((g.ratio, i) for i, g in enumerate(gears))


def calculate_steps(ordered: list[tuple[float, int]]) -> list[float]:
    """Percentage step between each pair of adjacent sorted ratios."""
    return [
        (ordered[i + 1][0] / ordered[i][0] - 1) * 100
        for i in range(len(ordered) - 1)
    ]


def count_unique_ratios(gears: list[GearCalculation], decimals: int = 2) -> int:
    """Number of distinct ratios after rounding."""
    return len({round(g.ratio, decimals) for g in gears})


def select_recommended_gears(
    ordered: list[tuple[float, int]],
    min_step_pct: float = 5.0,
) -> list[int]:
    """
    Pick well-spaced gears from the ratio-sorted sequence.

    Walks up from the lowest ratio and keeps a gear only if it is at least
    `min_step_pct` above the last kept gear, dropping near-duplicates such
    as the overlap between two chainrings.

    Returns:
        Gear indices in ascending ratio order
    """
    selected: list[int] = []
    last_ratio = None
    for ratio, index in ordered:
        if last_ratio is None or (ratio / last_ratio - 1) * 100 >= min_step_pct:
            selected.append(index)
            last_ratio = ratio
    return selected


def classify_chainline(gears: list[GearCalculation]) -> ChainlineAnalysis:
    """Partition gear indices by cross-chain angle."""
    analysis = ChainlineAnalysis()
    for i, gear in enumerate(gears):
        angle = gear.cross_chain_angle_deg
        if angle <= STRAIGHT_CHAIN_MAX_DEG:
            analysis.straight_chain_gears.append(i)
        elif angle <= CROSS_CHAIN_MAX_DEG:
            analysis.cross_chain_gears.append(i)
        else:
            analysis.avoid_gears.append(i)
    return analysis


def chainline_advice(
    analysis: ChainlineAnalysis,
    gears: list[GearCalculation],
    geometry: ChainlineGeometry,
    speeds: int,
) -> ChainlineAnalysis:
    """
    Add ideal chainline, warnings and riding advice to a chainline partition.

    Args:
        analysis: Partition from classify_chainline()
        gears: Gears the partition indexes into
        geometry: Resolved chainline geometry of the setup
        speeds: Cassette speed count

    Returns:
        Copy of `analysis` with the advice fields filled in
    """
    ideal = ideal_chain_line(speeds, geometry.rear_center_mm)
    offset = abs(geometry.front_chain_line_mm - ideal.front_chain_line_mm)
    warnings: list[str] = []
    recommendations: list[str] = []
    optimizations: list[str] = []

    if offset > CHAINLINE_WARNING_DEVIATION_MM:
        warnings.append(f"Large chain line offset: {offset:.1f}mm")
        recommendations.append("Consider different bottom bracket or crankset")

    if len(analysis.straight_chain_gears) < len(gears) * MIN_STRAIGHT_CHAIN_SHARE:
        warnings.append("Limited usable gear range due to chain line issues")
        recommendations.append("Consider adjusting chain line or cassette choice")

    if analysis.straight_chain_gears:
        cogs = [gears[i].cog for i in analysis.straight_chain_gears]
        optimizations.append(f"Focus on {min(cogs)}T-{max(cogs)}T cogs for best efficiency")
    if analysis.avoid_gears:
        cogs = sorted({gears[i].cog for i in analysis.avoid_gears})
        optimizations.append(
            f"Avoid {', '.join(str(c) for c in cogs)}T cogs due to extreme chain line"
        )

    return analysis.model_copy(update={
        "ideal_front_chain_line_mm": ideal.front_chain_line_mm,
        "offset_mm": offset,
        "ideal_reasoning": ideal.reasoning,
        "warnings": warnings,
        "recommendations": recommendations,
        "optimizations": optimizations,
    })


def find_duplicate_gears(
    gears: list[GearCalculation],
    tolerance: float = DUPLICATE_RATIO_TOLERANCE,
) -> list[DuplicateGearGroup]:
    """
    Group gears whose ratios are within `tolerance` of each other.

    Walks the gears in traversal order. Each gear not yet grouped becomes the
    primary of a group holding every later ungrouped gear within tolerance
    of it. A gear belongs to at most one group.
    """
    groups: list[DuplicateGearGroup] = []
    grouped: set[int] = set()
    for i, gear in enumerate(gears):
        if i in grouped:
            continue
        duplicates = [
            j for j in range(i + 1, len(gears))
            if j not in grouped and abs(gears[j].ratio - gear.ratio) <= tolerance
        ]
        if duplicates:
            groups.append(DuplicateGearGroup(primary=i, duplicates=duplicates))
            grouped.update(duplicates)
        grouped.add(i)
    return groups


def usable_gear_range(gears: list[GearCalculation]) -> tuple[Optional[int], Optional[int]]:
    """
    Lowest and highest ratio gears that are still efficient enough to use.

    Returns:
        (lowest index, highest index), or (None, None) if no gear is usable
    """
    usable = [(g.ratio, i) for i, g in enumerate(gears) if g.efficiency > USABLE_EFFICIENCY]
    if not usable:
        return None, None
    usable.sort()
    lowest = usable[0][1]
    # Earliest gear among those sharing the highest ratio
    highest = min(i for r, i in usable if r == usable[-1][0])
    return lowest, highest


def cadence_field(cadence_rpm: float) -> str:
    """Nearest reference cadence column for an arbitrary cadence."""
    if cadence_rpm <= 65:
        return "rpm60"
    if cadence_rpm <= 85:
        return "rpm80"
    if cadence_rpm <= 95:
        return "rpm90"
    if cadence_rpm <= 110:
        return "rpm100"
    return "rpm120"


def suggest_gear_for_speed(
    gears: list[GearCalculation],
    target_speed: float,
    cadence_rpm: float = 90,
) -> Optional[int]:
    """
    Optimal-efficiency gear whose speed at the cadence is closest to a target.

    Args:
        gears: Gears in traversal order
        target_speed: Wanted speed, in the gears' speed unit
        cadence_rpm: Pedalling cadence, matched to the nearest reference cadence

    Returns:
        Index of the suggested gear, or None if no gear runs optimally

    Raises:
        InvalidInputError: If speed or cadence is not positive and finite
    """
    if not math.isfinite(target_speed) or target_speed <= 0:
        raise InvalidInputError(f"target speed must be positive and finite, got {target_speed}")
    if not math.isfinite(cadence_rpm) or cadence_rpm <= 0:
        raise InvalidInputError(f"cadence must be positive and finite, got {cadence_rpm}")

    column = cadence_field(cadence_rpm)
    best = None
    best_diff = math.inf
    for i, gear in enumerate(gears):
        if gear.efficiency <= OPTIMAL_EFFICIENCY:
            continue
        diff = abs(getattr(gear.speed_at_cadence, column) - target_speed)
        if diff < best_diff:
            best, best_diff = i, diff
    return best


class DrivetrainAnalyzer:
    """
    Full analysis of one drivetrain setup.

    The analysis is all-or-nothing: an invalid setup raises before any
    result is built.
    """

    def __init__(self, setup: DrivetrainSetup, settings: Optional[AnalysisSettings] = None):
        """
        Initialize analyzer with a setup.

        Args:
            setup: Drivetrain setup to analyze
            settings: Analysis settings (defaults when None)
        """
        self.setup = setup
        self.settings = settings or DEFAULT_SETTINGS

    def enumerate_gears(self, geometry: Optional[ChainlineGeometry] = None) -> list[GearCalculation]:
        """
        Compute every chainring/cog combination in traversal order.

        Args:
            geometry: Pre-resolved chainline geometry (resolved when None)

        Returns:
            List of GearCalculation, rings as declared then cogs as declared
        """
        setup = self.setup
        if geometry is None:
            geometry = resolve_chainline_geometry(setup)
        crank_length = setup.get_crank_length_mm(self.settings.default_crank_length_mm)

        gears = []
        for front_index, chainring in enumerate(setup.effective_chainrings):
            for rear_index, cog in enumerate(setup.cassette.cogs):
                gears.append(
                    calculate_gear(
                        chainring,
                        cog,
                        front_chain_line_mm=geometry.front_chain_line_mm,
                        rear_chain_line_mm=geometry.cog_positions_mm[rear_index],
                        chainstay_length_mm=geometry.chainstay_length_mm,
                        crank_length_mm=crank_length,
                        speed_unit=self.settings.speed_unit,
                        front_index=front_index,
                        rear_index=rear_index,
                        gear_number=len(gears) + 1,
                    )
                )
        return gears

    def analyze(self) -> DrivetrainAnalysis:
        """
        Run compatibility checks and gear calculations.

        Returns:
            DrivetrainAnalysis

        Raises:
            InvalidInputError: If the setup is malformed
        """
        validate_setup(self.setup)
        compatibility = CompatibilityEngine(self.setup).run()
        geometry = resolve_chainline_geometry(self.setup)
        gears = self.enumerate_gears(geometry)

        ordered = sort_by_ratio(gears)
        steps = calculate_steps(ordered)
        lowest, highest = ordered[0][0], ordered[-1][0]
        usable = usable_gear_range(gears)

        analysis = DrivetrainAnalysis(
            setup=self.setup,
            compatibility=compatibility,
            gears=gears,
            total_gears=len(gears),
            unique_ratios=count_unique_ratios(gears, self.settings.ratio_decimals),
            gear_range=highest / lowest,
            lowest_ratio=lowest,
            highest_ratio=highest,
            average_step_pct=sum(steps) / len(steps) if steps else 0.0,
            largest_gap_pct=max(steps) if steps else 0.0,
            recommended_gears=select_recommended_gears(
                ordered, self.settings.recommended_min_step_pct
            ),
            chainline_analysis=chainline_advice(
                classify_chainline(gears), gears, geometry, self.setup.cassette.speeds
            ),
            duplicate_gears=find_duplicate_gears(gears),
            lowest_usable_gear=usable[0],
            highest_usable_gear=usable[1],
            speed_unit=self.settings.speed_unit,
        )
        logger.debug(
            "Analyzed %d gears (%d unique, range %.0f%%)",
            analysis.total_gears,
            analysis.unique_ratios,
            analysis.gear_range * 100,
        )
        return analysis


def analyze_drivetrain(
    setup: DrivetrainSetup,
    settings: Optional[AnalysisSettings] = None,
) -> DrivetrainAnalysis:
    """
    Analyze a drivetrain setup.

    Args:
        setup: Drivetrain setup
        settings: Analysis settings (defaults when None)

    Returns:
        DrivetrainAnalysis with compatibility, per-gear numbers and aggregates

    Raises:
        InvalidInputError: If the setup is malformed
    """
    return DrivetrainAnalyzer(setup, settings).analyze()
