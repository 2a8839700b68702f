"""
Output models for drivetrain analysis.

These models define the structure of the per-gear numbers, the compatibility
report and the combined analysis returned by the engine.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from cranksmith.models.components import ComponentKind
from cranksmith.models.settings import SpeedUnit
from cranksmith.models.setup import DrivetrainSetup


class Severity(str, Enum):
    """Severity of a compatibility issue."""
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class SpeedAtCadence(BaseModel):
    """Road speed at the five reference cadences."""
    rpm60: float = Field(..., ge=0)
    rpm80: float = Field(..., ge=0)
    rpm90: float = Field(..., ge=0)
    rpm100: float = Field(..., ge=0)
    rpm120: float = Field(..., ge=0)


class GearCalculation(BaseModel):
    """
    Derived numbers for one chainring/cog combination.

    Chainlines are in mm from the frame centerline, the chain angle is in
    degrees and efficiency is a fraction.
    """
    chainring: int = Field(..., gt=0, description="Chainring teeth")
    cog: int = Field(..., gt=0, description="Cog teeth")
    front_index: int = Field(default=0, ge=0, description="Position of the ring in the setup")
    rear_index: int = Field(default=0, ge=0, description="Position of the cog on the cassette")
    gear_number: int = Field(default=1, ge=1, description="1-based position in traversal order")
    ratio: float = Field(..., gt=0)
    gear_inches: float = Field(..., gt=0)
    gain_ratio: float = Field(..., gt=0)
    gain_ratio_description: str = Field(default="", description="Riding the gain ratio suits")
    development_m: float = Field(..., gt=0, description="Distance per crank revolution")
    speed_at_cadence: SpeedAtCadence
    speed_unit: SpeedUnit = Field(default=SpeedUnit.KMH)
    chain_line_mm: float = Field(..., description="Front chainline")
    rear_chain_line_mm: float = Field(..., description="Chainline of this cog")
    cross_chain_angle_deg: float = Field(..., ge=0)
    efficiency: float = Field(..., ge=0.85, le=0.98)

    @property
    def label(self) -> str:
        """Short chainring x cog name, e.g. 50x11."""
        return f"{self.chainring}x{self.cog}"


class CompatibilityWarning(BaseModel):
    """One issue raised by a compatibility rule."""
    severity: Severity
    component: ComponentKind = Field(..., description="Component the issue refers to")
    issue: str
    suggestion: Optional[str] = Field(default=None, description="Suggested remedy")


class CompatibilityCheck(BaseModel):
    """
    Result of running every compatibility rule.

    `compatible` is False exactly when a critical warning is present.
    """
    compatible: bool
    warnings: list[CompatibilityWarning] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list, description="Technical notes about the setup")

    @model_validator(mode="after")
    def check_verdict(self) -> "CompatibilityCheck":
        """The verdict must agree with the warnings."""
        if self.compatible == self.has_critical:
            raise ValueError("compatible must be False exactly when a critical warning exists")
        return self

    @property
    def has_critical(self) -> bool:
        return any(w.severity == Severity.CRITICAL for w in self.warnings)

    @property
    def critical(self) -> list[CompatibilityWarning]:
        return self.by_severity(Severity.CRITICAL)

    def by_severity(self, severity: Severity) -> list[CompatibilityWarning]:
        """Warnings of one severity, in rule order."""
        return [w for w in self.warnings if w.severity == severity]


class ChainlineAnalysis(BaseModel):
    """
    Partition of gear indices by cross-chain angle, with advice.

    The ideal front chainline is the rear chainline of the cassette center;
    `offset_mm` is how far the actual front chainline sits from it.
    """
    straight_chain_gears: list[int] = Field(default_factory=list)
    cross_chain_gears: list[int] = Field(default_factory=list)
    avoid_gears: list[int] = Field(default_factory=list)
    ideal_front_chain_line_mm: Optional[float] = Field(default=None)
    offset_mm: Optional[float] = Field(default=None, ge=0)
    ideal_reasoning: str = Field(default="")
    warnings: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    optimizations: list[str] = Field(default_factory=list)


class DuplicateGearGroup(BaseModel):
    """Gears whose ratios fall within the duplicate tolerance of a primary gear."""
    primary: int = Field(..., ge=0, description="Index of the first gear of the group")
    duplicates: list[int] = Field(..., min_length=1)


class DrivetrainAnalysis(BaseModel):
    """
    Complete output of a drivetrain analysis.

    `gears` is in traversal order (rings as declared, then cogs as declared).
    Every index field refers to positions in `gears`.
    """
    setup: DrivetrainSetup
    compatibility: CompatibilityCheck
    gears: list[GearCalculation] = Field(..., min_length=1)
    total_gears: int = Field(..., ge=1)
    unique_ratios: int = Field(..., ge=1)
    gear_range: float = Field(..., ge=1, description="Highest ratio / lowest ratio")
    lowest_ratio: float = Field(..., gt=0)
    highest_ratio: float = Field(..., gt=0)
    average_step_pct: float = Field(..., ge=0)
    largest_gap_pct: float = Field(..., ge=0)
    recommended_gears: list[int] = Field(default_factory=list)
    chainline_analysis: ChainlineAnalysis
    duplicate_gears: list[DuplicateGearGroup] = Field(default_factory=list)
    lowest_usable_gear: Optional[int] = Field(
        default=None, description="Easiest gear above the usable efficiency"
    )
    highest_usable_gear: Optional[int] = Field(
        default=None, description="Hardest gear above the usable efficiency"
    )
    speed_unit: SpeedUnit = Field(default=SpeedUnit.KMH)

    @property
    def lowest_gear(self) -> GearCalculation:
        """Easiest gear (first in traversal order on ties)."""
        return min(self.gears, key=lambda g: g.ratio)

    @property
    def highest_gear(self) -> GearCalculation:
        """Hardest gear (first in traversal order on ties)."""
        return max(self.gears, key=lambda g: g.ratio)
