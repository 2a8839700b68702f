"""
Pydantic models for drivetrain components, setups, settings and results.
"""

from cranksmith.models.components import (
    BikeType,
    CageLength,
    ChainringPosition,
    ComponentKind,
    Crankset,
    Cassette,
    ChainRing,
    RearDerailleur,
    FrontDerailleur,
    Chain,
    Component,
    component_kind,
    component_label,
)
from cranksmith.models.settings import AnalysisSettings, SpeedUnit, load_settings
from cranksmith.models.setup import DrivetrainSetup, validate_setup
from cranksmith.models.outputs import (
    Severity,
    SpeedAtCadence,
    GearCalculation,
    CompatibilityWarning,
    CompatibilityCheck,
    ChainlineAnalysis,
    DuplicateGearGroup,
    DrivetrainAnalysis,
)

__all__ = [
    "BikeType",
    "CageLength",
    "ChainringPosition",
    "ComponentKind",
    "Crankset",
    "Cassette",
    "ChainRing",
    "RearDerailleur",
    "FrontDerailleur",
    "Chain",
    "Component",
    "component_kind",
    "component_label",
    "AnalysisSettings",
    "SpeedUnit",
    "load_settings",
    "DrivetrainSetup",
    "validate_setup",
    "Severity",
    "SpeedAtCadence",
    "GearCalculation",
    "CompatibilityWarning",
    "CompatibilityCheck",
    "ChainlineAnalysis",
    "DuplicateGearGroup",
    "DrivetrainAnalysis",
]
