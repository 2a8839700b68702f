"""
CrankSmith drivetrain analyzer (cranksmith)

Analyzes bicycle drivetrain setups: per-gear ratios, gear inches, gain
ratio, development, speed at cadence, cross-chain angle and efficiency,
plus a mechanical compatibility report (freehub, derailleur capacity,
chain, cable pull, chainline).

Usage:
    python -m cranksmith make-example
    python -m cranksmith analyze --input example_setup.json
    python -m cranksmith check --input example_setup.json
    python -m cranksmith serve --port 8000
"""

__version__ = "0.1.0"
__author__ = "CrankSmith"

from cranksmith.errors import CrankSmithError, InvalidInputError
from cranksmith.models.components import BikeType, Component
from cranksmith.models.settings import AnalysisSettings, SpeedUnit
from cranksmith.models.setup import DrivetrainSetup
from cranksmith.models.outputs import (
    CompatibilityCheck,
    CompatibilityWarning,
    DrivetrainAnalysis,
    GearCalculation,
    Severity,
)
from cranksmith.compatibility.engine import check_compatibility
from cranksmith.analyzer.drivetrain import analyze_drivetrain

__all__ = [
    "CrankSmithError",
    "InvalidInputError",
    "BikeType",
    "Component",
    "AnalysisSettings",
    "SpeedUnit",
    "DrivetrainSetup",
    "CompatibilityCheck",
    "CompatibilityWarning",
    "DrivetrainAnalysis",
    "GearCalculation",
    "Severity",
    "check_compatibility",
    "analyze_drivetrain",
]
