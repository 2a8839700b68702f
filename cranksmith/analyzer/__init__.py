"""
Whole-setup drivetrain analysis.
"""

from cranksmith.analyzer.drivetrain import (
    DrivetrainAnalyzer,
    analyze_drivetrain,
    find_duplicate_gears,
    suggest_gear_for_speed,
    usable_gear_range,
)

__all__ = [
    "DrivetrainAnalyzer",
    "analyze_drivetrain",
    "find_duplicate_gears",
    "suggest_gear_for_speed",
    "usable_gear_range",
]
