"""
Mechanical compatibility checks for drivetrain setups.
"""

from cranksmith.compatibility.engine import CompatibilityEngine, check_compatibility, implied_freehub

__all__ = ["CompatibilityEngine", "check_compatibility", "implied_freehub"]
