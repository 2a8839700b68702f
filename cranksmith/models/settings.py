"""
Analysis settings.

Optional knobs for the analyzer. Defaults reproduce the reference behavior,
so callers only need a settings file to change units or aggregation limits.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Union

from pydantic import BaseModel, Field


class SpeedUnit(str, Enum):
    """Unit for speed-at-cadence values."""
    KMH = "km/h"
    MPH = "mph"


class AnalysisSettings(BaseModel):
    """Settings applied to a drivetrain analysis."""
    speed_unit: SpeedUnit = Field(
        default=SpeedUnit.KMH,
        description="Unit for speed-at-cadence values",
    )
    default_crank_length_mm: float = Field(
        default=172.5,
        gt=0,
        description="Crank length used for gain ratio when the setup does not give one",
    )
    ratio_decimals: int = Field(
        default=2,
        ge=0,
        le=6,
        description="Rounding used to count distinct ratios",
    )
    recommended_min_step_pct: float = Field(
        default=5.0,
        ge=0,
        description="Minimum step from the last recommended gear for a gear to be recommended",
    )

    model_config = {
        "frozen": True,
        "allow_inf_nan": False,
        "json_schema_extra": {
            "example": {
                "speed_unit": "km/h",
                "default_crank_length_mm": 172.5,
                "ratio_decimals": 2,
                "recommended_min_step_pct": 5.0,
            }
        },
    }


DEFAULT_SETTINGS = AnalysisSettings()


def load_settings(path: Union[str, Path]) -> AnalysisSettings:
    """
    Load analysis settings from a JSON file.

    Args:
        path: Path to a JSON object with AnalysisSettings fields

    Returns:
        Validated AnalysisSettings

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Settings file not found at {file_path}")

    with open(file_path, "r") as f:
        data = json.load(f)

    return AnalysisSettings(**data)
