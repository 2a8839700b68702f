"""
FastAPI server for the drivetrain analyzer.

Thin REST wrapper around check_compatibility() and analyze_drivetrain(),
plus reference endpoints for the seed catalog and bike types.
"""

from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from cranksmith import __version__
from cranksmith.analyzer.drivetrain import analyze_drivetrain, suggest_gear_for_speed
from cranksmith.catalog.loader import components_of, example_setup, load_components
from cranksmith.compatibility.engine import check_compatibility
from cranksmith.models.components import BikeType, Component, ComponentKind
from cranksmith.models.outputs import CompatibilityCheck, DrivetrainAnalysis, GearCalculation
from cranksmith.models.settings import AnalysisSettings, SpeedUnit
from cranksmith.models.setup import DrivetrainSetup
from cranksmith.physics.geometry import calculate_ideal_chain_line
from cranksmith.reference.chainline import CHAINSTAY_LENGTHS_MM, STANDARD_CHAIN_LINES_MM

# Create FastAPI app
app = FastAPI(
    title="CrankSmith API",
    description="""
    Bicycle drivetrain analyzer.

    Computes per-gear ratios, speeds, chain angles and efficiency, and checks
    drivetrain setups for mechanical compatibility.
    """,
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str


class SuggestedGearResponse(BaseModel):
    """Gear suggested for a target speed."""
    index: Optional[int] = None
    label: Optional[str] = None
    gear: Optional[GearCalculation] = None


class IdealChainLineResponse(BaseModel):
    """Ideal front chainline for a cassette and hub."""
    front_chain_line_mm: float
    reasoning: str


@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """Check if the API is running."""
    return HealthResponse(status="healthy", version=__version__)


@app.get("/example", response_model=DrivetrainSetup, tags=["Reference"])
async def get_example():
    """Get an example setup built from the seed catalog."""
    return example_setup()


@app.post("/compatibility", response_model=CompatibilityCheck, tags=["Analysis"])
async def compatibility(setup: DrivetrainSetup):
    """
    Check a drivetrain setup for mechanical compatibility.

    The setup is compatible when no critical issue is reported.
    """
    try:
        return check_compatibility(setup)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@app.post("/analyze", response_model=DrivetrainAnalysis, tags=["Analysis"])
async def analyze(
    setup: DrivetrainSetup,
    speed_unit: SpeedUnit = Query(default=SpeedUnit.KMH, description="Unit for speed at cadence"),
):
    """
    Analyze every chainring/cog combination of a setup.

    Returns per-gear numbers, aggregate statistics and the compatibility report.
    """
    try:
        return analyze_drivetrain(setup, AnalysisSettings(speed_unit=speed_unit))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@app.post("/suggest-gear", response_model=SuggestedGearResponse, tags=["Analysis"])
async def suggest_gear(
    setup: DrivetrainSetup,
    target_speed: float = Query(..., gt=0, description="Target speed in speed_unit"),
    cadence: float = Query(default=90.0, gt=0, description="Cadence in rpm"),
    speed_unit: SpeedUnit = Query(default=SpeedUnit.KMH, description="Unit of target_speed"),
):
    """
    Suggest the most efficient gear for a speed at a cadence.

    Only gears running a near-straight chain are considered; all fields are
    null when there is none.
    """
    try:
        analysis = analyze_drivetrain(setup, AnalysisSettings(speed_unit=speed_unit))
        index = suggest_gear_for_speed(analysis.gears, target_speed, cadence)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if index is None:
        return SuggestedGearResponse()
    gear = analysis.gears[index]
    return SuggestedGearResponse(index=index, label=gear.label, gear=gear)


@app.get("/ideal-chainline", response_model=IdealChainLineResponse, tags=["Reference"])
async def ideal_chainline(
    speeds: int = Query(..., gt=0, description="Cassette speed count"),
    hub_spacing_mm: float = Query(default=130, gt=0, description="Rear hub spacing"),
):
    """Ideal front chainline for a cassette on a hub."""
    ideal = calculate_ideal_chain_line(speeds, hub_spacing_mm)
    return IdealChainLineResponse(
        front_chain_line_mm=ideal.front_chain_line_mm,
        reasoning=ideal.reasoning,
    )


@app.get("/bike-types", tags=["Reference"])
async def list_bike_types():
    """Get list of supported bike types with their reference geometry."""
    return {
        "bike_types": [bt.value for bt in BikeType],
        "standard_chain_line_mm": {
            bt.value: STANDARD_CHAIN_LINES_MM.value(bt) for bt in BikeType
        },
        "chainstay_length_mm": {
            bt.value: CHAINSTAY_LENGTHS_MM.value(bt) for bt in BikeType
        },
    }


@app.get("/catalog", response_model=list[Component], tags=["Reference"])
async def catalog(
    kind: Optional[ComponentKind] = Query(default=None, description="Only list one kind of component"),
):
    """List components in the seed catalog."""
    try:
        components = load_components()
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    if kind is not None:
        components = components_of(kind, components)
    return components
