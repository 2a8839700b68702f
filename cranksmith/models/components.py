"""
Component models for drivetrain parts.

Components are immutable reference records supplied by the catalog. They form
a closed set of variants discriminated by `component_type`; code that needs to
treat them generically goes through component_kind() / component_label(),
which handle every variant and reject anything else.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator


class BikeType(str, Enum):
    """Bike category used for chainline and chainstay lookups."""
    ROAD = "road"
    MTB = "mtb"
    GRAVEL = "gravel"
    BMX = "bmx"
    HYBRID = "hybrid"


class CageLength(str, Enum):
    """Rear derailleur cage length class."""
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class ChainringPosition(str, Enum):
    """Where an aftermarket ring sits on the spider."""
    OUTER = "outer"
    MIDDLE = "middle"
    INNER = "inner"
    SINGLE = "single"


class ComponentKind(str, Enum):
    """Which part of the drivetrain an issue refers to."""
    CRANKSET = "crankset"
    CASSETTE = "cassette"
    CHAINRING = "chainring"
    REAR_DERAILLEUR = "rear_derailleur"
    FRONT_DERAILLEUR = "front_derailleur"
    CHAIN = "chain"
    DRIVETRAIN = "drivetrain"


def _check_teeth(values: list[int]) -> list[int]:
    if any(t <= 0 for t in values):
        raise ValueError("tooth counts must be positive")
    return values


class ComponentBase(BaseModel):
    """Attributes shared by every catalog component."""
    id: str = Field(..., description="Catalog identifier")
    manufacturer: str = Field(..., description="Manufacturer name")
    model: str = Field(..., description="Model name")
    year: Optional[int] = Field(default=None, ge=1950, description="Model year")
    weight_g: Optional[float] = Field(default=None, gt=0, description="Weight in grams")
    discontinued: bool = Field(default=False, description="No longer in production")
    msrp_usd: Optional[float] = Field(default=None, ge=0, description="List price in USD")
    bike_type: BikeType = Field(default=BikeType.ROAD, description="Intended bike category")

    model_config = {"frozen": True, "allow_inf_nan": False}

    @property
    def name(self) -> str:
        return f"{self.manufacturer} {self.model}"


class Crankset(ComponentBase):
    """Crankset with fixed chainrings."""
    component_type: Literal["crankset"] = "crankset"
    chainrings: list[int] = Field(
        ...,
        min_length=1,
        description="Chainring teeth in declared order (big to small by convention)",
    )
    chain_line_mm: float = Field(..., gt=0, description="Front chainline in mm")
    crank_lengths_mm: list[float] = Field(
        default_factory=lambda: [172.5],
        description="Available crank arm lengths in mm",
    )
    bcd_major_mm: float = Field(..., gt=0, description="Bolt circle diameter in mm")
    bcd_minor_mm: Optional[float] = Field(default=None, gt=0, description="Inner ring BCD in mm")
    bottom_brackets: list[str] = Field(
        default_factory=list,
        description="Supported bottom bracket standards",
    )
    max_chainring_size: Optional[int] = Field(default=None, gt=0)
    min_chainring_size: Optional[int] = Field(default=None, gt=0)

    @field_validator("chainrings")
    @classmethod
    def validate_chainrings(cls, v: list[int]) -> list[int]:
        """Chainrings must have positive tooth counts."""
        return _check_teeth(v)


class Cassette(ComponentBase):
    """Rear cassette."""
    component_type: Literal["cassette"] = "cassette"
    speeds: int = Field(..., gt=0, description="Number of cogs / speed count")
    cogs: list[int] = Field(..., min_length=1, description="Cog teeth in declared order")
    freehub_type: str = Field(..., description="Freehub spline standard, e.g. 'sram-xd'")

    @field_validator("cogs")
    @classmethod
    def validate_cogs(cls, v: list[int]) -> list[int]:
        """Cogs must have positive tooth counts."""
        return _check_teeth(v)

    @property
    def cog_range(self) -> tuple[int, int]:
        """Smallest and largest cog."""
        return (min(self.cogs), max(self.cogs))


class ChainRing(ComponentBase):
    """Aftermarket chainring."""
    component_type: Literal["chainring"] = "chainring"
    teeth: int = Field(..., gt=0, description="Tooth count")
    bcd_mm: float = Field(..., gt=0, description="Bolt circle diameter in mm")
    position: Optional[ChainringPosition] = Field(default=None)


class RearDerailleur(ComponentBase):
    """Rear derailleur."""
    component_type: Literal["rear_derailleur"] = "rear_derailleur"
    speeds: int = Field(..., gt=0)
    max_cog_size: int = Field(..., gt=0, description="Largest cog the derailleur can clear")
    total_capacity: int = Field(..., ge=0, description="Front difference + rear range it can wrap")
    cage_length: CageLength = Field(default=CageLength.MEDIUM)
    cable_pull_mm: float = Field(..., ge=0, description="Cable pull per click in mm (0 for wireless)")
    brand: str = Field(..., description="Shifting system brand")

    @property
    def is_wireless(self) -> bool:
        return self.cable_pull_mm == 0


class FrontDerailleur(ComponentBase):
    """Front derailleur."""
    component_type: Literal["front_derailleur"] = "front_derailleur"
    speeds: int = Field(..., gt=0)
    max_chainring_size: int = Field(..., gt=0)
    max_chainring_diff: int = Field(..., gt=0, description="Largest supported ring difference")
    cable_pull_mm: float = Field(default=0.0, ge=0)
    brand: str = Field(...)


class Chain(ComponentBase):
    """Chain."""
    component_type: Literal["chain"] = "chain"
    speeds: int = Field(..., gt=0)
    internal_width_mm: float = Field(..., gt=0)
    links: int = Field(..., gt=0)
    brand: str = Field(...)


Component = Annotated[
    Union[Crankset, Cassette, ChainRing, RearDerailleur, FrontDerailleur, Chain],
    Field(discriminator="component_type"),
]

component_adapter = TypeAdapter(Component)
component_list_adapter = TypeAdapter(list[Component])


def component_kind(component: ComponentBase) -> ComponentKind:
    """
    Map a component to its kind.

    Raises:
        TypeError: For objects that are not one of the component variants
    """
    if isinstance(component, Crankset):
        return ComponentKind.CRANKSET
    if isinstance(component, Cassette):
        return ComponentKind.CASSETTE
    if isinstance(component, ChainRing):
        return ComponentKind.CHAINRING
    if isinstance(component, RearDerailleur):
        return ComponentKind.REAR_DERAILLEUR
    if isinstance(component, FrontDerailleur):
        return ComponentKind.FRONT_DERAILLEUR
    if isinstance(component, Chain):
        return ComponentKind.CHAIN
    raise TypeError(f"Unknown component type: {type(component).__name__}")


def component_label(component: ComponentBase) -> str:
    """Short display label with the defining numbers of each variant."""
    if isinstance(component, Crankset):
        rings = "/".join(str(t) for t in component.chainrings)
        return f"{component.name} ({rings}T)"
    if isinstance(component, Cassette):
        low, high = component.cog_range
        return f"{component.name} ({low}-{high}T, {component.speeds}-speed)"
    if isinstance(component, ChainRing):
        return f"{component.name} ({component.teeth}T)"
    if isinstance(component, RearDerailleur):
        return f"{component.name} (max {component.max_cog_size}T, {component.total_capacity}T capacity)"
    if isinstance(component, FrontDerailleur):
        return f"{component.name} (max {component.max_chainring_size}T)"
    if isinstance(component, Chain):
        return f"{component.name} ({component.speeds}-speed)"
    raise TypeError(f"Unknown component type: {type(component).__name__}")
