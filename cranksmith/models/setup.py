"""
Drivetrain setup model.

A setup is one crankset, cassette, chain and rear derailleur, plus an
optional front derailleur and optional overrides. Without a front derailleur
only the first declared chainring is ridden.
"""

import math
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from cranksmith.errors import InvalidInputError
from cranksmith.models.components import (
    BikeType,
    Cassette,
    Chain,
    ChainRing,
    Crankset,
    FrontDerailleur,
    RearDerailleur,
)


class DrivetrainSetup(BaseModel):
    """
    A complete drivetrain to analyze.

    Overrides default to the values implied by the components: matched
    shifters, a wheel freehub implied by the rear derailleur, the crankset's
    own chainrings and the bike type's standard rear chainline.
    """
    crankset: Crankset
    cassette: Cassette
    chain: Chain
    rear_derailleur: RearDerailleur
    front_derailleur: Optional[FrontDerailleur] = Field(
        default=None,
        description="Front derailleur. Absent means a single-ring setup",
    )
    chainrings: Optional[list[ChainRing]] = Field(
        default=None,
        min_length=1,
        description="Aftermarket chainrings replacing the crankset's fixed rings",
    )
    bottom_bracket: Optional[str] = Field(
        default=None,
        description="Bottom bracket standard override, e.g. 'BB86'",
    )
    bike_type: BikeType = Field(default=BikeType.ROAD)

    shifter_brand: Optional[str] = Field(
        default=None,
        description="Shifter brand. Defaults to the rear derailleur's brand",
    )
    wheel_freehub: Optional[str] = Field(
        default=None,
        description="Freehub body on the rear wheel. Defaults to the one implied by the derailleur",
    )
    hub_spacing_mm: Optional[float] = Field(
        default=None,
        gt=0,
        description="Rear hub spacing in mm, used for the rear chainline",
    )
    crank_length_mm: Optional[float] = Field(
        default=None,
        gt=0,
        description="Crank arm length in mm",
    )

    model_config = {"frozen": True, "allow_inf_nan": False}

    @model_validator(mode="after")
    def check_front_derailleur(self) -> "DrivetrainSetup":
        """A front derailleur needs at least two rings to shift between."""
        if self.front_derailleur is not None and len(self.declared_chainrings) < 2:
            raise ValueError("a front derailleur requires at least two chainrings")
        return self

    @property
    def declared_chainrings(self) -> list[int]:
        """Ring teeth in declared order, aftermarket rings taking precedence."""
        if self.chainrings:
            return [ring.teeth for ring in self.chainrings]
        return list(self.crankset.chainrings)

    @property
    def effective_chainrings(self) -> list[int]:
        """Rings actually used for gear combinations."""
        rings = self.declared_chainrings
        if self.front_derailleur is None:
            return rings[:1]
        return rings

    @property
    def is_single_ring(self) -> bool:
        return len(self.effective_chainrings) == 1

    def get_shifter_brand(self) -> str:
        """Shifter brand, defaulting to matched shifters."""
        return self.shifter_brand if self.shifter_brand else self.rear_derailleur.brand

    def get_crank_length_mm(self, default: float = 172.5) -> float:
        """Crank length, falling back to the given default."""
        return self.crank_length_mm if self.crank_length_mm is not None else default


def validate_setup(setup: DrivetrainSetup) -> None:
    """
    Check that a setup can be analyzed.

    Pydantic enforces most of this at construction; this re-checks setups
    built without validation (e.g. model_construct) before any numbers are
    computed.

    Raises:
        InvalidInputError: On a missing component, non-positive tooth count,
            non-positive or non-finite dimension, or a front derailleur with
            a single ring
    """
    required = {
        "crankset": Crankset,
        "cassette": Cassette,
        "chain": Chain,
        "rear_derailleur": RearDerailleur,
    }
    for attr, expected in required.items():
        if not isinstance(getattr(setup, attr, None), expected):
            raise InvalidInputError(f"setup is missing a {attr.replace('_', ' ')}")

    rings = setup.declared_chainrings
    if not rings:
        raise InvalidInputError("setup has no chainrings")
    if any(t <= 0 for t in rings):
        raise InvalidInputError(f"chainring teeth must be positive, got {rings}")
    if not setup.cassette.cogs:
        raise InvalidInputError("cassette has no cogs")
    if any(t <= 0 for t in setup.cassette.cogs):
        raise InvalidInputError(f"cog teeth must be positive, got {setup.cassette.cogs}")
    if setup.front_derailleur is not None and len(rings) < 2:
        raise InvalidInputError("a front derailleur requires at least two chainrings")

    dimensions = {
        "crankset chainline": setup.crankset.chain_line_mm,
        "crank length": setup.crank_length_mm,
        "hub spacing": setup.hub_spacing_mm,
        "chain internal width": setup.chain.internal_width_mm,
    }
    for label, value in dimensions.items():
        if value is None:
            continue
        if not math.isfinite(value) or value <= 0:
            raise InvalidInputError(f"{label} must be positive and finite, got {value}")
