"""
Pytest configuration and shared fixtures.
"""

import pytest

from cranksmith.models.components import (
    BikeType,
    CageLength,
    Cassette,
    Chain,
    Crankset,
    FrontDerailleur,
    RearDerailleur,
)
from cranksmith.models.setup import DrivetrainSetup


@pytest.fixture
def road_crankset() -> Crankset:
    """Shimano 105 50/34 compact crankset."""
    return Crankset(
        id="shimano-105-r7000-50-34",
        manufacturer="Shimano",
        model="105 R7000",
        bike_type=BikeType.ROAD,
        chainrings=[50, 34],
        chain_line_mm=43.5,
        crank_lengths_mm=[165, 170, 172.5, 175],
        bcd_major_mm=110,
        bcd_minor_mm=110,
        bottom_brackets=["BSA", "BB86"],
        max_chainring_size=53,
        min_chainring_size=34,
    )


@pytest.fixture
def road_cassette() -> Cassette:
    """Shimano 105 11-32 11-speed cassette."""
    return Cassette(
        id="shimano-105-r7000-11-32",
        manufacturer="Shimano",
        model="105 R7000",
        speeds=11,
        cogs=[11, 12, 13, 14, 16, 18, 20, 22, 25, 28, 32],
        freehub_type="shimano-11",
    )


@pytest.fixture
def road_chain() -> Chain:
    """Shimano 11-speed chain."""
    return Chain(
        id="shimano-105-cn-hg601-11",
        manufacturer="Shimano",
        model="CN-HG601-11",
        speeds=11,
        internal_width_mm=5.5,
        links=118,
        brand="shimano",
    )


@pytest.fixture
def road_derailleur() -> RearDerailleur:
    """Shimano 105 GS rear derailleur (34T max, 39T capacity)."""
    return RearDerailleur(
        id="shimano-105-r7000-gs",
        manufacturer="Shimano",
        model="105 R7000 GS",
        speeds=11,
        max_cog_size=34,
        total_capacity=39,
        cage_length=CageLength.MEDIUM,
        cable_pull_mm=3.4,
        brand="shimano",
    )


@pytest.fixture
def road_front_derailleur() -> FrontDerailleur:
    """Shimano 105 front derailleur."""
    return FrontDerailleur(
        id="shimano-105-r7000-fd",
        manufacturer="Shimano",
        model="105 FD-R7000",
        speeds=11,
        max_chainring_size=53,
        max_chainring_diff=16,
        cable_pull_mm=3.4,
        brand="shimano",
    )


@pytest.fixture
def road_setup(
    road_crankset, road_cassette, road_chain, road_derailleur, road_front_derailleur
) -> DrivetrainSetup:
    """Matched Shimano 105 2x11 road setup."""
    return DrivetrainSetup(
        crankset=road_crankset,
        cassette=road_cassette,
        chain=road_chain,
        rear_derailleur=road_derailleur,
        front_derailleur=road_front_derailleur,
        bike_type=BikeType.ROAD,
    )


@pytest.fixture
def eagle_crankset() -> Crankset:
    """SRAM GX Eagle 32T crankset."""
    return Crankset(
        id="sram-gx-eagle-32t",
        manufacturer="SRAM",
        model="GX Eagle",
        bike_type=BikeType.MTB,
        chainrings=[32],
        chain_line_mm=52,
        crank_lengths_mm=[165, 170, 175],
        bcd_major_mm=104,
        bottom_brackets=["BSA", "BB92", "BB30"],
    )


@pytest.fixture
def eagle_cassette() -> Cassette:
    """SRAM GX Eagle 10-52 XD cassette."""
    return Cassette(
        id="sram-gx-eagle-xg-1275-10-52",
        manufacturer="SRAM",
        model="GX Eagle XG-1275",
        bike_type=BikeType.MTB,
        speeds=12,
        cogs=[10, 12, 14, 16, 18, 21, 24, 28, 32, 36, 42, 52],
        freehub_type="sram-xd",
    )


@pytest.fixture
def eagle_chain() -> Chain:
    """SRAM GX Eagle 12-speed chain."""
    return Chain(
        id="sram-gx-eagle-12",
        manufacturer="SRAM",
        model="GX Eagle",
        bike_type=BikeType.MTB,
        speeds=12,
        internal_width_mm=5.25,
        links=126,
        brand="sram",
    )


@pytest.fixture
def eagle_derailleur() -> RearDerailleur:
    """SRAM GX Eagle rear derailleur (52T max, 42T capacity)."""
    return RearDerailleur(
        id="sram-gx-eagle",
        manufacturer="SRAM",
        model="GX Eagle",
        bike_type=BikeType.MTB,
        speeds=12,
        max_cog_size=52,
        total_capacity=42,
        cage_length=CageLength.LONG,
        cable_pull_mm=3.8,
        brand="sram",
    )


@pytest.fixture
def eagle_setup(eagle_crankset, eagle_cassette, eagle_chain, eagle_derailleur) -> DrivetrainSetup:
    """SRAM GX Eagle 1x12 mountain bike setup."""
    return DrivetrainSetup(
        crankset=eagle_crankset,
        cassette=eagle_cassette,
        chain=eagle_chain,
        rear_derailleur=eagle_derailleur,
        bike_type=BikeType.MTB,
    )
