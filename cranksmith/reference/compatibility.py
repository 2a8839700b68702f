"""
Mechanical compatibility reference data.

Cable pull ratios, chain widths, freehub acceptance and brand pairings
taken from publicly available service manuals.
"""

from dataclasses import dataclass
from typing import Optional

from cranksmith.reference.tables import ReferenceTable


@dataclass(frozen=True)
class ChainWidth:
    """Nominal chain dimensions for a speed count (mm)."""
    internal_mm: float
    external_mm: float


# Cable pull per shift click (mm), keyed by (brand, "<family>_<speeds>")
CABLE_PULL_RATIOS_MM = ReferenceTable(
    "cable pull ratio",
    {
        ("shimano", "road_11"): 3.4,
        ("shimano", "road_12"): 3.4,
        ("shimano", "mtb_11"): 3.8,
        ("shimano", "mtb_12"): 3.8,
        ("sram", "road_11"): 3.8,
        ("sram", "road_12"): 3.8,
        ("sram", "mtb_11"): 3.8,
        ("sram", "mtb_12"): 3.8,
        ("sram", "axs"): 0.0,
        ("campagnolo", "road_11"): 3.2,
        ("campagnolo", "road_13"): 3.2,
    },
    default_key=("shimano", "road_11"),
)

CHAIN_WIDTHS = ReferenceTable(
    "chain width",
    {
        8: ChainWidth(7.3, 7.8),
        9: ChainWidth(6.7, 7.3),
        10: ChainWidth(5.9, 6.5),
        11: ChainWidth(5.5, 6.2),
        12: ChainWidth(5.25, 6.0),
        13: ChainWidth(5.25, 6.0),
    },
    default_key=11,
)

CHAIN_WIDTH_TOLERANCE_MM = 0.2

CAPACITY_SAFETY_MARGIN = 2

# Shifter and derailleur pulls closer than this are treated as equal
CABLE_PULL_MATCH_TOLERANCE_MM = 0.05

FREEHUB_NAMES = {
    "shimano-11": "Shimano HG 11-speed",
    "shimano-12": "Shimano Micro Spline",
    "sram-xdr": "SRAM XDR",
    "sram-xd": "SRAM XD",
    "campagnolo-11": "Campagnolo 11-speed",
    "campagnolo-13": "Campagnolo 13-speed",
    "standard-8-10": "Standard 8-10 speed HG",
}

# Wheel freehub -> cassette freehubs it accepts besides its own, with the fitting note
FREEHUB_SUBSETS = {
    "sram-xdr": {"sram-xd": "XD cassette on an XDR freehub needs the 1.85mm spacer"},
    "shimano-11": {"standard-8-10": "8-10 speed cassette on an 11-speed HG freehub needs the 1.85mm spacer"},
}

PARTIAL_BRAND_COMPATIBILITY = {
    frozenset({"shimano", "sram"}): "Cable pull may differ, check shifter compatibility",
}


def freehub_fit(wheel_freehub: str, cassette_freehub: str) -> tuple[bool, Optional[str]]:
    """
    Check whether a cassette mounts on a wheel's freehub body.

    Returns:
        Tuple of (fits, fitting_note). The note is set for documented
        subset fits that need a spacer.
    """
    if wheel_freehub == cassette_freehub:
        return True, None
    note = FREEHUB_SUBSETS.get(wheel_freehub, {}).get(cassette_freehub)
    if note is not None:
        return True, note
    return False, None


def brand_pairing(brand_a: str, brand_b: str) -> Optional[str]:
    """Return the partial-compatibility note for a cross-brand pair, if documented."""
    return PARTIAL_BRAND_COMPATIBILITY.get(frozenset({brand_a.lower(), brand_b.lower()}))


def cable_pull_key(speeds: int, bike_type: str) -> str:
    """Key into the cable pull table for a shifter family."""
    family = "mtb" if bike_type == "mtb" else "road"
    return f"{family}_{speeds}"
