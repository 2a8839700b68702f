"""
Static reference tables for chainline geometry and component compatibility.
"""

from cranksmith.reference.tables import ReferenceTable, LookupResult
from cranksmith.reference.chainline import (
    BottomBracketSpec,
    CrossChainBand,
    STANDARD_CHAIN_LINES_MM,
    BOTTOM_BRACKETS,
    HUB_SPACING_CHAIN_LINES_MM,
    CASSETTE_COG_SPACING_MM,
    CHAINSTAY_LENGTHS_MM,
    CROSS_CHAIN_BANDS,
    cross_chain_band,
)
from cranksmith.reference.compatibility import (
    ChainWidth,
    CABLE_PULL_RATIOS_MM,
    CHAIN_WIDTHS,
    freehub_fit,
    brand_pairing,
)

__all__ = [
    "ReferenceTable",
    "LookupResult",
    "BottomBracketSpec",
    "CrossChainBand",
    "STANDARD_CHAIN_LINES_MM",
    "BOTTOM_BRACKETS",
    "HUB_SPACING_CHAIN_LINES_MM",
    "CASSETTE_COG_SPACING_MM",
    "CHAINSTAY_LENGTHS_MM",
    "CROSS_CHAIN_BANDS",
    "cross_chain_band",
    "ChainWidth",
    "CABLE_PULL_RATIOS_MM",
    "CHAIN_WIDTHS",
    "freehub_fit",
    "brand_pairing",
]
