"""
Seed catalog of reference components.

Provides loading of the packaged components.json and helpers to look up
components and assemble setups from catalog ids.
"""

from cranksmith.catalog.loader import (
    catalog_exists,
    load_components,
    get_component,
    components_of,
    build_setup,
    example_setup,
)

__all__ = [
    "catalog_exists",
    "load_components",
    "get_component",
    "components_of",
    "build_setup",
    "example_setup",
]
