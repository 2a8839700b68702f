"""
Component catalog loader.

Loads reference components from a JSON list. The packaged seed catalog
(cranksmith/data/components.json) is used unless a path is given.
"""

import json
import importlib.resources as resources
from pathlib import Path
from typing import Optional

from cranksmith.models.components import (
    Component,
    ComponentKind,
    component_kind,
    component_list_adapter,
)
from cranksmith.models.setup import DrivetrainSetup

DEFAULT_CATALOG_NAME = "components.json"

# Seed components used for the example setup
EXAMPLE_SETUP_IDS = {
    "crankset": "shimano-105-r7000-50-34",
    "cassette": "shimano-105-r7000-11-32",
    "chain": "shimano-105-cn-hg601-11",
    "rear_derailleur": "shimano-105-r7000-gs",
    "front_derailleur": "shimano-105-r7000-fd",
}


def _resource_path(filename: str) -> Optional[Path]:
    """
    Resolve a packaged data file inside cranksmith/data.

    Returns a filesystem path or None if the resource is unavailable.
    """
    resource = resources.files("cranksmith").joinpath("data").joinpath(filename)
    if resource.is_file():
        with resources.as_file(resource) as tmp_path:
            return Path(tmp_path)
    return None


def _resolve_catalog_file(path: Optional[str]) -> Path:
    """Find the catalog file, preferring an explicit path."""
    if path:
        return Path(path)
    pkg_path = _resource_path(DEFAULT_CATALOG_NAME)
    if pkg_path:
        return pkg_path
    return Path.cwd() / "data" / DEFAULT_CATALOG_NAME


def catalog_exists(path: Optional[str] = None) -> bool:
    """Check if the catalog JSON file exists."""
    return _resolve_catalog_file(path).exists()


def load_components(path: Optional[str] = None) -> list[Component]:
    """
    Load components from a JSON file.

    Args:
        path: Path to JSON file. If None, uses the packaged seed catalog.

    Returns:
        List of Component variants

    Raises:
        FileNotFoundError: If catalog file doesn't exist
        pydantic.ValidationError: If an entry is not a valid component
    """
    file_path = _resolve_catalog_file(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Component catalog not found at {file_path}")

    with open(file_path, "r") as f:
        data = json.load(f)

    return component_list_adapter.validate_python(data)


def get_component(
    component_id: str,
    components: Optional[list[Component]] = None,
) -> Optional[Component]:
    """Find a component by id, or None."""
    if components is None:
        components = load_components()
    for component in components:
        if component.id == component_id:
            return component
    return None


def components_of(
    kind: ComponentKind,
    components: Optional[list[Component]] = None,
) -> list[Component]:
    """All components of one kind, in catalog order."""
    if components is None:
        components = load_components()
    return [c for c in components if component_kind(c) == kind]


def build_setup(
    crankset: str,
    cassette: str,
    chain: str,
    rear_derailleur: str,
    front_derailleur: Optional[str] = None,
    components: Optional[list[Component]] = None,
    **overrides,
) -> DrivetrainSetup:
    """
    Assemble a setup from catalog ids.

    Args:
        crankset, cassette, chain, rear_derailleur, front_derailleur: Component ids
        components: Catalog to search (packaged seed catalog when None)
        **overrides: Extra DrivetrainSetup fields (bike_type, shifter_brand, ...)

    Returns:
        DrivetrainSetup

    Raises:
        KeyError: If an id is not in the catalog
    """
    if components is None:
        components = load_components()

    ids = {
        "crankset": crankset,
        "cassette": cassette,
        "chain": chain,
        "rear_derailleur": rear_derailleur,
        "front_derailleur": front_derailleur,
    }
    parts = {}
    for field_name, component_id in ids.items():
        if component_id is None:
            continue
        component = get_component(component_id, components)
        if component is None:
            raise KeyError(f"Unknown component id: {component_id}")
        parts[field_name] = component

    overrides.setdefault("bike_type", parts["crankset"].bike_type)
    return DrivetrainSetup(**parts, **overrides)


def example_setup() -> DrivetrainSetup:
    """Shimano 105 2x11 road setup from the seed catalog."""
    return build_setup(**EXAMPLE_SETUP_IDS)
