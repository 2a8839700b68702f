"""
Helpers to turn JSON analysis outputs into a compact, human-readable
console summary. Useful for quickly scanning analysis.json files.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

SEVERITY_MARKERS = {"critical": "X", "warning": "!", "info": "i"}


def _fmt_float(value: Any, unit: str = "", digits: int = 2) -> str:
    """Safely format a float with optional unit suffix."""
    try:
        fval = float(value)
    except (TypeError, ValueError):
        return "n/a"
    suffix = f" {unit}" if unit else ""
    return f"{fval:.{digits}f}{suffix}"


def _component_name(component: dict[str, Any] | None) -> str:
    if not component:
        return "-"
    return f"{component.get('manufacturer', '?')} {component.get('model', '?')}"


def print_compatibility(check: dict[str, Any]) -> None:
    """Render a compatibility report."""
    verdict = "COMPATIBLE" if check.get("compatible") else "NOT COMPATIBLE"
    warnings = check.get("warnings") or []
    print(f"Compatibility: {verdict} ({len(warnings)} issue(s))")
    for w in warnings:
        marker = SEVERITY_MARKERS.get(w.get("severity"), "?")
        print(f"  [{marker}] {w.get('component', '?')}: {w.get('issue', '')}")
        if w.get("suggestion"):
            print(f"        -> {w['suggestion']}")
    notes = check.get("notes") or []
    if notes:
        print("  Notes:")
        for note in notes:
            print(f"    - {note}")


def _gear_name(gears: list[dict[str, Any]], index: Any) -> str:
    if not isinstance(index, int) or not 0 <= index < len(gears):
        return "-"
    g = gears[index]
    return f"{g.get('chainring', '?')}x{g.get('cog', '?')}"


def print_chainline(chainline: dict[str, Any]) -> None:
    """Render chainline advice."""
    ideal = chainline.get("ideal_front_chain_line_mm")
    if ideal is not None:
        print(
            f"Chainline: ideal front {_fmt_float(ideal, 'mm', 1)}, "
            f"offset {_fmt_float(chainline.get('offset_mm'), 'mm', 1)}"
        )
    for warning in chainline.get("warnings") or []:
        print(f"  [!] {warning}")
    for text in (chainline.get("recommendations") or []) + (chainline.get("optimizations") or []):
        print(f"    - {text}")


def print_readable_analysis(data: dict[str, Any], max_gears: int | None = None) -> None:
    """
    Print a human-friendly summary of an analysis dict.

    Args:
        data: DrivetrainAnalysis as a JSON-compatible dict
        max_gears: Limit on gear table rows (all when None)
    """
    setup = data.get("setup", {})
    unit = data.get("speed_unit", "km/h")
    print(f"Bike type: {setup.get('bike_type', '?')}")
    print(f"Crankset: {_component_name(setup.get('crankset'))}")
    print(f"Cassette: {_component_name(setup.get('cassette'))}")
    print(f"Rear derailleur: {_component_name(setup.get('rear_derailleur'))}")
    if setup.get("front_derailleur"):
        print(f"Front derailleur: {_component_name(setup.get('front_derailleur'))}")
    print(
        f"Gears: {data.get('total_gears', 0)} total, {data.get('unique_ratios', 0)} unique | "
        f"range {_fmt_float((data.get('gear_range') or 0) * 100, '%', 0)} | "
        f"avg step {_fmt_float(data.get('average_step_pct'), '%', 1)} | "
        f"largest gap {_fmt_float(data.get('largest_gap_pct'), '%', 1)}"
    )

    gears = data.get("gears") or []
    print(
        f"Usable range: {_gear_name(gears, data.get('lowest_usable_gear'))} to "
        f"{_gear_name(gears, data.get('highest_usable_gear'))}"
    )
    for group in data.get("duplicate_gears") or []:
        dupes = ", ".join(_gear_name(gears, i) for i in group.get("duplicates") or [])
        print(f"  Duplicate of {_gear_name(gears, group.get('primary'))}: {dupes}")

    print_compatibility(data.get("compatibility", {}))

    chainline = data.get("chainline_analysis") or {}
    print_chainline(chainline)
    avoid = set(chainline.get("avoid_gears") or [])
    cross = set(chainline.get("cross_chain_gears") or [])
    recommended = set(data.get("recommended_gears") or [])

    rows = gears if max_gears is None else gears[:max_gears]
    print(f"\n  {'gear':>7} {'ratio':>6} {'inches':>7} {'dev m':>6} {'@90rpm':>8} {'angle':>6} {'eff':>6}")
    for idx, g in enumerate(rows):
        flag = "avoid" if idx in avoid else ("cross" if idx in cross else "")
        rec = "*" if idx in recommended else " "
        speed = (g.get("speed_at_cadence") or {}).get("rpm90")
        print(
            f" {rec}{g.get('chainring', '?'):>3}x{g.get('cog', '?'):<3} "
            f"{_fmt_float(g.get('ratio')):>6} "
            f"{_fmt_float(g.get('gear_inches'), digits=1):>7} "
            f"{_fmt_float(g.get('development_m')):>6} "
            f"{_fmt_float(speed, digits=1):>8} "
            f"{_fmt_float(g.get('cross_chain_angle_deg'), digits=1):>6} "
            f"{_fmt_float((g.get('efficiency') or 0) * 100, '%', 1):>6} {flag}"
        )
    if len(rows) < len(gears):
        print(f"  ... {len(gears) - len(rows)} more")
    print(f"  * recommended gear | speed in {unit}")


def print_readable_output(json_path: Path, max_gears: int | None = None) -> None:
    """
    Print a human-friendly summary of an analysis JSON file.

    Args:
        json_path: Path to the JSON output file.
        max_gears: Limit on gear table rows.
    """
    data = json.loads(Path(json_path).read_text())
    print_readable_analysis(data, max_gears=max_gears)
