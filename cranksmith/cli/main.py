"""
Command-line interface for the drivetrain analyzer.

Usage:
    python -m cranksmith make-example [--output example_setup.json]
    python -m cranksmith check --input setup.json [--output check.json]
    python -m cranksmith analyze --input setup.json [--output analysis.json] [--settings settings.json] [--readable [--max-gears N]] [--target-speed S [--cadence RPM]]
    python -m cranksmith catalog [--kind cassette]
    python -m cranksmith serve [--port 8000]
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from cranksmith import __version__
from cranksmith.analyzer.drivetrain import analyze_drivetrain, suggest_gear_for_speed
from cranksmith.catalog.loader import components_of, example_setup, load_components
from cranksmith.cli.readable_output import print_readable_analysis
from cranksmith.compatibility.engine import check_compatibility
from cranksmith.models.components import ComponentKind, component_label
from cranksmith.models.settings import AnalysisSettings, load_settings
from cranksmith.models.setup import DrivetrainSetup


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cranksmith",
        description="CrankSmith - Bicycle drivetrain gear and compatibility analyzer.",
    )
    parser.add_argument("--version", action="version", version=f"cranksmith {__version__}")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # make-example command
    example_parser = subparsers.add_parser(
        "make-example",
        help="Generate an example setup JSON file",
    )
    example_parser.add_argument(
        "--output", "-o",
        type=Path,
        default=Path("example_setup.json"),
        help="Output path for example file (default: example_setup.json)",
    )

    # check command
    check_parser = subparsers.add_parser(
        "check",
        help="Check a setup for mechanical compatibility",
    )
    check_parser.add_argument(
        "--input", "-i",
        type=Path,
        required=True,
        help="Path to JSON file with the drivetrain setup",
    )
    check_parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Path to save JSON output (prints to stdout if not specified)",
    )

    # analyze command
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze every gear of a setup",
    )
    analyze_parser.add_argument(
        "--input", "-i",
        type=Path,
        required=True,
        help="Path to JSON file with the drivetrain setup",
    )
    analyze_parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Path to save JSON output (prints to stdout if not specified)",
    )
    analyze_parser.add_argument(
        "--settings", "-s",
        type=Path,
        default=None,
        help="Path to JSON file with analysis settings",
    )
    analyze_parser.add_argument(
        "--readable",
        action="store_true",
        help="Print a readable summary (JSON only goes to --output when given)",
    )
    analyze_parser.add_argument(
        "--max-gears",
        type=int,
        default=None,
        help="Limit the readable gear table to this many rows",
    )
    analyze_parser.add_argument(
        "--target-speed",
        type=float,
        default=None,
        help="Suggest the most efficient gear for this speed (in the analysis speed unit)",
    )
    analyze_parser.add_argument(
        "--cadence",
        type=float,
        default=90.0,
        help="Cadence in rpm for --target-speed (default: 90)",
    )

    # catalog command
    catalog_parser = subparsers.add_parser(
        "catalog",
        help="List components in the seed catalog",
    )
    catalog_parser.add_argument(
        "--kind", "-k",
        choices=[k.value for k in ComponentKind if k != ComponentKind.DRIVETRAIN],
        default=None,
        help="Only list one kind of component",
    )
    catalog_parser.add_argument(
        "--path",
        default=None,
        help="Path to a catalog JSON file (default: packaged seed catalog)",
    )

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Start the FastAPI web server",
    )
    serve_parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    serve_parser.add_argument(
        "--port", "-p",
        type=int,
        default=8000,
        help="Port to listen on (default: 8000)",
    )
    serve_parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )

    return parser


def _load_setup(path: Path) -> DrivetrainSetup:
    with open(path) as f:
        data = json.load(f)
    return DrivetrainSetup(**data)


def _write_output(output_json: str, output: Optional[Path]) -> None:
    if output:
        with open(output, "w") as f:
            f.write(output_json)
        print(f"\nResults saved to {output}", file=sys.stderr)
    else:
        print(output_json)


def cmd_make_example(args: argparse.Namespace) -> int:
    """Generate an example setup JSON file."""
    example = example_setup()
    output_json = example.model_dump_json(indent=2)

    with open(args.output, "w") as f:
        f.write(output_json)

    print(f"Created example setup file: {args.output}")
    print("\nRun analysis with:")
    print(f"  python -m cranksmith analyze --input {args.output}")

    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Check a setup for compatibility."""
    try:
        setup = _load_setup(args.input)

        print("\nCrankSmith compatibility check", file=sys.stderr)
        print(f"Crankset: {component_label(setup.crankset)}", file=sys.stderr)
        print(f"Cassette: {component_label(setup.cassette)}", file=sys.stderr)

        result = check_compatibility(setup)
        _write_output(result.model_dump_json(indent=2), args.output)

        print(
            f"\nSummary: {'compatible' if result.compatible else 'NOT compatible'}, "
            f"{len(result.warnings)} issue(s), {len(result.critical)} critical",
            file=sys.stderr,
        )
        return 0

    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in {args.input}: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Validation Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_analyze(args: argparse.Namespace) -> int:
    """Analyze every gear of a setup."""
    try:
        setup = _load_setup(args.input)
        settings = load_settings(args.settings) if args.settings else AnalysisSettings()

        print("\nCrankSmith drivetrain analysis", file=sys.stderr)
        print(f"Bike type: {setup.bike_type.value}", file=sys.stderr)
        print(f"Chainrings: {setup.effective_chainrings} | Cogs: {setup.cassette.cogs}", file=sys.stderr)

        analysis = analyze_drivetrain(setup, settings)

        if args.readable:
            print_readable_analysis(json.loads(analysis.model_dump_json()), max_gears=args.max_gears)
            if args.output:
                _write_output(analysis.model_dump_json(indent=2), args.output)
        else:
            _write_output(analysis.model_dump_json(indent=2), args.output)

        print(
            f"\nSummary: {analysis.total_gears} gears, {analysis.unique_ratios} unique, "
            f"range {analysis.gear_range * 100:.0f}% "
            f"({analysis.lowest_gear.label} to {analysis.highest_gear.label})",
            file=sys.stderr,
        )
        if args.target_speed is not None:
            index = suggest_gear_for_speed(analysis.gears, args.target_speed, args.cadence)
            target = f"{args.target_speed:g} {analysis.speed_unit.value} at {args.cadence:g} rpm"
            if index is None:
                print(f"No efficient gear found for {target}", file=sys.stderr)
            else:
                print(f"Suggested gear for {target}: {analysis.gears[index].label}", file=sys.stderr)
        if not analysis.compatibility.compatible:
            print("\nCritical issues:", file=sys.stderr)
            for w in analysis.compatibility.critical:
                print(f"  - {w.issue}", file=sys.stderr)
        return 0

    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Validation Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_catalog(args: argparse.Namespace) -> int:
    """List seed catalog components."""
    try:
        components = load_components(args.path)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.kind:
        components = components_of(ComponentKind(args.kind), components)

    for component in components:
        print(f"{component.id:<32} {component_label(component)}")
    print(f"\n{len(components)} component(s)", file=sys.stderr)
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the FastAPI web server."""
    import uvicorn

    print("\nStarting CrankSmith API", file=sys.stderr)
    print(f"API: http://{args.host}:{args.port}/", file=sys.stderr)
    print(f"Docs: http://{args.host}:{args.port}/docs", file=sys.stderr)
    print("\nPress Ctrl+C to stop\n", file=sys.stderr)

    uvicorn.run(
        "cranksmith.api.server:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )
    return 0


def cli(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "make-example": cmd_make_example,
        "check": cmd_check,
        "analyze": cmd_analyze,
        "catalog": cmd_catalog,
        "serve": cmd_serve,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


def main():
    """Console script entrypoint wrapper."""
    return cli()


if __name__ == "__main__":
    sys.exit(cli())
