"""
Command-line interface for the geotiler package.

Provides argparse-based CLI with subcommands for generating isobands from
gridded GeoJSON points and rendering GeoJSON features onto PNG tiles.

Usage:
    geotiler isobands grid.geojson --property temperature --breaks 0 5 10 --output bands.geojson
    geotiler render bands.geojson --tile 6/33/21 --output tile.png --label-property temperature
    geotiler render bands.geojson --bbox 4 52 5 53 --output tile.png --config tile.yaml --debug
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence, Tuple

from .api import isobands_from_file, render_tile
from .calculations import IsobandsOptions
from .config import Config
from .exceptions import GeotilerError, InvalidParameterError
from .geojson import load_geojson
from .logging_config import setup_logging
from .projection import BoundingBox
from .rendering import PropertyLabelDelegate, SimpleStyleDelegate


def setup_logging_from_args(args: argparse.Namespace) -> None:
    """
    Configure logging based on command-line arguments.

    Args:
        args: Parsed command-line arguments with verbose, quiet, silent, log_file
    """
    if getattr(args, 'silent', False):
        verbosity = -2  # ERROR
    elif getattr(args, 'quiet', False):
        verbosity = -1  # WARNING
    elif getattr(args, 'verbose', False):
        verbosity = 1  # DEBUG
    else:
        verbosity = 0  # INFO

    log_file = getattr(args, 'log_file', None)
    setup_logging(verbosity=verbosity, log_file=log_file)


def parse_tile_index(value: str) -> Tuple[int, int, int]:
    """
    Parse a Z/X/Y tile index.

    Raises:
        argparse.ArgumentTypeError: If format is invalid
    """
    parts = value.split("/")
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"Invalid tile index: {value}. Expected Z/X/Y")
    try:
        z, x, y = (int(part) for part in parts)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid tile index: {value}. Expected integers")
    return z, x, y


def parse_properties(value: str) -> dict:
    """
    Parse a JSON object of properties.

    Raises:
        argparse.ArgumentTypeError: If the value is not a JSON object
    """
    try:
        properties = json.loads(value)
    except json.JSONDecodeError as e:
        raise argparse.ArgumentTypeError(f"Invalid JSON: {e}")
    if not isinstance(properties, dict):
        raise argparse.ArgumentTypeError("Properties must be a JSON object")
    return properties


def _cli_print(args: argparse.Namespace, *values: object, **kwargs) -> None:
    """Print unless --silent was provided."""
    if getattr(args, "silent", False):
        return
    print(*values, **kwargs)


def cmd_isobands(args: argparse.Namespace) -> int:
    """Handle 'isobands' subcommand."""
    _cli_print(args, f"Generating isobands for '{args.property}' from {args.input}")

    try:
        options = IsobandsOptions(
            common_properties=args.common_properties or {},
            smoothing_sigma=args.smoothing,
        )
        result = isobands_from_file(args.input, args.property, args.breaks, args.output, options)

        if getattr(args, "silent", False):
            print(str(args.output))
        else:
            print(f"Success! {len(result['features'])} isobands saved to: {args.output}")
        return 0

    except (GeotilerError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_render(args: argparse.Namespace) -> int:
    """Handle 'render' subcommand."""
    try:
        config = Config.load_from_file(Path(args.config)) if args.config else Config()
        if args.debug:
            config.debug = True
        if args.dpi:
            config.dpi = args.dpi

        if args.tile is not None:
            bbox = BoundingBox.from_tile_index(*args.tile)
        elif args.bbox is not None:
            bbox = BoundingBox.from_sequence(args.bbox)
        else:
            raise InvalidParameterError("Either --bbox or --tile is required")

        _cli_print(args, f"Rendering {args.input} to {args.output}")

        features = load_geojson(args.input)
        label_delegate = None
        if args.label_property:
            label_delegate = PropertyLabelDelegate(args.label_property, accessories=args.accessories)

        output_path = render_tile(
            features,
            bbox,
            SimpleStyleDelegate(),
            label_delegate=label_delegate,
            config=config,
            output_path=args.output,
            tile_index=args.tile,
        )

        if getattr(args, "silent", False):
            print(str(output_path))
        else:
            print(f"Success! Tile saved to: {output_path}")
        return 0

    except (GeotilerError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="geotiler",
        description="Render GeoJSON features onto map tiles and generate isobands",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    def _add_common_globalish_args(p: argparse.ArgumentParser, suppress: bool) -> None:
        """Add logging args to the main parser and to every subparser.

        Subparsers use SUPPRESS defaults so they do not reset values given
        before the subcommand.
        """
        default = argparse.SUPPRESS if suppress else False
        p.add_argument(
            "-v", "--verbose",
            action="store_true",
            default=default,
            help="Enable DEBUG logging"
        )
        p.add_argument(
            "-q", "--quiet",
            action="store_true",
            default=default,
            help="Suppress INFO logging (WARNING+ only)"
        )
        p.add_argument(
            "--silent",
            action="store_true",
            default=default,
            help="Suppress most console output (prints only the output path)"
        )
        p.add_argument(
            "--log-file",
            type=str,
            default=argparse.SUPPRESS if suppress else None,
            help="Write logs to file"
        )

    _add_common_globalish_args(parser, suppress=False)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # ========================================================================
    # isobands subcommand
    # ========================================================================
    parser_isobands = subparsers.add_parser(
        "isobands",
        help="Generate isobands from a GeoJSON point grid"
    )
    _add_common_globalish_args(parser_isobands, suppress=True)
    parser_isobands.add_argument(
        "input",
        type=str,
        help="GeoJSON FeatureCollection of Points"
    )
    parser_isobands.add_argument(
        "--property",
        type=str,
        required=True,
        help="Point property holding the gridded value"
    )
    parser_isobands.add_argument(
        "--breaks",
        type=float,
        nargs="+",
        required=True,
        help="Band break values (increasing or decreasing)"
    )
    parser_isobands.add_argument(
        "--output",
        type=str,
        required=True,
        help="Output GeoJSON path"
    )
    parser_isobands.add_argument(
        "--smoothing",
        type=float,
        default=0.0,
        help="Gaussian smoothing sigma in grid cells (default: 0, disabled)"
    )
    parser_isobands.add_argument(
        "--common-properties",
        type=parse_properties,
        default=None,
        help="JSON object of properties added to every band"
    )
    parser_isobands.set_defaults(func=cmd_isobands)

    # ========================================================================
    # render subcommand
    # ========================================================================
    parser_render = subparsers.add_parser(
        "render",
        help="Render GeoJSON features onto a PNG tile"
    )
    _add_common_globalish_args(parser_render, suppress=True)
    parser_render.add_argument(
        "input",
        type=str,
        help="GeoJSON file with the features to draw"
    )
    extent = parser_render.add_mutually_exclusive_group(required=True)
    extent.add_argument(
        "--bbox",
        type=float,
        nargs=4,
        metavar=("LON1", "LAT1", "LON2", "LAT2"),
        help="Geographic extent of the tile"
    )
    extent.add_argument(
        "--tile",
        type=parse_tile_index,
        metavar="Z/X/Y",
        help="Slippy-map tile index"
    )
    parser_render.add_argument(
        "--output",
        type=str,
        required=True,
        help="Output PNG path"
    )
    parser_render.add_argument(
        "--config",
        type=str,
        help="Path to configuration file (YAML or JSON)"
    )
    parser_render.add_argument(
        "--dpi",
        type=int,
        help="Output DPI (overrides config)"
    )
    parser_render.add_argument(
        "--label-property",
        type=str,
        help="Feature property used as label text"
    )
    parser_render.add_argument(
        "--accessories",
        action="store_true",
        help="Append inside/outside arrows to outline labels"
    )
    parser_render.add_argument(
        "--debug",
        action="store_true",
        help="Draw the tile border and tile index"
    )
    parser_render.set_defaults(func=cmd_render)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, 'func'):
        parser.print_help()
        return 1

    setup_logging_from_args(args)

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
