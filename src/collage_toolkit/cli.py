"""
Module: cli

Purpose:
    Command-line front end. Runs the registration phase first so every
    custom option declared by a component becomes a ``--<name>`` flag,
    then hands the parsed arguments to the pipeline and maps the result
    to a process exit code.

Key Functions:
    - main(): Console script entry point
    - build_parser(): Argument parser including declared options
    - must_parse_dims(): Fatal dimension parsing for flag values

Dependencies:
    - argparse (std)
    - collage_toolkit.builder: Registry, negotiation and pipeline

Used By:
    - ``collage`` console script
    - ``python -m collage_toolkit``
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Optional, Sequence

from collage_toolkit import __version__
from collage_toolkit.builder import (
    CollageConfig,
    CollagePipeline,
    ComponentRegistry,
    OptionSpec,
    ParameterSet,
    default_registry,
)
from collage_toolkit.builder.components import ComponentRole
from collage_toolkit.builder.config import (
    DEFAULT_GEOMETRY,
    DEFAULT_MONITOR,
    DEFAULT_OUTPUT,
    DEFAULT_POSITIONER,
    DEFAULT_READER,
    DEFAULT_SIZER,
)
from collage_toolkit.core.errors import (
    ParseError,
    ParseParameterError,
    RegistrationError,
    UnknownComponentError,
)
from collage_toolkit.core.models import Dimensions, parse_dims

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

USAGE_ERRORS = (ParseError, UnknownComponentError, RegistrationError, ParseParameterError)


def must_parse_dims(text: str, flag: str) -> Dimensions:
    """
    Parse a ``WxH`` flag value or exit with a usage error.

    Raises:
        SystemExit: With EXIT_USAGE if ``text`` is not plain dimensions
    """
    try:
        return parse_dims(text)
    except ParseError as e:
        logger.error(f"{flag}: {e}")
        raise SystemExit(EXIT_USAGE) from e


def build_parser(options: Sequence[OptionSpec] = ()) -> argparse.ArgumentParser:
    """Build the argument parser, adding one flag per declared option."""
    parser = argparse.ArgumentParser(
        prog="collage",
        description="Compose several images into a single collage.",
    )
    parser.add_argument("inputs", nargs="*", type=Path, metavar="IMAGE", help="Input images")
    parser.add_argument("-o", "--output", type=Path, default=DEFAULT_OUTPUT,
                        help="Output file; extension picks the type (default: Collage)")
    parser.add_argument("-t", "--type", dest="output_type", default=None,
                        help="Output type: jpg, png, tif, svg, sh or pdf")

    canvas = parser.add_argument_group("canvas")
    canvas.add_argument("--padding", default=DEFAULT_GEOMETRY,
                        help="Padding around the images, e.g. 10x10 or 5x5%%")
    canvas.add_argument("--aspect", default=DEFAULT_GEOMETRY,
                        help="Canvas aspect ratio, e.g. 16x9 (default: none)")
    canvas.add_argument("--minsize", default=DEFAULT_GEOMETRY, help="Minimum canvas size WxH")
    canvas.add_argument("--maxsize", default=DEFAULT_GEOMETRY, help="Maximum canvas size WxH")

    strategies = parser.add_argument_group("strategies")
    strategies.add_argument("--reader", "--lc", default=DEFAULT_READER,
                            help="InputImageReader variant (default: Raster)")
    strategies.add_argument("--sizer", "--di", default=DEFAULT_SIZER,
                            help="DimensionInitializer variant (default: Uniform)")
    strategies.add_argument("--positioner", "--pc", default=DEFAULT_POSITIONER,
                            help="PositionCalculator variant (default: Random)")
    strategies.add_argument("--monitor", default=DEFAULT_MONITOR,
                            help="ProgressMonitor variant (default: Log)")
    strategies.add_argument("--list-components", action="store_true",
                            help="List available components and their options, then exit")

    parser.add_argument("--manifest", action="store_true",
                        help="Also write <output>.json describing the layout")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Warnings and errors only")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    if options:
        component_options = parser.add_argument_group("component options")
        for spec in options:
            help_text = f"{spec.help} [{spec.owner}, default: {spec.default or 'none'}]"
            component_options.add_argument(
                spec.flag,
                dest=_option_dest(spec.name),
                default=None,
                metavar="VALUE",
                help=help_text.replace("%", "%%"),
            )

    return parser


def _option_dest(name: str) -> str:
    return "opt_" + name.replace("-", "_")


def _configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(level=level, format="%(message)s")


def _list_components(registry: ComponentRegistry, options: Sequence[OptionSpec]) -> None:
    by_owner: Dict[str, list] = {}
    for spec in options:
        by_owner.setdefault(spec.owner, []).append(spec)
    for role in ComponentRole:
        print(f"{role.value}:")
        for variant in registry.variants(role):
            component = registry.lookup(role, variant)
            print(f"  {variant:<20} {component.description}")
            for spec in by_owner.get(component.key, []):
                print(f"      {spec.flag:<22} {spec.help} (default: {spec.default or 'none'})")


def exit_code_for(error: Optional[Exception]) -> int:
    """Map a pipeline failure to a process exit code."""
    if error is None:
        return EXIT_OK
    if isinstance(error, USAGE_ERRORS):
        return EXIT_USAGE
    return EXIT_FAILURE


def main(argv: Optional[Sequence[str]] = None, registry: Optional[ComponentRegistry] = None) -> int:
    """
    Run the collage CLI.

    Args:
        argv: Arguments (default: ``sys.argv[1:]``)
        registry: Component registry (default: built-in components)

    Returns:
        Process exit code
    """
    if registry is None:
        registry = default_registry()
    pipeline = CollagePipeline(registry)
    params = ParameterSet()

    try:
        pipeline.register(params)
    except RegistrationError as e:
        logging.basicConfig(format="%(message)s")
        logger.error(f"Component registration failed: {e}")
        return EXIT_USAGE

    parser = build_parser(params.declared_options)
    args = parser.parse_args(argv)
    _configure_logging(args.verbose, args.quiet)

    if args.list_components:
        _list_components(registry, params.declared_options)
        return EXIT_OK

    if not args.inputs:
        parser.error("at least one input image is required")

    min_size = must_parse_dims(args.minsize, "--minsize")
    max_size = must_parse_dims(args.maxsize, "--maxsize")

    options = {}
    for spec in params.declared_options:
        value = getattr(args, _option_dest(spec.name))
        if value is not None:
            options[spec.name] = value

    config = CollageConfig(
        inputs=tuple(args.inputs),
        output_path=args.output,
        padding=args.padding,
        aspect_ratio=args.aspect,
        min_size=str(min_size),
        max_size=str(max_size),
        monitor=args.monitor,
        reader=args.reader,
        sizer=args.sizer,
        positioner=args.positioner,
        output_type=args.output_type,
        options=options,
        manifest=args.manifest,
    )

    result = pipeline.run(params, configure=lambda p: config.apply(p, registry))
    if result.ok:
        logger.info(f"Wrote {result.output_path} ({result.plan.canvas})")
        if result.manifest_path is not None:
            logger.info(f"Manifest: {result.manifest_path}")
    return exit_code_for(result.error)


if __name__ == "__main__":
    sys.exit(main())
