# File: entitygen/cli.py
"""
EntityGen - Command-Line Interface
===================================

Built with the standard-library ``argparse`` module.

Usage examples::

    # Generate classes into ./Models
    python -m entitygen --schema model.yaml --output ./Models

    # Override the namespace and emit data annotations
    entitygen -s model.json -o ./Models --namespace Blogging.Models --data-annotations

    # Render only, print the report
    entitygen -s model.yaml --dry-run -v

Exit codes:
    0 — success
    2 — generation error
    3 — export error
    4 — input/argument error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, NoReturn, Optional, Sequence

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("entitygen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_GENERATION_ERROR: int = 2
EXIT_EXPORT_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the ``entitygen`` logger.

    Args:
        verbosity: -1 = ERROR (quiet), 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    levels: Dict[int, int] = {-1: logging.ERROR, 0: logging.WARNING, 1: logging.INFO}
    level: int = levels.get(verbosity, logging.DEBUG if verbosity > 1 else logging.ERROR)

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    ))

    pkg_logger: logging.Logger = logging.getLogger("entitygen")
    pkg_logger.setLevel(level)
    pkg_logger.handlers.clear()
    pkg_logger.addHandler(handler)
    pkg_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from entitygen import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="entitygen",
        description=(
            "EntityGen — generate C# entity classes from a reverse-engineered "
            "relational model (JSON/YAML)."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s -s model.yaml -o ./Models\n"
            "  %(prog)s -s model.json -o ./Models --namespace App.Models --data-annotations\n"
            "  %(prog)s -s model.yaml --dry-run -v\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"EntityGen v{__version__}",
    )
    parser.add_argument(
        "-s", "--schema",
        type=str,
        required=True,
        metavar="PATH",
        help="Path to the model description file (JSON or YAML).",
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        metavar="DIR",
        help="Output directory for generated classes. Required unless --dry-run.",
    )

    config_group = parser.add_argument_group("configuration overrides")
    config_group.add_argument(
        "--namespace",
        type=str,
        default=None,
        metavar="NS",
        help="Namespace of the generated classes.",
    )
    annotations = config_group.add_mutually_exclusive_group()
    annotations.add_argument(
        "--data-annotations",
        dest="use_data_annotations",
        action="store_true",
        default=None,
        help="Emit data-annotation attributes on classes and members.",
    )
    annotations.add_argument(
        "--no-data-annotations",
        dest="use_data_annotations",
        action="store_false",
        help="Emit plain classes without attributes.",
    )
    config_group.add_argument(
        "--indent-size",
        type=int,
        default=None,
        metavar="N",
        help="Spaces per indentation level (2-8).",
    )

    behaviour_group = parser.add_argument_group("behaviour flags")
    behaviour_group.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Render everything but write nothing.",
    )
    behaviour_group.add_argument(
        "--clean",
        action="store_true",
        default=False,
        help="Empty the output directory before writing.",
    )
    behaviour_group.add_argument(
        "--overwrite",
        action="store_true",
        default=False,
        help="Replace files that already exist.",
    )
    behaviour_group.add_argument(
        "--no-manifest",
        action="store_true",
        default=False,
        help="Don't write the JSON manifest.",
    )

    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all output except errors.",
    )

    return parser


# ---------------------------------------------------------------------------
# Config override builder
# ---------------------------------------------------------------------------


def _build_config_overrides(args: argparse.Namespace) -> Dict[str, object]:
    """Build a config override dictionary from CLI arguments."""
    overrides: Dict[str, object] = {}

    if args.namespace is not None:
        overrides["namespace"] = args.namespace
    if args.use_data_annotations is not None:
        overrides["use_data_annotations"] = args.use_data_annotations
    if args.indent_size is not None:
        overrides["indent_size"] = args.indent_size
    if args.overwrite:
        overrides["overwrite_existing"] = True
    if args.no_manifest:
        overrides["generate_manifest"] = False

    return overrides


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def _run_generation(schema_path: Path, output_dir: Path, args: argparse.Namespace) -> int:
    """Run the pipeline and map the report to an exit code."""
    from entitygen.generator import EntityGenerator, GenerationReport

    config_overrides = _build_config_overrides(args)
    generator: EntityGenerator = EntityGenerator(clean_output=args.clean, dry_run=args.dry_run)

    report: GenerationReport = generator.generate_from_file(
        schema_path=schema_path,
        output_dir=output_dir,
        config_overrides=config_overrides or None,
    )

    if not args.quiet:
        print(report.summary())

    if report.success:
        return EXIT_SUCCESS
    if report.export_errors and not report.generation_errors:
        return EXIT_EXPORT_ERROR
    if any(s.step_name == "Load Schema" and not s.success for s in report.step_metrics):
        return EXIT_INPUT_ERROR
    return EXIT_GENERATION_ERROR


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    if args.quiet:
        verbosity: int = -1
    else:
        verbosity = args.verbose
    _setup_logging(verbosity)

    schema_path: Path = Path(args.schema).resolve()
    if not schema_path.is_file():
        logger.error("Schema file not found: %s", schema_path)
        sys.exit(EXIT_INPUT_ERROR)

    if args.output is None and not args.dry_run:
        logger.error("Output directory is required. Use -o/--output or --dry-run.")
        parser.print_usage(sys.stderr)
        sys.exit(EXIT_INPUT_ERROR)

    output_dir: Path = Path(args.output or ".").resolve()

    logger.info("Schema:  %s", schema_path)
    logger.info("Output:  %s", output_dir)

    exit_code: int = _run_generation(schema_path, output_dir, args)
    if exit_code == EXIT_SUCCESS:
        logger.info("Generation completed successfully.")
    else:
        logger.error("Generation failed with exit code %d.", exit_code)

    sys.exit(exit_code)


def main() -> None:
    """Console-script entry point."""
    cli_main()


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "main",
    "EXIT_SUCCESS",
    "EXIT_GENERATION_ERROR",
    "EXIT_EXPORT_ERROR",
    "EXIT_INPUT_ERROR",
]

logger.debug("entitygen.cli loaded.")
