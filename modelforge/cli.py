# File: modelforge/cli.py
"""
ModelForge - Command-Line Interface
====================================

CLI built with the standard-library ``argparse`` module.

Usage examples::

    # Generate every artifact into a directory
    python -m modelforge --model shop.yaml --output ./generated

    # Print a single artifact to stdout
    python -m modelforge -m shop.json -k sql-postgres

    # Override the dialect and skip DROP statements
    python -m modelforge -m shop.yaml -o ./out --dialect postgresql --no-drops

    # Validate only (no file output)
    python -m modelforge -m shop.yaml --validate-only

Exit codes:
    0: success
    1: validation error (``--strict`` or ``--validate-only``)
    2: generation error
    3: export error
    4: input/argument error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional, Sequence

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelforge")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_GENERATION_ERROR: int = 2
EXIT_EXPORT_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the ``modelforge`` logger based on verbosity level.

    Args:
        verbosity: -1 = ERROR, 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    elif verbosity == 0:
        level = logging.WARNING
    else:
        level = logging.ERROR

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    datefmt: str = "%H:%M:%S"
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root_logger: logging.Logger = logging.getLogger("modelforge")
    root_logger.setLevel(level)

    # Remove existing handlers to prevent duplication
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from modelforge import __version__
    from modelforge.models import ArtifactKind, DatabaseDialect

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="modelforge",
        description=(
            "ModelForge — data model to code generator.\n\n"
            "Turns an entity/relation model (JSON/YAML) into C# entities, an EF Core\n"
            "DbContext, DTOs, controllers, repositories, services, SQL DDL for four\n"
            "dialects and an OpenAPI document."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s -m shop.yaml -o ./generated\n"
            "  %(prog)s -m shop.json -k sql-postgres\n"
            "  %(prog)s -m shop.yaml --validate-only\n"
            "  %(prog)s -m shop.yaml -o ./out --dialect postgresql --no-drops\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"ModelForge v{__version__}",
    )

    # --- Required arguments ---
    parser.add_argument(
        "-m", "--model",
        type=str,
        required=True,
        metavar="PATH",
        help="Path to the model file (JSON or YAML).",
    )

    # --- Output ---
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        metavar="DIR",
        help="Output directory. Required unless --kind or --validate-only is set.",
    )

    # --- Modes ---
    mode_group = parser.add_argument_group("operation modes")
    mode_group.add_argument(
        "-k", "--kind",
        type=str,
        default=None,
        metavar="KIND",
        help=(
            "Print a single artifact to stdout instead of writing files. "
            f"One of: {', '.join(k.value for k in ArtifactKind)}."
        ),
    )
    mode_group.add_argument(
        "--validate-only",
        action="store_true",
        default=False,
        help="Only validate the model without generating code.",
    )

    # --- Config overrides ---
    config_group = parser.add_argument_group("configuration overrides")
    config_group.add_argument(
        "--dialect",
        type=str,
        default=None,
        choices=[d.value for d in DatabaseDialect],
        help="Override the model's database dialect.",
    )
    config_group.add_argument(
        "--no-drops",
        action="store_true",
        default=False,
        help="Omit DROP TABLE statements from SQL scripts.",
    )

    # --- Behaviour flags ---
    behaviour_group = parser.add_argument_group("behaviour flags")
    behaviour_group.add_argument(
        "--clean",
        action="store_true",
        default=False,
        help="Clean output directory before generation.",
    )
    behaviour_group.add_argument(
        "--strict",
        action="store_true",
        default=False,
        help="Abort when validation reports errors.",
    )

    # --- Verbosity ---
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


def _build_config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Build a config override dictionary from CLI arguments."""
    overrides: Dict[str, Any] = {}

    if args.dialect is not None:
        overrides["dialect_override"] = args.dialect
    if args.no_drops:
        overrides["include_drop_statements"] = False
    if args.clean:
        overrides["clean_output"] = True
    if args.strict:
        overrides["strict"] = True

    return overrides


# ---------------------------------------------------------------------------
# Validate-only mode
# ---------------------------------------------------------------------------


def _run_validate_only(model_path: Path) -> int:
    """Run validation only and return the exit code."""
    from modelforge.generator import load_model_file, parse_raw_model
    from modelforge.utils import Timer
    from modelforge.validators import validate_full

    logger.info("Running validation-only mode for: %s", model_path)

    try:
        model, config = parse_raw_model(load_model_file(model_path))
    except (OSError, ValueError) as exc:
        logger.error("Failed to load model: %s", exc)
        return EXIT_INPUT_ERROR

    with Timer("validation") as t:
        result = validate_full(model, config)

    print(f"\n{'=' * 50}")
    print("  Model Validation Report")
    print(f"{'=' * 50}")
    print(f"  File:      {model_path.name}")
    print(f"  Entities:  {len(model.entities)}")
    print(f"  Relations: {len(model.relations)}")
    print(f"  Time:      {t.elapsed:.3f}s")
    print(f"  Valid:     {'Yes' if result.is_valid else 'No'}")

    if result.errors:
        print(f"\n  Errors ({len(result.errors)}):")
        for err in result.errors:
            print(f"    ✗ {err}")

    if result.warnings:
        print(f"\n  Warnings ({len(result.warnings)}):")
        for warn in result.warnings:
            print(f"    ⚠ {warn}")

    if result.infos:
        print(f"\n  Notes ({len(result.infos)}):")
        for info in result.infos:
            print(f"    ℹ {info}")

    if result.is_valid and not result.warnings:
        print("\n  ✅ All validations passed!")

    print(f"{'=' * 50}\n")

    return EXIT_SUCCESS if result.is_valid else EXIT_VALIDATION_ERROR


# ---------------------------------------------------------------------------
# Single-artifact mode
# ---------------------------------------------------------------------------


def _run_single_kind(model_path: Path, kind: str, args: argparse.Namespace) -> int:
    """Generate one artifact and write it to stdout."""
    from modelforge.dispatcher import generate, resolve_kind
    from modelforge.errors import ModelForgeError, UnknownArtifactKindError
    from modelforge.generator import (
        apply_dialect_override,
        load_model_file,
        parse_raw_model,
    )
    from modelforge.models import GenerationConfig
    from modelforge.validators import validate_full

    try:
        resolved = resolve_kind(kind)
    except UnknownArtifactKindError as exc:
        logger.error("%s", exc)
        return EXIT_INPUT_ERROR

    try:
        model, config = parse_raw_model(load_model_file(model_path))
        overrides: Dict[str, Any] = _build_config_overrides(args)
        if overrides:
            config = GenerationConfig.model_validate({**config.model_dump(), **overrides})
    except (OSError, ValueError) as exc:
        logger.error("Failed to load model: %s", exc)
        return EXIT_INPUT_ERROR

    model = apply_dialect_override(model, config)
    result = validate_full(model, config)
    if result.has_errors and config.strict:
        logger.error("Strict mode: %s", result.summary())
        return EXIT_VALIDATION_ERROR

    try:
        text: str = generate(resolved, model, include_drops=config.include_drop_statements)
    except (ModelForgeError, ValueError, KeyError) as exc:
        logger.error("Generation failed for %s: %s", resolved.value, exc)
        return EXIT_GENERATION_ERROR

    sys.stdout.write(text)
    if not text.endswith("\n"):
        sys.stdout.write("\n")
    return EXIT_SUCCESS


# ---------------------------------------------------------------------------
# Full generation mode
# ---------------------------------------------------------------------------


def _run_generation(model_path: Path, output_dir: Path, args: argparse.Namespace) -> int:
    """Run the full generation pipeline and return the exit code."""
    from modelforge.generator import GenerationReport, ModelGenerator

    config_overrides: Dict[str, Any] = _build_config_overrides(args)

    report: GenerationReport = ModelGenerator().generate_from_file(
        model_path,
        output_dir,
        config_overrides=config_overrides or None,
    )

    if not args.quiet:
        print(report.summary())

    if report.success:
        return EXIT_SUCCESS
    if report.input_errors:
        return EXIT_INPUT_ERROR
    if report.blocked_by_validation:
        return EXIT_VALIDATION_ERROR
    if report.generation_errors:
        return EXIT_GENERATION_ERROR
    if report.export_errors:
        return EXIT_EXPORT_ERROR
    return EXIT_GENERATION_ERROR


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def run(argv: Optional[Sequence[str]] = None) -> int:
    """
    Parse *argv*, run the selected mode and return the exit code.

    ``argparse`` still exits on ``--help``, ``--version`` and usage errors.
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    verbosity: int = -1 if args.quiet else args.verbose
    _setup_logging(verbosity)

    model_path: Path = Path(args.model).resolve()

    if not model_path.exists():
        logger.error("Model file not found: %s", model_path)
        return EXIT_INPUT_ERROR

    if not model_path.is_file():
        logger.error("Model path is not a file: %s", model_path)
        return EXIT_INPUT_ERROR

    if args.validate_only:
        return _run_validate_only(model_path)

    if args.kind is not None:
        return _run_single_kind(model_path, args.kind, args)

    if args.output is None:
        logger.error(
            "Output directory is required for generation. "
            "Use -o/--output, -k/--kind or --validate-only."
        )
        parser.print_usage(sys.stderr)
        return EXIT_INPUT_ERROR

    output_dir: Path = Path(args.output).resolve()

    logger.info("Model:   %s", model_path)
    logger.info("Output:  %s", output_dir)
    logger.info("Clean:   %s", args.clean)
    logger.info("Strict:  %s", args.strict)

    exit_code: int = _run_generation(model_path, output_dir, args)

    if exit_code == EXIT_SUCCESS:
        logger.info("Generation completed successfully.")
    else:
        logger.error("Generation failed with exit code %d.", exit_code)

    return exit_code


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Console-script entry point.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    sys.exit(run(argv))


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "run",
    "cli_main",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "EXIT_GENERATION_ERROR",
    "EXIT_EXPORT_ERROR",
    "EXIT_INPUT_ERROR",
]

logger.debug("modelforge.cli loaded.")
