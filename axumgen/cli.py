# File: axumgen/cli.py
"""
axumgen - Command-Line Interface
=================================
CLI built with the standard-library ``argparse`` module.

Usage examples::

    # Generate a PostgreSQL backend
    python -m axumgen -m model.yaml -o ./shop --dialect postgresql

    # Validate the entity model only
    python -m axumgen -m model.yaml --validate-only

    # Show the planned file set without writing anything
    python -m axumgen -m model.yaml --plan-only --dialect mongodb

    # Tolerate missing markers, skip `diesel migration run`
    python -m axumgen -m model.json -o ./out --tolerant --no-schema-sync -v

Exit codes:
    0 — success
    1 — validation error
    2 — generation error
    3 — planning error
    4 — input/argument error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional, Sequence, Tuple

from axumgen.errors import PlanningError
from axumgen.models import (
    AuthMode,
    CiCdProvider,
    DialectProfile,
    EntityDescriptor,
    GenerationConfig,
    Topology,
)

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("axumgen")

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_GENERATION_ERROR: int = 2
EXIT_PLANNING_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the ``axumgen`` logger.

    Args:
        verbosity: 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    handler.setFormatter(logging.Formatter(fmt, datefmt="%H:%M:%S"))

    root_logger: logging.Logger = logging.getLogger("axumgen")
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    from axumgen import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="axumgen",
        description=(
            "axumgen — Rust backend generator.\n\n"
            "Turns an entity model (JSON/YAML) into an axum + Diesel/MongoDB "
            "server project with migrations, docker files and CI pipelines."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s -m model.yaml -o ./shop --dialect postgresql\n"
            "  %(prog)s -m model.yaml --validate-only\n"
            "  %(prog)s -m model.yaml --plan-only --dialect mongodb\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"axumgen v{__version__}",
    )

    parser.add_argument(
        "-m", "--model",
        type=str,
        required=True,
        metavar="PATH",
        help="Path to the entity model file (JSON or YAML).",
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        metavar="DIR",
        help="Destination directory. Required unless --validate-only or --plan-only is set.",
    )

    mode_group = parser.add_argument_group("operation modes")
    mode_group.add_argument(
        "--validate-only",
        action="store_true",
        default=False,
        help="Only validate the model without generating code.",
    )
    mode_group.add_argument(
        "--plan-only",
        action="store_true",
        default=False,
        help="Print the planned file set without writing anything.",
    )

    config_group = parser.add_argument_group("configuration overrides")
    config_group.add_argument(
        "--base-name",
        type=str,
        default=None,
        metavar="NAME",
        help="Override the application name.",
    )
    config_group.add_argument(
        "--dialect",
        type=str,
        default=None,
        choices=[d.value for d in DialectProfile],
        help="Override the database backend.",
    )
    config_group.add_argument(
        "--auth",
        type=str,
        default=None,
        choices=[a.value for a in AuthMode],
        help="Override the authentication mode.",
    )
    config_group.add_argument(
        "--topology",
        type=str,
        default=None,
        choices=[t.value for t in Topology],
        help="Override the deployment topology.",
    )
    config_group.add_argument(
        "--no-docs",
        action="store_true",
        default=False,
        help="Disable OpenAPI documentation.",
    )
    config_group.add_argument(
        "--email",
        action="store_true",
        default=False,
        help="Enable the e-mail service (jwt only).",
    )
    config_group.add_argument(
        "--messaging",
        action="store_true",
        default=False,
        help="Enable the message-broker integration.",
    )
    config_group.add_argument(
        "--ci-cd",
        action="append",
        default=None,
        choices=[p.value for p in CiCdProvider],
        help="Generate a CI/CD pipeline (repeatable).",
    )

    behaviour_group = parser.add_argument_group("behaviour flags")
    behaviour_group.add_argument(
        "--tolerant",
        action="store_true",
        default=False,
        help="Warn instead of failing when an injection marker is missing.",
    )
    behaviour_group.add_argument(
        "--no-schema-sync",
        action="store_true",
        default=False,
        help="Do not run 'diesel migration run' after generation.",
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


def _build_config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if args.base_name is not None:
        overrides["base_name"] = args.base_name
    if args.dialect is not None:
        overrides["dialect"] = args.dialect
    if args.auth is not None:
        overrides["auth_mode"] = args.auth
    if args.topology is not None:
        overrides["topology"] = args.topology
    if args.no_docs:
        overrides["docs_enabled"] = False
    if args.email:
        overrides["email_enabled"] = True
    if args.messaging:
        overrides["messaging_enabled"] = True
    if args.ci_cd:
        overrides["ci_cd"] = list(dict.fromkeys(args.ci_cd))
    return overrides


def _load_model(
    model_path: Path, overrides: Dict[str, Any]
) -> Optional[Tuple[GenerationConfig, List[EntityDescriptor]]]:
    from axumgen.generator import apply_config_overrides, load_model_file, parse_raw_model

    try:
        raw: Dict[str, Any] = load_model_file(model_path)
        if overrides:
            raw = apply_config_overrides(raw, overrides)
        return parse_raw_model(raw)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Failed to load model: %s", exc)
        return None


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------


def _run_validation(
    model_path: Path,
    config: GenerationConfig,
    entities: List[EntityDescriptor],
    *,
    print_report: bool,
) -> bool:
    from axumgen.utils import Timer
    from axumgen.validators import ValidationResult, validate_full

    with Timer("validation") as t:
        result: ValidationResult = validate_full(entities, config)

    if print_report:
        print(f"\n{'='*50}")
        print("  Entity Model Validation Report")
        print(f"{'='*50}")
        print(f"  File:     {model_path.name}")
        print(f"  Entities: {len(entities)}")
        print(f"  Dialect:  {config.dialect.value}")
        print(f"  Time:     {t.elapsed:.3f}s")
        print(f"  Valid:    {'Yes' if result.is_valid else 'No'}")
        if len(result):
            print()
            print(result.format_report())
        if result.is_valid and not result.warnings:
            print("\n  ✅ All validations passed!")
        print(f"{'='*50}\n")
    else:
        for item in result.errors:
            logger.error("  ✗ %s", item)
        for item in result.warnings:
            logger.warning("  ⚠ %s", item)

    return result.is_valid


def _run_plan_only(config: GenerationConfig, entities: List[EntityDescriptor]) -> int:
    from axumgen.generator import RunPlan, annotate_entities, plan_run

    try:
        run_plan: RunPlan = plan_run(config, annotate_entities(entities, config))
    except PlanningError as exc:
        logger.error("Planning failed: %s", exc)
        return EXIT_PLANNING_ERROR

    for destination in run_plan.destinations():
        print(destination)
    return EXIT_SUCCESS


def _run_generation(
    config: GenerationConfig,
    entities: List[EntityDescriptor],
    output_dir: Path,
    args: argparse.Namespace,
) -> int:
    from axumgen.generator import GenerationOrchestrator, GenerationReport

    orchestrator: GenerationOrchestrator = GenerationOrchestrator(
        strict=not args.tolerant,
        run_schema_sync=not args.no_schema_sync,
    )
    report: GenerationReport = orchestrator.generate(config, entities, output_dir)

    print(report.summary())

    if report.success:
        return EXIT_SUCCESS
    if report.planning_errors:
        return EXIT_PLANNING_ERROR
    return EXIT_GENERATION_ERROR


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Parse *argv*, run the requested mode and return the exit code.

    Called by ``cli_main`` and directly by tests.
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    if args.quiet:
        verbosity: int = -1
    else:
        verbosity = args.verbose
    _setup_logging(verbosity)
    if args.quiet:
        logging.getLogger("axumgen").setLevel(logging.ERROR)

    model_path: Path = Path(args.model).resolve()
    if not model_path.is_file():
        logger.error("Model file not found: %s", model_path)
        return EXIT_INPUT_ERROR

    loaded = _load_model(model_path, _build_config_overrides(args))
    if loaded is None:
        return EXIT_INPUT_ERROR
    config, entities = loaded

    valid: bool = _run_validation(
        model_path, config, entities, print_report=args.validate_only
    )
    if args.validate_only:
        return EXIT_SUCCESS if valid else EXIT_VALIDATION_ERROR
    if not valid:
        logger.error("Model has validation errors; nothing generated.")
        return EXIT_VALIDATION_ERROR

    if args.plan_only:
        return _run_plan_only(config, entities)

    if args.output is None:
        logger.error(
            "Output directory is required for generation. "
            "Use -o/--output, --validate-only or --plan-only."
        )
        parser.print_usage(sys.stderr)
        return EXIT_INPUT_ERROR

    output_dir: Path = Path(args.output).resolve()
    logger.info("Model:   %s", model_path)
    logger.info("Output:  %s", output_dir)
    logger.info("Strict:  %s", not args.tolerant)

    exit_code: int = _run_generation(config, entities, output_dir, args)
    if exit_code == EXIT_SUCCESS:
        logger.info("Generation completed successfully.")
    else:
        logger.error("Generation failed with exit code %d.", exit_code)
    return exit_code


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """Console-script entry point."""
    sys.exit(main(argv))


__all__: List[str] = [
    "main",
    "cli_main",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "EXIT_GENERATION_ERROR",
    "EXIT_PLANNING_ERROR",
    "EXIT_INPUT_ERROR",
]

logger.debug("axumgen.cli loaded — %d public symbols.", len(__all__))
