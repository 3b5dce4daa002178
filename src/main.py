# src/main.py — v1
"""CLI entry point.

Usage:
    earl-report --manifest manifest.ttl [options] REPORT...
    earl-report --json [options] earl.jsonld
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from earlreport.version import __version__

logger = logging.getLogger("earlreport.main")


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    from earlreport.config.settings import ConfigurationError

    try:
        settings = _settings_from_args(args)
    except (ConfigurationError, ValueError) as exc:
        parser.error(str(exc))

    _setup_logging(settings)

    try:
        return asyncio.run(_cmd_generate(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=settings.verbose)
        return 1


def cli() -> None:
    sys.exit(main())


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="earl-report",
        description=f"earl-report v{__version__} - consolidate EARL test results",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "sources", nargs="*",
        help="EARL result graphs (or one JSON-LD record with --json)",
    )
    parser.add_argument("--manifest", help="Test manifest (path or URI)")
    parser.add_argument("--base", help="Base URI used when loading the manifest")
    parser.add_argument(
        "--query",
        help="Manifest extraction query, or a file containing it",
    )
    parser.add_argument("--name", help="Name of the specification under test")
    parser.add_argument(
        "--bibRef", "--bib-ref", dest="bib_ref",
        help="Bibliographic reference for the specification",
    )
    parser.add_argument("--homepage", help="Homepage of the report")
    parser.add_argument(
        "--format", default="html",
        help="html, jsonld, turtle, or any rdflib format for a raw dump (default: html)",
    )
    parser.add_argument(
        "--template", type=Path, default=None,
        help="Jinja2 template overriding the built-in HTML template",
    )
    parser.add_argument(
        "--json", action="store_true",
        help="Input is JSON-LD written by an earlier run",
    )
    parser.add_argument(
        "--timeout", type=float, default=None,
        help="Seconds to wait for each remote description",
    )
    parser.add_argument(
        "--no-resolve", action="store_true",
        help="Do not fetch missing subject and developer descriptions",
    )
    parser.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Output file (default: stdout)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Report progress while loading and generating",
    )
    return parser


def _settings_from_args(args: argparse.Namespace):
    """Settings from the environment, overridden by explicit CLI options."""
    from earlreport.config.settings import load_settings

    overrides: dict[str, object] = {}
    for option in ("base", "query", "name", "bib_ref", "homepage"):
        value = getattr(args, option)
        if value is not None:
            overrides[option] = value
    if args.timeout is not None:
        overrides["fetch_timeout"] = args.timeout
    if args.no_resolve:
        overrides["resolve_references"] = False
    if args.verbose:
        overrides["verbose"] = True
    return load_settings(**overrides)


async def _cmd_generate(args: argparse.Namespace, settings) -> int:
    """Consolidate the inputs and write the requested output."""
    from earlreport.report.engine import EarlReport

    if args.json:
        if len(args.sources) != 1:
            logger.error("--json takes exactly one JSON-LD file")
            return 1
        engine = EarlReport.from_json(args.sources[0], settings)
    else:
        engine = await EarlReport.load(args.manifest, args.sources, settings)

    template = None
    if args.template is not None:
        template = args.template.read_text(encoding="utf-8")

    if args.output is not None:
        path = await engine.export(args.format, args.output, template=template)
        logger.info("Wrote %s", path)
    else:
        engine.generate(args.format, io=sys.stdout, template=template)
    return 0


def _setup_logging(settings) -> None:
    """Configure logging for CLI usage."""
    from earlreport.logging.logger import setup_logging

    setup_logging(
        level=settings.effective_log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
