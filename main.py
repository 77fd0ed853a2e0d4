"""
main.py - CLI orchestration for the serialization conformance gate.

This module is orchestration-only:
1. discover
2. extract + check
3. report

Exit codes: 0 pass, 1 divergences found, 2 discovery failed, 130 interrupted.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from adapters import CODECS, get_codec
from conformance import run_conformance
from errors import DiscoveryError
from logging_config import get_logger, level_from_name, setup_logging
from report import exit_code, format_report, format_report_json, report, write_csv
from settings import load_settings

logger = get_logger("conformance-gate")

EXIT_DISCOVERY_ERROR = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="conformance-gate",
        description=(
            "Serialization Conformance Gate\n"
            "Checks that two JSON codecs agree on every enum value and every "
            "renamed field across a model namespace."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s\n"
            "  %(prog)s --namespace checkout --json\n"
            "  %(prog)s --namespace checkout --csv divergences.csv --verbose\n"
        ),
    )
    parser.add_argument(
        "--namespace",
        "-n",
        type=str,
        help="Package to scan for models (default: CONFORMANCE_NAMESPACE or 'checkout')",
    )
    parser.add_argument(
        "--codec-a",
        choices=sorted(CODECS),
        help="First codec adapter (default: CONFORMANCE_CODEC_A or 'pydantic')",
    )
    parser.add_argument(
        "--codec-b",
        choices=sorted(CODECS),
        help="Second codec adapter (default: CONFORMANCE_CODEC_B or 'orjson')",
    )
    parser.add_argument(
        "--workers",
        "-w",
        type=int,
        help="Thread pool size for the checks (default: CONFORMANCE_WORKERS or 4)",
    )
    parser.add_argument(
        "--allow-both-undeclared",
        action="store_true",
        help="Do not report enum constants that neither codec can serialize",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output the gate result as JSON instead of formatted text",
    )
    parser.add_argument(
        "--csv",
        type=str,
        help="Also write the divergence listing to this CSV file",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose (DEBUG-level) logging",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Output logs as JSON lines (for CI log aggregation)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    overrides: dict = {}
    if args.namespace:
        overrides["namespace"] = args.namespace
    if args.codec_a:
        overrides["codec_a"] = args.codec_a
    if args.codec_b:
        overrides["codec_b"] = args.codec_b
    if args.workers is not None:
        if args.workers < 1:
            parser.error("--workers must be at least 1")
        overrides["workers"] = args.workers
    if args.allow_both_undeclared:
        overrides["flag_both_undeclared"] = False

    try:
        # pydantic ValidationError is a ValueError subclass.
        settings = load_settings().model_copy(update=overrides)

        setup_logging(
            level=logging.DEBUG if args.verbose else level_from_name(settings.log_level),
            json_format=args.log_json or settings.log_json,
        )
        logger.info(
            "cli_mode | namespace=%s | codec_a=%s | codec_b=%s",
            settings.namespace,
            settings.codec_a,
            settings.codec_b,
        )

        codec_a = get_codec(settings.codec_a)
        codec_b = get_codec(settings.codec_b)
        records = run_conformance(settings.namespace, codec_a, codec_b, settings=settings)
        result = report(records, codec_a=codec_a.name, codec_b=codec_b.name)

        if args.csv:
            write_csv(result, args.csv)
        if args.json:
            print(json.dumps(format_report_json(result), indent=2))
        else:
            print(format_report(result))
        return exit_code(result)
    except DiscoveryError as exc:
        logger.error("cli_error | type=DiscoveryError | namespace=%s | error=%s", exc.namespace, exc.reason)
        print(f"\nError: {exc}", file=sys.stderr)
        return EXIT_DISCOVERY_ERROR
    except ValueError as exc:
        logger.error("cli_error | type=%s | error=%s", type(exc).__name__, exc)
        print(f"\nError: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
