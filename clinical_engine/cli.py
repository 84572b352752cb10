#!/usr/bin/env python3
"""Command-line interface for the decision engine.

Usage:
    clinical-engine evaluate request.json
    clinical-engine evaluate - < request.json      # read from stdin
    clinical-engine evaluate request.json --missing-fields substitute
    clinical-engine serve
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import structlog

from clinical_engine.compliance import ComplianceThresholds
from clinical_engine.config import configure_logging, settings
from clinical_engine.engine import evaluate
from clinical_engine.errors import EngineError
from clinical_engine.normalization import MissingFieldPolicy, normalize_domains, normalize_record

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_INVALID = 2


def _load_request(source: str) -> Any:
    if source == "-":
        return json.load(sys.stdin)
    with open(Path(source)) as f:
        return json.load(f)


def run_evaluate(args: argparse.Namespace) -> int:
    """Evaluate a request file and print the result JSON."""
    try:
        request = _load_request(args.request)
    except (OSError, json.JSONDecodeError) as e:
        print(f"error: cannot read request: {e}", file=sys.stderr)
        return EXIT_INVALID

    if not isinstance(request, dict):
        print("error: request must be a JSON object with 'record' and 'domains'", file=sys.stderr)
        return EXIT_INVALID

    policy = args.missing_fields or settings.engine.missing_field_policy
    try:
        normalized = normalize_record(request.get("record"), policy)
        domains = normalize_domains(request.get("domains"))
        result = evaluate(
            normalized.record,
            domains,
            ComplianceThresholds(
                compliant=settings.engine.compliant_threshold,
                partially_compliant=settings.engine.partial_threshold,
            ),
        )
    except EngineError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID

    payload = result.to_dict()
    payload["substitutedFields"] = list(normalized.substituted_fields)
    json.dump(payload, sys.stdout, indent=args.indent)
    sys.stdout.write("\n")
    return EXIT_OK


def run_serve(args: argparse.Namespace) -> int:
    """Run the HTTP service."""
    from clinical_engine.api.main import run_server

    run_server()
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clinical-engine",
        description="Clinical & Compliance Decision Engine",
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: from settings)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    evaluate_parser = subparsers.add_parser("evaluate", help="Evaluate a request JSON file")
    evaluate_parser.add_argument("request", help="Path to request JSON, or '-' for stdin")
    evaluate_parser.add_argument(
        "--missing-fields",
        choices=[p.value for p in MissingFieldPolicy],
        default=None,
        help="Missing-field policy (default: from settings)",
    )
    evaluate_parser.add_argument("--indent", type=int, default=2, help="JSON indent")
    evaluate_parser.set_defaults(handler=run_evaluate)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service")
    serve_parser.set_defaults(handler=run_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
