#!/usr/bin/env python3
"""
AuditPilot CLI

Scores a site-analysis snapshot and produces the PDF compliance report.

Usage:
    auditpilot evaluate snapshot.json
    auditpilot score snapshot.json --policy strict.yaml
    auditpilot recommend snapshot.json
    auditpilot report snapshot.json -o report.pdf
    auditpilot report snapshot.json -o report.pdf --store-dir store/ --owner user-42
    auditpilot validate-policy strict.yaml

Exit Codes:
    0   OK
    10  INPUT_INVALID   - Snapshot file unreadable or not a snapshot
    11  CONFIG_ERROR    - Scoring policy pack or AP_* setting invalid
    12  RENDER_ERROR    - PDF backend failed
    13  PERSIST_ERROR   - Upload or metadata write failed
    20  INTERNAL_ERROR  - Unexpected error
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from . import __version__
from .config import Settings, configure_logging
from .engine import ReportEngine
from .exceptions import (
    AuditPilotError,
    InvalidSnapshotError,
    PersistenceError,
    PolicyLoadError,
    PolicyValidationError,
    PolicyVersionMismatch,
    RenderError,
)
from .models import DEFAULT_POLICY
from .packs import load_scoring_policy
from .persistence import JsonLinesMetadataStore, LocalDirectoryStorage
from .render import RenderOptions


logger = logging.getLogger(__name__)


# ============================================================================
# EXIT CODES
# ============================================================================

class ExitCode:
    """Exit codes for pipeline integration."""
    OK = 0
    INPUT_INVALID = 10
    CONFIG_ERROR = 11
    RENDER_ERROR = 12
    PERSIST_ERROR = 13
    INTERNAL_ERROR = 20


def exit_code_for(error: AuditPilotError) -> int:
    """Map an AuditPilot error to its exit code."""
    if isinstance(error, InvalidSnapshotError):
        return ExitCode.INPUT_INVALID
    if isinstance(error, (PolicyLoadError, PolicyValidationError, PolicyVersionMismatch)):
        return ExitCode.CONFIG_ERROR
    if isinstance(error, RenderError):
        return ExitCode.RENDER_ERROR
    if isinstance(error, PersistenceError):
        return ExitCode.PERSIST_ERROR
    return ExitCode.INTERNAL_ERROR


def print_error(text: str) -> None:
    print(text, file=sys.stderr)


def print_success(text: str) -> None:
    print(f"[OK] {text}")


def print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, sort_keys=False))


# ============================================================================
# HELPERS
# ============================================================================

def load_snapshot_file(path: str) -> Any:
    """
    Read a snapshot JSON file.

    Raises:
        InvalidSnapshotError: File missing, unreadable or not JSON
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise InvalidSnapshotError(message=f"Cannot read snapshot file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise InvalidSnapshotError(message=f"Snapshot file {path} is not valid JSON: {e}") from e


def build_engine(args: argparse.Namespace, settings: Settings) -> ReportEngine:
    """Engine for a command: --policy wins over AP_POLICY_PATH."""
    policy_path = getattr(args, "policy", None) or settings.policy_path
    policy = load_scoring_policy(policy_path) if policy_path else DEFAULT_POLICY
    options = RenderOptions(
        brand_name=settings.brand_name,
        max_per_tier=settings.max_recommendations_per_tier,
    )
    return ReportEngine(policy=policy, render_options=options)


# ============================================================================
# COMMANDS
# ============================================================================

def cmd_evaluate(args: argparse.Namespace, settings: Settings) -> int:
    """Print one verdict per rule."""
    assessment = build_engine(args, settings).assess(load_snapshot_file(args.snapshot))
    print_json([v.to_dict() for v in assessment.verdicts])
    return ExitCode.OK


def cmd_score(args: argparse.Namespace, settings: Settings) -> int:
    """Print the score breakdown."""
    assessment = build_engine(args, settings).assess(load_snapshot_file(args.snapshot))
    print_json(assessment.breakdown.to_dict())
    return ExitCode.OK


def cmd_recommend(args: argparse.Namespace, settings: Settings) -> int:
    """Print the prioritized recommendations."""
    assessment = build_engine(args, settings).assess(load_snapshot_file(args.snapshot))
    print_json([r.to_dict() for r in assessment.recommendations])
    return ExitCode.OK


def cmd_report(args: argparse.Namespace, settings: Settings) -> int:
    """Render the PDF report, optionally persisting it to a local store."""
    engine = build_engine(args, settings)
    data = load_snapshot_file(args.snapshot)

    if args.store_dir:
        store_dir = Path(args.store_dir)
        result = engine.run_and_persist(
            data,
            args.owner,
            LocalDirectoryStorage(store_dir),
            JsonLinesMetadataStore(store_dir / "reports.jsonl"),
            report_kind=settings.report_kind,
        )
    else:
        result = engine.run(data)

    output = Path(args.output)
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(result.pdf)
    except OSError as e:
        print_error(f"Cannot write {output}: {e}")
        return ExitCode.INTERNAL_ERROR

    breakdown = result.breakdown
    print_success(
        f"Report written: {output} ({result.document.page_count} pages, "
        f"score {breakdown.overall}/100, {breakdown.grade.label})"
    )
    if result.receipt is not None:
        print_success(f"Stored: {result.receipt.document_url} (record {result.receipt.record_id})")
    return ExitCode.OK


def cmd_validate_policy(args: argparse.Namespace, settings: Settings) -> int:
    """Validate a scoring policy pack."""
    policy = load_scoring_policy(args.path)
    print_success(f"Policy {policy.name} v{policy.version} is valid")
    for category, max_score in policy.max_scores:
        print(f"  {category.label}: {max_score}")
    return ExitCode.OK


# ============================================================================
# MAIN
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="auditpilot",
        description="AuditPilot - SEO compliance scoring and report synthesis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit Codes:
  0   OK
  10  INPUT_INVALID   Snapshot file unreadable or not a snapshot
  11  CONFIG_ERROR    Scoring policy pack or setting invalid
  12  RENDER_ERROR    PDF backend failed
  13  PERSIST_ERROR   Upload or metadata write failed
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    snapshot_args = argparse.ArgumentParser(add_help=False)
    snapshot_args.add_argument("snapshot", help="Snapshot JSON file")
    snapshot_args.add_argument("--policy", "-p", help="Scoring policy pack (YAML or JSON)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    evaluate_parser = subparsers.add_parser("evaluate", parents=[snapshot_args], help="Print compliance verdicts")
    evaluate_parser.set_defaults(func=cmd_evaluate)

    score_parser = subparsers.add_parser("score", parents=[snapshot_args], help="Print the score breakdown")
    score_parser.set_defaults(func=cmd_score)

    recommend_parser = subparsers.add_parser("recommend", parents=[snapshot_args], help="Print recommendations")
    recommend_parser.set_defaults(func=cmd_recommend)

    report_parser = subparsers.add_parser("report", parents=[snapshot_args], help="Render the PDF report")
    report_parser.add_argument("--output", "-o", default="report.pdf", help="PDF output path")
    report_parser.add_argument("--store-dir", help="Also store the report and its metadata here")
    report_parser.add_argument("--owner", default="local", help="Owning user recorded with the report")
    report_parser.set_defaults(func=cmd_report)

    policy_parser = subparsers.add_parser("validate-policy", help="Validate a scoring policy pack")
    policy_parser.add_argument("path", help="Policy pack file")
    policy_parser.set_defaults(func=cmd_validate_policy)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "func", None):
        parser.print_help()
        return ExitCode.INPUT_INVALID

    try:
        settings = Settings.from_env()
    except ValueError as e:
        print_error(f"[AP_CONFIG_ERROR] {e}")
        return ExitCode.CONFIG_ERROR
    configure_logging(settings)

    try:
        return args.func(args, settings)
    except AuditPilotError as e:
        print_error(str(e))
        return exit_code_for(e)
    except Exception as e:
        logger.exception("Unexpected error")
        print_error(f"[AP_INTERNAL_ERROR] {type(e).__name__}: {e}")
        return ExitCode.INTERNAL_ERROR


if __name__ == "__main__":
    sys.exit(main())
