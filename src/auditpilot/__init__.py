"""
AuditPilot - SEO Compliance Scoring and Report Synthesis

AuditPilot turns a site-analysis snapshot (page metadata, headings, images,
page-speed metrics, optional AI content findings) into:

- per-field compliance verdicts against published thresholds
- a weighted 0-100 score with a letter-style grade
- prioritized, deduplicated remediation recommendations
- a paginated PDF report

Quick Start:
    from auditpilot import ReportEngine

    engine = ReportEngine()
    result = engine.run(snapshot_json)

    print(result.breakdown.overall, result.breakdown.grade.label)
    Path("report.pdf").write_bytes(result.pdf)

Version: 1.0.0
"""
from __future__ import annotations

__version__ = "1.0.0"

from .engine import (
    ReportEngine,
    ReportResult,
    aggregate,
    evaluate,
    fetch_snapshot,
    generate_report,
    synthesize,
)
from .exceptions import (
    AuditPilotError,
    InvalidSnapshotError,
    PersistenceError,
    PolicyLoadError,
    PolicyValidationError,
    PolicyVersionMismatch,
    RenderError,
    UpstreamFetchError,
)
from .models import (
    DEFAULT_POLICY,
    AnalysisSnapshot,
    Category,
    ComplianceVerdict,
    Grade,
    Priority,
    Recommendation,
    ReportDocument,
    ScoreBreakdown,
    ScoringPolicy,
    VerdictStatus,
)
from .packs import load_scoring_policy
from .render import render, render_pdf

__all__ = [
    "__version__",
    # Pipeline
    "ReportEngine",
    "ReportResult",
    "generate_report",
    "fetch_snapshot",
    "evaluate",
    "aggregate",
    "synthesize",
    "render",
    "render_pdf",
    "load_scoring_policy",
    # Models
    "AnalysisSnapshot",
    "Category",
    "ComplianceVerdict",
    "DEFAULT_POLICY",
    "Grade",
    "Priority",
    "Recommendation",
    "ReportDocument",
    "ScoreBreakdown",
    "ScoringPolicy",
    "VerdictStatus",
    # Errors
    "AuditPilotError",
    "InvalidSnapshotError",
    "PersistenceError",
    "PolicyLoadError",
    "PolicyValidationError",
    "PolicyVersionMismatch",
    "RenderError",
    "UpstreamFetchError",
]
