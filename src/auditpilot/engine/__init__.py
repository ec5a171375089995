"""
AuditPilot Engine

Evaluation, scoring, recommendation synthesis and the end-to-end pipeline.

Usage:
    from auditpilot.engine import ReportEngine

    result = ReportEngine().run(snapshot_json)
    print(result.breakdown.overall, result.breakdown.grade.label)
"""
from __future__ import annotations

from .aggregator import ScoreAggregator, aggregate, category_inputs_from_snapshot
from .catalog import CATALOG, GENERAL_RECOMMENDATIONS, RemediationTemplate
from .evaluator import ComplianceEvaluator, SnapshotInput, as_snapshot, evaluate
from .pipeline import (
    Assessment,
    ReportEngine,
    ReportResult,
    SnapshotProvider,
    fetch_snapshot,
    generate_report,
)
from .synthesizer import (
    RecommendationSynthesizer,
    deduplicate,
    estimate_impact,
    general_recommendations,
    priority_for,
    synthesize,
)

__all__ = [
    # Evaluator
    "ComplianceEvaluator",
    "SnapshotInput",
    "as_snapshot",
    "evaluate",
    # Aggregator
    "ScoreAggregator",
    "aggregate",
    "category_inputs_from_snapshot",
    # Synthesizer
    "RecommendationSynthesizer",
    "deduplicate",
    "estimate_impact",
    "general_recommendations",
    "priority_for",
    "synthesize",
    # Catalog
    "CATALOG",
    "GENERAL_RECOMMENDATIONS",
    "RemediationTemplate",
    # Pipeline
    "Assessment",
    "ReportEngine",
    "ReportResult",
    "SnapshotProvider",
    "fetch_snapshot",
    "generate_report",
]
