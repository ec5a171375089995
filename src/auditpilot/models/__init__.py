"""
AuditPilot Models

All domain models for the AuditPilot scoring and report engine:

    from auditpilot.models import (
        # Enums
        Category, FieldId, VerdictStatus, Grade, Priority,
        # Input
        AnalysisSnapshot,
        # Results
        ComplianceVerdict, ScoreBreakdown, Recommendation, ReportDocument,
        # Policy
        ScoringPolicy, DEFAULT_POLICY,
    )
"""
from __future__ import annotations

# =============================================================================
# Enums
# =============================================================================
from .enums import (
    BlockKind,
    Category,
    FieldId,
    Grade,
    PersistenceStage,
    Priority,
    RuleKind,
    VerdictStatus,
)

# =============================================================================
# Snapshot
# =============================================================================
from .snapshot import (
    AIFindings,
    AnalysisSnapshot,
    DevicePerformance,
    ImageRef,
    KnownIssue,
    LinkStats,
    PerformanceSnapshot,
    extract_metric,
)

# =============================================================================
# Results
# =============================================================================
from .verdict import ComplianceVerdict
from .score import CategoryInput, CategoryScore, ScoreBreakdown
from .recommendation import Recommendation
from .document import Block, Page, ReportDocument

# =============================================================================
# Policy
# =============================================================================
from .policy import DEFAULT_POLICY, TOTAL_POINTS, GradeBand, ScoringPolicy

__all__ = [
    # Enums
    "BlockKind",
    "Category",
    "FieldId",
    "Grade",
    "PersistenceStage",
    "Priority",
    "RuleKind",
    "VerdictStatus",
    # Snapshot
    "AIFindings",
    "AnalysisSnapshot",
    "DevicePerformance",
    "ImageRef",
    "KnownIssue",
    "LinkStats",
    "PerformanceSnapshot",
    "extract_metric",
    # Results
    "ComplianceVerdict",
    "CategoryInput",
    "CategoryScore",
    "ScoreBreakdown",
    "Recommendation",
    "Block",
    "Page",
    "ReportDocument",
    # Policy
    "DEFAULT_POLICY",
    "TOTAL_POINTS",
    "GradeBand",
    "ScoringPolicy",
]
