"""
AuditPilot Report Engine

Chains the stages for one snapshot:

    snapshot -> evaluate -> aggregate -> synthesize -> render -> PDF
                                                            -> persist (optional)

Every stage is a pure function of its inputs except the document
timestamp, so two runs over the same snapshot with the same generated_at
yield identical verdicts, breakdown, recommendations and PDF bytes.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from ..canon import content_hash
from ..config import Settings
from ..exceptions import UpstreamFetchError
from ..models import (
    DEFAULT_POLICY,
    AnalysisSnapshot,
    ComplianceVerdict,
    Recommendation,
    ReportDocument,
    ScoreBreakdown,
    ScoringPolicy,
)
from ..packs import load_scoring_policy
from ..persistence import (
    DEFAULT_REPORT_KIND,
    DocumentStorage,
    PersistenceReceipt,
    ReportMetadataStore,
    persist_report,
)
from ..render import RenderOptions, render, render_pdf
from .aggregator import ScoreAggregator, category_inputs_from_snapshot
from .evaluator import ComplianceEvaluator, SnapshotInput, as_snapshot
from .synthesizer import RecommendationSynthesizer


logger = logging.getLogger(__name__)

SnapshotProvider = Callable[[str], Mapping[str, Any]]


# =============================================================================
# Upstream
# =============================================================================

def fetch_snapshot(provider: SnapshotProvider, url: str) -> AnalysisSnapshot:
    """
    Obtain a snapshot from an external analysis provider.

    Args:
        provider: Callable returning the raw snapshot mapping for a URL
        url: Page to analyse

    Returns:
        Parsed AnalysisSnapshot

    Raises:
        UpstreamFetchError: Provider failed; carries its message verbatim
        InvalidSnapshotError: Provider answered with an unusable payload
    """
    try:
        data = provider(url)
    except Exception as e:
        raise UpstreamFetchError(
            message=str(e),
            details={"error_type": type(e).__name__},
            url=url,
        ) from e
    return AnalysisSnapshot.from_dict(data)


# =============================================================================
# Result
# =============================================================================

@dataclass(frozen=True)
class Assessment:
    """Everything computed before layout."""
    snapshot: AnalysisSnapshot
    verdicts: tuple[ComplianceVerdict, ...]
    breakdown: ScoreBreakdown
    recommendations: tuple[Recommendation, ...]
    fingerprint: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.snapshot.url,
            "fingerprint": self.fingerprint,
            "verdicts": [v.to_dict() for v in self.verdicts],
            "score": self.breakdown.to_dict(),
            "recommendations": [r.to_dict() for r in self.recommendations],
        }


@dataclass(frozen=True)
class ReportResult:
    """Output of a full engine run."""
    assessment: Assessment
    document: ReportDocument
    pdf: bytes
    receipt: Optional[PersistenceReceipt] = None

    @property
    def snapshot(self) -> AnalysisSnapshot:
        return self.assessment.snapshot

    @property
    def verdicts(self) -> tuple[ComplianceVerdict, ...]:
        return self.assessment.verdicts

    @property
    def breakdown(self) -> ScoreBreakdown:
        return self.assessment.breakdown

    @property
    def recommendations(self) -> tuple[Recommendation, ...]:
        return self.assessment.recommendations

    @property
    def fingerprint(self) -> str:
        return self.assessment.fingerprint

    def to_dict(self) -> dict[str, Any]:
        """Summary without the PDF bytes."""
        result = self.assessment.to_dict()
        result["pages"] = self.document.page_count
        result["pdf_bytes"] = len(self.pdf)
        if self.receipt is not None:
            result["document_url"] = self.receipt.document_url
            result["record_id"] = self.receipt.record_id
        return result


# =============================================================================
# Engine
# =============================================================================

@dataclass
class ReportEngine:
    """
    Runs the report pipeline under one scoring policy.

    Usage:
        engine = ReportEngine()
        result = engine.run(snapshot_json)
        Path("report.pdf").write_bytes(result.pdf)

        # With persistence
        result = engine.run_and_persist(snapshot_json, "user-42", storage, metadata_store)
        print(result.receipt.document_url)
    """

    policy: ScoringPolicy = DEFAULT_POLICY
    render_options: RenderOptions = field(default_factory=RenderOptions)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> ReportEngine:
        """
        Build an engine from environment settings.

        Raises:
            PolicyLoadError: AP_POLICY_PATH points at an unreadable pack
            PolicyValidationError: The pack is invalid
        """
        settings = settings or Settings.from_env()
        policy = load_scoring_policy(settings.policy_path) if settings.policy_path else DEFAULT_POLICY
        options = RenderOptions(
            brand_name=settings.brand_name,
            max_per_tier=settings.max_recommendations_per_tier,
        )
        return cls(policy=policy, render_options=options)

    def assess(self, data: SnapshotInput) -> Assessment:
        """
        Evaluate, score and synthesize recommendations.

        Raises:
            InvalidSnapshotError: If a raw mapping cannot be parsed
        """
        snapshot = as_snapshot(data)
        verdicts = ComplianceEvaluator().evaluate(snapshot)
        breakdown = ScoreAggregator(self.policy).aggregate(
            verdicts, category_inputs_from_snapshot(snapshot),
        )
        recommendations = RecommendationSynthesizer(policy=self.policy).synthesize(verdicts, breakdown)
        return Assessment(
            snapshot=snapshot,
            verdicts=tuple(verdicts),
            breakdown=breakdown,
            recommendations=tuple(recommendations),
            fingerprint=content_hash(snapshot.raw or snapshot),
        )

    def run(self, data: SnapshotInput, generated_at: Optional[datetime] = None) -> ReportResult:
        """
        Produce the full report for one snapshot.

        Args:
            data: AnalysisSnapshot or raw snapshot mapping
            generated_at: Report timestamp (defaults to now)

        Returns:
            ReportResult with document and PDF bytes

        Raises:
            InvalidSnapshotError: If the snapshot cannot be parsed
            RenderError: If the PDF backend fails
        """
        started = time.monotonic()
        generated_at = generated_at or datetime.now(timezone.utc)
        assessment = self.assess(data)
        snapshot = assessment.snapshot
        logger.info(
            f"Scored {snapshot.url}: {assessment.breakdown.overall}/100",
            extra={
                "url": snapshot.url,
                "fingerprint": assessment.fingerprint,
                "overall": assessment.breakdown.overall,
                "grade": assessment.breakdown.grade.value,
                "verdicts": len(assessment.verdicts),
                "recommendations": len(assessment.recommendations),
            },
        )

        document = render(
            snapshot,
            assessment.verdicts,
            assessment.breakdown,
            assessment.recommendations,
            generated_at=generated_at,
            options=self.render_options,
        )
        pdf = render_pdf(document, author=self.render_options.brand_name)
        logger.info(
            f"Rendered report for {snapshot.url}",
            extra={
                "url": snapshot.url,
                "pages": document.page_count,
                "duration_ms": round((time.monotonic() - started) * 1000, 1),
            },
        )
        return ReportResult(assessment=assessment, document=document, pdf=pdf)

    def run_and_persist(
        self,
        data: SnapshotInput,
        owner: str,
        storage: DocumentStorage,
        metadata_store: ReportMetadataStore,
        *,
        report_kind: str = DEFAULT_REPORT_KIND,
        generated_at: Optional[datetime] = None,
    ) -> ReportResult:
        """
        Produce the report, then upload it and record its metadata.

        Raises:
            PersistenceError: Upload or metadata write failed (see stage)
        """
        generated_at = generated_at or datetime.now(timezone.utc)
        result = self.run(data, generated_at=generated_at)
        receipt = persist_report(
            result.pdf,
            result.snapshot,
            owner,
            storage,
            metadata_store,
            report_kind=report_kind,
            created_at=generated_at,
        )
        logger.info(
            f"Persisted report for {result.snapshot.url}",
            extra={
                "url": result.snapshot.url,
                "document_url": receipt.document_url,
                "record_id": receipt.record_id,
            },
        )
        return replace(result, receipt=receipt)


def generate_report(
    data: SnapshotInput,
    policy: ScoringPolicy = DEFAULT_POLICY,
    generated_at: Optional[datetime] = None,
) -> ReportResult:
    """
    Run the report pipeline for one snapshot.

    Convenience function that creates a temporary engine.
    """
    return ReportEngine(policy=policy).run(data, generated_at=generated_at)
