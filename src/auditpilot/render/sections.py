"""
AuditPilot Report Sections

Lays out the report, section by section, on a PageCursor:

1. Header (branding)
2. Site identity, overall score and executive summary
3. Category breakdown
4. Detected issues
5. AI content analysis (only when the snapshot carries AI findings)
6. Performance
7. Recommendations (at most N per priority tier)
8. Footer with the generation timestamp
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from ..models import (
    AnalysisSnapshot,
    BlockKind,
    ComplianceVerdict,
    DevicePerformance,
    Priority,
    Recommendation,
    ReportDocument,
    ScoreBreakdown,
    VerdictStatus,
)
from .layout import PageCursor, PageGeometry, TextStyle


logger = logging.getLogger(__name__)


# =============================================================================
# Palette and Styles
# =============================================================================

PRIMARY = "#1E3A8A"
TEXT = "#1F2937"
MUTED = "#6B7280"
WHITE = "#FFFFFF"
SUCCESS = "#22C55E"
WARNING = "#EAB308"
DANGER = "#EF4444"

PRIORITY_COLORS = {
    Priority.HIGH: "#FEE2E2",
    Priority.MEDIUM: "#FEF3C7",
    Priority.LOW: "#DCFCE7",
}

SEVERITY_COLORS = {
    "critical": "#FEE2E2",
    "high": "#FEE2E2",
    "medium": "#FEF3C7",
    "low": "#E0F2FE",
}

BANNER = TextStyle(font="Helvetica-Bold", size=18, color=WHITE, fill=PRIMARY, padding=14, gap=16)
HEADING = TextStyle(font="Helvetica-Bold", size=14, color=PRIMARY, gap=8)
SUBHEADING = TextStyle(font="Helvetica-Bold", size=11, color=TEXT, gap=4)
BODY = TextStyle(font="Helvetica", size=10, color=TEXT, gap=6)
BULLET = TextStyle(font="Helvetica", size=10, color=TEXT, gap=3, indent=10)
SCORE_PANEL = TextStyle(font="Helvetica-Bold", size=16, color=WHITE, padding=12, gap=12)
PANEL = TextStyle(font="Helvetica", size=9.5, color=TEXT, padding=8, gap=6)
BAR = TextStyle(font="Helvetica", size=9.5, color=TEXT, gap=6)
NOTICE = TextStyle(font="Helvetica-Oblique", size=9, color=MUTED, gap=8)
FOOTER = TextStyle(font="Helvetica-Oblique", size=8, color=MUTED, gap=0)

SECTION_GAP = 10.0
MAX_ENTITIES = 10


def ratio_color(ratio: float) -> str:
    """Category bar colour: green from 80%, amber from 60%, red below."""
    if ratio >= 0.8:
        return SUCCESS
    if ratio >= 0.6:
        return WARNING
    return DANGER


@dataclass(frozen=True)
class RenderOptions:
    """Presentation settings for a report."""
    brand_name: str = "AuditPilot"
    report_title: str = "SEO Compliance Report"
    max_per_tier: int = 5
    geometry: PageGeometry = field(default_factory=PageGeometry)


def _format_timestamp(value: Optional[datetime]) -> str:
    moment = value or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


# =============================================================================
# Sections
# =============================================================================

def _header(cursor: PageCursor, options: RenderOptions) -> None:
    cursor.text(BlockKind.BANNER, f"{options.brand_name}\n{options.report_title}", BANNER)


def _identity(
    cursor: PageCursor,
    snapshot: AnalysisSnapshot,
    verdicts: Sequence[ComplianceVerdict],
    breakdown: ScoreBreakdown,
    generated_at: str,
) -> None:
    report_type = "SEO + AI semantic analysis" if snapshot.has_ai_findings else "Basic SEO analysis"
    identity = [
        f"Website: {snapshot.url}",
        f"Generated: {generated_at}",
        f"Report type: {report_type}",
    ]
    if snapshot.scan_id:
        identity.append(f"Scan: {snapshot.scan_id}")
    cursor.text(BlockKind.PARAGRAPH, "\n".join(identity), BODY)

    score_style = TextStyle(
        font=SCORE_PANEL.font,
        size=SCORE_PANEL.size,
        color=SCORE_PANEL.color,
        fill=breakdown.grade_color,
        padding=SCORE_PANEL.padding,
        gap=SCORE_PANEL.gap,
    )
    cursor.text(
        BlockKind.PANEL,
        f"Overall score: {breakdown.overall}/100\nGrade: {breakdown.grade.label}",
        score_style,
    )

    counts = Counter(v.status for v in verdicts)
    failing = counts[VerdictStatus.MISSING] + counts[VerdictStatus.INVALID]
    cursor.text(BlockKind.HEADING, "Executive Summary", HEADING)
    cursor.text(
        BlockKind.PARAGRAPH,
        f"This report evaluates {_plural(len(verdicts), 'check')} across "
        f"{len(breakdown.categories)} categories. "
        f"{counts[VerdictStatus.OPTIMAL]} meet the target, "
        f"{counts[VerdictStatus.NEEDS_IMPROVEMENT]} need improvement and "
        f"{failing} are missing or invalid.",
        BODY,
    )
    cursor.skip(SECTION_GAP)


def _categories(cursor: PageCursor, breakdown: ScoreBreakdown) -> None:
    cursor.text(BlockKind.HEADING, "Category Breakdown", HEADING)
    for entry in breakdown.categories:
        style = TextStyle(
            font=BAR.font, size=BAR.size, color=BAR.color,
            fill=ratio_color(entry.ratio), gap=BAR.gap,
        )
        cursor.bar(f"{entry.label}: {entry.score}/{entry.max_score}", entry.ratio, style)

    if breakdown.strengths:
        cursor.text(BlockKind.HEADING, "Strengths", SUBHEADING)
        for sentence in breakdown.strengths:
            cursor.text(BlockKind.PARAGRAPH, f"+ {sentence}", BULLET)
    cursor.skip(SECTION_GAP)


def _issues(cursor: PageCursor, snapshot: AnalysisSnapshot, breakdown: ScoreBreakdown) -> None:
    cursor.text(BlockKind.HEADING, "Detected Issues", HEADING)

    if not snapshot.known_issues and not breakdown.issues:
        cursor.text(
            BlockKind.PANEL,
            "No critical issues detected.",
            TextStyle(font=PANEL.font, size=PANEL.size, color=TEXT, fill="#DCFCE7", padding=PANEL.padding),
        )
        cursor.skip(SECTION_GAP)
        return

    for issue in snapshot.known_issues:
        style = TextStyle(
            font=PANEL.font, size=PANEL.size, color=PANEL.color,
            fill=SEVERITY_COLORS.get(issue.severity, SEVERITY_COLORS["medium"]),
            padding=PANEL.padding, gap=PANEL.gap,
        )
        text = f"[{issue.severity.upper()}] {issue.title}"
        if issue.description:
            text += f"\n{issue.description}"
        cursor.text(BlockKind.PANEL, text, style)

    for sentence in breakdown.issues:
        cursor.text(BlockKind.PARAGRAPH, f"- {sentence}", BULLET)
    cursor.skip(SECTION_GAP)


def _ai_findings(cursor: PageCursor, snapshot: AnalysisSnapshot) -> None:
    ai = snapshot.ai
    if ai is None or ai.is_empty:
        return

    cursor.text(BlockKind.HEADING, "AI Content Analysis", HEADING)
    if ai.main_topic:
        cursor.text(BlockKind.PARAGRAPH, f"Main topic: {ai.main_topic}", BODY)
    if ai.search_intent:
        cursor.text(BlockKind.PARAGRAPH, f"Search intent: {ai.search_intent}", BODY)
    if ai.citation_potential not in (None, ""):
        cursor.text(BlockKind.PARAGRAPH, f"Citation potential: {ai.citation_potential}", BODY)
    for label, items in (
        ("Missing topics", ai.semantic_gaps),
        ("Schema types detected", ai.schema_types),
        ("FAQ suggestions", ai.faq_suggestions),
        ("Related entities", ai.entities[:MAX_ENTITIES]),
    ):
        if not items:
            continue
        cursor.text(BlockKind.HEADING, label, SUBHEADING)
        for item in items:
            cursor.text(BlockKind.PARAGRAPH, f"- {item}", BULLET)
    cursor.skip(SECTION_GAP)


def _metric_text(value: Any, unit: str) -> Optional[str]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if unit == "ms":
        return f"{value / 1000:.2f} s" if value >= 1000 else f"{value:.0f} ms"
    return f"{value:.3f}"


def _device_line(name: str, device: DevicePerformance) -> str:
    parts = []
    score = device.score_percent
    parts.append(f"{name} score: {score:.0f}/100" if score is not None else f"{name} score: n/a")
    for label, value, unit in (
        ("LCP", device.lcp_ms, "ms"),
        ("FCP", device.fcp_ms, "ms"),
        ("CLS", device.cls, ""),
        ("INP", device.inp_ms, "ms"),
        ("TBT", device.tbt_ms, "ms"),
    ):
        text = _metric_text(value, unit)
        if text is not None:
            parts.append(f"{label} {text}")
    return " | ".join(parts)


def _performance(cursor: PageCursor, snapshot: AnalysisSnapshot) -> None:
    cursor.text(BlockKind.HEADING, "Performance", HEADING)
    performance = snapshot.performance
    if performance.is_empty:
        cursor.text(BlockKind.PARAGRAPH, "No page-speed data was supplied.", BODY)
    for name, device in (("Desktop", performance.desktop), ("Mobile", performance.mobile)):
        if device is not None:
            cursor.text(BlockKind.PARAGRAPH, _device_line(name, device), BODY)
    cursor.skip(SECTION_GAP)


def _recommendations(
    cursor: PageCursor,
    recommendations: Sequence[Recommendation],
    max_per_tier: int,
) -> None:
    cursor.text(BlockKind.HEADING, "Recommendations", HEADING)
    for tier in Priority:
        items = [r for r in recommendations if r.priority == tier]
        if not items:
            continue
        cursor.text(BlockKind.HEADING, f"{tier.value.capitalize()} priority ({len(items)})", SUBHEADING)

        style = TextStyle(
            font=PANEL.font, size=PANEL.size, color=PANEL.color,
            fill=PRIORITY_COLORS[tier], padding=PANEL.padding, gap=PANEL.gap,
        )
        for rec in items[:max_per_tier]:
            text = f"{rec.title}\n{rec.description}\nEstimated impact: +{rec.impact} points"
            if rec.standard:
                text += f"\nStandard: {rec.standard}"
            cursor.text(BlockKind.PANEL, text, style)

        hidden = len(items) - max_per_tier
        if hidden > 0:
            cursor.text(
                BlockKind.NOTICE,
                f"+{hidden} more {tier.value} priority recommendation{'s' if hidden != 1 else ''}",
                NOTICE,
            )
    cursor.skip(SECTION_GAP)


def _footer(cursor: PageCursor, options: RenderOptions, generated_at: str) -> None:
    cursor.text(BlockKind.FOOTER, f"Generated by {options.brand_name} on {generated_at}", FOOTER)


# =============================================================================
# Render
# =============================================================================

def render(
    snapshot: AnalysisSnapshot,
    verdicts: Sequence[ComplianceVerdict],
    breakdown: ScoreBreakdown,
    recommendations: Sequence[Recommendation],
    *,
    generated_at: Optional[datetime] = None,
    options: Optional[RenderOptions] = None,
) -> ReportDocument:
    """
    Lay out the full report.

    Args:
        snapshot: The analysed snapshot (identity, issues, AI, performance)
        verdicts: Evaluator output
        breakdown: Aggregator output
        recommendations: Synthesizer output
        generated_at: Timestamp printed in the report (defaults to now)
        options: Branding and truncation settings

    Returns:
        ReportDocument in which no block crosses the bottom margin
    """
    options = options or RenderOptions()
    stamp = _format_timestamp(generated_at)
    cursor = PageCursor(options.geometry)

    _header(cursor, options)
    _identity(cursor, snapshot, verdicts, breakdown, stamp)
    _categories(cursor, breakdown)
    _issues(cursor, snapshot, breakdown)
    _ai_findings(cursor, snapshot)
    _performance(cursor, snapshot)
    _recommendations(cursor, recommendations, options.max_per_tier)
    _footer(cursor, options, stamp)

    document = cursor.finish(title=f"{options.report_title}: {snapshot.url}", generated_at=stamp)
    logger.debug(f"Laid out {document.page_count} pages", extra={"pages": document.page_count})
    return document
