"""
Tests for report layout.

Validates:
- No block crosses the bottom margin
- A page is only started when the next block does not fit
- Oversized text is split across pages
- Section content, AI omission and per-tier truncation
"""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from auditpilot.engine import aggregate, category_inputs_from_snapshot, evaluate, synthesize
from auditpilot.models import AnalysisSnapshot, BlockKind, Priority, ReportDocument
from auditpilot.render import PageCursor, PageGeometry, RenderOptions, TextStyle, render

from tests.helpers import make_recommendation, make_snapshot_data


GENERATED = datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc)
BODY = TextStyle(size=10, gap=6)


def assert_paginated(document: ReportDocument) -> None:
    """Every block sits inside the page budget and no page break was premature."""
    limit = document.bottom_limit
    for page, block in document.iter_blocks():
        assert block.y >= document.top_margin - 1e-6, (page.number, block)
        assert block.bottom <= limit + 1e-6, (page.number, block)

    for page, following in zip(document.pages, document.pages[1:]):
        assert page.break_at is not None
        assert following.blocks, f"page {following.number} is empty"
        assert page.break_at + following.blocks[0].height > limit, page.number
    assert document.pages[-1].break_at is None


def build_report(data, recommendations=None, options=None) -> ReportDocument:
    snapshot = AnalysisSnapshot.from_dict(data)
    verdicts = evaluate(snapshot)
    breakdown = aggregate(verdicts, category_inputs_from_snapshot(snapshot))
    if recommendations is None:
        recommendations = synthesize(verdicts, breakdown)
    return render(snapshot, verdicts, breakdown, recommendations, generated_at=GENERATED, options=options)


# =============================================================================
# Page Cursor
# =============================================================================

class TestPageCursor:
    """The layout state machine."""

    def test_blocks_stack_down_the_page(self):
        cursor = PageCursor()
        first = cursor.place(BlockKind.PARAGRAPH, 20, ["a"], BODY)
        second = cursor.place(BlockKind.PARAGRAPH, 20, ["b"], BODY)
        assert first.y == cursor.geometry.top_margin
        assert second.y == first.bottom + BODY.gap
        assert cursor.page_number == 1

    def test_overflow_starts_new_page(self):
        """A block that does not fit moves to the top of a new page."""
        geometry = PageGeometry(height=300, top_margin=20, bottom_margin=20)
        cursor = PageCursor(geometry)
        cursor.place(BlockKind.PARAGRAPH, 200, ["a"], BODY)
        moved = cursor.place(BlockKind.PARAGRAPH, 100, ["b"], BODY)
        assert cursor.page_number == 2
        assert moved.y == geometry.top_margin

        document = cursor.finish()
        assert document.pages[0].break_at == 20 + 200 + BODY.gap
        assert_paginated(document)

    def test_exact_fit_stays_on_page(self):
        """A block ending exactly on the bottom limit does not break the page."""
        geometry = PageGeometry(height=300, top_margin=20, bottom_margin=20)
        cursor = PageCursor(geometry)
        cursor.place(BlockKind.PARAGRAPH, 260, ["a"], TextStyle(gap=0))
        assert cursor.page_number == 1
        assert cursor.y == geometry.bottom_limit

    def test_block_taller_than_page_rejected(self):
        cursor = PageCursor(PageGeometry(height=300, top_margin=20, bottom_margin=20))
        with pytest.raises(ValueError, match="exceeds the page budget"):
            cursor.place(BlockKind.PANEL, 400, ["huge"], BODY)

    def test_long_text_split_across_pages(self):
        """Text taller than a page is split line-wise."""
        cursor = PageCursor(PageGeometry(height=400, top_margin=40, bottom_margin=40))
        blocks = cursor.text(BlockKind.PARAGRAPH, "lorem ipsum dolor sit amet " * 400, BODY)
        assert len(blocks) > 1
        assert cursor.page_number > 1
        assert_paginated(cursor.finish())

    def test_empty_text_places_nothing(self):
        cursor = PageCursor()
        assert cursor.text(BlockKind.PARAGRAPH, "", BODY) == []
        assert cursor.page_is_empty

    def test_bar_value_clamped(self):
        cursor = PageCursor()
        assert cursor.bar("Over", 1.7, BODY).value == 1.0
        assert cursor.bar("Under", -0.2, BODY).value == 0.0


# =============================================================================
# Report Sections
# =============================================================================

class TestReportContent:
    """What the rendered document says."""

    def test_sections_present(self, snapshot_data):
        document = build_report(snapshot_data)
        text = document.text()
        for heading in ("Executive Summary", "Category Breakdown", "Strengths",
                        "Detected Issues", "Performance", "Recommendations"):
            assert heading in text
        assert "Overall score: 99/100" in text
        assert "Grade: Excellent" in text
        assert "Website: https://example.com/guide" in text
        assert "No critical issues detected." in text

    def test_generated_timestamp_and_footer(self, snapshot_data):
        document = build_report(snapshot_data)
        assert document.generated_at == "2024-03-01 12:30 UTC"
        last_block = document.pages[-1].blocks[-1]
        assert last_block.kind == BlockKind.FOOTER
        assert last_block.lines == ("Generated by AuditPilot on 2024-03-01 12:30 UTC",)

    def test_ai_section_omitted_without_findings(self, snapshot_data):
        assert "AI Content Analysis" not in build_report(snapshot_data).text()

    def test_ai_section_rendered_with_findings(self):
        data = make_snapshot_data(ai={
            "searchIntent": "informational",
            "semanticGaps": ["pricing comparison"],
            "faqSuggestions": ["How long does an audit take?"],
        })
        text = build_report(data).text()
        assert "AI Content Analysis" in text
        assert "Search intent: informational" in text
        assert "- pricing comparison" in text

    def test_topic_and_entities_rendered(self):
        """Main topic, missing topics and at most ten related entities are shown."""
        data = make_snapshot_data(semantic_analysis={
            "main_topic": "Technical SEO audits",
            "missing_topics": ["crawl budget"],
            "entities": [f"Entity {i}" for i in range(14)],
        })
        text = build_report(data).text()
        assert "Main topic: Technical SEO audits" in text
        assert "Missing topics" in text
        assert "- crawl budget" in text
        assert "Related entities" in text
        assert "- Entity 9" in text
        assert "- Entity 10" not in text

    def test_report_type_line(self, snapshot_data):
        """The identity block says whether AI analysis is included."""
        assert "Report type: Basic SEO analysis" in build_report(snapshot_data).text()
        with_ai = build_report(make_snapshot_data(ai={"mainTopic": "Pricing"})).text()
        assert "Report type: SEO + AI semantic analysis" in with_ai

    def test_sparse_snapshot(self, sparse_snapshot_data):
        """Missing data is reported, not fatal."""
        document = build_report(sparse_snapshot_data)
        text = document.text()
        assert "No page-speed data was supplied." in text
        assert "Grade: Critical" in text
        assert_paginated(document)

    def test_known_issues_rendered(self):
        data = make_snapshot_data(issues=[{"title": "Mixed content", "severity": "high"}])
        text = build_report(data).text()
        assert "[HIGH] Mixed content" in text
        assert "No critical issues detected." not in text

    def test_performance_lines(self, snapshot_data):
        text = build_report(snapshot_data).text()
        assert "Desktop score: 95/100 | LCP 1.20 s | FCP 800 ms | CLS 0.020 | INP 120 ms" in text


class TestPagination:
    """Multi-page reports."""

    @pytest.fixture
    def many_recommendations(self):
        return [
            make_recommendation(
                title=f"Recommendation {i}",
                priority=(Priority.HIGH, Priority.MEDIUM, Priority.LOW)[i % 3],
                impact=1 + i % 4,
                description="Rewrite the section so it answers the query directly. " * 4,
            )
            for i in range(90)
        ]

    def test_long_report_paginates(self, snapshot_data, many_recommendations):
        document = build_report(
            snapshot_data,
            many_recommendations,
            options=RenderOptions(max_per_tier=30),
        )
        assert document.page_count > 2
        assert_paginated(document)
        assert [p.number for p in document.pages] == list(range(1, document.page_count + 1))

    def test_truncation_notice(self, snapshot_data, many_recommendations):
        """Only max_per_tier items per tier are shown, with a count of the rest."""
        document = build_report(snapshot_data, many_recommendations, options=RenderOptions(max_per_tier=5))
        text = document.text()
        assert "High priority (30)" in text
        assert "+25 more high priority recommendations" in text
        assert "+25 more low priority recommendations" in text
        notices = [b for _, b in document.iter_blocks() if b.kind == BlockKind.NOTICE]
        assert len(notices) == 3

    def test_default_report_paginates(self, snapshot_data):
        """The standard report obeys the same page budget."""
        assert_paginated(build_report(snapshot_data))

    def test_fewer_recommendations_never_add_pages(self, snapshot_data, many_recommendations):
        """Truncating tiers cannot increase the page count."""
        full = build_report(snapshot_data, many_recommendations, options=RenderOptions(max_per_tier=30))
        truncated = build_report(snapshot_data, many_recommendations, options=RenderOptions(max_per_tier=5))
        assert truncated.page_count <= full.page_count

    def test_layout_is_deterministic(self, snapshot_data, many_recommendations):
        first = build_report(snapshot_data, many_recommendations)
        second = build_report(snapshot_data, many_recommendations)
        assert first == second
