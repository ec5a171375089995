"""
Tests for the threshold ladders and the rule table.
"""
from __future__ import annotations

import pytest

from auditpilot.models import AnalysisSnapshot, Category, FieldId, RuleKind, VerdictStatus
from auditpilot.rules import (
    RULE_TABLE,
    Coverage,
    Directive,
    ExactCount,
    LengthRange,
    Minimum,
    Presence,
    PresenceMatch,
    Ratio,
    Scheme,
    Threshold,
    fields_in,
    rules_for,
)

from tests.helpers import SITE_URL


@pytest.fixture
def page() -> AnalysisSnapshot:
    return AnalysisSnapshot.from_dict({"url": SITE_URL})


# =============================================================================
# Ladders
# =============================================================================

class TestLengthRange:
    """Text length ladder."""

    ladder = LengthRange(min_length=30, max_length=60, short_credit=0.5, long_credit=0.7)

    def test_in_range_is_optimal(self, page):
        """45 characters is within 30-60."""
        outcome = self.ladder.judge("x" * 45, page)
        assert outcome.status == VerdictStatus.OPTIMAL
        assert outcome.credit == 1.0
        assert outcome.measured == 45

    def test_bounds_are_inclusive(self, page):
        """Exactly 30 and exactly 60 are optimal."""
        assert self.ladder.judge("x" * 30, page).status == VerdictStatus.OPTIMAL
        assert self.ladder.judge("x" * 60, page).status == VerdictStatus.OPTIMAL

    def test_short_and_long(self, page):
        """Outside the range earns the ladder's partial credit."""
        short = self.ladder.judge("x" * 10, page)
        long = self.ladder.judge("x" * 90, page)
        assert (short.status, short.credit) == (VerdictStatus.NEEDS_IMPROVEMENT, 0.5)
        assert (long.status, long.credit) == (VerdictStatus.NEEDS_IMPROVEMENT, 0.7)

    def test_absent_empty_and_wrong_type(self, page):
        """None and blank are missing; a number is invalid."""
        assert self.ladder.judge(None, page).status == VerdictStatus.MISSING
        assert self.ladder.judge("   ", page).status == VerdictStatus.MISSING
        assert self.ladder.judge(42, page).status == VerdictStatus.INVALID


class TestPresenceMatch:
    """Canonical URL ladder."""

    ladder = PresenceMatch()

    def test_relative_self_reference(self, page):
        """A relative canonical resolving to the page is optimal."""
        assert self.ladder.judge("/guide/", page).status == VerdictStatus.OPTIMAL

    def test_case_and_trailing_slash_ignored(self, page):
        """Host case and a trailing slash do not matter."""
        assert self.ladder.judge("https://EXAMPLE.com/guide/", page).status == VerdictStatus.OPTIMAL

    def test_other_page(self, page):
        """A canonical pointing elsewhere earns half credit."""
        outcome = self.ladder.judge("https://example.com/other", page)
        assert outcome.status == VerdictStatus.NEEDS_IMPROVEMENT
        assert outcome.credit == 0.5


class TestExactCount:
    """Single H1 ladder."""

    ladder = ExactCount(expected=1, zero_credit=0.3, excess_credit=0.5, noun="H1 heading")

    @pytest.mark.parametrize("value,status,credit", [
        (["Only"], VerdictStatus.OPTIMAL, 1.0),
        ([], VerdictStatus.NEEDS_IMPROVEMENT, 0.3),
        (["One", "Two"], VerdictStatus.NEEDS_IMPROVEMENT, 0.5),
        (1, VerdictStatus.OPTIMAL, 1.0),
        ("One", VerdictStatus.INVALID, 0.0),
        (None, VerdictStatus.MISSING, 0.0),
    ])
    def test_counts(self, page, value, status, credit):
        """Lists and non-negative counts are accepted."""
        outcome = self.ladder.judge(value, page)
        assert outcome.status == status
        assert outcome.credit == credit


class TestRatio:
    """Coverage ladder."""

    ladder = Ratio(noun="image", check="have alt text")

    def test_partial_coverage(self, page):
        """7 of 10 earns 0.7."""
        outcome = self.ladder.judge(Coverage(7, 10), page)
        assert outcome.status == VerdictStatus.NEEDS_IMPROVEMENT
        assert outcome.credit == pytest.approx(0.7)
        assert outcome.detail == "3 of 10 images do not have alt text"

    def test_nothing_to_check(self, page):
        """Zero items is vacuously optimal."""
        assert self.ladder.judge(Coverage(0, 0), page).status == VerdictStatus.OPTIMAL

    def test_none_passing(self, page):
        """Zero of N passing is invalid."""
        assert self.ladder.judge(Coverage(0, 4), page).status == VerdictStatus.INVALID

    def test_malformed(self, page):
        """Anything but a coverage count is invalid."""
        assert self.ladder.judge(("a.png",), page).status == VerdictStatus.INVALID
        assert self.ladder.judge(Coverage(5, 3), page).status == VerdictStatus.INVALID


class TestThreshold:
    """Lower-is-better ladder."""

    ladder = Threshold(good=2500, poor=4000, unit="ms")

    @pytest.mark.parametrize("value,status", [
        (1800, VerdictStatus.OPTIMAL),
        (2500, VerdictStatus.OPTIMAL),
        (3000, VerdictStatus.NEEDS_IMPROVEMENT),
        (4000, VerdictStatus.NEEDS_IMPROVEMENT),
        (5200, VerdictStatus.INVALID),
        (-1, VerdictStatus.INVALID),
        ("slow", VerdictStatus.INVALID),
        (float("nan"), VerdictStatus.INVALID),
        (None, VerdictStatus.MISSING),
    ])
    def test_bands(self, page, value, status):
        """Good, improvable and poor bands."""
        assert self.ladder.judge(value, page).status == status


class TestMinimum:
    """Higher-is-better ladder."""

    ladder = Minimum(target=300, noun="words")

    def test_below_target_is_proportional(self, page):
        """150 of 300 words earns half credit."""
        outcome = self.ladder.judge(150, page)
        assert outcome.status == VerdictStatus.NEEDS_IMPROVEMENT
        assert outcome.credit == pytest.approx(0.5)

    def test_list_is_counted(self, page):
        """A list of links is counted."""
        assert Minimum(target=3).judge(["/a", "/b", "/c"], page).status == VerdictStatus.OPTIMAL


class TestPresenceDirectiveScheme:
    """Presence, robots and scheme ladders."""

    def test_presence(self, page):
        """Non-empty text or collections are optimal, empty ones are not."""
        ladder = Presence()
        assert ladder.judge("width=device-width", page).status == VerdictStatus.OPTIMAL
        assert ladder.judge(["Article"], page).status == VerdictStatus.OPTIMAL
        assert ladder.judge([], page).status == VerdictStatus.NEEDS_IMPROVEMENT
        assert ladder.judge(3.5, page).status == VerdictStatus.INVALID

    @pytest.mark.parametrize("value,status", [
        ("index, follow", VerdictStatus.OPTIMAL),
        ("index,nofollow", VerdictStatus.NEEDS_IMPROVEMENT),
        ("NOINDEX", VerdictStatus.INVALID),
        ("none", VerdictStatus.INVALID),
        ("", VerdictStatus.MISSING),
    ])
    def test_directive(self, page, value, status):
        """noindex excludes the page, nofollow loses half credit."""
        assert Directive().judge(value, page).status == status

    def test_scheme(self, page):
        """HTTPS is optimal, HTTP earns nothing, anything else is invalid."""
        ladder = Scheme()
        assert ladder.judge("https://example.com", page).status == VerdictStatus.OPTIMAL
        insecure = ladder.judge("http://example.com", page)
        assert (insecure.status, insecure.credit) == (VerdictStatus.NEEDS_IMPROVEMENT, 0.0)
        assert ladder.judge("ftp://example.com", page).status == VerdictStatus.INVALID


# =============================================================================
# Rule Table
# =============================================================================

class TestRuleTable:
    """Static table shape."""

    def test_rule_ids_unique(self):
        """Every rule has its own id."""
        ids = [rule.rule_id for rule in RULE_TABLE]
        assert len(ids) == len(set(ids))

    def test_one_rule_per_field(self):
        """Each field is judged exactly once."""
        fields = [rule.field for rule in RULE_TABLE]
        assert sorted(fields, key=lambda f: f.value) == sorted(FieldId, key=lambda f: f.value)

    def test_every_category_has_a_rule(self):
        """No category is left without measurements."""
        for category in Category:
            assert fields_in(category) >= 1, category

    def test_technical_rules(self):
        """Technical SEO gathers viewport, HTTPS and the four vitals."""
        fields = {rule.field for rule in rules_for(Category.TECHNICAL_SEO)}
        assert fields == {
            FieldId.VIEWPORT, FieldId.HTTPS, FieldId.LCP, FieldId.CLS, FieldId.INP, FieldId.FCP,
        }

    def test_kinds(self):
        """The rule kind comes from its ladder."""
        kinds = {rule.rule_id: rule.kind for rule in RULE_TABLE}
        assert kinds["title.length"] == RuleKind.LENGTH_RANGE
        assert kinds["images.alt_coverage"] == RuleKind.RATIO
        assert kinds["performance.lcp"] == RuleKind.THRESHOLD

    def test_hierarchy_without_h2(self):
        """H3s with no H2 count as a skipped level."""
        snapshot = AnalysisSnapshot.from_dict({"url": SITE_URL, "h3": ["Deep"]})
        rule = next(r for r in RULE_TABLE if r.field == FieldId.HEADING_HIERARCHY)
        assert rule.apply(snapshot).status == VerdictStatus.NEEDS_IMPROVEMENT

    def test_image_counters(self):
        """totalImages / imagesWithoutAlt work when no image list is given."""
        snapshot = AnalysisSnapshot.from_dict({"url": SITE_URL, "totalImages": 8, "imagesWithoutAlt": 2})
        rule = next(r for r in RULE_TABLE if r.field == FieldId.IMAGE_ALT)
        outcome = rule.apply(snapshot)
        assert outcome.credit == pytest.approx(0.75)

    def test_open_graph_without_prefix(self):
        """Open Graph keys without the og: prefix are accepted."""
        snapshot = AnalysisSnapshot.from_dict({
            "url": SITE_URL,
            "openGraph": {"title": "T", "description": "D"},
        })
        rule = next(r for r in RULE_TABLE if r.field == FieldId.OPEN_GRAPH)
        outcome = rule.apply(snapshot)
        assert outcome.status == VerdictStatus.NEEDS_IMPROVEMENT
        assert outcome.credit == pytest.approx(2 / 3)

    def test_schema_from_ai_findings(self):
        """AI-detected schema types count when the page reports none."""
        snapshot = AnalysisSnapshot.from_dict({"url": SITE_URL, "ai": {"schemaTypes": ["FAQPage"]}})
        rule = next(r for r in RULE_TABLE if r.field == FieldId.SCHEMA_MARKUP)
        assert rule.apply(snapshot).status == VerdictStatus.OPTIMAL
