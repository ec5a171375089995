"""
Tests for the score aggregator.

Validates:
- overall == sum of category scores, within 0-100
- max scores sum to 100
- Scenario A/B/C category scores, issues and strengths
- grade bands
"""
from __future__ import annotations

import pytest

from auditpilot.engine import ScoreAggregator, aggregate, category_inputs_from_snapshot, evaluate
from auditpilot.models import (
    DEFAULT_POLICY,
    AnalysisSnapshot,
    Category,
    CategoryInput,
    CategoryScore,
    FieldId,
    Grade,
    GradeBand,
    ScoreBreakdown,
    ScoringPolicy,
    VerdictStatus,
)

from tests.helpers import make_all_verdicts, make_snapshot_data, make_verdict


def score_snapshot(data):
    snapshot = AnalysisSnapshot.from_dict(data)
    return aggregate(evaluate(snapshot), category_inputs_from_snapshot(snapshot))


class TestInvariants:
    """Properties that hold for every input."""

    @pytest.mark.parametrize("data", [
        make_snapshot_data(),
        {"url": "http://sparse.example.org"},
        make_snapshot_data(title=None, images=[{"src": "a.png"}], robots="noindex"),
        make_snapshot_data(word_count=10, performance={"mobile": {"score": 0.2, "metrics": {"lcp": 9000}}}),
    ])
    def test_overall_is_sum(self, data):
        """Overall equals the sum of category scores and stays in range."""
        breakdown = score_snapshot(data)
        assert breakdown.overall == sum(c.score for c in breakdown.categories)
        assert 0 <= breakdown.overall <= 100
        assert sum(c.max_score for c in breakdown.categories) == 100
        for entry in breakdown.categories:
            assert 0 <= entry.score <= entry.max_score

    def test_categories_in_policy_order(self):
        """Every category appears once, in policy order."""
        breakdown = aggregate(make_all_verdicts())
        assert [c.category for c in breakdown.categories] == list(DEFAULT_POLICY.categories)

    def test_no_verdicts_scores_zero(self):
        """A category with nothing measured earns nothing."""
        breakdown = aggregate([])
        assert breakdown.overall == 0
        assert breakdown.grade == Grade.CRITICAL

    def test_sparse_snapshot(self, sparse_snapshot_data):
        """A URL-only http snapshot scores 0."""
        breakdown = score_snapshot(sparse_snapshot_data)
        assert breakdown.overall == 0
        assert len(breakdown.issues) == len(Category)

    def test_breakdown_rejects_inconsistent_totals(self):
        """A breakdown whose overall is not the sum of its categories cannot be built."""
        categories = tuple(CategoryScore(c, 0, points) for c, points in DEFAULT_POLICY.max_scores)
        with pytest.raises(ValueError, match="sum of category scores"):
            ScoreBreakdown(overall=5, grade=Grade.CRITICAL, grade_color="#EF4444", categories=categories)

    def test_breakdown_rejects_score_above_max(self):
        categories = tuple(CategoryScore(c, points + 1, points) for c, points in DEFAULT_POLICY.max_scores)
        with pytest.raises(ValueError, match="scores"):
            ScoreBreakdown(overall=109, grade=Grade.EXCELLENT, grade_color="#8B5CF6", categories=categories)


class TestCategoryScoring:
    """Per-category arithmetic."""

    def test_all_optimal_is_full_marks(self):
        """Perfect verdicts with no raw inputs score 100."""
        breakdown = aggregate(make_all_verdicts())
        assert breakdown.overall == 100
        assert breakdown.grade == Grade.EXCELLENT
        assert breakdown.grade_color == "#8B5CF6"

    def test_partial_credit_floors(self):
        """Heading structure at (1 + 0.3) / 2 of 10 floors to 6."""
        verdicts = make_all_verdicts()
        verdicts = [
            make_verdict(FieldId.H1, VerdictStatus.NEEDS_IMPROVEMENT, credit=0.3)
            if v.field == FieldId.H1 else v
            for v in verdicts
        ]
        breakdown = aggregate(verdicts)
        assert breakdown.category(Category.HEADING_STRUCTURE).score == 6

    def test_raw_sub_scores_blend(self):
        """Raw 0-100 inputs are averaged with verdict credits."""
        verdicts = make_all_verdicts()
        raw = [CategoryInput(Category.TECHNICAL_SEO, 50.0, weight=6.0)]
        breakdown = ScoreAggregator().aggregate(verdicts, raw)
        # (6 * 1.0 + 6 * 0.5) / 12 = 0.75 of 20
        assert breakdown.category(Category.TECHNICAL_SEO).score == 15

    def test_lighthouse_inputs_from_snapshot(self, snapshot):
        """Desktop and mobile scores feed Technical SEO."""
        inputs = category_inputs_from_snapshot(snapshot)
        assert [i.source for i in inputs] == ["lighthouse:desktop", "lighthouse:mobile"]
        assert all(i.category == Category.TECHNICAL_SEO for i in inputs)
        assert inputs[0].score == pytest.approx(95.0)

    def test_non_finite_lighthouse_score_ignored(self):
        """A NaN Lighthouse score contributes nothing instead of full marks."""
        nan = float("nan")
        breakdown = score_snapshot(make_snapshot_data(performance={
            "desktop": {"score": nan, "metrics": {"lcp": 5000, "fcp": 800, "cls": 0.5, "inp": 120}},
            "mobile": {"score": nan, "metrics": {"lcp": 5000, "fcp": 1500, "cls": 0.5, "inp": 180}},
        }))
        # LCP and CLS fail outright: 4 of 6 technical checks, no Lighthouse input
        assert breakdown.category(Category.TECHNICAL_SEO).score == 13

    def test_unknown_category_raises(self):
        """Looking up a category not in the breakdown is a KeyError."""
        breakdown = aggregate(make_all_verdicts())
        with pytest.raises(KeyError):
            breakdown.category("not-a-category")


class TestScenarios:
    """Reference scenarios."""

    def test_scenario_a_meta_category_zero(self):
        """No meta description scores the meta category 0/10 and flags it."""
        data = make_snapshot_data(remove=("meta_description",), title="x" * 45, h1=["Welcome"], images=[])
        breakdown = score_snapshot(data)
        meta = breakdown.category(Category.META_DESCRIPTION)
        assert (meta.score, meta.max_score) == (0, 10)
        assert any(issue.startswith("Meta Description scored 0/10") for issue in breakdown.issues)

    def test_scenario_b_partial_alt_coverage(self):
        """3 of 10 images without alt scores strictly between 0 and 10."""
        images = [{"src": f"/img/{i}.png", "alt": "Photo" if i >= 3 else ""} for i in range(10)]
        breakdown = score_snapshot(make_snapshot_data(images=images))
        image_score = breakdown.category(Category.IMAGE_OPTIMIZATION)
        assert 0 < image_score.score < image_score.max_score
        assert image_score.score == 7

    def test_scenario_c_strong_snapshot(self, snapshot_data):
        """A near-perfect snapshot lists every category as a strength and no issues."""
        breakdown = score_snapshot(snapshot_data)
        assert breakdown.overall >= 95
        assert breakdown.grade == Grade.EXCELLENT
        assert breakdown.issues == ()
        assert len(breakdown.strengths) == len(Category)
        assert breakdown.category(Category.TECHNICAL_SEO).score == 19


class TestIssuesAndStrengths:
    """Threshold sentences."""

    def test_issue_sentence_names_failing_rules(self):
        """Issue sentences list the failing rule descriptions."""
        verdicts = [
            make_verdict(FieldId.TITLE, VerdictStatus.MISSING) if v.field == FieldId.TITLE else v
            for v in make_all_verdicts()
        ]
        breakdown = aggregate(verdicts)
        assert breakdown.issues == (
            "Title Optimization scored 0/15 (0%). Needs attention: title length 30-60 characters.",
        )

    def test_between_thresholds_is_neither(self):
        """A category at 70% is neither issue nor strength."""
        verdicts = [
            make_verdict(FieldId.WORD_COUNT, VerdictStatus.NEEDS_IMPROVEMENT, credit=0.7)
            if v.field == FieldId.WORD_COUNT else v
            for v in make_all_verdicts()
        ]
        breakdown = aggregate(verdicts)
        content = breakdown.category(Category.CONTENT_QUALITY)
        assert content.score == 10
        assert not any(s.startswith("Content Quality") for s in breakdown.strengths)
        assert not any(s.startswith("Content Quality") for s in breakdown.issues)

    def test_zero_weight_category_skipped(self):
        """A category worth 0 points is neither an issue nor a strength."""
        policy = ScoringPolicy(
            max_scores=(
                (Category.TITLE_OPTIMIZATION, 15),
                (Category.META_DESCRIPTION, 10),
                (Category.HEADING_STRUCTURE, 10),
                (Category.IMAGE_OPTIMIZATION, 10),
                (Category.TECHNICAL_SEO, 25),
                (Category.CONTENT_QUALITY, 15),
                (Category.INDEXABILITY, 10),
                (Category.SOCIAL_OPTIMIZATION, 5),
                (Category.STRUCTURED_DATA, 0),
            ),
            grade_bands=DEFAULT_POLICY.grade_bands,
        )
        breakdown = aggregate(make_all_verdicts(), policy=policy)
        assert len(breakdown.strengths) == len(Category) - 1
        assert breakdown.overall == 100


class TestGrades:
    """Grade band lookup."""

    @pytest.mark.parametrize("score,grade", [
        (100, Grade.EXCELLENT),
        (91, Grade.EXCELLENT),
        (90, Grade.GOOD),
        (71, Grade.GOOD),
        (70, Grade.AVERAGE),
        (41, Grade.AVERAGE),
        (40, Grade.CRITICAL),
        (0, Grade.CRITICAL),
    ])
    def test_default_bands(self, score, grade):
        assert DEFAULT_POLICY.grade_for(score).grade == grade

    def test_invalid_policy_rejected(self):
        """Weights must sum to 100 and floors must decrease to 0."""
        with pytest.raises(ValueError, match="sum to 90"):
            ScoringPolicy(
                max_scores=tuple((c, 10) for c in Category),
                grade_bands=DEFAULT_POLICY.grade_bands,
            )
        with pytest.raises(ValueError, match="last grade band"):
            ScoringPolicy(
                max_scores=DEFAULT_POLICY.max_scores,
                grade_bands=(GradeBand(Grade.GOOD, 50, "#22C55E"),),
            )
