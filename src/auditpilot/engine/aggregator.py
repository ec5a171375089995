"""
AuditPilot Score Aggregator

Turns verdicts (and optional raw sub-scores) into a ScoreBreakdown.

Scoring per category:
    fraction = weighted mean of verdict credits (weight 1 each) and raw
               sub-scores (score / 100, their own weight)
    score    = floor(max_score * fraction)

Flooring keeps every category score an integer in [0, max_score], keeps a
category at its maximum only when every input is perfect, and makes the
overall score an exact sum of category scores.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Sequence

from ..models import (
    DEFAULT_POLICY,
    AnalysisSnapshot,
    Category,
    CategoryInput,
    CategoryScore,
    ComplianceVerdict,
    ScoreBreakdown,
    ScoringPolicy,
)


logger = logging.getLogger(__name__)

_EPSILON = 1e-9


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def category_inputs_from_snapshot(snapshot: AnalysisSnapshot) -> list[CategoryInput]:
    """
    Raw sub-scores carried by the snapshot itself.

    Lighthouse performance scores (desktop, mobile) feed Technical SEO.
    """
    inputs = []
    for name, device in (("desktop", snapshot.performance.desktop),
                         ("mobile", snapshot.performance.mobile)):
        if device is None or device.score_percent is None:
            continue
        inputs.append(CategoryInput(
            category=Category.TECHNICAL_SEO,
            score=device.score_percent,
            weight=1.0,
            source=f"lighthouse:{name}",
        ))
    return inputs


@dataclass
class ScoreAggregator:
    """
    Aggregates verdicts into a weighted 0-100 score.

    Usage:
        aggregator = ScoreAggregator(policy)
        breakdown = aggregator.aggregate(verdicts, category_inputs_from_snapshot(snapshot))
    """

    policy: ScoringPolicy = DEFAULT_POLICY

    def aggregate(
        self,
        verdicts: Sequence[ComplianceVerdict],
        raw_sub_scores: Iterable[CategoryInput] = (),
    ) -> ScoreBreakdown:
        """
        Compute the score breakdown.

        Args:
            verdicts: Verdicts from the evaluator
            raw_sub_scores: Additional 0-100 sub-scores per category

        Returns:
            ScoreBreakdown whose overall equals the sum of category scores
        """
        raw = list(raw_sub_scores)
        categories = tuple(
            self._score_category(category, verdicts, raw)
            for category in self.policy.categories
        )
        overall = sum(c.score for c in categories)
        band = self.policy.grade_for(overall)

        issues = []
        strengths = []
        for entry in categories:
            if entry.max_score == 0:
                continue
            if entry.ratio < self.policy.issue_threshold:
                issues.append(self._issue_sentence(entry, verdicts))
            elif entry.ratio >= self.policy.strength_threshold:
                strengths.append(self._strength_sentence(entry))

        logger.debug(
            f"Aggregated score {overall}/100 ({band.grade.value})",
            extra={"overall": overall, "grade": band.grade.value},
        )
        return ScoreBreakdown(
            overall=overall,
            grade=band.grade,
            grade_color=band.color,
            categories=categories,
            issues=tuple(issues),
            strengths=tuple(strengths),
        )

    def _score_category(
        self,
        category: Category,
        verdicts: Sequence[ComplianceVerdict],
        raw: Sequence[CategoryInput],
    ) -> CategoryScore:
        max_score = self.policy.max_score(category)

        earned = 0.0
        weight = 0.0
        for verdict in verdicts:
            if verdict.category == category:
                earned += _clamp(verdict.credit)
                weight += 1.0
        for item in raw:
            if item.category != category or item.weight <= 0 or not math.isfinite(item.score):
                continue
            earned += _clamp(item.score / 100) * item.weight
            weight += item.weight

        fraction = earned / weight if weight else 0.0
        score = math.floor(max_score * fraction + _EPSILON)
        return CategoryScore(
            category=category,
            score=int(_clamp(score, 0, max_score)),
            max_score=max_score,
        )

    @staticmethod
    def _issue_sentence(entry: CategoryScore, verdicts: Sequence[ComplianceVerdict]) -> str:
        failing = [
            v.rule_description[0].lower() + v.rule_description[1:]
            for v in verdicts
            if v.category == entry.category and not v.is_optimal
        ]
        sentence = f"{entry.label} scored {entry.score}/{entry.max_score} ({round(entry.ratio * 100)}%)."
        if failing:
            sentence += " Needs attention: " + "; ".join(failing) + "."
        return sentence

    @staticmethod
    def _strength_sentence(entry: CategoryScore) -> str:
        return f"{entry.label} is strong at {entry.score}/{entry.max_score} ({round(entry.ratio * 100)}%)."


def aggregate(
    verdicts: Sequence[ComplianceVerdict],
    raw_sub_scores: Iterable[CategoryInput] = (),
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> ScoreBreakdown:
    """
    Aggregate verdicts under a scoring policy.

    Convenience function that creates a temporary aggregator.
    """
    return ScoreAggregator(policy).aggregate(verdicts, raw_sub_scores)
