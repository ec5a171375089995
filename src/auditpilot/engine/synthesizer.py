"""
AuditPilot Recommendation Synthesizer

Builds the ranked remediation list for a report.

Steps:
1. One candidate per non-optimal verdict, from the catalog template for
   (field, status); unmapped pairs fall back to a template built from the
   rule description
2. Priority from category weight and status, impact from the unearned
   share of the category (capped by the category's headroom)
3. Deduplicate by normalized title, keeping the highest-priority instance
4. Stable sort: priority first, then impact descending

When every verdict is optimal a fixed list of general best practices is
returned, so the result is never empty.
"""
from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from ..canon import normalize_title
from ..models import (
    DEFAULT_POLICY,
    Category,
    ComplianceVerdict,
    Priority,
    Recommendation,
    ScoreBreakdown,
    ScoringPolicy,
    VerdictStatus,
)
from .catalog import CATALOG, GENERAL_RECOMMENDATIONS, RemediationTemplate


logger = logging.getLogger(__name__)


def priority_for(status: VerdictStatus, max_score: int, policy: ScoringPolicy = DEFAULT_POLICY) -> Priority:
    """
    Priority tier of a failing field.

    High: missing/invalid on a heavy category (max_score >= high_weight_min).
    Low: needs_improvement on a light category (max_score <= low_weight_max).
    Medium: everything else.
    """
    if status in (VerdictStatus.MISSING, VerdictStatus.INVALID) and max_score >= policy.high_weight_min:
        return Priority.HIGH
    if status == VerdictStatus.NEEDS_IMPROVEMENT and max_score <= policy.low_weight_max:
        return Priority.LOW
    return Priority.MEDIUM


def estimate_impact(credit: float, max_score: int, fields_in_category: int, headroom: int) -> int:
    """
    Points the fix is expected to recover.

    The field's share of its category (max_score / fields) not yet earned,
    rounded half up, capped by the category headroom, and at least 1.
    """
    share = max_score / max(fields_in_category, 1)
    unearned = share * (1.0 - max(0.0, min(1.0, credit)))
    impact = math.floor(unearned + 0.5)
    return max(1, min(impact, headroom))


def _fallback_template(verdict: ComplianceVerdict) -> RemediationTemplate:
    description = verdict.rule_description
    return RemediationTemplate(
        title=f"Review: {description[0].lower()}{description[1:]}",
        description=f"{verdict.field.value.replace('_', ' ').capitalize()} is "
                    f"{verdict.status.label} ({{detail}}). Target: {description}.",
    )


@dataclass
class RecommendationSynthesizer:
    """
    Synthesizes recommendations from verdicts and the score breakdown.

    Usage:
        synthesizer = RecommendationSynthesizer()
        recommendations = synthesizer.synthesize(verdicts, breakdown)
    """

    policy: ScoringPolicy = DEFAULT_POLICY
    catalog: Mapping = field(default_factory=lambda: CATALOG)

    def synthesize(
        self,
        verdicts: Sequence[ComplianceVerdict],
        breakdown: ScoreBreakdown,
    ) -> list[Recommendation]:
        """
        Produce the deduplicated, priority-sorted recommendation list.

        Args:
            verdicts: Verdicts from the evaluator
            breakdown: Score breakdown computed from the same verdicts

        Returns:
            Non-empty list of recommendations
        """
        fields_per_category: Counter[Category] = Counter(v.category for v in verdicts)
        candidates = [
            self._from_verdict(v, breakdown, fields_per_category[v.category])
            for v in verdicts
            if v.status != VerdictStatus.OPTIMAL
        ]
        if not candidates:
            return general_recommendations()

        unique = deduplicate(candidates)
        ranked = sorted(unique, key=lambda r: (r.priority.rank, -r.impact))
        logger.debug(
            f"Synthesized {len(ranked)} recommendations from {len(candidates)} candidates",
            extra={"recommendations": len(ranked)},
        )
        return ranked

    def _from_verdict(
        self,
        verdict: ComplianceVerdict,
        breakdown: ScoreBreakdown,
        fields_in_category: int,
    ) -> Recommendation:
        template = self.catalog.get((verdict.field, verdict.status))
        if template is None:
            logger.warning(
                f"No remediation template for ({verdict.field.value}, {verdict.status.value}), "
                f"using rule description"
            )
            template = _fallback_template(verdict)

        category_score = breakdown.category(verdict.category)
        return Recommendation(
            title=template.title,
            description=template.describe(verdict.detail),
            priority=priority_for(verdict.status, category_score.max_score, self.policy),
            impact=estimate_impact(
                verdict.credit,
                category_score.max_score,
                fields_in_category,
                category_score.headroom,
            ),
            standard=template.standard,
            field=verdict.field,
            category=verdict.category,
            status=verdict.status,
        )


def deduplicate(recommendations: Sequence[Recommendation]) -> list[Recommendation]:
    """
    Drop recommendations whose normalized title was already seen.

    The surviving instance is the one with the best priority (then the
    highest impact, then the earliest); results keep generation order.
    """
    best: dict[str, tuple[int, Recommendation]] = {}
    for index, rec in enumerate(recommendations):
        key = normalize_title(rec.title)
        current = best.get(key)
        if current is None:
            best[key] = (index, rec)
            continue
        kept = current[1]
        if (rec.priority.rank, -rec.impact) < (kept.priority.rank, -kept.impact):
            best[key] = (current[0], rec)
    return [rec for _, rec in sorted(best.values(), key=lambda pair: pair[0])]


def general_recommendations() -> list[Recommendation]:
    """Fixed best-practice list used when nothing needs fixing."""
    return [
        Recommendation(
            title=template.title,
            description=template.description,
            priority=Priority.LOW,
            impact=1,
            standard=template.standard,
        )
        for template in GENERAL_RECOMMENDATIONS
    ]


def synthesize(
    verdicts: Sequence[ComplianceVerdict],
    breakdown: ScoreBreakdown,
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> list[Recommendation]:
    """
    Synthesize recommendations under a scoring policy.

    Convenience function that creates a temporary synthesizer.
    """
    return RecommendationSynthesizer(policy=policy).synthesize(verdicts, breakdown)
