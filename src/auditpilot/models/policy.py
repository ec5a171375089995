"""
AuditPilot Scoring Policy

The tunable half of scoring: category point allocation, grade bands,
issue/strength thresholds and the priority cut-offs used when ranking
recommendations. Policies are usually loaded from a pack file
(see auditpilot.packs); DEFAULT_POLICY mirrors the bundled default pack.

Invariants (checked on construction):
- every Category appears exactly once
- max scores are non-negative and sum to 100
- grade band floors strictly decrease and the last floor is 0
- 0 < issue_threshold < strength_threshold <= 1
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .enums import Category, Grade


TOTAL_POINTS = 100


@dataclass(frozen=True)
class GradeBand:
    """Scores at or above min_score (and below the next band) get this grade."""
    grade: Grade
    min_score: int
    color: str


@dataclass(frozen=True)
class ScoringPolicy:
    """
    Scoring policy.

    Attributes:
        max_scores: (category, max points) pairs in report order
        grade_bands: Bands ordered from best to worst
        issue_threshold: Category ratio below which an issue is reported
        strength_threshold: Category ratio at or above which a strength is reported
        high_weight_min: Categories worth at least this many points escalate
            missing/invalid fields to high priority
        low_weight_max: Categories worth at most this many points demote
            needs_improvement fields to low priority
    """
    max_scores: tuple[tuple[Category, int], ...]
    grade_bands: tuple[GradeBand, ...]
    issue_threshold: float = 0.6
    strength_threshold: float = 0.9
    high_weight_min: int = 10
    low_weight_max: int = 5
    name: str = "default"
    version: str = "1.0.0"

    def __post_init__(self) -> None:
        errors = []

        categories = [c for c, _ in self.max_scores]
        if sorted(categories, key=lambda c: c.value) != sorted(Category, key=lambda c: c.value):
            errors.append("max_scores must name every category exactly once")
        if any(points < 0 for _, points in self.max_scores):
            errors.append("max scores must be non-negative")
        total = sum(points for _, points in self.max_scores)
        if total != TOTAL_POINTS:
            errors.append(f"max scores sum to {total}, expected {TOTAL_POINTS}")

        floors = [band.min_score for band in self.grade_bands]
        if not floors:
            errors.append("at least one grade band is required")
        else:
            if any(a <= b for a, b in zip(floors, floors[1:])):
                errors.append("grade band floors must strictly decrease")
            if floors[-1] != 0:
                errors.append("the last grade band must start at 0")
            if floors[0] > TOTAL_POINTS:
                errors.append("grade band floors must not exceed 100")

        if not 0 < self.issue_threshold < self.strength_threshold <= 1:
            errors.append("thresholds must satisfy 0 < issue < strength <= 1")

        if errors:
            raise ValueError("Invalid scoring policy:\n" + "\n".join(f"  - {e}" for e in errors))

    @property
    def categories(self) -> tuple[Category, ...]:
        return tuple(c for c, _ in self.max_scores)

    def max_score(self, category: Category) -> int:
        for entry, points in self.max_scores:
            if entry == category:
                return points
        raise KeyError(category)

    def grade_for(self, score: int) -> GradeBand:
        """Return the band containing score (scores below 0 fall in the last band)."""
        for band in self.grade_bands:
            if score >= band.min_score:
                return band
        return self.grade_bands[-1]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "max_scores": {c.value: points for c, points in self.max_scores},
            "grade_bands": [
                {"grade": b.grade.value, "min_score": b.min_score, "color": b.color}
                for b in self.grade_bands
            ],
            "issue_threshold": self.issue_threshold,
            "strength_threshold": self.strength_threshold,
            "high_weight_min": self.high_weight_min,
            "low_weight_max": self.low_weight_max,
        }


DEFAULT_POLICY = ScoringPolicy(
    max_scores=(
        (Category.TITLE_OPTIMIZATION, 15),
        (Category.META_DESCRIPTION, 10),
        (Category.HEADING_STRUCTURE, 10),
        (Category.IMAGE_OPTIMIZATION, 10),
        (Category.TECHNICAL_SEO, 20),
        (Category.CONTENT_QUALITY, 15),
        (Category.INDEXABILITY, 10),
        (Category.SOCIAL_OPTIMIZATION, 5),
        (Category.STRUCTURED_DATA, 5),
    ),
    grade_bands=(
        GradeBand(Grade.EXCELLENT, 91, "#8B5CF6"),
        GradeBand(Grade.GOOD, 71, "#22C55E"),
        GradeBand(Grade.AVERAGE, 41, "#EAB308"),
        GradeBand(Grade.CRITICAL, 0, "#EF4444"),
    ),
)
