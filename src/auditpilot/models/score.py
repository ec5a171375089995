"""
AuditPilot Score Models

Key components:
- CategoryInput: A raw 0-100 sub-score fed into a category (e.g. Lighthouse)
- CategoryScore: Points earned by one category out of its maximum
- ScoreBreakdown: Overall score, grade, issues and strengths
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .enums import Category, Grade
from .policy import TOTAL_POINTS


@dataclass(frozen=True)
class CategoryInput:
    """
    A raw sub-score supplied alongside the verdicts.

    Attributes:
        category: Category the sub-score feeds
        score: Value on a 0-100 scale
        weight: Weight relative to a single verdict (which weighs 1.0)
        source: Where the value came from, e.g. "lighthouse:mobile"
    """
    category: Category
    score: float
    weight: float = 1.0
    source: str = ""


@dataclass(frozen=True)
class CategoryScore:
    """Integer points earned by a category."""
    category: Category
    score: int
    max_score: int

    @property
    def label(self) -> str:
        return self.category.label

    @property
    def ratio(self) -> float:
        return self.score / self.max_score if self.max_score else 0.0

    @property
    def headroom(self) -> int:
        return self.max_score - self.score

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "label": self.label,
            "score": self.score,
            "max_score": self.max_score,
        }


@dataclass(frozen=True)
class ScoreBreakdown:
    """
    Aggregated score for a snapshot.

    Invariants:
        overall == sum of category scores
        sum of category max scores == 100
    """
    overall: int
    grade: Grade
    grade_color: str
    categories: tuple[CategoryScore, ...]
    issues: tuple[str, ...] = ()
    strengths: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        errors = []
        for entry in self.categories:
            if not 0 <= entry.score <= entry.max_score:
                errors.append(f"{entry.category.value} scores {entry.score} of {entry.max_score}")
        total = sum(entry.score for entry in self.categories)
        if self.overall != total:
            errors.append(f"overall {self.overall} != sum of category scores {total}")
        max_total = sum(entry.max_score for entry in self.categories)
        if max_total != TOTAL_POINTS:
            errors.append(f"category maxima sum to {max_total}, expected {TOTAL_POINTS}")

        if errors:
            raise ValueError("Invalid score breakdown:\n" + "\n".join(f"  - {e}" for e in errors))

    def category(self, category: Category) -> CategoryScore:
        for entry in self.categories:
            if entry.category == category:
                return entry
        raise KeyError(category)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "overall": self.overall,
            "grade": self.grade.value,
            "grade_label": self.grade.label,
            "grade_color": self.grade_color,
            "categories": [c.to_dict() for c in self.categories],
            "issues": list(self.issues),
            "strengths": list(self.strengths),
        }
