"""
AuditPilot Verdict Models

ComplianceVerdict: the judgement of one snapshot field against one rule.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .enums import Category, FieldId, VerdictStatus


@dataclass(frozen=True)
class ComplianceVerdict:
    """
    Outcome of one rule applied to one snapshot.

    Attributes:
        field: Snapshot field that was judged
        category: Score category the field feeds
        status: optimal / needs_improvement / missing / invalid
        measured: The measured value (JSON-friendly), None when absent
        rule_id: Identifier of the rule that produced the verdict
        rule_description: Human-readable rule, e.g. "Title length 30-60 characters"
        credit: Fraction (0.0-1.0) of the field's share of its category earned
        detail: Short explanation of the outcome
    """
    field: FieldId
    category: Category
    status: VerdictStatus
    measured: Any
    rule_id: str
    rule_description: str
    credit: float
    detail: str = ""

    @property
    def is_optimal(self) -> bool:
        return self.status == VerdictStatus.OPTIMAL

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "field": self.field.value,
            "category": self.category.value,
            "status": self.status.value,
            "measured": self.measured,
            "rule_id": self.rule_id,
            "rule_description": self.rule_description,
            "credit": self.credit,
            "detail": self.detail,
        }
