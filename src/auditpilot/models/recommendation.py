"""
AuditPilot Recommendation Model

A remediation action for a failing field, tied to a named standard.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .enums import Category, FieldId, Priority, VerdictStatus


@dataclass(frozen=True)
class Recommendation:
    """
    One remediation action.

    General best-practice recommendations (emitted when nothing fails)
    carry no field, category or status.

    Attributes:
        title: Short imperative title, unique per report once normalized
        description: What to change and how
        priority: high / medium / low
        impact: Estimated score points recovered (positive)
        standard: Reference to the standard behind the advice
    """
    title: str
    description: str
    priority: Priority
    impact: int
    standard: Optional[str] = None
    field: Optional[FieldId] = None
    category: Optional[Category] = None
    status: Optional[VerdictStatus] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        result: dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "impact": self.impact,
        }
        if self.standard:
            result["standard"] = self.standard
        if self.field is not None:
            result["field"] = self.field.value
        if self.category is not None:
            result["category"] = self.category.value
        if self.status is not None:
            result["status"] = self.status.value
        return result
