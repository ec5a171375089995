"""
AuditPilot Compliance Evaluator

Applies the threshold rule table to a snapshot, producing one
ComplianceVerdict per rule.

Key features:
- Total: every rule yields a verdict, absent fields become MISSING
- Pure: no I/O, the snapshot is never modified
- Degrading: a rule that chokes on a malformed value yields INVALID
  instead of aborting the run
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Union

from ..models import AnalysisSnapshot, ComplianceVerdict, VerdictStatus
from ..rules import RULE_TABLE, Rule, RuleOutcome


logger = logging.getLogger(__name__)

SnapshotInput = Union[AnalysisSnapshot, Mapping[str, Any]]


def as_snapshot(data: SnapshotInput) -> AnalysisSnapshot:
    """Accept a parsed snapshot or a raw JSON mapping."""
    if isinstance(data, AnalysisSnapshot):
        return data
    return AnalysisSnapshot.from_dict(data)


@dataclass
class ComplianceEvaluator:
    """
    Evaluates snapshots against a rule table.

    Usage:
        evaluator = ComplianceEvaluator()
        verdicts = evaluator.evaluate(snapshot)

        failing = [v for v in verdicts if not v.is_optimal]
    """

    rules: tuple[Rule, ...] = RULE_TABLE

    def evaluate(self, snapshot: SnapshotInput) -> list[ComplianceVerdict]:
        """
        Evaluate every rule against the snapshot.

        Args:
            snapshot: AnalysisSnapshot or raw snapshot mapping

        Returns:
            One verdict per rule, in rule table order

        Raises:
            InvalidSnapshotError: Only when a raw mapping cannot be parsed
        """
        snapshot = as_snapshot(snapshot)
        verdicts = [self._evaluate_rule(rule, snapshot) for rule in self.rules]
        logger.debug(
            f"Evaluated {len(verdicts)} rules",
            extra={"url": snapshot.url, "verdicts": len(verdicts)},
        )
        return verdicts

    def _evaluate_rule(self, rule: Rule, snapshot: AnalysisSnapshot) -> ComplianceVerdict:
        try:
            outcome = rule.apply(snapshot)
        except (TypeError, ValueError, ArithmeticError, AttributeError) as e:
            outcome = RuleOutcome(
                status=VerdictStatus.INVALID,
                credit=0.0,
                detail=f"Could not be measured: {e}",
            )

        logger.debug(f"{rule.rule_id}: {outcome.status.value} ({outcome.detail})")
        return ComplianceVerdict(
            field=rule.field,
            category=rule.category,
            status=outcome.status,
            measured=outcome.measured,
            rule_id=rule.rule_id,
            rule_description=rule.description,
            credit=outcome.credit,
            detail=outcome.detail,
        )


def evaluate(snapshot: SnapshotInput) -> list[ComplianceVerdict]:
    """
    Evaluate a snapshot against the standard rule table.

    Convenience function that creates a temporary evaluator.
    """
    return ComplianceEvaluator().evaluate(snapshot)
