"""
AuditPilot Rules

The static threshold rule table and the ladder shapes it is built from.

Usage:
    from auditpilot.rules import RULE_TABLE, rules_for

    for rule in RULE_TABLE:
        outcome = rule.apply(snapshot)
"""
from __future__ import annotations

from .ladders import (
    Coverage,
    Directive,
    ExactCount,
    Ladder,
    LengthRange,
    Minimum,
    Presence,
    PresenceMatch,
    Ratio,
    RuleOutcome,
    Scheme,
    Threshold,
)
from .table import (
    OPEN_GRAPH_TAGS,
    RULE_TABLE,
    RULE_TABLE_VERSION,
    Rule,
    fields_in,
    rules_for,
)

__all__ = [
    # Table
    "RULE_TABLE",
    "RULE_TABLE_VERSION",
    "OPEN_GRAPH_TAGS",
    "Rule",
    "rules_for",
    "fields_in",
    # Ladders
    "Coverage",
    "Directive",
    "ExactCount",
    "Ladder",
    "LengthRange",
    "Minimum",
    "Presence",
    "PresenceMatch",
    "Ratio",
    "RuleOutcome",
    "Scheme",
    "Threshold",
]
