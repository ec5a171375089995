"""
AuditPilot Scoring Policy Packs

Schema validation and loading for scoring policy packs.

Scoring policy packs are YAML or JSON files that set the category point
allocation, the grade ladder, the issue/strength thresholds and the
recommendation priority cut-offs.

Usage:
    from auditpilot.packs import load_scoring_policy

    # Bundled default pack
    policy = load_scoring_policy()

    # Custom pack
    policy = load_scoring_policy("path/to/strict.yaml")
"""
from __future__ import annotations

from .loader import (
    DEFAULT_PACK_PATH,
    ScoringPolicyLoader,
    load_scoring_policy,
    load_scoring_policy_from_string,
)
from .schema import (
    SCHEMA_VERSION,
    GradeBandSchema,
    PriorityCutoffsSchema,
    ScoringPolicySchema,
    check_schema_version,
    validate_scoring_policy,
)

__all__ = [
    # Version
    "SCHEMA_VERSION",
    # Loader
    "DEFAULT_PACK_PATH",
    "ScoringPolicyLoader",
    "load_scoring_policy",
    "load_scoring_policy_from_string",
    # Validation
    "validate_scoring_policy",
    "check_schema_version",
    # Schemas
    "ScoringPolicySchema",
    "GradeBandSchema",
    "PriorityCutoffsSchema",
]
