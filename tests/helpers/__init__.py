"""
Test helpers for AuditPilot.

Modules:
- factories: snapshot, verdict and recommendation builders
"""
from .factories import (
    OPTIMAL_META,
    OPTIMAL_TITLE,
    SITE_URL,
    make_all_verdicts,
    make_recommendation,
    make_snapshot_data,
    make_verdict,
)

__all__ = [
    "OPTIMAL_META",
    "OPTIMAL_TITLE",
    "SITE_URL",
    "make_all_verdicts",
    "make_recommendation",
    "make_snapshot_data",
    "make_verdict",
]
