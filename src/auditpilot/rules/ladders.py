"""
AuditPilot Threshold Ladders

Each rule in the table pairs an extractor with one ladder. A ladder is a
small frozen record describing a threshold shape (one per RuleKind); its
``judge`` method maps an extracted value to a RuleOutcome.

Conventions shared by every ladder:
- None means the field was absent: MISSING, credit 0
- a value of the wrong type or shape: INVALID, credit 0
- OPTIMAL always earns credit 1.0
- NEEDS_IMPROVEMENT earns the partial credit named by the ladder

Ladders may raise TypeError/ValueError on pathological input; the
evaluator degrades those to INVALID.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, ClassVar, Union
from urllib.parse import urljoin, urlparse

from ..models import AnalysisSnapshot, RuleKind, VerdictStatus


# =============================================================================
# Outcome
# =============================================================================

@dataclass(frozen=True)
class RuleOutcome:
    """Result of judging one value."""
    status: VerdictStatus
    credit: float
    detail: str
    measured: Any = None


def _missing(detail: str = "Not present in the snapshot") -> RuleOutcome:
    return RuleOutcome(VerdictStatus.MISSING, 0.0, detail)


def _invalid(detail: str, measured: Any = None) -> RuleOutcome:
    return RuleOutcome(VerdictStatus.INVALID, 0.0, detail, measured)


def _optimal(detail: str, measured: Any = None) -> RuleOutcome:
    return RuleOutcome(VerdictStatus.OPTIMAL, 1.0, detail, measured)


def _improve(credit: float, detail: str, measured: Any = None) -> RuleOutcome:
    return RuleOutcome(VerdictStatus.NEEDS_IMPROVEMENT, credit, detail, measured)


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and not math.isnan(value)
    )


def _fmt(value: float) -> str:
    return f"{value:g}"


# =============================================================================
# Extracted Value Shapes
# =============================================================================

@dataclass(frozen=True)
class Coverage:
    """How many of ``total`` items pass a check."""
    passing: Any
    total: Any


# =============================================================================
# Ladders
# =============================================================================

@dataclass(frozen=True)
class LengthRange:
    """Text length must fall within [min_length, max_length]."""
    kind: ClassVar[RuleKind] = RuleKind.LENGTH_RANGE

    min_length: int
    max_length: int
    short_credit: float = 0.5
    long_credit: float = 0.7

    def judge(self, value: Any, snapshot: AnalysisSnapshot) -> RuleOutcome:
        if value is None:
            return _missing()
        if not isinstance(value, str):
            return _invalid(f"Expected text, got {type(value).__name__}")
        length = len(value.strip())
        if length == 0:
            return _missing("Present but empty")
        if length < self.min_length:
            return _improve(
                self.short_credit,
                f"{length} characters, shorter than the {self.min_length} minimum",
                length,
            )
        if length > self.max_length:
            return _improve(
                self.long_credit,
                f"{length} characters, longer than the {self.max_length} maximum",
                length,
            )
        return _optimal(f"{length} characters", length)


def _comparable_url(url: str) -> tuple[str, str, str, str]:
    parts = urlparse(url.strip())
    path = parts.path.rstrip("/") or "/"
    return (parts.scheme.lower(), parts.netloc.lower(), path, parts.query)


@dataclass(frozen=True)
class PresenceMatch:
    """Value must be present and point at the analysed URL."""
    kind: ClassVar[RuleKind] = RuleKind.PRESENCE_MATCH

    mismatch_credit: float = 0.5

    def judge(self, value: Any, snapshot: AnalysisSnapshot) -> RuleOutcome:
        if value is None:
            return _missing()
        if not isinstance(value, str):
            return _invalid(f"Expected a URL, got {type(value).__name__}")
        if not value.strip():
            return _missing("Present but empty")
        resolved = urljoin(snapshot.url, value.strip())
        if _comparable_url(resolved) == _comparable_url(snapshot.url):
            return _optimal("Points at the analysed page", resolved)
        return _improve(self.mismatch_credit, f"Points at {resolved}", resolved)


@dataclass(frozen=True)
class ExactCount:
    """Collection must contain exactly ``expected`` items."""
    kind: ClassVar[RuleKind] = RuleKind.EXACT_COUNT

    expected: int = 1
    zero_credit: float = 0.3
    excess_credit: float = 0.5
    noun: str = "item"

    def judge(self, value: Any, snapshot: AnalysisSnapshot) -> RuleOutcome:
        if value is None:
            return _missing()
        if isinstance(value, (list, tuple)):
            count = len(value)
        elif isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            count = value
        else:
            return _invalid(f"Expected a list of {self.noun}s, got {type(value).__name__}")
        if count == self.expected:
            return _optimal(f"{count} {self.noun}", count)
        if count == 0:
            return _improve(self.zero_credit, f"No {self.noun} found", count)
        return _improve(
            self.excess_credit,
            f"{count} {self.noun}s found, expected {self.expected}",
            count,
        )


@dataclass(frozen=True)
class Ratio:
    """
    Share of items passing a check.

    None passing (with something to check) is INVALID; partial coverage earns
    the passing share as credit.
    """
    kind: ClassVar[RuleKind] = RuleKind.RATIO

    noun: str = "item"
    check: str = "pass"

    def judge(self, value: Any, snapshot: AnalysisSnapshot) -> RuleOutcome:
        if value is None:
            return _missing()
        if not isinstance(value, Coverage):
            return _invalid("Malformed list", None)
        passing, total = value.passing, value.total
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in (passing, total)):
            return _invalid("Counts must be integers")
        if total < 0 or passing < 0 or passing > total:
            return _invalid(f"Inconsistent counts ({passing} of {total})")
        measured = {"passing": passing, "total": total}
        if total == 0:
            return _optimal(f"No {self.noun}s to check", measured)
        if passing == total:
            return _optimal(f"All {total} {self.noun}s {self.check}", measured)
        failing = total - passing
        if passing == 0:
            return _invalid(f"None of {total} {self.noun}s {self.check}", measured)
        return _improve(
            passing / total,
            f"{failing} of {total} {self.noun}s do not {self.check}",
            measured,
        )


@dataclass(frozen=True)
class Threshold:
    """Lower is better: at most ``good`` is optimal, above ``poor`` is invalid."""
    kind: ClassVar[RuleKind] = RuleKind.THRESHOLD

    good: float
    poor: float
    unit: str = ""
    improve_credit: float = 0.5

    def _with_unit(self, value: float) -> str:
        return f"{_fmt(value)} {self.unit}".strip()

    def judge(self, value: Any, snapshot: AnalysisSnapshot) -> RuleOutcome:
        if value is None:
            return _missing()
        if not _is_number(value):
            return _invalid(f"Expected a number, got {value!r}")
        if value < 0:
            return _invalid(f"Negative measurement {value}", value)
        if value <= self.good:
            return _optimal(f"{self._with_unit(value)} (good is at most {self._with_unit(self.good)})", value)
        if value <= self.poor:
            return _improve(
                self.improve_credit,
                f"{self._with_unit(value)} exceeds the {self._with_unit(self.good)} budget",
                value,
            )
        return _invalid(
            f"{self._with_unit(value)} is poor (above {self._with_unit(self.poor)})",
            value,
        )


@dataclass(frozen=True)
class Minimum:
    """Higher is better: at least ``target`` is optimal."""
    kind: ClassVar[RuleKind] = RuleKind.MINIMUM

    target: float
    noun: str = ""

    def judge(self, value: Any, snapshot: AnalysisSnapshot) -> RuleOutcome:
        if value is None:
            return _missing()
        if isinstance(value, (list, tuple)):
            value = len(value)
        if not _is_number(value):
            return _invalid(f"Expected a number, got {value!r}")
        if value < 0:
            return _invalid(f"Negative count {value}", value)
        label = f"{_fmt(value)} {self.noun}".strip()
        if value >= self.target:
            return _optimal(label, value)
        return _improve(
            value / self.target,
            f"{label}, below the target of {_fmt(self.target)}",
            value,
        )


@dataclass(frozen=True)
class Presence:
    """Value must be present and non-empty."""
    kind: ClassVar[RuleKind] = RuleKind.PRESENCE

    empty_detail: str = "Present but empty"

    def judge(self, value: Any, snapshot: AnalysisSnapshot) -> RuleOutcome:
        if value is None:
            return _missing()
        if isinstance(value, bool):
            return _optimal("Present", True) if value else _improve(0.0, self.empty_detail, False)
        if isinstance(value, str):
            text = value.strip()
            return _optimal("Present", text) if text else _improve(0.0, self.empty_detail, "")
        if isinstance(value, (list, tuple, dict)):
            count = len(value)
            if count:
                return _optimal(f"{count} found", count)
            return _improve(0.0, self.empty_detail, 0)
        return _invalid(f"Unexpected {type(value).__name__} value")


@dataclass(frozen=True)
class Directive:
    """Robots directives: noindex is invalid, nofollow needs improvement."""
    kind: ClassVar[RuleKind] = RuleKind.DIRECTIVE

    nofollow_credit: float = 0.5

    def judge(self, value: Any, snapshot: AnalysisSnapshot) -> RuleOutcome:
        if value is None:
            return _missing()
        if not isinstance(value, str):
            return _invalid(f"Expected directive text, got {type(value).__name__}")
        tokens = {t for t in value.replace(",", " ").lower().split()}
        if not tokens:
            return _missing("Present but empty")
        measured = ", ".join(sorted(tokens))
        if tokens & {"noindex", "none"}:
            return _invalid("Page is excluded from indexing", measured)
        if "nofollow" in tokens:
            return _improve(self.nofollow_credit, "Links are not followed", measured)
        return _optimal("Indexable", measured)


@dataclass(frozen=True)
class Scheme:
    """The analysed URL must be served over a secure scheme."""
    kind: ClassVar[RuleKind] = RuleKind.SCHEME

    secure: str = "https"
    insecure: str = "http"
    insecure_credit: float = 0.0

    def judge(self, value: Any, snapshot: AnalysisSnapshot) -> RuleOutcome:
        if value is None:
            return _missing()
        if not isinstance(value, str):
            return _invalid(f"Expected a URL, got {type(value).__name__}")
        scheme = urlparse(value.strip()).scheme.lower()
        if scheme == self.secure:
            return _optimal(f"Served over {self.secure.upper()}", scheme)
        if scheme == self.insecure:
            return _improve(self.insecure_credit, f"Served over plain {self.insecure.upper()}", scheme)
        return _invalid(f"Unrecognised URL scheme {scheme!r}" if scheme else "URL has no scheme", scheme or None)


Ladder = Union[
    LengthRange,
    PresenceMatch,
    ExactCount,
    Ratio,
    Threshold,
    Minimum,
    Presence,
    Directive,
    Scheme,
]

__all__ = [
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
