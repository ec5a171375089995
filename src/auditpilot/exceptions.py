"""
AuditPilot Exception Hierarchy

Domain-specific exceptions for snapshot scoring and report synthesis.
All exceptions include error codes for tracking and logging.

Exception codes follow the pattern: AP_<CATEGORY>_<SPECIFIC>

Note: a malformed or absent snapshot field is NOT an exception. The
evaluator resolves it to a ``missing`` or ``invalid`` verdict and the run
continues.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class AuditPilotError(Exception):
    """
    Base exception for all AuditPilot errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (AP_*)
        details: Additional context about the error
        url: Analysed site URL if known
    """
    message: str
    code: str = "AP_INTERNAL_ERROR"
    details: dict[str, Any] = field(default_factory=dict)
    url: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.url:
            parts.append(f"(url: {self.url})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception for logging/CLI output."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.url:
            result["url"] = self.url
        return result


# =============================================================================
# Input Errors
# =============================================================================

@dataclass
class InvalidSnapshotError(AuditPilotError):
    """Snapshot is unusable as a whole (not a mapping, no site URL)."""
    code: str = "AP_INVALID_SNAPSHOT"


@dataclass
class UpstreamFetchError(AuditPilotError):
    """The snapshot provider failed; message is the provider's, verbatim."""
    code: str = "AP_UPSTREAM_FETCH_FAILED"


# =============================================================================
# Scoring Policy Errors
# =============================================================================

@dataclass
class PolicyLoadError(AuditPilotError):
    """Failed to load scoring policy pack from file."""
    code: str = "AP_POLICY_LOAD_ERROR"


@dataclass
class PolicyValidationError(AuditPilotError):
    """Scoring policy pack schema validation failed."""
    code: str = "AP_POLICY_VALIDATION_ERROR"


@dataclass
class PolicyVersionMismatch(AuditPilotError):
    """Scoring policy pack schema version is not supported."""
    code: str = "AP_POLICY_VERSION_MISMATCH"


# =============================================================================
# Output Errors
# =============================================================================

@dataclass
class RenderError(AuditPilotError):
    """The PDF backend failed to produce a document."""
    code: str = "AP_RENDER_ERROR"


@dataclass
class PersistenceError(AuditPilotError):
    """
    Storing the rendered report failed.

    Attributes:
        stage: "upload" or "metadata" (see PersistenceStage)
        document_url: Set when the upload succeeded but the metadata write
            failed, so the caller can retry the metadata write alone.
    """
    code: str = "AP_PERSISTENCE_FAILED"
    stage: Optional[str] = None
    document_url: Optional[str] = None

    def __str__(self) -> str:
        text = super().__str__()
        if self.stage:
            text = f"{text} [stage: {self.stage}]"
        return text

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.stage:
            result["stage"] = str(getattr(self.stage, "value", self.stage))
        if self.document_url:
            result["document_url"] = self.document_url
        return result
