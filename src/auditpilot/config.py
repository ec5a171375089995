"""
AuditPilot Configuration

Runtime settings come from AP_* environment variables; scoring policy
comes from a pack file (AP_POLICY_PATH) or the bundled default.

    AP_LOG_LEVEL                      INFO
    AP_LOG_FORMAT                     json | text
    AP_POLICY_PATH                    optional YAML/JSON scoring policy pack
    AP_MAX_RECOMMENDATIONS_PER_TIER   5
    AP_BRAND_NAME                     AuditPilot
    AP_REPORT_KIND                    seo_analysis
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Mapping, Optional


LOGGER_NAME = "auditpilot"

# Extra fields copied from log records into JSON log lines
_EXTRA_FIELDS = (
    "url",
    "fingerprint",
    "overall",
    "grade",
    "verdicts",
    "recommendations",
    "pages",
    "stage",
    "document_url",
    "record_id",
    "duration_ms",
)


# =============================================================================
# Settings
# =============================================================================

@dataclass(frozen=True)
class Settings:
    """Process-wide settings."""
    log_level: str = "INFO"
    log_format: str = "json"
    policy_path: Optional[str] = None
    max_recommendations_per_tier: int = 5
    brand_name: str = "AuditPilot"
    report_kind: str = "seo_analysis"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Settings:
        """
        Read settings from AP_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ (tests)

        Raises:
            ValueError: If a numeric setting is not a positive integer
        """
        env = os.environ if environ is None else environ
        max_per_tier = int(env.get("AP_MAX_RECOMMENDATIONS_PER_TIER", "5"))
        if max_per_tier < 1:
            raise ValueError("AP_MAX_RECOMMENDATIONS_PER_TIER must be at least 1")
        return cls(
            log_level=env.get("AP_LOG_LEVEL", "INFO").upper(),
            log_format=env.get("AP_LOG_FORMAT", "json").lower(),
            policy_path=env.get("AP_POLICY_PATH") or None,
            max_recommendations_per_tier=max_per_tier,
            brand_name=env.get("AP_BRAND_NAME", "AuditPilot"),
            report_kind=env.get("AP_REPORT_KIND", "seo_analysis"),
        )


# =============================================================================
# Logging Setup (Structured JSON)
# =============================================================================

class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in _EXTRA_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def configure_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """
    Attach a single stream handler to the ``auditpilot`` logger.

    Calling it again replaces the handler rather than adding another.
    """
    settings = settings or Settings.from_env()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.log_level, logging.INFO))

    for existing in list(logger.handlers):
        if getattr(existing, "_auditpilot", False):
            logger.removeHandler(existing)

    handler = logging.StreamHandler()
    if settings.log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    handler._auditpilot = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
