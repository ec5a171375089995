"""
AuditPilot Scoring Policy Loader

Loads and validates scoring policy packs from YAML or JSON files and
converts the Pydantic schema into the ScoringPolicy domain model.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from ..exceptions import PolicyLoadError, PolicyValidationError, PolicyVersionMismatch
from ..models import Category, Grade, GradeBand, ScoringPolicy
from .schema import (
    SCHEMA_VERSION,
    ScoringPolicySchema,
    check_schema_version,
    validate_scoring_policy,
)


logger = logging.getLogger(__name__)

DEFAULT_PACK_PATH = Path(__file__).parent / "data" / "default.yaml"


# =============================================================================
# Schema to Model Conversion
# =============================================================================

def _convert_policy(schema: ScoringPolicySchema) -> ScoringPolicy:
    """Convert ScoringPolicySchema to ScoringPolicy (categories in report order)."""
    return ScoringPolicy(
        max_scores=tuple((category, schema.max_scores[category.value]) for category in Category),
        grade_bands=tuple(
            GradeBand(grade=Grade(band.grade), min_score=band.min_score, color=band.color.upper())
            for band in schema.grade_bands
        ),
        issue_threshold=schema.issue_threshold,
        strength_threshold=schema.strength_threshold,
        high_weight_min=schema.priority.high_weight_min,
        low_weight_max=schema.priority.low_weight_max,
        name=schema.name,
        version=schema.version,
    )


# =============================================================================
# Loader
# =============================================================================

class ScoringPolicyLoader:
    """
    Loads scoring policy packs from YAML or JSON files.

    Usage:
        loader = ScoringPolicyLoader()
        policy = loader.load("path/to/policy.yaml")
    """

    def __init__(self, strict_version: bool = True):
        """
        Initialize the loader.

        Args:
            strict_version: If True, reject packs with incompatible schema versions
        """
        self.strict_version = strict_version

    def load(self, path: Union[str, Path]) -> ScoringPolicy:
        """
        Load a scoring policy pack from a file.

        Raises:
            PolicyLoadError: If file cannot be read or parsed
            PolicyValidationError: If validation fails
            PolicyVersionMismatch: If schema version incompatible
        """
        path = Path(path)
        try:
            data = self._load_file(path)
        except (OSError, UnicodeDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise PolicyLoadError(
                message=f"Failed to load scoring policy pack: {e}",
                details={"path": str(path), "error": str(e)},
            ) from e

        policy = self.build(data, source=str(path))
        logger.info(f"Loaded scoring policy {policy.name} v{policy.version} from {path}")
        return policy

    def load_string(self, content: str, format: str = "yaml") -> ScoringPolicy:
        """
        Load a scoring policy pack from a YAML or JSON string.

        Raises:
            PolicyLoadError: If content cannot be parsed
            PolicyValidationError: If validation fails
        """
        try:
            data = json.loads(content) if format == "json" else yaml.safe_load(content)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise PolicyLoadError(
                message=f"Failed to parse scoring policy pack: {e}",
                details={"format": format, "error": str(e)},
            ) from e
        return self.build(data, source="<string>")

    def build(self, data: Any, source: str = "") -> ScoringPolicy:
        """Validate already-decoded pack data and convert it."""
        if not isinstance(data, dict):
            raise PolicyLoadError(
                message="Scoring policy pack must be a mapping",
                details={"path": source, "type": type(data).__name__},
            )

        if self.strict_version and not check_schema_version(data):
            pack_version = data.get("schema_version", "unknown")
            raise PolicyVersionMismatch(
                message=f"Schema version mismatch: pack has {pack_version}, expected {SCHEMA_VERSION}",
                details={
                    "pack_version": pack_version,
                    "expected_version": SCHEMA_VERSION,
                },
            )

        try:
            schema = validate_scoring_policy(data)
        except ValidationError as e:
            raise PolicyValidationError(
                message=f"Scoring policy pack validation failed: {e.error_count()} errors",
                details={"errors": e.errors(include_url=False), "path": source},
            ) from e

        try:
            return _convert_policy(schema)
        except ValueError as e:
            raise PolicyValidationError(
                message="Scoring policy invariants violated",
                details={"errors": str(e), "path": source},
            ) from e

    def _load_file(self, path: Path) -> Any:
        """Load data from YAML or JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)


# =============================================================================
# Convenience Functions
# =============================================================================

def load_scoring_policy(path: Optional[Union[str, Path]] = None) -> ScoringPolicy:
    """
    Load a scoring policy pack (the bundled default when path is None).

    Convenience function that creates a temporary loader.
    """
    return ScoringPolicyLoader().load(path or DEFAULT_PACK_PATH)


def load_scoring_policy_from_string(content: str, format: str = "yaml") -> ScoringPolicy:
    """Load a scoring policy pack from a string."""
    return ScoringPolicyLoader().load_string(content, format)
