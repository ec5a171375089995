"""
AuditPilot Scoring Policy Pack Schemas

Pydantic models for validating scoring policy YAML/JSON files. They map to
auditpilot.models.ScoringPolicy.

Schema versioning:
- schema_version field tracks breaking changes
- Loaders reject packs whose major version differs
"""
from __future__ import annotations

from typing import Any, Literal, Optional, get_args

from pydantic import BaseModel, Field, model_validator


# =============================================================================
# Schema Version
# =============================================================================

SCHEMA_VERSION = "1.0.0"


# =============================================================================
# Enums as Literals (for YAML validation)
# =============================================================================

CategoryValue = Literal[
    "title_optimization", "meta_description", "heading_structure",
    "image_optimization", "technical_seo", "content_quality",
    "indexability", "social_optimization", "structured_data",
]

GradeValue = Literal["excellent", "good", "average", "critical"]

CATEGORY_VALUES: tuple[str, ...] = get_args(CategoryValue)


# =============================================================================
# Pack Parts
# =============================================================================

class GradeBandSchema(BaseModel):
    """Schema for one grade band."""
    grade: GradeValue
    min_score: int = Field(..., ge=0, le=100, description="Lowest overall score in the band")
    color: str = Field(..., pattern=r"^#[0-9A-Fa-f]{6}$", description="Hex colour used in reports")

    model_config = {"extra": "forbid"}


class PriorityCutoffsSchema(BaseModel):
    """Schema for recommendation priority cut-offs."""
    high_weight_min: int = Field(
        10, ge=0, le=100,
        description="Categories worth at least this escalate missing/invalid fields to high",
    )
    low_weight_max: int = Field(
        5, ge=0, le=100,
        description="Categories worth at most this demote needs_improvement fields to low",
    )

    model_config = {"extra": "forbid"}


# =============================================================================
# Scoring Policy Pack
# =============================================================================

class ScoringPolicySchema(BaseModel):
    """Top-level schema for a scoring policy pack."""
    schema_version: str = Field(SCHEMA_VERSION, description="Schema version for compatibility")
    name: str = Field(..., description="Policy name (e.g., 'default')")
    version: str = Field(..., description="Policy version string")
    description: Optional[str] = None

    max_scores: dict[CategoryValue, int] = Field(..., description="Points per category, summing to 100")
    grade_bands: list[GradeBandSchema] = Field(..., min_length=1, description="Best band first")
    issue_threshold: float = Field(0.6, gt=0, lt=1)
    strength_threshold: float = Field(0.9, gt=0, le=1)
    priority: PriorityCutoffsSchema = Field(default_factory=PriorityCutoffsSchema)

    @model_validator(mode="after")
    def validate_policy(self) -> "ScoringPolicySchema":
        """Check the point allocation and grade ladder."""
        missing = [c for c in CATEGORY_VALUES if c not in self.max_scores]
        if missing:
            raise ValueError(f"max_scores is missing categories: {', '.join(missing)}")
        if any(points < 0 for points in self.max_scores.values()):
            raise ValueError("max_scores must be non-negative")
        total = sum(self.max_scores.values())
        if total != 100:
            raise ValueError(f"max_scores must sum to 100, got {total}")

        floors = [band.min_score for band in self.grade_bands]
        if any(a <= b for a, b in zip(floors, floors[1:])):
            raise ValueError("grade_bands must be ordered by strictly decreasing min_score")
        if floors[-1] != 0:
            raise ValueError("the last grade band must have min_score 0")
        grades = [band.grade for band in self.grade_bands]
        if len(set(grades)) != len(grades):
            raise ValueError("each grade may appear only once")

        if self.issue_threshold >= self.strength_threshold:
            raise ValueError("issue_threshold must be below strength_threshold")
        return self

    model_config = {
        "extra": "forbid",  # Reject unknown fields
    }


# =============================================================================
# Validation Helpers
# =============================================================================

def validate_scoring_policy(data: dict[str, Any]) -> ScoringPolicySchema:
    """
    Validate a scoring policy dictionary against the schema.

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return ScoringPolicySchema.model_validate(data)


def check_schema_version(data: dict[str, Any]) -> bool:
    """True when the pack's major schema version matches SCHEMA_VERSION."""
    pack_version = str(data.get("schema_version", SCHEMA_VERSION))
    return pack_version.split(".")[0] == SCHEMA_VERSION.split(".")[0]
