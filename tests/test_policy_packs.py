"""
Tests for scoring policy packs.

Validates:
- The bundled default pack matches DEFAULT_POLICY
- YAML and JSON loading
- Validation errors (point total, missing categories, unknown keys, grade ladder)
- Schema version compatibility
"""
from __future__ import annotations

import json

import pytest
import yaml

from auditpilot.exceptions import PolicyLoadError, PolicyValidationError, PolicyVersionMismatch
from auditpilot.models import DEFAULT_POLICY, Category, Grade
from auditpilot.packs import (
    DEFAULT_PACK_PATH,
    ScoringPolicyLoader,
    load_scoring_policy,
    load_scoring_policy_from_string,
)


@pytest.fixture
def pack_data():
    """The default pack as a mutable dictionary."""
    with open(DEFAULT_PACK_PATH, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


# =============================================================================
# Loading
# =============================================================================

class TestLoading:
    """Reading packs from files and strings."""

    def test_default_pack_matches_builtin(self):
        """The shipped YAML and the in-code default stay in sync."""
        assert load_scoring_policy() == DEFAULT_POLICY

    def test_load_yaml_file(self, tmp_path, pack_data):
        pack_data["name"] = "custom"
        path = tmp_path / "custom.yaml"
        path.write_text(yaml.safe_dump(pack_data))

        policy = load_scoring_policy(path)
        assert policy.name == "custom"
        assert policy.max_score(Category.TECHNICAL_SEO) == 20

    def test_load_json_file(self, tmp_path, pack_data):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps(pack_data))
        assert load_scoring_policy(path) == DEFAULT_POLICY

    def test_load_string_json(self, pack_data):
        policy = load_scoring_policy_from_string(json.dumps(pack_data), format="json")
        assert policy.grade_for(91).grade == Grade.EXCELLENT

    def test_categories_in_report_order(self, pack_data):
        """Category order follows the report, not the file."""
        pack_data["max_scores"] = dict(reversed(list(pack_data["max_scores"].items())))
        policy = ScoringPolicyLoader().build(pack_data)
        assert policy.categories == tuple(Category)

    def test_colors_uppercased(self, pack_data):
        pack_data["grade_bands"][0]["color"] = "#8b5cf6"
        policy = ScoringPolicyLoader().build(pack_data)
        assert policy.grade_bands[0].color == "#8B5CF6"

    def test_file_not_found(self, tmp_path):
        with pytest.raises(PolicyLoadError) as exc_info:
            load_scoring_policy(tmp_path / "missing.yaml")
        assert exc_info.value.code == "AP_POLICY_LOAD_ERROR"
        assert "missing.yaml" in exc_info.value.details["path"]

    def test_unparseable_yaml(self):
        with pytest.raises(PolicyLoadError):
            load_scoring_policy_from_string("max_scores: [unclosed")

    def test_non_mapping_rejected(self):
        with pytest.raises(PolicyLoadError) as exc_info:
            load_scoring_policy_from_string("- just\n- a list\n")
        assert exc_info.value.details["type"] == "list"


# =============================================================================
# Validation
# =============================================================================

class TestValidation:
    """Schema and invariant checks."""

    def test_points_must_sum_to_100(self, pack_data):
        pack_data["max_scores"]["technical_seo"] = 10
        with pytest.raises(PolicyValidationError) as exc_info:
            ScoringPolicyLoader().build(pack_data)
        assert "sum to 100" in str(exc_info.value.details["errors"])

    def test_missing_category(self, pack_data):
        del pack_data["max_scores"]["structured_data"]
        pack_data["max_scores"]["technical_seo"] += 5
        with pytest.raises(PolicyValidationError) as exc_info:
            ScoringPolicyLoader().build(pack_data)
        assert "structured_data" in str(exc_info.value.details["errors"])

    def test_unknown_category(self, pack_data):
        pack_data["max_scores"]["backlinks"] = 0
        with pytest.raises(PolicyValidationError):
            ScoringPolicyLoader().build(pack_data)

    def test_unknown_top_level_key(self, pack_data):
        pack_data["weights"] = {}
        with pytest.raises(PolicyValidationError):
            ScoringPolicyLoader().build(pack_data)

    def test_grade_bands_must_descend(self, pack_data):
        pack_data["grade_bands"][1]["min_score"] = 95
        with pytest.raises(PolicyValidationError):
            ScoringPolicyLoader().build(pack_data)

    def test_last_band_starts_at_zero(self, pack_data):
        pack_data["grade_bands"][-1]["min_score"] = 10
        with pytest.raises(PolicyValidationError):
            ScoringPolicyLoader().build(pack_data)

    def test_bad_color(self, pack_data):
        pack_data["grade_bands"][0]["color"] = "purple"
        with pytest.raises(PolicyValidationError):
            ScoringPolicyLoader().build(pack_data)

    def test_thresholds_ordered(self, pack_data):
        pack_data["issue_threshold"] = 0.95
        with pytest.raises(PolicyValidationError):
            ScoringPolicyLoader().build(pack_data)


# =============================================================================
# Schema Version
# =============================================================================

class TestSchemaVersion:
    """Major-version compatibility."""

    def test_major_mismatch_rejected(self, pack_data):
        pack_data["schema_version"] = "2.0.0"
        with pytest.raises(PolicyVersionMismatch) as exc_info:
            ScoringPolicyLoader().build(pack_data)
        assert exc_info.value.details["expected_version"] == "1.0.0"

    def test_minor_difference_accepted(self, pack_data):
        pack_data["schema_version"] = "1.4.0"
        assert ScoringPolicyLoader().build(pack_data) == DEFAULT_POLICY

    def test_non_strict_loader_skips_check(self, pack_data):
        pack_data["schema_version"] = "2.0.0"
        assert ScoringPolicyLoader(strict_version=False).build(pack_data) == DEFAULT_POLICY
