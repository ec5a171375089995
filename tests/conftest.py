"""
Pytest configuration and fixtures for AuditPilot tests.
"""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from auditpilot.engine import ReportEngine
from auditpilot.models import AnalysisSnapshot
from auditpilot.persistence import InMemoryDocumentStorage, InMemoryMetadataStore

from tests.helpers import make_snapshot_data


FIXED_TIME = datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc)


@pytest.fixture
def snapshot_data() -> dict:
    """Raw snapshot with every rule optimal."""
    return make_snapshot_data()


@pytest.fixture
def snapshot(snapshot_data) -> AnalysisSnapshot:
    """Parsed optimal snapshot."""
    return AnalysisSnapshot.from_dict(snapshot_data)


@pytest.fixture
def sparse_snapshot_data() -> dict:
    """Snapshot carrying nothing but its URL."""
    return {"url": "http://sparse.example.org"}


@pytest.fixture
def engine() -> ReportEngine:
    """Report engine under the default policy."""
    return ReportEngine()


@pytest.fixture
def fixed_time() -> datetime:
    return FIXED_TIME


@pytest.fixture
def storage() -> InMemoryDocumentStorage:
    return InMemoryDocumentStorage()


@pytest.fixture
def metadata_store() -> InMemoryMetadataStore:
    return InMemoryMetadataStore()
