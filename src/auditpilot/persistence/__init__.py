"""
AuditPilot Persistence

Two-phase report persistence (upload, then metadata) and reference stores.
"""
from __future__ import annotations

from .gateway import (
    DEFAULT_REPORT_KIND,
    PDF_CONTENT_TYPE,
    DocumentStorage,
    PersistenceReceipt,
    ReportMetadataStore,
    ReportRecord,
    persist_report,
    record_metadata,
    report_filename,
    storage_path,
    upload_document,
)
from .stores import (
    InMemoryDocumentStorage,
    InMemoryMetadataStore,
    JsonLinesMetadataStore,
    LocalDirectoryStorage,
)

__all__ = [
    "DEFAULT_REPORT_KIND",
    "PDF_CONTENT_TYPE",
    "DocumentStorage",
    "ReportMetadataStore",
    "ReportRecord",
    "PersistenceReceipt",
    "persist_report",
    "upload_document",
    "record_metadata",
    "report_filename",
    "storage_path",
    "InMemoryDocumentStorage",
    "InMemoryMetadataStore",
    "JsonLinesMetadataStore",
    "LocalDirectoryStorage",
]
