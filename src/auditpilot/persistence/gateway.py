"""
AuditPilot Persistence Gateway

The boundary to durable storage. Storing a report is two independent,
fallible steps:

1. upload the PDF bytes, receiving a document URL
2. write a metadata record pointing at that URL

A metadata failure after a successful upload leaves an orphaned document.
It is reported as PersistenceError(stage="metadata") carrying the
document URL, so the caller can retry record_metadata() alone. Nothing
here retries.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional, Protocol
from urllib.parse import urlparse

from ..exceptions import PersistenceError
from ..models import AnalysisSnapshot, PersistenceStage


logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
DEFAULT_REPORT_KIND = "seo_analysis"


# =============================================================================
# Records
# =============================================================================

@dataclass(frozen=True)
class ReportRecord:
    """Metadata row describing a stored report."""
    source_url: str
    document_url: str
    report_kind: str
    created_at: str  # ISO 8601, UTC
    owning_user: str
    include_ai: bool = False
    scan_id: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "source_url": self.source_url,
            "document_url": self.document_url,
            "report_kind": self.report_kind,
            "created_at": self.created_at,
            "owning_user": self.owning_user,
            "include_ai": self.include_ai,
        }
        if self.scan_id:
            result["scan_id"] = self.scan_id
        return result


@dataclass(frozen=True)
class PersistenceReceipt:
    """Outcome of a fully successful persist."""
    document_url: str
    record_id: str
    path: str


# =============================================================================
# Collaborator Protocols
# =============================================================================

class DocumentStorage(Protocol):
    """Stores document bytes and returns a public or reference URL."""

    def upload(self, data: bytes, path: str, content_type: str) -> str:
        ...


class ReportMetadataStore(Protocol):
    """Records report metadata and returns the record identifier."""

    def record(self, record: ReportRecord) -> str:
        ...


# =============================================================================
# Naming
# =============================================================================

_UNSAFE = re.compile(r"[^a-z0-9]+")


def report_filename(url: str, created_at: datetime) -> str:
    """
    File name for a stored report.

    Example:
        >>> report_filename("https://Example.com/blog/", datetime(2024, 1, 1, tzinfo=timezone.utc))
        'seo-report-example-com-blog-1704067200000.pdf'
    """
    parts = urlparse(url)
    target = f"{parts.netloc}{parts.path}" if parts.netloc else url
    slug = _UNSAFE.sub("-", target.lower()).strip("-")[:60].strip("-") or "site"
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return f"seo-report-{slug}-{int(created_at.timestamp() * 1000)}.pdf"


def storage_path(owner: str, filename: str) -> str:
    """Storage key: reports/<owner>/<filename>."""
    owner_slug = _UNSAFE.sub("-", owner.lower()).strip("-") or "anonymous"
    return f"reports/{owner_slug}/{filename}"


# =============================================================================
# Two-Phase Persist
# =============================================================================

def upload_document(storage: DocumentStorage, pdf: bytes, path: str, url: Optional[str] = None) -> str:
    """
    Step 1: upload the PDF.

    Raises:
        PersistenceError: stage "upload"
    """
    try:
        document_url = storage.upload(pdf, path, PDF_CONTENT_TYPE)
    except Exception as e:
        raise PersistenceError(
            message=f"Report upload failed: {e}",
            details={"path": path},
            url=url,
            stage=PersistenceStage.UPLOAD.value,
        ) from e
    logger.info("Report uploaded", extra={"stage": PersistenceStage.UPLOAD.value, "document_url": document_url})
    return document_url


def record_metadata(store: ReportMetadataStore, record: ReportRecord) -> str:
    """
    Step 2: write the metadata record. Safe to call again after a failure.

    Raises:
        PersistenceError: stage "metadata", with the orphaned document_url
    """
    try:
        record_id = store.record(record)
    except Exception as e:
        raise PersistenceError(
            message=f"Report metadata write failed, document stored without a record: {e}",
            details={"record": record.to_dict()},
            url=record.source_url,
            stage=PersistenceStage.METADATA.value,
            document_url=record.document_url,
        ) from e
    logger.info("Report metadata recorded", extra={"stage": PersistenceStage.METADATA.value, "record_id": record_id})
    return record_id


def persist_report(
    pdf: bytes,
    snapshot: AnalysisSnapshot,
    owner: str,
    storage: DocumentStorage,
    metadata_store: ReportMetadataStore,
    *,
    report_kind: str = DEFAULT_REPORT_KIND,
    created_at: Optional[datetime] = None,
) -> PersistenceReceipt:
    """
    Upload the report, then record its metadata.

    Args:
        pdf: Rendered PDF bytes
        snapshot: The analysed snapshot (source URL, scan id, AI presence)
        owner: Owning user identifier
        storage: Document storage collaborator
        metadata_store: Metadata store collaborator
        report_kind: Metadata report kind
        created_at: Creation time (defaults to now)

    Returns:
        PersistenceReceipt

    Raises:
        PersistenceError: With stage "upload" or "metadata"
    """
    created_at = created_at or datetime.now(timezone.utc)
    path = storage_path(owner, report_filename(snapshot.url, created_at))

    document_url = upload_document(storage, pdf, path, url=snapshot.url)
    record = ReportRecord(
        source_url=snapshot.url,
        document_url=document_url,
        report_kind=report_kind,
        created_at=created_at.astimezone(timezone.utc).isoformat() if created_at.tzinfo else created_at.isoformat(),
        owning_user=owner,
        include_ai=snapshot.has_ai_findings,
        scan_id=snapshot.scan_id,
    )
    record_id = record_metadata(metadata_store, record)
    return PersistenceReceipt(document_url=document_url, record_id=record_id, path=path)
