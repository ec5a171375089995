"""
Reference storage implementations.

In-memory stores back tests and dry runs; the local-directory storage and
JSON-lines metadata store back the CLI. Production deployments provide
their own DocumentStorage / ReportMetadataStore (object storage, a
database) with the same two methods.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from ..canon import content_hash
from .gateway import ReportRecord


@dataclass
class InMemoryDocumentStorage:
    """Keeps uploaded documents in a dict keyed by path."""
    base_url: str = "memory://"
    documents: dict[str, bytes] = field(default_factory=dict)
    content_types: dict[str, str] = field(default_factory=dict)

    def upload(self, data: bytes, path: str, content_type: str) -> str:
        self.documents[path] = bytes(data)
        self.content_types[path] = content_type
        return f"{self.base_url}{path}"


@dataclass
class InMemoryMetadataStore:
    """Keeps records in insertion order."""
    records: dict[str, ReportRecord] = field(default_factory=dict)

    def record(self, record: ReportRecord) -> str:
        record_id = f"rec-{len(self.records) + 1:04d}"
        self.records[record_id] = record
        return record_id


@dataclass
class LocalDirectoryStorage:
    """Writes documents under a root directory and returns file:// URLs."""
    root: Path

    def upload(self, data: bytes, path: str, content_type: str) -> str:
        target = (Path(self.root) / path).resolve()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        return target.as_uri()


@dataclass
class JsonLinesMetadataStore:
    """Appends one JSON object per record to a file."""
    path: Path

    def record(self, record: ReportRecord) -> str:
        payload = record.to_dict()
        record_id = content_hash(payload)[:16]
        target = Path(self.path)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "a", encoding="utf-8") as f:
            f.write(json.dumps({"id": record_id, **payload}, sort_keys=True) + "\n")
        return record_id
