"""
Canonical JSON and Text Normalization

Deterministic serialization used to fingerprint snapshots (identical input
yields an identical fingerprint) and the title normalization used to
deduplicate recommendations.
"""
from __future__ import annotations

import hashlib
import json
import unicodedata
from collections.abc import Mapping
from dataclasses import asdict, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any


def _encode(obj: Any) -> Any:
    """Encode values json.dumps does not handle natively."""
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, Mapping):
        return dict(obj)
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    raise TypeError(f"Cannot fingerprint value of type {type(obj).__name__}")


def canonical_json(obj: Any) -> str:
    """Serialize with sorted keys and no whitespace."""
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        default=_encode,
        ensure_ascii=False,
    )


def content_hash(obj: Any) -> str:
    """
    Hex SHA-256 of canonical_json(obj); used as the snapshot fingerprint
    and, truncated, as the JSON-lines record id.
    """
    return hashlib.sha256(canonical_json(obj).encode("utf-8")).hexdigest()


def normalize_title(text: str) -> str:
    """
    Normalize a recommendation title for duplicate detection.

    NFKC-normalizes, collapses whitespace and case-folds, so
    "Add  a Meta Description" and "add a meta description" compare equal.
    """
    text = unicodedata.normalize("NFKC", text)
    return " ".join(text.split()).casefold()
