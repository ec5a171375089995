"""
AuditPilot Analysis Snapshot

The immutable input of a scoring run: everything an upstream analyser
observed about one site (meta tags, headings, images, page-speed results,
structured data, links, social tags, optional AI findings).

A snapshot is parsed once, tolerantly, by ``AnalysisSnapshot.from_dict``:

- ``snake_case`` and ``camelCase`` keys are both accepted
- a nested ``seo`` mapping and a nested ``headings`` mapping are consulted
- values are kept exactly as supplied; judging them is the evaluator's job

Only a non-mapping input or a missing site URL is fatal.
"""
from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from ..exceptions import InvalidSnapshotError


# =============================================================================
# Lookup Helpers
# =============================================================================

def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _lookup(sources: tuple[Mapping[str, Any], ...], *keys: str) -> Any:
    """Return the first non-None value found under any key in any source."""
    for source in sources:
        for key in keys:
            value = source.get(key)
            if value is not None:
                return value
    return None


def _freeze(value: Any) -> Any:
    """Lists become tuples; everything else is kept as supplied."""
    if isinstance(value, list):
        return tuple(value)
    return value


def _text_list(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,) if value.strip() else ()
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value if v is not None and str(v).strip())
    return ()


def extract_metric(metrics: Mapping[str, Any], aliases: tuple[str, ...]) -> Any:
    """
    Find a performance metric by any of its aliases.

    Keys match case-insensitively. Lighthouse audit objects are unwrapped
    through ``numericValue`` or ``value``.

    Args:
        metrics: Metric mapping (flat values or Lighthouse audits)
        aliases: Accepted key names, most specific first

    Returns:
        The metric value as supplied, or None when absent
    """
    if not metrics:
        return None
    folded = {str(k).lower(): k for k in metrics}
    for alias in aliases:
        key = folded.get(alias.lower())
        if key is None:
            continue
        value = metrics[key]
        if isinstance(value, Mapping):
            value = value.get("numericValue", value.get("value"))
        if value is not None:
            return value
    return None


METRIC_ALIASES: dict[str, tuple[str, ...]] = {
    "lcp_ms": ("lcp", "largestContentfulPaint", "largest_contentful_paint",
               "largest-contentful-paint"),
    "fcp_ms": ("fcp", "firstContentfulPaint", "first_contentful_paint",
               "first-contentful-paint"),
    "cls": ("cls", "cumulativeLayoutShift", "cumulative_layout_shift",
            "cumulative-layout-shift"),
    "inp_ms": ("inp", "interactionToNextPaint", "interaction_to_next_paint",
               "interaction-to-next-paint", "fid", "firstInputDelay",
               "first_input_delay", "max-potential-fid"),
    "tbt_ms": ("tbt", "totalBlockingTime", "total_blocking_time",
               "total-blocking-time"),
}


# =============================================================================
# Snapshot Parts
# =============================================================================

@dataclass(frozen=True)
class ImageRef:
    """One image on the page and whether it carries alt text."""
    src: str
    has_alt: bool

    @classmethod
    def from_value(cls, value: Any) -> Any:
        """
        Build from an image record.

        Non-mapping entries and records whose alt flag is not a boolean are
        returned unchanged, so the alt-coverage rule grades them invalid.
        """
        if not isinstance(value, Mapping):
            return value
        if "has_alt" in value or "hasAlt" in value:
            has_alt = value.get("has_alt", value.get("hasAlt"))
        else:
            alt = value.get("alt")
            has_alt = isinstance(alt, str) and bool(alt.strip())
        if not isinstance(has_alt, bool):
            return value
        return cls(src=str(value.get("src") or ""), has_alt=has_alt)


@dataclass(frozen=True)
class DevicePerformance:
    """Page-speed results for one device strategy."""
    score: Any = None  # Lighthouse fraction (0-1) or percentage (0-100)
    lcp_ms: Any = None
    fcp_ms: Any = None
    cls: Any = None
    inp_ms: Any = None
    tbt_ms: Any = None

    @classmethod
    def from_value(cls, value: Any) -> Optional[DevicePerformance]:
        if not isinstance(value, Mapping):
            return None
        metrics = value.get("metrics")
        if not isinstance(metrics, Mapping):
            metrics = value
        return cls(
            score=_lookup((value,), "score", "performanceScore", "performance_score"),
            **{name: extract_metric(metrics, aliases) for name, aliases in METRIC_ALIASES.items()},
        )

    @property
    def score_percent(self) -> Optional[float]:
        """Score on a 0-100 scale, or None when absent, non-numeric or not finite."""
        if isinstance(self.score, bool) or not isinstance(self.score, (int, float)):
            return None
        value = float(self.score)
        if not math.isfinite(value):
            return None
        if value <= 1:
            value *= 100
        return max(0.0, min(100.0, value))


@dataclass(frozen=True)
class PerformanceSnapshot:
    """Desktop and mobile page-speed results."""
    desktop: Optional[DevicePerformance] = None
    mobile: Optional[DevicePerformance] = None

    def metric(self, name: str) -> Any:
        """Mobile value first, desktop as fallback."""
        for device in (self.mobile, self.desktop):
            if device is not None:
                value = getattr(device, name)
                if value is not None:
                    return value
        return None

    @property
    def is_empty(self) -> bool:
        return self.desktop is None and self.mobile is None


@dataclass(frozen=True)
class LinkStats:
    """Link graph counts. Values may be counts or lists of URLs."""
    internal: Any = None
    external: Any = None
    broken: Any = None


@dataclass(frozen=True)
class AIFindings:
    """Findings from an upstream AI content analysis."""
    main_topic: Optional[str] = None
    search_intent: Optional[str] = None
    citation_potential: Any = None
    semantic_gaps: tuple[str, ...] = ()
    schema_types: tuple[str, ...] = ()
    faq_suggestions: tuple[str, ...] = ()
    entities: tuple[str, ...] = ()

    @classmethod
    def from_value(cls, value: Any) -> Optional[AIFindings]:
        if not isinstance(value, Mapping):
            return None
        src = (value,)
        intent = _lookup(src, "search_intent", "searchIntent")
        topic = _lookup(src, "main_topic", "mainTopic")
        return cls(
            main_topic=str(topic) if topic not in (None, "") else None,
            search_intent=str(intent) if intent not in (None, "") else None,
            citation_potential=_lookup(src, "citation_potential", "citationPotential"),
            semantic_gaps=_text_list(_lookup(
                src, "semantic_gaps", "semanticGaps", "missing_topics", "missingTopics",
            )),
            schema_types=_text_list(_lookup(src, "schema_types", "schemaTypes")),
            faq_suggestions=_text_list(_lookup(src, "faq_suggestions", "faqSuggestions")),
            entities=_text_list(_lookup(src, "entities", "related_entities", "relatedEntities")),
        )

    @property
    def is_empty(self) -> bool:
        return not (
            self.main_topic
            or self.search_intent
            or self.citation_potential not in (None, "")
            or self.semantic_gaps
            or self.schema_types
            or self.faq_suggestions
            or self.entities
        )


@dataclass(frozen=True)
class KnownIssue:
    """An issue reported by the upstream analyser itself."""
    title: str
    description: str = ""
    severity: str = "medium"

    @classmethod
    def from_value(cls, value: Any) -> Optional[KnownIssue]:
        if isinstance(value, str):
            return cls(title=value) if value.strip() else None
        if not isinstance(value, Mapping):
            return None
        title = _lookup((value,), "title", "name", "issue", "type")
        if not title:
            return None
        return cls(
            title=str(title),
            description=str(value.get("description") or value.get("message") or ""),
            severity=str(value.get("severity") or value.get("impact") or "medium").lower(),
        )


# =============================================================================
# Analysis Snapshot
# =============================================================================

@dataclass(frozen=True)
class AnalysisSnapshot:
    """
    Immutable site-analysis snapshot.

    Optional fields are None when the analyser did not report them.
    """
    url: str
    title: Any = None
    meta_description: Any = None
    h1: Any = None
    h2: Any = None
    h3: Any = None
    images: Any = None  # tuple[ImageRef, ...] when well-formed
    image_total: Any = None  # Counter form when no image list is given
    images_without_alt: Any = None
    canonical_url: Any = None
    robots: Any = None
    viewport: Any = None
    word_count: Any = None
    performance: PerformanceSnapshot = field(default_factory=PerformanceSnapshot)
    schema_types: Any = None
    open_graph: Any = None
    links: LinkStats = field(default_factory=LinkStats)
    ai: Optional[AIFindings] = None
    known_issues: tuple[KnownIssue, ...] = ()
    scan_id: Optional[str] = None
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False, repr=False)

    @classmethod
    def from_dict(cls, data: Any) -> AnalysisSnapshot:
        """
        Parse a JSON-shaped snapshot.

        Args:
            data: Decoded JSON object from the upstream analyser

        Returns:
            AnalysisSnapshot

        Raises:
            InvalidSnapshotError: If data is not a mapping or has no site URL
        """
        if not isinstance(data, Mapping):
            raise InvalidSnapshotError(
                message=f"Snapshot must be a JSON object, got {type(data).__name__}",
            )

        seo = _as_mapping(data.get("seo"))
        sources = (data, seo)
        url = _lookup(sources, "url", "site_url", "siteUrl")
        if not isinstance(url, str) or not url.strip():
            raise InvalidSnapshotError(
                message="Snapshot has no site URL",
                details={"keys": sorted(str(k) for k in data)},
            )

        heading_sources = sources + (
            _as_mapping(data.get("headings")),
            _as_mapping(seo.get("headings")),
        )

        images = _lookup(sources, "images")
        if isinstance(images, list):
            images = tuple(ImageRef.from_value(img) for img in images)

        perf = _as_mapping(_lookup(sources, "performance", "pageSpeed", "page_speed"))
        performance = PerformanceSnapshot(
            desktop=DevicePerformance.from_value(perf.get("desktop")),
            mobile=DevicePerformance.from_value(perf.get("mobile")),
        )

        links_raw = _lookup(sources, "links", "linkStats", "link_stats")
        link_sources = (_as_mapping(links_raw),) + sources
        links = LinkStats(
            internal=_freeze(_lookup(link_sources, "internal", "internal_links", "internalLinks")),
            external=_freeze(_lookup(link_sources, "external", "external_links", "externalLinks")),
            broken=_freeze(_lookup(link_sources, "broken", "broken_links", "brokenLinks")),
        )

        raw_issues = _lookup(sources, "known_issues", "issues", "technicalIssues", "technical_issues")
        known_issues: tuple[KnownIssue, ...] = ()
        if isinstance(raw_issues, list):
            parsed = (KnownIssue.from_value(item) for item in raw_issues)
            known_issues = tuple(issue for issue in parsed if issue is not None)

        content = _as_mapping(_lookup(sources, "content_analysis", "contentAnalysis"))
        word_count = _lookup(sources + (content,), "word_count", "wordCount")

        open_graph = _lookup(sources, "open_graph", "openGraph", "og")
        if isinstance(open_graph, Mapping):
            open_graph = dict(open_graph)

        scan_id = _lookup(sources, "scan_id", "scanId")

        return cls(
            url=url.strip(),
            title=_lookup(sources, "title"),
            meta_description=_lookup(sources, "meta_description", "metaDescription", "description"),
            h1=_freeze(_lookup(heading_sources, "h1")),
            h2=_freeze(_lookup(heading_sources, "h2")),
            h3=_freeze(_lookup(heading_sources, "h3")),
            images=images,
            image_total=_lookup(sources, "total_images", "totalImages"),
            images_without_alt=_lookup(sources, "images_without_alt", "imagesWithoutAlt"),
            canonical_url=_lookup(sources, "canonical_url", "canonicalUrl", "canonical"),
            robots=_lookup(sources, "robots", "meta_robots", "metaRobots"),
            viewport=_lookup(sources, "viewport", "meta_viewport", "metaViewport"),
            word_count=word_count,
            performance=performance,
            schema_types=_freeze(_lookup(
                sources, "schema_types", "schemaTypes", "structured_data", "structuredData",
            )),
            open_graph=open_graph,
            links=links,
            ai=AIFindings.from_value(_lookup(
                sources, "ai", "ai_analysis", "aiAnalysis", "semantic_analysis", "semanticAnalysis",
            )),
            known_issues=known_issues,
            scan_id=str(scan_id) if scan_id is not None else None,
            raw=data,
        )

    @property
    def has_ai_findings(self) -> bool:
        return self.ai is not None and not self.ai.is_empty
