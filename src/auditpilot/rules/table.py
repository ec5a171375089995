"""
AuditPilot Threshold Rule Table

The static, versioned table of compliance rules. Every rule is pure: it
reads the snapshot through its extractor and judges the value with its
ladder. Rules do not depend on each other, so table order only decides
verdict order.

Changing a threshold changes scores; bump RULE_TABLE_VERSION when you do.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

from ..models import (
    AnalysisSnapshot,
    Category,
    FieldId,
    ImageRef,
    RuleKind,
)
from .ladders import (
    Coverage,
    Directive,
    ExactCount,
    Ladder,
    LengthRange,
    Minimum,
    Presence,
    PresenceMatch,
    Ratio,
    RuleOutcome,
    Scheme,
    Threshold,
)


RULE_TABLE_VERSION = "2.1.0"

OPEN_GRAPH_TAGS = ("og:title", "og:description", "og:image")


@dataclass(frozen=True)
class Rule:
    """
    One declarative compliance rule.

    Attributes:
        rule_id: Stable identifier (appears in verdicts)
        field: Field the rule judges
        category: Category the verdict feeds
        description: Human-readable statement of the rule
        extractor: Reads the raw value from a snapshot (None when absent)
        ladder: Threshold shape that turns the value into an outcome
    """
    rule_id: str
    field: FieldId
    category: Category
    description: str
    extractor: Callable[[AnalysisSnapshot], Any]
    ladder: Ladder

    @property
    def kind(self) -> RuleKind:
        return self.ladder.kind

    def apply(self, snapshot: AnalysisSnapshot) -> RuleOutcome:
        return self.ladder.judge(self.extractor(snapshot), snapshot)


# =============================================================================
# Extractors
# =============================================================================

def _heading_hierarchy(snapshot: AnalysisSnapshot) -> Any:
    """H2 list; an empty tuple when H3s exist without any H2."""
    if snapshot.h2 is None and snapshot.h3 is None:
        return None
    if snapshot.h2 is None:
        return ()
    return snapshot.h2


def _image_alt_coverage(snapshot: AnalysisSnapshot) -> Any:
    images = snapshot.images
    if isinstance(images, tuple):
        if not all(isinstance(img, ImageRef) for img in images):
            return images
        return Coverage(sum(1 for img in images if img.has_alt), len(images))
    if images is not None:
        return images

    total, without = snapshot.image_total, snapshot.images_without_alt
    if total is None:
        return None
    if without is None:
        without = 0
    if not all(isinstance(v, int) and not isinstance(v, bool) for v in (total, without)):
        return (total, without)
    return Coverage(total - without, total)


def _open_graph_coverage(snapshot: AnalysisSnapshot) -> Any:
    tags = snapshot.open_graph
    if tags is None:
        return None
    if not isinstance(tags, Mapping):
        return tags
    if not tags:
        return None
    present = sum(
        1 for name in OPEN_GRAPH_TAGS
        if isinstance(tags.get(name, tags.get(name[3:])), str)
        and tags.get(name, tags.get(name[3:])).strip()
    )
    return Coverage(present, len(OPEN_GRAPH_TAGS))


def _schema_markup(snapshot: AnalysisSnapshot) -> Any:
    if snapshot.schema_types is not None:
        return snapshot.schema_types
    if snapshot.ai is not None and snapshot.ai.schema_types:
        return snapshot.ai.schema_types
    return None


def _metric(name: str) -> Callable[[AnalysisSnapshot], Any]:
    def extract(snapshot: AnalysisSnapshot) -> Any:
        return snapshot.performance.metric(name)
    extract.__name__ = f"extract_{name}"
    return extract


# =============================================================================
# Rule Table
# =============================================================================

RULE_TABLE: tuple[Rule, ...] = (
    # Title
    Rule(
        rule_id="title.length",
        field=FieldId.TITLE,
        category=Category.TITLE_OPTIMIZATION,
        description="Title length 30-60 characters",
        extractor=lambda s: s.title,
        ladder=LengthRange(min_length=30, max_length=60, short_credit=0.5, long_credit=0.7),
    ),
    # Meta description
    Rule(
        rule_id="meta_description.length",
        field=FieldId.META_DESCRIPTION,
        category=Category.META_DESCRIPTION,
        description="Meta description length 120-160 characters",
        extractor=lambda s: s.meta_description,
        ladder=LengthRange(min_length=120, max_length=160, short_credit=0.6, long_credit=0.7),
    ),
    # Headings
    Rule(
        rule_id="headings.h1_single",
        field=FieldId.H1,
        category=Category.HEADING_STRUCTURE,
        description="Exactly one H1 heading",
        extractor=lambda s: s.h1,
        ladder=ExactCount(expected=1, zero_credit=0.3, excess_credit=0.5, noun="H1 heading"),
    ),
    Rule(
        rule_id="headings.hierarchy",
        field=FieldId.HEADING_HIERARCHY,
        category=Category.HEADING_STRUCTURE,
        description="H2 subheadings structure the content below the H1",
        extractor=_heading_hierarchy,
        ladder=Presence(empty_detail="No H2 subheadings (heading levels are skipped or absent)"),
    ),
    # Images
    Rule(
        rule_id="images.alt_coverage",
        field=FieldId.IMAGE_ALT,
        category=Category.IMAGE_OPTIMIZATION,
        description="Every image has alternative text",
        extractor=_image_alt_coverage,
        ladder=Ratio(noun="image", check="have alt text"),
    ),
    # Technical SEO
    Rule(
        rule_id="technical.viewport",
        field=FieldId.VIEWPORT,
        category=Category.TECHNICAL_SEO,
        description="Responsive viewport meta tag is declared",
        extractor=lambda s: s.viewport,
        ladder=Presence(),
    ),
    Rule(
        rule_id="technical.https",
        field=FieldId.HTTPS,
        category=Category.TECHNICAL_SEO,
        description="Page is served over HTTPS",
        extractor=lambda s: s.url,
        ladder=Scheme(),
    ),
    Rule(
        rule_id="performance.lcp",
        field=FieldId.LCP,
        category=Category.TECHNICAL_SEO,
        description="Largest Contentful Paint at most 2.5 s",
        extractor=_metric("lcp_ms"),
        ladder=Threshold(good=2500, poor=4000, unit="ms"),
    ),
    Rule(
        rule_id="performance.cls",
        field=FieldId.CLS,
        category=Category.TECHNICAL_SEO,
        description="Cumulative Layout Shift at most 0.1",
        extractor=_metric("cls"),
        ladder=Threshold(good=0.1, poor=0.25),
    ),
    Rule(
        rule_id="performance.inp",
        field=FieldId.INP,
        category=Category.TECHNICAL_SEO,
        description="Interaction to Next Paint at most 200 ms",
        extractor=_metric("inp_ms"),
        ladder=Threshold(good=200, poor=500, unit="ms"),
    ),
    Rule(
        rule_id="performance.fcp",
        field=FieldId.FCP,
        category=Category.TECHNICAL_SEO,
        description="First Contentful Paint at most 1.8 s",
        extractor=_metric("fcp_ms"),
        ladder=Threshold(good=1800, poor=3000, unit="ms"),
    ),
    # Content
    Rule(
        rule_id="content.word_count",
        field=FieldId.WORD_COUNT,
        category=Category.CONTENT_QUALITY,
        description="At least 300 words of body content",
        extractor=lambda s: s.word_count,
        ladder=Minimum(target=300, noun="words"),
    ),
    # Indexability
    Rule(
        rule_id="indexability.canonical",
        field=FieldId.CANONICAL,
        category=Category.INDEXABILITY,
        description="Canonical URL is declared and points at the page",
        extractor=lambda s: s.canonical_url,
        ladder=PresenceMatch(mismatch_credit=0.5),
    ),
    Rule(
        rule_id="indexability.robots",
        field=FieldId.ROBOTS,
        category=Category.INDEXABILITY,
        description="Robots directives allow indexing and link following",
        extractor=lambda s: s.robots,
        ladder=Directive(nofollow_credit=0.5),
    ),
    Rule(
        rule_id="indexability.internal_links",
        field=FieldId.INTERNAL_LINKS,
        category=Category.INDEXABILITY,
        description="At least 3 internal links",
        extractor=lambda s: s.links.internal,
        ladder=Minimum(target=3, noun="internal links"),
    ),
    # Social
    Rule(
        rule_id="social.open_graph",
        field=FieldId.OPEN_GRAPH,
        category=Category.SOCIAL_OPTIMIZATION,
        description="Open Graph title, description and image are set",
        extractor=_open_graph_coverage,
        ladder=Ratio(noun="required Open Graph tag", check="have a value"),
    ),
    # Structured data
    Rule(
        rule_id="structured_data.present",
        field=FieldId.SCHEMA_MARKUP,
        category=Category.STRUCTURED_DATA,
        description="Schema.org structured data is present",
        extractor=_schema_markup,
        ladder=Presence(empty_detail="No structured data types detected"),
    ),
)


def rules_for(category: Category) -> tuple[Rule, ...]:
    """Rules feeding a category, in table order."""
    return tuple(rule for rule in RULE_TABLE if rule.category == category)


def fields_in(category: Category) -> int:
    """Number of fields (rules) feeding a category."""
    return len(rules_for(category))
