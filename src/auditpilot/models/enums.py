"""
AuditPilot Enumerations

All enumeration types used throughout the AuditPilot engine.
Organized by domain area.

All enums inherit from (str, Enum) for JSON serialization compatibility.
"""
from __future__ import annotations

from enum import Enum


# =============================================================================
# Score Categories
# =============================================================================

class Category(str, Enum):
    """The nine fixed scoring categories of a report."""
    TITLE_OPTIMIZATION = "title_optimization"
    META_DESCRIPTION = "meta_description"
    HEADING_STRUCTURE = "heading_structure"
    IMAGE_OPTIMIZATION = "image_optimization"
    TECHNICAL_SEO = "technical_seo"
    CONTENT_QUALITY = "content_quality"
    INDEXABILITY = "indexability"
    SOCIAL_OPTIMIZATION = "social_optimization"
    STRUCTURED_DATA = "structured_data"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    Category.TITLE_OPTIMIZATION: "Title Optimization",
    Category.META_DESCRIPTION: "Meta Description",
    Category.HEADING_STRUCTURE: "Heading Structure",
    Category.IMAGE_OPTIMIZATION: "Image Optimization",
    Category.TECHNICAL_SEO: "Technical SEO",
    Category.CONTENT_QUALITY: "Content Quality",
    Category.INDEXABILITY: "Indexability",
    Category.SOCIAL_OPTIMIZATION: "Social Optimization",
    Category.STRUCTURED_DATA: "Structured Data",
}


# =============================================================================
# Snapshot Fields
# =============================================================================

class FieldId(str, Enum):
    """Snapshot fields judged by the rule table."""
    TITLE = "title"
    META_DESCRIPTION = "meta_description"
    H1 = "h1"
    HEADING_HIERARCHY = "heading_hierarchy"
    IMAGE_ALT = "image_alt"
    VIEWPORT = "viewport"
    HTTPS = "https"
    LCP = "lcp"
    CLS = "cls"
    INP = "inp"
    FCP = "fcp"
    WORD_COUNT = "word_count"
    CANONICAL = "canonical"
    ROBOTS = "robots"
    INTERNAL_LINKS = "internal_links"
    OPEN_GRAPH = "open_graph"
    SCHEMA_MARKUP = "schema_markup"


# =============================================================================
# Verdicts
# =============================================================================

class VerdictStatus(str, Enum):
    """Compliance status of a single field."""
    OPTIMAL = "optimal"
    NEEDS_IMPROVEMENT = "needs_improvement"
    MISSING = "missing"  # Field absent or empty
    INVALID = "invalid"  # Present but malformed, or far outside thresholds

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


class RuleKind(str, Enum):
    """Shape of a rule's threshold ladder."""
    LENGTH_RANGE = "length_range"
    PRESENCE_MATCH = "presence_match"
    EXACT_COUNT = "exact_count"
    RATIO = "ratio"
    THRESHOLD = "threshold"  # Lower is better (good / poor limits)
    MINIMUM = "minimum"  # Higher is better (target)
    PRESENCE = "presence"
    DIRECTIVE = "directive"
    SCHEME = "scheme"


# =============================================================================
# Scoring
# =============================================================================

class Grade(str, Enum):
    """Overall grade bands."""
    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    CRITICAL = "critical"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class Priority(str, Enum):
    """Recommendation priority tiers."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort rank, lower sorts first."""
        return _PRIORITY_RANKS[self]


_PRIORITY_RANKS = {
    Priority.HIGH: 0,
    Priority.MEDIUM: 1,
    Priority.LOW: 2,
}


# =============================================================================
# Rendering
# =============================================================================

class BlockKind(str, Enum):
    """Kinds of laid-out document blocks."""
    BANNER = "banner"  # Branding header band
    HEADING = "heading"  # Section heading
    PARAGRAPH = "paragraph"
    PANEL = "panel"  # Filled box (score, issue, recommendation)
    BAR = "bar"  # Category score bar
    NOTICE = "notice"  # "+N more" truncation notice
    FOOTER = "footer"


# =============================================================================
# Persistence
# =============================================================================

class PersistenceStage(str, Enum):
    """The two steps of storing a rendered report."""
    UPLOAD = "upload"
    METADATA = "metadata"
