"""
AuditPilot Remediation Catalog

Remediation templates keyed by (field, status). Every field in the rule
table has a template for each non-optimal status. Several performance
templates deliberately share a title so that one audit gap produces one
recommendation.

Descriptions may reference ``{detail}``, the verdict's measurement note.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..models import FieldId, VerdictStatus


# =============================================================================
# Standards
# =============================================================================

WCAG_NON_TEXT = "WCAG 2.1 Success Criterion 1.1.1 (Non-text Content)"
CORE_WEB_VITALS = "Core Web Vitals thresholds (web.dev)"
SEARCH_TITLES = "Google Search Central: title links"
SEARCH_SNIPPETS = "Google Search Central: snippets and meta descriptions"
SEARCH_HEADINGS = "Google Search Central: SEO starter guide (headings)"
SEARCH_MOBILE = "Google Search Central: mobile-first indexing"
SEARCH_HTTPS = "Google Search Central: HTTPS as a ranking signal"
SEARCH_CANONICAL = "Google Search Central: consolidate duplicate URLs"
SEARCH_ROBOTS = "Google Search Central: robots meta tag"
SEARCH_LINKS = "Google Search Central: link best practices"
SEARCH_CONTENT = "Google Search Central: creating helpful content"
OPEN_GRAPH = "The Open Graph protocol (ogp.me)"
SCHEMA_ORG = "Schema.org structured data"


@dataclass(frozen=True)
class RemediationTemplate:
    """Catalog entry that becomes a Recommendation."""
    title: str
    description: str
    standard: Optional[str] = None

    def describe(self, detail: str) -> str:
        return self.description.format(detail=detail.rstrip("."))


M = VerdictStatus.MISSING
N = VerdictStatus.NEEDS_IMPROVEMENT
I = VerdictStatus.INVALID  # noqa: E741


_AUDIT_MISSING = RemediationTemplate(
    "Run a page-speed audit",
    "No page-speed measurements were supplied. Run Lighthouse or PageSpeed "
    "Insights for mobile and desktop so Core Web Vitals can be assessed.",
    CORE_WEB_VITALS,
)


CATALOG: dict[tuple[FieldId, VerdictStatus], RemediationTemplate] = {
    # Title
    (FieldId.TITLE, M): RemediationTemplate(
        "Add a title tag",
        "The page has no <title>. Write a unique, descriptive title of 30-60 "
        "characters that leads with the primary keyword.",
        SEARCH_TITLES,
    ),
    (FieldId.TITLE, N): RemediationTemplate(
        "Adjust the title length",
        "Title is {detail}. Keep it between 30 and 60 characters so it is "
        "descriptive without being truncated in results.",
        SEARCH_TITLES,
    ),
    (FieldId.TITLE, I): RemediationTemplate(
        "Fix the title tag markup",
        "The title could not be read as text ({detail}). Emit a single plain-text <title> element.",
        SEARCH_TITLES,
    ),
    # Meta description
    (FieldId.META_DESCRIPTION, M): RemediationTemplate(
        "Add a meta description",
        "No meta description was found. Summarise the page in 120-160 "
        "characters with a clear call to action.",
        SEARCH_SNIPPETS,
    ),
    (FieldId.META_DESCRIPTION, N): RemediationTemplate(
        "Adjust the meta description length",
        "Meta description is {detail}. Aim for 120-160 characters.",
        SEARCH_SNIPPETS,
    ),
    (FieldId.META_DESCRIPTION, I): RemediationTemplate(
        "Fix the meta description markup",
        "The meta description could not be read as text ({detail}).",
        SEARCH_SNIPPETS,
    ),
    # Headings
    (FieldId.H1, M): RemediationTemplate(
        "Add a single H1 heading",
        "No heading data was found. Give the page exactly one H1 that states its main topic.",
        SEARCH_HEADINGS,
    ),
    (FieldId.H1, N): RemediationTemplate(
        "Use exactly one H1 heading",
        "{detail}. Keep one H1 for the main topic and demote the rest to H2/H3.",
        SEARCH_HEADINGS,
    ),
    (FieldId.H1, I): RemediationTemplate(
        "Fix the H1 heading markup",
        "H1 headings could not be counted ({detail}).",
        SEARCH_HEADINGS,
    ),
    (FieldId.HEADING_HIERARCHY, M): RemediationTemplate(
        "Structure content with subheadings",
        "No H2 or H3 headings were reported. Break the content into sections with descriptive H2s.",
        SEARCH_HEADINGS,
    ),
    (FieldId.HEADING_HIERARCHY, N): RemediationTemplate(
        "Fix the heading hierarchy",
        "{detail}. Nest headings in order (H1, then H2, then H3) without skipping levels.",
        SEARCH_HEADINGS,
    ),
    (FieldId.HEADING_HIERARCHY, I): RemediationTemplate(
        "Fix the heading hierarchy",
        "Subheadings could not be read ({detail}).",
        SEARCH_HEADINGS,
    ),
    # Images
    (FieldId.IMAGE_ALT, M): RemediationTemplate(
        "Audit images for alt text",
        "No image data was supplied. Check that every meaningful image has a text alternative.",
        WCAG_NON_TEXT,
    ),
    (FieldId.IMAGE_ALT, N): RemediationTemplate(
        "Add alt text to the remaining images",
        "{detail}. Describe each image's content or purpose; use empty alt only for decoration.",
        WCAG_NON_TEXT,
    ),
    (FieldId.IMAGE_ALT, I): RemediationTemplate(
        "Add alt text to all images",
        "{detail}. Screen readers and search engines cannot interpret these images.",
        WCAG_NON_TEXT,
    ),
    # Technical SEO
    (FieldId.VIEWPORT, M): RemediationTemplate(
        "Declare a responsive viewport",
        'Add <meta name="viewport" content="width=device-width, initial-scale=1">.',
        SEARCH_MOBILE,
    ),
    (FieldId.VIEWPORT, N): RemediationTemplate(
        "Declare a responsive viewport",
        "The viewport tag is empty. Set content to width=device-width, initial-scale=1.",
        SEARCH_MOBILE,
    ),
    (FieldId.VIEWPORT, I): RemediationTemplate(
        "Fix the viewport meta tag",
        "The viewport declaration could not be read ({detail}).",
        SEARCH_MOBILE,
    ),
    (FieldId.HTTPS, M): RemediationTemplate(
        "Serve the site over HTTPS",
        "The page URL is unknown. Make sure every page is served over HTTPS.",
        SEARCH_HTTPS,
    ),
    (FieldId.HTTPS, N): RemediationTemplate(
        "Serve the site over HTTPS",
        "{detail}. Install a TLS certificate and redirect HTTP to HTTPS.",
        SEARCH_HTTPS,
    ),
    (FieldId.HTTPS, I): RemediationTemplate(
        "Serve the site over HTTPS",
        "{detail}. Publish the page at an https:// address.",
        SEARCH_HTTPS,
    ),
    (FieldId.LCP, M): _AUDIT_MISSING,
    (FieldId.LCP, N): RemediationTemplate(
        "Improve Largest Contentful Paint",
        "LCP {detail}. Optimise the hero image, preload key resources and reduce server response time.",
        CORE_WEB_VITALS,
    ),
    (FieldId.LCP, I): RemediationTemplate(
        "Improve Largest Contentful Paint",
        "LCP {detail}. Compress and preload the largest element and remove render-blocking resources.",
        CORE_WEB_VITALS,
    ),
    (FieldId.CLS, M): _AUDIT_MISSING,
    (FieldId.CLS, N): RemediationTemplate(
        "Reduce layout shift",
        "CLS {detail}. Reserve space for images, ads and embeds with explicit dimensions.",
        CORE_WEB_VITALS,
    ),
    (FieldId.CLS, I): RemediationTemplate(
        "Reduce layout shift",
        "CLS {detail}. Set width and height on media and avoid inserting content above existing content.",
        CORE_WEB_VITALS,
    ),
    (FieldId.INP, M): _AUDIT_MISSING,
    (FieldId.INP, N): RemediationTemplate(
        "Improve interaction responsiveness",
        "INP {detail}. Break up long tasks and defer non-critical JavaScript.",
        CORE_WEB_VITALS,
    ),
    (FieldId.INP, I): RemediationTemplate(
        "Improve interaction responsiveness",
        "INP {detail}. Profile event handlers and move heavy work off the main thread.",
        CORE_WEB_VITALS,
    ),
    (FieldId.FCP, M): _AUDIT_MISSING,
    (FieldId.FCP, N): RemediationTemplate(
        "Speed up first render",
        "FCP {detail}. Inline critical CSS and defer render-blocking scripts.",
        CORE_WEB_VITALS,
    ),
    (FieldId.FCP, I): RemediationTemplate(
        "Speed up first render",
        "FCP {detail}. Reduce server response time and eliminate render-blocking resources.",
        CORE_WEB_VITALS,
    ),
    # Content
    (FieldId.WORD_COUNT, M): RemediationTemplate(
        "Measure on-page content",
        "No word count was supplied. Make sure the page offers substantial, crawlable text.",
        SEARCH_CONTENT,
    ),
    (FieldId.WORD_COUNT, N): RemediationTemplate(
        "Expand the page content",
        "The page has {detail}. Add original, useful content that answers the visitor's question.",
        SEARCH_CONTENT,
    ),
    (FieldId.WORD_COUNT, I): RemediationTemplate(
        "Expand the page content",
        "The word count could not be read ({detail}).",
        SEARCH_CONTENT,
    ),
    # Indexability
    (FieldId.CANONICAL, M): RemediationTemplate(
        "Add a canonical URL",
        'Add <link rel="canonical"> pointing at the preferred URL of this page.',
        SEARCH_CANONICAL,
    ),
    (FieldId.CANONICAL, N): RemediationTemplate(
        "Review the canonical URL",
        "Canonical mismatch. {detail}, not this page. Make sure the tag names the preferred version of this page.",
        SEARCH_CANONICAL,
    ),
    (FieldId.CANONICAL, I): RemediationTemplate(
        "Fix the canonical tag",
        "The canonical URL could not be read ({detail}).",
        SEARCH_CANONICAL,
    ),
    (FieldId.ROBOTS, M): RemediationTemplate(
        "Declare robots directives",
        "No robots meta tag was reported. Add one (index, follow) so indexing intent is explicit.",
        SEARCH_ROBOTS,
    ),
    (FieldId.ROBOTS, N): RemediationTemplate(
        "Allow link following",
        "{detail}. Remove nofollow unless links must not pass signals.",
        SEARCH_ROBOTS,
    ),
    (FieldId.ROBOTS, I): RemediationTemplate(
        "Remove the noindex directive",
        "{detail}. The page cannot appear in search results until noindex is removed.",
        SEARCH_ROBOTS,
    ),
    (FieldId.INTERNAL_LINKS, M): RemediationTemplate(
        "Add internal links",
        "No link data was supplied. Link to related pages so crawlers and visitors can navigate.",
        SEARCH_LINKS,
    ),
    (FieldId.INTERNAL_LINKS, N): RemediationTemplate(
        "Add more internal links",
        "The page has {detail}. Link to at least three related pages with descriptive anchor text.",
        SEARCH_LINKS,
    ),
    (FieldId.INTERNAL_LINKS, I): RemediationTemplate(
        "Add internal links",
        "Internal links could not be counted ({detail}).",
        SEARCH_LINKS,
    ),
    # Social
    (FieldId.OPEN_GRAPH, M): RemediationTemplate(
        "Add Open Graph tags",
        "No Open Graph tags were found. Add og:title, og:description and og:image for rich link previews.",
        OPEN_GRAPH,
    ),
    (FieldId.OPEN_GRAPH, N): RemediationTemplate(
        "Complete the Open Graph tags",
        "{detail}. Set og:title, og:description and og:image.",
        OPEN_GRAPH,
    ),
    (FieldId.OPEN_GRAPH, I): RemediationTemplate(
        "Add Open Graph tags",
        "{detail}. Social shares will show no title, description or image.",
        OPEN_GRAPH,
    ),
    # Structured data
    (FieldId.SCHEMA_MARKUP, M): RemediationTemplate(
        "Add structured data",
        "No schema markup was found. Describe the page with JSON-LD (Organization, Article, Product, FAQPage).",
        SCHEMA_ORG,
    ),
    (FieldId.SCHEMA_MARKUP, N): RemediationTemplate(
        "Add structured data",
        "{detail}. Add JSON-LD describing the page's main entity.",
        SCHEMA_ORG,
    ),
    (FieldId.SCHEMA_MARKUP, I): RemediationTemplate(
        "Fix the structured data",
        "Structured data could not be read ({detail}). Validate it with the Rich Results Test.",
        SCHEMA_ORG,
    ),
}


GENERAL_RECOMMENDATIONS: tuple[RemediationTemplate, ...] = (
    RemediationTemplate(
        "Monitor Core Web Vitals",
        "Re-run page-speed audits after each release to catch regressions early.",
        CORE_WEB_VITALS,
    ),
    RemediationTemplate(
        "Keep content fresh",
        "Review key pages regularly and update facts, examples and internal links.",
        SEARCH_CONTENT,
    ),
    RemediationTemplate(
        "Keep the XML sitemap current",
        "Submit an up-to-date sitemap so new and changed pages are discovered quickly.",
        "Google Search Central: build and submit a sitemap",
    ),
)
