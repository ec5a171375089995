"""
AuditPilot Document Renderer

Layout (pure, testable) and the reportlab PDF backend:

    from auditpilot.render import render, render_pdf

    document = render(snapshot, verdicts, breakdown, recommendations)
    pdf_bytes = render_pdf(document)
"""
from __future__ import annotations

from .layout import BAR_HEIGHT, PageCursor, PageGeometry, TextStyle, wrap
from .pdf import render_pdf
from .sections import RenderOptions, ratio_color, render

__all__ = [
    "BAR_HEIGHT",
    "PageCursor",
    "PageGeometry",
    "RenderOptions",
    "TextStyle",
    "ratio_color",
    "render",
    "render_pdf",
    "wrap",
]
