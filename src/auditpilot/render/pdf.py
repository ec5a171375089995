"""
AuditPilot PDF Backend

Draws a laid-out ReportDocument onto a reportlab canvas and returns the
PDF bytes. The layout is already final; this module only converts
top-down block coordinates into reportlab's bottom-up ones.
"""
from __future__ import annotations

import io
import logging

from reportlab.lib.colors import HexColor
from reportlab.pdfgen import canvas

from ..exceptions import RenderError
from ..models import Block, BlockKind, ReportDocument
from .layout import BAR_HEIGHT


logger = logging.getLogger(__name__)

TRACK_COLOR = "#E5E7EB"
PAGE_NUMBER_COLOR = "#6B7280"


def _draw_bar(c: canvas.Canvas, block: Block, top: float) -> None:
    c.setFont(block.font, block.font_size)
    c.setFillColor(HexColor(block.color))
    c.drawString(block.x, top - block.padding - block.font_size, block.lines[0] if block.lines else "")

    track_y = top - block.height + block.padding + 1
    c.setFillColor(HexColor(TRACK_COLOR))
    c.rect(block.x, track_y, block.width, BAR_HEIGHT, stroke=0, fill=1)
    if block.value and block.fill:
        c.setFillColor(HexColor(block.fill))
        c.rect(block.x, track_y, block.width * block.value, BAR_HEIGHT, stroke=0, fill=1)


def _draw_block(c: canvas.Canvas, block: Block, page_height: float) -> None:
    top = page_height - block.y
    if block.kind == BlockKind.BAR:
        _draw_bar(c, block, top)
        return

    if block.fill:
        c.setFillColor(HexColor(block.fill))
        c.roundRect(block.x, top - block.height, block.width, block.height, 4, stroke=0, fill=1)

    c.setFont(block.font, block.font_size)
    c.setFillColor(HexColor(block.color))
    for index, line in enumerate(block.lines):
        baseline = top - block.padding - block.font_size - index * block.leading
        c.drawString(block.x + block.padding, baseline, line)


def render_pdf(document: ReportDocument, *, author: str = "") -> bytes:
    """
    Render a laid-out document to PDF bytes.

    Output is byte-identical for identical documents (reportlab invariant mode).

    Args:
        document: Layout from auditpilot.render.render
        author: PDF author metadata

    Returns:
        PDF file contents

    Raises:
        RenderError: If reportlab rejects the document
    """
    buffer = io.BytesIO()
    try:
        c = canvas.Canvas(
            buffer,
            pagesize=(document.page_width, document.page_height),
            invariant=1,
        )
        c.setTitle(document.title)
        if author:
            c.setAuthor(author)

        total = document.page_count
        for page in document.pages:
            for block in page.blocks:
                _draw_block(c, block, document.page_height)
            c.setFont("Helvetica", 8)
            c.setFillColor(HexColor(PAGE_NUMBER_COLOR))
            c.drawRightString(
                document.page_width - 50,
                document.bottom_margin / 2,
                f"Page {page.number} of {total}",
            )
            c.showPage()
        c.save()
    except (ValueError, TypeError, KeyError, AttributeError, OSError) as e:
        raise RenderError(message=f"PDF rendering failed: {e}", details={"pages": document.page_count}) from e

    data = buffer.getvalue()
    logger.debug(f"Rendered PDF ({len(data)} bytes, {document.page_count} pages)")
    return data
