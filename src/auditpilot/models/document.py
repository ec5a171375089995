"""
AuditPilot Document Models

The laid-out report: pages of positioned blocks. Coordinates are in PDF
points measured from the top edge of the page, so a block occupies
[y, y + height] vertically.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Optional

from .enums import BlockKind


@dataclass(frozen=True)
class Block:
    """
    One positioned block of text (optionally on a filled box).

    Attributes:
        kind: What the block represents
        y: Cursor position when the block was emitted
        height: Vertical extent, padding included
        lines: Wrapped text lines
        value: Fill fraction for BAR blocks
    """
    kind: BlockKind
    y: float
    height: float
    lines: tuple[str, ...] = ()
    font: str = "Helvetica"
    font_size: float = 10.0
    leading: float = 13.0
    color: str = "#1F2937"
    fill: Optional[str] = None
    x: float = 50.0
    width: float = 495.0
    padding: float = 0.0
    value: Optional[float] = None

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "kind": self.kind.value,
            "y": round(self.y, 2),
            "height": round(self.height, 2),
            "lines": list(self.lines),
            "font": self.font,
            "font_size": self.font_size,
            "color": self.color,
        }
        if self.fill:
            result["fill"] = self.fill
        if self.value is not None:
            result["value"] = self.value
        return result


@dataclass(frozen=True)
class Page:
    """
    A page of blocks.

    Attributes:
        number: 1-based page number
        blocks: Blocks in emission order
        break_at: Cursor position when the page was closed because the next
            block did not fit; None for the last page
    """
    number: int
    blocks: tuple[Block, ...]
    break_at: Optional[float] = None


@dataclass(frozen=True)
class ReportDocument:
    """A fully laid-out report, ready for a PDF backend."""
    page_width: float
    page_height: float
    top_margin: float
    bottom_margin: float
    pages: tuple[Page, ...]
    title: str = ""
    generated_at: str = ""

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def bottom_limit(self) -> float:
        """Lowest y any block may reach."""
        return self.page_height - self.bottom_margin

    def iter_blocks(self) -> Iterator[tuple[Page, Block]]:
        for page in self.pages:
            for block in page.blocks:
                yield page, block

    def text(self) -> str:
        """All block text in reading order, one line per row."""
        return "\n".join(line for _, block in self.iter_blocks() for line in block.lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "generated_at": self.generated_at,
            "page_width": self.page_width,
            "page_height": self.page_height,
            "pages": [
                {"number": p.number, "blocks": [b.to_dict() for b in p.blocks]}
                for p in self.pages
            ],
        }
