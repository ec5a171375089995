"""
AuditPilot Page Layout

A single-cursor flow layout. Blocks are placed top to bottom; before a
block is placed the cursor checks whether it fits above the bottom margin
and starts a new page if it does not. Text taller than a whole page is
split line-wise across pages.

Hard invariant: for every placed block, y + height <= page height - bottom margin.

Line wrapping uses reportlab's font metrics (simpleSplit), so the heights
computed here match what the PDF backend draws.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit

from ..models import Block, BlockKind, Page, ReportDocument


BAR_HEIGHT = 8.0


@dataclass(frozen=True)
class PageGeometry:
    """Page size and margins in PDF points (A4 by default)."""
    width: float = A4[0]
    height: float = A4[1]
    top_margin: float = 50.0
    bottom_margin: float = 60.0
    side_margin: float = 50.0

    @property
    def content_width(self) -> float:
        return self.width - 2 * self.side_margin

    @property
    def bottom_limit(self) -> float:
        return self.height - self.bottom_margin

    @property
    def usable_height(self) -> float:
        return self.bottom_limit - self.top_margin


@dataclass(frozen=True)
class TextStyle:
    """How a block of text is set."""
    font: str = "Helvetica"
    size: float = 10.0
    color: str = "#1F2937"
    fill: Optional[str] = None
    padding: float = 0.0
    gap: float = 6.0  # Space below the block
    indent: float = 0.0

    @property
    def leading(self) -> float:
        return round(self.size * 1.3, 2)


def wrap(text: str, style: TextStyle, width: float) -> list[str]:
    """Wrap text to width using the style's font metrics."""
    if not text:
        return []
    return [str(line) for line in simpleSplit(text, style.font, style.size, width)]


@dataclass
class PageCursor:
    """
    Layout state machine.

    State is the list of pages so far plus the vertical cursor on the last
    page. The only transitions are "place block" and "start new page", and
    a new page is started only when the next block does not fit.
    """

    geometry: PageGeometry = field(default_factory=PageGeometry)
    y: float = field(init=False)
    _pages: list[list[Block]] = field(init=False, repr=False)
    _breaks: list[float] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._pages = [[]]
        self._breaks = []
        self.y = self.geometry.top_margin

    @property
    def page_number(self) -> int:
        return len(self._pages)

    @property
    def page_is_empty(self) -> bool:
        return not self._pages[-1]

    def fits(self, height: float) -> bool:
        return self.y + height <= self.geometry.bottom_limit

    def new_page(self) -> None:
        self._breaks.append(self.y)
        self._pages.append([])
        self.y = self.geometry.top_margin

    def place(
        self,
        kind: BlockKind,
        height: float,
        lines: list[str],
        style: TextStyle,
        value: Optional[float] = None,
    ) -> Block:
        """
        Place a block, breaking the page first if it does not fit.

        Raises:
            ValueError: If the block is taller than an empty page
        """
        if not self.fits(height):
            if height > self.geometry.usable_height:
                raise ValueError(
                    f"Block of height {height:.1f} exceeds the page budget "
                    f"of {self.geometry.usable_height:.1f}"
                )
            self.new_page()

        block = Block(
            kind=kind,
            y=self.y,
            height=height,
            lines=tuple(lines),
            font=style.font,
            font_size=style.size,
            leading=style.leading,
            color=style.color,
            fill=style.fill,
            x=self.geometry.side_margin + style.indent,
            width=self.geometry.content_width - style.indent,
            padding=style.padding,
            value=value,
        )
        self._pages[-1].append(block)
        self.y += height + style.gap
        return block

    def text(self, kind: BlockKind, text: str, style: TextStyle) -> list[Block]:
        """
        Place wrapped text, splitting it across pages if it is taller than a page.

        Returns:
            The placed blocks (empty when text is empty)
        """
        inner_width = self.geometry.content_width - style.indent - 2 * style.padding
        lines = wrap(text, style, inner_width)
        if not lines:
            return []

        height = len(lines) * style.leading + 2 * style.padding
        if height <= self.geometry.usable_height:
            return [self.place(kind, height, lines, style)]

        blocks = []
        while lines:
            capacity = self._line_capacity(style)
            if capacity < 1:
                if self.page_is_empty:
                    raise ValueError(f"Style {style.font} {style.size} cannot fit a single line")
                self.new_page()
                continue
            chunk, lines = lines[:capacity], lines[capacity:]
            blocks.append(self.place(kind, len(chunk) * style.leading + 2 * style.padding, chunk, style))
        return blocks

    def _line_capacity(self, style: TextStyle) -> int:
        available = self.geometry.bottom_limit - self.y - 2 * style.padding
        capacity = int(available // style.leading) if available > 0 else 0
        while capacity > 0 and not self.fits(capacity * style.leading + 2 * style.padding):
            capacity -= 1
        return capacity

    def bar(self, label: str, fraction: float, style: TextStyle) -> Block:
        """A labelled horizontal bar filled to fraction (0-1)."""
        height = style.leading + BAR_HEIGHT + 2 * style.padding + 2
        return self.place(BlockKind.BAR, height, [label], style, value=max(0.0, min(1.0, fraction)))

    def skip(self, amount: float) -> None:
        """Move the cursor down without placing anything."""
        self.y += amount

    def finish(self, title: str = "", generated_at: str = "") -> ReportDocument:
        pages = tuple(
            Page(
                number=index + 1,
                blocks=tuple(blocks),
                break_at=self._breaks[index] if index < len(self._breaks) else None,
            )
            for index, blocks in enumerate(self._pages)
        )
        return ReportDocument(
            page_width=self.geometry.width,
            page_height=self.geometry.height,
            top_margin=self.geometry.top_margin,
            bottom_margin=self.geometry.bottom_margin,
            pages=pages,
            title=title,
            generated_at=generated_at,
        )
