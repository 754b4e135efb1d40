"""Viewport geometry for paginated text flow.

A viewport describes the content box of one rendered page: its size, the
typography used to lay text out inside it, and the lines reserved for a
header on the first page and a bottom margin on every page. The pagination
engine treats it as opaque and only hands it to the measurement oracle.
"""

from dataclasses import dataclass, replace
from typing import Dict, Optional

from .constants import FlowConstants


@dataclass(frozen=True)
class ViewportGeometry:
    """Geometry and typography of a page's content box.

    Attributes:
        content_width: Width available to text
        content_height: Height of the content box, before reserves
        line_height: Height of one rendered line
        font_family: Font used to measure text
        font_size: Font size in the same units as the box
        letter_spacing: Extra advance added after every character
        reserved_lines: Lines kept free for a header, first page only
        bottom_reserve_lines: Lines kept free at the bottom of every page
    """
    content_width: float
    content_height: float
    line_height: float
    font_family: str = FlowConstants.FONT_FAMILY
    font_size: float = FlowConstants.FONT_SIZE
    letter_spacing: float = 0.0
    reserved_lines: int = 0
    bottom_reserve_lines: int = 0

    def __post_init__(self):
        for name in ("content_width", "content_height", "line_height", "font_size"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")
        if self.reserved_lines < 0 or self.bottom_reserve_lines < 0:
            raise ValueError("Reserved line counts must be non-negative")

    def usable_height(self, page_index: int = 0) -> float:
        """Height left for text on the given page once reserves are taken."""
        reserve = self.bottom_reserve_lines
        if page_index == 0:
            reserve += self.reserved_lines
        return max(0.0, self.content_height - reserve * self.line_height)

    def for_page(self, page_index: int) -> 'ViewportGeometry':
        """Effective viewport handed to the oracle for one page."""
        return replace(
            self,
            content_height=self.usable_height(page_index),
            reserved_lines=0,
            bottom_reserve_lines=0,
        )

    @classmethod
    def for_terminal(cls, columns: int, rows: int, reserved_lines: int = 0,
                     bottom_reserve_lines: int = 0) -> 'ViewportGeometry':
        """Create a viewport measured in terminal cells.

        One cell is one unit wide and one line is one unit high, so a
        10x5 viewport holds five wrapped lines of ten characters.
        """
        return cls(
            content_width=float(max(0, columns)),
            content_height=float(max(0, rows)),
            line_height=1.0,
            font_family="monospace",
            font_size=1.0,
            reserved_lines=reserved_lines,
            bottom_reserve_lines=bottom_reserve_lines,
        )


# Pre-defined viewports
VIEWPORT_PRESETS: Dict[str, ViewportGeometry] = {
    "notebook": ViewportGeometry(
        content_width=FlowConstants.PAGE_CONTENT_WIDTH,
        content_height=FlowConstants.PAGE_CONTENT_HEIGHT,
        line_height=FlowConstants.LINE_HEIGHT,
        font_family=FlowConstants.FONT_FAMILY,
        font_size=FlowConstants.FONT_SIZE,
        reserved_lines=FlowConstants.HEADER_ROWS,
        bottom_reserve_lines=FlowConstants.BOTTOM_RESERVE_LINES,
    ),
    "terminal": ViewportGeometry.for_terminal(
        columns=40,
        rows=20,
        reserved_lines=FlowConstants.HEADER_ROWS,
        bottom_reserve_lines=FlowConstants.BOTTOM_RESERVE_LINES,
    ),
}


def get_viewport_preset(name: str) -> Optional[ViewportGeometry]:
    """Get a preset viewport by name.

    Args:
        name: Name of the preset

    Returns:
        ViewportGeometry if found, None otherwise
    """
    return VIEWPORT_PRESETS.get(name)
