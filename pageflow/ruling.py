"""Line-guide overlay for ruled pages.

Guides are drawn under each rendered line of a page, at the line's
baseline, the way a ruled notebook page looks. Positions are measured
from the top of the page's content box.
"""

from typing import Optional

from .constants import FlowConstants
from .geometry import ViewportGeometry


def rule_positions(viewport: ViewportGeometry, line_count: int, page_index: int = 0,
                   device_pixel_ratio: float = 1.0,
                   bottom_trim_lines: int = FlowConstants.RULE_BOTTOM_TRIM_LINES) -> list[float]:
    """Return the y offset of the guide under each rendered line.

    The first page starts below its reserved header rows. The step is the
    line height snapped to whole device pixels, guides falling inside the
    bottom trim are dropped, and guides closer than half a unit to the
    previous one are merged.
    """
    if line_count <= 0 or viewport.line_height <= 0:
        return []
    dpr = device_pixel_ratio if device_pixel_ratio > 0 else 1.0
    step = max(1, round(viewport.line_height * dpr)) / dpr
    top = viewport.reserved_lines * step if page_index == 0 else 0.0
    bottom_limit = viewport.content_height - bottom_trim_lines * step

    positions: list[float] = []
    last: Optional[float] = None
    for line in range(line_count):
        y = round((top + (line + 1) * step) * dpr) / dpr
        if y > bottom_limit:
            break
        if last is not None and abs(y - last) < FlowConstants.RULE_DEDUPE_DISTANCE:
            continue
        positions.append(y)
        last = y
    return positions
