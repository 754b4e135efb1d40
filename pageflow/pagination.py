"""Pagination engine: cut one text buffer into page-sized slices."""

import logging
from typing import Sequence

from .geometry import ViewportGeometry
from .oracle import MeasurementOracle

logger = logging.getLogger(__name__)


def compute_cuts(buffer: str, viewport: ViewportGeometry,
                 oracle: MeasurementOracle) -> list[int]:
    """Compute the exclusive end offset of every page of buffer.

    Pages are filled left to right. For each page the largest prefix of
    the remaining text that the oracle says fits is found by binary
    search, which relies on rendered height never shrinking as text grows.
    The first page loses the viewport's reserved header lines.

    Returns:
        Strictly increasing offsets ending at len(buffer). An empty buffer
        still yields one (empty) page, [0].

    Raises:
        StaleOracleReference: if the oracle's measurement surface is gone.
    """
    length = len(buffer)
    cuts: list[int] = []
    start = 0
    page_index = 0
    while start < length or not cuts:
        page_viewport = viewport.for_page(page_index)
        low = start
        high = length
        best = start
        while low <= high:
            mid = (low + high) // 2
            if oracle.fits(buffer[start:mid], page_viewport):
                best = mid
                low = mid + 1
            else:
                high = mid - 1
        if best == start and start < length:
            # Not even one character fits: force progress
            logger.debug(f"Degenerate fit on page {page_index} at offset {start}, "
                         f"forcing a one-character page")
            best = start + 1
        cuts.append(best)
        start = best
        page_index += 1
    return cuts


def page_count(cuts: Sequence[int]) -> int:
    return max(1, len(cuts))


def page_start(cuts: Sequence[int], page_index: int) -> int:
    """Start offset of a page; pages past the end start at the buffer end."""
    if page_index <= 0 or not cuts:
        return 0
    return cuts[min(page_index, len(cuts)) - 1]


def page_end(cuts: Sequence[int], page_index: int) -> int:
    """Exclusive end offset of a page; pages past the end are empty."""
    if page_index < 0 or not cuts:
        return 0
    return cuts[min(page_index, len(cuts) - 1)]


def page_bounds(cuts: Sequence[int], page_index: int) -> tuple[int, int]:
    return page_start(cuts, page_index), page_end(cuts, page_index)


def page_text(buffer: str, cuts: Sequence[int], page_index: int) -> str:
    start, end = page_bounds(cuts, page_index)
    return buffer[start:end]


def cuts_equal(a: Sequence[int], b: Sequence[int]) -> bool:
    return len(a) == len(b) and all(x == y for x, y in zip(a, b))


def clamp_cuts(cuts: Sequence[int], length: int) -> list[int]:
    """Trim a stale cut list so no cut passes the end of a shorter buffer."""
    clamped: list[int] = []
    for cut in cuts:
        if cut >= length:
            break
        clamped.append(cut)
    clamped.append(length)
    return clamped
