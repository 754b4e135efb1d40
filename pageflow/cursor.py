"""Cursor mapping between page-local carets and global buffer offsets.

A spread shows two pages side by side. Its left page index is the spread
start minus the layout's page offset (1 when page 0 sits on the right of
the first spread, 0 otherwise); the right page follows it. A left page
index below zero is the cover slot, which shows no text.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Union

from .pagination import page_end, page_start


class Side(Enum):
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def coerce(cls, value: Union['Side', str]) -> 'Side':
        if isinstance(value, Side):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown page side: {value!r}") from None


class Placement(Enum):
    """Where a caret lands relative to the current spread."""
    LEFT = "left"
    RIGHT = "right"
    ADVANCE = "advance"
    RETREAT = "retreat"


@dataclass(frozen=True)
class FocusTarget:
    side: Side
    offset: int


@dataclass(frozen=True)
class SpreadBounds:
    """Buffer offsets covered by one spread."""
    left_page: int
    left_start: int
    left_end: int
    right_end: int

    @property
    def right_page(self) -> int:
        return self.left_page + 1

    @property
    def right_start(self) -> int:
        return self.left_end

    @property
    def has_left(self) -> bool:
        return self.left_page >= 0

    def side_bounds(self, side: Side) -> tuple[int, int]:
        if side is Side.LEFT:
            return self.left_start, self.left_end
        return self.left_end, self.right_end


@dataclass(frozen=True)
class Resolution:
    """Outcome of mapping a global caret back onto the spreads.

    Attributes:
        placement: Stay on the left or right page, or move spreads
        target: Side and clamped local offset on the destination spread
        spread_start: Spread start the target refers to
        delta: Spreads moved; positive forward, negative backward
        global_offset: The (clamped) caret that was resolved
    """
    placement: Placement
    target: FocusTarget
    spread_start: int
    delta: int
    global_offset: int


def spread_bounds(cuts: Sequence[int], spread_start: int, page_offset: int = 0) -> SpreadBounds:
    left_page = spread_start - page_offset
    if left_page < 0:
        left_start = left_end = 0
    else:
        left_start = page_start(cuts, left_page)
        left_end = page_end(cuts, left_page)
    right_end = page_end(cuts, left_page + 1)
    return SpreadBounds(left_page, left_start, left_end, right_end)


def to_global(side: Union[Side, str], local_offset: int, cuts: Sequence[int],
              spread_start: int, page_offset: int = 0) -> int:
    """Translate a caret inside one page of the spread into a buffer offset."""
    side = Side.coerce(side)
    bounds = spread_bounds(cuts, spread_start, page_offset)
    start, _ = bounds.side_bounds(side)
    return start + max(0, local_offset)


def _place_within(global_offset: int, bounds: SpreadBounds) -> FocusTarget:
    """Pick the page of a spread holding global_offset, clamping the offset."""
    if bounds.has_left and global_offset <= bounds.left_end:
        length = bounds.left_end - bounds.left_start
        return FocusTarget(Side.LEFT, min(max(0, global_offset - bounds.left_start), length))
    length = bounds.right_end - bounds.right_start
    return FocusTarget(Side.RIGHT, min(max(0, global_offset - bounds.right_start), length))


def to_local(global_offset: int, cuts: Sequence[int], spread_start: int,
             page_offset: int = 0) -> Resolution:
    """Resolve a global caret against freshly computed cuts.

    Exactly one outcome is chosen. A caret at or before the start of the
    spread's left page (on any spread but the first) retreats one spread
    and lands on that spread's pages. A caret inside the spread stays on
    the page that holds it; a caret exactly on the cut between the pages
    stays at the end of the left page. A caret past the right page's end
    advances as many spreads as needed to reach it.
    """
    # The last cut is the buffer length
    buffer_length = cuts[-1] if cuts else 0
    global_offset = min(max(0, global_offset), buffer_length)

    bounds = spread_bounds(cuts, spread_start, page_offset)

    if spread_start > 0 and global_offset <= bounds.left_start:
        destination = max(0, spread_start - 2)
        target = _place_within(global_offset, spread_bounds(cuts, destination, page_offset))
        return Resolution(Placement.RETREAT, target, destination,
                          (destination - spread_start) // 2, global_offset)

    if global_offset <= bounds.right_end:
        target = _place_within(global_offset, bounds)
        placement = Placement.LEFT if target.side is Side.LEFT else Placement.RIGHT
        return Resolution(placement, target, spread_start, 0, global_offset)

    destination = spread_start
    while global_offset > spread_bounds(cuts, destination, page_offset).right_end:
        destination += 2
    target = _place_within(global_offset, spread_bounds(cuts, destination, page_offset))
    return Resolution(Placement.ADVANCE, target, destination,
                      (destination - spread_start) // 2, global_offset)
