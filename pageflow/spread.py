"""Spread navigation: which pair of pages is on screen."""

from enum import Enum
from typing import Optional, Sequence

from .cursor import SpreadBounds, spread_bounds


class SpreadPolicy(Enum):
    """How pages are laid out on spreads.

    FACING puts page 0 on the left of the first spread. RIGHT_FIRST keeps
    the left of the first spread for an index or cover panel and puts
    page 0 on its right, so later spreads start on odd pages.
    """
    FACING = "facing"
    RIGHT_FIRST = "right_first"


class SpreadNavigator:
    """State machine over spread starts 0, 2, 4, ...

    spread_start counts display slots. Under FACING a slot is a page;
    under RIGHT_FIRST slot 0 is the cover and page n sits in slot n + 1.
    Navigation is unbounded forward so blank pages can be typed into.
    """

    def __init__(self, policy: SpreadPolicy = SpreadPolicy.FACING, spread_start: int = 0):
        self.policy = policy
        self._spread_start = 0
        self.set_spread(spread_start)

    @property
    def spread_start(self) -> int:
        return self._spread_start

    @property
    def page_offset(self) -> int:
        return 1 if self.policy is SpreadPolicy.RIGHT_FIRST else 0

    @property
    def left_page(self) -> int:
        """Page index on the left, -1 for the cover slot."""
        return self._spread_start - self.page_offset

    @property
    def right_page(self) -> int:
        return self.left_page + 1

    @property
    def on_cover(self) -> bool:
        return self.left_page < 0

    def bounds(self, cuts: Sequence[int]) -> SpreadBounds:
        return spread_bounds(cuts, self._spread_start, self.page_offset)

    def next(self) -> int:
        self._spread_start += 2
        return self._spread_start

    def prev(self) -> int:
        self._spread_start = max(0, self._spread_start - 2)
        return self._spread_start

    def set_spread(self, index: int) -> int:
        """Show the spread containing slot index."""
        if index < 0:
            raise ValueError(f"Spread index must be non-negative, got {index}")
        self._spread_start = index & ~1
        return self._spread_start

    def go_to_page(self, page_index: int) -> int:
        """Show the spread on which a page appears."""
        if page_index < 0:
            raise ValueError(f"Page index must be non-negative, got {page_index}")
        return self.set_spread(page_index + self.page_offset)

    def auto_advance(self, delta: int = 1) -> int:
        """Move forward delta spreads after the caret overflowed the spread."""
        for _ in range(max(1, delta)):
            self.next()
        return self._spread_start

    def auto_retreat(self) -> int:
        """Move back one spread after the caret moved before the spread."""
        return self.prev()

    def can_go_prev(self) -> bool:
        return self._spread_start > 0

    def can_go_next(self) -> bool:
        return True

    def page_numbers(self) -> tuple[Optional[int], int]:
        """One-based page labels for the left and right pages.

        The cover slot has no label.
        """
        left = self.left_page + 1 if not self.on_cover else None
        return left, self.right_page + 1
