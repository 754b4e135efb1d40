"""Text flow controller: one buffer, paginated and edited through a spread."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from .cursor import Placement, Side, to_global, to_local
from .geometry import ViewportGeometry
from .oracle import MeasurementOracle, StaleOracleReference
from .pagination import clamp_cuts, compute_cuts, cuts_equal, page_text
from .ruling import rule_positions
from .spread import SpreadNavigator, SpreadPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlowSnapshot:
    """What consumers are republished after every change."""
    full_text: str
    cuts: tuple[int, ...]
    spread_start: int


@dataclass(frozen=True)
class FocusRequest:
    """Caret to restore once the page it refers to has been rendered."""
    side: Side
    offset: int
    spread_start: int


Listener = Callable[[FlowSnapshot], None]


class TextFlowController:
    """Owns the buffer, its cut list and the visible spread.

    Edits arrive per side as the page's new text and caret. They are
    spliced into the buffer, the whole buffer is repaginated, and the caret
    is resolved onto the new pages, moving the spread forward or back when
    the caret left it. The resulting focus request is held until the
    rendering layer takes it after drawing the new pages.

    The oracle's measurement surface is opened here and closed by close().
    """

    def __init__(self, oracle: MeasurementOracle, viewport: ViewportGeometry,
                 initial_text: str = "", navigator: Optional[SpreadNavigator] = None,
                 policy: SpreadPolicy = SpreadPolicy.FACING):
        self.oracle = oracle
        self.oracle.open()
        self._viewport = viewport
        self._buffer = initial_text
        self.navigator = navigator if navigator is not None else SpreadNavigator(policy)
        self._cuts: list[int] = clamp_cuts([], len(initial_text))
        self._listeners: list[Listener] = []
        self._pending_focus: Optional[FocusRequest] = None
        self._cuts = self._paginate(self._buffer)

    # --- State ---
    @property
    def full_text(self) -> str:
        return self._buffer

    @property
    def cuts(self) -> tuple[int, ...]:
        return tuple(self._cuts)

    @property
    def spread_start(self) -> int:
        return self.navigator.spread_start

    @property
    def viewport(self) -> ViewportGeometry:
        return self._viewport

    @property
    def pending_focus(self) -> Optional[FocusRequest]:
        return self._pending_focus

    def snapshot(self) -> FlowSnapshot:
        return FlowSnapshot(self._buffer, tuple(self._cuts), self.navigator.spread_start)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener with a snapshot after every change.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    # --- Pagination ---
    def _paginate(self, text: str) -> list[int]:
        """Cuts for text, or the previous cuts if the oracle is unavailable."""
        try:
            cuts = compute_cuts(text, self._viewport, self.oracle)
        except StaleOracleReference as e:
            logger.warning(f"Skipping repagination: {e}")
            cuts = clamp_cuts(self._cuts, len(text))
        if cuts_equal(cuts, self._cuts):
            return self._cuts
        return cuts

    def page_count(self) -> int:
        return len(self._cuts)

    def page_text(self, page_index: int) -> str:
        return page_text(self._buffer, self._cuts, page_index)

    def get_visible_text(self, side: Union[Side, str]) -> str:
        side = Side.coerce(side)
        bounds = self.navigator.bounds(self._cuts)
        if side is Side.LEFT and not bounds.has_left:
            return ""
        start, end = bounds.side_bounds(side)
        return self._buffer[start:end]

    def page_index(self, side: Union[Side, str]) -> int:
        """Page shown on a side of the current spread, -1 for the cover slot."""
        side = Side.coerce(side)
        if side is Side.LEFT:
            return self.navigator.left_page
        return self.navigator.right_page

    def rules(self, side: Union[Side, str], device_pixel_ratio: float = 1.0) -> list[float]:
        """Guide-line offsets for the page shown on a side."""
        index = self.page_index(side)
        if index < 0:
            return []
        try:
            lines = self.oracle.line_count(self.page_text(index), self._viewport.for_page(index))
        except StaleOracleReference as e:
            logger.warning(f"Skipping ruling: {e}")
            return []
        return rule_positions(self._viewport, lines, index, device_pixel_ratio)

    # --- Editing ---
    def apply_edit(self, side: Union[Side, str], new_local_text: str,
                   local_caret: int) -> FocusRequest:
        """Splice a page's edited text into the buffer and repaginate.

        Args:
            side: Page of the current spread that was edited
            new_local_text: Full new text of that page
            local_caret: Caret inside new_local_text after the edit

        Returns:
            The focus request to fulfil after the new pages are drawn.
        """
        side = Side.coerce(side)
        navigator = self.navigator
        bounds = navigator.bounds(self._cuts)
        if side is Side.LEFT and not bounds.has_left:
            raise ValueError("The cover slot holds no page text")

        start, end = bounds.side_bounds(side)
        local_caret = min(max(0, local_caret), len(new_local_text))
        global_caret = to_global(side, local_caret, self._cuts,
                                 navigator.spread_start, navigator.page_offset)

        self._buffer = self._buffer[:start] + new_local_text + self._buffer[end:]
        self._cuts = self._paginate(self._buffer)

        resolution = to_local(global_caret, self._cuts, navigator.spread_start,
                              navigator.page_offset)
        if resolution.global_offset != global_caret:
            logger.debug(f"Clamping caret {global_caret} to {resolution.global_offset}")
        if resolution.placement is Placement.ADVANCE:
            navigator.auto_advance(resolution.delta)
        elif resolution.placement is Placement.RETREAT:
            navigator.auto_retreat()

        self._pending_focus = FocusRequest(resolution.target.side, resolution.target.offset,
                                           navigator.spread_start)
        self._publish()
        return self._pending_focus

    def take_focus_request(self) -> Optional[FocusRequest]:
        """Hand the pending focus request to the renderer and forget it."""
        request = self._pending_focus
        self._pending_focus = None
        return request

    def set_text(self, text: str) -> None:
        """Replace the whole buffer, e.g. when another document is loaded."""
        self._buffer = text
        self._cuts = self._paginate(text)
        request = self._pending_focus
        if request is not None:
            bounds = self.navigator.bounds(self._cuts)
            start, end = bounds.side_bounds(request.side)
            if request.offset > end - start:
                logger.debug(f"Clamping focus offset {request.offset} to {end - start}")
                self._pending_focus = FocusRequest(request.side, end - start,
                                                   request.spread_start)
        self._publish()

    # --- Navigation and layout ---
    def _navigate(self, move: Callable[[], int]) -> None:
        previous = self.navigator.spread_start
        move()
        if self.navigator.spread_start != previous:
            self._pending_focus = None
            self._publish()

    def set_spread(self, index: int) -> None:
        """Manual navigation to the spread containing slot index."""
        self._navigate(lambda: self.navigator.set_spread(index))

    def next_spread(self) -> None:
        self._navigate(self.navigator.next)

    def prev_spread(self) -> None:
        self._navigate(self.navigator.prev)

    def go_to_page(self, page_index: int) -> None:
        self._navigate(lambda: self.navigator.go_to_page(page_index))

    def set_viewport(self, viewport: ViewportGeometry) -> None:
        """Repaginate for a new page size or typography."""
        if viewport == self._viewport:
            return
        self._viewport = viewport
        cuts = self._paginate(self._buffer)
        if cuts is not self._cuts:
            self._cuts = cuts
            self._publish()

    # --- Lifecycle ---
    def close(self) -> None:
        self.oracle.close()
        self._listeners.clear()
        self._pending_focus = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
