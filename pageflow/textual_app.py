"""Two-page spread editor built on Textual."""

from dataclasses import replace
from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Footer, Header, Static, TextArea

from .constants import FlowConstants
from .controller import FlowSnapshot, TextFlowController
from .cursor import Side
from .geometry import ViewportGeometry
from .oracle import MonospaceOracle
from .settings_persistence import FlowSettings, SettingsPersistence, get_persistence
from .spread import SpreadNavigator, SpreadPolicy


class PageflowApp(App):
    """Edit one text file as facing pages that reflow as you type."""

    CSS = """
    #spread {
        height: 1fr;
    }
    TextArea {
        width: 1fr;
        border: none;
        background: $surface;
    }
    #left {
        border-right: vkey $primary;
    }
    #status {
        height: 1;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+s", "save", "Save"),
        Binding("ctrl+pageup", "prev_spread", "Prev"),
        Binding("ctrl+pagedown", "next_spread", "Next"),
    ]

    def __init__(self, filename: Optional[str] = None, right_first: Optional[bool] = None,
                 settings: Optional[SettingsPersistence] = None):
        super().__init__()
        self.filename = filename
        self.settings = settings if settings is not None else get_persistence()
        flow_settings = self.settings.load(filename)
        if right_first is not None:
            flow_settings = replace(flow_settings, right_first=right_first)
        self.flow_settings: FlowSettings = flow_settings
        self.controller: Optional[TextFlowController] = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="spread"):
            yield TextArea(id="left", soft_wrap=True)
            yield TextArea(id="right", soft_wrap=True)
        yield Static(id="status")
        yield Footer()

    def _text_area(self, side: Side) -> TextArea:
        return self.query_one(f"#{side.value}", TextArea)

    def _measure_viewport(self) -> ViewportGeometry:
        size = self._text_area(Side.LEFT).content_size
        reserved_lines, bottom_reserve_lines = self.flow_settings.resolved_reserves()
        # Keep one column free for the caret at the end of a full line
        return ViewportGeometry.for_terminal(
            columns=max(1, size.width - 1),
            rows=max(1, size.height),
            reserved_lines=reserved_lines,
            bottom_reserve_lines=bottom_reserve_lines,
        )

    def on_mount(self) -> None:
        self.call_after_refresh(self._start)

    def _start(self) -> None:
        content = ""
        if self.filename:
            try:
                with open(self.filename, 'r', encoding='utf-8') as f:
                    content = f.read().replace("\r\n", "\n")
                self.sub_title = f"Editing: {self.filename}"
            except FileNotFoundError:
                self.sub_title = f"New file: {self.filename}"
            except OSError as e:
                self.notify(f"Error loading file: {e}", severity="error")
        right_first = self.flow_settings.right_first
        policy = SpreadPolicy.RIGHT_FIRST if right_first else SpreadPolicy.FACING
        self.controller = TextFlowController(
            MonospaceOracle(cell_width=FlowConstants.TERMINAL_CELL_WIDTH),
            self._measure_viewport(),
            initial_text=content,
            navigator=SpreadNavigator(policy, self.flow_settings.spread_start),
        )
        self.controller.subscribe(self._on_flow_changed)
        self._sync_pages()
        self._text_area(Side.RIGHT if self.controller.navigator.on_cover else Side.LEFT).focus()

    def on_resize(self, event) -> None:
        if self.controller is not None:
            self.call_after_refresh(self._apply_viewport)

    def _apply_viewport(self) -> None:
        if self.controller is not None:
            self.controller.set_viewport(self._measure_viewport())

    def _on_flow_changed(self, snapshot: FlowSnapshot) -> None:
        self._sync_pages()

    def _sync_pages(self) -> None:
        controller = self.controller
        if controller is None:
            return
        for side in Side:
            text_area = self._text_area(side)
            visible = controller.get_visible_text(side)
            if text_area.text != visible:
                text_area.load_text(visible)
        left = self._text_area(Side.LEFT)
        left.read_only = controller.navigator.on_cover
        left_label, right_label = controller.navigator.page_numbers()
        left_text = FlowConstants.PAGE_LABEL.format(left_label) if left_label else "Index"
        status = f"{left_text}  |  {FlowConstants.PAGE_LABEL.format(right_label)}"
        status += f"  of {controller.page_count()}"
        self.query_one("#status", Static).update(status)

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        controller = self.controller
        if controller is None:
            return
        side = Side.coerce(event.text_area.id)
        text_area = event.text_area
        if text_area.text == controller.get_visible_text(side):
            # Echo of a page we loaded ourselves
            return
        if side is Side.LEFT and controller.navigator.on_cover:
            self.notify(FlowConstants.COVER_SLOT_MESSAGE, severity="warning")
            return
        caret = text_area.document.get_index_from_location(text_area.cursor_location)
        controller.apply_edit(side, text_area.text, caret)
        self.call_after_refresh(self._restore_focus)

    def _restore_focus(self) -> None:
        if self.controller is None:
            return
        request = self.controller.take_focus_request()
        if request is None:
            return
        text_area = self._text_area(request.side)
        text_area.focus()
        text_area.cursor_location = text_area.document.get_location_from_index(request.offset)

    def action_prev_spread(self) -> None:
        if self.controller is not None:
            self.controller.prev_spread()

    def action_next_spread(self) -> None:
        if self.controller is not None:
            self.controller.next_spread()

    def action_save(self) -> None:
        """Save the buffer and remember the layout for this file."""
        if self.controller is None:
            return
        if not self.filename:
            self.notify("No filename set", severity="warning")
            return
        try:
            with open(self.filename, 'w', encoding='utf-8') as f:
                f.write(self.controller.full_text)
        except OSError as e:
            self.notify(f"Error saving: {e}", severity="error")
            return
        self.flow_settings = self.flow_settings.with_spread(self.controller.spread_start)
        self.settings.save(self.filename, self.flow_settings)
        self.notify(f"Saved to {self.filename}")

    def on_unmount(self) -> None:
        if self.controller is not None:
            self.controller.close()
