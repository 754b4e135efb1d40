"""Tests for the Textual spread editor."""

import asyncio
from unittest.mock import Mock

import pytest

from pageflow.controller import TextFlowController
from pageflow.cursor import Side, to_local
from pageflow.geometry import ViewportGeometry
from pageflow.oracle import MonospaceOracle
from pageflow.settings_persistence import FlowSettings, SettingsPersistence
from pageflow.textual_app import PageflowApp


@pytest.fixture
def settings(tmp_path):
    return SettingsPersistence(config_dir=tmp_path / "config")


def run(coro):
    return asyncio.run(coro)


def attach_controller(app, text):
    app.controller = TextFlowController(
        MonospaceOracle(cell_width=1),
        ViewportGeometry.for_terminal(10, 10),
        initial_text=text,
    )
    return app.controller


def caret_index(text_area):
    return text_area.document.get_index_from_location(text_area.cursor_location)


def test_app_creation(settings):
    app = PageflowApp(settings=settings)
    assert app.filename is None
    assert app.flow_settings == FlowSettings()
    assert app.controller is None


def test_app_with_filename(settings):
    app = PageflowApp(filename="notes.txt", settings=settings)
    assert app.filename == "notes.txt"


def test_saved_settings_are_restored(tmp_path, settings):
    doc = str(tmp_path / "notes.txt")
    settings.save(doc, FlowSettings(right_first=True, reserved_lines=2, spread_start=4))
    app = PageflowApp(filename=doc, settings=settings)
    assert app.flow_settings.right_first is True
    assert app.flow_settings.resolved_reserves()[0] == 2
    assert app.flow_settings.spread_start == 4


def test_command_line_overrides_saved_policy(tmp_path, settings):
    doc = str(tmp_path / "notes.txt")
    settings.save(doc, FlowSettings(right_first=True))
    app = PageflowApp(filename=doc, right_first=False, settings=settings)
    assert app.flow_settings.right_first is False


def test_save_writes_buffer_and_layout(tmp_path, settings):
    doc = tmp_path / "notes.txt"
    app = PageflowApp(filename=str(doc), settings=settings)
    app.notify = Mock()
    controller = attach_controller(app, "x" * 450)
    controller.next_spread()

    app.action_save()

    assert doc.read_text(encoding="utf-8") == "x" * 450
    saved = settings.load(str(doc))
    assert saved.spread_start == 2
    assert saved.right_first is False
    app.notify.assert_called_once()


def test_save_without_filename_warns(settings):
    app = PageflowApp(settings=settings)
    app.notify = Mock()
    attach_controller(app, "hello")
    app.action_save()
    app.notify.assert_called_once_with("No filename set", severity="warning")


def test_spread_actions_move_the_controller(settings):
    app = PageflowApp(settings=settings)
    controller = attach_controller(app, "x" * 450)
    app.action_next_spread()
    assert controller.spread_start == 2
    app.action_prev_spread()
    assert controller.spread_start == 0


def test_actions_before_start_are_ignored(settings):
    app = PageflowApp(settings=settings)
    app.action_next_spread()
    app.action_prev_spread()
    app.action_save()
    assert app.controller is None


def test_typing_past_the_spread_follows_the_caret(tmp_path, settings):
    """Typing until both pages overflow moves to the next spread with the caret."""
    async def scenario():
        app = PageflowApp(filename=str(tmp_path / "notes.txt"), settings=settings)
        async with app.run_test(size=(60, 12)) as pilot:
            await pilot.pause()
            controller = app.controller
            assert controller is not None
            assert app.focused is app.query_one("#left")

            typed = 0
            while controller.spread_start == 0 and typed < 2000:
                await pilot.press("x")
                typed += 1
            for _ in range(5):
                await pilot.press("x")
                typed += 1
            await pilot.pause()

            assert controller.spread_start == 2
            assert controller.full_text == "x" * typed
            assert len(controller.cuts) >= 3
            assert controller.take_focus_request() is None

            target = to_local(typed, controller.cuts, controller.spread_start).target
            focused = app.query_one(f"#{target.side.value}")
            assert app.focused is focused
            assert caret_index(focused) == target.offset
            assert focused.text == controller.get_visible_text(target.side)
            assert app.query_one("#left").text == controller.get_visible_text(Side.LEFT)

    run(scenario())


def test_right_first_starts_on_the_right_page(tmp_path, settings):
    async def scenario():
        app = PageflowApp(filename=str(tmp_path / "notes.txt"), right_first=True,
                          settings=settings)
        async with app.run_test(size=(60, 12)) as pilot:
            await pilot.pause()
            assert app.focused is app.query_one("#right")
            assert app.query_one("#left").read_only
            await pilot.press("a", "b")
            await pilot.pause()
            assert app.controller.full_text == "ab"
            assert app.controller.spread_start == 0

    run(scenario())
