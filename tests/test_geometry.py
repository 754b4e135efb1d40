"""Tests for viewport geometry and presets."""

import pytest

from pageflow.constants import FlowConstants
from pageflow.geometry import VIEWPORT_PRESETS, ViewportGeometry, get_viewport_preset


def test_header_reserve_applies_to_first_page_only():
    viewport = ViewportGeometry(content_width=100, content_height=240, line_height=24,
                                reserved_lines=3, bottom_reserve_lines=1)
    assert viewport.usable_height(0) == 240 - 4 * 24
    assert viewport.usable_height(1) == 240 - 24
    assert viewport.usable_height(7) == 240 - 24


def test_usable_height_never_negative():
    viewport = ViewportGeometry(content_width=100, content_height=10, line_height=24,
                                reserved_lines=3)
    assert viewport.usable_height(0) == 0.0


def test_for_page_drops_reserves():
    viewport = ViewportGeometry(content_width=100, content_height=240, line_height=24,
                                reserved_lines=3)
    first = viewport.for_page(0)
    assert first.content_height == 168
    assert first.reserved_lines == 0
    assert first.content_width == 100
    assert viewport.for_page(1).content_height == 240


def test_for_terminal():
    viewport = ViewportGeometry.for_terminal(80, 24, reserved_lines=2)
    assert viewport.content_width == 80
    assert viewport.content_height == 24
    assert viewport.line_height == 1
    assert viewport.usable_height(0) == 22


@pytest.mark.parametrize("field", ["content_width", "content_height", "line_height"])
def test_negative_dimensions_rejected(field):
    values = {"content_width": 10, "content_height": 10, "line_height": 1}
    values[field] = -1
    with pytest.raises(ValueError):
        ViewportGeometry(**values)


def test_negative_reserve_rejected():
    with pytest.raises(ValueError):
        ViewportGeometry(content_width=10, content_height=10, line_height=1, reserved_lines=-1)


def test_presets():
    notebook = get_viewport_preset("notebook")
    assert notebook.content_height == FlowConstants.PAGE_CONTENT_HEIGHT
    assert notebook.reserved_lines == FlowConstants.HEADER_ROWS
    assert get_viewport_preset("missing") is None
    assert set(VIEWPORT_PRESETS) == {"notebook", "terminal"}
