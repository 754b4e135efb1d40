"""Tests for cutting a buffer into pages."""

from pageflow.geometry import ViewportGeometry
from pageflow.oracle import MonospaceOracle
from pageflow.pagination import (
    clamp_cuts,
    compute_cuts,
    cuts_equal,
    page_bounds,
    page_count,
    page_text,
)


def test_filler_cut_at_page_capacity(char_oracle, viewport, filler):
    """500 characters at 120 per page give four full pages and a remainder."""
    cuts = compute_cuts(filler, viewport, char_oracle(120))
    assert cuts == [120, 240, 360, 480, 500]


def test_empty_buffer_has_one_page(char_oracle, viewport):
    cuts = compute_cuts("", viewport, char_oracle(120))
    assert cuts == [0]
    assert page_count(cuts) == 1
    assert page_text("", cuts, 0) == ""


def test_short_buffer_fits_one_page(char_oracle, viewport):
    assert compute_cuts("hello", viewport, char_oracle(120)) == [5]


def test_cuts_strictly_increasing_and_end_at_length(char_oracle, viewport):
    text = "The quick brown fox jumps over the lazy dog. " * 37
    for limit in (1, 7, 50, 119, 1000):
        cuts = compute_cuts(text, viewport, char_oracle(limit))
        assert cuts[-1] == len(text)
        assert all(a < b for a, b in zip(cuts, cuts[1:]))


def test_recomputing_is_idempotent(char_oracle, viewport, filler):
    oracle = char_oracle(33)
    first = compute_cuts(filler, viewport, oracle)
    second = compute_cuts(filler, viewport, oracle)
    assert cuts_equal(first, second)


def test_pages_reassemble_buffer(char_oracle, viewport):
    text = "Line one\nLine two is longer\n\nLine four " * 20
    cuts = compute_cuts(text, viewport, char_oracle(45))
    pages = [page_text(text, cuts, i) for i in range(len(cuts))]
    assert "".join(pages) == text


def test_binary_search_uses_few_oracle_calls(char_oracle, viewport, filler):
    oracle = char_oracle(120)
    compute_cuts(filler, viewport, oracle)
    # Five pages, about log2(500) probes each
    assert oracle.calls <= 5 * 10


def test_zero_height_viewport_forces_one_character_pages():
    """Nothing but the empty string fits, yet pagination terminates."""
    viewport = ViewportGeometry.for_terminal(columns=10, rows=0)
    oracle = MonospaceOracle(cell_width=1).open()
    assert oracle.fits("", viewport)
    assert not oracle.fits("a", viewport)
    assert compute_cuts("abc", viewport, oracle) == [1, 2, 3]


def test_monospace_pages_hold_rows_times_columns():
    viewport = ViewportGeometry.for_terminal(columns=10, rows=3)
    oracle = MonospaceOracle(cell_width=1).open()
    text = "0123456789" * 5
    assert compute_cuts(text, viewport, oracle) == [30, 50]


def test_reserved_lines_shrink_first_page_only():
    viewport = ViewportGeometry.for_terminal(columns=10, rows=3, reserved_lines=1)
    oracle = MonospaceOracle(cell_width=1).open()
    text = "0123456789" * 8
    assert compute_cuts(text, viewport, oracle) == [20, 50, 80]


def test_bottom_reserve_applies_to_every_page():
    viewport = ViewportGeometry.for_terminal(columns=10, rows=3, reserved_lines=1,
                                             bottom_reserve_lines=1)
    oracle = MonospaceOracle(cell_width=1).open()
    text = "0123456789" * 5
    assert compute_cuts(text, viewport, oracle) == [10, 30, 50]


def test_page_bounds_past_the_end_are_empty():
    cuts = [120, 240, 300]
    assert page_bounds(cuts, 0) == (0, 120)
    assert page_bounds(cuts, 2) == (240, 300)
    assert page_bounds(cuts, 3) == (300, 300)
    assert page_bounds(cuts, 10) == (300, 300)
    assert page_bounds(cuts, -1) == (0, 0)


def test_clamp_cuts_trims_to_shorter_buffer():
    assert clamp_cuts([120, 240, 360], 250) == [120, 240, 250]
    assert clamp_cuts([120, 240, 360], 360) == [120, 240, 360]
    assert clamp_cuts([120, 240, 360], 400) == [120, 240, 360, 400]
    assert clamp_cuts([], 0) == [0]
