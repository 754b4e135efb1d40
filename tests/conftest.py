import pytest

from pageflow.geometry import ViewportGeometry
from pageflow.oracle import MeasurementOracle


class CharLimitOracle(MeasurementOracle):
    """Fits any text up to a fixed number of characters."""

    def __init__(self, limit: int):
        super().__init__()
        self.limit = limit
        self.calls = 0

    def _advance(self, text, viewport):
        return float(len(text))

    def fits(self, text, viewport):
        self._require_surface()
        self.calls += 1
        return len(text) <= self.limit


@pytest.fixture
def char_oracle():
    """Factory for opened character-limit oracles."""
    def make(limit=120):
        return CharLimitOracle(limit).open()
    return make


@pytest.fixture
def viewport():
    return ViewportGeometry.for_terminal(columns=40, rows=10)


@pytest.fixture
def filler():
    """500 characters of filler text."""
    return ("abcdefghij" * 50)
