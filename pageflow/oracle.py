"""Measurement oracles deciding whether text fits a page.

The pagination engine never lays text out itself. It asks an oracle
whether a candidate slice, rendered with a viewport's width and
typography, fits inside the viewport's content height. Oracles own a
reusable measurement surface (a cache of measured line widths) that is
opened once for the lifetime of a controller and torn down with it.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase._fontdata import standardFonts

from .constants import FlowConstants
from .geometry import ViewportGeometry

logger = logging.getLogger(__name__)


class StaleOracleReference(RuntimeError):
    """Raised when the measurement surface is closed or not yet opened."""


def _longest_fitting_prefix(word: str, max_width: float,
                            measure: Callable[[str], float]) -> int:
    """Length of the longest prefix of word that fits, never less than 1."""
    low, high, best = 1, len(word), 1
    while low <= high:
        mid = (low + high) // 2
        if measure(word[:mid]) <= max_width:
            best = mid
            low = mid + 1
        else:
            high = mid - 1
    return best


def wrap_paragraph(paragraph: str, max_width: float,
                   measure: Callable[[str], float]) -> list[str]:
    """Word-wrap one paragraph into lines no wider than max_width.

    Words are separated by single spaces. A word wider than the line is
    broken across as many lines as needed; a single character that does
    not fit still gets a line of its own.
    """
    if not paragraph:
        return [""]

    lines: list[str] = []

    def break_long_word(word: str) -> str:
        while len(word) > 1 and measure(word) > max_width:
            split = _longest_fitting_prefix(word, max_width, measure)
            lines.append(word[:split])
            word = word[split:]
        return word

    current: Optional[str] = None
    for word in paragraph.split(" "):
        if current is None:
            current = break_long_word(word)
            continue
        candidate = current + " " + word
        if measure(candidate) <= max_width:
            current = candidate
        else:
            lines.append(current)
            current = break_long_word(word)

    assert current is not None
    lines.append(current)
    return lines


def wrap_text(text: str, max_width: float,
              measure: Callable[[str], float]) -> list[str]:
    """Wrap text the way a pre-wrap text box does.

    Newlines are hard breaks, so a trailing newline opens an empty last
    line. Empty text renders no lines at all.
    """
    if not text:
        return []
    lines: list[str] = []
    for paragraph in text.split("\n"):
        lines.extend(wrap_paragraph(paragraph, max_width, measure))
    return lines


class MeasurementOracle(ABC):
    """Answers whether text rendered into a viewport fits its content box."""

    def __init__(self):
        self._surface: Optional[Dict[tuple, float]] = None

    @property
    def available(self) -> bool:
        return self._surface is not None

    def open(self) -> 'MeasurementOracle':
        """Create the measurement surface. Opening twice keeps the first one."""
        if self._surface is None:
            self._surface = {}
        return self

    def close(self) -> None:
        """Tear down the measurement surface."""
        self._surface = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _require_surface(self) -> Dict[tuple, float]:
        if self._surface is None:
            raise StaleOracleReference("Measurement surface is not available")
        return self._surface

    @abstractmethod
    def _advance(self, text: str, viewport: ViewportGeometry) -> float:
        """Width of text set on a single unbroken line."""

    def text_width(self, text: str, viewport: ViewportGeometry) -> float:
        surface = self._require_surface()
        key = (text, viewport.font_family, viewport.font_size, viewport.letter_spacing)
        width = surface.get(key)
        if width is None:
            if len(surface) >= FlowConstants.MEASURE_CACHE_LIMIT:
                surface.clear()
            width = self._advance(text, viewport)
            surface[key] = width
        return width

    def measure_lines(self, text: str, viewport: ViewportGeometry) -> list[str]:
        """Render text into the viewport's width and return the visual lines."""
        self._require_surface()
        return wrap_text(text, viewport.content_width,
                         lambda s: self.text_width(s, viewport))

    def line_count(self, text: str, viewport: ViewportGeometry) -> int:
        return len(self.measure_lines(text, viewport))

    def measure_height(self, text: str, viewport: ViewportGeometry) -> float:
        return self.line_count(text, viewport) * viewport.line_height

    def fits(self, text: str, viewport: ViewportGeometry) -> bool:
        """True when text's rendered height fits the viewport's content height."""
        return self.measure_height(text, viewport) <= viewport.content_height


class MonospaceOracle(MeasurementOracle):
    """Oracle for fixed-pitch text, such as terminal cells.

    Every character advances by the same width: cell_width when given,
    otherwise the Courier advance for the viewport's font size.
    """

    def __init__(self, cell_width: Optional[float] = None):
        super().__init__()
        self.cell_width = cell_width

    def _advance(self, text: str, viewport: ViewportGeometry) -> float:
        cell = self.cell_width
        if cell is None:
            cell = viewport.font_size * FlowConstants.MONOSPACE_ADVANCE_EM
        return len(text) * (cell + viewport.letter_spacing)


class FontMetricsOracle(MeasurementOracle):
    """Oracle measuring proportional text with reportlab font metrics.

    The viewport's font family must be one of the standard PDF fonts or a
    font registered with reportlab; anything else is measured with the
    fallback font.
    """

    def __init__(self, fallback_font: str = FlowConstants.FALLBACK_FONT):
        super().__init__()
        self.fallback_font = fallback_font
        self._unknown_fonts: set[str] = set()

    def _resolve_font(self, font_family: str) -> str:
        if font_family in standardFonts or font_family in pdfmetrics.getRegisteredFontNames():
            return font_family
        if font_family not in self._unknown_fonts:
            self._unknown_fonts.add(font_family)
            logger.warning(f"Unknown font {font_family!r}, measuring with {self.fallback_font}")
        return self.fallback_font

    def _advance(self, text: str, viewport: ViewportGeometry) -> float:
        font_name = self._resolve_font(viewport.font_family)
        width = pdfmetrics.stringWidth(text, font_name, viewport.font_size)
        return width + len(text) * viewport.letter_spacing
