"""Constants and configuration for the pageflow text-flow engine."""

class FlowConstants:
    """Central configuration constants for paginated text flow."""

    # Page layout (notebook page, device-independent pixels)
    PAGE_CONTENT_WIDTH = 420.0
    PAGE_CONTENT_HEIGHT = 576.0
    LINE_HEIGHT = 24.0  # 1.5 x 16px body text
    FONT_FAMILY = "Helvetica"
    FONT_SIZE = 16.0

    # Reserves, in lines
    HEADER_ROWS = 3  # Title header on the first page only
    BOTTOM_RESERVE_LINES = 1  # Ruled-page bottom margin on every page

    # Monospace measurement
    MONOSPACE_ADVANCE_EM = 0.6  # Courier advance width is 600/1000 em
    TERMINAL_CELL_WIDTH = 1.0

    # Measurement surface
    MEASURE_CACHE_LIMIT = 4096  # Cached line widths before the cache is dropped
    FALLBACK_FONT = "Helvetica"

    # Ruling overlay
    RULE_BOTTOM_TRIM_LINES = 1
    RULE_DEDUPE_DISTANCE = 0.5

    # Status messages
    COVER_SLOT_MESSAGE = "The index page holds no text."
    PAGE_LABEL = "Page {}"
