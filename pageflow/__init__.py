"""Pageflow - paginated text flow for two-page notebook spreads."""

from .controller import FlowSnapshot, FocusRequest, TextFlowController
from .cursor import FocusTarget, Placement, Resolution, Side, SpreadBounds, to_global, to_local
from .geometry import ViewportGeometry, get_viewport_preset
from .oracle import FontMetricsOracle, MeasurementOracle, MonospaceOracle, StaleOracleReference
from .pagination import compute_cuts, page_bounds, page_text
from .ruling import rule_positions
from .spread import SpreadNavigator, SpreadPolicy

__all__ = [
    'TextFlowController',
    'FlowSnapshot',
    'FocusRequest',
    'FocusTarget',
    'Placement',
    'Resolution',
    'Side',
    'SpreadBounds',
    'to_global',
    'to_local',
    'ViewportGeometry',
    'get_viewport_preset',
    'MeasurementOracle',
    'MonospaceOracle',
    'FontMetricsOracle',
    'StaleOracleReference',
    'compute_cuts',
    'page_bounds',
    'page_text',
    'rule_positions',
    'SpreadNavigator',
    'SpreadPolicy',
]
