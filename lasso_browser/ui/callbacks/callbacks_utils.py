from __future__ import annotations
import logging
from typing import Optional

from lasso_browser.core.plot_state import PlotState, SelectionState

logger = logging.getLogger(__name__)


def try_parse_plot_state(data: object) -> Optional[PlotState]:
    if not isinstance(data, dict) or not data:
        return None
    try:
        return PlotState.from_dict(data)
    except (TypeError, ValueError):
        logger.exception("Invalid plot-state: %r", data)
        return None


def try_parse_selection_state(data: object) -> SelectionState:
    """Missing or malformed selection data reads as 'nothing selected'."""
    if not isinstance(data, dict) or not data:
        return SelectionState()
    try:
        return SelectionState.from_dict(data)
    except (TypeError, ValueError):
        logger.exception("Invalid selection-state: %r", data)
        return SelectionState()
