from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, List, Optional

import dash
from dash import Input, Output, State, exceptions

from lasso_browser.core.dataset import DatasetModel
from lasso_browser.core.lasso import Vertex
from lasso_browser.core.pipeline import AttributesChanged, SelectionPipeline
from lasso_browser.core.plot_state import PlotState, SelectionState
from lasso_browser.ui.callbacks.callbacks_utils import try_parse_plot_state
from lasso_browser.ui.ids import IDs

if TYPE_CHECKING:
    from lasso_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def lasso_vertices(selected_data: Any) -> Optional[List[Vertex]]:
    """
    Lasso path from a Plotly `selectedData` payload.

    The scatter figure is drawn in screen units, so the path is already in
    screen coordinates. Returns None when there is no lasso path (Plotly
    deselect, box select, click selection).
    """
    if not isinstance(selected_data, dict):
        return None
    lasso = selected_data.get("lassoPoints")
    if not isinstance(lasso, dict):
        return None
    xs, ys = lasso.get("x") or [], lasso.get("y") or []
    return [(float(x), float(y)) for x, y in zip(xs, ys)]


def build_pipeline(ctx: AppConfig, state: PlotState) -> SelectionPipeline:
    """Pipeline over the plotted dataset with the plotted attributes applied."""
    global_config = ctx.global_config
    pipeline = SelectionPipeline(
        model=DatasetModel(excluded_attributes=ctx.datasets.excluded_attributes),
        canvas=global_config.canvas,
        min_box_size=global_config.min_box_size,
    )
    pipeline.load_dataset(state.dataset_name, ctx.datasets.load)
    pipeline.dispatch(
        AttributesChanged(
            x=state.x_attr,
            y=state.y_attr,
            color=state.color_attr,
            box=state.box_attr,
        )
    )
    return pipeline


def selection_from_gesture(
    ctx: AppConfig,
    state: PlotState,
    vertices: Optional[List[Vertex]],
) -> SelectionState:
    """
    Run one lasso gesture (or a background click when there is no path)
    through the selection pipeline and return the committed selection.
    """
    if vertices is None:
        return SelectionState.cleared(state)

    pipeline = build_pipeline(ctx, state)
    if pipeline.dataset is None:
        return SelectionState.cleared(state)

    selected = pipeline.replay_lasso(vertices)
    logger.info(
        "Lasso selection",
        extra={
            "dataset": state.dataset_name,
            "n_vertices": len(vertices),
            "n_selected": len(selected),
        },
    )
    return SelectionState(
        dataset_name=state.dataset_name,
        load_id=state.load_id,
        active=True,
        selected=sorted(selected),
    )


def register_selection_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Lasso / deselect / clear button -> SelectionState
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.SELECTION_STATE, "data", allow_duplicate=True),
        Input(IDs.Control.SCATTER_GRAPH, "selectedData"),
        Input(IDs.Control.CLEAR_SELECTION_BTN, "n_clicks"),
        State(IDs.Store.PLOT_STATE, "data"),
        prevent_initial_call=True,
    )
    def on_lasso(selected_data: dict[str, Any] | None, _n_clicks, ps_data):
        state = try_parse_plot_state(ps_data)
        if state is None or not state.is_complete or state.error:
            raise exceptions.PreventUpdate

        if dash.ctx.triggered_id == IDs.Control.CLEAR_SELECTION_BTN:
            vertices = None
        else:
            vertices = lasso_vertices(selected_data)

        try:
            selection = selection_from_gesture(ctx, state, vertices)
        except Exception:
            logger.exception("Lasso selection failed", extra={"plot_state": ps_data})
            selection = SelectionState.cleared(state)

        return selection.to_dict()
