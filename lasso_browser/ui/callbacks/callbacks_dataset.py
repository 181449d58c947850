from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, List, Optional, Tuple

import dash
from dash import Input, Output, State, exceptions

from lasso_browser.core.attributes import AttributePartition
from lasso_browser.core.exceptions import LoadError
from lasso_browser.core.pipeline import default_attributes
from lasso_browser.core.plot_state import PlotState, SelectionState
from lasso_browser.ui.callbacks.callbacks_utils import try_parse_plot_state
from lasso_browser.ui.ids import IDs

if TYPE_CHECKING:
    from lasso_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)

EMPTY_PARTITION = AttributePartition((), ())


def _options(values) -> List[dict]:
    return [{"label": v, "value": v} for v in values]


def load_plot_state(
    ctx: AppConfig,
    dataset_name: str,
    previous: Optional[PlotState],
) -> Tuple[PlotState, AttributePartition]:
    """
    Load a dataset and derive the fresh PlotState for it.

    Each call bumps load_id so selections from the previous load go stale.
    A failed load yields a PlotState carrying the error and no attributes.
    """
    load_id = (previous.load_id if previous is not None else 0) + 1

    try:
        ctx.datasets.load(dataset_name)
        partition = ctx.datasets.partition(dataset_name)
    except LoadError as e:
        return PlotState(dataset_name=dataset_name, load_id=load_id, error=str(e)), EMPTY_PARTITION

    attrs = default_attributes(partition)
    if attrs is None:
        msg = (
            f"Dataset '{dataset_name}' needs at least one numeric and one "
            "categorical attribute to plot."
        )
        logger.warning(msg, extra={"dataset": dataset_name})
        return PlotState(dataset_name=dataset_name, load_id=load_id, error=msg), partition

    state = PlotState(
        dataset_name=dataset_name,
        load_id=load_id,
        x_attr=attrs.x,
        y_attr=attrs.y,
        color_attr=attrs.color,
        box_attr=attrs.box,
    )
    return state, partition


def apply_attribute_choice(
    ctx: AppConfig,
    state: PlotState,
    x_attr: Optional[str],
    y_attr: Optional[str],
    color_attr: Optional[str],
    box_attr: Optional[str],
) -> Optional[PlotState]:
    """
    New PlotState for a dropdown change, or None if the values do not belong
    to the loaded dataset (e.g. stale values while a new dataset loads).
    """
    if state.dataset_name is None or state.error:
        return None

    try:
        partition = ctx.datasets.partition(state.dataset_name)
    except LoadError:
        return None

    quantitative = set(partition.quantitative)
    if not {x_attr, y_attr, box_attr} <= quantitative or color_attr not in partition.categorical:
        return None

    return PlotState(
        dataset_name=state.dataset_name,
        load_id=state.load_id,
        x_attr=x_attr,
        y_attr=y_attr,
        color_attr=color_attr,
        box_attr=box_attr,
    )


def register_dataset_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Dataset dropdown -> attribute options + fresh PlotState
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.X_SELECT, "options"),
        Output(IDs.Control.Y_SELECT, "options"),
        Output(IDs.Control.COLOR_SELECT, "options"),
        Output(IDs.Control.BOX_SELECT, "options"),
        Output(IDs.Control.X_SELECT, "value"),
        Output(IDs.Control.Y_SELECT, "value"),
        Output(IDs.Control.COLOR_SELECT, "value"),
        Output(IDs.Control.BOX_SELECT, "value"),
        Output(IDs.Store.PLOT_STATE, "data"),
        Output(IDs.Store.SELECTION_STATE, "data"),
        Output(IDs.Control.LOAD_ERROR, "children"),
        Output(IDs.Control.LOAD_ERROR, "is_open"),
        Input(IDs.Control.DATASET_SELECT, "value"),
        State(IDs.Store.PLOT_STATE, "data"),
    )
    def on_dataset_selected(dataset_name: Optional[str], ps_data: dict[str, Any] | None):
        if not dataset_name:
            raise exceptions.PreventUpdate

        previous = try_parse_plot_state(ps_data)
        state, partition = load_plot_state(ctx, dataset_name, previous)
        selection = SelectionState.cleared(state)

        quant = _options(partition.quantitative)
        cat = _options(partition.categorical)

        return (
            quant,
            quant,
            cat,
            quant,
            state.x_attr,
            state.y_attr,
            state.color_attr,
            state.box_attr,
            state.to_dict(),
            selection.to_dict(),
            state.error,
            state.error is not None,
        )

    # ---------------------------------------------------------
    # Attribute dropdowns -> PlotState
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.PLOT_STATE, "data", allow_duplicate=True),
        Input(IDs.Control.X_SELECT, "value"),
        Input(IDs.Control.Y_SELECT, "value"),
        Input(IDs.Control.COLOR_SELECT, "value"),
        Input(IDs.Control.BOX_SELECT, "value"),
        State(IDs.Store.PLOT_STATE, "data"),
        prevent_initial_call=True,
    )
    def on_attribute_selected(x_attr, y_attr, color_attr, box_attr, ps_data):
        state = try_parse_plot_state(ps_data)
        if state is None:
            raise exceptions.PreventUpdate

        updated = apply_attribute_choice(ctx, state, x_attr, y_attr, color_attr, box_attr)
        if updated is None or updated == state:
            raise exceptions.PreventUpdate

        logger.info(
            "Attributes changed",
            extra={
                "dataset": updated.dataset_name,
                "x_attr": updated.x_attr,
                "y_attr": updated.y_attr,
                "color_attr": updated.color_attr,
                "box_attr": updated.box_attr,
            },
        )
        return updated.to_dict()
