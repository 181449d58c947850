from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

import dash
import plotly.graph_objs as go
from dash import Input, Output, html

from lasso_browser.core.exceptions import LoadError
from lasso_browser.core.plot_state import PlotState, SelectionState
from lasso_browser.core.points import compute_points
from lasso_browser.ui.callbacks.callbacks_utils import try_parse_plot_state, try_parse_selection_state
from lasso_browser.ui.ids import IDs
from lasso_browser.views.boxplot_view import BoxplotView
from lasso_browser.views.scatter_view import ScatterView, color_key

if TYPE_CHECKING:
    from lasso_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Helper: Empty/Error Figures
# -----------------------------------------------------------------------------
def _message_figure(title: str, details: Optional[str] = None) -> go.Figure:
    fig = go.Figure()
    text = title if details is None else f"{title}<br><br>{details}"
    fig.add_annotation(
        text=text,
        showarrow=False,
        xref="paper",
        yref="paper",
        x=0.5,
        y=0.5,
    )
    fig.update_xaxes(visible=False)
    fig.update_yaxes(visible=False)
    fig.update_layout(margin=dict(l=40, r=40, t=40, b=40))
    return fig


def _error_figure(details: str) -> go.Figure:
    return _message_figure("Something went wrong while rendering this view.", details)


def render_scatter(ctx: AppConfig, state: Optional[PlotState], selection: SelectionState) -> go.Figure:
    if state is None:
        return _message_figure("No dataset selected.", "Choose a dataset to see the scatterplot.")
    if state.error:
        return _message_figure("Dataset could not be shown.", state.error)
    if not state.is_complete:
        return _message_figure("Choose X, Y and color attributes.")

    dataset = ctx.datasets.load(state.dataset_name)
    view = ScatterView(dataset, canvas=ctx.global_config.canvas)
    data = view.timed_compute(state, selection)
    return view.render_figure(data, state, selection)


def render_boxplot(ctx: AppConfig, state: Optional[PlotState], selection: SelectionState) -> go.Figure:
    if state is None or state.error or not state.is_complete:
        return BoxplotView.empty_figure("No points selected")

    dataset = ctx.datasets.load(state.dataset_name)
    # Same category -> color mapping as the scatterplot and its legend
    scatter = compute_points(dataset, state.x_attr, state.y_attr, state.color_attr, ctx.global_config.canvas)
    view = BoxplotView(
        dataset,
        canvas=ctx.global_config.canvas,
        color_scale=scatter.color_scale,
        min_box_size=ctx.global_config.min_box_size,
    )
    summaries = view.timed_compute(state, selection)
    return view.render_figure(summaries, state, selection)


def render_color_key(ctx: AppConfig, state: Optional[PlotState]) -> list:
    if state is None or state.error or not state.is_complete:
        return []

    dataset = ctx.datasets.load(state.dataset_name)
    scatter = compute_points(dataset, state.x_attr, state.y_attr, state.color_attr, ctx.global_config.canvas)
    return [
        html.Div(
            [
                html.Div(className="color-square", style={"backgroundColor": color}),
                html.Span(value),
            ],
            className="color-box",
        )
        for value, color in color_key(scatter)
    ]


def selection_count_text(state: Optional[PlotState], selection: SelectionState) -> str:
    if state is None or not selection.belongs_to(state) or not selection.selected:
        return ""
    return f"Selected Points: {len(selection.selected)}"


def register_render_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Scatterplot: PlotState + SelectionState -> figure
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.SCATTER_GRAPH, "figure"),
        Input(IDs.Store.PLOT_STATE, "data"),
        Input(IDs.Store.SELECTION_STATE, "data"),
    )
    def update_scatter(ps_data: dict[str, Any] | None, sel_data: dict[str, Any] | None):
        state = try_parse_plot_state(ps_data)
        selection = try_parse_selection_state(sel_data)
        try:
            return render_scatter(ctx, state, selection)
        except LoadError as e:
            return _message_figure("Dataset could not be loaded.", str(e))
        except Exception:
            logger.exception("Error rendering scatterplot", extra={"plot_state": ps_data})
            return _error_figure("The app hit an unexpected error while drawing the scatterplot.")

    # ---------------------------------------------------------
    # Boxplot: recomputed from the committed selection whenever
    # the selection or any attribute changes
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.BOXPLOT_GRAPH, "figure"),
        Input(IDs.Store.PLOT_STATE, "data"),
        Input(IDs.Store.SELECTION_STATE, "data"),
    )
    def update_boxplot(ps_data, sel_data):
        state = try_parse_plot_state(ps_data)
        selection = try_parse_selection_state(sel_data)
        try:
            return render_boxplot(ctx, state, selection)
        except LoadError as e:
            return _message_figure("Dataset could not be loaded.", str(e))
        except Exception:
            logger.exception("Error rendering boxplot", extra={"plot_state": ps_data, "selection": sel_data})
            return _error_figure("The app hit an unexpected error while drawing the boxplot.")

    # ---------------------------------------------------------
    # Color key + selection count + status line
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.COLOR_KEY, "children"),
        Input(IDs.Store.PLOT_STATE, "data"),
    )
    def update_color_key(ps_data):
        try:
            return render_color_key(ctx, try_parse_plot_state(ps_data))
        except LoadError:
            return []

    @app.callback(
        Output(IDs.Control.SELECTION_COUNT, "children"),
        Input(IDs.Store.PLOT_STATE, "data"),
        Input(IDs.Store.SELECTION_STATE, "data"),
    )
    def update_selection_count(ps_data, sel_data):
        return selection_count_text(try_parse_plot_state(ps_data), try_parse_selection_state(sel_data))

    @app.callback(
        Output(IDs.Control.STATUS_BAR, "children"),
        Input(IDs.Store.PLOT_STATE, "data"),
    )
    def update_status_bar(ps_data):
        state = try_parse_plot_state(ps_data)
        if state is None:
            return html.Span([html.Strong("Status: "), "No dataset selected"])
        if state.error:
            return html.Span([html.Strong("Status: "), "Load failed"])

        try:
            dataset = ctx.datasets.load(state.dataset_name)
            partition = ctx.datasets.partition(state.dataset_name)
        except LoadError:
            return html.Span([html.Strong("Status: "), "Load failed"])

        return html.Span(
            [
                html.Strong("Dataset: "), ctx.datasets.label(state.dataset_name), " • ",
                html.Strong("Rows: "), str(len(dataset)), " • ",
                html.Strong("Numeric: "), str(len(partition.quantitative)), " • ",
                html.Strong("Categorical: "), str(len(partition.categorical)),
            ]
        )
