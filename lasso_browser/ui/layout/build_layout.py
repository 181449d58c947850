from __future__ import annotations

import dash_bootstrap_components as dbc
from typing import TYPE_CHECKING

from dash import dcc, html

from lasso_browser.ui.ids import IDs
from lasso_browser.ui.layout.build_controls_panel import build_controls_panel
from lasso_browser.ui.layout.build_navbar import build_navbar
from lasso_browser.ui.layout.build_plot_panel import build_boxplot_panel, build_scatter_panel

if TYPE_CHECKING:
    from lasso_browser.ui.config import AppConfig


def build_layout(ctx: AppConfig):
    canvas = ctx.global_config.canvas
    dataset_options = [
        {"label": ctx.datasets.label(name), "value": name}
        for name in ctx.dataset_names
    ]

    navbar = build_navbar(dataset_options, ctx.global_config.ui_title, ctx.default_dataset)

    return dbc.Container(
        fluid=True,
        children=[
            navbar,

            # Per-session state
            dcc.Store(id=IDs.Store.PLOT_STATE, storage_type="memory"),
            dcc.Store(id=IDs.Store.SELECTION_STATE, storage_type="memory"),

            dbc.Alert(
                id=IDs.Control.LOAD_ERROR,
                color="danger",
                is_open=False,
                className="mt-3",
            ),
            html.Div(id=IDs.Control.STATUS_BAR, className="text-muted small mt-2"),

            dbc.Row(
                [
                    dbc.Col(build_controls_panel(), md=3, className="mt-3"),
                    dbc.Col(build_scatter_panel(canvas), md="auto", className="mt-3"),
                    dbc.Col(build_boxplot_panel(canvas), md="auto", className="mt-3"),
                ],
                className="gx-3",
            ),
        ],
    )
