from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from lasso_browser.config.model import CanvasConfig
from lasso_browser.ui.ids import IDs


def _graph(component_id: str, canvas: CanvasConfig, config: dict) -> dcc.Graph:
    return dcc.Graph(
        id=component_id,
        style={"width": f"{canvas.width}px", "height": f"{canvas.height}px"},
        config=config,
    )


def build_scatter_panel(canvas: CanvasConfig) -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader(html.Strong("Scatterplot"), className="p-2"),
            dbc.CardBody(
                [
                    dcc.Loading(
                        type="default",
                        children=_graph(
                            IDs.Control.SCATTER_GRAPH,
                            canvas,
                            {
                                "displaylogo": False,
                                "modeBarButtonsToRemove": ["select2d", "zoom2d", "pan2d", "autoScale2d"],
                            },
                        ),
                    ),
                    html.Div(id=IDs.Control.SELECTION_COUNT, className="selection-count mt-2"),
                ]
            ),
        ],
    )


def build_boxplot_panel(canvas: CanvasConfig) -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader(html.Strong("Boxplot of selection"), className="p-2"),
            dbc.CardBody(
                _graph(IDs.Control.BOXPLOT_GRAPH, canvas, {"displayModeBar": False}),
            ),
        ],
    )
