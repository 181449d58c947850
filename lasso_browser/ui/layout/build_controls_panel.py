from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from lasso_browser.ui.ids import IDs


def _attribute_dropdown(label: str, component_id: str) -> html.Div:
    return html.Div(
        [
            html.Label(label, className="form-label"),
            dcc.Dropdown(
                id=component_id,
                options=[],
                clearable=False,
                className="mb-3",
            ),
        ]
    )


def build_controls_panel() -> dbc.Card:
    """
    Attribute selectors plus the color key.

    Options are empty here; they are filled in on every dataset load.
    """
    return dbc.Card(
        [
            dbc.CardHeader("Attributes", className="fw-semibold"),
            dbc.CardBody(
                [
                    _attribute_dropdown("X attribute", IDs.Control.X_SELECT),
                    _attribute_dropdown("Y attribute", IDs.Control.Y_SELECT),
                    _attribute_dropdown("Color attribute", IDs.Control.COLOR_SELECT),
                    _attribute_dropdown("Boxplot attribute", IDs.Control.BOX_SELECT),
                    dbc.Button(
                        "Clear selection",
                        id=IDs.Control.CLEAR_SELECTION_BTN,
                        color="secondary",
                        size="sm",
                        className="mb-3",
                    ),
                    html.Hr(),
                    html.Div("Color key", className="fw-semibold mb-2"),
                    html.Div(id=IDs.Control.COLOR_KEY, className="color-key"),
                ]
            ),
        ],
    )
