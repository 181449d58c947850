from __future__ import annotations

from typing import List, Optional

import dash_bootstrap_components as dbc
from dash import dcc, html

from lasso_browser.ui.ids import IDs


def build_navbar(
    dataset_options: List[dict],
    title: str,
    default_dataset: Optional[str],
) -> dbc.Navbar:
    return dbc.Navbar(
        dbc.Container(
            fluid=True,
            children=[
                html.Div(
                    [
                        html.H2(title, className="mb-0"),
                        html.Small(
                            "Lasso points to summarise them",
                            className="text-muted",
                        ),
                    ],
                    className="d-flex flex-column justify-content-center",
                ),
                html.Div(
                    [
                        html.Div("Dataset", className="navbar-dataset-title"),
                        dcc.Dropdown(
                            id=IDs.Control.DATASET_SELECT,
                            options=dataset_options,
                            value=default_dataset,
                            clearable=False,
                            placeholder="Select dataset",
                            className="mt-1",
                        ),
                    ],
                    className="ms-auto",
                    style={"minWidth": "280px", "marginRight": "24px"},
                ),
            ],
        ),
        dark=False,
        className="shadow-sm",
    )
