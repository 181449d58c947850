from __future__ import annotations

from typing import Dict, List, Tuple

import plotly.graph_objs as go

from lasso_browser.core.base_view import BaseView
from lasso_browser.core.lasso import PointStyle
from lasso_browser.core.plot_state import PlotState, SelectionState
from lasso_browser.core.points import ScatterData, compute_points
from lasso_browser.views.axes import bottom_axis, left_axis, screen_space_layout

POINT_RADIUS = 5

# Marker look per selection style
STYLE_MARKER: Dict[PointStyle, Dict] = {
    PointStyle.DEFAULT: dict(opacity=1.0, line_width=0),
    PointStyle.SELECTED: dict(opacity=1.0, line_width=1.5),
    PointStyle.NOT_SELECTED: dict(opacity=0.25, line_width=0),
}


class ScatterView(BaseView):
    """
    Scatterplot of two quantitative attributes, colored by a categorical one.

    - X/Y in screen units from independently fit linear scales
    - Color from a category10 ordinal scale (first-encountered order)
    - Marker emphasis from the committed lasso selection
    """

    id = "scatter"
    label = "Scatterplot"

    def compute_data(self, state: PlotState, selection: SelectionState) -> ScatterData:
        return compute_points(
            self.dataset,
            state.x_attr,
            state.y_attr,
            state.color_attr,
            self.canvas,
        )

    def render_figure(self, data: ScatterData, state: PlotState, selection: SelectionState) -> go.Figure:
        active = selection.active and selection.belongs_to(state)
        styles = selection.styles(len(data.points)) if active else None
        fig = self.render_points(data, styles)
        if not active:
            # Drop the lasso outline Plotly keeps from the last gesture
            fig.update_layout(
                selections=[],
                uirevision=f"{fig.layout.uirevision}:{state.load_id}:cleared",
            )
        return fig

    def render_points(self, data: ScatterData, styles: List[PointStyle] | None = None) -> go.Figure:
        if styles is None:
            styles = [PointStyle.DEFAULT] * len(data.points)

        fig = go.Figure()
        fig.add_trace(
            go.Scatter(
                x=[p.x for p in data.points],
                y=[p.y for p in data.points],
                mode="markers",
                customdata=[p.index for p in data.points],
                text=[
                    f"{data.x_attr}: {p.row[data.x_attr]}<br>"
                    f"{data.y_attr}: {p.row[data.y_attr]}<br>"
                    f"{data.color_attr}: {p.category}"
                    for p in data.points
                ],
                hoverinfo="text",
                marker=dict(
                    size=POINT_RADIUS * 2,
                    color=[data.color_of(p) for p in data.points],
                    opacity=[STYLE_MARKER[s]["opacity"] for s in styles],
                    line=dict(
                        color="black",
                        width=[STYLE_MARKER[s]["line_width"] for s in styles],
                    ),
                ),
                # Selection styling is ours; keep Plotly from dimming points
                selected=dict(marker=dict(opacity=1.0)),
                unselected=dict(marker=dict(opacity=1.0)),
            )
        )

        x_shapes, x_notes = bottom_axis(data.x_scale, self.canvas.height - self.canvas.margin)
        y_shapes, y_notes = left_axis(data.y_scale, self.canvas.margin)

        self.base_layout(fig)
        screen_space_layout(fig, self.canvas.width, self.canvas.height)
        fig.update_layout(
            shapes=x_shapes + y_shapes,
            annotations=x_notes + y_notes,
            dragmode="lasso",
            clickmode="event",
            # Keeps the lasso outline and zoom stable across re-renders
            uirevision=f"{self.dataset.name}:{data.x_attr}:{data.y_attr}",
        )
        return fig


def color_key(data: ScatterData) -> List[Tuple[str, str]]:
    """(category, color) pairs in first-encountered order, for the legend list."""
    return data.color_scale.items()
