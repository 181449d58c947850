from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

import plotly.graph_objs as go

from lasso_browser.core.scales import LinearScale

TICK_SIZE = 6


def _format_tick(value: float) -> str:
    return f"{value:g}"


def bottom_axis(scale: LinearScale, y: float) -> Tuple[List[Dict], List[Dict]]:
    """Horizontal axis line at screen y with ticks below it."""
    r0, r1 = scale.range
    shapes = [dict(type="line", x0=r0, x1=r1, y0=y, y1=y, line=dict(color="black", width=1))]
    annotations = []
    for value in scale.ticks():
        x = scale(value)
        shapes.append(dict(type="line", x0=x, x1=x, y0=y, y1=y + TICK_SIZE, line=dict(color="black", width=1)))
        annotations.append(
            dict(x=x, y=y + TICK_SIZE, text=_format_tick(value), showarrow=False, yanchor="top", font=dict(size=10))
        )
    return shapes, annotations


def left_axis(scale: LinearScale, x: float, data_units: bool = False) -> Tuple[List[Dict], List[Dict]]:
    """
    Vertical axis line at screen x with ticks to its left.

    With data_units the figure y axis is in data values, so ticks sit at the
    raw tick values instead of their screen positions.
    """
    position = (lambda v: v) if data_units else scale
    r0, r1 = scale.domain if data_units else scale.range
    shapes = [dict(type="line", x0=x, x1=x, y0=r0, y1=r1, line=dict(color="black", width=1))]
    annotations = []
    for value in scale.ticks():
        y = position(value)
        shapes.append(dict(type="line", x0=x - TICK_SIZE, x1=x, y0=y, y1=y, line=dict(color="black", width=1)))
        annotations.append(
            dict(x=x - TICK_SIZE, y=y, text=_format_tick(value), showarrow=False, xanchor="right", font=dict(size=10))
        )
    return shapes, annotations


def category_labels(labels: Sequence[str], centers: Sequence[float], y: float) -> List[Dict]:
    return [
        dict(x=x, y=y, text=str(label), showarrow=False, yanchor="top", font=dict(size=11))
        for label, x in zip(labels, centers)
    ]


def screen_space_layout(fig: go.Figure, width: int, height: int) -> go.Figure:
    """
    Pin both Plotly axes to the logical canvas so figure coordinates are
    screen units, with y growing downward. Axes are drawn as shapes instead.
    """
    fig.update_xaxes(range=[0, width], visible=False, fixedrange=True)
    fig.update_yaxes(range=[height, 0], visible=False, fixedrange=True)
    return fig
