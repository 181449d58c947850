from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import plotly.graph_objs as go

from lasso_browser.config.model import CanvasConfig
from lasso_browser.core.base_view import BaseView
from lasso_browser.core.dataset import Dataset
from lasso_browser.core.plot_state import PlotState, SelectionState
from lasso_browser.core.scales import LinearScale, OrdinalColorScale
from lasso_browser.core.stats import MIN_BOX_SIZE, GroupSummary, aggregate, value_domain
from lasso_browser.views.axes import category_labels, left_axis

MARKER_RADIUS = 4


def slot_centers(n_groups: int, canvas: CanvasConfig) -> List[float]:
    """x centre of each equal-width group slot across the plot area."""
    if n_groups <= 0:
        return []
    left, right = canvas.x_range
    width = (right - left) / n_groups
    return [left + width * (i + 0.5) for i in range(n_groups)]


def value_scale(summaries: Dict[str, GroupSummary], canvas: CanvasConfig) -> Optional[LinearScale]:
    """
    Shared y scale over every selected value.

    A single distinct value is padded by 0.5 either side so boxes and ticks
    still have somewhere to go.
    """
    domain = value_domain(summaries)
    if domain is None:
        return None
    lo, hi = domain
    if lo == hi:
        lo, hi = lo - 0.5, hi + 0.5
    return LinearScale((lo, hi), canvas.y_range)


class BoxplotView(BaseView):
    """
    Grouped boxplot of the lasso selection.

    One equal-width slot per color group, all sharing one y scale. Groups with
    fewer than `min_box_size` values are drawn as individual markers.
    """

    id = "boxplot"
    label = "Boxplot"

    def __init__(
        self,
        dataset: Dataset,
        canvas: Optional[CanvasConfig] = None,
        color_scale: Optional[OrdinalColorScale] = None,
        min_box_size: int = MIN_BOX_SIZE,
    ):
        super().__init__(dataset, canvas)
        self.color_scale = color_scale
        self.min_box_size = min_box_size

    def compute_data(self, state: PlotState, selection: SelectionState) -> Dict[str, GroupSummary]:
        if not selection.belongs_to(state) or not selection.selected:
            return {}
        rows = [self.dataset[i] for i in sorted(selection.selected) if 0 <= i < len(self.dataset)]
        return aggregate(rows, state.color_attr, state.box_attr, min_box_size=self.min_box_size)

    def render_figure(self, data: Dict[str, GroupSummary], state: PlotState, selection: SelectionState) -> go.Figure:
        return self.render_summaries(data, state.box_attr)

    def render_summaries(self, summaries: Dict[str, GroupSummary], value_attr: Optional[str] = None) -> go.Figure:
        scale = value_scale(summaries, self.canvas)
        if scale is None:
            fig = self.empty_figure("No points selected")
            return self.base_layout(fig)

        color_scale = self.color_scale or OrdinalColorScale.fit(summaries)
        groups: Sequence[str] = list(summaries)
        centers = slot_centers(len(groups), self.canvas)
        slot_width = (self.canvas.x_range[1] - self.canvas.x_range[0]) / len(groups)

        fig = go.Figure()
        for group, x in zip(groups, centers):
            summary = summaries[group]
            color = color_scale(group)
            if summary.is_box:
                box = summary.box
                fig.add_trace(
                    go.Box(
                        name=group,
                        x=[x],
                        q1=[box.q1],
                        median=[box.median],
                        q3=[box.q3],
                        lowerfence=[box.min],
                        upperfence=[box.max],
                        width=slot_width / 2,
                        fillcolor=color,
                        opacity=0.7,
                        line=dict(color="black", width=1),
                    )
                )
            else:
                fig.add_trace(
                    go.Scatter(
                        name=group,
                        x=[x] * summary.count,
                        y=list(summary.values),
                        mode="markers",
                        marker=dict(size=MARKER_RADIUS * 2, color=color),
                        text=[f"{group}: {v:g}" for v in summary.values],
                        hoverinfo="text",
                    )
                )

        # y is in data units here; the canvas margins come from the axis range
        label_y = scale.invert(self.canvas.height - self.canvas.margin + 20)
        shapes, notes = left_axis(scale, self.canvas.margin, data_units=True)
        notes += category_labels(groups, centers, label_y)

        self.base_layout(fig)
        fig.update_xaxes(range=[0, self.canvas.width], visible=False, fixedrange=True)
        fig.update_yaxes(
            range=[scale.invert(self.canvas.height), scale.invert(0)],
            visible=False,
            fixedrange=True,
        )
        fig.update_layout(
            shapes=shapes,
            annotations=notes,
            dragmode=False,
            title=dict(text=value_attr or "", x=0.5, y=0.98),
        )
        return fig
