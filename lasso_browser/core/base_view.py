from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

import plotly.graph_objs as go

from lasso_browser.config.model import CanvasConfig
from .dataset import Dataset
from .plot_state import PlotState, SelectionState

logger = logging.getLogger(__name__)


class BaseView(ABC):
    """
    Abstract base class for the two plot views.

    Defines the contract every view follows
    - expose an 'id' - used internally
    - expose a 'label' - used for UI/human-readable applications
    - implement 'compute_data' - derive plot data from the current PlotState and SelectionState
    - implement 'render_figure' - build a brand new Plotly figure from that data

    Rendering never patches a previous figure: every call returns a fresh one.
    """

    id: str = None
    label: str = None

    def __init__(self, dataset: Dataset, canvas: Optional[CanvasConfig] = None):
        self.dataset = dataset
        self.canvas = canvas or CanvasConfig()

    @abstractmethod
    def compute_data(self, state: PlotState, selection: SelectionState) -> Any:
        """
        Compute the data for the current attribute choices and selection
        :param state: the current {@link PlotState} - dataset and attribute choices
        :param selection: the committed {@link SelectionState}
        :return: data consumed by {@link render_figure()}
        """
        raise NotImplementedError()

    @abstractmethod
    def render_figure(self, data: Any, state: PlotState, selection: SelectionState) -> go.Figure:
        """
        Render the figure given the computed data
        :param data: the data provided by {@link compute_data()}
        :param state: the current {@link PlotState}
        :param selection: the committed {@link SelectionState}
        :return: the Plotly figure for these parameters
        """
        raise NotImplementedError()

    # ------------------------------------------------------------------
    # Common helpers for all views
    # ------------------------------------------------------------------
    def timed_compute(self, state: PlotState, selection: SelectionState) -> Any:
        """
        compute_data wrapped with a duration log line.
        """
        start = time.perf_counter()
        data = self.compute_data(state, selection)
        logger.info(
            "compute_done",
            extra={
                "view_id": self.id,
                "dataset": self.dataset.name,
                "duration_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )
        return data

    def base_layout(self, fig: go.Figure) -> go.Figure:
        """Fixed-size canvas with no outer padding, shared by both views."""
        fig.update_layout(
            width=self.canvas.width,
            height=self.canvas.height,
            margin=dict(l=0, r=0, t=0, b=0),
            plot_bgcolor="white",
            showlegend=False,
        )
        return fig

    @staticmethod
    def empty_figure(message: str) -> go.Figure:
        """
        Standardised 'no data' figure used by all views.
        """
        fig = go.Figure()
        fig.update_layout(
            title=message,
            xaxis={"visible": False},
            yaxis={"visible": False},
        )
        return fig
