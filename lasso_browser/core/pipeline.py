from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, replace
from typing import Callable, Deque, Dict, FrozenSet, List, Optional, Sequence, Union

from lasso_browser.config.model import CanvasConfig
from .attributes import AttributePartition
from .dataset import Dataset, DatasetModel, LoadTicket, Row
from .exceptions import LassoStateError, LoadError
from .lasso import LassoSelector, LassoState, PointStyle, Vertex
from .points import ScatterData, compute_points
from .stats import MIN_BOX_SIZE, GroupSummary, aggregate

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Events
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class PointerDown:
    x: float
    y: float


@dataclass(frozen=True)
class PointerMove:
    x: float
    y: float


@dataclass(frozen=True)
class PointerUp:
    pass


@dataclass(frozen=True)
class BackgroundClick:
    pass


@dataclass(frozen=True)
class AttributesChanged:
    """Dropdown change; fields left as None keep their current value."""
    x: Optional[str] = None
    y: Optional[str] = None
    color: Optional[str] = None
    box: Optional[str] = None


Event = Union[PointerDown, PointerMove, PointerUp, BackgroundClick, AttributesChanged]


@dataclass(frozen=True)
class PlotAttributes:
    x: str
    y: str
    color: str
    box: str


def default_attributes(partition: AttributePartition) -> Optional[PlotAttributes]:
    """
    First quantitative attribute for x and boxplot, second (or first) for y,
    first categorical for color. None if the dataset cannot be plotted.
    """
    quant = partition.quantitative
    cat = partition.categorical
    if not quant or not cat:
        return None
    return PlotAttributes(
        x=quant[0],
        y=quant[1] if len(quant) > 1 else quant[0],
        color=cat[0],
        box=quant[0],
    )


ScatterListener = Callable[[Optional[ScatterData], List[PointStyle]], None]
BoxplotListener = Callable[[Dict[str, GroupSummary]], None]


class SelectionPipeline:
    """
    Reactive contract between scatterplot selection and boxplot summary.

    Holds the DatasetModel, the chosen attributes, the current points and the
    lasso. Events are queued and handled one at a time; an event dispatched
    from inside a listener runs after the current one has finished.

    Redraw rules:
    - dataset load: points rebuilt, selection cleared, boxplot cleared
    - x / y change: points rebuilt, committed selection kept (by row)
    - color change: scatter recolored, boxplot recomputed from the selection
    - boxplot attribute change: boxplot recomputed from the selection
    - lasso end: boxplot recomputed from the committed selection
    - background click: selection and boxplot cleared, styles back to default

    Listeners always receive complete outputs, never patches.
    """

    def __init__(
        self,
        model: Optional[DatasetModel] = None,
        canvas: Optional[CanvasConfig] = None,
        min_box_size: int = MIN_BOX_SIZE,
    ) -> None:
        self.model = model or DatasetModel()
        self.canvas = canvas or CanvasConfig()
        self.min_box_size = min_box_size

        self.attributes: Optional[PlotAttributes] = None
        self.scatter: Optional[ScatterData] = None
        self.lasso: Optional[LassoSelector] = None
        self.summaries: Dict[str, GroupSummary] = {}

        self._queue: Deque[Event] = deque()
        self._draining = False
        self._scatter_listeners: List[ScatterListener] = []
        self._boxplot_listeners: List[BoxplotListener] = []

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------
    def subscribe_scatter(self, listener: ScatterListener) -> None:
        self._scatter_listeners.append(listener)

    def subscribe_boxplot(self, listener: BoxplotListener) -> None:
        self._boxplot_listeners.append(listener)

    # -------------------------------------------------------------------------
    # Read-only state
    # -------------------------------------------------------------------------
    @property
    def dataset(self) -> Optional[Dataset]:
        return self.model.dataset

    @property
    def is_drawing(self) -> bool:
        return self.lasso is not None and self.lasso.state is LassoState.DRAWING

    @property
    def selected_indices(self) -> FrozenSet[int]:
        return self.lasso.selected if self.lasso is not None else frozenset()

    @property
    def selected_rows(self) -> List[Row]:
        ds = self.dataset
        if ds is None:
            return []
        return [ds[i] for i in sorted(self.selected_indices)]

    def styles(self) -> List[PointStyle]:
        return self.lasso.styles() if self.lasso is not None else []

    # -------------------------------------------------------------------------
    # Dataset lifecycle
    # -------------------------------------------------------------------------
    def begin_load(self, dataset_name: str) -> LoadTicket:
        """
        Start replacing the dataset. Any gesture in progress is aborted and
        the selection is dropped; the old points stay visible until the load
        completes.
        """
        if self.lasso is not None:
            self.lasso.abort()
        self._queue.clear()
        self._set_summaries({})
        self._emit_scatter()
        return self.model.begin_load(dataset_name)

    def complete_load(self, ticket: LoadTicket, dataset: Dataset) -> bool:
        if not self.model.complete_load(ticket, dataset):
            return False
        self.attributes = default_attributes(self.model.partition)
        if self.attributes is None:
            logger.warning(
                "Dataset has no plottable attributes",
                extra={"dataset": dataset.name, "attributes": dataset.attributes},
            )
        self._rebuild_points(keep_selection=False)
        self._set_summaries({})
        return True

    def fail_load(self, ticket: LoadTicket, error: LoadError) -> bool:
        return self.model.fail_load(ticket, error)

    def load_dataset(self, dataset_name: str, loader: Callable[[str], Dataset]) -> bool:
        """Synchronous load; returns False if the load failed or went stale."""
        ticket = self.begin_load(dataset_name)
        try:
            dataset = loader(dataset_name)
        except LoadError as e:
            self.fail_load(ticket, e)
            return False
        return self.complete_load(ticket, dataset)

    # -------------------------------------------------------------------------
    # Event queue
    # -------------------------------------------------------------------------
    def dispatch(self, event: Event) -> None:
        self._queue.append(event)
        if self._draining:
            return

        self._draining = True
        try:
            while self._queue:
                self._handle(self._queue.popleft())
        finally:
            self._draining = False

    def replay_lasso(self, vertices: Sequence[Vertex]) -> FrozenSet[int]:
        """Feed a recorded lasso path through the queue as one gesture."""
        if not vertices:
            self.dispatch(BackgroundClick())
            return self.selected_indices

        (x0, y0), rest = vertices[0], vertices[1:]
        self.dispatch(PointerDown(x0, y0))
        for x, y in rest:
            self.dispatch(PointerMove(x, y))
        self.dispatch(PointerUp())
        return self.selected_indices

    def _handle(self, event: Event) -> None:
        handlers = {
            PointerDown: self._on_pointer_down,
            PointerMove: self._on_pointer_move,
            PointerUp: self._on_pointer_up,
            BackgroundClick: self._on_background_click,
            AttributesChanged: self._on_attributes_changed,
        }
        handler = handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported event: {event!r}")

        try:
            handler(event)
        except LassoStateError as e:
            logger.warning("Ignoring lasso event", extra={"event": repr(event), "reason": str(e)})
        except (KeyError, ValueError):
            logger.exception("Failed to handle event", extra={"event": repr(event)})

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------
    def _on_pointer_down(self, event: PointerDown) -> None:
        if self.lasso is None:
            raise LassoStateError("No points to select")
        self.lasso.start(event.x, event.y)
        self._emit_scatter()

    def _on_pointer_move(self, event: PointerMove) -> None:
        if self.lasso is None:
            raise LassoStateError("No points to select")
        self.lasso.move(event.x, event.y)
        self._emit_scatter()

    def _on_pointer_up(self, event: PointerUp) -> None:
        if self.lasso is None:
            raise LassoStateError("No points to select")
        selected = self.lasso.end()
        logger.info(
            "Lasso selection committed",
            extra={"dataset": getattr(self.dataset, "name", None), "n_selected": len(selected)},
        )
        self._emit_scatter()
        self._recompute_summaries()

    def _on_background_click(self, event: BackgroundClick) -> None:
        if self.lasso is None:
            self._set_summaries({})
            return
        self.lasso.clear()
        self._emit_scatter()
        self._set_summaries({})

    def _on_attributes_changed(self, event: AttributesChanged) -> None:
        if self.attributes is None:
            raise LassoStateError("No dataset loaded")

        partition = self.model.partition
        for value, allowed in (
            (event.x, partition.quantitative),
            (event.y, partition.quantitative),
            (event.box, partition.quantitative),
            (event.color, partition.categorical),
        ):
            if value is not None and value not in allowed:
                raise ValueError(f"Attribute '{value}' is not available for this control")

        old = self.attributes
        new = replace(
            old,
            x=event.x or old.x,
            y=event.y or old.y,
            color=event.color or old.color,
            box=event.box or old.box,
        )
        self.attributes = new

        if (new.x, new.y, new.color) != (old.x, old.y, old.color):
            self._rebuild_points(keep_selection=True)
        if (new.color, new.box) != (old.color, old.box):
            self._recompute_summaries()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------
    def _rebuild_points(self, keep_selection: bool) -> None:
        ds = self.dataset
        kept = self.selected_indices if keep_selection else frozenset()

        if ds is None or self.attributes is None:
            self.scatter = None
            self.lasso = None
            self._emit_scatter()
            return

        if self.lasso is not None and self.lasso.state is LassoState.DRAWING:
            # Coordinates are about to change under the gesture
            self.lasso.abort()

        attrs = self.attributes
        self.scatter = compute_points(ds, attrs.x, attrs.y, attrs.color, self.canvas)
        self.lasso = LassoSelector(self.scatter.xs, self.scatter.ys)
        self.lasso.restore(kept)
        self._emit_scatter()

    def _recompute_summaries(self) -> None:
        if self.attributes is None:
            self._set_summaries({})
            return
        self._set_summaries(
            aggregate(
                self.selected_rows,
                self.attributes.color,
                self.attributes.box,
                min_box_size=self.min_box_size,
            )
        )

    def _set_summaries(self, summaries: Dict[str, GroupSummary]) -> None:
        self.summaries = summaries
        for listener in self._boxplot_listeners:
            listener(summaries)

    def _emit_scatter(self) -> None:
        styles = self.styles()
        for listener in self._scatter_listeners:
            listener(self.scatter, styles)
