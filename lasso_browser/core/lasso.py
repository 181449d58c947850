from __future__ import annotations

import enum
import logging
from typing import FrozenSet, List, Optional, Sequence, Tuple

import numpy as np

from .exceptions import LassoStateError

logger = logging.getLogger(__name__)

Vertex = Tuple[float, float]


class LassoState(enum.Enum):
    IDLE = "idle"
    DRAWING = "drawing"


class PointStyle(enum.Enum):
    """Visual membership of a point; DEFAULT only outside of any gesture."""
    DEFAULT = "default"
    SELECTED = "selected"
    NOT_SELECTED = "not_selected"


def points_in_polygon(
    xs: Sequence[float],
    ys: Sequence[float],
    polygon: Sequence[Vertex],
) -> np.ndarray:
    """
    Even-odd (ray casting) membership of every (x, y) in the closed polygon.

    The polygon is closed implicitly from its last vertex back to the first
    and may be concave or self-intersecting. Each edge counts as crossing when
    it straddles the point's y with a half-open rule (y_i > y) != (y_j > y),
    which makes boundary handling identical for every point. NaN coordinates
    are never inside. Fewer than three vertices enclose nothing.
    """
    px = np.asarray(xs, dtype=float)
    py = np.asarray(ys, dtype=float)
    inside = np.zeros(px.shape, dtype=bool)
    if len(polygon) < 3 or px.size == 0:
        return inside

    verts = np.asarray(polygon, dtype=float)
    vx, vy = verts[:, 0], verts[:, 1]
    # Pair each vertex i with its predecessor j (closing edge included)
    jx, jy = np.roll(vx, 1), np.roll(vy, 1)

    with np.errstate(invalid="ignore", divide="ignore"):
        for xi, yi, xj, yj in zip(vx, vy, jx, jy):
            straddles = (yi > py) != (yj > py)
            x_cross = (xj - xi) * (py - yi) / (yj - yi) + xi
            inside ^= straddles & (px < x_cross)

    return inside & ~(np.isnan(px) | np.isnan(py))


class LassoSelector:
    """
    Lasso gesture state machine over a fixed set of screen points.

    IDLE --start--> DRAWING --move*--> DRAWING --end--> IDLE
    IDLE --clear--> IDLE

    While drawing, membership is recomputed from scratch against the whole
    polygon on every move (the tentative selection). `end` commits the
    tentative selection. Indices refer to positions in the point arrays the
    selector was built with.
    """

    def __init__(self, xs: Sequence[float], ys: Sequence[float]) -> None:
        self._xs = np.asarray(xs, dtype=float)
        self._ys = np.asarray(ys, dtype=float)
        if self._xs.shape != self._ys.shape:
            raise ValueError(
                f"x and y coordinates differ in length: {self._xs.shape} vs {self._ys.shape}"
            )
        self.state = LassoState.IDLE
        self._polygon: List[Vertex] = []
        self._mask = np.zeros(self._xs.shape, dtype=bool)
        self._styles_active = False
        self._committed: FrozenSet[int] = frozenset()

    def __len__(self) -> int:
        return int(self._xs.size)

    # -------------------------------------------------------------------------
    # Read-only state
    # -------------------------------------------------------------------------
    @property
    def polygon(self) -> List[Vertex]:
        return list(self._polygon)

    @property
    def possible(self) -> FrozenSet[int]:
        """Tentative selection of the current (or last) gesture."""
        return frozenset(np.flatnonzero(self._mask).tolist())

    @property
    def selected(self) -> FrozenSet[int]:
        """Committed selection from the last completed gesture."""
        return self._committed

    def style_of(self, index: int) -> PointStyle:
        if not self._styles_active:
            return PointStyle.DEFAULT
        return PointStyle.SELECTED if self._mask[index] else PointStyle.NOT_SELECTED

    def styles(self) -> List[PointStyle]:
        return [self.style_of(i) for i in range(len(self))]

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------
    def start(self, x: float, y: float) -> None:
        if self.state is not LassoState.IDLE:
            raise LassoStateError("Cannot start a lasso gesture while one is in progress")
        self.state = LassoState.DRAWING
        self._polygon = [(float(x), float(y))]
        self._mask = np.zeros(self._xs.shape, dtype=bool)
        self._styles_active = True

    def move(self, x: float, y: float) -> FrozenSet[int]:
        if self.state is not LassoState.DRAWING:
            raise LassoStateError("Lasso move received without an active gesture")
        self._polygon.append((float(x), float(y)))
        self._mask = points_in_polygon(self._xs, self._ys, self._polygon)
        return self.possible

    def end(self) -> FrozenSet[int]:
        if self.state is not LassoState.DRAWING:
            raise LassoStateError("Lasso end received without an active gesture")
        self.state = LassoState.IDLE
        self._committed = self.possible
        logger.debug(
            "Lasso committed",
            extra={"n_vertices": len(self._polygon), "n_selected": len(self._committed)},
        )
        return self._committed

    def clear(self) -> None:
        if self.state is not LassoState.IDLE:
            raise LassoStateError("Background click ignored during a lasso gesture")
        self._reset()

    def abort(self) -> None:
        """Drop any gesture without committing it and reset every point."""
        if self.state is LassoState.DRAWING:
            logger.info("Lasso gesture aborted", extra={"n_vertices": len(self._polygon)})
        self.state = LassoState.IDLE
        self._reset()

    def restore(self, selected: Optional[FrozenSet[int]]) -> None:
        """Re-apply a committed selection, e.g. after the points were recomputed."""
        if self.state is not LassoState.IDLE:
            raise LassoStateError("Cannot restore a selection during a lasso gesture")
        if not selected:
            self._reset()
            return
        mask = np.zeros(self._xs.shape, dtype=bool)
        mask[[i for i in selected if 0 <= i < mask.size]] = True
        self._mask = mask
        self._styles_active = True
        self._committed = self.possible

    def _reset(self) -> None:
        self._polygon = []
        self._mask = np.zeros(self._xs.shape, dtype=bool)
        self._styles_active = False
        self._committed = frozenset()
