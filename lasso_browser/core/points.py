from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from lasso_browser.config.model import CanvasConfig
from .dataset import Dataset, Row
from .scales import LinearScale, OrdinalColorScale

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Point:
    """
    A row bound to screen coordinates.

    Identity is the underlying Row object, not the coordinates: two Points
    built for the same Row compare equal across axis changes.
    """
    index: int
    row: Row
    x: float
    y: float
    category: str

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Point) and other.row is self.row

    def __hash__(self) -> int:
        return id(self.row)


@dataclass(frozen=True)
class ScatterData:
    points: Tuple[Point, ...]
    x_attr: str
    y_attr: str
    color_attr: str
    x_scale: LinearScale
    y_scale: LinearScale
    color_scale: OrdinalColorScale
    canvas: CanvasConfig

    @property
    def xs(self) -> np.ndarray:
        return np.array([p.x for p in self.points], dtype=float)

    @property
    def ys(self) -> np.ndarray:
        return np.array([p.y for p in self.points], dtype=float)

    def color_of(self, point: Point) -> str:
        return self.color_scale(point.category)


def compute_points(
    dataset: Dataset,
    x_attr: str,
    y_attr: str,
    color_attr: str,
    canvas: Optional[CanvasConfig] = None,
) -> ScatterData:
    """
    One Point per row of the dataset.

    X and Y scales are fit independently to [min, max] over all rows.
    Non-numeric cells become NaN: they are left out of the domain and their
    points get NaN coordinates, which no lasso can ever contain.
    """
    canvas = canvas or CanvasConfig()

    x_values = dataset.numeric(x_attr)
    y_values = dataset.numeric(y_attr)
    categories = dataset.column(color_attr).tolist()

    x_scale = LinearScale.fit(x_values, canvas.x_range)
    y_scale = LinearScale.fit(y_values, canvas.y_range)
    color_scale = OrdinalColorScale.fit(categories)

    xs = np.atleast_1d(x_scale(x_values))
    ys = np.atleast_1d(y_scale(y_values))

    points = tuple(
        Point(index=i, row=row, x=float(xs[i]), y=float(ys[i]), category=str(categories[i]))
        for i, row in enumerate(dataset.rows)
    )

    if x_scale.is_degenerate or y_scale.is_degenerate:
        logger.info(
            "Degenerate scale domain; collapsing onto range midpoint",
            extra={"dataset": dataset.name, "x_attr": x_attr, "y_attr": y_attr},
        )

    return ScatterData(
        points=points,
        x_attr=x_attr,
        y_attr=y_attr,
        color_attr=color_attr,
        x_scale=x_scale,
        y_scale=y_scale,
        color_scale=color_scale,
        canvas=canvas,
    )
