from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from .lasso import PointStyle


@dataclass
class PlotState:
    """
    Current dataset and attribute choices, as held in the browser store.

    Fields:

    - dataset_name: identifier chosen in the dataset dropdown
    - load_id: increases on every dataset load; selections made against an
      older load are stale
    - x_attr / y_attr: quantitative attributes on the scatter axes
    - color_attr: categorical attribute used for color and boxplot grouping
    - box_attr: quantitative attribute summarised by the boxplot
    - error: message of the last failed load, if any
    """

    dataset_name: Optional[str] = None
    load_id: int = 0

    x_attr: Optional[str] = None
    y_attr: Optional[str] = None
    color_attr: Optional[str] = None
    box_attr: Optional[str] = None

    error: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return None not in (self.dataset_name, self.x_attr, self.y_attr, self.color_attr, self.box_attr)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PlotState:
        return cls(
            dataset_name=data.get("dataset_name"),
            load_id=int(data.get("load_id", 0)),
            x_attr=data.get("x_attr"),
            y_attr=data.get("y_attr"),
            color_attr=data.get("color_attr"),
            box_attr=data.get("box_attr"),
            error=data.get("error"),
        )


@dataclass
class SelectionState:
    """
    Committed lasso selection for one dataset load.

    - active: False until the first gesture and again after a background
      click (all points drawn with default styling)
    - selected: row indices inside the lasso
    """

    dataset_name: Optional[str] = None
    load_id: int = 0
    active: bool = False
    selected: List[int] = field(default_factory=list)

    def belongs_to(self, plot_state: PlotState) -> bool:
        return (
            self.dataset_name == plot_state.dataset_name
            and self.load_id == plot_state.load_id
        )

    def styles(self, n_points: int) -> List[PointStyle]:
        if not self.active:
            return [PointStyle.DEFAULT] * n_points
        chosen = set(self.selected)
        return [
            PointStyle.SELECTED if i in chosen else PointStyle.NOT_SELECTED
            for i in range(n_points)
        ]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SelectionState:
        return cls(
            dataset_name=data.get("dataset_name"),
            load_id=int(data.get("load_id", 0)),
            active=bool(data.get("active", False)),
            selected=[int(i) for i in data.get("selected", [])],
        )

    @classmethod
    def cleared(cls, plot_state: PlotState) -> SelectionState:
        return cls(dataset_name=plot_state.dataset_name, load_id=plot_state.load_id)
