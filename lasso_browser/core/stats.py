from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .dataset import Row

logger = logging.getLogger(__name__)

MIN_BOX_SIZE = 5


@dataclass(frozen=True)
class FiveNumberSummary:
    min: float
    q1: float
    median: float
    q3: float
    max: float

    @classmethod
    def from_sorted(cls, values: Sequence[float]) -> FiveNumberSummary:
        arr = np.asarray(values, dtype=float)
        # numpy "linear" is the R-7 estimator (d3.quantile does the same)
        q1, median, q3 = np.quantile(arr, [0.25, 0.5, 0.75], method="linear")
        return cls(float(arr[0]), float(q1), float(median), float(q3), float(arr[-1]))

    def as_tuple(self) -> Tuple[float, float, float, float, float]:
        return self.min, self.q1, self.median, self.q3, self.max


@dataclass(frozen=True)
class GroupSummary:
    """
    Boxplot input for one value of the grouping attribute.

    Small groups keep their sorted raw values and have no box; larger groups
    carry a five-number summary. `values` is always the sorted numeric data.
    """
    group: str
    values: Tuple[float, ...]
    box: Optional[FiveNumberSummary] = None

    @property
    def is_box(self) -> bool:
        return self.box is not None

    @property
    def count(self) -> int:
        return len(self.values)


def group_values(
    rows: Iterable[Row],
    group_attr: str,
    value_attr: str,
) -> Dict[str, Tuple[float, ...]]:
    """
    Sorted numeric values of `value_attr` per `group_attr` value.

    Groups appear in first-encountered order. Values that do not parse as
    finite numbers are dropped from their group (the group itself is kept).
    """
    records = [(row[group_attr], row[value_attr]) for row in rows]
    if not records:
        return {}

    frame = pd.DataFrame.from_records(records, columns=["group", "value"])
    values = pd.to_numeric(frame["value"].str.strip(), errors="coerce").astype(float)
    frame["value"] = values.where(np.isfinite(values))

    n_dropped = int(frame["value"].isna().sum())
    if n_dropped:
        logger.warning(
            "Dropping non-numeric boxplot values",
            extra={"attribute": value_attr, "n_rows": n_dropped},
        )

    out: Dict[str, Tuple[float, ...]] = {}
    for group, sub in frame.groupby("group", sort=False):
        values = np.sort(sub["value"].dropna().to_numpy(dtype=float))
        out[str(group)] = tuple(float(v) for v in values)
    return out


def aggregate(
    rows: Iterable[Row],
    group_attr: str,
    value_attr: str,
    min_box_size: int = MIN_BOX_SIZE,
) -> Dict[str, GroupSummary]:
    """
    Group the selected rows by `group_attr` and summarise `value_attr`.

    - size < min_box_size: raw sorted values, no box
    - otherwise: min, q1, median, q3, max by linear interpolation

    Empty input gives an empty mapping; callers clear the boxplot in that case.
    """
    summaries: Dict[str, GroupSummary] = {}
    for group, values in group_values(rows, group_attr, value_attr).items():
        if len(values) < min_box_size:
            summaries[group] = GroupSummary(group=group, values=values)
        else:
            summaries[group] = GroupSummary(
                group=group,
                values=values,
                box=FiveNumberSummary.from_sorted(values),
            )

    logger.debug(
        "Aggregated selection",
        extra={
            "group_attr": group_attr,
            "value_attr": value_attr,
            "n_groups": len(summaries),
            "n_boxes": sum(s.is_box for s in summaries.values()),
        },
    )
    return summaries


def value_domain(summaries: Dict[str, GroupSummary]) -> Optional[Tuple[float, float]]:
    """[min, max] across every group's values, or None if there are none."""
    all_values = [v for s in summaries.values() for v in s.values]
    if not all_values:
        return None
    return min(all_values), max(all_values)
