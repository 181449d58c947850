from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence, Tuple

import numpy as np
import pandas as pd

if TYPE_CHECKING:
    from .dataset import Dataset

# Identifier-like columns that parse as numbers but are not measurements
DEFAULT_EXCLUDED: Tuple[str, ...] = ("#", "Name")


@dataclass(frozen=True)
class AttributePartition:
    """
    Split of a dataset's columns into the two dropdown families.

    - quantitative: usable for x, y and boxplot axes
    - categorical: usable for color / grouping

    Both keep the dataset's header order.
    """
    quantitative: Tuple[str, ...]
    categorical: Tuple[str, ...]

    def kind_of(self, attribute: str) -> str:
        if attribute in self.quantitative:
            return "quantitative"
        if attribute in self.categorical:
            return "categorical"
        raise KeyError(f"Unknown attribute '{attribute}'")


def is_numeric_column(values: pd.Series) -> bool:
    """
    True if every value parses as a finite number.

    Empty strings, 'NaN' and '+/-inf' do not count: none of them can be
    placed on a linear axis or summarised by quartiles.
    """
    parsed = pd.to_numeric(values.astype(str).str.strip(), errors="coerce")
    return bool(np.isfinite(parsed.to_numpy(dtype=float)).all())


def classify_attributes(
    dataset: Dataset,
    excluded: Sequence[str] = DEFAULT_EXCLUDED,
) -> AttributePartition:
    """
    Partition every attribute of the dataset into quantitative or categorical.

    An attribute is quantitative iff all of its values parse as numbers and it
    is not one of the excluded identifier columns. A dataset without rows
    therefore classifies every non-excluded attribute as quantitative.
    """
    excluded_set = set(excluded)
    quantitative = []
    categorical = []

    for attr in dataset.attributes:
        if attr not in excluded_set and is_numeric_column(dataset.column(attr)):
            quantitative.append(attr)
        else:
            categorical.append(attr)

    return AttributePartition(tuple(quantitative), tuple(categorical))
