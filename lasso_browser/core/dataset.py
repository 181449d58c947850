from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from .attributes import AttributePartition, classify_attributes
from .exceptions import AttributeMismatchError, LoadError

logger = logging.getLogger(__name__)

Row = Mapping[str, str]


class Dataset:
    """
    Ordered, immutable table of string-valued rows sharing one header.

    Rows are exposed as read-only mappings created once per Dataset, so a Row
    object is a stable identity for the lifetime of the load. Numeric access
    goes through :meth:`numeric`, which coerces to float and leaves NaN where a
    value does not parse.
    """

    def __init__(
        self,
        name: str,
        frame: pd.DataFrame,
        file_path: Optional[Path] = None,
    ) -> None:
        self.name = name
        self.file_path = file_path
        self._frame = frame.astype(str).reset_index(drop=True)
        self._rows: tuple[Row, ...] = tuple(
            MappingProxyType(record)
            for record in self._frame.to_dict(orient="records")
        )
        self._numeric_cache: dict[str, np.ndarray] = {}

    @classmethod
    def from_records(cls, name: str, records: Sequence[Mapping[str, str]]) -> Dataset:
        return cls(name, pd.DataFrame.from_records(list(records)))

    # -------------------------------------------------------------------------
    # Sequence-like access
    # -------------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    def __getitem__(self, index: int) -> Row:
        return self._rows[index]

    def __repr__(self) -> str:
        return f"Dataset(name={self.name!r}, n_rows={len(self)}, attributes={self.attributes!r})"

    @property
    def rows(self) -> tuple[Row, ...]:
        return self._rows

    @property
    def attributes(self) -> List[str]:
        return [str(c) for c in self._frame.columns]

    @property
    def frame(self) -> pd.DataFrame:
        """String-typed frame backing this dataset (a copy; rows stay immutable)."""
        return self._frame.copy()

    # -------------------------------------------------------------------------
    # Typed column access
    # -------------------------------------------------------------------------
    def column(self, attribute: str) -> pd.Series:
        if attribute not in self._frame.columns:
            raise KeyError(f"Unknown attribute '{attribute}' in dataset '{self.name}'")
        return self._frame[attribute]

    def numeric(self, attribute: str) -> np.ndarray:
        """
        Float view of a column. Values that do not parse as finite numbers
        become NaN.

        Logs a warning the first time a column with unparseable values is
        requested; callers decide whether NaN rows are dropped or rejected.
        """
        cached = self._numeric_cache.get(attribute)
        if cached is not None:
            return cached

        parsed = pd.to_numeric(self.column(attribute).str.strip(), errors="coerce")
        values = np.array(parsed, dtype=float)
        # +/-inf has no place on a linear axis
        values[~np.isfinite(values)] = np.nan
        n_bad = int(np.isnan(values).sum())
        if n_bad:
            logger.warning(
                "Non-numeric values coerced to NaN",
                extra={"dataset": self.name, "attribute": attribute, "n_rows": n_bad},
            )
        values.setflags(write=False)
        self._numeric_cache[attribute] = values
        return values

    def require_numeric(self, attribute: str) -> np.ndarray:
        """
        Strict variant of :meth:`numeric`.

        Raises:
            AttributeMismatchError: if any row fails to parse
        """
        values = self.numeric(attribute)
        bad = np.flatnonzero(np.isnan(values))
        if bad.size:
            raise AttributeMismatchError(attribute, bad.tolist())
        return values

    def classify(self, excluded: Sequence[str] = ("#", "Name")) -> AttributePartition:
        return classify_attributes(self, excluded=excluded)


@dataclass(frozen=True)
class LoadTicket:
    """Handle for one in-flight load; only the newest ticket may complete."""
    generation: int
    dataset_name: str


class DatasetModel:
    """
    Owner of the currently loaded Dataset and its attribute partition.

    Lifecycle:
    - begin_load(name) hands out a ticket and marks the model as loading
    - complete_load(ticket, dataset) swaps the dataset in wholesale
    - fail_load(ticket, error) records the error and keeps the previous dataset

    Completions for a ticket that is no longer the newest are ignored, so a
    slow, stale load can never overwrite a newer one.
    """

    def __init__(self, excluded_attributes: Sequence[str] = ("#", "Name")) -> None:
        self.excluded_attributes = tuple(excluded_attributes)
        self._dataset: Optional[Dataset] = None
        self._partition = AttributePartition((), ())
        self._generation = 0
        self._loaded_generation = 0
        self._pending: Optional[LoadTicket] = None
        self.error: Optional[LoadError] = None

    @property
    def dataset(self) -> Optional[Dataset]:
        return self._dataset

    @property
    def partition(self) -> AttributePartition:
        return self._partition

    @property
    def generation(self) -> int:
        """Generation of the dataset currently held (0 = nothing loaded yet)."""
        return self._loaded_generation

    @property
    def is_loading(self) -> bool:
        return self._pending is not None

    def begin_load(self, dataset_name: str) -> LoadTicket:
        self._generation += 1
        ticket = LoadTicket(generation=self._generation, dataset_name=dataset_name)
        if self._pending is not None:
            logger.info(
                "Superseding in-flight dataset load",
                extra={"stale": self._pending.dataset_name, "dataset": dataset_name},
            )
        self._pending = ticket
        return ticket

    def is_current(self, ticket: LoadTicket) -> bool:
        return self._pending is not None and self._pending == ticket

    def complete_load(self, ticket: LoadTicket, dataset: Dataset) -> bool:
        if not self.is_current(ticket):
            logger.info(
                "Ignoring stale dataset load",
                extra={"dataset": ticket.dataset_name, "generation": ticket.generation},
            )
            return False

        self._partition = classify_attributes(dataset, excluded=self.excluded_attributes)
        self._dataset = dataset
        self._loaded_generation = ticket.generation
        self._pending = None
        self.error = None
        logger.info(
            "Dataset loaded",
            extra={
                "dataset": dataset.name,
                "n_rows": len(dataset),
                "n_quantitative": len(self._partition.quantitative),
                "n_categorical": len(self._partition.categorical),
            },
        )
        return True

    def fail_load(self, ticket: LoadTicket, error: LoadError) -> bool:
        if not self.is_current(ticket):
            return False
        self._pending = None
        self.error = error
        logger.error("Dataset load failed", extra={"dataset": ticket.dataset_name, "error": str(error)})
        return True
