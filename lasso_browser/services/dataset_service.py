from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterator, Mapping, Optional, Sequence

from lasso_browser.config.model import DEFAULT_TEST_DATA_TEMPLATE, DatasetConfig
from lasso_browser.core.attributes import DEFAULT_EXCLUDED, AttributePartition, classify_attributes
from lasso_browser.core.dataset import Dataset
from lasso_browser.core.dataset_loader import load_csv, resolve_dataset_path
from lasso_browser.core.exceptions import LoadError

logger = logging.getLogger(__name__)


class DatasetService(Mapping[str, Dataset]):
    """
    Central service for resolving and loading datasets by identifier.

    Implements the Mapping interface (dict-like) over the configured
    identifiers; any other identifier is still loadable through the
    test-data template. Loaded datasets are cached by identifier.
    """

    def __init__(
        self,
        cfg_by_name: Dict[str, DatasetConfig],
        data_root: Optional[Path] = None,
        test_data_template: str = DEFAULT_TEST_DATA_TEMPLATE,
        excluded_attributes: Sequence[str] = DEFAULT_EXCLUDED,
    ):
        self._cfg_by_name = cfg_by_name
        self._data_root = data_root
        self._test_data_template = test_data_template
        self._excluded = tuple(excluded_attributes)
        self._loaded: Dict[str, Dataset] = {}
        self._partitions: Dict[str, AttributePartition] = {}

    def __getitem__(self, name: str) -> Dataset:
        return self.load(name)

    def __contains__(self, name: object) -> bool:
        return name in self._cfg_by_name

    def __iter__(self) -> Iterator[str]:
        return iter(self._cfg_by_name)

    def __len__(self) -> int:
        return len(self._cfg_by_name)

    @property
    def excluded_attributes(self) -> tuple:
        return self._excluded

    def label(self, name: str) -> str:
        cfg = self._cfg_by_name.get(name)
        return cfg.label if cfg is not None else name

    def path_for(self, name: str) -> Path:
        return resolve_dataset_path(
            name,
            self._cfg_by_name,
            data_root=self._data_root,
            test_data_template=self._test_data_template,
        )

    def load(self, name: str) -> Dataset:
        """
        Return the dataset for `name`, reading it on first use.

        Raises:
            LoadError: the file is missing or cannot be parsed
        """
        # 1. Fast path: already materialised
        if name in self._loaded:
            return self._loaded[name]

        # 2. Resolve + read
        try:
            path = self.path_for(name)
            logger.info("Loading dataset", extra={"dataset": name, "path": str(path)})
            ds = load_csv(name, path)
        except LoadError as e:
            logger.error("Dataset load error", extra={"dataset": name, "error": str(e)})
            raise

        self._loaded[name] = ds
        return ds

    def partition(self, name: str) -> AttributePartition:
        """Quantitative / categorical split of a dataset, computed once per load."""
        if name not in self._partitions:
            self._partitions[name] = classify_attributes(self.load(name), excluded=self._excluded)
        return self._partitions[name]

    def is_loaded(self, name: str) -> bool:
        return name in self._loaded

    def evict(self, name: str) -> None:
        self._loaded.pop(name, None)
        self._partitions.pop(name, None)
