from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

import pandas as pd

from lasso_browser.config.model import DEFAULT_TEST_DATA_TEMPLATE, DatasetConfig
from .dataset import Dataset
from .exceptions import LoadError

logger = logging.getLogger(__name__)


def resolve_dataset_path(
    name: str,
    cfg_by_name: Mapping[str, DatasetConfig],
    data_root: Optional[Path] = None,
    test_data_template: str = DEFAULT_TEST_DATA_TEMPLATE,
) -> Path:
    """
    Map a dataset identifier to the CSV it lives in.

    Registered identifiers use their configured file; anything else falls
    through to the test-data template (e.g. "testing/data/{name}.csv").
    Relative paths are resolved against LASSO_BROWSER_DATA_ROOT if set,
    otherwise against `data_root`.

    Raises:
        LoadError: a registered entry names no file
    """
    cfg = cfg_by_name.get(name)
    if cfg is not None:
        try:
            path = cfg.path
        except KeyError as e:
            raise LoadError(name, f"no 'file' or 'path' in {cfg.source_path}") from e
    else:
        path = Path(test_data_template.format(name=name))

    if not path.is_absolute():
        env_root = os.environ.get("LASSO_BROWSER_DATA_ROOT")
        if env_root:
            path = Path(env_root) / path
        elif data_root is not None:
            path = Path(data_root) / path

    return path


def load_csv(name: str, path: Path) -> Dataset:
    """
    Read a delimited file with a header row into a string-valued Dataset.

    Raises:
        LoadError: missing file, unreadable / malformed content, no columns
    """
    path = Path(path)
    if not path.is_file():
        raise LoadError(name, f"file not found at {path}")

    try:
        frame = pd.read_csv(path, dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError as e:
        raise LoadError(name, f"{path} is empty") from e
    except (pd.errors.ParserError, UnicodeDecodeError, OSError) as e:
        raise LoadError(name, f"could not parse {path}: {e}") from e

    if frame.columns.empty:
        raise LoadError(name, f"{path} has no header row")

    logger.info(
        "Parsed dataset file",
        extra={"dataset": name, "path": str(path), "n_rows": len(frame), "n_cols": frame.shape[1]},
    )
    return Dataset(name=name, frame=frame, file_path=path)
