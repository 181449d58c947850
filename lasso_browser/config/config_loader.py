from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Tuple

from lasso_browser.config.model import (
    DEFAULT_TEST_DATA_TEMPLATE,
    CanvasConfig,
    DatasetConfig,
    GlobalConfig,
)
from lasso_browser.core.exceptions import ConfigError

logger = logging.getLogger(__name__)


def load_global_config(root: Path) -> GlobalConfig:
    """
    Load configuration from a directory using the multi-file layout:

        <root>/global.json
        <root>/datasets/*.json   (one dataset per file)
    """
    root = Path(root)
    logger.info("Loading global config", extra={"config_root": str(root)})

    global_path = root / "global.json"
    if not global_path.is_file():
        # Fallback to defaults if global.json is missing
        raw_global = {}
    else:
        try:
            with global_path.open() as f:
                raw_global = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {global_path}: {e}") from e

    if not isinstance(raw_global, dict):
        raise ConfigError(f"{global_path} must contain a JSON object")

    datasets_dir = root / "datasets"
    datasets: List[DatasetConfig] = []

    if datasets_dir.is_dir():
        logger.info(f"Scanning for dataset configurations in: {datasets_dir}")
        # Sort files for deterministic loading
        files = sorted(datasets_dir.glob("*.json"))

        for idx, config_file in enumerate(files):
            # Ignore macOS 'Apple Double' files (._*)
            if config_file.name.startswith("._"):
                continue

            logger.info(f"Loading dataset config: {config_file.name}")
            try:
                with config_file.open() as f:
                    raw = json.load(f)
                datasets.append(
                    DatasetConfig.from_raw(raw, source_path=config_file, index=idx)
                )
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Failed to load {config_file.name}: {e}")
    else:
        logger.warning(f"Datasets directory not found at: {datasets_dir}")

    # Relative data roots are resolved against the config directory
    data_root_raw = raw_global.get("data_root")
    data_root = Path(data_root_raw) if data_root_raw else None
    if data_root and not data_root.is_absolute():
        data_root = (root / data_root).resolve()

    return GlobalConfig(
        ui_title=raw_global.get("ui_title", "Lasso Browser"),
        default_dataset=raw_global.get("default_dataset"),
        datasets=datasets,
        data_root=data_root,
        test_data_template=raw_global.get("test_data_template", DEFAULT_TEST_DATA_TEMPLATE),
        excluded_attributes=tuple(raw_global.get("excluded_attributes", ("#", "Name"))),
        min_box_size=int(raw_global.get("min_box_size", 5)),
        canvas=CanvasConfig.from_raw(raw_global.get("canvas")),
    )


def load_dataset_registry(path: Path) -> Tuple[GlobalConfig, Dict[str, DatasetConfig]]:
    """
    Load global config + dataset config mapping keyed by dataset name.
    """
    global_config = load_global_config(path)

    cfg_by_name: Dict[str, DatasetConfig] = {}
    for ds_cfg in global_config.datasets:
        if ds_cfg.name in cfg_by_name:
            logger.warning(f"Duplicate dataset name ignored: {ds_cfg.name}")
            continue
        cfg_by_name[ds_cfg.name] = ds_cfg

    return global_config, cfg_by_name
