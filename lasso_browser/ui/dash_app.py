from __future__ import annotations

import logging
from pathlib import Path

import dash_bootstrap_components as dbc
from dash import Dash

from .config import AppConfig
from lasso_browser.config.config_loader import load_dataset_registry
from lasso_browser.services.dataset_service import DatasetService
from lasso_browser.ui.layout.build_layout import build_layout
from lasso_browser.ui.callbacks.callbacks_dataset import register_dataset_callbacks
from lasso_browser.ui.callbacks.callbacks_selection import register_selection_callbacks
from lasso_browser.ui.callbacks.callbacks_render import register_render_callbacks

logger = logging.getLogger(__name__)


def create_dash_app(config_root: Path | str = Path("config")) -> Dash:
    config_root = Path(config_root)

    # 1) Load Config
    global_config, cfg_by_name = load_dataset_registry(config_root)
    if not cfg_by_name:
        raise RuntimeError(f"No dataset configs were loaded from {config_root}")

    # 2) Initialize Service Layer
    datasets = DatasetService(
        cfg_by_name,
        data_root=global_config.data_root,
        test_data_template=global_config.test_data_template,
        excluded_attributes=global_config.excluded_attributes,
    )

    # 3) Choose Default Dataset
    dataset_names = list(cfg_by_name)
    default_dataset = global_config.default_dataset
    if default_dataset not in cfg_by_name:
        if default_dataset is not None:
            logger.warning("Configured default dataset not found", extra={"dataset": default_dataset})
        default_dataset = dataset_names[0]

    # 4) App Context
    ctx = AppConfig(
        config_root=config_root,
        global_config=global_config,
        datasets=datasets,
        dataset_names=dataset_names,
        default_dataset=default_dataset,
    )
    ctx.validate()

    assets_path = Path(__file__).parent / "assets"

    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
        assets_folder=str(assets_path),
    )
    app.title = global_config.ui_title
    app.layout = build_layout(ctx)

    # Register callbacks
    register_dataset_callbacks(app, ctx)
    register_selection_callbacks(app, ctx)
    register_render_callbacks(app, ctx)

    return app
