from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from lasso_browser.config.model import GlobalConfig
from lasso_browser.services.dataset_service import DatasetService


@dataclass
class AppConfig:
    config_root: Path
    global_config: GlobalConfig
    datasets: Optional[DatasetService] = None
    dataset_names: List[str] = field(default_factory=list)
    default_dataset: Optional[str] = None

    def validate(self) -> None:
        """Ensure all required services are attached before the app starts."""
        if self.datasets is None:
            raise RuntimeError("AppConfig.datasets must be initialized.")
        if not self.dataset_names:
            raise RuntimeError("AppConfig.dataset_names must not be empty.")
