from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

DEFAULT_TEST_DATA_TEMPLATE = "testing/data/{name}.csv"


@dataclass(frozen=True)
class CanvasConfig:
    """
    Fixed logical drawing area shared by the scatterplot and the boxplot.
    """
    width: int = 600
    height: int = 400
    margin: int = 50

    @property
    def x_range(self) -> Tuple[float, float]:
        return float(self.margin), float(self.width - self.margin)

    @property
    def y_range(self) -> Tuple[float, float]:
        # Screen y grows downward: larger values sit higher on the canvas
        return float(self.height - self.margin), float(self.margin)

    @classmethod
    def from_raw(cls, raw: Optional[Dict[str, Any]]) -> CanvasConfig:
        raw = raw or {}
        return cls(
            width=int(raw.get("width", 600)),
            height=int(raw.get("height", 400)),
            margin=int(raw.get("margin", 50)),
        )


@dataclass
class DatasetConfig:
    """
    Parsed config entry for a single dataset.
    """
    raw: Dict[str, Any]
    source_path: Path
    index: int

    @property
    def name(self) -> str:
        return self.raw.get("name", f"Dataset {self.index}")

    @property
    def label(self) -> str:
        return self.raw.get("label", self.name)

    @property
    def path(self) -> Path:
        """
        Return the CSV path for this dataset.

        Supports both "file" and "path" keys.
        """
        raw_path = self.raw.get("file") or self.raw.get("path")
        if raw_path is None:
            raise KeyError(f"No 'file' or 'path' in dataset config: {self.raw}")
        return Path(raw_path)

    @classmethod
    def from_raw(cls, raw: Dict[str, Any], source_path: Path, index: int) -> DatasetConfig:
        return cls(raw=raw, source_path=source_path, index=index)


@dataclass
class GlobalConfig:
    ui_title: str = "Lasso Browser"
    default_dataset: Optional[str] = None
    datasets: List[DatasetConfig] = field(default_factory=list)
    data_root: Optional[Path] = None
    test_data_template: str = DEFAULT_TEST_DATA_TEMPLATE
    excluded_attributes: Tuple[str, ...] = ("#", "Name")
    min_box_size: int = 5
    canvas: CanvasConfig = field(default_factory=CanvasConfig)
