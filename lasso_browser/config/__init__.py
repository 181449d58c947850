"""
Configuration layer: global.json + per-dataset JSON files.
"""

from .model import CanvasConfig, DatasetConfig, GlobalConfig

__all__ = ["CanvasConfig", "DatasetConfig", "GlobalConfig"]
