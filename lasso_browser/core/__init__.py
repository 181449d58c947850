"""
Core domain layer: dataset model, attribute classification, lasso state
machine, selection statistics and the selection pipeline
"""

from .attributes import AttributePartition, classify_attributes
from .dataset import Dataset, DatasetModel
from .lasso import LassoSelector, LassoState, PointStyle, points_in_polygon
from .pipeline import SelectionPipeline
from .stats import FiveNumberSummary, GroupSummary, aggregate

__all__ = [
    "AttributePartition",
    "classify_attributes",
    "Dataset",
    "DatasetModel",
    "LassoSelector",
    "LassoState",
    "PointStyle",
    "points_in_polygon",
    "SelectionPipeline",
    "FiveNumberSummary",
    "GroupSummary",
    "aggregate",
]
