"""
Core domain layer: dataset model, numeric coercion, aggregation engine,
dashboard roll-up, export naming, view base class and the view registry
"""

from .dataset import Dataset, DatasetMeta, DatasetPayload
from .aggregation import ColumnAggregate, NumericAggregates, compute_numeric_aggregates
from .rollup import DashboardRollup, compute_rollup
from .export import ExportCoordinator, MetricKind
from .state import ComparisonState
from .base_view import BaseView
from .view_registry import ViewRegistry

__all__ = [
    "Dataset",
    "DatasetMeta",
    "DatasetPayload",
    "ColumnAggregate",
    "NumericAggregates",
    "compute_numeric_aggregates",
    "DashboardRollup",
    "compute_rollup",
    "ExportCoordinator",
    "MetricKind",
    "ComparisonState",
    "BaseView",
    "ViewRegistry",
]
