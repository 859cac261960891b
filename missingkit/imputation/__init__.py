# missingkit/imputation/__init__.py
"""Imputation: column profiling, fill rules, planner, indicators and the orchestrating imputer."""

from missingkit.imputation.columns import (
    ColumnKind,
    ColumnSpec,
    detect_column_kind,
    missing_columns,
    missing_report,
    profile_columns,
)
from missingkit.imputation.engine import (
    ImputationConfig,
    MissingValueImputer,
    impute_missing_values,
)
from missingkit.imputation.fill import apply_fill, resolve_fill_value
from missingkit.imputation.indicators import IndicatorBuilder, missingness_indicators
from missingkit.imputation.neighbors import (
    KNNImputeState,
    NeighborImputer,
    StandardizedKNNImputer,
)
from missingkit.imputation.plan import ImputationPlan
from missingkit.imputation.planner import ImputationPlanner

__all__ = [
    "ColumnKind",
    "ColumnSpec",
    "detect_column_kind",
    "profile_columns",
    "missing_columns",
    "missing_report",
    "resolve_fill_value",
    "apply_fill",
    "NeighborImputer",
    "KNNImputeState",
    "StandardizedKNNImputer",
    "ImputationPlan",
    "ImputationPlanner",
    "IndicatorBuilder",
    "missingness_indicators",
    "ImputationConfig",
    "MissingValueImputer",
    "impute_missing_values",
]
