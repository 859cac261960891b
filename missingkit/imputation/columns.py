# missingkit/imputation/columns.py
"""
Column profiling: kind detection and per-column missingness.

Profiles are derived fresh for every call from the table and the skip list;
nothing here is cached.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List

import pandas as pd
from pandas.api import types as ptypes

from missingkit.core.utils import is_boolean_series, is_categorical_series


class ColumnKind(str, Enum):
    """How a column's fill value is resolved."""

    NUMERIC = "numeric"
    BOOLEAN = "boolean"
    CATEGORICAL = "categorical"
    UNSUPPORTED = "unsupported"

    @property
    def imputable(self) -> bool:
        return self is not ColumnKind.UNSUPPORTED


def detect_column_kind(series: pd.Series) -> ColumnKind:
    """
    Map a column dtype onto a ColumnKind.

    Categorical dtype wins over everything else, so a category column of
    numbers is still mode-imputed.
    """
    if isinstance(series.dtype, pd.CategoricalDtype):
        return ColumnKind.CATEGORICAL
    if is_boolean_series(series):
        return ColumnKind.BOOLEAN
    if ptypes.is_numeric_dtype(series.dtype) and not ptypes.is_complex_dtype(series.dtype):
        return ColumnKind.NUMERIC
    if is_categorical_series(series):
        return ColumnKind.CATEGORICAL
    return ColumnKind.UNSUPPORTED


@dataclass(frozen=True)
class ColumnSpec:
    """Per-column profile for a single call."""

    name: Any
    kind: ColumnKind
    n_missing: int
    n_rows: int
    excluded: bool = False

    @property
    def pct_missing(self) -> float:
        return self.n_missing / max(1, self.n_rows)

    @property
    def has_missing(self) -> bool:
        return not self.excluded and self.n_missing > 0

    @property
    def all_missing(self) -> bool:
        return not self.excluded and self.n_rows > 0 and self.n_missing == self.n_rows

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "n_missing": self.n_missing,
            "pct_missing": self.pct_missing,
            "excluded": self.excluded,
        }


def profile_columns(data: pd.DataFrame, skip_vars: Iterable[Any] = ()) -> List[ColumnSpec]:
    """
    Build one ColumnSpec per column, in table order.

    Skipped columns are never inspected: they report zero missing values and
    are flagged ``excluded``.
    """
    skip = set(skip_vars or ())
    n_rows = len(data)
    specs: List[ColumnSpec] = []

    for col in data.columns:
        series = data[col]
        if col in skip:
            specs.append(ColumnSpec(col, detect_column_kind(series), 0, n_rows, excluded=True))
            continue

        specs.append(ColumnSpec(col, detect_column_kind(series), int(series.isna().sum()), n_rows))

    return specs


def missing_columns(specs: Iterable[ColumnSpec]) -> List[Any]:
    """Names of non-excluded columns with at least one missing value."""
    return [spec.name for spec in specs if spec.has_missing]


def missing_report(specs: Iterable[ColumnSpec]) -> Dict[Any, Dict[str, float]]:
    """Column → {n_missing, pct_missing} for every inspected column."""
    return {
        spec.name: {"n_missing": spec.n_missing, "pct_missing": spec.pct_missing}
        for spec in specs
        if not spec.excluded
    }
