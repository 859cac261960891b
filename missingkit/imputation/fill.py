# missingkit/imputation/fill.py
"""
Fill-value resolution and application for standard imputation.

Each ColumnKind has its own rule:
    • CATEGORICAL → first mode (order of first appearance)
    • NUMERIC     → median, kept integral for integer columns when possible
    • BOOLEAN     → median cast back to bool (0.5 resolves to True)
    • UNSUPPORTED → no rule
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

import numpy as np
import pandas as pd
from pandas.api import types as ptypes

from missingkit.core.utils import is_integer_series
from missingkit.imputation import stats
from missingkit.imputation.columns import ColumnKind

__all__ = ["resolve_fill_value", "apply_fill", "FILL_RULES"]


def _categorical_fill(series: pd.Series) -> Optional[Any]:
    modes = stats.mode(series)
    return modes[0] if modes else None


def _numeric_fill(series: pd.Series) -> Optional[Any]:
    value = stats.median(series)
    if value is None:
        return None
    if is_integer_series(series) and float(value).is_integer():
        return int(value)
    return value


def _boolean_fill(series: pd.Series) -> Optional[Any]:
    value = stats.median(series)
    if value is None:
        return None
    return bool(value >= 0.5)


FILL_RULES: Dict[ColumnKind, Callable[[pd.Series], Optional[Any]]] = {
    ColumnKind.CATEGORICAL: _categorical_fill,
    ColumnKind.NUMERIC: _numeric_fill,
    ColumnKind.BOOLEAN: _boolean_fill,
}


def resolve_fill_value(series: pd.Series, kind: ColumnKind) -> Optional[Any]:
    """
    Compute the fill value for ``series``.

    Returns None when nothing is observed.

    Raises:
        KeyError: for kinds without a fill rule (``UNSUPPORTED``)
    """
    return FILL_RULES[kind](series)


def apply_fill(series: pd.Series, value: Any) -> pd.Series:
    """
    Return a copy of ``series`` with missing cells set to ``value``.

    Integer columns are promoted to float when ``value`` is not integral,
    and categorical columns gain ``value`` as a category if needed. The
    input is never modified.
    """
    mask = series.isna()
    out = series.copy()
    if not mask.any():
        return out

    if isinstance(out.dtype, pd.CategoricalDtype):
        if value not in out.cat.categories:
            out = out.cat.add_categories([value])
    elif is_integer_series(out) and not _is_integral(value):
        out = out.astype("Float64")
    elif ptypes.is_bool_dtype(out.dtype) and not isinstance(value, (bool, np.bool_)):
        out = out.astype("object")

    out[mask.to_numpy()] = value
    return out


def _is_integral(value: Any) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    if isinstance(value, (int, np.integer)):
        return True
    try:
        return float(value).is_integer()
    except (TypeError, ValueError):
        return False
