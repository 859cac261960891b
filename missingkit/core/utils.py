"""
missingkit - Utility Functions
Common utility functions used across the package
"""

from __future__ import annotations

import pickle
from pathlib import Path
from typing import Any, Iterable, List, Union

import numpy as np
import pandas as pd
from loguru import logger
from pandas.api import types as ptypes


# ---------------------------------------------------------------------
# IO helpers
# ---------------------------------------------------------------------
def save_pickle(obj: Any, filepath: Union[str, Path]) -> None:
    """Save object to pickle file."""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "wb") as f:
        pickle.dump(obj, f)
    logger.info(f"Saved object to {filepath}")


def load_pickle(filepath: Union[str, Path]) -> Any:
    """Load object from pickle file."""
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"File not found: {filepath}")
    with open(filepath, "rb") as f:
        obj = pickle.load(f)
    logger.info(f"Loaded object from {filepath}")
    return obj


# ---------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------
def format_percentage(value: float, decimals: int = 1) -> str:
    """Format a fraction (0-1) as a percentage string."""
    return f"{float(value) * 100.0:.{decimals}f}%"


def format_number(value: Union[int, float], decimals: int = 2) -> str:
    """Format number with thousands separator."""
    if isinstance(value, int) or float(value).is_integer():
        return f"{int(value):,}"
    return f"{float(value):,.{decimals}f}"


# ---------------------------------------------------------------------
# Dtype checks
# ---------------------------------------------------------------------
def is_boolean_series(series: pd.Series) -> bool:
    """
    True for bool / nullable boolean dtypes, and for object columns whose
    observed values are all Python or numpy bools.
    """
    if ptypes.is_bool_dtype(series.dtype):
        return True
    if ptypes.is_object_dtype(series.dtype):
        observed = series.dropna()
        return len(observed) > 0 and all(isinstance(v, (bool, np.bool_)) for v in observed)
    return False


def is_categorical_series(series: pd.Series) -> bool:
    """Category, object and string dtypes (booleans excluded)."""
    dtype = series.dtype
    if isinstance(dtype, pd.CategoricalDtype):
        return True
    if is_boolean_series(series):
        return False
    return ptypes.is_object_dtype(dtype) or ptypes.is_string_dtype(dtype)


def is_integer_series(series: pd.Series) -> bool:
    return ptypes.is_integer_dtype(series.dtype) and not ptypes.is_bool_dtype(series.dtype)


def duplicated_names(names: Iterable[Any]) -> List[Any]:
    """Names that occur more than once, in order of first repetition."""
    seen, dupes = set(), []
    for name in names:
        if name in seen and name not in dupes:
            dupes.append(name)
        seen.add(name)
    return dupes