# missingkit/imputation/stats.py
"""
Descriptive statistics used to resolve fill values.

``mode`` keeps every value tied for the highest count, ordered by first
appearance, so callers can pick ``mode(s)[0]`` deterministically.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, List, Optional

import pandas as pd


def mode(series: pd.Series) -> List[Any]:
    """
    All most-frequent non-missing values, in order of first appearance.

    >>> mode(pd.Series(["a", "a", "b", "b", None]))
    ['a', 'b']
    """
    observed = series.dropna()
    if observed.empty:
        return []

    counts = Counter(observed.tolist())
    top = max(counts.values())
    return [value for value, count in counts.items() if count == top]


def median(series: pd.Series) -> Optional[float]:
    """
    Median of non-missing values as a float, or None when nothing is observed.

    Booleans count as 0/1.
    """
    observed = series.dropna()
    if observed.empty:
        return None

    return float(observed.astype("float64").median())
