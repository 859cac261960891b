# missingkit/imputation/neighbors.py
"""
╔════════════════════════════════════════════════════════════════════════════╗
║  missingkit — Joint Nearest-Neighbour Imputation                          ║
║  ─────────────────────────────────────────────────────────────────────────  ║
║  ✓ Two-operation interface (fit / apply)                                 ║
║  ✓ Standardize → KNN impute (scikit-learn)                               ║
║  ✓ Fitted state reusable on new tables                                   ║
╚════════════════════════════════════════════════════════════════════════════╝

Any object with ``fit(table) -> (table, state)`` and
``apply(state, table) -> table`` can stand in for the default
``StandardizedKNNImputer``; the planner only talks to that interface.

NOTE: the default imputer returns numeric columns centered and scaled. The
original scale is not restored.

Dependencies:
    • scikit-learn
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol, Tuple, runtime_checkable

import numpy as np
import pandas as pd
from loguru import logger
from sklearn.impute import KNNImputer
from sklearn.preprocessing import StandardScaler

from missingkit.config.settings import settings
from missingkit.core.exceptions import (
    ConfigurationError,
    NeighborImputerError,
    PlanMismatchError,
    exception_context,
)
from missingkit.imputation.columns import ColumnKind, detect_column_kind

__all__ = ["NeighborImputer", "KNNImputeState", "StandardizedKNNImputer"]


@runtime_checkable
class NeighborImputer(Protocol):
    """Joint imputer contract used by knn mode."""

    def fit(self, table: pd.DataFrame) -> Tuple[pd.DataFrame, Any]:
        """Impute ``table`` and return it with the fitted state."""
        ...

    def apply(self, state: Any, table: pd.DataFrame) -> pd.DataFrame:
        """Impute ``table`` with a state returned by ``fit``."""
        ...


@dataclass
class KNNImputeState:
    """Fitted scaler + neighbour model and the columns they cover."""

    columns: List[Any] = field(default_factory=list)
    scaler: Optional[StandardScaler] = None
    imputer: Optional[KNNImputer] = None
    n_neighbors: int = 5


class StandardizedKNNImputer:
    """
    🤝 **Standardize + KNN Imputer**

    Centers and scales every numeric (non-boolean) column with
    ``StandardScaler``, then fills missing cells from the ``n_neighbors``
    nearest rows (``KNNImputer``, nan-euclidean distance). Other columns are
    returned untouched, including their missing values.

    Usage:
```python
        knn = StandardizedKNNImputer(n_neighbors=5)
        train_imputed, state = knn.fit(train_df)
        test_imputed = knn.apply(state, test_df)
```
    """

    def __init__(self, n_neighbors: Optional[int] = None):
        self.n_neighbors = settings.KNN_NEIGHBORS if n_neighbors is None else int(n_neighbors)
        if self.n_neighbors < 1:
            raise ConfigurationError(f"n_neighbors must be >= 1, got {self.n_neighbors}")

    def __repr__(self) -> str:
        return f"StandardizedKNNImputer(n_neighbors={self.n_neighbors})"

    @staticmethod
    def numeric_columns(table: pd.DataFrame) -> List[Any]:
        return [
            col for col in table.columns
            if detect_column_kind(table[col]) is ColumnKind.NUMERIC
        ]

    def fit(self, table: pd.DataFrame) -> Tuple[pd.DataFrame, KNNImputeState]:
        columns = self.numeric_columns(table)
        state = KNNImputeState(columns=columns, n_neighbors=self.n_neighbors)

        if not columns:
            logger.debug("No numeric columns for KNN imputation")
            return table.copy(), state

        with exception_context(NeighborImputerError, "KNN imputer fit failed",
                               details={"columns": columns}):
            values = self._as_matrix(table, columns)

            state.scaler = StandardScaler()
            state.imputer = KNNImputer(
                n_neighbors=self.n_neighbors,
                keep_empty_features=True
            )

            scaled = state.scaler.fit_transform(values)
            imputed = state.imputer.fit_transform(scaled)

        logger.debug(f"KNN imputer fitted on {len(columns)} columns, k={self.n_neighbors}")
        return self._replace(table, columns, imputed), state

    def apply(self, state: KNNImputeState, table: pd.DataFrame) -> pd.DataFrame:
        if not isinstance(state, KNNImputeState):
            raise NeighborImputerError(
                "Unrecognised neighbour imputer state",
                details={"type": type(state).__name__}
            )

        absent = [col for col in state.columns if col not in table.columns]
        if absent:
            raise PlanMismatchError(
                "Table is missing columns the KNN imputer was fitted on",
                details={"missing_columns": absent}
            )

        if not state.columns:
            return table.copy()

        with exception_context(NeighborImputerError, "KNN imputer apply failed",
                               details={"columns": state.columns}):
            values = self._as_matrix(table, state.columns)
            imputed = state.imputer.transform(state.scaler.transform(values))

        return self._replace(table, state.columns, imputed)

    # ───────────────────────────────────────────────────────────────────
    # Internals
    # ───────────────────────────────────────────────────────────────────

    @staticmethod
    def _as_matrix(table: pd.DataFrame, columns: List[Any]) -> np.ndarray:
        return table[columns].to_numpy(dtype="float64", na_value=np.nan)

    @staticmethod
    def _replace(table: pd.DataFrame, columns: List[Any], values: np.ndarray) -> pd.DataFrame:
        out = table.copy()
        for i, col in enumerate(columns):
            out[col] = values[:, i]
        return out
