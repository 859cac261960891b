# missingkit/imputation/plan.py
"""
The imputation plan: the one artifact meant to outlive a single call.

A plan built on a training table replays the same imputation on a new
table with the same schema, without recomputing anything.

Usage:
```python
    result = impute_missing_values(train_df)
    plan = result.data["plan"]
    plan.save("artifacts/imputation_plan.pkl")

    plan = ImputationPlan.load("artifacts/imputation_plan.pkl")
    test_imputed = plan.apply(test_df)
```
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import pandas as pd

from missingkit.config.constants import MODE_KNN, MODE_STANDARD
from missingkit.core.exceptions import ConfigurationError, PlanMismatchError
from missingkit.core.utils import load_pickle, save_pickle
from missingkit.imputation.fill import apply_fill

__all__ = ["ImputationPlan"]


@dataclass(frozen=True)
class ImputationPlan:
    """
    📦 **Imputation Plan**

    Attributes:
        mode: ``standard`` or ``knn``
        fill_values: column → fill value (standard mode)
        neighbor_state: fitted state from the neighbour imputer (knn mode)
        neighbor_imputer: the imputer able to apply ``neighbor_state``
        columns: columns of the table the plan was built from
    """

    mode: str
    fill_values: Mapping[Any, Any] = field(default_factory=dict)
    neighbor_state: Optional[Any] = None
    neighbor_imputer: Optional[Any] = None
    columns: Tuple[Any, ...] = ()

    def __post_init__(self):
        if self.mode not in (MODE_STANDARD, MODE_KNN):
            raise ConfigurationError(
                f"Unknown plan mode '{self.mode}'",
                details={"allowed": [MODE_STANDARD, MODE_KNN]}
            )
        if self.mode == MODE_KNN and self.neighbor_imputer is None:
            raise ConfigurationError("A knn plan needs the neighbour imputer that fitted it")

        # Read-only view over a private copy
        object.__setattr__(self, "fill_values", MappingProxyType(dict(self.fill_values)))
        object.__setattr__(self, "columns", tuple(self.columns))

    def __reduce__(self):
        # mappingproxy does not pickle; rebuild from plain values
        return (
            self.__class__,
            (self.mode, dict(self.fill_values), self.neighbor_state,
             self.neighbor_imputer, self.columns)
        )

    # ───────────────────────────────────────────────────────────────────
    # Replay
    # ───────────────────────────────────────────────────────────────────

    def apply(self, data: pd.DataFrame) -> pd.DataFrame:
        """
        Impute ``data`` with this plan and return a new DataFrame.

        Standard plans fill every planned column that is present and has
        missing values; planned columns absent from ``data`` are ignored.
        Knn plans delegate to the neighbour imputer, which requires every
        fitted column to be present.

        Raises:
            PlanMismatchError: knn plan applied to a table missing fitted columns
        """
        if self.mode == MODE_KNN:
            return self.neighbor_imputer.apply(self.neighbor_state, data)

        out = data.copy()
        for col, value in self.fill_values.items():
            if col in out.columns and value is not None:
                out[col] = apply_fill(out[col], value)
        return out

    def check_compatible(self, data: pd.DataFrame) -> None:
        """
        Raise PlanMismatchError when ``data`` lacks columns the plan covers.

        Only knn plans are strict; a standard plan silently skips absent
        columns.
        """
        if self.mode != MODE_KNN:
            return

        absent = [col for col in self.columns if col not in data.columns]
        if absent:
            raise PlanMismatchError(
                "Table does not match the imputation plan",
                details={"missing_columns": absent, "plan_columns": list(self.columns)}
            )

    # ───────────────────────────────────────────────────────────────────
    # Persistence
    # ───────────────────────────────────────────────────────────────────

    def save(self, filepath: Union[str, Path]) -> None:
        save_pickle(self, filepath)

    @classmethod
    def load(cls, filepath: Union[str, Path]) -> "ImputationPlan":
        plan = load_pickle(filepath)
        if not isinstance(plan, cls):
            raise PlanMismatchError(
                "File does not contain an imputation plan",
                details={"path": str(filepath), "type": type(plan).__name__}
            )
        return plan

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode,
            "fill_values": dict(self.fill_values),
            "neighbor_imputer": repr(self.neighbor_imputer) if self.neighbor_imputer else None,
            "columns": list(self.columns),
        }
