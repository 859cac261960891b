# missingkit/imputation/planner.py
"""
╔════════════════════════════════════════════════════════════════════════════╗
║  missingkit — Imputation Planner                                          ║
║  ─────────────────────────────────────────────────────────────────────────  ║
║  ✓ Standard mode: per-column mode / median fill values                   ║
║  ✓ Knn mode: delegation to a joint neighbour imputer                     ║
║  ✓ Caller-supplied fill values used verbatim                             ║
║  ✓ Reusable ImputationPlan                                               ║
╚════════════════════════════════════════════════════════════════════════════╝

Standard Flow:
```
    candidates = non-skipped columns with missing values
                 (every non-skipped column when all_vars)
        │
        ├─ values[col] supplied?   → use verbatim
        ├─ CATEGORICAL             → first mode
        ├─ NUMERIC / BOOLEAN       → median
        └─ UNSUPPORTED             → warn, leave missing
        │
        ├─ all missing  → record value (if any), note, do not fill
        ├─ none missing → record value only (all_vars)
        └─ otherwise    → fill every missing cell
```
"""

from __future__ import annotations

import warnings
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from missingkit.config.constants import IMPUTATION_MODES, MODE_KNN, MODE_STANDARD
from missingkit.core.base_step import BaseStep, StepResult
from missingkit.core.exceptions import (
    AllMissingColumnWarning,
    ConfigurationError,
    DataValidationError,
    NeighborImputerError,
    UnimputableColumnWarning,
    exception_context,
)
from missingkit.core.utils import format_number
from missingkit.imputation.columns import ColumnSpec
from missingkit.imputation.fill import apply_fill, resolve_fill_value
from missingkit.imputation.neighbors import NeighborImputer, StandardizedKNNImputer
from missingkit.imputation.plan import ImputationPlan

__all__ = ["ImputationPlanner"]


class ImputationPlanner(BaseStep):
    """
    🧮 **Imputation Planner**

    Fills missing values and returns the plan that reproduces the fill.

    ``execute`` returns a StepResult whose ``data`` holds:
        • ``data``: the imputed table
        • ``plan``: ImputationPlan
        • ``imputed_columns``: columns whose missing cells were filled
        • ``unimputable``: columns skipped because of their kind
        • ``all_missing``: columns with no observed value
    """

    def __init__(self, neighbor_imputer: Optional[NeighborImputer] = None, verbose: bool = False):
        super().__init__(
            name="ImputationPlanner",
            description="Per-column or joint neighbour imputation"
        )
        self.neighbor_imputer = neighbor_imputer or StandardizedKNNImputer()
        self._level = "INFO" if verbose else "DEBUG"

    # ───────────────────────────────────────────────────────────────────
    # Validation
    # ───────────────────────────────────────────────────────────────────

    def validate_input(self, **kwargs) -> None:
        mode = kwargs.get("mode", MODE_STANDARD)
        if mode not in IMPUTATION_MODES:
            raise ConfigurationError(
                f"Unknown imputation type '{mode}'",
                details={"allowed": list(IMPUTATION_MODES)}
            )

        data = kwargs.get("data")
        if not isinstance(data, pd.DataFrame):
            raise DataValidationError(
                "'data' must be a pandas DataFrame",
                details={"type": type(data).__name__}
            )

        specs = kwargs.get("specs") or []
        if [spec.name for spec in specs] != list(data.columns):
            raise DataValidationError("Column specs do not match the table columns")

    # ───────────────────────────────────────────────────────────────────
    # Main Execution
    # ───────────────────────────────────────────────────────────────────

    def execute(
        self,
        data: pd.DataFrame,
        specs: List[ColumnSpec],
        mode: str = MODE_STANDARD,
        *,
        all_vars: bool = False,
        values: Optional[Mapping[Any, Any]] = None,
        plan: Optional[ImputationPlan] = None,
        **kwargs: Any
    ) -> StepResult:
        """
        Impute ``data``.

        Args:
            data: Original table
            specs: ColumnSpecs for ``data`` (from ``profile_columns``)
            mode: ``standard`` or ``knn``
            all_vars: Compute fill values for every non-skipped column
            values: Caller-supplied fill values, used verbatim
            plan: Previously built plan to replay instead of fitting

        Returns:
            StepResult
        """
        if mode == MODE_KNN:
            return self._execute_knn(data, specs, plan)

        if plan is not None:
            # Plan values are the base; explicitly supplied values win
            values = {**plan.fill_values, **dict(values or {})}

        return self._execute_standard(data, specs, all_vars=all_vars, values=values or {})

    # ───────────────────────────────────────────────────────────────────
    # Standard Mode
    # ───────────────────────────────────────────────────────────────────

    def _execute_standard(
        self,
        data: pd.DataFrame,
        specs: List[ColumnSpec],
        *,
        all_vars: bool,
        values: Mapping[Any, Any]
    ) -> StepResult:
        result = StepResult(step_name=self.name)
        self.logger.log(self._level, "Running standard imputation")

        if all_vars:
            candidates = [spec for spec in specs if not spec.excluded]
        else:
            candidates = [spec for spec in specs if spec.has_missing]

        out = data.copy()
        fill_values: Dict[Any, Any] = {}
        imputed: List[Any] = []
        unimputable: List[Any] = []
        all_missing: List[Any] = []

        for spec in candidates:
            col = spec.name
            self.logger.log(
                self._level,
                f"Imputing {col} ({spec.kind.value}) with "
                f"{format_number(spec.n_missing)} NAs"
            )

            if col in values:
                value = values[col]
                self.logger.log(self._level, f"{col}: pre-filled value {value!r}")
            elif spec.kind.imputable:
                value = resolve_fill_value(data[col], spec.kind)
            else:
                msg = (f"{col} should be numeric, boolean or categorical, "
                       f"but its dtype is {data[col].dtype}")
                warnings.warn(msg, UnimputableColumnWarning, stacklevel=2)
                self.logger.warning(msg)
                result.add_warning(msg)
                unimputable.append(col)
                continue

            if value is not None:
                fill_values[col] = value

            self.logger.log(self._level, f"{col}: impute value {value!r}")

            if spec.all_missing:
                msg = f"Cannot impute {col} because all values are missing"
                warnings.warn(msg, AllMissingColumnWarning, stacklevel=2)
                self.logger.log(self._level, msg)
                result.add_note(msg)
                all_missing.append(col)
                continue

            if spec.n_missing == 0 or value is None:
                continue

            out[col] = apply_fill(data[col], value)
            imputed.append(col)

        plan = ImputationPlan(
            mode=MODE_STANDARD,
            fill_values=fill_values,
            columns=tuple(data.columns)
        )

        result.add_data(
            data=out,
            plan=plan,
            imputed_columns=imputed,
            unimputable=unimputable,
            all_missing=all_missing
        )
        return result

    # ───────────────────────────────────────────────────────────────────
    # Knn Mode
    # ───────────────────────────────────────────────────────────────────

    def _execute_knn(
        self,
        data: pd.DataFrame,
        specs: List[ColumnSpec],
        plan: Optional[ImputationPlan]
    ) -> StepResult:
        result = StepResult(step_name=self.name)

        # Skipped columns never reach the neighbour imputer
        inspected = [spec.name for spec in specs if not spec.excluded]
        subset = data[inspected]

        if plan is not None:
            if plan.mode != MODE_KNN:
                raise ConfigurationError(
                    f"Cannot replay a '{plan.mode}' plan in knn mode"
                )
            plan.check_compatible(subset)
            self.logger.log(self._level, "Applying fitted KNN imputation")
            with exception_context(NeighborImputerError, "Neighbour imputer apply failed"):
                imputed_subset = plan.neighbor_imputer.apply(
                    plan.neighbor_state, subset[list(plan.columns)]
                )
        else:
            self.logger.log(self._level, "Running KNN imputation")
            with exception_context(NeighborImputerError, "Neighbour imputer fit failed"):
                imputed_subset, state = self.neighbor_imputer.fit(subset)
            plan = ImputationPlan(
                mode=MODE_KNN,
                neighbor_state=state,
                neighbor_imputer=self.neighbor_imputer,
                columns=tuple(inspected)
            )

        if not isinstance(imputed_subset, pd.DataFrame):
            raise NeighborImputerError(
                "Neighbour imputer did not return a DataFrame",
                details={"type": type(imputed_subset).__name__}
            )

        if len(imputed_subset) != len(data):
            raise NeighborImputerError(
                "Neighbour imputer changed the number of rows",
                details={"expected": len(data), "got": len(imputed_subset)}
            )

        out = data.copy()
        for col in imputed_subset.columns:
            out[col] = imputed_subset[col].to_numpy()

        msg = "KNN imputation centers and scales numeric columns; original scale is not preserved"
        self.logger.warning(msg)
        result.add_note(msg)

        still_missing = [
            col for col in inspected if out[col].isna().any() and data[col].isna().any()
        ]
        if still_missing:
            result.add_note(
                f"Neighbour imputer left missing values in: {', '.join(map(str, still_missing))}"
            )

        result.add_data(
            data=out,
            plan=plan,
            imputed_columns=[
                col for col in inspected
                if data[col].isna().any() and not out[col].isna().any()
            ],
            unimputable=[],
            all_missing=[spec.name for spec in specs if spec.all_missing]
        )
        return result
