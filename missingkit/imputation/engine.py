# missingkit/imputation/engine.py
"""
╔════════════════════════════════════════════════════════════════════════════╗
║  missingkit — Missing Value Imputer                                       ║
║  ─────────────────────────────────────────────────────────────────────────  ║
║  ✓ Standard (median / mode) or KNN imputation                            ║
║  ✓ Missingness indicators from the original table                        ║
║  ✓ Constant / collinear indicator pruning                                ║
║  ✓ Reusable plan for new data                                            ║
║  ✓ Missingness report, imputation log & telemetry                        ║
╚════════════════════════════════════════════════════════════════════════════╝

Imputation Flow:
```
        ┌──────────────────────────────────────────┐
        │ Input DataFrame + ImputationConfig       │
        └────────────┬─────────────────────────────┘
                     │
        ┌────────────▼─────────────────────────────┐
        │ Profile columns (skip_vars excluded)     │
        │  • kind, n_missing per column            │
        └────────────┬─────────────────────────────┘
                     │
        ┌────────────▼─────────────────────────────┐
        │ ImputationPlanner                        │
        │  • standard: mode / median per column    │
        │  • knn: neighbour imputer (scaled!)      │
        └────────────┬─────────────────────────────┘
                     │
        ┌────────────▼─────────────────────────────┐
        │ IndicatorBuilder (original table,        │
        │ missing columns only)                    │
        └────────────┬─────────────────────────────┘
                     │
        ┌────────────▼─────────────────────────────┐
        │ imputed ⊕ indicators + plan + config     │
        └──────────────────────────────────────────┘
```

Usage:
```python
    from missingkit import impute_missing_values

    result = impute_missing_values(train_df, skip_vars=["target"])
    train_ready = result.data["data"]

    # Replay on new data with the same fill values
    test_result = impute_missing_values(
        test_df,
        skip_vars=["target"],
        values=result.data["impute_values"]
    )

    # KNN (numeric columns come back centered and scaled)
    result = impute_missing_values(train_df, type="knn", skip_vars=["target"])
```
"""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from missingkit.config.constants import IMPUTATION_MODES, MODE_KNN, MODE_STANDARD
from missingkit.config.logging_config import log_execution_time
from missingkit.config.settings import settings
from missingkit.core.base_step import BaseStep, StepResult
from missingkit.core.exceptions import ConfigurationError, DataValidationError
from missingkit.core.utils import duplicated_names, format_percentage
from missingkit.imputation.columns import (
    ColumnSpec,
    missing_columns,
    missing_report,
    profile_columns,
)
from missingkit.imputation.indicators import IndicatorBuilder
from missingkit.imputation.neighbors import NeighborImputer
from missingkit.imputation.plan import ImputationPlan
from missingkit.imputation.planner import ImputationPlanner

__all__ = ["ImputationConfig", "MissingValueImputer", "impute_missing_values"]


# ═══════════════════════════════════════════════════════════════════════════
# SECTION: Configuration
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class ImputationConfig:
    """
    🎯 **Imputation Configuration**

    Attributes:
        type: ``standard`` (median/mode) or ``knn``. NOTE: knn returns numeric
            columns centered and scaled.
        add_indicators: Append missingness indicators
        prefix: Prepended to each indicator column name
        skip_vars: Columns excluded from inspection and imputation
        all_vars: Compute fill values for every non-skipped column, for
            reuse on future datasets
        remove_constant: Drop constant indicators
        remove_collinear: Drop indicators duplicating an earlier one
        values: Column → fill value to use instead of computing one
        verbose: Log progress at INFO instead of DEBUG
    """

    type: str = field(default_factory=lambda: settings.DEFAULT_IMPUTATION_TYPE)
    add_indicators: bool = True
    prefix: str = field(default_factory=lambda: settings.DEFAULT_INDICATOR_PREFIX)
    skip_vars: Tuple[Any, ...] = ()
    all_vars: bool = False
    remove_constant: bool = True
    remove_collinear: bool = True
    values: Dict[Any, Any] = field(default_factory=dict)
    verbose: bool = False

    def __post_init__(self):
        """Validate configuration."""
        if self.type not in IMPUTATION_MODES:
            raise ConfigurationError(
                f"Unknown imputation type '{self.type}'",
                details={"allowed": list(IMPUTATION_MODES)}
            )

        if isinstance(self.skip_vars, str):
            self.skip_vars = (self.skip_vars,)
        self.skip_vars = tuple(self.skip_vars or ())

        if not isinstance(self.values, Mapping):
            raise ConfigurationError(
                "'values' must be a mapping of column name to fill value",
                details={"type": type(self.values).__name__}
            )
        self.values = dict(self.values)

        if self.add_indicators and not isinstance(self.prefix, str):
            raise ConfigurationError("'prefix' must be a string")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        out = asdict(self)
        out["skip_vars"] = list(self.skip_vars)
        return out


# ═══════════════════════════════════════════════════════════════════════════
# SECTION: Missing Value Imputer (Main Class)
# ═══════════════════════════════════════════════════════════════════════════

class MissingValueImputer(BaseStep):
    """
    🚀 **Missing Value Imputer**

    Runs the planner and the indicator builder and assembles the result.

    ``execute`` returns a StepResult whose ``data`` holds:
        • ``data``: imputed table with indicators appended
        • ``imputed``: imputed table without indicators
        • ``indicators``: indicator table (possibly no columns)
        • ``plan``: ImputationPlan for replay
        • ``impute_values``: fill values (standard mode, else None)
        • ``impute_info``: fitted neighbour state (knn mode, else None)
        • ``columns``: ColumnSpec dicts for every column
        • ``missing_columns``: columns that had missing data
        • ``imputation_log``: human-readable summary lines
        • ``config``: the configuration used
    """

    def __init__(
        self,
        config: Optional[ImputationConfig] = None,
        neighbor_imputer: Optional[NeighborImputer] = None
    ):
        super().__init__(
            name="MissingValueImputer",
            description="Imputation with missingness indicators"
        )
        self.config = config or ImputationConfig()
        self.neighbor_imputer = neighbor_imputer
        self._level = "INFO" if self.config.verbose else "DEBUG"

    # ───────────────────────────────────────────────────────────────────
    # Validation
    # ───────────────────────────────────────────────────────────────────

    def validate_input(self, **kwargs) -> None:
        data = kwargs.get("data")
        if not isinstance(data, pd.DataFrame):
            raise DataValidationError(
                "'data' must be a pandas DataFrame",
                details={"type": type(data).__name__}
            )

        dupes = duplicated_names(data.columns)
        if dupes:
            raise DataValidationError(
                "Column names must be unique",
                details={"duplicated": dupes}
            )

        plan = kwargs.get("plan")
        if plan is not None:
            if not isinstance(plan, ImputationPlan):
                raise ConfigurationError(
                    "'plan' must be an ImputationPlan",
                    details={"type": type(plan).__name__}
                )
            if plan.mode != self.config.type:
                raise ConfigurationError(
                    f"Plan mode '{plan.mode}' does not match configured type '{self.config.type}'"
                )

    # ───────────────────────────────────────────────────────────────────
    # Main Execution
    # ───────────────────────────────────────────────────────────────────

    def execute(
        self,
        data: pd.DataFrame,
        plan: Optional[ImputationPlan] = None,
        **kwargs: Any
    ) -> StepResult:
        """
        🎯 **Execute Imputation**

        Args:
            data: Input DataFrame
            plan: Optional plan from a previous call, replayed instead of
                fitting anew

        Returns:
            StepResult
        """
        cfg = self.config
        result = StepResult(step_name=self.name)
        telemetry: Dict[str, Any] = {"timing_s": {}, "counts": {}}

        # ═══════════════════════════════════════════════════════════
        # STAGE 1: Column Profiling
        # ═══════════════════════════════════════════════════════════

        t = time.perf_counter()
        specs = profile_columns(data, cfg.skip_vars)
        any_nas = missing_columns(specs)
        telemetry["timing_s"]["profile"] = round(time.perf_counter() - t, 4)

        self.logger.log(self._level, f"Found {len(any_nas)} variables with NAs")
        self._log_top_missing(specs)

        # ═══════════════════════════════════════════════════════════
        # STAGE 2: Imputation
        # ═══════════════════════════════════════════════════════════

        t = time.perf_counter()
        planner = ImputationPlanner(neighbor_imputer=self.neighbor_imputer, verbose=cfg.verbose)
        planned = planner.run(
            data=data,
            specs=specs,
            mode=cfg.type,
            all_vars=cfg.all_vars,
            values=cfg.values,
            plan=plan
        )
        result.merge(planned)
        imputed: pd.DataFrame = planned.data["data"]
        new_plan: ImputationPlan = planned.data["plan"]
        telemetry["timing_s"]["impute"] = round(time.perf_counter() - t, 4)

        # ═══════════════════════════════════════════════════════════
        # STAGE 3: Missingness Indicators
        # ═══════════════════════════════════════════════════════════

        indicators = pd.DataFrame(index=data.index)
        removed_indicators: List[str] = []

        if cfg.add_indicators:
            self.logger.log(self._level, "Generating missingness indicators")
            t = time.perf_counter()
            builder = IndicatorBuilder(
                prefix=cfg.prefix,
                remove_constant=cfg.remove_constant,
                remove_collinear=cfg.remove_collinear,
                verbose=cfg.verbose
            )
            # Indicators come from the original table and ignore all_vars
            built = builder.run(data=data[any_nas])
            result.merge(built)
            indicators = built.data["indicators"]
            removed_indicators = (
                built.data["removed_constant"] + list(built.data["removed_collinear"])
            )
            telemetry["timing_s"]["indicators"] = round(time.perf_counter() - t, 4)

        clashes = [col for col in indicators.columns if col in imputed.columns]
        if clashes:
            raise DataValidationError(
                "Indicator names collide with existing columns",
                details={"columns": clashes, "prefix": cfg.prefix}
            )

        if len(indicators.columns):
            combined = pd.concat([imputed, indicators], axis=1)
        else:
            combined = imputed.copy()

        # ═══════════════════════════════════════════════════════════
        # STAGE 4: Assemble Result
        # ═══════════════════════════════════════════════════════════

        imputation_log = self._build_imputation_log(
            any_nas=any_nas,
            imputed_cols=planned.data["imputed_columns"],
            unimputable=planned.data["unimputable"],
            all_missing=planned.data["all_missing"],
            indicators=list(indicators.columns),
            removed_indicators=removed_indicators
        )

        telemetry["counts"] = {
            "missing_columns": len(any_nas),
            "imputed_columns": len(planned.data["imputed_columns"]),
            "fill_values": len(new_plan.fill_values),
            "indicators": len(indicators.columns),
            "indicators_removed": len(removed_indicators)
        }

        result.add_data(
            data=combined,
            imputed=imputed,
            indicators=indicators,
            plan=new_plan,
            impute_values=dict(new_plan.fill_values) if cfg.type == MODE_STANDARD else None,
            impute_info=new_plan.neighbor_state if cfg.type == MODE_KNN else None,
            columns=[spec.to_dict() for spec in specs],
            missing_columns=any_nas,
            missing_report=missing_report(specs),
            imputation_log=imputation_log,
            config=cfg.to_dict()
        )
        result.add_metadata(telemetry=telemetry, shapes={
            "original": tuple(data.shape),
            "final": tuple(combined.shape)
        })

        self.logger.log(
            self._level,
            f"✓ Imputation complete | type={cfg.type} | "
            f"missing={len(any_nas)} | indicators={len(indicators.columns)}"
        )
        return result

    # ───────────────────────────────────────────────────────────────────
    # Reporting
    # ───────────────────────────────────────────────────────────────────

    def _log_top_missing(self, specs: Iterable[ColumnSpec]) -> None:
        """Log top columns by missing percentage."""
        ranked = sorted(
            (spec for spec in specs if spec.has_missing),
            key=lambda spec: spec.pct_missing,
            reverse=True
        )[:settings.REPORT_TOP_N]

        if ranked:
            parts = [f"{spec.name}: {format_percentage(spec.pct_missing)}" for spec in ranked]
            self.logger.log(self._level, f"Top missing: {', '.join(parts)}")

    def _build_imputation_log(
        self,
        any_nas: List[Any],
        imputed_cols: List[Any],
        unimputable: List[Any],
        all_missing: List[Any],
        indicators: List[str],
        removed_indicators: List[str]
    ) -> List[str]:
        """Build human-readable imputation log."""
        log: List[str] = []

        if any_nas:
            log.append(f"Found {len(any_nas)} columns with missing values")

        if imputed_cols:
            log.append(f"Imputed {len(imputed_cols)} columns ({self.config.type})")

        if unimputable:
            log.append(f"Skipped {len(unimputable)} columns with unsupported types")

        if all_missing:
            log.append(f"{len(all_missing)} columns are entirely missing")

        if indicators:
            log.append(f"Added {len(indicators)} missingness indicators")

        if removed_indicators:
            log.append(f"Removed {len(removed_indicators)} constant or collinear indicators")

        if not log:
            log.append("No missing data operations required")

        return log


# ═══════════════════════════════════════════════════════════════════════════
# SECTION: Convenience Functions
# ═══════════════════════════════════════════════════════════════════════════

@log_execution_time
def impute_missing_values(
    data: pd.DataFrame,
    type: Optional[str] = None,
    add_indicators: bool = True,
    prefix: Optional[str] = None,
    skip_vars: Optional[Iterable[Any]] = None,
    all_vars: bool = False,
    remove_constant: bool = True,
    remove_collinear: bool = True,
    values: Optional[Mapping[Any, Any]] = None,
    verbose: bool = False,
    *,
    plan: Optional[ImputationPlan] = None,
    neighbor_imputer: Optional[NeighborImputer] = None
) -> StepResult:
    """
    🚀 **Convenience Function: Impute Missing Values**

    Impute with median (numeric/boolean) or mode (categorical), or with KNN,
    and append missingness indicators.

    Args:
        data: Input DataFrame
        type: ``standard`` or ``knn`` (defaults to settings)
        add_indicators: Append missingness indicators
        prefix: Indicator name prefix (defaults to settings)
        skip_vars: Columns to exclude from imputation
        all_vars: Compute fill values for every column, for future datasets
        remove_constant: Remove constant indicators
        remove_collinear: Remove duplicated indicators
        values: Fill values from another dataset
        verbose: Log progress at INFO level
        plan: Plan from a previous call to replay
        neighbor_imputer: Replacement for the default KNN imputer

    Returns:
        StepResult (see ``MissingValueImputer``)

    Example:
```python
        result = impute_missing_values(df, skip_vars="diabetes")
        assert not result.data["data"].drop(columns="diabetes").isna().any().any()
```
    """
    config = ImputationConfig(
        type=type or settings.DEFAULT_IMPUTATION_TYPE,
        add_indicators=add_indicators,
        prefix=settings.DEFAULT_INDICATOR_PREFIX if prefix is None else prefix,
        skip_vars=tuple([skip_vars] if isinstance(skip_vars, str) else (skip_vars or ())),
        all_vars=all_vars,
        remove_constant=remove_constant,
        remove_collinear=remove_collinear,
        values=dict(values or {}),
        verbose=verbose
    )
    imputer = MissingValueImputer(config, neighbor_imputer=neighbor_imputer)
    return imputer.run(data=data, plan=plan)
