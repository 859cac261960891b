# missingkit/imputation/indicators.py
"""
Missingness indicators.

One binary column per input column (1 = missing), optionally pruned of
constant columns and of exact duplicates of an earlier indicator.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pandas as pd

from missingkit.config.constants import INDICATOR_DTYPE
from missingkit.config.settings import settings
from missingkit.core.base_step import BaseStep, StepResult
from missingkit.core.exceptions import DataValidationError
from missingkit.core.utils import duplicated_names

__all__ = ["IndicatorBuilder", "missingness_indicators"]


class IndicatorBuilder(BaseStep):
    """
    🏷️ **Missingness Indicator Builder**

    ``execute`` returns a StepResult whose ``data`` holds:
        • ``indicators``: DataFrame of int8 indicator columns
        • ``removed_constant``: indicator names dropped as constant
        • ``removed_collinear``: indicator name → name of the retained
          indicator it duplicated
    """

    def __init__(
        self,
        prefix: Optional[str] = None,
        remove_constant: bool = True,
        remove_collinear: bool = True,
        verbose: bool = False
    ):
        super().__init__(name="IndicatorBuilder", description="Binary missingness indicators")
        self.prefix = settings.DEFAULT_INDICATOR_PREFIX if prefix is None else prefix
        self.remove_constant = remove_constant
        self.remove_collinear = remove_collinear
        self._level = "INFO" if verbose else "DEBUG"

    def validate_input(self, **kwargs) -> None:
        if not isinstance(kwargs.get("data"), pd.DataFrame):
            raise DataValidationError(
                "'data' must be a pandas DataFrame",
                details={"type": type(kwargs.get("data")).__name__}
            )

    def execute(self, data: pd.DataFrame, **kwargs: Any) -> StepResult:
        """
        Build indicators for every column of ``data``.

        Args:
            data: Original (pre-imputation) columns that had missing values
        """
        result = StepResult(step_name=self.name)

        names = [f"{self.prefix}{col}" for col in data.columns]
        clashes = duplicated_names(names)
        if clashes:
            raise DataValidationError(
                "Distinct columns map to the same indicator name",
                details={"indicators": clashes, "prefix": self.prefix}
            )

        indicators = pd.DataFrame(
            {name: data[col].isna().astype(INDICATOR_DTYPE) for name, col in zip(names, data.columns)},
            index=data.index
        )

        removed_constant: List[str] = []
        if self.remove_constant and len(indicators.columns):
            constant = indicators.nunique(dropna=False) <= 1
            removed_constant = list(indicators.columns[constant.to_numpy()])
            indicators = indicators.loc[:, ~constant.to_numpy()]
            if removed_constant:
                self.logger.log(self._level, f"Removed constant indicators: {removed_constant}")

        removed_collinear: Dict[str, str] = {}
        if self.remove_collinear and len(indicators.columns) > 1:
            removed_collinear = _duplicate_columns(indicators)
            indicators = indicators.drop(columns=list(removed_collinear))
            if removed_collinear:
                self.logger.log(self._level, f"Removed collinear indicators: {list(removed_collinear)}")

        self.logger.log(self._level, f"Indicators added: {len(indicators.columns)}")

        result.add_data(
            indicators=indicators,
            removed_constant=removed_constant,
            removed_collinear=removed_collinear
        )
        return result


def _duplicate_columns(frame: pd.DataFrame) -> Dict[str, str]:
    """Later column → first earlier column with an identical pattern."""
    first_seen: Dict[bytes, str] = {}
    duplicates: Dict[str, str] = {}

    for col in frame.columns:
        key = frame[col].to_numpy().tobytes()
        if key in first_seen:
            duplicates[col] = first_seen[key]
        else:
            first_seen[key] = col

    return duplicates


def missingness_indicators(
    data: pd.DataFrame,
    prefix: Optional[str] = None,
    remove_constant: bool = True,
    remove_collinear: bool = True,
    verbose: bool = False
) -> pd.DataFrame:
    """
    🚀 **Convenience Function: Missingness Indicators**

    Example:
```python
        from missingkit import missingness_indicators

        ind = missingness_indicators(df[["age", "income"]], prefix="miss_")
```
    """
    builder = IndicatorBuilder(
        prefix=prefix,
        remove_constant=remove_constant,
        remove_collinear=remove_collinear,
        verbose=verbose
    )
    return builder.run(data=data).data["indicators"]
