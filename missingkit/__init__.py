# missingkit/__init__.py
"""
╔════════════════════════════════════════════════════════════════════════════╗
║  missingkit — Missing Value Imputation with Indicators                    ║
╚════════════════════════════════════════════════════════════════════════════╝

Usage:
```python
    from missingkit import impute_missing_values

    result = impute_missing_values(df, skip_vars=["target"])
    df_ready = result.data["data"]
    plan = result.data["plan"]
```
"""

from missingkit.config.settings import settings
from missingkit.core.exceptions import (
    AllMissingColumnWarning,
    ConfigurationError,
    DataValidationError,
    ImputationWarning,
    MissingKitError,
    NeighborImputerError,
    PlanMismatchError,
    UnimputableColumnWarning,
)
from missingkit.imputation import (
    ImputationConfig,
    ImputationPlan,
    MissingValueImputer,
    NeighborImputer,
    StandardizedKNNImputer,
    impute_missing_values,
    missingness_indicators,
)

__version__ = settings.APP_VERSION

__all__ = [
    "__version__",
    "impute_missing_values",
    "missingness_indicators",
    "ImputationConfig",
    "MissingValueImputer",
    "ImputationPlan",
    "NeighborImputer",
    "StandardizedKNNImputer",
    "MissingKitError",
    "ConfigurationError",
    "DataValidationError",
    "PlanMismatchError",
    "NeighborImputerError",
    "ImputationWarning",
    "UnimputableColumnWarning",
    "AllMissingColumnWarning",
]
