# missingkit/config/constants.py
"""
missingkit - Constants
Fixed values shared by the imputation components.
"""

from __future__ import annotations

from typing import Final, Tuple

# ---------------------------------------------------------------------
# Imputation modes
# ---------------------------------------------------------------------
MODE_STANDARD: Final[str] = "standard"
MODE_KNN: Final[str] = "knn"
IMPUTATION_MODES: Final[Tuple[str, ...]] = (MODE_STANDARD, MODE_KNN)

# ---------------------------------------------------------------------
# Indicators
# ---------------------------------------------------------------------
INDICATOR_DTYPE: Final[str] = "int8"

# ---------------------------------------------------------------------
# Logging formats
# ---------------------------------------------------------------------
LOG_FORMAT_HUMAN: Final[str] = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{module}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "step=<blue>{extra[step]}</blue> | "
    "<level>{message}</level>"
)

LOG_FORMAT_COMPACT: Final[str] = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}"
