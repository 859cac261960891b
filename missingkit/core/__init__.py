# missingkit/core/__init__.py
"""Core framework: step lifecycle, result model, exceptions and utilities."""

from missingkit.core.base_step import BaseStep, StepResult, StepStatus
from missingkit.core.exceptions import (
    AllMissingColumnWarning,
    ConfigurationError,
    DataValidationError,
    ErrorCode,
    ErrorSeverity,
    ImputationWarning,
    MissingKitError,
    NeighborImputerError,
    PlanMismatchError,
    UnimputableColumnWarning,
)

__all__ = [
    "BaseStep",
    "StepResult",
    "StepStatus",
    "ErrorCode",
    "ErrorSeverity",
    "MissingKitError",
    "ConfigurationError",
    "DataValidationError",
    "PlanMismatchError",
    "NeighborImputerError",
    "ImputationWarning",
    "UnimputableColumnWarning",
    "AllMissingColumnWarning",
]
