# missingkit/core/exceptions.py
"""
╔════════════════════════════════════════════════════════════════════════════╗
║  missingkit — Exceptions & Warnings                                       ║
║  ─────────────────────────────────────────────────────────────────────────  ║
║  ✓ Centralized Exception Hierarchy                                       ║
║  ✓ Error Code & Severity System                                          ║
║  ✓ Non-fatal Warning Categories                                          ║
╚════════════════════════════════════════════════════════════════════════════╝

Architecture:
```
    MissingKitError (Base, fatal)
    ├── ConfigurationError      unknown mode / invalid options
    ├── DataValidationError     malformed input table
    ├── PlanMismatchError       replaying a plan on an incompatible table
    └── NeighborImputerError    neighbour imputer failed to fit/apply

    ImputationWarning (UserWarning, non-fatal)
    ├── UnimputableColumnWarning   column kind has no fill rule
    └── AllMissingColumnWarning    nothing observed to impute from
```

Fatal errors abort the whole call. Warnings are per column: the column is
left as-is and processing continues.

Usage:
```python
    from missingkit.core.exceptions import ConfigurationError

    raise ConfigurationError(
        "Unknown imputation type",
        details={"type": "mice", "allowed": ["standard", "knn"]}
    )
```

Dependencies:
    • loguru
"""

from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Type

from loguru import logger

__all__ = [
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
    "exception_context",
]


# ═══════════════════════════════════════════════════════════════════════════
# Error Taxonomy
# ═══════════════════════════════════════════════════════════════════════════

class ErrorSeverity(str, Enum):
    """
    🚨 **Error Severity Levels**
    """
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCode(str, Enum):
    """
    🏷️ **Error Code Taxonomy**
    """
    UNKNOWN = "unknown_error"
    CONFIG = "configuration_error"
    DATA_VALIDATION = "data_validation_error"
    PLAN_MISMATCH = "plan_mismatch_error"
    NEIGHBOR_IMPUTER = "neighbor_imputer_error"


# ═══════════════════════════════════════════════════════════════════════════
# Base Exception
# ═══════════════════════════════════════════════════════════════════════════

class MissingKitError(Exception):
    """
    🎯 **Base missingkit Exception**

    Carries an error code, severity, a details dictionary, execution context
    and the original cause when wrapping another exception.
    """

    default_code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        *,
        error_code: Optional[ErrorCode] = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None
    ):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details or {}
        self.error_code: ErrorCode = error_code or self.default_code
        self.severity: ErrorSeverity = severity
        self.context: Dict[str, Any] = context or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation with full context."""
        parts = [f"{self.error_code.value}: {self.message}"]

        if self.details:
            parts.append(f"Details: {self.details}")

        if self.context:
            parts.append(f"Context: {self.context}")

        if self.cause:
            parts.append(f"Cause: {type(self.cause).__name__}: {self.cause}")

        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "error": {
                "code": self.error_code.value,
                "message": self.message,
                "details": self.details,
                "context": self.context,
                "severity": self.severity.value,
                "cause": str(self.cause) if self.cause else None
            }
        }

    @classmethod
    def from_exc(
        cls,
        exc: BaseException,
        *,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> "MissingKitError":
        """
        Wrap an arbitrary exception; missingkit errors are returned unchanged.
        """
        if isinstance(exc, MissingKitError):
            return exc

        return cls(
            message or str(exc) or "An unexpected error occurred",
            details=details,
            context=context,
            cause=exc
        )


# ═══════════════════════════════════════════════════════════════════════════
# Specific Exception Classes
# ═══════════════════════════════════════════════════════════════════════════

class ConfigurationError(MissingKitError):
    """⚙️ Invalid configuration (e.g. unknown imputation type)."""
    default_code = ErrorCode.CONFIG


class DataValidationError(MissingKitError):
    """⚠️ Input table is malformed."""
    default_code = ErrorCode.DATA_VALIDATION


class PlanMismatchError(MissingKitError):
    """🧩 Table is not structurally compatible with the imputation plan."""
    default_code = ErrorCode.PLAN_MISMATCH


class NeighborImputerError(MissingKitError):
    """🤝 Neighbour imputer failed while fitting or applying."""
    default_code = ErrorCode.NEIGHBOR_IMPUTER


# ═══════════════════════════════════════════════════════════════════════════
# Warning Categories
# ═══════════════════════════════════════════════════════════════════════════

class ImputationWarning(UserWarning):
    """Base category for recoverable, per-column imputation issues."""


class UnimputableColumnWarning(ImputationWarning):
    """Column kind is neither categorical nor numeric/boolean."""


class AllMissingColumnWarning(ImputationWarning):
    """Every value in the column is missing."""


# ═══════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════

@contextmanager
def exception_context(
    to: Type[MissingKitError],
    message: str,
    *,
    details: Optional[Dict[str, Any]] = None
) -> Iterator[None]:
    """
    🎯 **Exception Context Manager**

    Re-raises anything escaping the block as ``to`` (chained to the cause).
    missingkit errors pass through untouched.

    Example:
```python
        with exception_context(NeighborImputerError, "KNN fit failed"):
            imputer.fit(table)
```
    """
    try:
        yield
    except MissingKitError:
        raise
    except Exception as e:
        logger.error(f"{message}: {type(e).__name__}: {e}")
        raise to(message, details=details, cause=e) from e
