# missingkit/core/base_step.py
"""
╔════════════════════════════════════════════════════════════════════════════╗
║  missingkit — Base Step                                                   ║
║  ─────────────────────────────────────────────────────────────────────────  ║
║  ✓ Abstract Base Step Class                                              ║
║  ✓ Lifecycle Hooks (validate → before → execute → after)                 ║
║  ✓ Standard StepResult (pydantic)                                        ║
║  ✓ Safe JSON Serialization                                               ║
╚════════════════════════════════════════════════════════════════════════════╝

Every processing component (planner, indicator builder, orchestrator) is a
``BaseStep``. ``run()`` drives the lifecycle, stamps timing onto the result
and logs start/end. Errors are not swallowed: a failing step logs the error
and re-raises it (wrapped in ``MissingKitError`` when it is not one already),
so callers never receive a partial result.

Usage:
```python
    from missingkit.core.base_step import BaseStep, StepResult

    class MyStep(BaseStep):
        def __init__(self):
            super().__init__(name="my_step", description="Custom step")

        def execute(self, **kwargs) -> StepResult:
            result = StepResult(step_name=self.name)
            result.add_data(output=kwargs["data"])
            return result

    result = MyStep().run(data=df)
```

Dependencies:
    • loguru
    • pydantic
"""

from __future__ import annotations

import json
import time
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from uuid import uuid4

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from missingkit.core.exceptions import MissingKitError

__all__ = ["BaseStep", "StepResult", "StepStatus"]


# ═══════════════════════════════════════════════════════════════════════════
# Type Definitions
# ═══════════════════════════════════════════════════════════════════════════

StepStatus = Literal["success", "partial"]


# ═══════════════════════════════════════════════════════════════════════════
# Step Result
# ═══════════════════════════════════════════════════════════════════════════

class StepResult(BaseModel):
    """
    📊 **Step Execution Result**

    Attributes:
        step_name: Name of the step
        status: ``success``, or ``partial`` once any warning was recorded
        execution_time: Duration in seconds
        started_at: Start timestamp
        finished_at: Finish timestamp
        trace_id: Unique trace identifier
        data: Result payload (DataFrames, plans, ...)
        metadata: Telemetry and other auxiliary information
        warnings: Recoverable problems (status becomes ``partial``)
        notes: Informational messages that do not affect status
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    step_name: str
    status: StepStatus = Field(default="success")

    # Timing
    execution_time: float = Field(default=0.0)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    # Tracing
    trace_id: str = Field(default_factory=lambda: uuid4().hex)

    # Payload
    data: Dict[str, Any] = Field(default_factory=dict)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    warnings: List[str] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)

    # ───────────────────────────────────────────────────────────────────
    # Status Checks
    # ───────────────────────────────────────────────────────────────────

    def is_success(self) -> bool:
        """Check if execution finished without warnings."""
        return self.status == "success"

    def is_partial(self) -> bool:
        """Check if execution finished with warnings."""
        return self.status == "partial"

    # ───────────────────────────────────────────────────────────────────
    # Mutations
    # ───────────────────────────────────────────────────────────────────

    def add_warning(self, warning: str) -> None:
        """Add warning and mark as partial."""
        self.warnings.append(warning)
        self.status = "partial"

    def add_note(self, note: str) -> None:
        self.notes.append(note)

    def add_data(self, **items: Any) -> None:
        """Add data items."""
        self.data.update(items)

    def add_metadata(self, **items: Any) -> None:
        """Add metadata items."""
        self.metadata.update(items)

    def merge(self, other: "StepResult") -> "StepResult":
        """
        Fold another step's warnings, notes and status into this one.

        Data is not merged; callers pick what they need from ``other.data``.
        """
        for warning in other.warnings:
            self.add_warning(warning)
        self.notes.extend(other.notes)
        return self

    # ───────────────────────────────────────────────────────────────────
    # Serialization
    # ───────────────────────────────────────────────────────────────────

    def to_json(self) -> str:
        """
        Convert to JSON string with safe serialization.

        Handles: numpy, pandas, datetime objects. Anything else falls back
        to ``str()``.
        """
        import numpy as np
        import pandas as pd

        def _safe_default(obj: Any) -> Any:
            if isinstance(obj, np.integer):
                return int(obj)
            if isinstance(obj, np.floating):
                return float(obj)
            if isinstance(obj, np.bool_):
                return bool(obj)
            if isinstance(obj, np.ndarray):
                return obj.tolist()
            if isinstance(obj, pd.Timestamp):
                return obj.isoformat()
            if isinstance(obj, pd.Series):
                return obj.tolist()
            if isinstance(obj, pd.DataFrame):
                return json.loads(obj.to_json(orient="records"))
            if isinstance(obj, datetime):
                return obj.isoformat()
            return str(obj)

        return json.dumps(
            self.model_dump(),
            default=_safe_default,
            ensure_ascii=False
        )


# ═══════════════════════════════════════════════════════════════════════════
# Base Step
# ═══════════════════════════════════════════════════════════════════════════

class BaseStep(ABC):
    """
    🤖 **Base Step Class**

    Lifecycle:
```
        run() → validate_input()
              → before_execute()
              → execute()
              → measure time
              → after_execute()
              → return StepResult
```
    """

    def __init__(self, name: str, description: str = "", version: str = "1.0"):
        self.name = name
        self.description = description
        self.version = version

        self.logger = logger.bind(step=name, component="step", version=version)

        self._result: Optional[StepResult] = None

    # ───────────────────────────────────────────────────────────────────
    # Abstract Methods
    # ───────────────────────────────────────────────────────────────────

    @abstractmethod
    def execute(self, **kwargs) -> StepResult:
        """Execute step logic. Must be implemented by subclasses."""
        raise NotImplementedError

    # ───────────────────────────────────────────────────────────────────
    # Lifecycle Hooks
    # ───────────────────────────────────────────────────────────────────

    def validate_input(self, **kwargs) -> None:
        """
        Validate input before execution.

        Override to add custom validation; raise a ``MissingKitError``
        subclass to reject the call.
        """

    def before_execute(self, **kwargs) -> None:
        self.logger.debug(f"[{self.name}] Starting execution")

    def after_execute(self, result: StepResult) -> None:
        self.logger.debug(
            f"[{self.name}] Execution completed: "
            f"status={result.status}, time={result.execution_time:.3f}s"
        )

    # ───────────────────────────────────────────────────────────────────
    # Main Execution
    # ───────────────────────────────────────────────────────────────────

    def run(self, **kwargs) -> StepResult:
        """
        🚀 **Execute Step**

        Returns:
            StepResult

        Raises:
            MissingKitError: on any failure; foreign exceptions are wrapped
        """
        start_perf = time.perf_counter()
        started_at = datetime.now()

        try:
            self.validate_input(**kwargs)
            self.before_execute(**kwargs)
            result = self.execute(**kwargs)
        except MissingKitError as e:
            self.logger.error(f"[{self.name}] Execution failed: {e}")
            raise
        except Exception as e:
            self.logger.error(f"[{self.name}] Execution failed: {type(e).__name__}: {e}")
            raise MissingKitError.from_exc(
                e, message=f"{self.name} failed: {type(e).__name__}: {e}"
            ) from e

        result.execution_time = time.perf_counter() - start_perf
        result.started_at = started_at
        result.finished_at = datetime.now()

        self._result = result
        self.after_execute(result)

        return result

    # ───────────────────────────────────────────────────────────────────
    # Utilities
    # ───────────────────────────────────────────────────────────────────

    def get_last_result(self) -> Optional[StepResult]:
        """Get last execution result."""
        return self._result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', version='{self.version}')"
