"""
missingkit - Unit Tests for the Step Framework
"""

import json

import pytest
import pandas as pd

from missingkit.core.base_step import BaseStep, StepResult
from missingkit.core.exceptions import DataValidationError, MissingKitError


class EchoStep(BaseStep):
    def __init__(self):
        super().__init__(name="echo", description="Returns its input")

    def validate_input(self, **kwargs):
        if "data" not in kwargs:
            raise DataValidationError("'data' is required")

    def execute(self, data, **kwargs):
        result = StepResult(step_name=self.name)
        result.add_data(echo=data)
        return result


class BrokenStep(BaseStep):
    def __init__(self):
        super().__init__(name="broken")

    def execute(self, **kwargs):
        raise ZeroDivisionError("division by zero")


class TestStepResult:
    """Tests for StepResult"""

    def test_warning_marks_partial(self):
        """Test warnings switch status to partial"""
        result = StepResult(step_name="s")
        assert result.is_success()
        result.add_warning("careful")
        assert result.is_partial()

    def test_notes_keep_status(self):
        """Test notes do not change status"""
        result = StepResult(step_name="s")
        result.add_note("fyi")
        assert result.is_success()
        assert result.notes == ["fyi"]

    def test_merge(self):
        """Test warnings and notes are folded in"""
        parent = StepResult(step_name="parent")
        child = StepResult(step_name="child")
        child.add_warning("w")
        child.add_note("n")

        parent.merge(child)

        assert parent.warnings == ["w"]
        assert parent.notes == ["n"]
        assert parent.is_partial()

    def test_to_json_handles_frames(self):
        """Test DataFrames serialize as records"""
        result = StepResult(step_name="s")
        result.add_data(frame=pd.DataFrame({"a": [1, 2]}))
        payload = json.loads(result.to_json())
        assert payload["data"]["frame"] == [{"a": 1}, {"a": 2}]


class TestBaseStep:
    """Tests for BaseStep lifecycle"""

    def test_run_stamps_timing(self):
        """Test run fills timing fields"""
        step = EchoStep()
        result = step.run(data=1)
        assert result.data["echo"] == 1
        assert result.started_at is not None
        assert result.execution_time >= 0
        assert step.get_last_result() is result

    def test_validation_error_propagates(self):
        """Test validation failures reach the caller unchanged"""
        with pytest.raises(DataValidationError):
            EchoStep().run()

    def test_foreign_errors_are_wrapped(self):
        """Test unexpected exceptions are wrapped"""
        with pytest.raises(MissingKitError) as info:
            BrokenStep().run()
        assert isinstance(info.value.__cause__, ZeroDivisionError)

    def test_repr(self):
        """Test representation"""
        assert repr(EchoStep()) == "EchoStep(name='echo', version='1.0')"
