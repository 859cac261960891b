"""
missingkit - Unit Tests for the Imputation Plan
"""

import dataclasses

import pytest
import pandas as pd
import numpy as np

from missingkit.core.exceptions import ConfigurationError, PlanMismatchError
from missingkit.core.utils import save_pickle
from missingkit.imputation.neighbors import StandardizedKNNImputer
from missingkit.imputation.plan import ImputationPlan


class TestImputationPlan:
    """Tests for plan construction and replay"""

    def test_unknown_mode(self):
        """Test unknown modes are rejected"""
        with pytest.raises(ConfigurationError):
            ImputationPlan(mode="mice")

    def test_knn_needs_imputer(self):
        """Test a knn plan without its imputer is rejected"""
        with pytest.raises(ConfigurationError):
            ImputationPlan(mode="knn", neighbor_state=object())

    def test_fill_values_are_copied(self):
        """Test later changes to the source dict do not leak into the plan"""
        values = {"x": 1.0}
        plan = ImputationPlan(mode="standard", fill_values=values)
        values["x"] = 99.0
        assert plan.fill_values == {"x": 1.0}

    def test_fill_values_read_only(self):
        """Test fill values cannot be changed after construction"""
        plan = ImputationPlan(mode="standard", fill_values={"x": 1.0})
        with pytest.raises(TypeError):
            plan.fill_values["x"] = 99.0

        out = plan.apply(pd.DataFrame({"x": [np.nan]}))
        assert out["x"].tolist() == [1.0]

    def test_frozen(self):
        """Test plans cannot be reassigned"""
        plan = ImputationPlan(mode="standard")
        with pytest.raises(dataclasses.FrozenInstanceError):
            plan.mode = "knn"

    def test_apply_standard(self):
        """Test standard apply fills present columns and ignores absent ones"""
        plan = ImputationPlan(mode="standard", fill_values={"x": 0.0, "gone": "?"})
        data = pd.DataFrame({"x": [np.nan, 1.0], "y": [np.nan, 2.0]})

        out = plan.apply(data)

        assert out["x"].tolist() == [0.0, 1.0]
        assert out["y"].isna().sum() == 1
        assert data["x"].isna().sum() == 1

    def test_apply_knn(self):
        """Test knn apply delegates to the fitted imputer"""
        train = pd.DataFrame({"a": [1.0, 2.0, 3.0, 4.0], "b": [1.0, np.nan, 3.0, 4.0]})
        knn = StandardizedKNNImputer(n_neighbors=2)
        _, state = knn.fit(train)
        plan = ImputationPlan(mode="knn", neighbor_state=state, neighbor_imputer=knn,
                              columns=("a", "b"))

        out = plan.apply(pd.DataFrame({"a": [2.5], "b": [np.nan]}))
        assert not out.isna().any().any()

    def test_check_compatible(self):
        """Test knn plans require every fitted column"""
        knn = StandardizedKNNImputer()
        plan = ImputationPlan(mode="knn", neighbor_state=None, neighbor_imputer=knn,
                              columns=("a", "b"))
        with pytest.raises(PlanMismatchError):
            plan.check_compatible(pd.DataFrame({"a": [1.0]}))

    def test_to_dict(self):
        """Test plan summary"""
        plan = ImputationPlan(mode="standard", fill_values={"x": 2}, columns=["x"])
        assert plan.to_dict() == {
            "mode": "standard",
            "fill_values": {"x": 2},
            "neighbor_imputer": None,
            "columns": ["x"],
        }


class TestPlanPersistence:
    """Tests for plan save / load"""

    def test_round_trip(self, tmp_path):
        """Test a saved plan loads back equal"""
        plan = ImputationPlan(mode="standard", fill_values={"x": 2.0, "c": "a"}, columns=("x", "c"))
        path = tmp_path / "plans" / "plan.pkl"

        plan.save(path)
        loaded = ImputationPlan.load(path)

        assert loaded == plan

    def test_round_trip_keeps_read_only_values(self, tmp_path):
        """Test a loaded plan still protects its fill values"""
        path = tmp_path / "plan.pkl"
        ImputationPlan(mode="standard", fill_values={"x": 2.0}).save(path)

        loaded = ImputationPlan.load(path)

        assert dict(loaded.fill_values) == {"x": 2.0}
        with pytest.raises(TypeError):
            loaded.fill_values["x"] = 0.0

    def test_load_rejects_other_objects(self, tmp_path):
        """Test loading a pickle that is not a plan"""
        path = tmp_path / "other.pkl"
        save_pickle({"x": 1}, path)
        with pytest.raises(PlanMismatchError):
            ImputationPlan.load(path)

    def test_load_missing_file(self, tmp_path):
        """Test loading a file that does not exist"""
        with pytest.raises(FileNotFoundError):
            ImputationPlan.load(tmp_path / "nope.pkl")
