"""
missingkit - Unit Tests for the Imputation Planner
"""

import pytest
import pandas as pd
import numpy as np

from missingkit.core.exceptions import (
    AllMissingColumnWarning,
    ConfigurationError,
    DataValidationError,
    NeighborImputerError,
    UnimputableColumnWarning,
)
from missingkit.imputation.columns import profile_columns
from missingkit.imputation.plan import ImputationPlan
from missingkit.imputation.planner import ImputationPlanner


def run_planner(data, mode="standard", skip_vars=(), imputer=None, **kwargs):
    planner = ImputationPlanner(neighbor_imputer=imputer)
    specs = profile_columns(data, skip_vars)
    return planner.run(data=data, specs=specs, mode=mode, **kwargs)


class TestStandardPlanning:
    """Tests for standard (median / mode) imputation"""

    def test_fill_values(self, df_with_missing):
        """Test median for numeric and first mode for categorical columns"""
        result = run_planner(df_with_missing)
        assert result.data["plan"].fill_values == {"col1": 6.0, "col2": 6.6, "col3": "a"}
        assert result.is_success()

    def test_no_missing_values_remain(self, df_with_missing):
        """Test every missing cell is filled"""
        out = run_planner(df_with_missing).data["data"]
        assert not out.isna().any().any()
        assert out.loc[2, "col1"] == 6.0
        assert out.loc[7, "col3"] == "a"

    def test_input_not_mutated(self, df_with_missing):
        """Test the original table is left untouched"""
        before = df_with_missing.copy()
        run_planner(df_with_missing)
        pd.testing.assert_frame_equal(df_with_missing, before)

    def test_supplied_values_used_verbatim(self, df_with_missing):
        """Test caller-supplied values win over computed ones"""
        result = run_planner(df_with_missing, values={"col1": -1})
        assert result.data["plan"].fill_values["col1"] == -1
        assert result.data["data"].loc[5, "col1"] == -1

    def test_skipped_columns_untouched(self, df_with_missing):
        """Test skipped columns keep their missing values"""
        result = run_planner(df_with_missing, skip_vars=["col3"])
        assert result.data["data"]["col3"].isna().sum() == 2
        assert "col3" not in result.data["plan"].fill_values

    def test_all_vars_records_complete_columns(self):
        """Test all_vars computes values for columns without missing data"""
        data = pd.DataFrame({"full": [1, 2, 3], "x": [1.0, np.nan, 3.0]})

        narrow = run_planner(data)
        wide = run_planner(data, all_vars=True)

        assert narrow.data["plan"].fill_values == {"x": 2.0}
        assert wide.data["plan"].fill_values == {"full": 2, "x": 2.0}
        pd.testing.assert_series_equal(wide.data["data"]["full"], data["full"])

    def test_unsupported_column_warns(self, mixed_df):
        """Test unsupported kinds are skipped with a warning"""
        with pytest.warns(UnimputableColumnWarning):
            result = run_planner(mixed_df)

        assert result.is_partial()
        assert result.data["unimputable"] == ["visited"]
        assert result.data["data"]["visited"].isna().sum() == 1
        assert "visited" not in result.data["plan"].fill_values

    def test_mixed_kinds(self, mixed_df):
        """Test per-kind fill values"""
        with pytest.warns(UnimputableColumnWarning):
            result = run_planner(mixed_df)

        values = result.data["plan"].fill_values
        assert values["age"] == 40
        assert values["smoker"] is True
        assert values["city"] == "Oslo"
        assert values["target"] == 1.0

    def test_all_missing_column(self):
        """Test all-missing column is left alone and reported"""
        data = pd.DataFrame({"empty": [np.nan, np.nan], "x": [1.0, np.nan]})

        with pytest.warns(AllMissingColumnWarning):
            result = run_planner(data)

        assert result.data["all_missing"] == ["empty"]
        assert "empty" not in result.data["plan"].fill_values
        assert result.data["data"]["empty"].isna().all()
        assert any("empty" in note for note in result.notes)

    def test_all_missing_column_records_supplied_value(self):
        """Test an all-missing column keeps a supplied value in the plan"""
        data = pd.DataFrame({"empty": [np.nan, np.nan]})

        with pytest.warns(AllMissingColumnWarning):
            result = run_planner(data, values={"empty": 0.0})

        assert result.data["plan"].fill_values == {"empty": 0.0}
        assert result.data["data"]["empty"].isna().all()

    def test_replay_plan(self, train_test_frames):
        """Test a standard plan's values are reused on new data"""
        train, test = train_test_frames
        plan = run_planner(train).data["plan"]

        replayed = run_planner(test, plan=plan)

        assert replayed.data["data"].loc[0, "x"] == 3.0
        assert replayed.data["data"].loc[0, "color"] == "red"
        assert replayed.data["data"].loc[0, "flag"] is True


class TestPlannerValidation:
    """Tests for planner input validation"""

    def test_unknown_mode(self, df_with_missing):
        """Test unknown mode is rejected"""
        with pytest.raises(ConfigurationError):
            run_planner(df_with_missing, mode="mice")

    def test_specs_must_match(self, df_with_missing):
        """Test specs for another table are rejected"""
        planner = ImputationPlanner()
        specs = profile_columns(df_with_missing[["col1"]])
        with pytest.raises(DataValidationError):
            planner.run(data=df_with_missing, specs=specs)


class TestKnnPlanning:
    """Tests for knn mode delegation"""

    def test_delegates_to_collaborator(self, df_with_missing, zero_fill_imputer):
        """Test fit is called with the non-skipped columns"""
        result = run_planner(
            df_with_missing[["col1", "col2"]],
            mode="knn",
            skip_vars=["col2"],
            imputer=zero_fill_imputer
        )

        assert zero_fill_imputer.calls == [("fit", ["col1"])]
        out = result.data["data"]
        assert out.loc[2, "col1"] == 0.0
        assert out["col2"].isna().sum() == 3

    def test_plan_holds_state(self, df_with_missing, zero_fill_imputer):
        """Test fitted state is stored verbatim in the plan"""
        plan = run_planner(
            df_with_missing[["col1", "col2"]], mode="knn", imputer=zero_fill_imputer
        ).data["plan"]

        assert plan.mode == "knn"
        assert plan.neighbor_state == {"fitted_on": ["col1", "col2"]}
        assert plan.neighbor_imputer is zero_fill_imputer

    def test_replay_calls_apply(self, df_with_missing, zero_fill_imputer):
        """Test replay uses the collaborator's apply"""
        data = df_with_missing[["col1", "col2"]]
        plan = run_planner(data, mode="knn", imputer=zero_fill_imputer).data["plan"]

        run_planner(data, mode="knn", plan=plan)

        assert zero_fill_imputer.calls[-1] == ("apply", ["col1", "col2"])

    def test_replay_rejects_standard_plan(self, df_with_missing):
        """Test a standard plan cannot be replayed in knn mode"""
        plan = ImputationPlan(mode="standard", fill_values={"col1": 1.0})
        with pytest.raises(ConfigurationError):
            run_planner(df_with_missing, mode="knn", plan=plan)

    def test_collaborator_failure(self, numeric_df, failing_imputer):
        """Test collaborator exceptions surface as NeighborImputerError"""
        with pytest.raises(NeighborImputerError):
            run_planner(numeric_df, mode="knn", imputer=failing_imputer)

    def test_malformed_fit_output(self, numeric_df):
        """Test a collaborator returning something other than a table"""
        class ArrayImputer:
            def fit(self, table):
                return table.to_numpy(), None

            def apply(self, state, table):
                return table.to_numpy()

        with pytest.raises(NeighborImputerError):
            run_planner(numeric_df, mode="knn", imputer=ArrayImputer())

    def test_row_count_change(self, numeric_df):
        """Test a collaborator that drops rows"""
        class DroppingImputer:
            def fit(self, table):
                return table.dropna(), None

            def apply(self, state, table):
                return table.dropna()

        with pytest.raises(NeighborImputerError):
            run_planner(numeric_df, mode="knn", imputer=DroppingImputer())

    def test_scale_note(self, numeric_df, zero_fill_imputer):
        """Test knn results carry a note about scaling"""
        result = run_planner(numeric_df, mode="knn", imputer=zero_fill_imputer)
        assert any("scale" in note for note in result.notes)
