"""Tests for survey loading."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from commutelogit.io import as_long, load_data, load_survey, wide_to_long


class TestLoadData:
    def test_csv(self, small_survey, tmp_path):
        path = tmp_path / "survey.csv"
        small_survey.to_csv(path, index=False)
        df = load_data(path)
        pd.testing.assert_frame_equal(df, small_survey)

    def test_whitespace_dat(self, small_survey, tmp_path):
        path = tmp_path / "survey.dat"
        small_survey.to_csv(path, sep=" ", index=False)
        df = load_data(path)
        assert list(df.columns) == list(small_survey.columns)
        assert len(df) == 3

    def test_spreadsheet(self, small_survey, tmp_path):
        pytest.importorskip("openpyxl")
        path = tmp_path / "survey.xlsx"
        small_survey.to_excel(path, index=False)
        df = load_data(path)
        pd.testing.assert_frame_equal(df, small_survey)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_data(tmp_path / "nope.csv")


class TestLoadSurvey:
    def test_normalises_modes(self, small_survey):
        df = small_survey.copy()
        df["mode"] = ["Bus ", "CAR", " walk"]
        survey = load_survey(df)
        assert list(survey["mode"]) == ["bus", "car", "walk"]
        assert list(df["mode"]) == ["Bus ", "CAR", " walk"]

    def test_from_path(self, small_survey, tmp_path):
        path = tmp_path / "survey.csv"
        small_survey.to_csv(path, index=False)
        survey = load_survey(str(path))
        assert len(survey) == 3

    def test_invalid_raises(self, small_survey):
        df = small_survey.drop(columns=["cost_car"])
        with pytest.raises(ValueError, match="cost_car"):
            load_survey(df)


class TestAsLong:
    def test_wide_is_indexed(self, small_survey):
        long = as_long(small_survey)
        assert list(long.index.names) == ["respondent", "alternative"]

    def test_long_passes_through(self, small_survey):
        long = wide_to_long(small_survey)
        assert as_long(long) is long

    def test_long_with_negative_income(self, small_survey):
        long = wide_to_long(small_survey)
        long.loc[(0, "car"), "income"] = -20.0
        with pytest.raises(ValueError, match="income"):
            as_long(long)

    def test_long_with_nan_time(self, small_survey):
        long = wide_to_long(small_survey)
        long.loc[(2, "walk"), "time"] = np.nan
        with pytest.raises(ValueError, match="time"):
            as_long(long)

    def test_duplicate_labels_rejected(self, small_survey):
        with pytest.raises(ValueError, match="duplicate row labels"):
            as_long(pd.concat([small_survey, small_survey]))
