"""Tests for MNL estimation."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from commutelogit.io import COST_INCOME, SurveyLayout, commute_spec, wide_to_long
from commutelogit.models.mnl import (
    EstimationError,
    MNLControl,
    MNLModel,
    mnl_predict,
    mnl_predict_choice,
)


class TestMNLControl:
    def test_defaults(self):
        ctrl = MNLControl()
        assert ctrl.optimizer == "bfgs"
        assert ctrl.maxiter == 200
        assert ctrl.tol == 1e-5
        assert ctrl.verbose == 1
        assert ctrl.startb is None

    def test_optimizer_can_be_set(self):
        assert MNLControl(optimizer="newton").optimizer == "newton"


class TestMNLModelSetup:
    def test_default_spec(self, small_survey):
        model = MNLModel(small_survey, control=MNLControl(verbose=0))
        assert model.var_names == list(commute_spec(model.alternatives, "car"))
        assert model.X.shape == (3, 4, 8)
        np.testing.assert_array_equal(model.y, [2, 3, 1])

    def test_accepts_long_data(self, small_survey):
        long = wide_to_long(small_survey)
        model = MNLModel(long, control=MNLControl(verbose=0))
        assert model.N == 3

    def test_reference_constant_rejected(self, small_survey):
        spec = commute_spec(reference="car")
        spec["ASC_CAR"] = {"car": "uno"}
        with pytest.raises(ValueError, match="reference"):
            MNLModel(small_survey, spec=spec, reference="car")

    def test_unknown_reference(self, small_survey):
        with pytest.raises(ValueError, match="train"):
            MNLModel(small_survey, reference="train")

    def test_invalid_survey(self, small_survey):
        df = small_survey.copy()
        df.loc[0, "income"] = 0.0
        with pytest.raises(ValueError, match="income"):
            MNLModel(df)

    def test_invalid_long_income(self, survey_factory):
        long = wide_to_long(survey_factory(n=300, seed=3))
        long.loc[(0, "bike"), "income"] = -20.0
        with pytest.raises(ValueError, match="income"):
            MNLModel(long, control=MNLControl(verbose=0))

    def test_invalid_long_time(self, survey_factory):
        long = wide_to_long(survey_factory(n=300, seed=3))
        long.loc[(5, "bus"), "time"] = np.nan
        with pytest.raises(ValueError, match="time"):
            MNLModel(long, control=MNLControl(verbose=0))


class TestMNLFit:
    def test_converged(self, fitted):
        assert fitted.converged
        assert fitted.return_code == 0
        assert np.max(np.abs(fitted.gradient)) < 1e-4

    def test_param_names(self, fitted):
        assert fitted.param_names == [
            "ASC_BIKE", "ASC_WALK", "ASC_BUS",
            COST_INCOME,
            "TIME_BIKE", "TIME_WALK", "TIME_BUS", "TIME_CAR",
        ]

    def test_probabilities_sum_to_one(self, fitted):
        assert fitted.fitted_probs.shape == (1000, 4)
        np.testing.assert_allclose(fitted.fitted_probs.sum(axis=1), 1.0, atol=1e-12)

    def test_coefficient_signs(self, fitted):
        coef = fitted.coefficients
        assert coef[COST_INCOME] < 0
        for alt in ("BIKE", "WALK", "BUS", "CAR"):
            assert coef[f"TIME_{alt}"] < 0

    def test_recovers_time_coefficients(self, fitted):
        se = dict(zip(fitted.param_names, fitted.se))
        truth = {"BIKE": -0.08, "WALK": -0.07, "BUS": -0.06, "CAR": -0.05}
        for alt, true in truth.items():
            name = f"TIME_{alt}"
            assert abs(fitted.coefficients[name] - true) < 4 * se[name]

    def test_standard_errors(self, fitted):
        assert np.all(fitted.se > 0)
        assert np.all(fitted.robust_se > 0)
        np.testing.assert_allclose(np.sqrt(np.diag(fitted.cov_matrix)), fitted.se)
        np.testing.assert_allclose(np.diag(fitted.corr_matrix), 1.0)
        np.testing.assert_allclose(fitted.t_stat, fitted.b / fitted.se)
        assert np.all((fitted.p_value >= 0) & (fitted.p_value <= 1))

    def test_fit_statistics(self, fitted):
        assert fitted.ll_null == pytest.approx(-1000 * np.log(4))
        assert fitted.ll_null < fitted.ll_constants < fitted.ll_total < 0
        assert 0 < fitted.rho_squared < 1
        assert fitted.adj_rho_squared < fitted.rho_squared
        assert fitted.aic == pytest.approx(2 * 8 - 2 * fitted.ll_total)
        assert fitted.ll == pytest.approx(fitted.ll_total / 1000)

    def test_shares(self, fitted, survey):
        observed = survey["mode"].value_counts(normalize=True)
        for alt in fitted.alternatives:
            assert fitted.observed_shares[alt] == pytest.approx(observed[alt])
        # MNL with full constants reproduces sample shares at the optimum
        np.testing.assert_allclose(
            fitted.predicted_shares, fitted.observed_shares, atol=1e-3
        )
        np.testing.assert_allclose(fitted.predicted_counts.sum(), 1000)

    def test_deterministic(self, survey, fitted):
        again = MNLModel(survey, control=MNLControl(verbose=0)).fit()
        np.testing.assert_array_equal(again.b, fitted.b)
        np.testing.assert_array_equal(
            again.fitted_probs.to_numpy(), fitted.fitted_probs.to_numpy()
        )

    @pytest.mark.parametrize("optimizer", ["lbfgsb", "newton"])
    def test_optimizers_agree(self, survey, fitted, optimizer):
        other = MNLModel(
            survey, control=MNLControl(optimizer=optimizer, verbose=0)
        ).fit()
        np.testing.assert_allclose(other.b, fitted.b, rtol=1e-2, atol=1e-2)

    def test_start_values(self, survey, fitted):
        ctrl = MNLControl(verbose=0, startb=fitted.b)
        again = MNLModel(survey, control=ctrl).fit()
        np.testing.assert_allclose(again.b, fitted.b, rtol=1e-4, atol=1e-5)

    def test_start_values_wrong_shape(self, small_survey):
        ctrl = MNLControl(verbose=0, startb=np.zeros(3))
        with pytest.raises(ValueError, match="startb"):
            MNLModel(small_survey, control=ctrl).fit()

    def test_summary(self, fitted, capsys):
        text = fitted.summary()
        assert "COST_INC" in text
        assert "Rho-squared" in text
        assert "commutelogit MNL Estimation Results" in capsys.readouterr().out

    def test_to_dataframe(self, fitted):
        df = fitted.to_dataframe()
        assert list(df.index) == fitted.param_names
        assert list(df.columns) == ["Estimate", "Std.Error", "Robust.SE", "t-stat", "p-value"]

    def test_verbose_output(self, survey_factory, capsys):
        MNLModel(survey_factory(n=300, seed=3), control=MNLControl(verbose=1)).fit()
        out = capsys.readouterr().out
        assert "Estimating MNL model with 300 observations" in out
        assert "Optimization converged" in out

    def test_silent(self, survey_factory, capsys):
        MNLModel(survey_factory(n=300, seed=3), control=MNLControl(verbose=0)).fit()
        assert capsys.readouterr().out == ""


class TestEstimationErrors:
    def test_alternative_never_chosen(self, survey):
        df = survey[survey["mode"] != "walk"]
        with pytest.raises(EstimationError, match="walk"):
            MNLModel(df, control=MNLControl(verbose=0)).fit()

    def test_no_variation_across_alternatives(self, survey):
        spec = commute_spec()
        spec["INCOME"] = {a: "income" for a in ("bike", "walk", "bus", "car")}
        with pytest.raises(EstimationError, match="INCOME"):
            MNLModel(survey, spec=spec, control=MNLControl(verbose=0)).fit()

    def test_collinear(self, survey):
        spec = commute_spec()
        spec["TIME_BUS_AGAIN"] = {"bus": "time"}
        with pytest.raises(EstimationError, match="collinear"):
            MNLModel(survey, spec=spec, control=MNLControl(verbose=0)).fit()

    def test_not_converged(self, survey):
        with pytest.raises(EstimationError, match="did not converge"):
            MNLModel(survey, control=MNLControl(maxiter=1, verbose=0)).fit()

    def test_separation_tolerance(self, survey):
        ctrl = MNLControl(verbose=0, separation_tol=0.0)
        with pytest.raises(EstimationError, match="separated"):
            MNLModel(survey, control=ctrl).fit()

    @pytest.mark.parametrize("optimizer", ["bfgs", "lbfgsb", "newton"])
    def test_separated_by_travel_time(self, survey_factory, optimizer):
        # every respondent takes the fastest mode
        df = survey_factory(n=300, seed=3)
        for alt in ("bike", "walk", "bus", "car"):
            df.loc[df["mode"] == alt, f"time_{alt}"] = 1.0
        model = MNLModel(df, control=MNLControl(optimizer=optimizer, verbose=0))
        with pytest.raises(EstimationError, match="separated"):
            model.fit()

    def test_quasi_separated(self, survey_factory):
        # walk is only ever chosen when it is the fastest mode
        df = survey_factory(n=300, seed=3)
        df.loc[df["mode"] == "walk", "time_walk"] = 1.0
        df.loc[df["mode"] != "walk", "time_walk"] = 60.0
        with pytest.raises(EstimationError, match="separated"):
            MNLModel(df, control=MNLControl(verbose=0)).check_separation()

    def test_unseparated_survey_passes(self, survey):
        MNLModel(survey, control=MNLControl(verbose=0)).check_separation()


class TestPredict:
    def test_predict_defaults_to_fitted(self, fitted):
        pd.testing.assert_frame_equal(mnl_predict(fitted), fitted.fitted_probs)

    def test_predict_on_estimation_data_is_exact(self, fitted, survey):
        np.testing.assert_array_equal(
            mnl_predict(fitted, survey).to_numpy(), fitted.fitted_probs.to_numpy()
        )

    def test_predict_new_data(self, fitted, survey_factory):
        new = survey_factory(n=50, seed=11)
        probs = mnl_predict(fitted, new)
        assert probs.shape == (50, 4)
        np.testing.assert_allclose(probs.sum(axis=1), 1.0, atol=1e-12)

    def test_predict_choice(self, fitted):
        choice = mnl_predict_choice(fitted)
        assert set(choice.unique()) <= set(fitted.alternatives)
        assert len(choice) == 1000

    def test_custom_layout(self, small_survey):
        df = small_survey.rename(columns={"mode": "choice"})
        layout = SurveyLayout(choice="choice")
        model = MNLModel(df, layout=layout, control=MNLControl(verbose=0))
        assert model.N == 3
