"""Shared test fixtures for commutelogit."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from commutelogit.io import SurveyLayout
from commutelogit.models.mnl import MNLControl, MNLModel

ALTERNATIVES = ["bike", "walk", "bus", "car"]

TRUE_ASC = {"bike": -0.4, "walk": 0.6, "bus": 0.2, "car": 0.0}
TRUE_COST_INC = -6.0
TRUE_TIME = {"bike": -0.08, "walk": -0.07, "bus": -0.06, "car": -0.05}


def make_survey(n: int = 1000, seed: int = 42) -> pd.DataFrame:
    """Draw a wide commute survey from a known MNL.

    Columns: mode, cost_<alt> x 4, time_<alt> x 4, income.
    """
    rng = np.random.default_rng(seed)

    time = {
        "bike": rng.uniform(5, 30, n),
        "walk": rng.uniform(8, 50, n),
        "bus": rng.uniform(10, 40, n),
        "car": rng.uniform(5, 25, n),
    }
    cost = {
        "bike": rng.uniform(0.0, 0.5, n),
        "walk": np.zeros(n),
        "bus": rng.uniform(0.5, 2.5, n),
        "car": rng.uniform(2.0, 8.0, n),
    }
    income = rng.uniform(5.0, 60.0, n)

    V = np.column_stack([
        TRUE_ASC[a] + TRUE_COST_INC * cost[a] / income + TRUE_TIME[a] * time[a]
        for a in ALTERNATIVES
    ])
    U = V + rng.gumbel(size=V.shape)
    choice = np.array(ALTERNATIVES)[np.argmax(U, axis=1)]

    df = pd.DataFrame({"mode": choice})
    for a in ALTERNATIVES:
        df[f"cost_{a}"] = cost[a]
    for a in ALTERNATIVES:
        df[f"time_{a}"] = time[a]
    df["income"] = income
    return df


@pytest.fixture
def layout():
    return SurveyLayout()


@pytest.fixture
def small_survey():
    """Hand-written 3-respondent survey."""
    return pd.DataFrame({
        "mode": ["bus", "car", "walk"],
        "cost_bike": [0.2, 0.0, 0.1],
        "cost_walk": [0.0, 0.0, 0.0],
        "cost_bus": [1.5, 2.0, 1.0],
        "cost_car": [6.0, 4.0, 5.0],
        "time_bike": [15.0, 20.0, 10.0],
        "time_walk": [30.0, 45.0, 12.0],
        "time_bus": [20.0, 25.0, 18.0],
        "time_car": [10.0, 12.0, 8.0],
        "income": [20.0, 40.0, 10.0],
    })


@pytest.fixture(scope="session")
def survey():
    """Synthetic 1,000-respondent survey."""
    return make_survey()


@pytest.fixture(scope="session")
def fitted(survey):
    """MNL fitted to the synthetic survey, car as reference."""
    model = MNLModel(survey, reference="car", control=MNLControl(verbose=0))
    return model.fit()


def numerical_gradient(f, x, eps=1e-6):
    """Compute numerical gradient via central finite differences.

    Parameters
    ----------
    f : callable
        Scalar-valued function f(x).
    x : ndarray
        Point at which to evaluate the gradient.
    eps : float
        Perturbation size.

    Returns
    -------
    grad : ndarray
        Numerical gradient, same shape as x.
    """
    x = np.asarray(x, dtype=np.float64)
    grad = np.zeros_like(x)
    for i in range(x.size):
        x_plus = x.copy()
        x_minus = x.copy()
        x_plus[i] += eps
        x_minus[i] -= eps
        grad[i] = (f(x_plus) - f(x_minus)) / (2 * eps)
    return grad


@pytest.fixture
def survey_factory():
    """make_survey, for tests that need a fresh or differently sized draw."""
    return make_survey


@pytest.fixture
def num_grad():
    """numerical_gradient as a fixture."""
    return numerical_gradient
