"""Cost elasticities for the MNL commute model.

The cost variable enters utility as cost / income with one generic
coefficient, so for respondent n and alternative i:

    own:    e_n = beta_cost * (cost_ni / income_n) * (1 - P_ni)
    cross:  e_n = -beta_cost * (cost_ni / income_n) * P_ni

The cross elasticity is the response of every other alternative's
probability to a change in the cost of i.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
from numpy.typing import NDArray
from scipy.stats import gaussian_kde

from commutelogit.io._choice_set import ALTERNATIVE, balance_long
from commutelogit.io._data_loader import as_long
from commutelogit.io._spec_parser import COST_INCOME
from commutelogit.models.mnl._mnl_forecast import mnl_predict
from commutelogit.models.mnl._mnl_results import MNLResults

_QUANTILES = [0.05, 0.25, 0.5, 0.75, 0.95]


def mnl_elasticities(
    results: MNLResults,
    data=None,
    alternative: str = "car",
    *,
    cost_param: str = COST_INCOME,
    cost: str = "cost",
    income: str = "income",
) -> pd.DataFrame:
    """Per-respondent own- and cross-cost elasticities of one alternative.

    Parameters
    ----------
    results : MNLResults
        Fitted model results.
    data : str, Path, pd.DataFrame or None
        Survey to evaluate (wide or long). None uses the estimation sample
        and its fitted probabilities.
    alternative : str
        Alternative whose cost changes.
    cost_param : str
        Name of the cost/income coefficient.
    cost, income : str
        Long-table column names.

    Returns
    -------
    frame : pd.DataFrame
        Indexed by respondent with columns ``cost_income``, ``prob``,
        ``own`` and ``cross``.
    """
    if alternative not in results.alternatives:
        raise ValueError(
            f"Unknown alternative '{alternative}'; expected one of {list(results.alternatives)}"
        )
    if cost_param not in results.param_names:
        raise ValueError(f"Coefficient '{cost_param}' not in {results.param_names}")

    beta_cost = results.coefficients[cost_param]

    if data is None:
        long_data = results.long_data
    else:
        long_data = balance_long(as_long(data, results.layout), results.alternatives)
    rows = long_data.xs(alternative, level=ALTERNATIVE)
    ratio = rows[cost].to_numpy(dtype=np.float64) / rows[income].to_numpy(dtype=np.float64)

    probs = mnl_predict(results, long_data if data is not None else None)
    prob = probs[alternative].to_numpy()

    own = beta_cost * ratio * (1.0 - prob)
    cross = -beta_cost * ratio * prob

    return pd.DataFrame(
        {"cost_income": ratio, "prob": prob, "own": own, "cross": cross},
        index=probs.index,
    )


def summarize_elasticities(
    frame: pd.DataFrame,
    columns=("own", "cross"),
) -> pd.DataFrame:
    """Summary statistics of per-respondent elasticities.

    Returns a table with one column per elasticity and rows count, mean,
    std, min, 5%, 25%, 50%, 75%, 95%, max.
    """
    return frame[list(columns)].describe(percentiles=_QUANTILES)


def aggregate_elasticity(frame: pd.DataFrame, column: str = "own") -> float:
    """Probability-weighted aggregate elasticity, sum(P * e) / sum(P)."""
    weights = frame["prob"].to_numpy()
    return float(np.sum(weights * frame[column].to_numpy()) / np.sum(weights))


def elasticity_density(
    values,
    grid_size: int = 200,
    *,
    bw_method=None,
) -> tuple[NDArray, NDArray]:
    """Gaussian kernel density estimate of an elasticity sample.

    Parameters
    ----------
    values : array-like
        Per-respondent elasticities.
    grid_size : int
        Number of evaluation points.
    bw_method : str, float or None
        Bandwidth rule passed to scipy.stats.gaussian_kde.

    Returns
    -------
    grid : ndarray, shape (grid_size,)
        Evenly spaced points spanning the sample range padded by one
        bandwidth on each side.
    density : ndarray, shape (grid_size,)
        Estimated density at ``grid``.
    """
    x = np.asarray(values, dtype=np.float64)
    x = x[np.isfinite(x)]
    if x.size < 2 or np.ptp(x) == 0.0:
        raise ValueError("Density estimate needs at least two distinct finite values")

    kde = gaussian_kde(x, bw_method=bw_method)
    pad = float(np.sqrt(kde.covariance[0, 0]))
    grid = np.linspace(x.min() - pad, x.max() + pad, grid_size)
    return grid, kde(grid)
