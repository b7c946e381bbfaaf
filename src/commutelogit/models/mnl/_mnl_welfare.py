"""Log-sum consumer surplus for the MNL commute model.

Expected maximum utility of respondent n is, up to a constant, the log-sum

    LS_n = log sum_j exp(V_nj)

Cost enters utility as beta_cost * cost / income, so the marginal utility of
income is respondent-specific:

    lambda_n = -beta_cost / income_n

and the compensating variation of moving from a baseline to a new scenario is

    CV_n = (LS_n^new - LS_n^base) / lambda_n

Positive CV is a welfare gain.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd

from commutelogit.io._choice_set import ALTERNATIVE, RESPONDENT, balance_long
from commutelogit.io._data_loader import as_long
from commutelogit.io._spec_parser import COST_INCOME
from commutelogit.models.mnl._mnl_forecast import design_for, mnl_logsum
from commutelogit.models.mnl._mnl_policy import apply_scenario
from commutelogit.models.mnl._mnl_results import MNLResults


@dataclass(frozen=True)
class WelfareResult:
    """Compensating variation between two scenarios.

    Attributes
    ----------
    logsum_base : pd.Series
        Per-respondent log-sum under the baseline.
    logsum_new : pd.Series
        Per-respondent log-sum under the new scenario.
    marginal_utility : pd.Series
        Per-respondent marginal utility of income (baseline income).
    cv : pd.Series
        Per-respondent compensating variation, in income units.
    """

    logsum_base: pd.Series
    logsum_new: pd.Series
    marginal_utility: pd.Series
    cv: pd.Series

    @property
    def total(self) -> float:
        """Aggregate consumer-surplus change."""
        return float(self.cv.sum())

    @property
    def mean(self) -> float:
        return float(self.cv.mean())


def marginal_utility_of_income(
    results: MNLResults,
    data=None,
    *,
    cost_param: str = COST_INCOME,
    income: str = "income",
) -> pd.Series:
    """Per-respondent marginal utility of income, -beta_cost / income.

    Raises ValueError unless the cost coefficient is negative, since only
    then is the log-sum change convertible to money.
    """
    if cost_param not in results.param_names:
        raise ValueError(f"Coefficient '{cost_param}' not in {results.param_names}")
    beta_cost = results.coefficients[cost_param]
    if not beta_cost < 0:
        raise ValueError(
            f"Cost coefficient '{cost_param}' = {beta_cost:.6g} is not negative; "
            "the marginal utility of income is undefined"
        )

    if data is None:
        long_data = results.long_data
    else:
        long_data = balance_long(as_long(data, results.layout), results.alternatives)

    first = long_data.xs(results.alternatives[0], level=ALTERNATIVE)
    inc = first[income].to_numpy(dtype=np.float64)
    return pd.Series(
        -beta_cost / inc,
        index=pd.Index(first.index, name=RESPONDENT),
        name="marginal_utility",
    )


def logsums(results: MNLResults, data=None) -> pd.Series:
    """Per-respondent log-sum under the fitted coefficients."""
    if data is None:
        data = results.long_data
    X, respondents = design_for(results, data)
    return pd.Series(mnl_logsum(results.b, X), index=respondents, name="logsum")


def compensating_variation(
    results: MNLResults,
    base_data,
    new_data,
    *,
    cost_param: str = COST_INCOME,
    income: str = "income",
) -> WelfareResult:
    """Log-sum compensating variation between two scenarios.

    Parameters
    ----------
    results : MNLResults
        Fitted model results.
    base_data, new_data : str, Path or pd.DataFrame
        Baseline and counterfactual surveys over the same respondents.
    cost_param : str
        Name of the cost/income coefficient.
    income : str
        Long-table income column; the baseline income prices utility.

    Returns
    -------
    result : WelfareResult
    """
    ls_base = logsums(results, base_data)
    ls_new = logsums(results, new_data)
    if not ls_base.index.equals(ls_new.index):
        raise ValueError("Baseline and new scenario must cover the same respondents")

    lam = marginal_utility_of_income(
        results, base_data, cost_param=cost_param, income=income
    )
    cv = ((ls_new - ls_base) / lam).rename("cv")

    return WelfareResult(
        logsum_base=ls_base,
        logsum_new=ls_new.rename("logsum"),
        marginal_utility=lam,
        cv=cv,
    )


def scenario_welfare(
    results: MNLResults,
    data,
    column: str,
    multiplier: float,
    **kwargs,
) -> WelfareResult:
    """Compensating variation of scaling ``column`` by ``multiplier``."""
    scenario = apply_scenario(data, column, multiplier, results.layout)
    return compensating_variation(results, data, scenario, **kwargs)
