"""Policy counterfactuals for the MNL commute model.

A scenario scales one input column (for example ``time_bus`` or ``income``)
by a multiplier for every respondent. The scaled table is re-indexed and
re-scored with the fitted coefficients held fixed; summing the predicted
probabilities over respondents gives the expected number of users of each
mode.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass

import numpy as np
import pandas as pd

from commutelogit.io._choice_set import SurveyLayout, validate_survey
from commutelogit.io._data_loader import load_survey
from commutelogit.models.mnl._mnl_forecast import mnl_predict
from commutelogit.models.mnl._mnl_results import MNLResults


@dataclass(frozen=True)
class PolicyResult:
    """Response curve of a swept scenario.

    Attributes
    ----------
    column : str
        Scaled input column.
    multipliers : tuple of float
        Grid of multipliers, in evaluation order.
    counts : pd.DataFrame
        Expected counts, index = multiplier, columns = alternatives.
    base_counts : pd.Series
        Expected counts with the data unchanged (multiplier 1).
    n_obs : int
        Number of respondents.
    """

    column: str
    multipliers: tuple[float, ...]
    counts: pd.DataFrame
    base_counts: pd.Series
    n_obs: int

    @property
    def shares(self) -> pd.DataFrame:
        """Predicted mode shares per multiplier."""
        return self.counts / self.n_obs

    @property
    def pct_change(self) -> pd.DataFrame:
        """Percentage change of expected counts relative to the baseline."""
        return (self.counts - self.base_counts) / self.base_counts * 100.0


def _check_multiplier(multiplier) -> float:
    if isinstance(multiplier, bool) or not isinstance(multiplier, numbers.Real):
        raise ValueError(f"Multiplier must be a real number, got {multiplier!r}")
    multiplier = float(multiplier)
    if not np.isfinite(multiplier):
        raise ValueError(f"Multiplier must be finite, got {multiplier}")
    return multiplier


def apply_scenario(
    data,
    column: str,
    multiplier: float,
    layout: SurveyLayout | None = None,
) -> pd.DataFrame:
    """Scale one survey column by ``multiplier`` for every respondent.

    Parameters
    ----------
    data : str, Path or pd.DataFrame
        Wide survey table.
    column : str
        Alternative-specific (``time_bus``) or shared (``income``) column.
    multiplier : float
        Scale factor.
    layout : SurveyLayout or None
        Wide-table layout. Defaults to ``SurveyLayout()``.

    Returns
    -------
    scenario : pd.DataFrame
        Validated wide table with ``column`` scaled. ``data`` is unchanged.

    Raises
    ------
    ValueError
        If the column is not a numeric survey column, the multiplier is not
        a finite real number, or the scaled table leaves the valid domain
        (negative time or cost, non-positive income).
    """
    layout = layout or SurveyLayout()
    multiplier = _check_multiplier(multiplier)

    numeric = [*layout.varying_columns, *layout.shared]
    if column not in numeric:
        raise ValueError(f"Cannot scale '{column}'; expected one of {numeric}")

    scenario = load_survey(data, layout)
    scenario[column] = scenario[column] * multiplier

    try:
        validate_survey(scenario, layout)
    except ValueError as exc:
        raise ValueError(
            f"Multiplier {multiplier} on '{column}' is out of domain: {exc}"
        ) from exc
    return scenario


def simulate_scenario(
    results: MNLResults,
    data,
    column: str,
    multiplier: float,
) -> pd.Series:
    """Expected mode counts under one scenario, coefficients held fixed.

    Parameters
    ----------
    results : MNLResults
        Fitted model results.
    data : str, Path or pd.DataFrame
        Wide survey table.
    column : str
        Column to scale.
    multiplier : float
        Scale factor.

    Returns
    -------
    counts : pd.Series
        Sum of predicted probabilities per alternative.
    """
    scenario = apply_scenario(data, column, multiplier, results.layout)
    probs = mnl_predict(results, scenario)
    return probs.sum(axis=0).rename(float(multiplier))


def simulate_policy(
    results: MNLResults,
    data,
    column: str = "time_bus",
    multipliers=None,
) -> PolicyResult:
    """Sweep a grid of multipliers and collect expected mode counts.

    Parameters
    ----------
    results : MNLResults
        Fitted model results.
    data : str, Path or pd.DataFrame
        Wide survey table.
    column : str
        Column to scale.
    multipliers : array-like or None
        Grid of multipliers. Defaults to ``numpy.linspace(0.5, 1.5, 11)``.
        Grid points are independent of each other.

    Returns
    -------
    result : PolicyResult
    """
    if multipliers is None:
        multipliers = np.linspace(0.5, 1.5, 11)
    grid = tuple(_check_multiplier(m) for m in np.atleast_1d(multipliers).tolist())

    base = load_survey(data, results.layout)
    base_counts = mnl_predict(results, base).sum(axis=0).rename(1.0)

    rows = []
    for m in grid:
        if m == 1.0:
            rows.append(base_counts.rename(m))
        else:
            rows.append(simulate_scenario(results, base, column, m))

    counts = pd.DataFrame(rows, columns=list(results.alternatives))
    counts.index = pd.Index(grid, name="multiplier")

    return PolicyResult(
        column=column,
        multipliers=grid,
        counts=counts,
        base_counts=base_counts.rename("baseline"),
        n_obs=len(base),
    )
