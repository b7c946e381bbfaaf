"""MNL model results structure.

Contains estimated coefficients, standard errors, test statistics, fit
measures and the fitted choice probabilities.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from commutelogit.io._choice_set import SurveyLayout
from commutelogit.models.mnl._mnl_control import MNLControl


@dataclass(frozen=True)
class MNLResults:
    """Results from MNL model estimation.

    Attributes
    ----------
    b : NDArray
        Estimated coefficients.
    se : NDArray
        Standard errors (inverse analytic information matrix).
    robust_se : NDArray
        Sandwich standard errors.
    t_stat : NDArray
        t-statistics (b / se).
    p_value : NDArray
        Two-sided p-values.
    gradient : NDArray
        Gradient of the negative mean log-likelihood at convergence.
    ll : float
        Mean log-likelihood (per observation).
    ll_total : float
        Total log-likelihood at convergence.
    ll_null : float
        Total log-likelihood with all coefficients at zero.
    ll_constants : float
        Total log-likelihood of the constants-only (sample shares) model.
    n_obs : int
        Number of respondents.
    param_names : list[str]
        Coefficient names.
    corr_matrix : NDArray
        Correlation matrix of the estimates.
    cov_matrix : NDArray
        Variance-covariance matrix of the estimates.
    n_iterations : int
        Number of optimizer iterations.
    convergence_time : float
        Time in minutes to convergence.
    converged : bool
        Whether optimization converged.
    return_code : int
        Optimizer return code.
    fitted_probs : pd.DataFrame
        Fitted probabilities, one row per respondent, one column per
        alternative.
    choices : NDArray
        Observed choice index (0-based) per respondent.
    long_data : pd.DataFrame
        Estimation sample indexed by (respondent, alternative).
    alternatives : tuple[str, ...]
        Alternative labels.
    reference : str
        Alternative whose constant is fixed at zero.
    spec : dict
        Utility specification used for estimation.
    layout : SurveyLayout
        Wide-table layout used to index the data.
    control : MNLControl
        Control structure used for estimation.
    data_path : str
        Path to data file used.
    """

    b: NDArray
    se: NDArray
    robust_se: NDArray
    t_stat: NDArray
    p_value: NDArray
    gradient: NDArray
    ll: float
    ll_total: float
    ll_null: float
    ll_constants: float
    n_obs: int
    param_names: list[str]
    corr_matrix: NDArray
    cov_matrix: NDArray
    n_iterations: int
    convergence_time: float
    converged: bool
    return_code: int
    fitted_probs: pd.DataFrame
    choices: NDArray
    long_data: pd.DataFrame
    alternatives: tuple[str, ...]
    reference: str
    spec: dict
    layout: SurveyLayout
    control: MNLControl | None = None
    data_path: str = ""

    @property
    def n_params(self) -> int:
        return len(self.param_names)

    @property
    def coefficients(self) -> dict[str, float]:
        """Coefficient name -> estimate."""
        return {name: float(v) for name, v in zip(self.param_names, self.b)}

    @property
    def rho_squared(self) -> float:
        """McFadden's rho-squared against the equal-shares model."""
        return 1.0 - self.ll_total / self.ll_null

    @property
    def adj_rho_squared(self) -> float:
        return 1.0 - (self.ll_total - self.n_params) / self.ll_null

    @property
    def aic(self) -> float:
        return 2.0 * self.n_params - 2.0 * self.ll_total

    @property
    def bic(self) -> float:
        return self.n_params * np.log(self.n_obs) - 2.0 * self.ll_total

    @property
    def observed_shares(self) -> pd.Series:
        """Sample share of each alternative."""
        counts = np.bincount(self.choices, minlength=len(self.alternatives))
        return pd.Series(counts / self.n_obs, index=list(self.alternatives), name="observed")

    @property
    def predicted_shares(self) -> pd.Series:
        """Mean fitted probability of each alternative."""
        return self.fitted_probs.mean(axis=0).rename("predicted")

    @property
    def predicted_counts(self) -> pd.Series:
        """Sum of fitted probabilities of each alternative (expected counts)."""
        return self.fitted_probs.sum(axis=0).rename("expected")

    def summary(self) -> str:
        """Print formatted estimation results.

        Returns
        -------
        text : str
            Formatted summary string.
        """
        lines = []
        sep = "=" * 70

        lines.append(sep)
        lines.append("  commutelogit MNL Estimation Results")
        lines.append(sep)
        lines.append("")

        rc_msg = "normal convergence" if self.return_code == 0 else f"code {self.return_code}"
        lines.append(f"  return code = {self.return_code:>5d}")
        lines.append(f"  {rc_msg}")
        lines.append("")
        lines.append(f"  Number of cases        {self.n_obs:>14d}")
        lines.append(f"  Alternatives           {', '.join(self.alternatives):>14s}")
        lines.append(f"  Reference alternative  {self.reference:>14s}")
        lines.append(f"  Log-likelihood         {self.ll_total:>14.4f}")
        lines.append(f"  LL (equal shares)      {self.ll_null:>14.4f}")
        lines.append(f"  LL (constants only)    {self.ll_constants:>14.4f}")
        lines.append(f"  Rho-squared            {self.rho_squared:>14.4f}")
        lines.append(f"  Adj. rho-squared       {self.adj_rho_squared:>14.4f}")
        lines.append(f"  AIC                    {self.aic:>14.4f}")
        lines.append(f"  BIC                    {self.bic:>14.4f}")
        lines.append("")

        header = (
            f"  {'Parameters':<14s} {'Estimates':>10s} {'Std. err.':>10s} "
            f"{'Rob. s.e.':>10s} {'Est./s.e.':>10s} {'Prob.':>10s}"
        )
        lines.append(header)
        lines.append("  " + "-" * 66)

        for i, name in enumerate(self.param_names):
            lines.append(
                f"  {name:<14s} {self.b[i]:>10.4f} {self.se[i]:>10.4f} "
                f"{self.robust_se[i]:>10.4f} {self.t_stat[i]:>10.3f} {self.p_value[i]:>10.4f}"
            )

        lines.append("")
        lines.append(f"  {'Shares':<14s} {'Observed':>10s} {'Predicted':>10s}")
        lines.append("  " + "-" * 36)
        observed = self.observed_shares
        predicted = self.predicted_shares
        for alt in self.alternatives:
            lines.append(f"  {alt:<14s} {observed[alt]:>10.4f} {predicted[alt]:>10.4f}")

        lines.append("")
        lines.append(f"  Number of iterations   {self.n_iterations:>10d}")
        lines.append(f"  Minutes to convergence {self.convergence_time:>10.5f}")
        lines.append(sep)

        text = "\n".join(lines)
        print(text)
        return text

    def to_dataframe(self) -> pd.DataFrame:
        """Convert coefficient table to pandas DataFrame.

        Returns
        -------
        df : pd.DataFrame
            Columns: Estimate, Std.Error, Robust.SE, t-stat, p-value.
        """
        return pd.DataFrame(
            {
                "Estimate": self.b,
                "Std.Error": self.se,
                "Robust.SE": self.robust_se,
                "t-stat": self.t_stat,
                "p-value": self.p_value,
            },
            index=self.param_names,
        )
