"""MNL model prediction and forecasting."""

from __future__ import annotations

import numpy as np
import pandas as pd
from numpy.typing import NDArray
from scipy.special import logsumexp

from commutelogit.io._choice_set import RESPONDENT, balance_long
from commutelogit.io._data_loader import as_long
from commutelogit.io._spec_parser import parse_spec
from commutelogit.models.mnl._mnl_loglik import mnl_log_probabilities
from commutelogit.models.mnl._mnl_results import MNLResults


def mnl_utilities(beta: NDArray, X: NDArray) -> NDArray:
    """Systematic utilities V = X beta, shape (N, J)."""
    return X @ np.asarray(beta, dtype=np.float64)


def mnl_probabilities(beta: NDArray, X: NDArray) -> NDArray:
    """Logit choice probabilities, shape (N, J); rows sum to one."""
    return np.exp(mnl_log_probabilities(np.asarray(beta, dtype=np.float64), X))


def mnl_logsum(beta: NDArray, X: NDArray) -> NDArray:
    """Log-sum of exponentiated utilities per observation, shape (N,)."""
    return logsumexp(mnl_utilities(beta, X), axis=1)


def design_for(results: MNLResults, data) -> tuple[NDArray, pd.Index]:
    """Design array and respondent index for new data under a fitted spec.

    Parameters
    ----------
    results : MNLResults
        Fitted model results (supplies spec, layout and alternatives).
    data : str, Path or pd.DataFrame
        Wide survey (validated and indexed here) or a long table indexed by
        (respondent, alternative).

    Returns
    -------
    X : ndarray, shape (N, n_alts, n_vars)
    respondents : pd.Index
    """
    alts = list(results.alternatives)
    long_data = balance_long(as_long(data, results.layout), alts)
    X, names = parse_spec(results.spec, long_data, alts)
    if names != list(results.param_names):
        raise ValueError(
            f"Specification yields {names}, results hold {list(results.param_names)}"
        )
    respondents = long_data.index.get_level_values(RESPONDENT)[:: len(alts)]
    return X, pd.Index(respondents, name=RESPONDENT)


def mnl_predict(results: MNLResults, data=None) -> pd.DataFrame:
    """Predict choice probabilities with the fitted coefficients.

    Parameters
    ----------
    results : MNLResults
        Fitted model results.
    data : str, Path, pd.DataFrame or None
        New observations (wide or long). If None, the fitted probabilities
        are returned.

    Returns
    -------
    probs : pd.DataFrame
        One row per respondent, one column per alternative.
    """
    if data is None:
        return results.fitted_probs.copy()
    X, respondents = design_for(results, data)
    return pd.DataFrame(
        mnl_probabilities(results.b, X),
        index=respondents,
        columns=list(results.alternatives),
    )


def mnl_predict_choice(results: MNLResults, data=None) -> pd.Series:
    """Predict the most likely alternative for each respondent."""
    probs = mnl_predict(results, data)
    return probs.idxmax(axis=1).rename("predicted")
