"""MNL log-likelihood, gradient, and Hessian.

For design array X of shape (N, J, K) and coefficients beta (K,):

    V_nj = X_nj . beta
    P_nj = exp(V_nj) / sum_k exp(V_nk)
    LL   = sum_n log P_n,y_n

The objective handed to the optimizer is the negative mean log-likelihood,
which keeps the gradient tolerance independent of the sample size.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy.special import logsumexp


def mnl_log_probabilities(beta: NDArray, X: NDArray) -> NDArray:
    """Log choice probabilities, shape (N, J)."""
    V = X @ beta
    return V - logsumexp(V, axis=1, keepdims=True)


def mnl_loglik(
    beta: NDArray,
    X: NDArray,
    y: NDArray,
    *,
    return_gradient: bool = False,
) -> float | tuple[float, NDArray]:
    """Compute negative mean log-likelihood for the MNL model.

    Parameters
    ----------
    beta : ndarray, shape (K,)
        Coefficient vector.
    X : ndarray, shape (N, J, K)
        Design array.
    y : ndarray, shape (N,)
        Chosen alternative index (0-based) for each observation.
    return_gradient : bool
        If True, also return the gradient.

    Returns
    -------
    nll : float
        Negative mean log-likelihood.
    grad : ndarray (only if return_gradient=True)
        Gradient of the negative mean log-likelihood.
    """
    beta = np.asarray(beta, dtype=np.float64)
    N = X.shape[0]
    rows = np.arange(N)

    log_p = mnl_log_probabilities(beta, X)
    nll = -float(log_p[rows, y].mean())

    if not return_gradient:
        return nll

    P = np.exp(log_p)
    x_bar = np.einsum("nj,njk->nk", P, X)
    grad = -(X[rows, y, :] - x_bar).mean(axis=0)
    return nll, grad


def mnl_hessian(beta: NDArray, X: NDArray) -> NDArray:
    """Hessian of the negative mean log-likelihood, shape (K, K).

    H = (1/N) sum_n sum_j P_nj (x_nj - xbar_n)(x_nj - xbar_n)'

    It does not depend on the observed choices.
    """
    beta = np.asarray(beta, dtype=np.float64)
    P = np.exp(mnl_log_probabilities(beta, X))
    x_bar = np.einsum("nj,njk->nk", P, X)
    D = X - x_bar[:, None, :]
    return np.einsum("nj,njk,njl->kl", P, D, D) / X.shape[0]


def mnl_scores(beta: NDArray, X: NDArray, y: NDArray) -> NDArray:
    """Per-observation score vectors of the log-likelihood, shape (N, K)."""
    P = np.exp(mnl_log_probabilities(beta, X))
    x_bar = np.einsum("nj,njk->nk", P, X)
    return X[np.arange(X.shape[0]), y, :] - x_bar


def null_loglik(n_obs: int, n_alts: int) -> float:
    """Log-likelihood with all coefficients zero (equal shares)."""
    return -n_obs * float(np.log(n_alts))


def constants_only_loglik(y: NDArray, n_alts: int) -> float:
    """Log-likelihood of the market-share model (alternative constants only)."""
    counts = np.bincount(y, minlength=n_alts).astype(np.float64)
    chosen = counts > 0
    return float(np.sum(counts[chosen] * np.log(counts[chosen] / counts.sum())))
