"""Convergence diagnostics and standard error computation."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


def check_convergence(grad: NDArray, tol: float = 1e-5) -> bool:
    """Check if the gradient's max-norm is below tolerance."""
    return bool(np.max(np.abs(grad)) < tol)


def invert_information(information: NDArray, *, rcond: float = 1e-12) -> NDArray:
    """Invert an observed information matrix.

    Parameters
    ----------
    information : ndarray, shape (p, p)
        Negative Hessian of the total log-likelihood at the optimum.
    rcond : float
        Smallest admissible ratio of the smallest to the largest eigenvalue.

    Returns
    -------
    cov : ndarray, shape (p, p)
        Asymptotic covariance matrix of the estimates.

    Raises
    ------
    numpy.linalg.LinAlgError
        If the matrix is not finite, not positive definite, or too
        ill-conditioned to invert reliably (parameters not identified).
    """
    if not np.all(np.isfinite(information)):
        raise np.linalg.LinAlgError("information matrix has non-finite entries")

    sym = 0.5 * (information + information.T)
    eigvals = np.linalg.eigvalsh(sym)
    if eigvals[-1] <= 0 or eigvals[0] <= rcond * eigvals[-1]:
        raise np.linalg.LinAlgError(
            f"information matrix is singular (eigenvalues {eigvals[0]:.3g} .. {eigvals[-1]:.3g})"
        )
    return np.linalg.inv(sym)


def compute_standard_errors(cov: NDArray) -> NDArray:
    """Standard errors from a covariance matrix: SE_i = sqrt(V_ii)."""
    return np.sqrt(np.abs(np.diag(cov)))


def compute_robust_standard_errors(
    cov: NDArray, grad_contributions: NDArray
) -> NDArray:
    """Compute sandwich (robust) standard errors.

    V = H^{-1} B H^{-1} where B = sum(g_i @ g_i.T)

    Parameters
    ----------
    cov : ndarray, shape (p, p)
        Inverse of the information matrix.
    grad_contributions : ndarray, shape (N, p)
        Per-observation score vectors.

    Returns
    -------
    se : ndarray, shape (p,)
        Robust standard errors.
    """
    B = grad_contributions.T @ grad_contributions
    V = cov @ B @ cov
    return np.sqrt(np.abs(np.diag(V)))
