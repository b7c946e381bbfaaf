"""MNL model control structure.

Configures the estimation procedure for the multinomial logit model.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from numpy.typing import NDArray


@dataclass
class MNLControl:
    """Control structure for MNL model estimation.

    Attributes
    ----------
    optimizer : str
        Optimization method: "bfgs", "lbfgsb", or "newton" (Newton-CG with
        the analytic Hessian).
    maxiter : int
        Maximum number of optimizer iterations.
    tol : float
        Convergence tolerance (max-norm of the gradient of the mean
        log-likelihood; step tolerance for "newton").
    verbose : int
        Verbosity: 0=silent, 1=summary, 2=per-iteration.
    startb : NDArray or None
        User-supplied starting values. Zeros if None.
    separation_tol : float
        If every observed choice is predicted with probability above this
        value, the data are treated as separated and estimation fails.
    """

    optimizer: Literal["bfgs", "lbfgsb", "newton"] = "bfgs"
    maxiter: int = 200
    tol: float = 1e-5
    verbose: int = 1
    startb: NDArray | None = None
    separation_tol: float = 1.0 - 1e-6
