"""SciPy optimization wrapper."""

from __future__ import annotations

import time
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from scipy.optimize import minimize

from commutelogit.optim._convergence import check_convergence

_METHODS = {
    "bfgs": "BFGS",
    "lbfgsb": "L-BFGS-B",
    "newton": "Newton-CG",
}


@dataclass
class OptimResult:
    """Optimization result container.

    Attributes
    ----------
    x : NDArray
        Optimal parameters.
    fun : float
        Objective value at optimum.
    grad : NDArray
        Gradient at optimum.
    n_iter : int
        Number of iterations.
    converged : bool
        Whether optimization converged.
    return_code : int
        Return code (0 = converged).
    message : str
        Status message.
    """

    x: NDArray
    fun: float
    grad: NDArray
    n_iter: int
    converged: bool
    return_code: int
    message: str


def minimize_scipy(
    func,
    x0: NDArray,
    *,
    method: str = "bfgs",
    maxiter: int = 200,
    tol: float = 1e-5,
    verbose: int = 1,
    hess=None,
) -> OptimResult:
    """Minimize a smooth scalar function with scipy.optimize.minimize.

    Parameters
    ----------
    func : callable
        func(x) -> (f, grad).
    x0 : ndarray
        Initial parameter vector.
    method : str
        "bfgs", "lbfgsb", or "newton".
    maxiter : int
        Maximum iterations.
    tol : float
        Gradient tolerance ("bfgs", "lbfgsb") or step tolerance ("newton").
    verbose : int
        0=silent, 1=summary, 2=per-iteration.
    hess : callable or None
        hess(x) -> ndarray. Required for "newton".

    Returns
    -------
    result : OptimResult
    """
    if method not in _METHODS:
        raise ValueError(f"Unknown optimizer: {method!r}. Use one of {list(_METHODS)}.")
    if method == "newton" and hess is None:
        raise ValueError("The 'newton' optimizer requires a Hessian function")

    x0 = np.asarray(x0, dtype=np.float64)

    iteration_count = [0]
    start_time = time.time()

    def callback(xk):
        iteration_count[0] += 1
        if verbose >= 2:
            elapsed = time.time() - start_time
            fval, _ = func(xk)
            print(f"  Iter {iteration_count[0]:4d}: f = {fval:.8f}  ({elapsed:.1f}s)")

    def scipy_func(x):
        f, g = func(x)
        return float(f), np.asarray(g, dtype=np.float64)

    if method == "newton":
        options = {"maxiter": maxiter, "xtol": tol}
    else:
        options = {"maxiter": maxiter, "gtol": tol}

    result = minimize(
        scipy_func,
        x0,
        method=_METHODS[method],
        jac=True,
        hess=hess,
        options=options,
        callback=callback,
    )

    grad = np.asarray(result.jac) if result.jac is not None else np.zeros_like(x0)

    # BFGS may stop on precision loss at the optimum; accept a small gradient
    converged = bool(result.success) or (
        method != "newton" and check_convergence(grad, 10.0 * tol)
    )
    return_code = 0 if converged else int(result.status) or 2

    if verbose >= 1:
        elapsed = time.time() - start_time
        status = "converged" if converged else "did not converge"
        print(f"  Optimization {status} in {result.nit} iterations ({elapsed:.2f}s)")
        print(f"  Final objective: {result.fun:.8f}")

    return OptimResult(
        x=np.asarray(result.x, dtype=np.float64),
        fun=float(result.fun),
        grad=grad,
        n_iter=int(result.nit),
        converged=converged,
        return_code=return_code,
        message=str(result.message),
    )
