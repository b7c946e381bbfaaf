"""Numerical optimization and inference helpers."""

from commutelogit.optim._convergence import (
    check_convergence,
    compute_robust_standard_errors,
    compute_standard_errors,
    invert_information,
)
from commutelogit.optim._scipy_optim import OptimResult, minimize_scipy

__all__ = [
    "OptimResult",
    "check_convergence",
    "compute_robust_standard_errors",
    "compute_standard_errors",
    "invert_information",
    "minimize_scipy",
]
