"""MNL model class: the main user-facing interface."""

from __future__ import annotations

import time
from pathlib import Path

import numpy as np
import pandas as pd
from scipy.optimize import linprog
from scipy.stats import norm

from commutelogit.io._choice_set import RESPONDENT, SurveyLayout, balance_long, choice_index
from commutelogit.io._data_loader import as_long
from commutelogit.io._spec_parser import commute_spec, parse_spec
from commutelogit.models._base import BaseModel
from commutelogit.models.mnl._mnl_control import MNLControl
from commutelogit.models.mnl._mnl_forecast import mnl_probabilities
from commutelogit.models.mnl._mnl_loglik import (
    constants_only_loglik,
    mnl_hessian,
    mnl_loglik,
    mnl_scores,
    null_loglik,
)
from commutelogit.models.mnl._mnl_results import MNLResults
from commutelogit.optim._convergence import (
    compute_robust_standard_errors,
    compute_standard_errors,
    invert_information,
)
from commutelogit.optim._scipy_optim import minimize_scipy


class EstimationError(RuntimeError):
    """Raised when the MNL model cannot be identified or estimated."""


class MNLModel(BaseModel):
    """Multinomial logit model of commute-mode choice.

    Parameters
    ----------
    data : str, Path or pd.DataFrame
        Path to a survey file, a wide survey table, or a long table indexed
        by (respondent, alternative).
    layout : SurveyLayout or None
        Wide-table layout. Defaults to ``SurveyLayout()``.
    spec : dict or None
        Utility specification (see :func:`commutelogit.io.parse_spec`).
        Defaults to :func:`commutelogit.io.commute_spec` for the layout's
        alternatives and ``reference``.
    reference : str
        Alternative whose constant is fixed at zero.
    control : MNLControl or None
        Estimation control structure.

    Examples
    --------
    >>> model = MNLModel("COMMUTE.csv", control=MNLControl(verbose=0))
    >>> results = model.fit()
    >>> results.summary()
    """

    def __init__(
        self,
        data: str | Path | pd.DataFrame,
        layout: SurveyLayout | None = None,
        spec: dict | None = None,
        reference: str = "car",
        control: MNLControl | None = None,
    ):
        self.control = control or MNLControl()
        self.layout = layout or SurveyLayout()
        self.alternatives = tuple(self.layout.alternatives)
        self.n_alts = len(self.alternatives)

        if reference not in self.alternatives:
            raise ValueError(
                f"Reference alternative '{reference}' not in {list(self.alternatives)}"
            )
        self.reference = reference

        self.spec = spec if spec is not None else commute_spec(self.alternatives, reference)
        self._check_reference_constant()

        if isinstance(data, pd.DataFrame):
            self.data_path = "<DataFrame>"
        else:
            self.data_path = str(data)

        self.long_data = balance_long(as_long(data, self.layout), self.alternatives)
        self.X, self.var_names = parse_spec(self.spec, self.long_data, self.alternatives)
        self.n_beta = len(self.var_names)

        self._build_choice_vector()

    def _check_reference_constant(self) -> None:
        for name, alt_spec in self.spec.items():
            entry = alt_spec.get(self.reference)
            if isinstance(entry, str) and entry.strip().lower() == "uno":
                raise ValueError(
                    f"Variable '{name}' gives the reference alternative "
                    f"'{self.reference}' a constant; its constant is fixed at zero"
                )

    def _build_choice_vector(self) -> None:
        """Extract choice vector and respondent index from data."""
        self.y = choice_index(self.long_data, self.alternatives)
        self.N = len(self.y)
        self.respondents = pd.Index(
            self.long_data.index.get_level_values(RESPONDENT)[:: self.n_alts],
            name=RESPONDENT,
        )

    def check_identification(self) -> None:
        """Raise EstimationError if the coefficients are not identified.

        Every alternative must be chosen at least once, and the design,
        differenced against each respondent's mean over alternatives, must
        have full column rank.
        """
        counts = np.bincount(self.y, minlength=self.n_alts)
        never = [a for a, c in zip(self.alternatives, counts) if c == 0]
        if never:
            raise EstimationError(
                f"Alternatives {never} are never chosen; their utilities are not identified"
            )

        D = self.X - self.X.mean(axis=1, keepdims=True)
        D = D.reshape(-1, self.n_beta)
        flat = [
            self.var_names[k] for k in range(self.n_beta) if np.allclose(D[:, k], 0.0)
        ]
        if flat:
            raise EstimationError(
                f"Variables {flat} do not vary across alternatives and are not identified"
            )
        if np.linalg.matrix_rank(D) < self.n_beta:
            raise EstimationError(
                f"Design is collinear; variables {self.var_names} are not jointly identified"
            )

    def check_separation(self) -> None:
        """Raise EstimationError if the observed choices are separated.

        The data are (quasi-)separated when some direction d satisfies
        (x_{n,y_n} - x_{nj}) . d >= 0 for every respondent n and alternative
        j, with at least one strict inequality. Moving beta along d then
        raises the likelihood without bound and no finite maximum exists.
        The direction is searched for with a linear program over the box
        |d| <= 1 that maximises the summed utility advantage of the chosen
        alternatives.
        """
        rows = np.arange(self.N)
        chosen = self.X[rows, self.y, :]
        D = (chosen[:, None, :] - self.X).reshape(-1, self.n_beta)
        D = D[np.any(D != 0.0, axis=1)]
        if D.shape[0] == 0:
            return

        res = linprog(
            -D.sum(axis=0),
            A_ub=-D,
            b_ub=np.zeros(D.shape[0]),
            bounds=[(-1.0, 1.0)] * self.n_beta,
            method="highs",
        )
        if not res.success:
            raise EstimationError(f"Separation check failed: {res.message}")

        advantage = D @ res.x
        scale = max(1.0, float(np.abs(D).max()))
        if -res.fun > 1e-6 * scale and advantage.min() >= -1e-9 * scale:
            direction = {
                name: round(float(v), 4)
                for name, v in zip(self.var_names, res.x)
                if abs(v) > 1e-8
            }
            raise EstimationError(
                "The observed choices are perfectly predicted along the direction "
                f"{direction}; the data are separated and the coefficients diverge"
            )

    def fit(self) -> MNLResults:
        """Estimate the MNL model by maximum likelihood.

        Returns
        -------
        results : MNLResults
            Estimation results.

        Raises
        ------
        EstimationError
            If the model is not identified, the optimizer does not converge,
            the information matrix is singular, or the data are separated.
        """
        if self.control.verbose >= 1:
            print(f"Estimating MNL model with {self.N} observations, "
                  f"{self.n_alts} alternatives, {self.n_beta} parameters")
            print(f"  Reference alternative: {self.reference}")

        self.check_identification()
        self.check_separation()

        if self.control.startb is not None:
            theta0 = np.asarray(self.control.startb, dtype=np.float64).copy()
            if theta0.shape != (self.n_beta,):
                raise ValueError(
                    f"startb has shape {theta0.shape}, expected ({self.n_beta},)"
                )
        else:
            theta0 = np.zeros(self.n_beta, dtype=np.float64)

        def objective(theta):
            return mnl_loglik(theta, self.X, self.y, return_gradient=True)

        def hessian(theta):
            return mnl_hessian(theta, self.X)

        start_time = time.time()

        result = minimize_scipy(
            objective,
            theta0,
            method=self.control.optimizer,
            maxiter=self.control.maxiter,
            tol=self.control.tol,
            verbose=self.control.verbose,
            hess=hessian if self.control.optimizer == "newton" else None,
        )

        elapsed = (time.time() - start_time) / 60.0  # minutes

        if not result.converged:
            raise EstimationError(
                f"MNL estimation did not converge after {result.n_iter} iterations: "
                f"{result.message}"
            )

        b = result.x

        probs = mnl_probabilities(b, self.X)
        chosen = probs[np.arange(self.N), self.y]
        if chosen.min() > self.control.separation_tol:
            raise EstimationError(
                "Every observed choice is predicted with probability "
                f"> {self.control.separation_tol}; the data are separated and "
                "the coefficients diverge"
            )

        try:
            cov = invert_information(self.N * mnl_hessian(b, self.X))
        except np.linalg.LinAlgError as exc:
            raise EstimationError(f"Coefficients are not identified: {exc}") from exc

        se = compute_standard_errors(cov)
        robust_se = compute_robust_standard_errors(cov, mnl_scores(b, self.X, self.y))

        t_stat = b / se
        p_value = 2.0 * (1.0 - norm.cdf(np.abs(t_stat)))

        corr_matrix = cov / np.outer(se, se)
        np.fill_diagonal(corr_matrix, 1.0)

        fitted = pd.DataFrame(probs, index=self.respondents, columns=list(self.alternatives))

        return MNLResults(
            b=b,
            se=se,
            robust_se=robust_se,
            t_stat=t_stat,
            p_value=p_value,
            gradient=result.grad,
            ll=-result.fun,
            ll_total=-result.fun * self.N,
            ll_null=null_loglik(self.N, self.n_alts),
            ll_constants=constants_only_loglik(self.y, self.n_alts),
            n_obs=self.N,
            param_names=list(self.var_names),
            corr_matrix=corr_matrix,
            cov_matrix=cov,
            n_iterations=result.n_iter,
            convergence_time=elapsed,
            converged=result.converged,
            return_code=result.return_code,
            fitted_probs=fitted,
            choices=self.y.copy(),
            long_data=self.long_data,
            alternatives=self.alternatives,
            reference=self.reference,
            spec=self.spec,
            layout=self.layout,
            control=self.control,
            data_path=self.data_path,
        )
