"""Parse variable specifications into design arrays.

Converts the dict-based utility specification into the numeric design array
used by the MNL estimator and forecaster.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from commutelogit.io._choice_set import balance_long

# Name of the generic cost/income coefficient in commute_spec
COST_INCOME = "COST_INC"


def parse_spec(
    spec: dict,
    long_data: pd.DataFrame,
    alternatives,
) -> tuple[NDArray, list[str]]:
    """Parse variable specification dict into design array.

    Parameters
    ----------
    spec : dict
        Maps coefficient names to per-alternative entries.
        Format: {coef_name: {alt_name: entry, ...}, ...}
        Entries:
        - "sero": zero (variable not in this alternative's utility);
          alternatives left out of the inner dict are "sero" too
        - "uno": one (alternative-specific constant)
        - column name: that column of the long table
        - (numerator, denominator): ratio of two long-table columns
        - int or float: that constant
    long_data : pd.DataFrame
        Long table indexed by (respondent, alternative), see
        :func:`commutelogit.io.wide_to_long`.
    alternatives : sequence of str
        Alternative labels, fixing the order of axis 1.

    Returns
    -------
    X : ndarray, shape (N, n_alts, n_vars)
        Design array.
    var_names : list of str
        Coefficient names in order.

    Examples
    --------
    >>> spec = {
    ...     "ASC_BUS": {"bus": "uno"},
    ...     "COST_INC": {a: ("cost", "income") for a in alts},
    ...     "TIME_BUS": {"bus": "time"},
    ... }
    >>> X, names = parse_spec(spec, long_data, alts)
    """
    alts = list(alternatives)
    long_data = balance_long(long_data, alts)
    n_alts = len(alts)
    N = len(long_data) // n_alts
    var_names = list(spec.keys())

    X = np.zeros((N, n_alts, len(var_names)), dtype=np.float64)

    for v_idx, var_name in enumerate(var_names):
        alt_spec = spec[var_name]
        unknown = [a for a in alt_spec if a not in alts]
        if unknown:
            raise ValueError(
                f"Variable '{var_name}' names unknown alternatives {unknown}"
            )

        for a_idx, alt_name in enumerate(alts):
            entry = alt_spec.get(alt_name, "sero")
            X[:, a_idx, v_idx] = _column_values(entry, long_data, a_idx, n_alts, var_name)

    return X, var_names


def _column_values(entry, long_data, a_idx, n_alts, var_name) -> NDArray:
    if isinstance(entry, str):
        keyword = entry.strip().lower()
        if keyword == "sero":
            return 0.0
        if keyword == "uno":
            return 1.0
        return _long_column(long_data, entry, var_name)[a_idx::n_alts]
    if isinstance(entry, tuple) and len(entry) == 2:
        num = _long_column(long_data, entry[0], var_name)[a_idx::n_alts]
        den = _long_column(long_data, entry[1], var_name)[a_idx::n_alts]
        return num / den
    if isinstance(entry, (int, float)):
        return float(entry)
    raise ValueError(f"Unsupported spec entry {entry!r} for variable '{var_name}'")


def _long_column(long_data, col, var_name) -> NDArray:
    if col not in long_data.columns:
        raise ValueError(f"Column '{col}' not found in data for variable '{var_name}'")
    return long_data[col].to_numpy(dtype=np.float64)


def commute_spec(
    alternatives=("bike", "walk", "bus", "car"),
    reference: str = "car",
    *,
    cost: str = "cost",
    time: str = "time",
    income: str = "income",
) -> dict:
    """Reference commute-mode specification.

    V(alt) = ASC_alt + COST_INC * cost(alt) / income + TIME_alt * time(alt)

    One alternative-specific constant per non-reference alternative, a single
    generic cost-over-income coefficient, and alternative-specific time
    coefficients.

    Parameters
    ----------
    alternatives : sequence of str
        Alternative labels.
    reference : str
        Alternative whose constant is fixed at zero.
    cost, time, income : str
        Long-table column names.

    Returns
    -------
    spec : dict
        Specification for :func:`parse_spec`.
    """
    alts = list(alternatives)
    if reference not in alts:
        raise ValueError(f"Reference alternative '{reference}' not in {alts}")

    spec = {}
    for alt in alts:
        if alt != reference:
            spec[f"ASC_{alt.upper()}"] = {alt: "uno"}
    spec[COST_INCOME] = {alt: (cost, income) for alt in alts}
    for alt in alts:
        spec[f"TIME_{alt.upper()}"] = {alt: time}
    return spec

