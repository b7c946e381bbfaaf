"""Input validation utilities."""

from __future__ import annotations

import numpy as np
import pandas as pd


def require_columns(data: pd.DataFrame, columns, what: str = "data") -> None:
    """Raise ValueError listing every column of ``columns`` absent from ``data``."""
    missing = [c for c in columns if c not in data.columns]
    if missing:
        raise ValueError(f"{what} is missing required columns: {missing}")


def _bad_rows(mask: pd.Series) -> list:
    return list(mask.index[mask.to_numpy()][:10])


def check_finite(data: pd.DataFrame, columns) -> None:
    """Raise ValueError if any of ``columns`` holds a missing or non-finite value."""
    for col in columns:
        values = pd.to_numeric(data[col], errors="coerce").to_numpy(dtype=np.float64)
        bad = ~np.isfinite(values)
        if bad.any():
            rows = _bad_rows(pd.Series(bad, index=data.index))
            raise ValueError(
                f"Column '{col}' has {int(bad.sum())} missing or non-numeric "
                f"values (rows {rows})"
            )


def check_nonnegative(data: pd.DataFrame, columns) -> None:
    """Raise ValueError if any of ``columns`` holds a negative value."""
    for col in columns:
        bad = data[col] < 0
        if bad.any():
            raise ValueError(
                f"Column '{col}' must be non-negative; {int(bad.sum())} negative "
                f"values (rows {_bad_rows(bad)})"
            )


def check_positive(data: pd.DataFrame, columns) -> None:
    """Raise ValueError if any of ``columns`` holds a value <= 0."""
    for col in columns:
        bad = data[col] <= 0
        if bad.any():
            raise ValueError(
                f"Column '{col}' must be strictly positive; {int(bad.sum())} "
                f"non-positive values (rows {_bad_rows(bad)})"
            )
