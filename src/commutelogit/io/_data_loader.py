"""Survey data loading."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from commutelogit.io._choice_set import (
    ALTERNATIVE,
    RESPONDENT,
    SurveyLayout,
    validate_long,
    validate_survey,
    wide_to_long,
)


def load_data(path: str | Path, *, file_type: str | None = None) -> pd.DataFrame:
    """Load a rectangular table from CSV, DAT, or spreadsheet file.

    Parameters
    ----------
    path : str or Path
        Path to data file.
    file_type : str or None
        Force file type ("csv", "dat", "txt", "xlsx", "xls").
        Auto-detected from the suffix if None.

    Returns
    -------
    df : pd.DataFrame
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    if file_type is None:
        file_type = path.suffix.lower().lstrip(".")

    if file_type in ("dat", "txt"):
        # Whitespace-delimited first, then comma
        try:
            return pd.read_csv(path, sep=r"\s+")
        except pd.errors.ParserError:
            return pd.read_csv(path)
    elif file_type in ("xlsx", "xls"):
        return pd.read_excel(path)
    else:
        return pd.read_csv(path)


def load_survey(
    source: str | Path | pd.DataFrame,
    layout: SurveyLayout | None = None,
) -> pd.DataFrame:
    """Load and validate a wide commute survey table.

    Parameters
    ----------
    source : str, Path or pd.DataFrame
        File path (see :func:`load_data`) or an in-memory table.
    layout : SurveyLayout or None
        Column layout. Defaults to ``SurveyLayout()``.

    Returns
    -------
    survey : pd.DataFrame
        Validated copy with the choice column stripped and lower-cased.
        The caller's frame is never modified.
    """
    layout = layout or SurveyLayout()

    if isinstance(source, pd.DataFrame):
        data = source.copy()
    else:
        data = load_data(source)

    if layout.choice in data.columns:
        choice = data[layout.choice]
        data[layout.choice] = choice.where(
            choice.isna(), choice.astype(str).str.strip().str.lower()
        )

    validate_survey(data, layout)
    return data


def as_long(
    data: str | Path | pd.DataFrame,
    layout: SurveyLayout | None = None,
) -> pd.DataFrame:
    """Return the (respondent, alternative) long form of ``data``.

    A frame already indexed by ``(respondent, alternative)`` is checked with
    :func:`validate_long` and returned unchanged; anything else is loaded
    and validated with :func:`load_survey` and indexed with
    :func:`wide_to_long`.
    """
    layout = layout or SurveyLayout()
    if isinstance(data, pd.DataFrame) and list(data.index.names) == [RESPONDENT, ALTERNATIVE]:
        validate_long(data, layout)
        return data
    return wide_to_long(load_survey(data, layout), layout)
