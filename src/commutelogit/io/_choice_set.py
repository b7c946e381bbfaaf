"""Survey layout, validation, and the wide-to-long choice-set indexer.

A commute survey arrives in wide form: one row per respondent, one column per
alternative per attribute (``cost_bike``, ``time_bike``, ...), plus shared
respondent attributes such as ``income``. The estimator works on the long
form, one row per (respondent, alternative) pair.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from commutelogit.utils._validation import (
    check_finite,
    check_nonnegative,
    check_positive,
    require_columns,
)

RESPONDENT = "respondent"
ALTERNATIVE = "alternative"
CHOSEN = "chosen"


@dataclass(frozen=True)
class SurveyLayout:
    """Column layout of a wide commute survey table.

    Attributes
    ----------
    alternatives : tuple of str
        Alternative labels, in the order used for every array axis.
    choice : str
        Column holding the chosen alternative label.
    varying : dict
        Maps each alternative-specific attribute to a column template with an
        ``{alt}`` placeholder, e.g. ``{"cost": "cost_{alt}"}``.
    shared : tuple of str
        Respondent attributes shared across alternatives.
    positive : tuple of str
        Shared columns that must be strictly positive (income enters as a
        divisor).
    """

    alternatives: tuple[str, ...] = ("bike", "walk", "bus", "car")
    choice: str = "mode"
    varying: dict[str, str] = field(
        default_factory=lambda: {"cost": "cost_{alt}", "time": "time_{alt}"}
    )
    shared: tuple[str, ...] = ("income",)
    positive: tuple[str, ...] = ("income",)

    def column(self, attribute: str, alternative: str) -> str:
        """Wide column name of ``attribute`` for ``alternative``."""
        return self.varying[attribute].format(alt=alternative)

    @property
    def varying_columns(self) -> list[str]:
        """All alternative-specific columns, attribute-major."""
        return [
            self.column(attr, alt)
            for attr in self.varying
            for alt in self.alternatives
        ]

    @property
    def n_alts(self) -> int:
        return len(self.alternatives)


def validate_survey(data: pd.DataFrame, layout: SurveyLayout | None = None) -> None:
    """Check a wide survey table and raise ValueError on the first problem.

    Checks, in order: required columns present, table non-empty, unique row
    labels, a chosen mode on every row, chosen modes drawn from
    ``layout.alternatives``, finite numeric attributes, non-negative
    alternative attributes, and strictly positive ``layout.positive`` columns.
    """
    layout = layout or SurveyLayout()

    require_columns(
        data,
        [layout.choice, *layout.varying_columns, *layout.shared],
        what="survey",
    )
    if len(data) == 0:
        raise ValueError("survey has no rows")
    if data.index.has_duplicates:
        dups = list(data.index[data.index.duplicated()].unique()[:10])
        raise ValueError(
            f"survey has duplicate row labels {dups}; each respondent needs a "
            "unique label (reset the index after concatenating tables)"
        )

    choice = data[layout.choice]
    missing = choice.isna() | (choice.astype(str).str.strip() == "")
    if missing.any():
        rows = list(data.index[missing.to_numpy()][:10])
        raise ValueError(
            f"{int(missing.sum())} respondents have no chosen mode (rows {rows})"
        )

    unknown = ~choice.isin(layout.alternatives)
    if unknown.any():
        labels = sorted(set(choice[unknown].astype(str)))
        raise ValueError(
            f"Unknown chosen modes {labels}; expected one of {list(layout.alternatives)}"
        )

    numeric = [*layout.varying_columns, *layout.shared]
    check_finite(data, numeric)
    check_nonnegative(data, layout.varying_columns)
    check_positive(data, layout.positive)


def validate_long(long_data: pd.DataFrame, layout: SurveyLayout | None = None) -> None:
    """Check a long table indexed by (respondent, alternative).

    Applies the attribute checks of :func:`validate_survey` to the long
    columns and requires a 0/1 ``chosen`` indicator, unique index pairs, and
    alternatives drawn from ``layout.alternatives``.
    """
    layout = layout or SurveyLayout()

    attributes = list(layout.varying)
    require_columns(
        long_data, [*attributes, *layout.shared, CHOSEN], what="long table"
    )
    if len(long_data) == 0:
        raise ValueError("long table has no rows")
    if long_data.index.has_duplicates:
        dups = list(long_data.index[long_data.index.duplicated()].unique()[:10])
        raise ValueError(
            f"long table has duplicate (respondent, alternative) pairs {dups}"
        )

    alts = long_data.index.get_level_values(ALTERNATIVE)
    unknown = sorted(set(alts[~alts.isin(layout.alternatives)].astype(str)))
    if unknown:
        raise ValueError(
            f"Unknown alternatives {unknown}; expected one of {list(layout.alternatives)}"
        )

    check_finite(long_data, [*attributes, *layout.shared, CHOSEN])
    if not long_data[CHOSEN].isin([0, 1]).all():
        raise ValueError(f"Column '{CHOSEN}' must hold 0/1 indicators")
    check_nonnegative(long_data, attributes)
    check_positive(long_data, layout.positive)


def wide_to_long(data: pd.DataFrame, layout: SurveyLayout | None = None) -> pd.DataFrame:
    """Index a wide survey by (respondent, alternative).

    Parameters
    ----------
    data : pd.DataFrame
        Validated wide survey (see :func:`validate_survey`).
    layout : SurveyLayout or None
        Column layout. Defaults to ``SurveyLayout()``.

    Returns
    -------
    long : pd.DataFrame
        ``N * J`` rows indexed by ``(respondent, alternative)`` with one
        column per varying attribute, the shared columns, and a 0/1
        ``chosen`` indicator. Alternatives follow layout order within each
        respondent.

    Examples
    --------
    >>> long = wide_to_long(survey)
    >>> long.loc[(0, "bus"), "time"]
    """
    layout = layout or SurveyLayout()
    alts = list(layout.alternatives)
    N = len(data)
    J = len(alts)

    index = pd.MultiIndex.from_product(
        [data.index, alts], names=[RESPONDENT, ALTERNATIVE]
    )

    columns = {}
    for attr in layout.varying:
        block = data[[layout.column(attr, a) for a in alts]].to_numpy(dtype=np.float64)
        columns[attr] = block.reshape(N * J)
    for col in layout.shared:
        columns[col] = np.repeat(data[col].to_numpy(dtype=np.float64), J)

    chosen = (
        data[layout.choice].to_numpy()[:, None] == np.asarray(alts, dtype=object)[None, :]
    )
    columns[CHOSEN] = chosen.astype(np.int64).reshape(N * J)

    long = pd.DataFrame(columns, index=index)

    per_respondent = chosen.sum(axis=1)
    if not np.all(per_respondent == 1):
        bad = list(data.index[per_respondent != 1][:10])
        raise ValueError(
            f"Choice indicators must sum to 1 per respondent (rows {bad})"
        )

    return long


def balance_long(long_data: pd.DataFrame, alternatives) -> pd.DataFrame:
    """Order a long table respondent-major with ``alternatives`` in order.

    Respondents keep their order of first appearance. Raises ValueError when
    a respondent lacks one of ``alternatives``.
    """
    alts = list(alternatives)
    respondents = long_data.index.get_level_values(RESPONDENT).unique()
    expected = pd.MultiIndex.from_arrays(
        [
            np.repeat(respondents.to_numpy(), len(alts)),
            np.tile(np.asarray(alts, dtype=object), len(respondents)),
        ],
        names=[RESPONDENT, ALTERNATIVE],
    )
    if long_data.index.equals(expected):
        return long_data

    present = expected.isin(long_data.index)
    if not present.all():
        gaps = list(expected[~present][:10])
        raise ValueError(
            f"Incomplete choice sets, missing (respondent, alternative) pairs {gaps}"
        )
    return long_data.loc[expected]


def choice_index(long_data: pd.DataFrame, alternatives) -> np.ndarray:
    """0-based index of the chosen alternative for each respondent."""
    alts = list(alternatives)
    long_data = balance_long(long_data, alts)
    chosen = long_data[CHOSEN].to_numpy().reshape(-1, len(alts))
    if not np.all(chosen.sum(axis=1) == 1):
        raise ValueError("Choice indicators must sum to 1 per respondent")
    return np.argmax(chosen, axis=1).astype(np.int64)
