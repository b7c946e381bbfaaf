"""Data loading, choice-set indexing and specification parsing."""

from commutelogit.io._choice_set import (
    ALTERNATIVE,
    CHOSEN,
    RESPONDENT,
    SurveyLayout,
    balance_long,
    choice_index,
    validate_long,
    validate_survey,
    wide_to_long,
)
from commutelogit.io._data_loader import as_long, load_data, load_survey
from commutelogit.io._spec_parser import COST_INCOME, commute_spec, parse_spec

__all__ = [
    "ALTERNATIVE",
    "CHOSEN",
    "COST_INCOME",
    "RESPONDENT",
    "SurveyLayout",
    "as_long",
    "balance_long",
    "choice_index",
    "commute_spec",
    "load_data",
    "load_survey",
    "parse_spec",
    "validate_long",
    "validate_survey",
    "wide_to_long",
]
