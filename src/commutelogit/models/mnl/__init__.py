"""Multinomial Logit (MNL) model of commute-mode choice."""

from commutelogit.models.mnl._mnl_control import MNLControl
from commutelogit.models.mnl._mnl_results import MNLResults
from commutelogit.models.mnl._mnl_model import EstimationError, MNLModel
from commutelogit.models.mnl._mnl_forecast import (
    design_for,
    mnl_logsum,
    mnl_predict,
    mnl_predict_choice,
    mnl_probabilities,
    mnl_utilities,
)
from commutelogit.models.mnl._mnl_elasticity import (
    aggregate_elasticity,
    elasticity_density,
    mnl_elasticities,
    summarize_elasticities,
)
from commutelogit.models.mnl._mnl_policy import (
    PolicyResult,
    apply_scenario,
    simulate_policy,
    simulate_scenario,
)
from commutelogit.models.mnl._mnl_welfare import (
    WelfareResult,
    compensating_variation,
    logsums,
    marginal_utility_of_income,
    scenario_welfare,
)

__all__ = [
    "EstimationError",
    "MNLControl",
    "MNLModel",
    "MNLResults",
    "PolicyResult",
    "WelfareResult",
    "aggregate_elasticity",
    "apply_scenario",
    "compensating_variation",
    "design_for",
    "elasticity_density",
    "logsums",
    "marginal_utility_of_income",
    "mnl_elasticities",
    "mnl_logsum",
    "mnl_predict",
    "mnl_predict_choice",
    "mnl_probabilities",
    "mnl_utilities",
    "scenario_welfare",
    "simulate_policy",
    "simulate_scenario",
    "summarize_elasticities",
]
