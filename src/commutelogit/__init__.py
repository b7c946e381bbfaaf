"""commutelogit: multinomial logit analysis of commute-mode choice."""

__version__ = "0.1.0"
