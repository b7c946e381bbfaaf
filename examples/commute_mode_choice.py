"""Example: commute-mode MNL, elasticities, bus-time and income policies.

Runs the full analysis on COMMUTE.csv (generate it first with
``python examples/data/generate_commute.py``):

1. estimate the MNL with car as the reference alternative
2. car cost elasticities per respondent
3. sweep bus travel time and income from 50% to 150%
4. consumer-surplus change of a 20% bus travel-time cut
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import numpy as np

from commutelogit.io import load_survey
from commutelogit.models.mnl import (
    MNLControl,
    MNLModel,
    elasticity_density,
    mnl_elasticities,
    scenario_welfare,
    simulate_policy,
    summarize_elasticities,
)

data_path = os.path.join(os.path.dirname(__file__), "data", "COMMUTE.csv")
survey = load_survey(data_path)

print("=" * 50)
print("Step 1: Estimating the commute-mode MNL")
print("=" * 50)
model = MNLModel(survey, reference="car", control=MNLControl(verbose=1))
results = model.fit()
results.summary()

print("\n" + "=" * 50)
print("Step 2: Car cost elasticities")
print("=" * 50)
elast = mnl_elasticities(results, alternative="car")
print(summarize_elasticities(elast).round(4))
grid, density = elasticity_density(elast["own"])
print(f"Own-price density mode at {grid[np.argmax(density)]:.4f}")

print("\n" + "=" * 50)
print("Step 3: Bus travel-time policy")
print("=" * 50)
bus = simulate_policy(results, survey, column="time_bus")
print(bus.counts.round(1))
print("\nPercent change vs. baseline:")
print(bus.pct_change.round(2))

print("\n" + "=" * 50)
print("Step 4: Income policy")
print("=" * 50)
inc = simulate_policy(results, survey, column="income")
print(inc.shares.round(4))

print("\n" + "=" * 50)
print("Step 5: Welfare of a 20% bus travel-time cut")
print("=" * 50)
welfare = scenario_welfare(results, survey, "time_bus", 0.8)
print(f"Mean compensating variation:  {welfare.mean:.4f}")
print(f"Total consumer-surplus change: {welfare.total:.2f}")
