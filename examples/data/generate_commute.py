"""
Generate synthetic COMMUTE.csv dataset for commutelogit examples.

Dataset description:
- 1,000 college students choosing how to get to campus
- 4 modes: bike, walk, bus, car (car is the reference alternative)
- Per-mode cost (dollars per trip) and travel time (minutes), plus income
  (thousands of dollars per year)

Choices are drawn from an MNL with the same asymmetric specification the
library estimates: alternative-specific constants, one generic cost/income
coefficient, and alternative-specific time coefficients.
"""

import os

import numpy as np
import pandas as pd

# -------------------------------------------------------------------
# Configuration
# -------------------------------------------------------------------
np.random.seed(42)
N = 1000  # number of respondents

ALTERNATIVES = ["bike", "walk", "bus", "car"]

# -------------------------------------------------------------------
# Level-of-service attributes
# -------------------------------------------------------------------

# Travel time (minutes)
time_bike = np.random.uniform(5, 30, N)
time_walk = np.random.uniform(8, 50, N)
time_bus = np.random.uniform(10, 40, N)
time_car = np.random.uniform(5, 25, N)

# Cost per trip (dollars); walking is free
cost_bike = np.random.uniform(0.0, 0.5, N)
cost_walk = np.zeros(N)
cost_bus = np.random.uniform(0.5, 2.5, N)
cost_car = np.random.uniform(2.0, 8.0, N)

# Income (thousands of dollars per year)
income = np.random.uniform(5.0, 60.0, N)

# -------------------------------------------------------------------
# Utilities (car is the reference: no constant)
# -------------------------------------------------------------------
ASC = {"bike": -0.4, "walk": 0.6, "bus": 0.2, "car": 0.0}
BETA_COST_INC = -6.0
BETA_TIME = {"bike": -0.08, "walk": -0.07, "bus": -0.06, "car": -0.05}

cost = {"bike": cost_bike, "walk": cost_walk, "bus": cost_bus, "car": cost_car}
time = {"bike": time_bike, "walk": time_walk, "bus": time_bus, "car": time_car}

V = np.column_stack([
    ASC[a] + BETA_COST_INC * cost[a] / income + BETA_TIME[a] * time[a]
    for a in ALTERNATIVES
])

# -------------------------------------------------------------------
# Draw choices (Gumbel errors)
# -------------------------------------------------------------------
np.random.seed(42 + 1000)  # separate seed for choice draws
U = V + np.random.gumbel(size=V.shape)
choice = np.array(ALTERNATIVES)[np.argmax(U, axis=1)]

# -------------------------------------------------------------------
# Write file: choice, 8-column cost/time block, income
# -------------------------------------------------------------------
df = pd.DataFrame({"mode": choice})
for a in ALTERNATIVES:
    df[f"cost_{a}"] = np.round(cost[a], 2)
for a in ALTERNATIVES:
    df[f"time_{a}"] = np.round(time[a], 1)
df["income"] = np.round(income, 1)

out_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "COMMUTE.csv")
df.to_csv(out_path, index=False)

shares = df["mode"].value_counts(normalize=True).reindex(ALTERNATIVES)
print(f"Wrote {len(df)} respondents to {out_path}")
print("Sample shares: " + ", ".join(f"{a}={shares[a]:.4f}" for a in ALTERNATIVES))
