import numpy as np
import pandas as pd

from simulator import Simulation

METRICS = ["total_loads", "avg_wait_time", "avg_utilization"]


def run_experiments(num_trucks, num_stations, n_replications=5, params=None, seed=None, policy=None):
    runs = []
    for r in range(n_replications):
        run_seed = None if seed is None else seed + r
        sim = Simulation(num_trucks, num_stations, params=params, seed=run_seed, policy=policy)
        runs.append(sim.run())
    return runs


def mean_ci(vals):
    vals = np.asarray(vals, dtype=float)
    n = len(vals)
    m = float(vals.mean())
    if n <= 1:
        return m, m, m
    h = 1.96 * float(vals.std(ddof=1)) / np.sqrt(n)
    return m, m - h, m + h


def summarize(runs):
    """Mean and 95% CI of each metric across replications."""
    df = pd.DataFrame(runs)
    rows = []
    for metric in METRICS:
        m, lo, hi = mean_ci(df[metric])
        rows.append({"metric": metric, "mean": m, "ci_low": lo, "ci_high": hi})
    return pd.DataFrame(rows).set_index("metric")
