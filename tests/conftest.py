"""Shared fixtures: synthetic posterior draws shaped like an HMC trend fit."""
from __future__ import annotations

import matplotlib

matplotlib.use("Agg", force=True)
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")


@pytest.fixture
def theta_matrix() -> np.ndarray:
    rng = np.random.default_rng(7)
    trend = np.sin(np.linspace(0.0, 3.0, 12))
    return trend + 0.2 * rng.normal(size=(400, trend.size))


@pytest.fixture
def draws_frame(theta_matrix: np.ndarray) -> pd.DataFrame:
    rng = np.random.default_rng(11)
    n_draws, n_points = theta_matrix.shape
    df = pd.DataFrame(theta_matrix, columns=[f"theta.{i}" for i in range(1, n_points + 1)])
    df.insert(0, "lp__", rng.normal(size=n_draws))
    df["gam"] = np.abs(rng.normal(size=n_draws))
    df["tau"] = np.abs(rng.normal(size=n_draws))
    return df
