"""Trace, ACF and convergence diagnostics for scalar hyperparameters."""
from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import arviz as az
import matplotlib

matplotlib.use("Agg", force=True)
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from .plotting import ensure_parent


def autocorr(x: np.ndarray, max_lag: int) -> np.ndarray:
    """Sample ACF up to ``max_lag``; a constant chain is reported as fully correlated."""
    x = np.asarray(x, dtype=float)
    n = x.size
    if n < 2:
        return np.array([1.0])
    K = min(max_lag, n - 1)
    if np.all(x == x[0]):
        return np.ones(K + 1)
    return np.asarray(az.autocorr(x), dtype=float)[: K + 1]


def scalar_draws(mfit: Any, var_names: Sequence[str]) -> Dict[str, np.ndarray]:
    """Pull 1-D draws of scalar parameters (e.g. ``gam``, ``tau``) out of a fit."""
    out: Dict[str, np.ndarray] = {}
    for name in var_names:
        if isinstance(mfit, az.InferenceData):
            if not hasattr(mfit, "posterior") or name not in mfit.posterior:
                raise ValueError(f"InferenceData posterior has no variable '{name}'.")
            values = np.asarray(mfit.posterior[name].values, dtype=float)
            if values.ndim != 2:
                raise ValueError(f"Parameter '{name}' is not scalar.")
            # chains one after another
            out[name] = values.reshape(-1)
        elif isinstance(mfit, pd.DataFrame):
            if name not in mfit.columns:
                raise ValueError(f"Draws table has no column '{name}'.")
            out[name] = mfit[name].to_numpy(dtype=float)
        elif isinstance(mfit, Mapping):
            if name not in mfit:
                raise ValueError(f"Draws mapping has no variable '{name}'.")
            values = np.asarray(mfit[name], dtype=float)
            if values.ndim != 1:
                raise ValueError(f"Parameter '{name}' is not scalar.")
            out[name] = values
        else:
            raise TypeError(
                "mfit must be an arviz InferenceData, a mapping of draws or a pandas DataFrame; "
                f"got {type(mfit).__name__}."
            )
    return out


def plot_traces(draws: Mapping[str, np.ndarray], out_path: Path, burn: int = 0) -> None:
    if not draws:
        raise ValueError("No parameters to plot.")
    out_path = Path(out_path)
    ensure_parent(out_path)
    names = list(draws)
    fig, axes = plt.subplots(len(names), 1, figsize=(9, 2.4 * len(names)), constrained_layout=True, squeeze=False)
    for ax, name in zip(axes[:, 0], names):
        ax.plot(np.asarray(draws[name])[burn:], lw=0.8)
        ax.set_title(f"Trace: {name}")
        ax.grid(True, alpha=0.3)
    fig.suptitle("HMC Trace Plots" if burn == 0 else "HMC Trace Plots (burn-in removed)")
    fig.savefig(out_path, dpi=150)
    plt.close(fig)


def plot_acf(
    draws: Mapping[str, np.ndarray],
    out_path: Path,
    max_lag: int = 40,
    burn: int = 0,
    thin: int = 1,
) -> None:
    if not draws:
        raise ValueError("No parameters to plot.")
    out_path = Path(out_path)
    ensure_parent(out_path)
    thin = max(1, int(thin))
    names = list(draws)

    fig, axes = plt.subplots(len(names), 1, figsize=(9.5, 2.4 * len(names)), constrained_layout=True, squeeze=False)
    for ax, name in zip(axes[:, 0], names):
        acf = autocorr(np.asarray(draws[name])[burn:][::thin], max_lag=max_lag)
        lags = np.arange(acf.size)
        ax.stem(lags, acf)
        ax.set_xlim(0, lags.max() if lags.size else 0)
        ax.set_title(f"ACF: {name} (thinning={thin})")
        ax.grid(True, alpha=0.3)
    fig.suptitle("Sample Autocorrelation")
    fig.savefig(out_path, dpi=150)
    plt.close(fig)


def summarize_draws(mfit: Any, var_names: Optional[Sequence[str]] = None) -> pd.DataFrame:
    """Mean, sd, HDI, ESS and R-hat per parameter via ``az.summary``."""
    if isinstance(mfit, az.InferenceData):
        idata = mfit
    elif isinstance(mfit, Mapping):
        # single chain: (chain=1, draw, ...)
        posterior = {k: np.asarray(v, dtype=float)[np.newaxis, ...] for k, v in mfit.items()}
        idata = az.from_dict(posterior=posterior)
    elif isinstance(mfit, pd.DataFrame):
        numeric = mfit.select_dtypes(include=[np.number])
        posterior = {str(col): numeric[col].to_numpy(dtype=float)[np.newaxis, :] for col in numeric.columns}
        idata = az.from_dict(posterior=posterior)
    else:
        raise TypeError(f"Cannot summarize draws of type {type(mfit).__name__}.")
    names = list(var_names) if var_names is not None else None
    return az.summary(idata, var_names=names, round_to="none")
