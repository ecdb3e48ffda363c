"""Posterior trend summaries built from raw HMC draws."""
from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import arviz as az
import numpy as np
import pandas as pd
from numpy.typing import ArrayLike
from scipy.special import expit

logger = logging.getLogger(__name__)

OBSTYPES = ("normal", "poisson", "binomial")


@dataclass(frozen=True)
class TrendSummary:
    """Posterior median and credible bounds of the trend, one entry per time point."""

    postmed: np.ndarray
    bci_lower: np.ndarray
    bci_upper: np.ndarray

    def __post_init__(self) -> None:
        arrays = {}
        for name in ("postmed", "bci_lower", "bci_upper"):
            arr = np.asarray(getattr(self, name), dtype=float)
            if arr.ndim != 1:
                raise ValueError(f"{name} must be one-dimensional, got shape {arr.shape}.")
            arrays[name] = arr
            object.__setattr__(self, name, arr)

        n = arrays["postmed"].size
        if n == 0:
            raise ValueError("Trend summary needs at least one time point.")
        if arrays["bci_lower"].size != n or arrays["bci_upper"].size != n:
            raise ValueError(
                "postmed, bci_lower and bci_upper must have the same length "
                f"(got {n}, {arrays['bci_lower'].size}, {arrays['bci_upper'].size})."
            )

        with np.errstate(invalid="ignore"):
            bad = (arrays["bci_lower"] > arrays["postmed"]) | (arrays["postmed"] > arrays["bci_upper"])
        if np.any(bad):
            idx = int(np.flatnonzero(bad)[0])
            raise ValueError(f"Credible bounds must satisfy lower <= median <= upper (violated at index {idx}).")

    def __len__(self) -> int:
        return self.postmed.size

    @classmethod
    def from_mapping(cls, obj: Mapping[str, ArrayLike]) -> "TrendSummary":
        """Build a summary from a dict such as ``{"postmed": ..., "bci.lower": ..., "bci.upper": ...}``."""

        def pick(*keys: str) -> ArrayLike:
            for key in keys:
                if key in obj:
                    return obj[key]
            raise ValueError(f"Trend summary mapping is missing '{keys[0]}'.")

        return cls(
            postmed=pick("postmed"),
            bci_lower=pick("bci_lower", "bci.lower"),
            bci_upper=pick("bci_upper", "bci.upper"),
        )

    def to_frame(self, timelab: Optional[Sequence[Any]] = None) -> pd.DataFrame:
        time = np.arange(1, len(self) + 1) if timelab is None else list(timelab)
        if len(time) != len(self):
            raise ValueError("timelab must have the same length as the trend summary.")
        return pd.DataFrame(
            {
                "time": time,
                "postmed": self.postmed,
                "bci_lower": self.bci_lower,
                "bci_upper": self.bci_upper,
            }
        )


def back_transform(values: ArrayLike, obstype: str) -> np.ndarray:
    """Map process parameters to the observation scale (log link for poisson, logit for binomial)."""
    values = np.asarray(values, dtype=float)
    if obstype == "normal":
        return values
    if obstype == "poisson":
        return np.exp(values)
    if obstype == "binomial":
        return expit(values)
    raise ValueError(f"Unknown obstype '{obstype}'. Choices are {', '.join(OBSTYPES)}.")


# ================================
#   Raw fit -> draws matrix
# ================================
def _indexed_columns(columns: Sequence[Any], param: str) -> list:
    # theta[1], theta.1, theta_1
    pattern = re.compile(rf"^{re.escape(param)}[\[\._](\d+)\]?$")
    found = []
    for col in columns:
        m = pattern.match(str(col))
        if m:
            found.append((int(m.group(1)), col))
    found.sort(key=lambda item: item[0])
    return [col for _, col in found]


def theta_draws(mfit: Any, param: str = "theta") -> np.ndarray:
    """Return the draws of ``param`` as a ``(n_draws, n_points)`` array."""
    if isinstance(mfit, az.InferenceData):
        if not hasattr(mfit, "posterior") or param not in mfit.posterior:
            raise ValueError(f"InferenceData posterior has no variable '{param}'.")
        da = mfit.posterior[param]
        draws = np.asarray(da.values, dtype=float)
        draws = draws.reshape(draws.shape[0] * draws.shape[1], -1)
    elif isinstance(mfit, pd.DataFrame):
        cols = _indexed_columns(mfit.columns, param)
        if not cols:
            raise ValueError(f"No '{param}' columns found in the draws table.")
        draws = mfit[cols].to_numpy(dtype=float)
    elif isinstance(mfit, Mapping):
        if param not in mfit:
            raise ValueError(f"Draws mapping has no variable '{param}'.")
        draws = np.asarray(mfit[param], dtype=float)
        if draws.ndim == 1:
            draws = draws[:, np.newaxis]
        draws = draws.reshape(draws.shape[0], -1)
    elif isinstance(mfit, np.ndarray):
        draws = np.asarray(mfit, dtype=float)
        if draws.ndim == 3:
            # (iterations, chains, parameters)
            draws = draws.reshape(-1, draws.shape[2])
        elif draws.ndim != 2:
            raise ValueError(f"Draws array must be 2-D or 3-D, got {draws.ndim}-D.")
    else:
        raise TypeError(
            "mfit must be an arviz InferenceData, a mapping of draws, a pandas DataFrame or a numpy array; "
            f"got {type(mfit).__name__}."
        )

    if draws.shape[0] == 0 or draws.shape[1] == 0:
        raise ValueError("Model fit contains no draws.")
    logger.debug("Collected %d draws of %d '%s' values", draws.shape[0], draws.shape[1], param)
    return draws


def extract_theta(mfit: Any, obstype: str = "normal", alpha: float = 0.05, param: str = "theta") -> TrendSummary:
    """Reduce posterior draws to medians and 100*(1-alpha)% credible bounds."""
    if not 0.0 < alpha < 1.0:
        raise ValueError(f"alpha must be between 0 and 1, got {alpha}.")
    if obstype not in OBSTYPES:
        raise ValueError(f"Unknown obstype '{obstype}'. Choices are {', '.join(OBSTYPES)}.")

    draws = back_transform(theta_draws(mfit, param=param), obstype)
    postmed = np.median(draws, axis=0)
    lower, upper = np.quantile(draws, [alpha / 2.0, 1.0 - alpha / 2.0], axis=0)
    logger.info("Summarized %d time points (obstype=%s, alpha=%.3g)", postmed.size, obstype, alpha)
    return TrendSummary(postmed=postmed, bci_lower=lower, bci_upper=upper)
