"""Trend plot: posterior median line over a credible-interval band."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Sequence, Tuple

import matplotlib

matplotlib.use("Agg", force=True)
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes
from matplotlib.ticker import FuncFormatter, MaxNLocator
from numpy.typing import ArrayLike

from .palette import resolve_colors, to_mpl_color
from .summary import TrendSummary, extract_theta

logger = logging.getLogger(__name__)


def ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def time_positions(n: int, timelab: Optional[Sequence[Any]] = None) -> Tuple[np.ndarray, Optional[list]]:
    """x positions for ``n`` time points and, for non-numeric labels, the tick labels."""
    if timelab is None:
        return np.arange(1, n + 1), None
    labels = np.asarray(timelab)
    if labels.ndim != 1 or labels.size != n:
        raise ValueError(f"timelab must have the same length as the trend ({n}), got {labels.size}.")
    if labels.dtype.kind in "iufM":
        return labels, None
    return np.arange(1, n + 1), [str(v) for v in labels]


def _check_obsvec(obsvec: Optional[ArrayLike], n: int) -> Optional[np.ndarray]:
    if obsvec is None:
        return None
    obs = np.asarray(obsvec, dtype=float)
    if obs.ndim != 1 or obs.size != n:
        raise ValueError(f"obsvec must have the same length as the trend ({n}), got {obs.size}.")
    return obs


def axis_ranges(
    summary: TrendSummary,
    obsvec: Optional[ArrayLike],
    positions: np.ndarray,
) -> Tuple[Tuple[Any, Any], Tuple[float, float]]:
    """Default ``(xlim, ylim)``: range of positions and of bounds plus observations."""
    parts = [summary.bci_lower, summary.bci_upper]
    if obsvec is not None:
        parts.append(np.asarray(obsvec, dtype=float))
    yvals = np.concatenate(parts)
    if not np.any(np.isfinite(yvals)) or np.any(np.isinf(yvals)):
        raise ValueError(
            "Credible bounds and observations must be finite to set the y-axis range; "
            "check the obstype back-transform of the draws."
        )
    ylim = (float(np.nanmin(yvals)), float(np.nanmax(yvals)))
    xlim = (positions.min(), positions.max())
    return xlim, ylim


def _as_summary(theta: Any) -> TrendSummary:
    if isinstance(theta, TrendSummary):
        return theta
    if isinstance(theta, Mapping):
        return TrendSummary.from_mapping(theta)
    raise TypeError(f"Argument theta must be a TrendSummary or a mapping, got {type(theta).__name__}.")


def plot_trend(
    theta: Any = None,
    mfit: Any = None,
    obstype: str = "normal",
    alpha: float = 0.05,
    obsvec: Optional[ArrayLike] = None,
    timelab: Optional[Sequence[Any]] = None,
    colset: str = "blue",
    trend_col: Optional[str] = None,
    bci_col: Optional[str] = None,
    pt_col: str = "gray60",
    pt_marker: str = "o",
    pt_size: float = 1.0,
    xlab: str = "time",
    ylab: str = "y",
    main: str = "",
    xlim: Optional[Tuple[Any, Any]] = None,
    ylim: Optional[Tuple[float, float]] = None,
    ax: Optional[Axes] = None,
    out_path: Optional[Path] = None,
    **kwargs: Any,
) -> Axes:
    """Plot the posterior median trend with its credible band.

    Pass either ``theta`` (a :class:`TrendSummary` or a mapping produced by
    :func:`extract_theta`) or ``mfit`` (raw posterior draws), never both.
    ``obstype`` and ``alpha`` are only used when summarizing ``mfit``.
    Extra keyword arguments are forwarded to ``Axes.set``.
    """
    if theta is None and mfit is None:
        raise ValueError("Must specify either a trend summary (theta) or a model fit (mfit).")
    if theta is not None and mfit is not None:
        raise ValueError("Must specify either a trend summary (theta) or a model fit (mfit), but not both.")
    summary = extract_theta(mfit, obstype, alpha) if mfit is not None else _as_summary(theta)

    tcol, bcol = resolve_colors(colset, trend_col, bci_col)

    n = len(summary)
    positions, tick_labels = time_positions(n, timelab)
    obs = _check_obsvec(obsvec, n)
    default_xlim, default_ylim = axis_ranges(summary, obs, positions)
    if xlim is None:
        xlim = default_xlim
    if ylim is None:
        ylim = default_ylim

    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(9, 5), constrained_layout=True)
    else:
        fig = ax.figure

    # invisible points fix the data limits before anything is drawn
    dum = np.linspace(default_ylim[0], default_ylim[1], n)
    ax.plot(positions, dum, linestyle="none", marker="none")
    ax.set_xlim(*xlim)
    ax.set_ylim(*ylim)
    ax.set_xlabel(xlab)
    ax.set_ylabel(ylab)
    ax.set_title(main)
    if tick_labels is not None:
        ax.xaxis.set_major_locator(MaxNLocator(integer=True))
        ax.xaxis.set_major_formatter(
            FuncFormatter(lambda x, _pos: tick_labels[int(x) - 1] if 1 <= int(x) <= n and x == int(x) else "")
        )
    if kwargs:
        ax.set(**kwargs)

    ax.fill_between(
        positions,
        summary.bci_lower,
        summary.bci_upper,
        facecolor=to_mpl_color(bcol),
        edgecolor="none",
        linewidth=0,
    )
    if obs is not None:
        ax.plot(
            positions,
            obs,
            linestyle="none",
            marker=pt_marker,
            markersize=6.0 * pt_size,
            markerfacecolor="none",
            markeredgecolor=to_mpl_color(pt_col),
        )
    ax.plot(positions, summary.postmed, color=to_mpl_color(tcol), lw=3)

    if out_path is not None:
        out_path = Path(out_path)
        ensure_parent(out_path)
        fig.savefig(out_path, dpi=150)
        plt.close(fig)
        logger.info("Saved trend plot to %s", out_path)
    return ax
