"""spmrf: summaries and plots for Bayesian trend fits from an HMC engine."""
from .data_io import DrawsConfig, ObservationConfig, load_draws, load_observations, save_summary
from .diagnostics import autocorr, plot_acf, plot_traces, scalar_draws, summarize_draws
from .palette import PRESETS, resolve_colors, to_mpl_color
from .plotting import axis_ranges, plot_trend, time_positions
from .summary import OBSTYPES, TrendSummary, back_transform, extract_theta, theta_draws

__all__ = [
    "DrawsConfig",
    "OBSTYPES",
    "ObservationConfig",
    "PRESETS",
    "TrendSummary",
    "autocorr",
    "axis_ranges",
    "back_transform",
    "extract_theta",
    "load_draws",
    "load_observations",
    "plot_acf",
    "plot_traces",
    "plot_trend",
    "resolve_colors",
    "save_summary",
    "scalar_draws",
    "summarize_draws",
    "theta_draws",
    "time_positions",
    "to_mpl_color",
]
