"""Command line interface: summarize HMC draws and plot the trend."""
from __future__ import annotations

import argparse
import json
import logging
import time
from pathlib import Path
from typing import List, Optional

from .data_io import DrawsConfig, ObservationConfig, load_draws, load_observations, save_summary
from .diagnostics import plot_acf, plot_traces, scalar_draws
from .palette import PRESETS, resolve_colors
from .plotting import plot_trend
from .summary import OBSTYPES, extract_theta


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Posterior trend summary and plot from HMC draws")
    parser.add_argument("--draws-csv", required=True, help="CSV of posterior draws (CmdStan layout)")
    parser.add_argument("--obstype", choices=OBSTYPES, default="normal")
    parser.add_argument("--alpha", type=float, default=0.05, help="Credible level is 100*(1-alpha)%%")
    parser.add_argument("--param", default="theta", help="Name of the trend parameter in the draws")
    parser.add_argument("--obs-csv", default=None, help="Optional CSV of observations to overlay")
    parser.add_argument("--obs-col", default="y")
    parser.add_argument("--time-col", default=None)
    parser.add_argument("--colset", choices=sorted(PRESETS), default="blue")
    parser.add_argument("--trend-col", default=None)
    parser.add_argument("--bci-col", default=None)
    parser.add_argument("--xlab", default="time")
    parser.add_argument("--ylab", default="y")
    parser.add_argument("--main", default="")
    parser.add_argument("--out-prefix", default="spmrf")
    parser.add_argument("--out-dir", default="results")
    parser.add_argument("--trace-params", default=None, help="Comma-separated scalar parameters for trace/ACF plots")
    parser.add_argument("--acf-lag", type=int, default=40)
    parser.add_argument("--log-level", default="WARNING")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        resolve_colors(args.colset, args.trend_col, args.bci_col)
    except ValueError as exc:
        parser.error(str(exc))
    return args


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    project_root = Path.cwd()

    out_dir = project_root / args.out_dir
    figure_dir = out_dir / "figure"
    figure_dir.mkdir(parents=True, exist_ok=True)

    t0 = time.time()
    draws_cfg = DrawsConfig(csv_path=Path(args.draws_csv)).resolve_paths(project_root=project_root)
    draws = load_draws(draws_cfg)
    print(f"Loaded {len(draws)} posterior draws from {draws_cfg.csv_path}.")

    summary = extract_theta(draws, obstype=args.obstype, alpha=args.alpha, param=args.param)

    obsvec = None
    timelab = None
    if args.obs_csv is not None:
        obs_cfg = ObservationConfig(
            csv_path=Path(args.obs_csv),
            value_col=args.obs_col,
            time_col=args.time_col,
        ).resolve_paths(project_root=project_root)
        obsvec, timelab = load_observations(obs_cfg)
        print(f"Loaded {obsvec.size} observations from {obs_cfg.csv_path}.")

    trend_path = figure_dir / f"{args.out_prefix}_trend.png"
    plot_trend(
        theta=summary,
        obsvec=obsvec,
        timelab=timelab,
        colset=args.colset,
        trend_col=args.trend_col,
        bci_col=args.bci_col,
        xlab=args.xlab,
        ylab=args.ylab,
        main=args.main,
        out_path=trend_path,
    )
    print(f"Saved trend plot: {trend_path}")

    summary_path = out_dir / f"{args.out_prefix}_summary.csv"
    save_summary(summary, summary_path, timelab=timelab)
    print(f"Saved summary: {summary_path} (rows={len(summary)})")

    if args.trace_params:
        names = [name.strip() for name in args.trace_params.split(",") if name.strip()]
        hyper = scalar_draws(draws, names)
        trace_path = figure_dir / f"{args.out_prefix}_trace.png"
        acf_path = figure_dir / f"{args.out_prefix}_acf.png"
        plot_traces(hyper, out_path=trace_path)
        plot_acf(hyper, out_path=acf_path, max_lag=args.acf_lag)
        print(f"Saved figures: {trace_path}, {acf_path}")

    elapsed = time.time() - t0
    run_info = {
        "draws_csv": str(draws_cfg.csv_path),
        "n_draws": len(draws),
        "n_points": len(summary),
        "param": args.param,
        "obstype": args.obstype,
        "alpha": args.alpha,
        "colset": args.colset,
        "trend_col": args.trend_col,
        "bci_col": args.bci_col,
        "obs_csv": args.obs_csv,
        "runtime_seconds": elapsed,
    }
    run_path = out_dir / f"{args.out_prefix}_run.json"
    with run_path.open("w", encoding="utf-8") as f:
        json.dump(run_info, f, ensure_ascii=False, indent=2)
    print(f"Saved run info: {run_path}")
    print(f"Runtime ≈ {elapsed:.2f} sec")


if __name__ == "__main__":
    main()
