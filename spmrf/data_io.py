"""Loading posterior draws and observations from CSV files."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .summary import TrendSummary


def _resolve(value: Optional[Path], project_root: Optional[Path]) -> Optional[Path]:
    if value is None:
        return None
    value = Path(value)
    if not value.is_absolute() and project_root is not None:
        return project_root / value
    return value


@dataclass
class DrawsConfig:
    """Where to find a draws file written by the inference engine (CmdStan CSV layout)."""

    csv_path: Path
    comment: str = "#"

    def resolve_paths(self, project_root: Optional[Path] = None) -> "DrawsConfig":
        return DrawsConfig(csv_path=_resolve(self.csv_path, project_root), comment=self.comment)


@dataclass
class ObservationConfig:
    """Observation file layout: one row per time point, in time order."""

    csv_path: Path
    value_col: str = "y"
    time_col: Optional[str] = None

    def resolve_paths(self, project_root: Optional[Path] = None) -> "ObservationConfig":
        return ObservationConfig(
            csv_path=_resolve(self.csv_path, project_root),
            value_col=self.value_col,
            time_col=self.time_col,
        )


def load_draws(config: DrawsConfig) -> pd.DataFrame:
    """Read a draws CSV, skipping comment lines and non-numeric columns."""

    df = pd.read_csv(config.csv_path, comment=config.comment)
    df = df.apply(pd.to_numeric, errors="coerce")
    df = df.dropna(axis=1, how="all")
    if df.empty:
        raise ValueError(f"No numeric draws found in {config.csv_path}.")
    return df.reset_index(drop=True)


def load_observations(config: ObservationConfig) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    """Return observation values and, when ``time_col`` is set, the time labels."""

    df = pd.read_csv(config.csv_path)
    if config.value_col not in df.columns:
        raise ValueError(f"Column '{config.value_col}' not found in {config.csv_path}.")
    values = pd.to_numeric(df[config.value_col], errors="coerce").to_numpy(dtype=float)
    timelab = None
    if config.time_col is not None:
        if config.time_col not in df.columns:
            raise ValueError(f"Column '{config.time_col}' not found in {config.csv_path}.")
        timelab = df[config.time_col].to_numpy()
    return values, timelab


def save_summary(summary: TrendSummary, output_path: Path, timelab: Optional[Sequence] = None) -> None:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    summary.to_frame(timelab).to_csv(output_path, index=False)
