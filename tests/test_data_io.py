from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from spmrf.data_io import DrawsConfig, ObservationConfig, load_draws, load_observations, save_summary
from spmrf.summary import TrendSummary


def _write_cmdstan_csv(path: Path, df: pd.DataFrame) -> None:
    with path.open("w", encoding="utf-8") as f:
        f.write("# model = trend_model\n# method = sample (Default)\n")
        df.to_csv(f, index=False)
        f.write("# Elapsed Time: 0.1 seconds (Warm-up)\n")


def test_load_draws_skips_comments(draws_frame, tmp_path):
    path = tmp_path / "output.csv"
    _write_cmdstan_csv(path, draws_frame)
    df = load_draws(DrawsConfig(csv_path=path))
    assert list(df.columns) == list(draws_frame.columns)
    assert len(df) == len(draws_frame)


def test_resolve_paths_relative_to_root(tmp_path):
    cfg = DrawsConfig(csv_path=Path("draws.csv")).resolve_paths(project_root=tmp_path)
    assert cfg.csv_path == tmp_path / "draws.csv"
    obs = ObservationConfig(csv_path=Path("/abs/obs.csv"), value_col="count").resolve_paths(project_root=tmp_path)
    assert obs.csv_path == Path("/abs/obs.csv")
    assert obs.value_col == "count"


def test_load_observations(tmp_path):
    path = tmp_path / "obs.csv"
    pd.DataFrame({"year": [2001, 2002, 2003], "count": [4, "NA", 7]}).to_csv(path, index=False)
    values, timelab = load_observations(ObservationConfig(csv_path=path, value_col="count", time_col="year"))
    assert np.isnan(values[1])
    assert values[0] == 4.0
    assert timelab.tolist() == [2001, 2002, 2003]


def test_load_observations_missing_column(tmp_path):
    path = tmp_path / "obs.csv"
    pd.DataFrame({"y": [1, 2]}).to_csv(path, index=False)
    with pytest.raises(ValueError, match="count"):
        load_observations(ObservationConfig(csv_path=path, value_col="count"))


def test_save_summary(tmp_path):
    s = TrendSummary(postmed=[1.0, 2.0], bci_lower=[0.0, 1.0], bci_upper=[2.0, 3.0])
    out = tmp_path / "out" / "summary.csv"
    save_summary(s, out, timelab=["a", "b"])
    df = pd.read_csv(out)
    assert df["time"].tolist() == ["a", "b"]
    assert df["postmed"].tolist() == [1.0, 2.0]
