from __future__ import annotations

import arviz as az
import numpy as np
import pytest

from spmrf.diagnostics import autocorr, plot_acf, plot_traces, scalar_draws, summarize_draws


def test_autocorr_lag_zero_and_constant_chain():
    rng = np.random.default_rng(3)
    acf = autocorr(rng.normal(size=500), max_lag=10)
    assert acf.shape == (11,)
    assert acf[0] == 1.0
    assert np.all(np.abs(acf[1:]) < 0.2)
    np.testing.assert_array_equal(autocorr(np.full(20, 2.0), max_lag=5), np.ones(6))


def test_scalar_draws_from_dataframe(draws_frame):
    out = scalar_draws(draws_frame, ["gam", "tau"])
    assert list(out) == ["gam", "tau"]
    np.testing.assert_allclose(out["gam"], draws_frame["gam"].to_numpy())


def test_scalar_draws_from_inferencedata():
    idata = az.from_dict(posterior={"gam": np.arange(6.0).reshape(2, 3)})
    out = scalar_draws(idata, ["gam"])
    np.testing.assert_allclose(out["gam"], np.arange(6.0))


def test_scalar_draws_missing_parameter(draws_frame):
    with pytest.raises(ValueError, match="zeta"):
        scalar_draws(draws_frame, ["zeta"])
    with pytest.raises(ValueError, match="not scalar"):
        scalar_draws({"theta": np.ones((10, 3))}, ["theta"])


def test_trace_and_acf_plots_written(draws_frame, tmp_path):
    draws = scalar_draws(draws_frame, ["gam", "tau"])
    trace_path = tmp_path / "trace.png"
    acf_path = tmp_path / "acf.png"
    plot_traces(draws, out_path=trace_path, burn=50)
    plot_acf(draws, out_path=acf_path, max_lag=20, thin=2)
    assert trace_path.exists()
    assert acf_path.exists()


def test_plots_need_parameters(tmp_path):
    with pytest.raises(ValueError):
        plot_traces({}, out_path=tmp_path / "x.png")


def test_summarize_draws(draws_frame):
    table = summarize_draws(draws_frame, var_names=["gam", "tau"])
    assert list(table.index) == ["gam", "tau"]
    assert {"mean", "sd", "r_hat"} <= set(table.columns)
    assert table.loc["gam", "mean"] == pytest.approx(draws_frame["gam"].mean())


def test_autocorr_matches_direct_estimate():
    rng = np.random.default_rng(5)
    x = np.cumsum(rng.normal(size=200))
    centered = x - x.mean()
    denom = np.dot(centered, centered)
    expected = [np.dot(centered[: x.size - k], centered[k:]) / denom for k in range(6)]
    np.testing.assert_allclose(autocorr(x, max_lag=5), expected, rtol=1e-8, atol=1e-10)


def test_autocorr_short_series():
    assert autocorr(np.array([3.0]), max_lag=10).tolist() == [1.0]
    assert autocorr(np.array([1.0, 2.0, 3.0]), max_lag=10).shape == (3,)
