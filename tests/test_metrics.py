# tests/test_metrics.py
from __future__ import annotations

import warnings
from datetime import datetime, timezone

import numpy as np
import pandas as pd

from darkfixtures.metrics import check_order_frame, summarize_co_exp, summarize_latency_ns
from darkfixtures.sim import FixtureConfig, FixtureGenerator, save_artifacts

NOW = datetime(2018, 4, 1, 12, 0, tzinfo=timezone.utc)


def _small_cfg(seed: int = 30) -> FixtureConfig:
    return FixtureConfig(seed=seed, n_orders=40, n_matches=10, n_computations=10, n_nodes=4, n_bootstrap=2, now=NOW)


def test_generated_batch_is_consistent():
    art = FixtureGenerator(_small_cfg()).run()
    assert len(art.orders_df) == 40
    assert len(art.matches_df) == 20
    assert len(art.computations_df) == 10
    assert list(art.configs_df["n_bootstrap"]) == [1, 1, 2, 2]
    assert check_order_frame(art.orders_df) == []
    assert check_order_frame(art.matches_df) == []
    assert art.latencies_ns.size == 60


def test_batch_is_reproducible_with_seed():
    a = FixtureGenerator(_small_cfg(7)).run()
    b = FixtureGenerator(_small_cfg(7)).run()
    pd.testing.assert_frame_equal(a.orders_df, b.orders_df)
    pd.testing.assert_frame_equal(a.configs_df, b.configs_df)


def test_check_order_frame_flags_violations():
    art = FixtureGenerator(_small_cfg()).run()
    df = art.matches_df.copy()
    df.loc[0, "min_volume_co"] = df.loc[0, "volume_co"] + 1
    df.loc[3, "price_exp"] = df.loc[2, "price_exp"] + 1
    problems = check_order_frame(df)
    assert any("minimum volume exceeds volume" in p for p in problems)
    assert any(p.startswith("match 1:") and "price_exp" in p for p in problems)


def test_summarize_co_exp_bounds():
    df = pd.DataFrame({"price_co": [1, 1999, 1000], "price_exp": [0, 24, 12]})
    s = summarize_co_exp(df, "price")
    assert s["price_co_min"] == 1.0
    assert s["price_co_max"] == 1999.0
    assert s["price_exp_mean"] == 12.0


def test_summarize_latency_empty_and_nonempty():
    assert summarize_latency_ns(np.array([], dtype=np.int64))["ops_per_sec"] == 0.0
    s = summarize_latency_ns(np.array([1_000, 1_000, 1_000], dtype=np.int64))
    assert s["p50_ns"] == 1000.0
    assert s["ops_per_sec"] == 1e6


def test_save_artifacts_roundtrip(tmp_path):
    art = FixtureGenerator(_small_cfg()).run()
    with warnings.catch_warnings():
        warnings.simplefilter("error", DeprecationWarning)
        warnings.simplefilter("error", FutureWarning)
        paths = save_artifacts(art, str(tmp_path))
    assert set(paths) == {"orders_csv", "matches_csv", "computations_csv", "configs_csv", "latencies_csv"}
    df = pd.read_csv(paths["matches_csv"], dtype={"nonce": str})
    assert check_order_frame(df) == []
