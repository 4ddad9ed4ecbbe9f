# bench/benchmark.py
from __future__ import annotations

import json
from pathlib import Path
import pandas as pd

from darkfixtures.sim import FixtureConfig, FixtureGenerator
from darkfixtures.metrics import summarize_latency_ns
from darkfixtures.viz import plot_latency_hist


def main() -> None:
    cfg = FixtureConfig(seed=123, n_orders=20_000, n_matches=5_000, n_computations=5_000, n_nodes=16, n_bootstrap=4)
    gen = FixtureGenerator(cfg)
    art = gen.run()

    Path("results").mkdir(parents=True, exist_ok=True)
    summary = summarize_latency_ns(art.latencies_ns)
    lat_png = plot_latency_hist(art.latencies_ns, "results")
    pd.DataFrame([summary]).to_csv("results/benchmark_summary.csv", index=False)
    print(json.dumps({"benchmark": summary, "latency_hist": lat_png}, indent=2))


if __name__ == "__main__":
    main()
