# darkfixtures/cli.py
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

import numpy as np
import pandas as pd

from .core import random_configs
from .errors import ConfigGenerationError
from .metrics import check_order_frame, summarize_co_exp, summarize_latency_ns
from .network import DEFAULT_BASE_PORT, DEFAULT_ETHEREUM_URI, DEFAULT_HOST
from .sim import FixtureArtifacts, FixtureConfig, FixtureGenerator, configs_frame, save_artifacts
from .viz import plot_co_exp_hist, plot_latency_hist

logger = logging.getLogger(__name__)


def run_orders(args: argparse.Namespace) -> None:
    cfg = FixtureConfig(
        seed=args.seed,
        n_orders=args.n_orders,
        n_matches=args.n_matches,
        n_computations=args.n_computations,
        n_nodes=args.n_nodes,
        n_bootstrap=args.n_bootstrap,
        base_port=args.base_port,
        host=args.host,
        ethereum_uri=args.ethereum_uri,
    )
    gen = FixtureGenerator(cfg)
    art: FixtureArtifacts = gen.run()
    out_dir = args.report
    paths = save_artifacts(art, out_dir)
    fig_paths = plot_co_exp_hist(art.orders_df, out_dir)
    lat_png = plot_latency_hist(art.latencies_ns, out_dir)
    summary = summarize_latency_ns(art.latencies_ns)

    print(json.dumps({"saved": {**paths, **fig_paths, "latency_hist": lat_png}, "latency_summary": summary}, indent=2))


def run_configs(args: argparse.Namespace) -> None:
    rs = np.random.RandomState(args.seed)
    try:
        configs = random_configs(
            args.n_nodes,
            args.n_bootstrap,
            rs,
            host=args.host,
            base_port=args.base_port,
            ethereum_uri=args.ethereum_uri,
        )
    except ConfigGenerationError as err:
        logger.error("%s (%d configs built before failure)", err, len(err.configs))
        raise SystemExit(1) from err
    out_dir = Path(args.report)
    out_dir.mkdir(parents=True, exist_ok=True)
    ts = pd.Timestamp.now("UTC").strftime("%Y%m%d_%H%M%S")
    csv = out_dir / f"configs_{ts}.csv"
    configs_frame(configs).to_csv(csv, index=False)
    print(json.dumps({"configs": len(configs), "csv": str(csv)}, indent=2))


def run_report(args: argparse.Namespace) -> None:
    results_dir = Path(args.report)

    def latest(pattern: str) -> str:
        candidates = sorted(results_dir.glob(pattern), key=lambda p: p.stat().st_mtime, reverse=True)
        return str(candidates[0]) if candidates else ""

    report = {}
    for name in ("orders", "matches"):
        path = latest(f"{name}_*.csv")
        if not path:
            report[name] = {"csv": "", "violations": [], "summary": {}}
            continue
        df = pd.read_csv(path, dtype={"nonce": str})
        summary = {}
        for prefix in ("price", "volume", "min_volume"):
            summary.update(summarize_co_exp(df, prefix))
        report[name] = {"csv": path, "violations": check_order_frame(df), "summary": summary}
    print(json.dumps(report, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="darkfixtures", description="Dark pool test fixture generator CLI")
    sub = parser.add_subparsers(dest="cmd", required=True)

    def network_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--n-nodes", type=int, default=8)
        p.add_argument("--n-bootstrap", type=int, default=3)
        p.add_argument("--base-port", type=int, default=DEFAULT_BASE_PORT)
        p.add_argument("--host", type=str, default=DEFAULT_HOST)
        p.add_argument("--ethereum-uri", type=str, default=DEFAULT_ETHEREUM_URI)

    p_orders = sub.add_parser("orders", help="Generate a fixture batch and save artifacts")
    p_orders.add_argument("--seed", type=int, default=30)
    p_orders.add_argument("--n-orders", type=int, default=1_000)
    p_orders.add_argument("--n-matches", type=int, default=250)
    p_orders.add_argument("--n-computations", type=int, default=250)
    network_args(p_orders)
    p_orders.add_argument("--report", type=str, default="results")
    p_orders.set_defaults(func=run_orders)

    p_configs = sub.add_parser("configs", help="Generate node configs for a test cluster")
    p_configs.add_argument("--seed", type=int, default=30)
    network_args(p_configs)
    p_configs.add_argument("--report", type=str, default="results")
    p_configs.set_defaults(func=run_configs)

    p_report = sub.add_parser("report", help="Check the latest saved order batches")
    p_report.add_argument("--report", type=str, default="results")
    p_report.set_defaults(func=run_report)
    return parser


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s - %(message)s")
    args = build_parser().parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
