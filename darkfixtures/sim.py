# darkfixtures/sim.py
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from .core import random_computation, random_configs, random_order, random_order_match
from .models import Computation, Order
from .network import DEFAULT_BASE_PORT, DEFAULT_ETHEREUM_URI, DEFAULT_HOST, Config

logger = logging.getLogger(__name__)

ORDER_COLUMNS = [
    "id",
    "order_type",
    "parity",
    "settlement",
    "expiry",
    "tokens",
    "price_co",
    "price_exp",
    "volume_co",
    "volume_exp",
    "min_volume_co",
    "min_volume_exp",
    "nonce",
]


@dataclass(slots=True)
class FixtureConfig:
    seed: int = 30
    n_orders: int = 1_000
    n_matches: int = 250
    n_computations: int = 250
    n_nodes: int = 8
    n_bootstrap: int = 3
    base_port: int = DEFAULT_BASE_PORT
    host: str = DEFAULT_HOST
    ethereum_uri: str = DEFAULT_ETHEREUM_URI
    now: Optional[datetime] = None


@dataclass(slots=True)
class FixtureArtifacts:
    orders: List[Order]
    matches: List[Tuple[Order, Order]]
    computations: List[Computation]
    configs: List[Config]
    orders_df: pd.DataFrame
    matches_df: pd.DataFrame
    computations_df: pd.DataFrame
    configs_df: pd.DataFrame
    latencies_ns: np.ndarray = field(default_factory=lambda: np.array([], dtype=np.int64))


class FixtureGenerator:
    """Seeded batch generation of every fixture family."""

    def __init__(self, cfg: FixtureConfig) -> None:
        self.cfg = cfg
        self.rs = np.random.RandomState(cfg.seed)

    def run(self) -> FixtureArtifacts:
        cfg = self.cfg
        rs = self.rs
        latencies: List[int] = []

        orders: List[Order] = []
        for _ in range(cfg.n_orders):
            t0 = time.perf_counter_ns()
            orders.append(random_order(rs, cfg.now))
            latencies.append(time.perf_counter_ns() - t0)

        matches: List[Tuple[Order, Order]] = []
        for _ in range(cfg.n_matches):
            t0 = time.perf_counter_ns()
            matches.append(random_order_match(rs, cfg.now))
            latencies.append(time.perf_counter_ns() - t0)

        computations: List[Computation] = []
        for _ in range(cfg.n_computations):
            t0 = time.perf_counter_ns()
            computations.append(random_computation(rs, cfg.now))
            latencies.append(time.perf_counter_ns() - t0)

        configs = random_configs(
            cfg.n_nodes,
            cfg.n_bootstrap,
            rs,
            host=cfg.host,
            base_port=cfg.base_port,
            ethereum_uri=cfg.ethereum_uri,
        )
        logger.info(
            "generated %d orders, %d matches, %d computations, %d configs",
            len(orders), len(matches), len(computations), len(configs),
        )

        return FixtureArtifacts(
            orders=orders,
            matches=matches,
            computations=computations,
            configs=configs,
            orders_df=orders_frame(orders),
            matches_df=matches_frame(matches),
            computations_df=computations_frame(computations),
            configs_df=configs_frame(configs),
            latencies_ns=np.array(latencies, dtype=np.int64),
        )


def _order_row(o: Order) -> Dict[str, object]:
    return {
        "id": o.id.hex(),
        "order_type": o.order_type.name,
        "parity": o.parity.name,
        "settlement": o.settlement.name,
        "expiry": o.expiry.isoformat(),
        "tokens": o.tokens.name,
        "price_co": o.price.co,
        "price_exp": o.price.exp,
        "volume_co": o.volume.co,
        "volume_exp": o.volume.exp,
        "min_volume_co": o.minimum_volume.co,
        "min_volume_exp": o.minimum_volume.exp,
        # uint64 nonces overflow int64 columns
        "nonce": str(o.nonce),
    }


def orders_frame(orders: List[Order]) -> pd.DataFrame:
    return pd.DataFrame([_order_row(o) for o in orders], columns=ORDER_COLUMNS)


def matches_frame(matches: List[Tuple[Order, Order]]) -> pd.DataFrame:
    """One row per order with a `match` column holding the pair index."""
    rows = []
    for k, (buy, sell) in enumerate(matches):
        for o in (buy, sell):
            rows.append({"match": k, **_order_row(o)})
    return pd.DataFrame(rows, columns=["match"] + ORDER_COLUMNS)


def computations_frame(computations: List[Computation]) -> pd.DataFrame:
    rows = [
        {
            "id": c.id.hex(),
            "buy": c.buy.hex(),
            "sell": c.sell.hex(),
            "state": c.state.name,
            "epoch": c.epoch.hex(),
            "priority": c.priority,
            "match": c.match,
        }
        for c in computations
    ]
    return pd.DataFrame(rows, columns=["id", "buy", "sell", "state", "epoch", "priority", "match"])


def configs_frame(configs: List[Config]) -> pd.DataFrame:
    rows = [
        {
            "address": c.address,
            "host": c.host,
            "port": c.port,
            "bootstrap": ";".join(str(m) for m in c.bootstrap_multi_addresses),
            "n_bootstrap": len(c.bootstrap_multi_addresses),
            "ethereum_network": c.ethereum.network.name,
            "ethereum_uri": c.ethereum.uri,
        }
        for c in configs
    ]
    return pd.DataFrame(
        rows,
        columns=["address", "host", "port", "bootstrap", "n_bootstrap", "ethereum_network", "ethereum_uri"],
    )


def save_artifacts(art: FixtureArtifacts, out_dir: str) -> Dict[str, str]:
    ts = pd.Timestamp.now("UTC").strftime("%Y%m%d_%H%M%S")
    base = Path(out_dir)
    (base / "figures").mkdir(parents=True, exist_ok=True)
    files = {}
    frames = {
        "orders": art.orders_df,
        "matches": art.matches_df,
        "computations": art.computations_df,
        "configs": art.configs_df,
    }
    for name, df in frames.items():
        path = base / f"{name}_{ts}.csv"
        df.to_csv(path, index=False)
        files[f"{name}_csv"] = str(path)

    lat_path = base / f"latencies_{ts}.csv"
    pd.DataFrame({"latency_ns": art.latencies_ns}).to_csv(lat_path, index=False)
    files["latencies_csv"] = str(lat_path)

    return files
