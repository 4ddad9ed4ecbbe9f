# darkfixtures/metrics.py
from __future__ import annotations

from typing import Dict, List

import numpy as np
import pandas as pd

MATCH_KEYS = ["expiry", "tokens", "price_co", "price_exp", "volume_co", "volume_exp",
              "min_volume_co", "min_volume_exp", "nonce"]


def summarize_co_exp(frame: pd.DataFrame, prefix: str) -> Dict[str, float]:
    if frame.empty:
        return {}
    out: Dict[str, float] = {}
    for part in ("co", "exp"):
        col = frame[f"{prefix}_{part}"].astype(float)
        out[f"{prefix}_{part}_min"] = float(col.min())
        out[f"{prefix}_{part}_max"] = float(col.max())
        out[f"{prefix}_{part}_mean"] = float(col.mean())
    return out


def check_order_frame(frame: pd.DataFrame) -> List[str]:
    """
    Violations found in a tabulated batch of orders:
      - minimum volume must be componentwise <= volume
      - rows sharing a `match` index must be one BUY and one SELL agreeing on MATCH_KEYS
    """
    problems: List[str] = []
    if frame.empty:
        return problems

    bad = frame[(frame["min_volume_co"] > frame["volume_co"]) | (frame["min_volume_exp"] > frame["volume_exp"])]
    for oid in bad["id"]:
        problems.append(f"order {oid}: minimum volume exceeds volume")
    bad_co = frame[frame["min_volume_co"] < 1]
    for oid in bad_co["id"]:
        problems.append(f"order {oid}: minimum volume coefficient below 1")

    if "match" in frame.columns:
        for k, group in frame.groupby("match"):
            if sorted(group["parity"]) != ["BUY", "SELL"]:
                problems.append(f"match {k}: expected one BUY and one SELL")
                continue
            differing = [c for c in MATCH_KEYS if group[c].astype(str).nunique() != 1]
            if differing:
                problems.append(f"match {k}: orders disagree on {', '.join(differing)}")
    return problems


def summarize_latency_ns(latencies: np.ndarray) -> Dict[str, float]:
    if latencies.size == 0:
        return {"p50_ns": 0.0, "p90_ns": 0.0, "p99_ns": 0.0, "ops_per_sec": 0.0}
    p50 = float(np.percentile(latencies, 50))
    p90 = float(np.percentile(latencies, 90))
    p99 = float(np.percentile(latencies, 99))
    mean_ns = float(latencies.mean())
    ops = 1e9 / mean_ns if mean_ns > 0 else 0.0
    return {"p50_ns": p50, "p90_ns": p90, "p99_ns": p99, "ops_per_sec": ops}
