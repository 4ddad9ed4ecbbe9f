# darkfixtures/viz.py
from __future__ import annotations

from pathlib import Path
from typing import Dict

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd


def plot_co_exp_hist(frame: pd.DataFrame, out_dir: str) -> Dict[str, str]:
    """Histograms of sampled price and volume coefficients/exponents."""
    paths: Dict[str, str] = {}
    figdir = Path(out_dir) / "figures"
    figdir.mkdir(parents=True, exist_ok=True)

    for prefix in ("price", "volume", "min_volume"):
        fig, (ax_co, ax_exp) = plt.subplots(1, 2, figsize=(9, 3.5))
        ax_co.hist(frame[f"{prefix}_co"].astype(float), bins=50)
        ax_co.set_title(f"{prefix} coefficient")
        ax_co.set_xlabel("co")
        ax_co.set_ylabel("count")
        ax_exp.hist(frame[f"{prefix}_exp"].astype(float), bins=25)
        ax_exp.set_title(f"{prefix} exponent")
        ax_exp.set_xlabel("exp")
        p = figdir / f"{prefix}_co_exp.png"
        fig.tight_layout()
        fig.savefig(p)
        plt.close(fig)
        paths[f"{prefix}_png"] = str(p)

    return paths


def plot_latency_hist(latencies_ns: np.ndarray, out_dir: str) -> str:
    figdir = Path(out_dir) / "figures"
    figdir.mkdir(parents=True, exist_ok=True)
    plt.figure()
    us = latencies_ns / 1_000.0
    plt.hist(us, bins=50)
    plt.title("Generator Latency Histogram (μs)")
    plt.xlabel("latency (μs)")
    plt.ylabel("count")
    p = figdir / "latency_hist.png"
    plt.tight_layout()
    plt.savefig(p)
    plt.close()
    return str(p)
