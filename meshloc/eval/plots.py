"""
Visualization Utilities for Fingerprint Localization.

This module provides plotting functions for site fingerprint maps and
localization errors.

All functions return matplotlib Figure objects for flexible display/saving.

Author: Navigation Engineering Team
Date: 2026
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import matplotlib.pyplot as plt
import numpy as np

from ..fingerprinting.types import FingerprintDatabase
from .metrics import error_cdf


def plot_fingerprint_map(
    db: FingerprintDatabase,
    truth: Optional[np.ndarray] = None,
    estimated: Optional[np.ndarray] = None,
    title: str = "Fingerprint Map",
) -> plt.Figure:
    """
    Plot fingerprint sites, optionally with query truths and estimates.

    Args:
        db: Fingerprint database (one marker per site, colored by label)
        truth: True query positions, shape (N, 2) as (lat, lon)
        estimated: Estimated query positions, shape (N, 2)
        title: Plot title

    Returns:
        fig: Matplotlib figure
    """
    fig, ax = plt.subplots(figsize=(10, 8))

    labels = list(dict.fromkeys(fp.name or "<unlabeled>" for fp in db))
    cmap = plt.get_cmap("tab10")
    for i, label in enumerate(labels):
        sites = np.array(
            [[fp.latitude, fp.longitude] for fp in db if (fp.name or "<unlabeled>") == label]
        )
        ax.scatter(
            sites[:, 1],
            sites[:, 0],
            marker="s",
            s=60,
            color=cmap(i % 10),
            label=label,
            alpha=0.7,
        )

    if truth is not None:
        truth = np.asarray(truth)
        ax.scatter(truth[:, 1], truth[:, 0], marker="o", s=20, color="black", label="Truth")

    if estimated is not None:
        estimated = np.asarray(estimated)
        ax.scatter(
            estimated[:, 1], estimated[:, 0], marker="x", s=30, color="red", label="Estimate"
        )
        if truth is not None:
            for t, e in zip(truth, estimated):
                if np.all(np.isfinite(e)):
                    ax.plot([t[1], e[1]], [t[0], e[0]], color="gray", linewidth=0.5, alpha=0.5)

    ax.set_xlabel("Longitude (deg)", fontsize=12)
    ax.set_ylabel("Latitude (deg)", fontsize=12)
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.legend(fontsize=9, loc="best")
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    return fig


def plot_error_cdf(
    errors_dict: Dict[str, np.ndarray], title: str = "Error CDF"
) -> plt.Figure:
    """
    Plot Cumulative Distribution Function (CDF) of position errors.

    Args:
        errors_dict: Dictionary of error arrays in meters {name: errors}
        title: Plot title

    Returns:
        fig: Matplotlib figure
    """
    fig, ax = plt.subplots(figsize=(10, 6))

    colors = ["blue", "red", "green", "orange", "purple"]
    linestyles = ["-", "--", "-.", ":", "-"]

    for i, (name, errors) in enumerate(errors_dict.items()):
        sorted_errors, cdf = error_cdf(errors)
        ax.plot(
            sorted_errors,
            cdf,
            label=name,
            color=colors[i % len(colors)],
            linestyle=linestyles[i % len(linestyles)],
            linewidth=2,
        )

    ax.set_xlabel("Position Error (m)", fontsize=12)
    ax.set_ylabel("CDF", fontsize=12)
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.legend(fontsize=10)
    ax.grid(True, alpha=0.3)
    ax.set_xlim(left=0)
    ax.set_ylim([0, 1.05])

    plt.tight_layout()
    return fig


def save_figure(
    fig: plt.Figure,
    out_dir: Union[str, Path],
    name: str,
    formats: Tuple[str, ...] = ("svg", "png"),
) -> List[Path]:
    """
    Save figure in multiple formats.

    Args:
        fig: Matplotlib figure to save
        out_dir: Output directory
        name: Base filename (without extension)
        formats: Tuple of format extensions

    Returns:
        paths: List of saved file paths
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for fmt in formats:
        filepath = out_dir / f"{name}.{fmt}"
        fig.savefig(filepath, dpi=150, bbox_inches="tight")
        paths.append(filepath)

    return paths
