"""
Evaluation Metrics for Fingerprint Localization.

This module provides functions to compute position errors (in meters,
from latitude/longitude pairs) and summary statistics for localization
runs.

Author: Navigation Engineering Team
Date: 2026
"""

from typing import Dict, Optional, Tuple, Union

import numpy as np

from ..utils.geodesy import haversine_distance


def compute_position_errors(truth: np.ndarray, estimated: np.ndarray) -> np.ndarray:
    """
    Compute horizontal position errors between true and estimated positions.

    Args:
        truth: True positions, shape (N, 2) as (latitude, longitude) degrees
        estimated: Estimated positions, shape (N, 2). Rows of NaN (no fix)
                   produce NaN errors.

    Returns:
        errors: Great-circle error in meters, shape (N,)

    Raises:
        ValueError: If inputs have incompatible shapes
    """
    truth = np.asarray(truth, dtype=float)
    estimated = np.asarray(estimated, dtype=float)

    if truth.shape != estimated.shape:
        raise ValueError(
            f"Shape mismatch: truth {truth.shape} vs estimated {estimated.shape}"
        )
    if truth.ndim != 2 or truth.shape[1] != 2:
        raise ValueError(f"Positions must have shape (N, 2), got {truth.shape}")

    return np.asarray(
        haversine_distance(truth[:, 0], truth[:, 1], estimated[:, 0], estimated[:, 1]),
        dtype=float,
    )


def compute_rmse(errors: np.ndarray, axis: Optional[int] = None) -> Union[float, np.ndarray]:
    """
    Compute Root Mean Square Error (RMSE), ignoring NaN entries.

    Args:
        errors: Error values, shape (N,) or (N, d)
        axis: Axis along which to compute RMSE (None for a scalar)

    Returns:
        rmse: RMSE value(s)
    """
    errors = np.asarray(errors, dtype=float)
    if axis is None:
        return float(np.sqrt(np.nanmean(errors**2)))
    return np.sqrt(np.nanmean(errors**2, axis=axis))


def compute_error_stats(errors: np.ndarray) -> Dict[str, float]:
    """
    Compute error statistics over the queries that produced a fix.

    Args:
        errors: Error magnitudes in meters, shape (N,). NaN marks a query
                without a fix.

    Returns:
        stats: Dictionary with keys:
               - 'mean', 'median', 'std', 'rmse'
               - 'p50', 'p75', 'p90', 'p95', 'max'
               - 'fix_rate': fraction of queries with a fix
    """
    errors = np.asarray(errors, dtype=float)
    valid = errors[~np.isnan(errors)]
    fix_rate = float(valid.size / errors.size) if errors.size else 0.0

    if valid.size == 0:
        keys = ("mean", "median", "std", "rmse", "p50", "p75", "p90", "p95", "max")
        stats = {key: float("nan") for key in keys}
        stats["fix_rate"] = fix_rate
        return stats

    stats = {
        "mean": float(np.mean(valid)),
        "median": float(np.median(valid)),
        "std": float(np.std(valid)),
        "rmse": float(np.sqrt(np.mean(valid**2))),
        "p50": float(np.percentile(valid, 50)),
        "p75": float(np.percentile(valid, 75)),
        "p90": float(np.percentile(valid, 90)),
        "p95": float(np.percentile(valid, 95)),
        "max": float(np.max(valid)),
        "fix_rate": fix_rate,
    }

    return stats


def error_cdf(errors: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Empirical CDF of error magnitudes (NaN entries dropped).

    Returns:
        (sorted_errors, cdf), both shape (M,)
    """
    errors = np.asarray(errors, dtype=float)
    sorted_errors = np.sort(errors[~np.isnan(errors)])
    if sorted_errors.size == 0:
        return sorted_errors, sorted_errors.copy()
    cdf = np.arange(1, sorted_errors.size + 1) / sorted_errors.size
    return sorted_errors, cdf


def label_accuracy(true_labels, estimated_labels) -> float:
    """Fraction of queries whose estimated site label matches the truth."""
    true_labels = list(true_labels)
    estimated_labels = list(estimated_labels)
    if len(true_labels) != len(estimated_labels):
        raise ValueError(
            f"Length mismatch: {len(true_labels)} true vs {len(estimated_labels)} estimated labels"
        )
    if not true_labels:
        return 0.0
    hits = sum(1 for t, e in zip(true_labels, estimated_labels) if t == e)
    return hits / len(true_labels)
