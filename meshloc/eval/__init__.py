"""
Evaluation and Visualization Module.

This module provides evaluation metrics and visualization utilities
for fingerprint localization.

Modules:
    metrics: Error metrics (haversine error, RMSE, CDF, label accuracy)
    plots: Fingerprint maps and error CDF plots

``plots`` needs matplotlib and is imported on its own:
    from meshloc.eval.plots import plot_error_cdf
"""

from .metrics import (
    compute_error_stats,
    compute_position_errors,
    compute_rmse,
    error_cdf,
    label_accuracy,
)

__all__ = [
    "compute_position_errors",
    "compute_rmse",
    "compute_error_stats",
    "error_cdf",
    "label_accuracy",
]
