"""Smoke tests for meshloc.eval.plots module."""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

from meshloc.eval.plots import plot_error_cdf, plot_fingerprint_map, save_figure  # noqa: E402
from meshloc.fingerprinting import FingerprintDatabase  # noqa: E402


def _db():
    db = FingerprintDatabase()
    db.add_sample("b1", -60, 52.5200, 13.4050, "Lab")
    db.add_sample("b1", -70, 52.5201, 13.4051, "Office")
    db.add_sample("b1", -80, 52.5202, 13.4052)
    return db


class TestPlots:
    """Test suite for plotting helpers."""

    def test_fingerprint_map(self):
        truth = np.array([[52.52005, 13.40505]])
        est = np.array([[52.5201, 13.4051]])
        fig = plot_fingerprint_map(_db(), truth=truth, estimated=est)
        labels = fig.axes[0].get_legend_handles_labels()[1]
        assert labels == ["Lab", "Office", "<unlabeled>", "Truth", "Estimate"]
        plt.close(fig)

    def test_error_cdf(self):
        fig = plot_error_cdf({"k=1": np.array([1.0, 2.0, np.nan]), "k=3": np.array([0.5])})
        assert len(fig.axes[0].lines) == 2
        plt.close(fig)

    def test_save_figure(self, tmp_path):
        fig = plot_error_cdf({"k=1": np.array([1.0, 2.0])})
        paths = save_figure(fig, tmp_path / "figs", "cdf", formats=("png",))
        assert paths == [tmp_path / "figs" / "cdf.png"]
        assert paths[0].exists()
        plt.close(fig)
