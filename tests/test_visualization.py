"""
Smoke tests for the plotting helpers (Agg backend, see conftest).
"""

from __future__ import annotations

import matplotlib.pyplot as plt
import numpy as np
import pytest
import torch

from jobscope.algorithms import ElbowCurve
from jobscope.information import mutual_information_matrix
from jobscope.visualization import plot_elbow_curve, plot_pca_clusters, plot_mi_heatmap


def test_elbow_plot():
    curve = ElbowCurve(ks=(1, 2, 3, 4), inertias=(100.0, 40.0, 10.0, 8.0))
    ax = plot_elbow_curve(curve)

    (line,) = ax.get_lines()
    assert list(line.get_xdata()) == [1, 2, 3, 4]
    assert list(line.get_ydata()) == [100.0, 40.0, 10.0, 8.0]
    assert ax.get_title() == "Elbow curve"


def test_pca_scatter_one_series_per_cluster(rng):
    scores = torch.as_tensor(rng.normal(size=(30, 2)))
    labels = torch.tensor([0, 1, 2] * 10)
    fig, ax = plt.subplots()

    out = plot_pca_clusters(scores, labels, explained_variance_ratio=torch.tensor([0.6, 0.3]), ax=ax)

    assert out is ax
    assert len(ax.collections) == 3
    assert ax.get_xlabel() == "PC1 (60.0%)"
    assert ax.get_legend() is not None


def test_pca_scatter_needs_two_columns():
    with pytest.raises(ValueError):
        plot_pca_clusters(np.zeros((5, 1)), np.zeros(5, dtype=int))


def test_mi_heatmap(rng):
    mi = mutual_information_matrix(rng.normal(size=(50, 3)), columns=["a", "b", "c"])
    ax = plot_mi_heatmap(mi)

    assert len(ax.images) == 1
    assert [t.get_text() for t in ax.get_yticklabels()] == ["a", "b", "c"]
    assert len(ax.texts) == 9
