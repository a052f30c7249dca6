"""Visualization utilities for analysis artifacts."""

from .plots import (
    plot_elbow_curve,
    plot_pca_clusters,
    plot_mi_heatmap
)

__all__ = [
    'plot_elbow_curve',
    'plot_pca_clusters',
    'plot_mi_heatmap'
]
