"""
Plots of analysis artifacts.

These functions only read computed artifacts (elbow curve, PCA scores with
cluster ids, mutual-information matrix) and draw them on matplotlib axes.
"""

from typing import Optional, List
from torch import Tensor
import matplotlib.pyplot as plt
import numpy as np

from ..algorithms.elbow import ElbowCurve
from ..information.mutual_info import MIMatrix


def _to_numpy(x) -> np.ndarray:
    if isinstance(x, Tensor):
        return x.detach().cpu().numpy()
    return np.asarray(x)


def plot_elbow_curve(curve: ElbowCurve,
                     ax: Optional[plt.Axes] = None,
                     marker: str = 'o',
                     title: Optional[str] = 'Elbow curve') -> plt.Axes:
    """Plot inertia against cluster count.

    Args:
        curve: Output of an elbow sweep
        ax: Matplotlib axes (created if None)
        marker: Point marker
        title: Plot title

    Returns:
        Matplotlib axes
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 5))

    ax.plot(list(curve.ks), list(curve.inertias), marker=marker)
    ax.set_xticks(list(curve.ks))
    ax.set_xlabel('Number of clusters k')
    ax.set_ylabel('Inertia (within-cluster sum of squares)')

    if title:
        ax.set_title(title)

    return ax


def plot_pca_clusters(scores: Tensor,
                      labels: Tensor,
                      explained_variance_ratio: Optional[Tensor] = None,
                      ax: Optional[plt.Axes] = None,
                      colors: Optional[List[str]] = None,
                      alpha: float = 0.7,
                      point_size: int = 30,
                      show_legend: bool = True,
                      title: Optional[str] = None) -> plt.Axes:
    """Scatter the first two PCA scores, coloured by cluster.

    Args:
        scores: (n, >=2) PCA scores
        labels: (n,) cluster labels
        explained_variance_ratio: Optional ratios shown in the axis labels
        ax: Matplotlib axes (created if None)
        colors: List of colors for clusters
        alpha: Point transparency
        point_size: Size of data points
        show_legend: Whether to show legend
        title: Plot title

    Returns:
        Matplotlib axes
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 6))

    scores_np = _to_numpy(scores)
    labels_np = _to_numpy(labels)
    if scores_np.ndim != 2 or scores_np.shape[1] < 2:
        raise ValueError(f"Expected scores with at least 2 columns, got shape {scores_np.shape}")

    unique_labels = np.unique(labels_np)
    n_clusters = len(unique_labels)

    if colors is None:
        cmap = plt.get_cmap('tab10' if n_clusters <= 10 else 'tab20')
        colors = [cmap(i % cmap.N) for i in range(n_clusters)]

    for i, label in enumerate(unique_labels):
        mask = labels_np == label
        ax.scatter(scores_np[mask, 0], scores_np[mask, 1],
                   c=[colors[i]],
                   s=point_size,
                   alpha=alpha,
                   edgecolors='black',
                   linewidth=0.5,
                   label=f'Cluster {label}')

    if explained_variance_ratio is not None:
        ratio = _to_numpy(explained_variance_ratio)
        ax.set_xlabel(f'PC1 ({ratio[0]:.1%})')
        ax.set_ylabel(f'PC2 ({ratio[1]:.1%})')
    else:
        ax.set_xlabel('PC1')
        ax.set_ylabel('PC2')

    if title:
        ax.set_title(title)

    if show_legend:
        ax.legend()

    return ax


def plot_mi_heatmap(mi: MIMatrix,
                    ax: Optional[plt.Axes] = None,
                    cmap: str = 'viridis',
                    annotate: bool = True,
                    title: Optional[str] = 'Mutual information (nats)') -> plt.Axes:
    """Heatmap of a mutual-information matrix.

    Args:
        mi: Pairwise mutual-information matrix
        ax: Matplotlib axes (created if None)
        cmap: Colormap name
        annotate: Write each value into its cell
        title: Plot title

    Returns:
        Matplotlib axes
    """
    if ax is None:
        size = max(4, 0.8 * len(mi.columns) + 2)
        fig, ax = plt.subplots(figsize=(size, size))

    values = _to_numpy(mi.values)
    image = ax.imshow(values, cmap=cmap)
    ax.figure.colorbar(image, ax=ax)

    ticks = np.arange(len(mi.columns))
    ax.set_xticks(ticks)
    ax.set_yticks(ticks)
    ax.set_xticklabels(mi.columns, rotation=45, ha='right')
    ax.set_yticklabels(mi.columns)

    if annotate:
        threshold = values.max() / 2 if values.size else 0
        for i in range(values.shape[0]):
            for j in range(values.shape[1]):
                ax.text(j, i, f'{values[i, j]:.2f}', ha='center', va='center',
                        color='black' if values[i, j] > threshold else 'white',
                        fontsize=8)

    if title:
        ax.set_title(title)

    return ax
