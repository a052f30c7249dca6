"""
Clustering and information metrics.

Provides the k-means objective, contingency-table based information measures
(entropy, mutual information) over discrete labels, and cluster purity.
All logarithms are natural, so information is measured in nats.
"""

from typing import Optional
import torch
from torch import Tensor


def inertia(X: Tensor, labels: Tensor, centers: Tensor) -> float:
    """Compute sum of squared distances to assigned centers (inertia).

    Args:
        X: (n, d) data points
        labels: (n,) cluster labels
        centers: (k, d) cluster centers

    Returns:
        Total inertia (lower is better)
    """
    diff = X - centers[labels]
    return torch.sum(diff * diff).item()


def total_sum_of_squares(X: Tensor) -> float:
    """Sum of squared distances of all points to the global mean."""
    diff = X - X.mean(dim=0, keepdim=True)
    return torch.sum(diff * diff).item()


def contingency_matrix(labels_a: Tensor, labels_b: Tensor,
                       n_a: Optional[int] = None, n_b: Optional[int] = None) -> Tensor:
    """Build contingency matrix for two discrete labelings.

    Args:
        labels_a: (n,) non-negative integer labels
        labels_b: (n,) non-negative integer labels
        n_a: Number of categories of labels_a (inferred if None)
        n_b: Number of categories of labels_b (inferred if None)

    Returns:
        (n_a, n_b) matrix C where C[i, j] counts samples with
        labels_a == i and labels_b == j
    """
    if labels_a.shape != labels_b.shape:
        raise ValueError(f"Label shapes differ: {tuple(labels_a.shape)} vs {tuple(labels_b.shape)}")

    labels_a = labels_a.long()
    labels_b = labels_b.long()
    if n_a is None:
        n_a = int(labels_a.max().item()) + 1
    if n_b is None:
        n_b = int(labels_b.max().item()) + 1

    flat = labels_a * n_b + labels_b
    counts = torch.bincount(flat, minlength=n_a * n_b)
    return counts.reshape(n_a, n_b)


def entropy(labels: Tensor) -> float:
    """Shannon entropy (nats) of the empirical distribution of discrete labels."""
    counts = torch.bincount(labels.long()).to(torch.float64)
    p = counts / counts.sum()
    p = p[p > 0]
    h = -torch.sum(p * torch.log(p)).item()
    return h if h > 0.0 else 0.0


def mutual_information(labels_a: Tensor, labels_b: Tensor) -> float:
    """Mutual information (nats) between two discrete labelings.

    Only observed cells enter the sum; empty cells contribute zero. The log
    term is taken on integer counts, c_xy * n / (c_x * c_y), whose products
    are exact in float64, so independent labelings give exactly 0.
    """
    joint = contingency_matrix(labels_a, labels_b).to(torch.float64)
    n = joint.sum()
    c_x = joint.sum(dim=1, keepdim=True).expand_as(joint)
    c_y = joint.sum(dim=0, keepdim=True).expand_as(joint)

    mask = joint > 0
    c_xy = joint[mask]
    ratio = (c_xy * n) / (c_x[mask] * c_y[mask])
    mi = torch.sum((c_xy / n) * torch.log(ratio)).item()

    # Rounding can leave a tiny negative value for near-independent labelings
    return mi if mi > 0.0 else 0.0


def purity(labels_true: Tensor, labels_pred: Tensor) -> float:
    """Fraction of points that belong to the majority true class of their cluster.

    Args:
        labels_true: (n,) ground truth labels
        labels_pred: (n,) predicted cluster labels

    Returns:
        Purity in [0, 1]
    """
    contingency = contingency_matrix(labels_pred, labels_true)
    return (contingency.max(dim=1).values.sum() / contingency.sum()).item()
