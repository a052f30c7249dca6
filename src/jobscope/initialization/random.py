"""
Random seeding: k distinct records chosen uniformly as starting centroids.
"""

from typing import List, Optional
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy, ClusterRepresentation
from ..representations.centroid import CentroidRepresentation
from ..errors import InvalidKError


class RandomInit(InitializationStrategy):
    """Start from n_clusters records sampled without replacement.

    The draw is a permutation from the restart's generator, taken on the CPU,
    so the same seed picks the same records on any device.
    """

    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> List[ClusterRepresentation]:
        n_points, dimension = points.shape
        if n_clusters > n_points:
            raise InvalidKError(f"Cannot create {n_clusters} clusters from {n_points} points")

        chosen = torch.randperm(n_points, generator=generator)[:n_clusters].tolist()

        centroids = []
        for idx in chosen:
            centroid = CentroidRepresentation(dimension, points.device, points.dtype)
            centroid.mean = points[idx].clone()
            centroids.append(centroid)
        return centroids
