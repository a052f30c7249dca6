"""
Initialization from fixed starting centers.

Used for explicit user centers and for warm starts, e.g. growing a
k-cluster solution to k + 1 clusters.
"""

from typing import List, Optional
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy, ClusterRepresentation
from ..representations.centroid import CentroidRepresentation
from ..errors import DimensionMismatchError, InvalidKError


class FromPreviousInit(InitializationStrategy):
    """Initialize from a (n_clusters, dimension) tensor of centers."""

    def __init__(self, initial_centers: Tensor):
        """
        Args:
            initial_centers: Starting centers, one row per cluster
        """
        if not isinstance(initial_centers, Tensor):
            raise TypeError(f"initial_centers must be a Tensor, got {type(initial_centers)}")
        self.initial_centers = initial_centers

    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> List[ClusterRepresentation]:
        """Initialize from the stored centers.

        Args:
            points: (n, d) data points (used for validation)
            n_clusters: Expected number of clusters
            generator: Ignored, the starting point is fixed

        Returns:
            List of initialized representations
        """
        dimension = points.shape[1]
        device = points.device
        centers = self.initial_centers.to(device=device, dtype=points.dtype)

        if centers.dim() != 2:
            raise ValueError(f"Initial centers must be 2D, got {centers.dim()}D")
        if centers.shape[0] != n_clusters:
            raise InvalidKError(f"Initial centers has {centers.shape[0]} clusters, "
                                f"but n_clusters={n_clusters}")
        if centers.shape[1] != dimension:
            raise DimensionMismatchError(f"Initial centers has dimension {centers.shape[1]}, "
                                         f"but data has dimension {dimension}")

        representations = []
        for k in range(n_clusters):
            rep = CentroidRepresentation(dimension, device, points.dtype)
            rep.mean = centers[k].clone()
            representations.append(rep)

        return representations
