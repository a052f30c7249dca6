"""
Hard assignment strategy for clustering algorithms.

Assigns each point to its nearest cluster based on the distance metric.
"""

from typing import List, Tuple, Dict, Any
import torch
from torch import Tensor

from ..base.interfaces import AssignmentStrategy, ClusterRepresentation


class HardAssignment(AssignmentStrategy):
    """Hard (discrete) assignment to nearest cluster.

    Each point is assigned to exactly one cluster based on minimum distance.
    Ties go to the lowest cluster index.
    """

    def _distance_matrix(self, points: Tensor,
                         representations: List[ClusterRepresentation]) -> Tensor:
        n_points = points.shape[0]
        n_clusters = len(representations)

        distances = torch.zeros(n_points, n_clusters, device=points.device, dtype=points.dtype)
        for k, representation in enumerate(representations):
            distances[:, k] = representation.distance_to_point(points)
        return distances

    def compute_assignments(self, points: Tensor,
                            representations: List[ClusterRepresentation],
                            **kwargs) -> Tensor:
        """Assign each point to nearest cluster.

        Args:
            points: (n, d) data points
            representations: List of K cluster representations

        Returns:
            (n,) tensor of cluster indices
        """
        distances = self._distance_matrix(points, representations)

        # argmin returns the first minimal index
        return torch.argmin(distances, dim=1)


class HardAssignmentWithInfo(HardAssignment):
    """Hard assignment that also returns each point's distance to its centroid."""

    def compute_assignments(self, points: Tensor,
                            representations: List[ClusterRepresentation],
                            **kwargs) -> Tuple[Tensor, Dict[str, Any]]:
        """Assign points and return additional information.

        Returns:
            assignments: (n,) cluster indices
            info: Dictionary with the (n,) ``min_distances`` of each point to
                its own centroid
        """
        distances = self._distance_matrix(points, representations)
        assignments = torch.argmin(distances, dim=1)

        info = {
            'min_distances': torch.gather(distances, 1, assignments.unsqueeze(1)).squeeze(1),
        }
        return assignments, info
