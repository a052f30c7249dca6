"""
K-means++ initialization strategy.

Selects initial cluster centers using the K-means++ algorithm, which chooses
centers that are far apart to improve convergence speed and quality.
"""

from typing import List, Optional
import math
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy, ClusterRepresentation
from ..representations.centroid import CentroidRepresentation
from ..errors import InvalidKError


class KMeansPlusPlusInit(InitializationStrategy):
    """K-means++ initialization for better starting positions.

    Algorithm:
    1. Choose first center uniformly at random
    2. For each remaining center:
       - Compute distance from each point to nearest existing center
       - Sample candidates with probability proportional to squared distance
       - Keep the candidate that most reduces the total squared distance
    """

    def __init__(self, n_local_trials: Optional[int] = None):
        """
        Args:
            n_local_trials: Number of candidates to try for each center.
                           If None, uses 2 + log(k) as in sklearn
        """
        self.n_local_trials = n_local_trials

    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> List[ClusterRepresentation]:
        """Initialize cluster centers using K-means++.

        Args:
            points: (n, d) data points
            n_clusters: Number of clusters
            generator: Source of randomness

        Returns:
            List of initialized CentroidRepresentations
        """
        n_points, dimension = points.shape

        if n_clusters > n_points:
            raise InvalidKError(f"Cannot create {n_clusters} clusters from {n_points} points")

        if self.n_local_trials is None:
            n_local_trials = 2 + int(math.log(n_clusters))
        else:
            n_local_trials = self.n_local_trials

        # Sampling happens on CPU copies so draws are device independent
        cpu_points = points.detach().cpu()

        first_idx = int(torch.randint(n_points, (1,), generator=generator).item())
        center_indices = [first_idx]

        distances = torch.sum((cpu_points - cpu_points[first_idx].unsqueeze(0)) ** 2, dim=1)

        for _ in range(1, n_clusters):
            total = distances.sum()
            if total <= 0:
                # Every point coincides with a chosen center; fall back to uniform
                remaining = [i for i in range(n_points) if i not in center_indices]
                pick = int(torch.randint(len(remaining), (1,), generator=generator).item())
                best_candidate = remaining[pick]
            else:
                probabilities = distances / total
                candidates_idx = torch.multinomial(
                    probabilities, n_local_trials, replacement=True, generator=generator
                )

                best_potential = float('inf')
                best_candidate = None
                for idx in candidates_idx.tolist():
                    candidate_distances = torch.sum(
                        (cpu_points - cpu_points[idx].unsqueeze(0)) ** 2, dim=1
                    )
                    potential = torch.minimum(distances, candidate_distances).sum().item()
                    if potential < best_potential:
                        best_potential = potential
                        best_candidate = idx

            center_indices.append(best_candidate)
            new_center_distances = torch.sum(
                (cpu_points - cpu_points[best_candidate].unsqueeze(0)) ** 2, dim=1
            )
            distances = torch.minimum(distances, new_center_distances)

        representations = []
        for idx in center_indices:
            rep = CentroidRepresentation(dimension, points.device, points.dtype)
            rep.mean = points[idx].clone()
            representations.append(rep)

        return representations
