"""
Centroid update: move each cluster to the mean of its members.
"""

from torch import Tensor

from ..base.interfaces import ParameterUpdater, ClusterRepresentation


class MeanUpdater(ParameterUpdater):
    """Set a centroid to the arithmetic mean of its assigned records.

    The base loop only calls this for clusters with members, so the mean is
    always defined. The returned shift lets the loop report how far the
    centroids still move.
    """

    def update(self, representation: ClusterRepresentation,
               points: Tensor,
               **kwargs) -> float:
        before = representation.get_parameters()['mean']
        representation.update_from_points(points)
        after = representation.get_parameters()['mean']
        return float(((after - before) ** 2).sum().item())
