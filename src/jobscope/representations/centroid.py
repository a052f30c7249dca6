"""
Centroid representation: a k-means cluster is just its mean record.
"""

from typing import Dict
from torch import Tensor

from .base_representation import BaseRepresentation


class CentroidRepresentation(BaseRepresentation):
    """Cluster summarized by one point; cost is squared Euclidean distance."""

    def distance_to_point(self, points: Tensor) -> Tensor:
        """Squared distance ||x - mu||^2 of each row of points, shape (n,)."""
        self._check_points_shape(points)
        diff = points - self._mean
        return (diff * diff).sum(dim=1)

    def update_from_points(self, points: Tensor, **kwargs) -> None:
        """Move to the mean of points; an empty set leaves the centroid in place."""
        self._check_points_shape(points)
        if points.shape[0] > 0:
            self._mean = points.mean(dim=0)

    def get_parameters(self) -> Dict[str, Tensor]:
        return {'mean': self._mean.clone()}

    def set_parameters(self, params: Dict[str, Tensor]) -> None:
        if 'mean' in params:
            self.mean = params['mean']

    def __repr__(self) -> str:
        return f"CentroidRepresentation(dimension={self._dimension}, mean={self._mean.tolist()})"
