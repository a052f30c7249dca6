"""
Shared state of cluster representations: a location in feature space.
"""

import torch
from torch import Tensor

from ..base.interfaces import ClusterRepresentation
from ..errors import DimensionMismatchError


class BaseRepresentation(ClusterRepresentation):
    """Holds a (d,) location tensor with a fixed dtype and device.

    Assigning ``mean`` checks the shape and converts to the stored dtype, so
    a representation never silently changes precision.
    """

    def __init__(self, dimension: int, device: torch.device,
                 dtype: torch.dtype = torch.float64):
        self._dimension = dimension
        self._device = device
        self._dtype = dtype
        self._mean = torch.zeros(dimension, device=device, dtype=dtype)

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def mean(self) -> Tensor:
        return self._mean

    @mean.setter
    def mean(self, value: Tensor):
        if value.shape != (self._dimension,):
            raise DimensionMismatchError(
                f"Expected mean of shape ({self._dimension},), got {tuple(value.shape)}"
            )
        self._mean = value.to(device=self._device, dtype=self._dtype)

    def _check_points_shape(self, points: Tensor):
        """Raise unless points is (n, d) for this representation's d."""
        if points.dim() != 2:
            raise ValueError(f"Expected 2D tensor, got {points.dim()}D")
        if points.shape[1] != self._dimension:
            raise DimensionMismatchError(
                f"Points have {points.shape[1]} columns, cluster has {self._dimension}"
            )
