"""
Core data structures for the jobscope analysis engine.

This module provides containers for feature matrices, cluster states,
assignments and per-iteration algorithm state.
"""

from typing import Optional, List, Dict, Any, Sequence
import torch
from torch import Tensor
from dataclasses import dataclass, field

from ..errors import DimensionMismatchError


@dataclass(frozen=True)
class FeatureMatrix:
    """Records aligned to a fixed, ordered set of named numeric columns.

    ``values`` is an (n, d) tensor; ``columns`` holds the d column names.
    """

    values: Tensor
    columns: tuple

    def __post_init__(self):
        if self.values.dim() != 2:
            raise ValueError(f"Expected 2D tensor, got {self.values.dim()}D")
        columns = tuple(str(c) for c in self.columns)
        if len(columns) != self.values.shape[1]:
            raise DimensionMismatchError(
                f"{len(columns)} column names given for a matrix with "
                f"{self.values.shape[1]} columns"
            )
        if len(set(columns)) != len(columns):
            raise ValueError(f"Column names must be unique, got {list(columns)}")
        object.__setattr__(self, 'columns', columns)

    @classmethod
    def from_values(cls, values: Tensor,
                    columns: Optional[Sequence[str]] = None) -> 'FeatureMatrix':
        """Build a matrix, naming columns ``x0, x1, ...`` when none are given."""
        if columns is None:
            columns = [f"x{j}" for j in range(values.shape[1])]
        return cls(values=values, columns=tuple(columns))

    @property
    def n_records(self) -> int:
        return self.values.shape[0]

    @property
    def n_columns(self) -> int:
        return self.values.shape[1]

    def column(self, name: str) -> Tensor:
        """Return one column by name."""
        try:
            j = self.columns.index(name)
        except ValueError:
            raise KeyError(f"Unknown column: {name!r}") from None
        return self.values[:, j]


@dataclass
class ClusterState:
    """Container for all centroids at a given iteration."""

    means: Tensor  # (K, d) cluster centroids
    n_clusters: int
    dimension: int

    def __post_init__(self):
        """Validate dimensions."""
        assert self.means.shape == (self.n_clusters, self.dimension)


class AssignmentMatrix:
    """Hard cluster assignments with per-cluster aggregation helpers."""

    def __init__(self, assignments: Tensor, n_clusters: int):
        """
        Args:
            assignments: (n,) hard assignments
            n_clusters: Number of clusters K
        """
        self.n_clusters = n_clusters
        self._validate_and_store(assignments)

    def _validate_and_store(self, assignments: Tensor):
        """Validate and store assignments in canonical format."""
        assert assignments.dim() == 1
        if assignments.numel() > 0:
            assert assignments.max() < self.n_clusters
            assert assignments.min() >= 0
        self._hard_assignments = assignments.long()

    @property
    def n_points(self) -> int:
        """Number of data points."""
        return self._hard_assignments.shape[0]

    def get_hard(self) -> Tensor:
        """Get hard assignments."""
        return self._hard_assignments

    def get_cluster_indices(self, cluster_idx: int) -> Tensor:
        """Get indices of points assigned to a specific cluster."""
        return torch.where(self._hard_assignments == cluster_idx)[0]

    def count_per_cluster(self) -> Tensor:
        """Count points per cluster."""
        return torch.bincount(self._hard_assignments, minlength=self.n_clusters)


@dataclass
class AlgorithmState:
    """State of a single restart at a given iteration.

    Used for convergence checking, monotonicity checks and debugging.
    """
    iteration: int
    cluster_state: ClusterState
    assignments: AssignmentMatrix
    objective_value: float

    n_changed: Optional[int] = None
    reseeded: List[int] = field(default_factory=list)
    converged: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)
