"""
Interfaces of the pluggable k-means steps.

An estimator is assembled from one object per step: a cluster
representation (what a cluster is), an assignment rule (which cluster a
record belongs to), a parameter updater (how a cluster follows its members),
an initializer, a stopping rule and the objective being minimized.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List
import torch
from torch import Tensor


class ClusterRepresentation(ABC):
    """One cluster's parameters plus its point-to-cluster cost."""

    @abstractmethod
    def distance_to_point(self, points: Tensor) -> Tensor:
        """Cost of placing each of the (n, d) points in this cluster, shape (n,)."""

    @abstractmethod
    def update_from_points(self, points: Tensor, **kwargs) -> None:
        """Refit the parameters to the (m, d) member points."""

    @abstractmethod
    def get_parameters(self) -> Dict[str, Tensor]:
        """Copies of the parameter tensors, keyed by name."""

    @abstractmethod
    def set_parameters(self, params: Dict[str, Tensor]) -> None:
        """Overwrite parameters from a ``get_parameters``-style mapping."""

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Number of feature columns d."""


class AssignmentStrategy(ABC):
    """Rule mapping every record to one cluster index."""

    @abstractmethod
    def compute_assignments(self, points: Tensor,
                            representations: List[ClusterRepresentation],
                            **kwargs) -> Tensor:
        """Cluster index in [0, K) of each of the (n, d) points.

        Implementations may return ``(labels, info)`` where ``info`` is a dict
        of by-products (for instance the distances behind the decision).
        """


class ParameterUpdater(ABC):
    """Update step applied to each non-empty cluster."""

    @abstractmethod
    def update(self, representation: ClusterRepresentation,
               points: Tensor,
               **kwargs) -> float:
        """Refit representation to its (m, d) members.

        Returns:
            Squared distance the cluster's location moved
        """


class InitializationStrategy(ABC):
    """Produces the starting clusters of one restart."""

    @abstractmethod
    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> List[ClusterRepresentation]:
        """Build n_clusters representations for the (n, d) points.

        Any randomness must come from ``generator`` so that a restart is
        reproducible from its seed alone.
        """


class ConvergenceCriterion(ABC):
    """Stopping rule consulted once per iteration.

    ``history`` collects one record per comparison made.
    """

    def __init__(self):
        self.history: List[Dict[str, Any]] = []

    @abstractmethod
    def check(self, current_state: Dict[str, Any]) -> bool:
        """True once the iteration described by current_state is final."""

    def reset(self):
        """Forget everything seen so far (called at the start of a restart)."""
        self.history = []


class ClusteringObjective(ABC):
    """Scalar quality of a clustering."""

    @abstractmethod
    def compute(self, points: Tensor,
                representations: List[ClusterRepresentation],
                assignments: Tensor) -> Tensor:
        """Objective of the (n,) assignments under the given clusters (0-dim tensor)."""

    @property
    @abstractmethod
    def minimize(self) -> bool:
        """True if lower values are better."""
