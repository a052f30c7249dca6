"""
K-means clustering algorithm.

Lloyd's algorithm implemented on the modular framework, with seeded
restarts and re-seeding of clusters that lose all their members.
"""

from typing import Optional, List, Tuple, Union, Dict, Any
import torch
from torch import Tensor
import numpy as np

from ..base.clustering_base import BaseClusteringAlgorithm
from ..base.interfaces import ClusterRepresentation, ClusteringObjective
from ..assignments.hard import HardAssignmentWithInfo
from ..initialization.random import RandomInit
from ..initialization.kmeans_plusplus import KMeansPlusPlusInit
from ..initialization.from_previous import FromPreviousInit
from ..utils.convergence import ChangeInAssignments
from ..updates.mean import MeanUpdater


class KMeansObjective(ClusteringObjective):
    """K-means objective: sum of squared distances to centroids."""

    def compute(self, points: Tensor, representations: List[ClusterRepresentation],
                assignments: Tensor) -> Tensor:
        """Compute within-cluster sum of squares."""
        total = torch.zeros((), dtype=points.dtype, device=points.device)

        for k, rep in enumerate(representations):
            cluster_points_mask = (assignments == k)
            if cluster_points_mask.any():
                total = total + rep.distance_to_point(points[cluster_points_mask]).sum()

        return total

    @property
    def minimize(self) -> bool:
        return True


class KMeans(BaseClusteringAlgorithm):
    """K-means clustering algorithm.

    Partitions data into K clusters by minimizing the within-cluster sum of
    squared Euclidean distances (inertia).

    Parameters
    ----------
    n_clusters : int
        Number of clusters, 1 <= n_clusters <= n_samples
    init : str or array-like, default='random'
        Initialization method:
        - 'random' : K distinct points sampled uniformly without replacement
        - 'k-means++' : K-means++ initialization
        - array of shape (n_clusters, n_features) : Use as initial centers
          (a single restart is run)
    restarts : int, default=10
        Number of independent initializations; the lowest inertia wins
    max_iter : int, default=300
        Maximum number of Lloyd iterations per restart
    tol : float, default=0.0
        Fraction of points allowed to change assignment in a converged
        iteration; 0.0 stops only when no point changes
    verbose : int, default=0
        Verbosity level
    random_state : int, optional
        Random seed for reproducibility
    device : torch.device, optional
        Device for computation (defaults to CPU)

    Attributes
    ----------
    cluster_centers_ : Tensor of shape (n_clusters, n_features)
        Cluster centroids
    labels_ : Tensor of shape (n_samples,)
        Cluster assignments for training data
    inertia_ : float
        Sum of squared distances to assigned cluster center
    n_iter_ : int
        Number of iterations run by the kept restart
    objective_history_ : list of float
        Inertia after every iteration of the kept restart
    restart_inertias_ : list of float
        Final inertia of every restart

    Notes
    -----
    A cluster left empty after an assignment step is re-seeded with the
    point farthest from its own centroid, taken from a cluster that keeps at
    least one member. This never increases inertia, so the per-iteration
    inertia of a restart is non-increasing and exactly K clusters are
    non-empty at the end.
    """

    def __init__(self,
                 n_clusters: int,
                 init: Union[str, Tensor, np.ndarray] = 'random',
                 restarts: int = 10,
                 max_iter: int = 300,
                 tol: float = 0.0,
                 verbose: int = 0,
                 random_state: Optional[int] = None,
                 device: Optional[torch.device] = None):
        """Initialize K-means algorithm."""
        super().__init__(
            n_clusters=n_clusters,
            restarts=restarts,
            max_iter=max_iter,
            tol=tol,
            verbose=verbose,
            random_state=random_state,
            device=device
        )
        self.init = init

    def _create_components(self) -> None:
        """Create K-means specific components."""
        self.assignment_strategy = HardAssignmentWithInfo()
        self.update_strategy = MeanUpdater()

        if isinstance(self.init, str):
            if self.init == 'random':
                self.initialization_strategy = RandomInit()
            elif self.init == 'k-means++':
                self.initialization_strategy = KMeansPlusPlusInit()
            else:
                raise ValueError(f"Unknown init method: {self.init}")
        else:
            if isinstance(self.init, Tensor):
                initial_centers = self.init.detach()
            else:
                initial_centers = torch.as_tensor(np.asarray(self.init, dtype=np.float64))
            self.initialization_strategy = FromPreviousInit(
                initial_centers.to(device=self.device, dtype=torch.float64)
            )

        self.convergence_criterion = ChangeInAssignments(min_change_fraction=self.tol)
        self.objective = KMeansObjective()

    def _n_restarts(self) -> int:
        # A fixed starting point gives the same run every time
        return self.restarts if isinstance(self.init, str) else 1

    def _handle_empty_clusters(self, X: Tensor, assignments: Tensor,
                               aux_info: Dict[str, Any]) -> Tuple[Tensor, List[int]]:
        """Move the farthest points into clusters that received no points."""
        counts = torch.bincount(assignments, minlength=self.n_clusters)
        empty = torch.where(counts == 0)[0].tolist()
        if not empty:
            return assignments, []

        assignments = assignments.clone()
        counts = counts.tolist()
        min_distances = aux_info['min_distances']
        order = torch.argsort(min_distances, descending=True, stable=True).tolist()

        position = 0
        for cluster in empty:
            # Pigeonhole: while a cluster is empty another has >= 2 members
            while True:
                point = order[position]
                position += 1
                source = int(assignments[point].item())
                if counts[source] > 1:
                    break
            assignments[point] = cluster
            counts[source] -= 1
            counts[cluster] = 1

        if self.verbose >= 2:
            print(f"Re-seeded empty clusters: {empty}")

        return assignments, empty

    def score(self, X: Union[Tensor, np.ndarray, list], y: Optional[Tensor] = None) -> float:
        """Opposite of the value of X on the K-means objective.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            New data
        y : Ignored
            Not used

        Returns
        -------
        score : float
            Negative of sum of squared distances to nearest centers
        """
        labels = self.predict(X)
        X = self._validate_data(X)
        return -self.objective.compute(X, self.representations, labels).item()

    def get_params(self, deep: bool = True) -> Dict[str, Any]:
        params = super().get_params(deep)
        params['init'] = self.init
        return params


def kmeans(points: Union[Tensor, np.ndarray, list],
           k: int,
           restarts: int = 10,
           seed: Optional[int] = None,
           **kwargs) -> Tuple[Tensor, Tensor, float]:
    """Cluster points with K-means and return the best restart.

    Args:
        points: (n, d) data, normally standardized
        k: Number of clusters
        restarts: Number of independent initializations
        seed: Seed making the result reproducible
        **kwargs: Further KMeans parameters (init, max_iter, tol, verbose, device)

    Returns:
        centroids: (k, d) tensor
        assignment: (n,) long tensor with values in [0, k)
        inertia: Sum of squared distances to assigned centroids
    """
    model = KMeans(n_clusters=k, restarts=restarts, random_state=seed, **kwargs)
    model.fit(points)
    return model.cluster_centers_, model.labels_, model.inertia_
