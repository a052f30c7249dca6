"""
Base class for clustering algorithms in jobscope.

Provides the common algorithmic skeleton for alternating optimization
between assignment and update steps, repeated over independent restarts.
"""

from abc import abstractmethod
from typing import Optional, Dict, Any, List, Tuple, Union
import torch
from torch import Tensor
import numpy as np
import time
import warnings

from .interfaces import (
    ClusterRepresentation, AssignmentStrategy, ParameterUpdater,
    InitializationStrategy, ConvergenceCriterion, ClusteringObjective
)
from .data_structures import ClusterState, AssignmentMatrix, AlgorithmState
from ..utils.validation import (
    validate_data, check_n_clusters, check_n_features, derive_seeds
)


class BaseClusteringAlgorithm:
    """Base class implementing the alternating optimization framework.

    Subclasses need to specify:
    - Assignment strategy
    - Parameter update strategy
    - Initialization strategy
    - Convergence criterion
    - Objective function

    Each restart draws from its own ``torch.Generator`` seeded from a list
    derived from ``random_state``; the global torch RNG is never touched.
    """

    def __init__(self,
                 n_clusters: int,
                 restarts: int = 10,
                 max_iter: int = 300,
                 tol: float = 0.0,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None,
                 device: Optional[torch.device] = None):
        """
        Args:
            n_clusters: Number of clusters K
            restarts: Number of independent initializations; the run with
                the lowest objective is kept
            max_iter: Maximum iterations per restart
            tol: Largest fraction of points allowed to change assignment in
                a converged iteration (0.0 means no point may change)
            verbose: Verbosity level (0=silent, 1=progress, 2=detailed)
            random_state: Random seed for reproducibility
            device: Torch device (None for CPU)
        """
        self.n_clusters = n_clusters
        self.restarts = restarts
        self.max_iter = max_iter
        self.tol = tol
        self.verbose = verbose
        self.random_state = random_state
        self.device = torch.device('cpu') if device is None else torch.device(device)

        # These will be set by subclasses
        self.representations: Optional[List[ClusterRepresentation]] = None
        self.assignment_strategy: Optional[AssignmentStrategy] = None
        self.update_strategy: Optional[ParameterUpdater] = None
        self.initialization_strategy: Optional[InitializationStrategy] = None
        self.convergence_criterion: Optional[ConvergenceCriterion] = None
        self.objective: Optional[ClusteringObjective] = None

        # Algorithm state
        self.fitted_ = False
        self.n_iter_ = 0
        self.converged_ = False
        self.history_: List[AlgorithmState] = []
        self.restart_inertias_: List[float] = []
        self.restart_histories_: List[List[float]] = []
        self.best_restart_: Optional[int] = None

    @abstractmethod
    def _create_components(self) -> None:
        """Create algorithm-specific components.

        Subclasses must implement this to instantiate:
        - self.assignment_strategy
        - self.update_strategy
        - self.initialization_strategy
        - self.convergence_criterion
        - self.objective
        """
        pass

    def _n_restarts(self) -> int:
        """Number of restarts actually run (subclasses may pin this to 1)."""
        return self.restarts

    def fit(self, X: Union[Tensor, np.ndarray, list], y: Optional[Tensor] = None) -> 'BaseClusteringAlgorithm':
        """Fit the clustering model.

        Args:
            X: (n, d) data
            y: Ignored (for sklearn compatibility)

        Returns:
            Self
        """
        return self._fit(X)

    def fit_predict(self, X: Union[Tensor, np.ndarray, list], y: Optional[Tensor] = None) -> Tensor:
        """Fit and return cluster assignments of the training data."""
        self._fit(X)
        return self.labels_

    def predict(self, X: Union[Tensor, np.ndarray, list]) -> Tensor:
        """Predict cluster assignments for new data.

        Args:
            X: (n, d) data

        Returns:
            (n,) tensor of cluster assignments
        """
        if not self.fitted_:
            raise RuntimeError("Model must be fitted before calling predict")

        X = self._validate_data(X)
        check_n_features(X, self.representations[0].dimension)

        assignments = self.assignment_strategy.compute_assignments(X, self.representations)
        if isinstance(assignments, tuple):
            assignments = assignments[0]

        return AssignmentMatrix(assignments, self.n_clusters).get_hard()

    def _fit(self, X: Union[Tensor, np.ndarray, list]) -> 'BaseClusteringAlgorithm':
        """Internal fit method running every restart and keeping the best."""
        X = self._validate_data(X)
        n_points = X.shape[0]

        check_n_clusters(self.n_clusters, n_points)
        if self.restarts < 1:
            raise ValueError(f"restarts must be >= 1, got {self.restarts}")
        if self.max_iter < 1:
            raise ValueError(f"max_iter must be >= 1, got {self.max_iter}")

        self._create_components()

        seeds = derive_seeds(self.random_state, self._n_restarts())

        self.restart_inertias_ = []
        self.restart_histories_ = []
        best: Optional[Tuple[List[ClusterRepresentation], List[AlgorithmState], bool]] = None
        best_objective = float('inf')

        start_time = time.time()
        for restart, seed in enumerate(seeds):
            generator = torch.Generator()
            generator.manual_seed(seed)

            if self.verbose:
                print(f"Restart {restart + 1}/{len(seeds)}: initializing {self.n_clusters} clusters...")

            representations, history, converged = self._run_single(X, generator)
            objective_value = history[-1].objective_value

            self.restart_inertias_.append(objective_value)
            self.restart_histories_.append([state.objective_value for state in history])

            # Strict comparison keeps the earliest restart on ties
            if objective_value < best_objective or best is None:
                best = (representations, history, converged)
                best_objective = objective_value
                self.best_restart_ = restart

        self.representations, self.history_, self.converged_ = best
        self.n_iter_ = len(self.history_)
        self.fitted_ = True

        if self.verbose:
            print(f"Best restart: {self.best_restart_ + 1} with objective {best_objective:.6f}")
            print(f"Total fitting time: {time.time() - start_time:.3f}s")

        return self

    def _run_single(self, X: Tensor, generator: torch.Generator
                    ) -> Tuple[List[ClusterRepresentation], List[AlgorithmState], bool]:
        """Run one restart of the alternating optimization."""
        representations = self.initialization_strategy.initialize(
            X, self.n_clusters, generator=generator
        )

        self.convergence_criterion.reset()
        history: List[AlgorithmState] = []
        converged = False

        for iteration in range(self.max_iter):
            iter_start_time = time.time()

            # Assignment step
            assignment_result = self.assignment_strategy.compute_assignments(X, representations)
            if isinstance(assignment_result, tuple):
                assignments, aux_info = assignment_result
            else:
                assignments, aux_info = assignment_result, {}

            assignments, reseeded = self._handle_empty_clusters(X, assignments, aux_info)

            assignment_matrix = AssignmentMatrix(assignments, self.n_clusters)

            # Update step
            max_shift = 0.0
            for k, representation in enumerate(representations):
                cluster_indices = assignment_matrix.get_cluster_indices(k)
                if len(cluster_indices) > 0:
                    shift = self.update_strategy.update(representation, X[cluster_indices])
                    max_shift = max(max_shift, shift)

            objective_value = self.objective.compute(X, representations, assignments).item()

            converged = self.convergence_criterion.check({
                'iteration': iteration,
                'objective': objective_value,
                'assignments': assignments,
            })

            history.append(AlgorithmState(
                iteration=iteration,
                cluster_state=self._extract_cluster_state(representations),
                assignments=assignment_matrix,
                objective_value=objective_value,
                n_changed=self.convergence_criterion.history[-1]['n_changed']
                if self.convergence_criterion.history else None,
                reseeded=reseeded,
                converged=converged,
                metadata={"max_shift": max_shift},
            ))

            iter_time = time.time() - iter_start_time
            if self.verbose >= 2:
                obj_direction = "↓" if self.objective.minimize else "↑"
                print(f"Iteration {iteration:3d}: objective = {objective_value:.6f} "
                      f"{obj_direction} max shift = {max_shift:.3e} ({iter_time:.3f}s)")

            if converged:
                if self.verbose >= 2:
                    print(f"Converged at iteration {iteration}")
                break

        if not converged and self.verbose:
            warnings.warn(f"Failed to converge after {self.max_iter} iterations")

        return representations, history, converged

    def _handle_empty_clusters(self, X: Tensor, assignments: Tensor,
                               aux_info: Dict[str, Any]) -> Tuple[Tensor, List[int]]:
        """Hook for keeping clusters non-empty; the default does nothing."""
        return assignments, []

    def _validate_data(self, X: Union[Tensor, np.ndarray, list]) -> Tensor:
        """Validate and prepare input data."""
        return validate_data(X, dtype=torch.float64, device=self.device, ensure_2d=True)

    def _extract_cluster_state(self, representations: List[ClusterRepresentation]) -> ClusterState:
        """Extract current cluster parameters into ClusterState object."""
        means = torch.stack([
            rep.get_parameters()['mean']
            for rep in representations
        ])

        return ClusterState(
            means=means,
            n_clusters=self.n_clusters,
            dimension=means.shape[1]
        )

    def _check_fitted(self) -> None:
        if not self.fitted_:
            raise RuntimeError("Model must be fitted first")

    @property
    def cluster_centers_(self) -> Tensor:
        """Get cluster centers/means."""
        self._check_fitted()
        return self.history_[-1].cluster_state.means.clone()

    @property
    def labels_(self) -> Tensor:
        """Get cluster assignments of the training data."""
        self._check_fitted()
        return self.history_[-1].assignments.get_hard().clone()

    @property
    def inertia_(self) -> float:
        """Get final objective value."""
        self._check_fitted()
        return self.history_[-1].objective_value

    @property
    def objective_history_(self) -> List[float]:
        """Objective value after every iteration of the kept restart."""
        self._check_fitted()
        return [state.objective_value for state in self.history_]

    def get_params(self, deep: bool = True) -> Dict[str, Any]:
        """Get parameters (sklearn compatibility)."""
        return {
            'n_clusters': self.n_clusters,
            'restarts': self.restarts,
            'max_iter': self.max_iter,
            'tol': self.tol,
            'verbose': self.verbose,
            'random_state': self.random_state,
            'device': self.device
        }

    def set_params(self, **params) -> 'BaseClusteringAlgorithm':
        """Set parameters (sklearn compatibility)."""
        valid = self.get_params()
        for key, value in params.items():
            if key not in valid:
                raise ValueError(f"Invalid parameter {key!r} for {type(self).__name__}")
            setattr(self, key, value)
        return self
