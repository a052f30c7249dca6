"""
End-to-end analysis run.

Composes the engine components explicitly: every step returns a new
artifact, and artifacts are joined by record index when a table is needed.
No component modifies another component's output.

    raw columns -> standardize -> {elbow sweep, final K-means, PCA}
    final assignment + raw columns -> cluster summary
    raw columns -> discretize -> mutual-information matrix
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Tuple, Union
import torch
from torch import Tensor
import numpy as np
import pandas as pd

from .algorithms.kmeans import KMeans
from .algorithms.elbow import ElbowSelector, ElbowCurve
from .decomposition.pca import PCAProjector
from .errors import InvalidKError
from .information.mutual_info import MutualInformationMatrix, MIMatrix
from .preprocessing.standardize import standardize, StandardizedMatrix
from .summary.cluster_summary import ClusterSummarizer, ClusterSummary
from .utils.validation import validate_data, check_column_names, split_feature_matrix


@dataclass
class AnalysisConfig:
    """Settings of one analysis run.

    ``n_clusters`` is the cluster count chosen by the analyst, typically after
    reading the elbow curve of a previous run; it is never inferred.
    """

    n_clusters: int = 3
    k_min: int = 1
    k_max: int = 10
    restarts: int = 10
    seed: Optional[int] = None
    max_iter: int = 300
    init: str = 'random'
    warm_start: bool = True
    n_components: int = 2
    mi_bins: int = 10
    on_degenerate: str = 'raise'
    verbose: int = 0

    def __post_init__(self):
        if self.n_clusters < 1:
            raise InvalidKError(f"n_clusters must be positive, got {self.n_clusters}")
        if self.k_min < 1:
            raise InvalidKError(f"k_min must be positive, got {self.k_min}")
        if self.k_max < self.k_min:
            raise InvalidKError(f"k_max ({self.k_max}) is smaller than k_min ({self.k_min})")
        if self.restarts < 1:
            raise ValueError(f"restarts must be >= 1, got {self.restarts}")
        if self.max_iter < 1:
            raise ValueError(f"max_iter must be >= 1, got {self.max_iter}")
        if self.init not in ('random', 'k-means++'):
            raise ValueError(f"Unknown init method: {self.init}")
        if self.n_components < 1:
            raise ValueError(f"n_components must be >= 1, got {self.n_components}")
        if self.mi_bins < 1:
            raise ValueError(f"mi_bins must be >= 1, got {self.mi_bins}")
        if self.on_degenerate not in ('raise', 'zero'):
            raise ValueError(f"on_degenerate must be 'raise' or 'zero', got {self.on_degenerate!r}")


@dataclass(frozen=True)
class AnalysisResult:
    """Every artifact of one analysis run.

    Record i of the input corresponds to row i of ``standardized.values``,
    ``assignment`` and ``pca_scores``.
    """

    columns: Tuple[str, ...]
    standardized: StandardizedMatrix
    elbow_curve: ElbowCurve
    n_clusters: int
    centroids: Tensor
    assignment: Tensor
    inertia: float
    pca_scores: Tensor
    explained_variance_ratio: Tensor
    mi_matrix: MIMatrix
    cluster_summary: ClusterSummary

    @property
    def centroids_original(self) -> Tensor:
        """Centroids mapped back to the original column units."""
        return self.centroids * self.standardized.scale + self.standardized.mean

    def scatter_frame(self) -> pd.DataFrame:
        """PCA scores joined with cluster ids by record index."""
        scores = self.pca_scores.cpu().numpy()
        frame = pd.DataFrame(scores, columns=[f"PC{i + 1}" for i in range(scores.shape[1])])
        frame['cluster'] = self.assignment.cpu().numpy()
        return frame


class AnalysisPipeline:
    """Run standardization, clustering, projection and MI in one pass."""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()

    def run(self,
            matrix: Union[Tensor, np.ndarray, list],
            columns: Optional[Sequence[str]] = None,
            categorical: Optional[Mapping[str, Sequence[Any]]] = None) -> AnalysisResult:
        """Analyse a feature matrix.

        Args:
            matrix: (n, d) numeric records without missing values
            columns: Names of the d columns
            categorical: Optional per-record categorical columns for the summary

        Returns:
            AnalysisResult
        """
        cfg = self.config
        matrix, columns = split_feature_matrix(matrix, columns)
        X = validate_data(matrix, dtype=torch.float64)
        names = check_column_names(columns, X.shape[1])

        if cfg.verbose:
            print(f"Analysing {X.shape[0]} records x {X.shape[1]} columns")

        standardized = standardize(X, names, on_degenerate=cfg.on_degenerate)
        Z = standardized.values

        selector = ElbowSelector(
            k_min=cfg.k_min,
            k_max=cfg.k_max,
            restarts=cfg.restarts,
            random_state=cfg.seed,
            warm_start=cfg.warm_start,
            init=cfg.init,
            max_iter=cfg.max_iter,
            verbose=cfg.verbose
        )
        curve = selector.sweep(Z)

        model = KMeans(
            n_clusters=cfg.n_clusters,
            init=cfg.init,
            restarts=cfg.restarts,
            max_iter=cfg.max_iter,
            random_state=cfg.seed,
            verbose=max(cfg.verbose - 1, 0)
        ).fit(Z)
        if cfg.verbose:
            print(f"K-means with k={cfg.n_clusters}: inertia = {model.inertia_:.6f}")

        projector = PCAProjector(n_components=cfg.n_components)
        scores = projector.fit_transform(Z)

        mi = MutualInformationMatrix(bins=cfg.mi_bins, on_degenerate=cfg.on_degenerate).compute(X, names)

        labels = model.labels_
        summary = ClusterSummarizer().summarize(X, labels, names, categorical)

        return AnalysisResult(
            columns=tuple(names),
            standardized=standardized,
            elbow_curve=curve,
            n_clusters=cfg.n_clusters,
            centroids=model.cluster_centers_,
            assignment=labels,
            inertia=model.inertia_,
            pca_scores=scores,
            explained_variance_ratio=projector.explained_variance_ratio_,
            mi_matrix=mi,
            cluster_summary=summary
        )


def run_analysis(matrix: Union[Tensor, np.ndarray, list],
                 columns: Optional[Sequence[str]] = None,
                 config: Optional[AnalysisConfig] = None,
                 categorical: Optional[Mapping[str, Sequence[Any]]] = None) -> AnalysisResult:
    """Run the full analysis with config (defaults when None)."""
    return AnalysisPipeline(config).run(matrix, columns, categorical)
