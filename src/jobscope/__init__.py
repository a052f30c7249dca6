"""
jobscope: a statistical analysis engine for HPC job records.

This package implements the numeric core of an exploratory analysis:
- Per-column standardization (z-scores)
- K-means clustering with seeded restarts
- Elbow-curve sweeps over the cluster count
- PCA projection for 2D visualization
- Pairwise mutual information via equal-width discretization
- Per-cluster summary statistics

Example usage:
    >>> import torch
    >>> from jobscope import standardize, KMeans, project
    >>>
    >>> X = torch.randn(1000, 6, dtype=torch.float64)
    >>> Z = standardize(X).values
    >>>
    >>> kmeans = KMeans(n_clusters=4, restarts=10, random_state=0)
    >>> labels = kmeans.fit_predict(Z)
    >>> scores, ratio = project(Z, n_components=2)
"""

__version__ = '0.1.0'

from .errors import (
    JobscopeError,
    InvalidKError,
    DegenerateColumnError,
    InsufficientDimensionsError,
    DimensionMismatchError
)

from .algorithms.kmeans import KMeans, kmeans
from .algorithms.elbow import ElbowSelector, ElbowCurve, sweep
from .preprocessing import Standardizer, StandardizedMatrix, standardize, Discretizer, discretize
from .decomposition import PCAProjector, project
from .information import MIMatrix, MutualInformationMatrix, mutual_information_matrix
from .summary import ClusterSummarizer, ClusterSummary, ClusterStatistics, summarize
from .pipeline import AnalysisConfig, AnalysisPipeline, AnalysisResult, run_analysis

from .base import (
    FeatureMatrix,
    ClusterState,
    AssignmentMatrix
)

__all__ = [
    # Errors
    'JobscopeError',
    'InvalidKError',
    'DegenerateColumnError',
    'InsufficientDimensionsError',
    'DimensionMismatchError',

    # Clustering
    'KMeans',
    'kmeans',
    'ElbowSelector',
    'ElbowCurve',
    'sweep',

    # Preprocessing
    'Standardizer',
    'StandardizedMatrix',
    'standardize',
    'Discretizer',
    'discretize',

    # Projection
    'PCAProjector',
    'project',

    # Mutual information
    'MIMatrix',
    'MutualInformationMatrix',
    'mutual_information_matrix',

    # Summaries
    'ClusterSummarizer',
    'ClusterSummary',
    'ClusterStatistics',
    'summarize',

    # Pipeline
    'AnalysisConfig',
    'AnalysisPipeline',
    'AnalysisResult',
    'run_analysis',

    # Core data structures
    'FeatureMatrix',
    'ClusterState',
    'AssignmentMatrix',

    # Version
    '__version__'
]
