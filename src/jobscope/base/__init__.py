"""Base classes and interfaces for jobscope clustering algorithms."""

from .interfaces import (
    ClusterRepresentation,
    AssignmentStrategy,
    ParameterUpdater,
    InitializationStrategy,
    ConvergenceCriterion,
    ClusteringObjective
)

from .data_structures import (
    FeatureMatrix,
    ClusterState,
    AssignmentMatrix,
    AlgorithmState
)

from .clustering_base import BaseClusteringAlgorithm

__all__ = [
    # Interfaces
    'ClusterRepresentation',
    'AssignmentStrategy',
    'ParameterUpdater',
    'InitializationStrategy',
    'ConvergenceCriterion',
    'ClusteringObjective',

    # Data structures
    'FeatureMatrix',
    'ClusterState',
    'AssignmentMatrix',
    'AlgorithmState',

    # Base algorithm
    'BaseClusteringAlgorithm'
]
