"""Clustering algorithm implementations."""

from .kmeans import KMeans, KMeansObjective, kmeans
from .elbow import ElbowSelector, ElbowCurve, sweep

__all__ = [
    'KMeans',
    'KMeansObjective',
    'kmeans',
    'ElbowSelector',
    'ElbowCurve',
    'sweep'
]
