"""Dimensionality reduction."""

from .pca import PCAProjector, project

__all__ = [
    'PCAProjector',
    'project'
]
