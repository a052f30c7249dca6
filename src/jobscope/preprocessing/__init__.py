"""Column transforms applied before clustering and information estimates."""

from .standardize import Standardizer, StandardizedMatrix, standardize
from .discretize import Discretizer, discretize

__all__ = [
    'Standardizer',
    'StandardizedMatrix',
    'standardize',
    'Discretizer',
    'discretize'
]
