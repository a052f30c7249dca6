"""
Principal component projection for visualization support.

Eigendecomposition of the sample covariance (denominator n - 1) of the
centred input, projection onto the leading eigenvectors.

Known ambiguities: eigenvector signs are arbitrary, and equal eigenvalues
leave the order of their axes undefined. Each axis is flipped so that its
largest-magnitude loading is positive, which makes repeated runs agree;
callers must still not attach meaning to the sign of a component.
"""

from typing import Optional, Tuple, Union
import torch
from torch import Tensor
import numpy as np

from ..errors import InsufficientDimensionsError, DegenerateColumnError
from ..utils.linalg import covariance, sorted_eigh, flip_signs
from ..utils.validation import validate_data, check_n_features


class PCAProjector:
    """Project data onto its top principal components.

    Parameters
    ----------
    n_components : int, default=2
        Number of components kept; at most the number of input columns

    Attributes
    ----------
    components_ : Tensor of shape (n_components, n_features)
        Principal axes, one per row, by descending explained variance
    explained_variance_ : Tensor of shape (n_components,)
        Eigenvalues of the covariance matrix for the kept axes
    explained_variance_ratio_ : Tensor of shape (n_components,)
        Fraction of total variance carried by each kept axis
    mean_ : Tensor of shape (n_features,)
        Column means subtracted before projection
    """

    def __init__(self, n_components: int = 2):
        if isinstance(n_components, bool) or not isinstance(n_components, (int, np.integer)):
            raise TypeError(f"n_components must be int, got {type(n_components)}")
        if n_components < 1:
            raise ValueError(f"n_components must be >= 1, got {n_components}")
        self.n_components = int(n_components)

        self.components_: Optional[Tensor] = None
        self.explained_variance_: Optional[Tensor] = None
        self.explained_variance_ratio_: Optional[Tensor] = None
        self.mean_: Optional[Tensor] = None

    def fit(self, X: Union[Tensor, np.ndarray, list]) -> 'PCAProjector':
        X = validate_data(X, dtype=torch.float64, ensure_min_samples=2)
        n_features = X.shape[1]

        if self.n_components > n_features:
            raise InsufficientDimensionsError(
                f"Cannot extract {self.n_components} components from {n_features} columns"
            )

        eigvals, eigvecs = sorted_eigh(covariance(X))
        total = eigvals.sum()
        if total <= 0:
            raise DegenerateColumnError("Input has zero total variance")

        axes = flip_signs(eigvecs[:, :self.n_components])

        self.mean_ = X.mean(dim=0)
        self.components_ = axes.t().contiguous()
        self.explained_variance_ = eigvals[:self.n_components]
        self.explained_variance_ratio_ = self.explained_variance_ / total
        return self

    def transform(self, X: Union[Tensor, np.ndarray, list]) -> Tensor:
        """Scores of X on the fitted axes, shape (n, n_components)."""
        if self.components_ is None:
            raise RuntimeError("PCAProjector must be fitted before calling transform")
        X = validate_data(X, dtype=torch.float64)
        check_n_features(X, self.mean_.shape[0])
        return (X - self.mean_) @ self.components_.t()

    def fit_transform(self, X: Union[Tensor, np.ndarray, list]) -> Tensor:
        return self.fit(X).transform(X)


def project(points: Union[Tensor, np.ndarray, list],
            n_components: int = 2) -> Tuple[Tensor, Tensor]:
    """Project points onto their top principal components.

    Args:
        points: (n, d) data, normally standardized
        n_components: Number of components, at most d

    Returns:
        scores: (n, n_components) projected coordinates
        explained_variance_ratio: (n_components,) share of total variance

    Raises:
        InsufficientDimensionsError: n_components > d
    """
    projector = PCAProjector(n_components=n_components)
    scores = projector.fit_transform(points)
    return scores, projector.explained_variance_ratio_
