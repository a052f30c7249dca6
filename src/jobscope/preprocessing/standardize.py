"""
Per-column z-score standardization.

Columns are centred on their mean and divided by their sample standard
deviation (denominator n - 1), the scale K-means and PCA expect.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Union, Tuple
import torch
from torch import Tensor
import numpy as np

from ..errors import DegenerateColumnError
from ..utils.validation import (
    validate_data, check_column_names, check_n_features, split_feature_matrix
)

_POLICIES = ('raise', 'zero')


@dataclass(frozen=True)
class StandardizedMatrix:
    """Standardized values with the statistics used to produce them.

    Attributes:
        values: (n, d) standardized data
        columns: Column names
        mean: (d,) column means of the input
        scale: (d,) sample standard deviations (1.0 for zeroed columns)
        degenerate: Names of constant columns that were set to zero
    """

    values: Tensor
    columns: Tuple[str, ...]
    mean: Tensor
    scale: Tensor
    degenerate: Tuple[str, ...] = ()


def _check_policy(on_degenerate: str) -> None:
    if on_degenerate not in _POLICIES:
        raise ValueError(f"on_degenerate must be one of {_POLICIES}, got {on_degenerate!r}")


class Standardizer:
    """Z-score transform fitted on one matrix and applicable to others.

    Parameters
    ----------
    on_degenerate : {'raise', 'zero'}, default='raise'
        What to do with a constant column: raise DegenerateColumnError, or
        leave it as all zeros so that it adds nothing to distances.

    Attributes
    ----------
    mean_ : Tensor of shape (n_features,)
    scale_ : Tensor of shape (n_features,)
    degenerate_ : Tensor of shape (n_features,), bool
    columns_ : list of str
    """

    def __init__(self, on_degenerate: str = 'raise'):
        _check_policy(on_degenerate)
        self.on_degenerate = on_degenerate
        self.mean_: Optional[Tensor] = None
        self.scale_: Optional[Tensor] = None
        self.degenerate_: Optional[Tensor] = None
        self.columns_ = None

    def fit(self, X: Union[Tensor, np.ndarray, list],
            columns: Optional[Sequence[str]] = None) -> 'Standardizer':
        """Compute column means and sample standard deviations."""
        X, columns = split_feature_matrix(X, columns)
        X = validate_data(X, dtype=torch.float64, ensure_min_samples=2)
        self.columns_ = check_column_names(columns, X.shape[1])

        # Exact test: a column is constant iff its range is zero
        degenerate = X.max(dim=0).values == X.min(dim=0).values
        if degenerate.any() and self.on_degenerate == 'raise':
            j = int(torch.where(degenerate)[0][0].item())
            raise DegenerateColumnError(
                f"Column {self.columns_[j]!r} is constant; its standard deviation is 0",
                column=self.columns_[j]
            )

        self.mean_ = X.mean(dim=0)
        scale = X.std(dim=0, correction=1)
        self.scale_ = torch.where(degenerate, torch.ones_like(scale), scale)
        self.degenerate_ = degenerate
        return self

    def transform(self, X: Union[Tensor, np.ndarray, list]) -> Tensor:
        """Standardize X with the fitted statistics."""
        if self.mean_ is None:
            raise RuntimeError("Standardizer must be fitted before calling transform")
        X = validate_data(X, dtype=torch.float64)
        check_n_features(X, self.mean_.shape[0])

        Z = (X - self.mean_) / self.scale_
        Z[:, self.degenerate_] = 0.0
        return Z

    def fit_transform(self, X: Union[Tensor, np.ndarray, list],
                      columns: Optional[Sequence[str]] = None) -> Tensor:
        return self.fit(X, columns).transform(X)

    def inverse_transform(self, Z: Union[Tensor, np.ndarray, list]) -> Tensor:
        """Map standardized values (e.g. centroids) back to original units."""
        if self.mean_ is None:
            raise RuntimeError("Standardizer must be fitted before calling inverse_transform")
        Z = validate_data(Z, dtype=torch.float64)
        check_n_features(Z, self.mean_.shape[0])
        return Z * self.scale_ + self.mean_


def standardize(matrix: Union[Tensor, np.ndarray, list],
                columns: Optional[Sequence[str]] = None,
                on_degenerate: str = 'raise') -> StandardizedMatrix:
    """Z-score every column of matrix.

    Args:
        matrix: (n, d) data with n >= 2
        columns: Optional column names
        on_degenerate: 'raise' (default) or 'zero' for constant columns

    Returns:
        StandardizedMatrix

    Raises:
        DegenerateColumnError: A column is constant and on_degenerate='raise'
    """
    scaler = Standardizer(on_degenerate=on_degenerate)
    values = scaler.fit_transform(matrix, columns)
    names = tuple(scaler.columns_)
    return StandardizedMatrix(
        values=values,
        columns=names,
        mean=scaler.mean_,
        scale=scaler.scale_,
        degenerate=tuple(n for n, d in zip(names, scaler.degenerate_.tolist()) if d)
    )
