"""
Input validation and preprocessing utilities.

Provides functions for validating data before analysis, including data type
conversion, shape checks, cluster-count checks and seed handling.
"""

from typing import Optional, Union, List, Sequence
import torch
from torch import Tensor
import numpy as np

from ..errors import InvalidKError, DimensionMismatchError


def split_feature_matrix(X, columns: Optional[Sequence[str]] = None):
    """Unwrap a FeatureMatrix into its values and column names.

    Explicit columns take precedence over the matrix's own names. Any other
    input is returned unchanged.
    """
    # base imports this module, so the container is resolved at call time
    from ..base.data_structures import FeatureMatrix

    if isinstance(X, FeatureMatrix):
        return X.values, (X.columns if columns is None else columns)
    return X, columns


def validate_data(X: Union[Tensor, np.ndarray, list],
                  dtype: torch.dtype = torch.float64,
                  device: Optional[torch.device] = None,
                  ensure_2d: bool = True,
                  ensure_finite: bool = True,
                  ensure_min_samples: int = 1,
                  ensure_min_features: int = 1) -> Tensor:
    """Validate and convert input data to tensor.

    The result never shares memory with a tensor argument, so callers may
    treat it as their own.

    Args:
        X: Input data (tensor, numpy array, list or FeatureMatrix)
        dtype: Target data type
        device: Target device
        ensure_2d: Whether to ensure 2D shape
        ensure_finite: Whether to check for inf/nan
        ensure_min_samples: Minimum number of samples required
        ensure_min_features: Minimum number of features required

    Returns:
        Validated tensor

    Raises:
        ValueError: If validation fails
        DimensionMismatchError: If list rows have differing lengths
    """
    X, _ = split_feature_matrix(X)

    if isinstance(X, Tensor):
        X = X.detach().clone().to(dtype=dtype)
    elif isinstance(X, np.ndarray):
        X = torch.from_numpy(np.array(X, dtype=np.float64)).to(dtype=dtype)
    elif isinstance(X, (list, tuple)):
        rows = [row for row in X if isinstance(row, (list, tuple, np.ndarray))]
        if rows and (len(rows) != len(X) or len({len(row) for row in rows}) > 1):
            raise DimensionMismatchError("Rows have differing numbers of columns")
        X = torch.tensor(X, dtype=dtype)
    else:
        raise TypeError(f"Cannot convert {type(X)} to tensor")

    if device is not None:
        X = X.to(device)

    if ensure_2d:
        if X.dim() == 1:
            X = X.unsqueeze(1)
        elif X.dim() != 2:
            raise ValueError(f"Expected 2D array, got {X.dim()}D")

        n_samples, n_features = X.shape

        if n_samples < ensure_min_samples:
            raise ValueError(f"Found {n_samples} samples, but need at least "
                             f"{ensure_min_samples}")

        if n_features < ensure_min_features:
            raise ValueError(f"Found {n_features} features, but need at least "
                             f"{ensure_min_features}")

    if ensure_finite:
        if torch.isnan(X).any():
            raise ValueError("Input contains NaN values")
        if torch.isinf(X).any():
            raise ValueError("Input contains infinite values")

    return X


def validate_column(column: Union[Tensor, np.ndarray, list],
                    dtype: torch.dtype = torch.float64) -> Tensor:
    """Validate a single numeric column and return it as a 1D tensor."""
    col = validate_data(column, dtype=dtype, ensure_2d=False)
    if col.dim() == 2 and col.shape[1] == 1:
        col = col[:, 0]
    if col.dim() != 1:
        raise ValueError(f"Expected a 1D column, got shape {tuple(col.shape)}")
    if col.numel() == 0:
        raise ValueError("Column is empty")
    return col


def validate_labels(labels: Union[Tensor, np.ndarray, list],
                    n_samples: Optional[int] = None) -> Tensor:
    """Validate cluster labels.

    Args:
        labels: Cluster labels
        n_samples: Expected number of samples

    Returns:
        Validated label tensor

    Raises:
        DimensionMismatchError: If the label count does not match n_samples
        ValueError: If labels are not 1D non-negative integers
    """
    if isinstance(labels, Tensor):
        labels = labels.detach().long()
    elif isinstance(labels, np.ndarray):
        labels = torch.from_numpy(np.asarray(labels, dtype=np.int64))
    elif isinstance(labels, (list, tuple)):
        labels = torch.tensor(labels, dtype=torch.long)
    else:
        raise TypeError(f"Cannot convert {type(labels)} to label tensor")

    if labels.dim() != 1:
        raise ValueError(f"Labels must be 1D, got {labels.dim()}D")

    if n_samples is not None and len(labels) != n_samples:
        raise DimensionMismatchError(f"Expected {n_samples} labels, got {len(labels)}")

    if (labels < 0).any():
        raise ValueError("Labels must be non-negative")

    return labels


def check_n_clusters(n_clusters: int, n_samples: int) -> None:
    """Validate number of clusters.

    Args:
        n_clusters: Number of clusters
        n_samples: Number of samples

    Raises:
        InvalidKError: If n_clusters is outside [1, n_samples]
    """
    if isinstance(n_clusters, bool) or not isinstance(n_clusters, (int, np.integer)):
        raise TypeError(f"n_clusters must be int, got {type(n_clusters)}")

    if n_clusters < 1:
        raise InvalidKError(f"n_clusters must be positive, got {n_clusters}")

    if n_clusters > n_samples:
        raise InvalidKError(f"n_clusters ({n_clusters}) cannot be larger than "
                            f"n_samples ({n_samples})")


def check_n_features(X: Tensor, n_features: int) -> None:
    """Raise DimensionMismatchError if X does not have n_features columns."""
    if X.shape[1] != n_features:
        raise DimensionMismatchError(f"X has {X.shape[1]} features, but the model "
                                     f"was fitted with {n_features} features")


def check_column_names(columns: Optional[Sequence[str]], n_features: int) -> List[str]:
    """Return column names, generating ``x0..x{d-1}`` when none are given."""
    if columns is None:
        return [f"x{j}" for j in range(n_features)]
    columns = [str(c) for c in columns]
    if len(columns) != n_features:
        raise DimensionMismatchError(f"{len(columns)} column names given for "
                                     f"{n_features} columns")
    if len(set(columns)) != len(columns):
        raise ValueError(f"Column names must be unique, got {columns}")
    return columns


def check_random_state(random_state: Optional[Union[int, torch.Generator]]) -> torch.Generator:
    """Create a private CPU generator from a seed.

    Args:
        random_state: Seed, generator, or None for a nondeterministic seed

    Returns:
        Generator
    """
    if random_state is None:
        generator = torch.Generator()
        generator.seed()
        return generator
    elif isinstance(random_state, torch.Generator):
        return random_state
    elif isinstance(random_state, (int, np.integer)) and not isinstance(random_state, bool):
        generator = torch.Generator()
        generator.manual_seed(int(random_state))
        return generator
    else:
        raise TypeError(f"random_state must be int or Generator, got {type(random_state)}")


def derive_seeds(random_state: Optional[Union[int, torch.Generator]], n_seeds: int) -> List[int]:
    """Draw n_seeds independent integer seeds from a base seed.

    Each restart gets its own generator seeded from this list, so restarts do
    not share random state and can run in any order.
    """
    generator = check_random_state(random_state)
    return torch.randint(0, 2 ** 31 - 1, (n_seeds,), generator=generator).tolist()
