"""
Linear algebra utilities for the jobscope analysis engine.

Provides numerically stable covariance and eigendecomposition helpers.
"""

from typing import Tuple
import torch
from torch import Tensor
import warnings


def covariance(X: Tensor, correction: int = 1) -> Tensor:
    """Column covariance matrix of (n, d) data.

    Args:
        X: (n, d) data
        correction: Denominator is ``n - correction`` (1 gives the sample covariance)

    Returns:
        (d, d) covariance matrix
    """
    n_samples = X.shape[0]
    if n_samples - correction <= 0:
        raise ValueError(f"Need more than {correction} samples, got {n_samples}")
    centered = X - X.mean(dim=0, keepdim=True)
    return centered.t() @ centered / (n_samples - correction)


def safe_eigh(matrix: Tensor, tol: float = 1e-10) -> Tuple[Tensor, Tensor]:
    """Compute eigendecomposition of symmetric matrix with numerical safeguards.

    Args:
        matrix: Symmetric matrix
        tol: Tolerance for symmetry check

    Returns:
        eigenvalues (ascending), eigenvectors (columns)
    """
    matrix_sym = 0.5 * (matrix + matrix.t())

    if torch.max(torch.abs(matrix - matrix_sym)) > tol:
        warnings.warn("Input matrix is not symmetric; symmetrizing.")

    try:
        return torch.linalg.eigh(matrix_sym)
    except RuntimeError as e:
        warnings.warn(f"Standard eigendecomposition failed: {e}. Falling back to SVD.")

        # For a PSD matrix the singular triplets are the eigenpairs
        U, S, _ = torch.linalg.svd(matrix_sym)
        idx = torch.argsort(S)
        return S[idx], U[:, idx]


def sorted_eigh(matrix: Tensor) -> Tuple[Tensor, Tensor]:
    """Eigendecomposition of a symmetric matrix, largest eigenvalue first.

    Eigenvalues are clamped at zero; tiny negatives come from rounding.
    """
    eigvals, eigvecs = safe_eigh(matrix)
    idx = torch.argsort(eigvals, descending=True)
    return torch.clamp(eigvals[idx], min=0.0), eigvecs[:, idx]


def flip_signs(vectors: Tensor) -> Tensor:
    """Flip each column so that its largest-magnitude entry is positive.

    Eigenvector signs are arbitrary; this makes repeated runs agree but
    carries no statistical meaning.
    """
    max_idx = torch.argmax(torch.abs(vectors), dim=0)
    signs = torch.sign(vectors[max_idx, torch.arange(vectors.shape[1], device=vectors.device)])
    signs = torch.where(signs == 0, torch.ones_like(signs), signs)
    return vectors * signs.unsqueeze(0)
