"""
Pairwise mutual information between numeric columns.

Each column is discretized with equal-width bins, then for every unordered
pair of columns the discrete mutual information of the bin indices is
computed and mirrored, so the matrix is exactly symmetric. The diagonal holds
each column's discretized entropy. Values are in nats.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union
import torch
from torch import Tensor
import numpy as np
import pandas as pd

from ..preprocessing.discretize import Discretizer
from ..utils.metrics import mutual_information, entropy
from ..utils.validation import validate_data, check_column_names, split_feature_matrix


@dataclass(frozen=True)
class MIMatrix:
    """Square mutual-information matrix with named rows and columns."""

    values: Tensor
    columns: Tuple[str, ...]

    def __getitem__(self, key: Tuple[str, str]) -> float:
        a, b = key
        try:
            i = self.columns.index(a)
            j = self.columns.index(b)
        except ValueError:
            raise KeyError(f"Unknown column pair: {key!r}") from None
        return self.values[i, j].item()

    def to_frame(self):
        """Return the matrix as a labelled pandas DataFrame."""
        return pd.DataFrame(self.values.cpu().numpy(),
                            index=list(self.columns), columns=list(self.columns))


class MutualInformationMatrix:
    """Estimate mutual information for every pair of columns.

    Parameters
    ----------
    bins : int, default=10
        Equal-width bins per column
    on_degenerate : {'raise', 'zero'}, default='raise'
        Constant columns raise DegenerateColumnError, or map to one bin
        (zero entropy, zero mutual information with everything)
    """

    def __init__(self, bins: int = 10, on_degenerate: str = 'raise'):
        self.discretizer = Discretizer(bins=bins, on_degenerate=on_degenerate)

    @property
    def bins(self) -> int:
        return self.discretizer.bins

    def compute(self, matrix: Union[Tensor, np.ndarray, list],
                columns: Optional[Sequence[str]] = None) -> MIMatrix:
        """Compute the (d, d) mutual-information matrix of matrix's columns.

        Args:
            matrix: (n, d) numeric data
            columns: Optional column names

        Returns:
            MIMatrix
        """
        matrix, columns = split_feature_matrix(matrix, columns)
        X = validate_data(matrix, dtype=torch.float64)
        names = check_column_names(columns, X.shape[1])
        n_features = X.shape[1]

        binned = [self.discretizer.fit_transform(X[:, j], name=names[j])
                  for j in range(n_features)]

        values = torch.zeros(n_features, n_features, dtype=torch.float64)
        for i in range(n_features):
            values[i, i] = entropy(binned[i])
            for j in range(i + 1, n_features):
                mi = mutual_information(binned[i], binned[j])
                values[i, j] = mi
                values[j, i] = mi

        return MIMatrix(values=values, columns=tuple(names))


def mutual_information_matrix(matrix: Union[Tensor, np.ndarray, list],
                              columns: Optional[Sequence[str]] = None,
                              bins: int = 10,
                              on_degenerate: str = 'raise') -> MIMatrix:
    """Pairwise mutual information of matrix's columns (see MutualInformationMatrix)."""
    return MutualInformationMatrix(bins=bins, on_degenerate=on_degenerate).compute(matrix, columns)
