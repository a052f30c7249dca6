"""
Per-cluster summary statistics.

Groups the original (unstandardized) records by cluster id and reports, per
cluster, the record count, mean/median/min/max/standard deviation of every
numeric column and the mode of every categorical column.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union
import torch
from torch import Tensor
import numpy as np
import pandas as pd

from ..errors import DimensionMismatchError
from ..utils.validation import (
    validate_data, validate_labels, check_column_names, split_feature_matrix
)

STATISTICS = ('mean', 'median', 'min', 'max', 'sd')


@dataclass(frozen=True)
class ClusterStatistics:
    """Statistics of one cluster."""

    cluster: int
    size: int
    numeric: Dict[str, Dict[str, float]]
    modes: Dict[str, Any]

    def stat(self, column: str, name: str) -> float:
        """Look up one statistic, e.g. ``stat('runtime', 'median')``."""
        return self.numeric[column][name]


@dataclass(frozen=True)
class ClusterSummary:
    """Statistics for every non-empty cluster, in ascending cluster id."""

    clusters: Tuple[ClusterStatistics, ...]
    numeric_columns: Tuple[str, ...]
    categorical_columns: Tuple[str, ...]

    def __len__(self) -> int:
        return len(self.clusters)

    def __iter__(self):
        return iter(self.clusters)

    def __getitem__(self, cluster: int) -> ClusterStatistics:
        for stats in self.clusters:
            if stats.cluster == cluster:
                return stats
        raise KeyError(f"No records in cluster {cluster}")

    @property
    def cluster_ids(self) -> Tuple[int, ...]:
        return tuple(stats.cluster for stats in self.clusters)

    def to_frame(self) -> pd.DataFrame:
        """One row per cluster; columns ``size``, ``<column>_<stat>`` and ``<column>_mode``."""
        rows = []
        for stats in self.clusters:
            row = {'size': stats.size}
            for column in self.numeric_columns:
                for name in STATISTICS:
                    row[f"{column}_{name}"] = stats.numeric[column][name]
            for column in self.categorical_columns:
                row[f"{column}_mode"] = stats.modes[column]
            rows.append(row)

        frame = pd.DataFrame(rows, index=pd.Index(self.cluster_ids, name='cluster'))
        return frame


def _mode(values: Sequence[Any]) -> Any:
    """Most frequent value; ties go to the value seen first."""
    counts = Counter(values)
    # Counter keeps first-insertion order and max() returns the first maximum
    return max(counts, key=counts.__getitem__)


def _numeric_statistics(values: Tensor) -> Dict[str, float]:
    n = values.shape[0]
    return {
        'mean': values.mean().item(),
        'median': torch.quantile(values, 0.5).item(),
        'min': values.min().item(),
        'max': values.max().item(),
        'sd': values.std(correction=1).item() if n > 1 else 0.0,
    }


class ClusterSummarizer:
    """Aggregate original records by their cluster assignment."""

    def summarize(self,
                  original_matrix: Union[Tensor, np.ndarray, list],
                  assignment: Union[Tensor, np.ndarray, list],
                  columns: Optional[Sequence[str]] = None,
                  categorical: Optional[Mapping[str, Sequence[Any]]] = None) -> ClusterSummary:
        """Compute per-cluster statistics.

        Args:
            original_matrix: (n, d) numeric records in original units
            assignment: (n,) cluster id per record
            columns: Names of the d numeric columns
            categorical: Optional mapping of column name to n per-record values

        Returns:
            ClusterSummary with one entry per cluster id that has records

        Raises:
            DimensionMismatchError: assignment or a categorical column does not
                have one entry per record
        """
        original_matrix, columns = split_feature_matrix(original_matrix, columns)
        X = validate_data(original_matrix, dtype=torch.float64, ensure_min_features=0)
        n_records = X.shape[0]
        names = check_column_names(columns, X.shape[1])
        labels = validate_labels(assignment, n_samples=n_records).to(X.device)

        categorical = dict(categorical or {})
        for column, values in categorical.items():
            if len(values) != n_records:
                raise DimensionMismatchError(
                    f"Categorical column {column!r} has {len(values)} values, "
                    f"expected {n_records}"
                )
            if column in names:
                raise ValueError(f"Column {column!r} is both numeric and categorical")
        categorical = {column: list(values) for column, values in categorical.items()}

        clusters = []
        for cluster in torch.unique(labels).tolist():
            members = torch.where(labels == cluster)[0]
            numeric = {
                name: _numeric_statistics(X[members, j])
                for j, name in enumerate(names)
            }
            member_list = members.tolist()
            modes = {
                column: _mode([values[i] for i in member_list])
                for column, values in categorical.items()
            }
            clusters.append(ClusterStatistics(
                cluster=int(cluster),
                size=len(member_list),
                numeric=numeric,
                modes=modes
            ))

        return ClusterSummary(
            clusters=tuple(clusters),
            numeric_columns=tuple(names),
            categorical_columns=tuple(categorical)
        )


def summarize(original_matrix: Union[Tensor, np.ndarray, list],
              assignment: Union[Tensor, np.ndarray, list],
              columns: Optional[Sequence[str]] = None,
              categorical: Optional[Mapping[str, Sequence[Any]]] = None) -> ClusterSummary:
    """Per-cluster statistics of original_matrix (see ClusterSummarizer)."""
    return ClusterSummarizer().summarize(original_matrix, assignment, columns, categorical)
