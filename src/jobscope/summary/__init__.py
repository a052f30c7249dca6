"""Per-cluster summary statistics."""

from .cluster_summary import (
    STATISTICS,
    ClusterStatistics,
    ClusterSummary,
    ClusterSummarizer,
    summarize
)

__all__ = [
    'STATISTICS',
    'ClusterStatistics',
    'ClusterSummary',
    'ClusterSummarizer',
    'summarize'
]
