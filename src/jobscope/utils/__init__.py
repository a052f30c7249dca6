"""Utility functions for the jobscope analysis engine."""

from .linalg import (
    covariance,
    safe_eigh,
    sorted_eigh,
    flip_signs
)

from .convergence import ChangeInAssignments

from .metrics import (
    inertia,
    total_sum_of_squares,
    contingency_matrix,
    entropy,
    mutual_information,
    purity
)

from .validation import (
    validate_data,
    validate_column,
    validate_labels,
    check_n_clusters,
    check_n_features,
    check_column_names,
    check_random_state,
    derive_seeds,
    split_feature_matrix
)

__all__ = [
    # Linear algebra
    'covariance',
    'safe_eigh',
    'sorted_eigh',
    'flip_signs',

    # Convergence criteria
    'ChangeInAssignments',

    # Metrics
    'inertia',
    'total_sum_of_squares',
    'contingency_matrix',
    'entropy',
    'mutual_information',
    'purity',

    # Validation
    'validate_data',
    'validate_column',
    'validate_labels',
    'check_n_clusters',
    'check_n_features',
    'check_column_names',
    'check_random_state',
    'derive_seeds',
    'split_feature_matrix'
]
