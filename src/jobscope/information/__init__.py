"""Information-theoretic dependence measures."""

from .mutual_info import MIMatrix, MutualInformationMatrix, mutual_information_matrix

__all__ = [
    'MIMatrix',
    'MutualInformationMatrix',
    'mutual_information_matrix'
]
