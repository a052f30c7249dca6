"""Assignment strategies for clustering algorithms."""

from .hard import HardAssignment, HardAssignmentWithInfo

__all__ = [
    'HardAssignment',
    'HardAssignmentWithInfo'
]
