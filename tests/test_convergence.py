# tests/unit/test_convergence.py
"""
Convergence criterion behavior.

Covers:
- ChangeInAssignments: zero-change default, fraction threshold + patience
- history bookkeeping and reset

All tests run on CPU; these are pure logic checks (no heavy tensors).
"""

from __future__ import annotations

import pytest
import torch

from jobscope.base.data_structures import AssignmentMatrix
from jobscope.utils.convergence import ChangeInAssignments


def test_default_requires_no_change(seed_all):
    crit = ChangeInAssignments()

    a0 = torch.zeros(10, dtype=torch.long)
    a1 = a0.clone()
    a1[3] = 1

    # First call only records the assignment
    assert crit.check({"iteration": 0, "assignments": a0}) is False
    assert crit.check({"iteration": 1, "assignments": a1}) is False
    assert crit.last_n_changed == 1
    assert crit.check({"iteration": 2, "assignments": a1.clone()}) is True
    assert crit.last_n_changed == 0


def test_change_in_assignments_fraction(seed_all):
    """
    min_change_fraction is the largest fraction still considered stable.
    Using patience=2, we feed two consecutive steps with 10% changes (< 20%).
    """
    crit = ChangeInAssignments(min_change_fraction=0.2, patience=2)

    a0 = torch.zeros(10, dtype=torch.long)
    a1 = a0.clone()
    a1[0] = 1  # 1/10 changed = 0.1
    a2 = a1.clone()
    a2[1] = 1  # again 1/10 changed relative to previous

    assert crit.check({"iteration": 0, "assignments": a0}) is False
    assert crit.check({"iteration": 1, "assignments": a1}) is False  # stable_count = 1
    assert crit.check({"iteration": 2, "assignments": a2}) is True   # stable_count = 2 ⇒ True


def test_accepts_assignment_matrix(seed_all):
    crit = ChangeInAssignments()
    labels = torch.tensor([0, 1, 1, 0])
    matrix = AssignmentMatrix(labels, n_clusters=2)

    assert crit.check({"assignments": matrix}) is False
    assert crit.check({"assignments": matrix}) is True
    assert crit.history[-1]["change_fraction"] == 0.0


def test_reset_forgets_previous(seed_all):
    crit = ChangeInAssignments()
    a = torch.tensor([0, 1, 2])
    crit.check({"assignments": a})
    crit.check({"assignments": a})
    crit.reset()

    assert crit.history == []
    assert crit.last_n_changed is None
    assert crit.check({"assignments": a}) is False


@pytest.mark.parametrize("kwargs", [{"min_change_fraction": -0.1}, {"patience": 0}])
def test_invalid_settings(kwargs):
    with pytest.raises(ValueError):
        ChangeInAssignments(**kwargs)
