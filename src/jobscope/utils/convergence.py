"""
Stopping rule for Lloyd iterations.

A restart is final once its assignment stops changing; the estimator's
iteration cap is the hard bound when that never happens.
"""

from typing import Dict, Any, Optional
from torch import Tensor

from ..base.interfaces import ConvergenceCriterion


class ChangeInAssignments(ConvergenceCriterion):
    """Stop when few enough records switch cluster.

    Each check after the first compares the current labels with the previous
    ones and appends ``{'iteration', 'n_changed', 'change_fraction'}`` to
    ``history``.

    Args:
        min_change_fraction: Largest fraction of switched records still
            counted as stable; the default 0.0 requires an unchanged assignment
        patience: Consecutive stable checks needed before stopping
    """

    def __init__(self, min_change_fraction: float = 0.0,
                 patience: int = 1):
        super().__init__()
        if min_change_fraction < 0:
            raise ValueError(f"min_change_fraction must be >= 0, got {min_change_fraction}")
        if patience < 1:
            raise ValueError(f"patience must be >= 1, got {patience}")
        self.min_change_fraction = min_change_fraction
        self.patience = patience
        self._previous: Optional[Tensor] = None
        self._stable = 0

    def check(self, current_state: Dict[str, Any]) -> bool:
        labels = current_state['assignments']
        if not isinstance(labels, Tensor):
            labels = labels.get_hard()

        previous, self._previous = self._previous, labels.clone()
        if previous is None:
            return False

        n_changed = int((labels != previous).sum().item())
        fraction = n_changed / labels.shape[0]
        self.history.append({
            'iteration': current_state.get('iteration', len(self.history)),
            'n_changed': n_changed,
            'change_fraction': fraction
        })

        self._stable = self._stable + 1 if fraction <= self.min_change_fraction else 0
        return self._stable >= self.patience

    @property
    def last_n_changed(self) -> Optional[int]:
        """Records that switched cluster in the latest comparison."""
        return self.history[-1]['n_changed'] if self.history else None

    def reset(self):
        super().reset()
        self._previous = None
        self._stable = 0
