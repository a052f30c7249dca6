# tests/utils.py
"""
Small, reusable helpers used across the jobscope test suite.

Functions:
- to_numpy(x): convert a tensor or array-like to numpy.
- perm_invariant_accuracy(y_pred, y_true): best accuracy over relabelings of the clusters.
- same_partition(y1, y2): True if two labelings describe the same partition.
- time_block(label, meta=None): context manager that prints wall-clock time with optional metadata.
- print_timing(label, seconds, **meta): convenience printer for timings (used by time_block).
"""

from __future__ import annotations

import json
import itertools
import time
from contextlib import contextmanager
from typing import Any, Dict

import numpy as np
import torch


def to_numpy(x: Any) -> np.ndarray:
    """Convert a tensor (any device) or array-like to a numpy array."""
    if isinstance(x, torch.Tensor):
        return x.detach().cpu().numpy()
    return np.asarray(x)


def perm_invariant_accuracy(y_pred: Any, y_true: Any) -> float:
    """
    Best accuracy over all one-to-one relabelings of the predicted clusters.

    Parameters
    ----------
    y_pred : (n,) predicted integer labels in [0, K)
    y_true : (n,) ground-truth integer labels in [0, K)

    Returns
    -------
    float in [0, 1]

    Notes
    -----
    Brute force over K! permutations; tests keep K small.
    """
    y_pred = to_numpy(y_pred).astype(np.int64)
    y_true = to_numpy(y_true).astype(np.int64)
    if y_pred.shape != y_true.shape:
        raise ValueError(f"Shape mismatch: {y_pred.shape} vs {y_true.shape}")
    k = int(max(y_pred.max(), y_true.max())) + 1

    best = 0.0
    for perm in itertools.permutations(range(k)):
        mapping = np.asarray(perm)
        best = max(best, float(np.mean(mapping[y_pred] == y_true)))
    return best


def same_partition(y1: Any, y2: Any) -> bool:
    """True if y1 and y2 group the records identically (labels may differ)."""
    y1 = to_numpy(y1)
    y2 = to_numpy(y2)
    if y1.shape != y2.shape:
        return False
    forward: Dict[int, int] = {}
    backward: Dict[int, int] = {}
    for a, b in zip(y1.tolist(), y2.tolist()):
        if forward.setdefault(a, b) != b or backward.setdefault(b, a) != a:
            return False
    return True


@contextmanager
def time_block(label: str, meta: Dict[str, Any] | None = None):
    """
    Context manager to time a block and print a single-line summary.

    Example
    -------
    >>> with time_block("fit", {"n": 400, "d": 3, "K": 2}):
    ...     model.fit(X)

    Output
    ------
    [timing] fit {"n":400,"d":3,"K":2} 0.123s
    """
    t0 = time.perf_counter()
    try:
        yield
    finally:
        dt = time.perf_counter() - t0
        print_timing(label, dt, **(meta or {}))


def print_timing(label: str, seconds: float, **meta: Any) -> None:
    """
    Print timing in a compact, machine-readable single line.

    Example:
    [timing] fit {"n":400,"d":3,"K":2} 0.123s
    """
    meta_str = ""
    if meta:
        meta_str = " " + json.dumps(meta, separators=(",", ":"), default=str)
    print(f"[timing] {label}{meta_str} {seconds:.3f}s")
