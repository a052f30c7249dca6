"""
Discretizer: equal-width binning over the observed [min, max] of a column.
"""

from __future__ import annotations

import pytest
import torch

from jobscope.errors import DegenerateColumnError
from jobscope.preprocessing import Discretizer, discretize


def test_integer_grid_bins():
    column = [float(v) for v in range(11)]  # 0..10, width 1 per bin
    binned = discretize(column, bins=10)
    expected = torch.tensor([0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 9])
    assert torch.equal(binned, expected)


def test_max_lands_in_last_bin():
    binned = discretize([0.0, 0.5, 1.0], bins=4)
    assert binned.tolist() == [0, 2, 3]


def test_bin_indices_in_range(rng):
    column = rng.exponential(scale=3.0, size=500)
    binned = discretize(column, bins=7)
    assert binned.dtype == torch.long
    assert int(binned.min()) == 0
    assert int(binned.max()) == 6


def test_default_bin_count():
    assert Discretizer().bins == 10


def test_bin_edges_span_range():
    disc = Discretizer(bins=4)
    disc.fit_transform([2.0, 4.0, 10.0])
    assert torch.allclose(disc.bin_edges_, torch.tensor([2.0, 4.0, 6.0, 8.0, 10.0], dtype=torch.float64))


def test_constant_column_raises():
    with pytest.raises(DegenerateColumnError) as excinfo:
        Discretizer().fit_transform([3.0, 3.0, 3.0], name="n_nodes")
    assert excinfo.value.column == "n_nodes"


def test_constant_column_zero_policy():
    binned = discretize([3.0, 3.0, 3.0], on_degenerate="zero")
    assert binned.tolist() == [0, 0, 0]


@pytest.mark.parametrize("bins, exc", [(0, ValueError), (-2, ValueError), (2.5, TypeError), (True, TypeError)])
def test_invalid_bins(bins, exc):
    with pytest.raises(exc):
        Discretizer(bins=bins)


def test_rejects_matrix_input():
    with pytest.raises(ValueError):
        discretize([[1.0, 2.0], [3.0, 4.0]])


def test_extreme_finite_range():
    binned = discretize([-1e308, 0.0, 1e308], bins=4)
    assert binned.tolist() == [0, 2, 3]

    disc = Discretizer(bins=2)
    disc.fit_transform([-1e308, 1e308])
    assert torch.isfinite(disc.bin_edges_).all()
    assert disc.bin_edges_.tolist() == [-1e308, 0.0, 1e308]
