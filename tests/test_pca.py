"""
PCA projection: covariance eigendecomposition with descending variance.
"""

from __future__ import annotations

import numpy as np
import pytest
import torch

from jobscope.decomposition import PCAProjector, project
from jobscope.errors import InsufficientDimensionsError, DegenerateColumnError, DimensionMismatchError
from jobscope.preprocessing import standardize


def test_ratios_sum_to_one_with_all_components(rng):
    X = rng.normal(size=(100, 4)) @ rng.normal(size=(4, 4))
    scores, ratio = project(X, n_components=4)

    assert scores.shape == (100, 4)
    assert ratio.sum().item() == pytest.approx(1.0, abs=1e-12)
    assert torch.all(ratio[:-1] >= ratio[1:])


def test_ratios_bounded_for_fewer_components(rng):
    X = standardize(rng.normal(size=(80, 5))).values
    scores, ratio = project(X)

    assert scores.shape == (80, 2)
    assert ratio.shape == (2,)
    assert torch.all(ratio >= 0)
    assert ratio.sum().item() <= 1.0 + 1e-12


def test_line_has_one_component():
    t = torch.linspace(-1.0, 1.0, 21, dtype=torch.float64)
    X = torch.stack([t, 2.0 * t], dim=1)
    _, ratio = project(X, n_components=2)

    assert ratio[0].item() == pytest.approx(1.0, abs=1e-12)
    assert ratio[1].item() == pytest.approx(0.0, abs=1e-12)


def test_scores_are_centred_with_component_variance(rng):
    X = rng.normal(size=(200, 3)) * np.array([5.0, 2.0, 0.5])
    pca = PCAProjector(n_components=3)
    scores = pca.fit_transform(X)

    assert torch.allclose(scores.mean(dim=0), torch.zeros(3, dtype=torch.float64), atol=1e-10)
    assert torch.allclose(scores.var(dim=0, correction=1), pca.explained_variance_, rtol=1e-10)


def test_components_are_orthonormal(rng):
    X = rng.normal(size=(60, 4))
    pca = PCAProjector(n_components=3).fit(X)
    gram = pca.components_ @ pca.components_.t()
    assert torch.allclose(gram, torch.eye(3, dtype=torch.float64), atol=1e-10)


def test_sign_convention(rng):
    X = rng.normal(size=(60, 4))
    pca = PCAProjector(n_components=2).fit(X)
    for axis in pca.components_:
        assert axis[torch.argmax(axis.abs())].item() > 0


def test_repeated_runs_agree(rng):
    X = rng.normal(size=(50, 3))
    a, _ = project(X)
    b, _ = project(X)
    assert torch.equal(a, b)


def test_too_many_components(rng):
    with pytest.raises(InsufficientDimensionsError):
        project(rng.normal(size=(20, 1)), n_components=2)


def test_zero_variance_input():
    with pytest.raises(DegenerateColumnError):
        project(np.full((10, 3), 5.0), n_components=2)


@pytest.mark.parametrize("n_components, exc", [(0, ValueError), (1.5, TypeError)])
def test_invalid_component_count(n_components, exc):
    with pytest.raises(exc):
        PCAProjector(n_components=n_components)


def test_transform_checks_width(rng):
    pca = PCAProjector(n_components=2).fit(rng.normal(size=(20, 3)))
    with pytest.raises(DimensionMismatchError):
        pca.transform(rng.normal(size=(5, 4)))
