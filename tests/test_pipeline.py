"""
End-to-end analysis of synthetic job records.
"""

from __future__ import annotations

import numpy as np
import pytest
import torch

from utils import perm_invariant_accuracy, time_block
from data_gen import make_hpc_jobs

from jobscope import AnalysisConfig, AnalysisPipeline, FeatureMatrix, run_analysis
from jobscope.errors import DegenerateColumnError, InvalidKError


def _config(**overrides):
    settings = dict(n_clusters=3, k_min=1, k_max=6, restarts=10, seed=0, init="k-means++")
    settings.update(overrides)
    return AnalysisConfig(**settings)


def test_full_run_recovers_workload_profiles():
    X, y, columns, categorical = make_hpc_jobs(n_per=60, seed=0)

    with time_block("pipeline", {"n": X.shape[0], "d": X.shape[1]}):
        result = run_analysis(X, columns, _config(), categorical=categorical)

    assert result.columns == columns
    assert result.assignment.shape == (180,)
    assert result.centroids.shape == (3, 4)
    assert perm_invariant_accuracy(result.assignment, y) == 1.0

    # Elbow curve is advisory and covers the configured range
    assert result.elbow_curve.ks == (1, 2, 3, 4, 5, 6)
    inertias = result.elbow_curve.inertias
    assert all(b <= a + 1e-10 * max(1.0, a) for a, b in zip(inertias, inertias[1:]))

    # Final run with the chosen k matches its point on the curve
    assert result.inertia == pytest.approx(result.elbow_curve.inertia_at(3), rel=1e-6)

    assert result.pca_scores.shape == (180, 2)
    assert result.explained_variance_ratio.sum().item() <= 1.0 + 1e-12
    assert torch.equal(result.mi_matrix.values, result.mi_matrix.values.t())

    summary = result.cluster_summary
    assert sorted(stats.size for stats in summary) == [60, 60, 60]
    assert sorted(stats.modes["queue"] for stats in summary) == ["long", "normal", "short"]


def test_summary_uses_original_units():
    X, _, columns, categorical = make_hpc_jobs(n_per=40, seed=1)
    result = run_analysis(X, columns, _config(k_max=4))

    means = sorted(stats.stat("cpu_hours", "mean") for stats in result.cluster_summary)
    assert means[0] == pytest.approx(10.0, rel=0.1)
    assert means[-1] == pytest.approx(400.0, rel=0.1)

    original = result.centroids_original
    assert torch.allclose(original.sort(dim=0).values[:, 0],
                          torch.tensor(means, dtype=torch.float64), rtol=1e-10)


def test_standardized_values_are_z_scores():
    X, _, columns, _ = make_hpc_jobs(n_per=30, seed=2)
    result = run_analysis(X, columns, _config(k_max=3))
    Z = result.standardized.values
    assert torch.allclose(Z.mean(dim=0), torch.zeros(4, dtype=torch.float64), atol=1e-10)
    assert torch.allclose(Z.std(dim=0, correction=1), torch.ones(4, dtype=torch.float64), atol=1e-10)


def test_scatter_frame_joins_by_record_index():
    X, _, columns, _ = make_hpc_jobs(n_per=20, seed=3)
    result = run_analysis(X, columns, _config(k_max=3))
    frame = result.scatter_frame()

    assert list(frame.columns) == ["PC1", "PC2", "cluster"]
    assert len(frame) == 60
    assert np.array_equal(frame["cluster"].to_numpy(), result.assignment.numpy())
    assert np.allclose(frame["PC1"].to_numpy(), result.pca_scores[:, 0].numpy())


def test_same_seed_same_result():
    X, _, columns, _ = make_hpc_jobs(n_per=20, seed=4)
    a = run_analysis(X, columns, _config(k_max=4, seed=7))
    b = run_analysis(X, columns, _config(k_max=4, seed=7))

    assert a.elbow_curve == b.elbow_curve
    assert torch.equal(a.assignment, b.assignment)
    assert torch.equal(a.centroids, b.centroids)


def test_constant_column_raises():
    X, _, columns, _ = make_hpc_jobs(n_per=20, seed=5)
    X[:, 3] = 1.0
    with pytest.raises(DegenerateColumnError) as excinfo:
        run_analysis(X, columns, _config(k_max=3))
    assert excinfo.value.column == "n_nodes"


def test_constant_column_zero_policy():
    X, _, columns, _ = make_hpc_jobs(n_per=20, seed=5)
    X[:, 3] = 1.0
    result = run_analysis(X, columns, _config(k_max=3, on_degenerate="zero"))

    assert result.standardized.degenerate == ("n_nodes",)
    assert torch.equal(result.mi_matrix.values[3], torch.zeros(4, dtype=torch.float64))


def test_feature_matrix_input_carries_column_names():
    X, y, columns, categorical = make_hpc_jobs(n_per=30, seed=2)
    matrix = FeatureMatrix.from_values(torch.as_tensor(X), columns)

    result = run_analysis(matrix, config=_config(k_max=4), categorical=categorical)

    assert result.columns == tuple(columns)
    assert result.mi_matrix.columns == tuple(columns)
    assert perm_invariant_accuracy(result.assignment, y) == 1.0
    assert sorted(stats.size for stats in result.cluster_summary) == [30, 30, 30]


def test_k_larger_than_records():
    X, _, columns, _ = make_hpc_jobs(n_per=2, seed=6)
    with pytest.raises(InvalidKError):
        AnalysisPipeline(_config(n_clusters=3, k_max=7)).run(X, columns)


@pytest.mark.parametrize("overrides", [
    {"n_clusters": 0},
    {"k_min": 0},
    {"k_min": 5, "k_max": 2},
])
def test_config_rejects_invalid_k(overrides):
    with pytest.raises(InvalidKError):
        _config(**overrides)


@pytest.mark.parametrize("overrides", [
    {"restarts": 0},
    {"init": "forgy"},
    {"mi_bins": 0},
    {"on_degenerate": "skip"},
])
def test_config_rejects_invalid_settings(overrides):
    with pytest.raises(ValueError):
        _config(**overrides)
