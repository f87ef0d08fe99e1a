import pytest
import numpy as np
import pandas as pd
from matplotlib.figure import Figure
from scipy.cluster.hierarchy import linkage
from scipy.spatial.distance import pdist

from statplots.clustering import (
    plot_cluster_elbow,
    compute_wss_curve,
    within_group_ss,
    cut_by_merge_order
)


@pytest.fixture
def blobs(seed):
    """Three well separated groups of 30 points in 4 dimensions."""
    rng = np.random.default_rng(seed)
    centers = np.array([[0, 0, 0, 0], [10, 10, 0, 0], [0, 10, 10, 10]], dtype=float)
    X = np.vstack([c + rng.normal(0.0, 0.5, size=(30, 4)) for c in centers])
    return pd.DataFrame(X, columns=["f0", "f1", "f2", "f3"])


def test_within_group_ss_simple_case():
    assert within_group_ss([[0.0], [2.0]]) == pytest.approx(2.0)
    assert within_group_ss([[1.0, 1.0]]) == pytest.approx(0.0)


def test_wss_is_non_increasing(blobs):
    wss = compute_wss_curve(blobs, kmax=8)

    assert list(wss.index) == list(range(1, 9))
    assert (np.diff(wss.values) <= 1e-9).all()


def test_wss_at_one_cluster_is_total_sum_of_squares(blobs):
    wss = compute_wss_curve(blobs, kmax=3)

    X = blobs.to_numpy()
    total = ((X - X.mean(axis=0)) ** 2).sum()
    assert wss.loc[1] == pytest.approx(total)


def test_wss_elbow_at_true_cluster_count(blobs):
    wss = compute_wss_curve(blobs, kmax=6)

    drop_to_3 = wss.loc[2] - wss.loc[3]
    drop_after_3 = wss.loc[3] - wss.loc[4]
    assert drop_to_3 > 10 * drop_after_3


def test_wss_reaches_zero_with_one_cluster_per_row():
    X = np.array([[0.0, 0.0], [1.0, 0.0], [5.0, 5.0], [6.0, 5.0]])
    wss = compute_wss_curve(X, kmax=4)

    assert wss.loc[4] == pytest.approx(0.0)
    assert wss.loc[2] == pytest.approx(1.0)


def test_wss_monotone_with_duplicate_rows_and_kmax_equal_to_rows():
    X = np.array([[0, 0], [0, 0], [1, 0], [1, 0], [0, 1], [0, 1], [5, 5], [5, 5]], dtype=float)
    wss = compute_wss_curve(X, kmax=len(X))

    assert (np.diff(wss.values) <= 1e-9).all()
    assert wss.loc[len(X)] == pytest.approx(0.0)
    assert wss.loc[4] == pytest.approx(0.0)


@pytest.mark.parametrize("rep", range(20))
def test_wss_monotone_on_tied_integer_data(rep):
    rng = np.random.default_rng(rep)
    X = rng.integers(0, 3, size=(10, 2)).astype(float)
    wss = compute_wss_curve(X, kmax=len(X))

    assert (np.diff(wss.values) <= 1e-9).all()
    assert wss.loc[len(X)] == pytest.approx(0.0)


def test_cut_by_merge_order_gives_exactly_k_groups(blobs):
    tree = linkage(pdist(blobs.to_numpy()), method="ward")
    n = len(blobs)

    for k in (1, 2, 3, 7, n):
        labels = cut_by_merge_order(tree, k)
        assert len(labels) == n
        assert len(np.unique(labels)) == k

    with pytest.raises(ValueError):
        cut_by_merge_order(tree, n + 1)


def test_plot_cluster_elbow_figure(blobs):
    fig = plot_cluster_elbow(blobs, kmax=5)

    assert isinstance(fig, Figure)
    ax = fig.axes[0]
    assert ax.get_xlabel() == "Number of Clusters"
    assert ax.get_ylabel() == "Within-Group Sum of Squares"
    assert list(ax.get_xticks()) == [1, 2, 3, 4, 5]

    line = ax.get_lines()[0]
    assert np.allclose(line.get_ydata(), compute_wss_curve(blobs, kmax=5).values)


def test_plot_cluster_elbow_default_kmax(blobs):
    fig = plot_cluster_elbow(blobs)
    assert len(fig.axes[0].get_lines()[0].get_xdata()) == 8


@pytest.mark.parametrize("kmax", [0, 91])
def test_invalid_kmax_raises(blobs, kmax):
    with pytest.raises(ValueError, match="kmax"):
        compute_wss_curve(blobs, kmax=kmax)


def test_single_row_raises():
    with pytest.raises(ValueError, match="at least 2"):
        compute_wss_curve(np.array([[1.0, 2.0]]), kmax=1)


def test_non_numeric_data_raises():
    df = pd.DataFrame({"a": ["x", "y", "z"], "b": [1, 2, 3]})
    with pytest.raises(ValueError):
        plot_cluster_elbow(df, kmax=2)
