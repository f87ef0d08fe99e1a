# Cluster Elbow Module
# Ward hierarchical clustering and within-group sum of squares across k

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from scipy.cluster.hierarchy import linkage
from scipy.spatial.distance import pdist

from .config_schema import DEFAULT_KMAX


def within_group_ss(x) -> float:
    """Sum of squared deviations of the rows of x from their centroid."""
    x = np.asarray(x, dtype=float)
    return float(((x - x.mean(axis=0)) ** 2).sum())


def cut_by_merge_order(tree: np.ndarray, k: int) -> np.ndarray:
    """
    Group labels for exactly k clusters from a linkage matrix.

    Applies the first n - k merges in the order they were made, like R's
    cutree, so ties in merge height (e.g. duplicate rows) still yield
    exactly k groups.
    """
    n = tree.shape[0] + 1
    if k < 1 or k > n:
        raise ValueError(f"k must be between 1 and {n}, got {k}")

    members = {i: [i] for i in range(n)}
    for step, (a, b) in enumerate(tree[:n - k, :2].astype(int)):
        members[n + step] = members.pop(a) + members.pop(b)

    labels = np.empty(n, dtype=int)
    for label, rows in enumerate(members.values()):
        labels[rows] = label
    return labels


def compute_wss_curve(data, kmax: int = DEFAULT_KMAX) -> pd.Series:
    """
    Within-group sum of squares for k = 1..kmax clusters.

    Clusters come from cutting a single Ward tree built on Euclidean
    distances (R's ward.D2), so the partitions are nested and WSS is
    non-increasing in k.

    Args:
        data: DataFrame or 2D array, rows are observations
        kmax: largest cluster count to evaluate

    Returns:
        Series of WSS indexed by k
    """
    x = np.asarray(data, dtype=float)
    if x.ndim == 1:
        x = x.reshape(-1, 1)
    n = x.shape[0]

    if n < 2:
        raise ValueError(f"Need at least 2 observations to cluster, got {n}")
    if kmax < 1 or kmax > n:
        raise ValueError(f"kmax must be between 1 and the number of rows ({n}), got {kmax}")

    tree = linkage(pdist(x, metric='euclidean'), method='ward')
    ks = list(range(1, kmax + 1))

    wss = []
    for k in ks:
        groups = cut_by_merge_order(tree, k)
        wss.append(sum(within_group_ss(x[groups == g]) for g in np.unique(groups)))

    return pd.Series(wss, index=pd.Index(ks, name='k'), name='WSS')


def plot_cluster_elbow(data, kmax: int = DEFAULT_KMAX) -> Figure:
    """Plot the elbow curve of within-group variance against number of clusters."""
    wss = compute_wss_curve(data, kmax)

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.plot(wss.index, wss.values, '-')
    ax.set_xlabel('Number of Clusters')
    ax.set_ylabel('Within-Group Sum of Squares')
    ax.set_xticks(list(wss.index))
    ax.grid(alpha=0.3)
    fig.tight_layout()

    return fig
