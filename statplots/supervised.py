# Supervised Dimensionality-Reduction Module
# Projects labeled high-dimensional data onto principal components
# for 2D / 3D exploratory plots of classification and regression data

import warnings
from typing import Dict, Optional

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
import plotly.express as px
from patsy import dmatrix
from sklearn.decomposition import PCA

from .config_schema import SUPPORTED_DIMS


class UnsupportedDimensionError(ValueError):
    """Raised when a projection dimension other than 2 or 3 is requested."""
    pass


def response_name(formula: str) -> str:
    """Left-hand-side variable of a formula string."""
    if '~' not in formula:
        raise ValueError(f"Formula has no response: '{formula}'")
    lhs = formula.split('~', 1)[0].strip()
    if not lhs:
        raise ValueError(f"Formula has no response: '{formula}'")
    return lhs


def expand_formula(formula: str, data: pd.DataFrame) -> str:
    """Expand the R-style 'y ~ .' shorthand to every non-response column."""
    lhs = response_name(formula)
    rhs = formula.split('~', 1)[1].strip()
    if rhs != '.':
        return formula
    predictors = [c for c in data.columns if c != lhs]
    if not predictors:
        raise ValueError(f"No predictors left in data besides '{lhs}'")
    return f"{lhs} ~ " + " + ".join(f"Q({c!r})" for c in predictors)


def is_categorical(series: pd.Series) -> bool:
    """True for responses that define classes rather than a numeric target."""
    if pd.api.types.is_bool_dtype(series):
        return True
    return not pd.api.types.is_numeric_dtype(series)


def visualize_supervised(
    formula: str,
    data: pd.DataFrame,
    dim: Optional[int] = None
) -> Dict:
    """
    Visualize classification/regression data in a 2D or 3D PCA plot.

    Classification (categorical response): the top `dim` principal components
    are the axes and points are coloured by class. Regression (numeric
    response): the top `dim - 1` components are the axes and the response is
    the last axis.

    Args:
        formula: 'response ~ predictors' ('response ~ .' uses all other columns)
        data: DataFrame holding every variable in the formula
        dim: 2 or 3. Defaults to 3, or to the number of design columns if fewer.

    Returns:
        Dict with 'plot' (plotly Figure for 3D, matplotlib Figure for 2D),
        'var_explained' (Series per plotted PC) and 'total_var_explained'
    """
    formula = expand_formula(formula, data)
    target = response_name(formula)
    rhs = formula.split('~', 1)[1]

    x = dmatrix(rhs, data, return_type='dataframe', NA_action='drop')
    x = x.drop(columns='Intercept', errors='ignore')
    y = data.loc[x.index, target]
    observed = y.notna()
    x, y = x[observed], y[observed]
    if len(x) < len(data):
        warnings.warn(f"Dropped {len(data) - len(x)} rows with missing predictor or response values")

    if dim is None:
        dim = min(3, x.shape[1])
    if dim not in SUPPORTED_DIMS:
        raise UnsupportedDimensionError(
            f"Cannot plot {dim} dimensions. Allowed: {list(SUPPORTED_DIMS)}"
        )

    categorical = is_categorical(y)
    n_pcs = dim if categorical else dim - 1

    max_components = min(x.shape)
    if n_pcs > max_components:
        raise ValueError(
            f"{n_pcs} principal components requested but the design matrix "
            f"({x.shape[0]} rows, {x.shape[1]} columns) only yields {max_components}"
        )

    # Centered, unscaled PCA on predictors only
    pca = PCA()
    scores = pca.fit_transform(x.to_numpy(dtype=float))

    pc_names = [f'PC{i + 1}' for i in range(n_pcs)]
    var_explained = pd.Series(pca.explained_variance_ratio_[:n_pcs], index=pc_names)
    plot_data = pd.DataFrame(scores[:, :n_pcs], columns=pc_names, index=x.index)

    if categorical:
        plot_data['Group'] = y.astype('category')
        if dim == 3:
            plot = px.scatter_3d(
                plot_data, x='PC1', y='PC2', z='PC3', color='Group',
                color_discrete_sequence=px.colors.qualitative.Set1
            )
            plot.update_traces(marker=dict(size=5))
        else:
            plot, ax = plt.subplots(figsize=(8, 6))
            sns.scatterplot(data=plot_data, x='PC1', y='PC2', hue='Group', ax=ax)
    else:
        plot_data[target] = np.asarray(y, dtype=float)
        if dim == 3:
            plot = px.scatter_3d(plot_data, x='PC1', y='PC2', z=target)
            plot.update_traces(marker=dict(size=5))
        else:
            plot, ax = plt.subplots(figsize=(8, 6))
            sns.scatterplot(data=plot_data, x='PC1', y=target, ax=ax)

    return {
        'plot': plot,
        'var_explained': var_explained,
        'total_var_explained': float(var_explained.sum())
    }
