# Logistic Regression Diagnostics Module
# Multicollinearity, logit linearity, influential points and residuals
# for a fitted binomial GLM

from typing import Dict

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
import seaborn as sns
from statsmodels.genmod.families import Binomial
from statsmodels.genmod.generalized_linear_model import GLM
from statsmodels.stats.outliers_influence import variance_inflation_factor

from .supervised import response_name

INTERCEPT_NAMES = ('Intercept', 'const')


class WrongModelTypeError(TypeError):
    """Raised when diagnostics are requested for a non-logistic model."""
    pass


def is_logistic_model(results) -> bool:
    """True for fitted statsmodels GLM results with a binomial family."""
    model = getattr(results, 'model', None)
    return isinstance(model, GLM) and isinstance(model.family, Binomial)


def _response(results) -> str:
    formula = getattr(results.model, 'formula', None)
    if formula:
        return response_name(formula)
    return results.model.endog_names


def _row_labels(results):
    labels = getattr(results.model.data, 'row_labels', None)
    if labels is None:
        return pd.RangeIndex(1, results.model.exog.shape[0] + 1)
    return pd.Index(labels)


def _training_frame(results) -> pd.DataFrame:
    """Rows actually used in the fit, with the original columns where known."""
    model = results.model
    frame = getattr(model.data, 'frame', None)
    if frame is not None:
        rows = getattr(model.data, 'row_labels', None)
        return frame.loc[rows] if rows is not None else frame

    frame = pd.DataFrame(model.exog, columns=model.exog_names)
    frame = frame.drop(columns=list(INTERCEPT_NAMES), errors='ignore')
    frame[model.endog_names] = model.endog
    return frame


def compute_vif(results) -> pd.Series:
    """Variance inflation factor of every non-intercept design column."""
    exog = np.asarray(results.model.exog, dtype=float)
    names = results.model.exog_names
    vif = {
        name: variance_inflation_factor(exog, i)
        for i, name in enumerate(names)
        if name not in INTERCEPT_NAMES
    }
    return pd.Series(vif, name='VIF')


def standardized_residuals(results) -> pd.Series:
    """Deviance residuals scaled by sqrt(scale * (1 - leverage)), indexed 1..n."""
    influence = results.get_influence()
    leverage = np.asarray(influence.hat_matrix_diag)
    resid = np.asarray(results.resid_deviance) / np.sqrt(results.scale * (1 - leverage))
    return pd.Series(resid, index=pd.RangeIndex(1, len(resid) + 1, name='index'), name='std_resid')


def _cooks_distance(results) -> np.ndarray:
    return np.asarray(results.get_influence().cooks_distance[0])


def top_influential(results, n: int = 3) -> np.ndarray:
    """Row positions of the n largest Cook's distances, largest first."""
    return np.argsort(_cooks_distance(results))[::-1][:n]


def plot_logit_relationships(results) -> sns.FacetGrid:
    """
    Facet each numeric predictor against the predicted log-odds.

    The response column is left out if it is numeric. Each facet has its own
    y scale and a lowess trend, for checking linearity in the logit.
    """
    data = _training_frame(results)
    numeric = data.select_dtypes(include=np.number)
    target = _response(results)
    if target in numeric.columns:
        numeric = numeric.drop(columns=target)
    if numeric.shape[1] == 0:
        raise ValueError("Model data has no numeric predictors to plot against the log-odds")

    probs = np.asarray(results.fittedvalues, dtype=float)
    plot_data = numeric.copy()
    plot_data['logit'] = np.log(probs / (1 - probs))
    plot_data = plot_data.melt(id_vars='logit', var_name='predictors', value_name='predictor.value')

    with sns.axes_style('whitegrid'):
        grid = sns.lmplot(
            data=plot_data,
            x='logit',
            y='predictor.value',
            col='predictors',
            col_wrap=min(numeric.shape[1], 3),
            lowess=True,
            height=3,
            scatter_kws={'s': 5, 'alpha': 0.5},
            line_kws={'color': '#2E86AB'},
            facet_kws={'sharey': False}
        )
    grid.set_axis_labels('Log of odds', 'Predictor value')
    grid.set_titles('{col_name}')

    return grid


def plot_influence(results, n_labels: int = 3) -> Figure:
    """Cook's distance per observation with the n_labels largest annotated."""
    cooks = _cooks_distance(results)
    top = top_influential(results, n_labels)
    labels = _row_labels(results)
    obs = np.arange(1, len(cooks) + 1)

    fig, ax = plt.subplots(figsize=(8, 5))
    try:
        ax.vlines(obs, 0, cooks, color='black', linewidth=0.8)
        for pos in top:
            ax.annotate(str(labels[pos]), (obs[pos], cooks[pos]),
                        textcoords='offset points', xytext=(0, 3),
                        ha='center', fontsize=8)
        ax.set_xlabel('Obs. number')
        ax.set_ylabel("Cook's distance")
        ax.set_title("Cook's distance")
        fig.tight_layout()
    finally:
        # keep the figure, drop it from pyplot's active state
        plt.close(fig)

    return fig


def plot_standardized_residuals(results) -> Figure:
    """Standardized residual by row index, coloured by observed class."""
    resid = standardized_residuals(results)
    endog = np.asarray(results.model.endog)
    if endog.ndim > 1:
        endog = endog[:, 0]

    plot_data = pd.DataFrame({
        'index': resid.index,
        'std_resid': resid.values,
        'observed': pd.Categorical(endog)
    })

    with sns.axes_style('whitegrid'):
        fig, ax = plt.subplots(figsize=(10, 5))
        sns.scatterplot(data=plot_data, x='index', y='std_resid', hue='observed', alpha=0.5, ax=ax)
    ax.set_xlabel('index')
    ax.set_ylabel('Standardized residual')

    return fig


def logistic_regression_diagnostics(results) -> Dict:
    """
    Diagnostics for a fitted logistic regression.

    Args:
        results: statsmodels GLM results with a Binomial family

    Returns:
        Dict with 'vif' (Series), 'relationship_plot' (seaborn FacetGrid),
        'influential_plot' (Figure) and 'residual_plot' (Figure)

    Raises:
        WrongModelTypeError before any computation if results is not a
        binomial GLM fit
    """
    if not is_logistic_model(results):
        raise WrongModelTypeError(
            f"Not a logistic regression model: got {type(results).__name__}"
        )

    return {
        'vif': compute_vif(results),
        'relationship_plot': plot_logit_relationships(results),
        'influential_plot': plot_influence(results),
        'residual_plot': plot_standardized_residuals(results)
    }
