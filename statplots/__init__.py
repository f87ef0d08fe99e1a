# Statistical Plotting Helpers
# Publication export, supervised PCA views, cluster elbow curves
# and logistic regression diagnostics

from .config_schema import validate_config, ConfigValidationError

from .export import publish_plot

from .supervised import (
    visualize_supervised,
    expand_formula,
    response_name,
    is_categorical,
    UnsupportedDimensionError
)

from .clustering import (
    plot_cluster_elbow,
    compute_wss_curve,
    within_group_ss,
    cut_by_merge_order
)

from .logistic_diagnostics import (
    logistic_regression_diagnostics,
    is_logistic_model,
    compute_vif,
    standardized_residuals,
    top_influential,
    WrongModelTypeError
)

__all__ = [
    'validate_config',
    'ConfigValidationError',
    'publish_plot',
    'visualize_supervised',
    'expand_formula',
    'response_name',
    'is_categorical',
    'UnsupportedDimensionError',
    'plot_cluster_elbow',
    'compute_wss_curve',
    'within_group_ss',
    'cut_by_merge_order',
    'logistic_regression_diagnostics',
    'is_logistic_model',
    'compute_vif',
    'standardized_residuals',
    'top_influential',
    'WrongModelTypeError',
]
