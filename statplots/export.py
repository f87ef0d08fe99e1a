# Plot Export Module
# Renders plot objects to publication-quality JPEG files

import os
from typing import Optional, Union

import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure
import plotly.graph_objects as go
import seaborn as sns

from .config_schema import DEFAULT_DPI, DEFAULT_HEIGHT, DEFAULT_WIDTH, DEFAULT_FILENAME

# plotly lays out in CSS pixels
PLOTLY_BASE_DPI = 96

PlotLike = Union[Figure, Axes, sns.axisgrid.Grid, go.Figure]


def _resolve_figure(plot) -> Figure:
    if isinstance(plot, Figure):
        return plot
    if isinstance(plot, Axes):
        return plot.figure
    if isinstance(plot, sns.axisgrid.Grid):
        return plot.figure
    raise TypeError(
        f"Unsupported plot type '{type(plot).__name__}'. Expected a matplotlib Figure/Axes, "
        "a seaborn grid, or a plotly Figure."
    )


def publish_plot(
    plot: PlotLike,
    res: int = DEFAULT_DPI,
    height: int = DEFAULT_HEIGHT,
    width: int = DEFAULT_WIDTH,
    dir: Optional[str] = None,
    filename: str = DEFAULT_FILENAME
) -> str:
    """
    Save a plot in a high-quality JPEG file for publication.

    The image is `width` x `height` pixels rendered at `res` dpi, so a larger
    `res` gives larger text and markers relative to the canvas. The target
    directory must already exist.

    Args:
        plot: matplotlib Figure or Axes, seaborn grid, or plotly Figure
        res: resolution (dpi)
        height: height in pixels
        width: width in pixels
        dir: saving directory (default: current working directory)
        filename: file name without extension

    Returns:
        Path of the written file
    """
    for name, value in (('res', res), ('height', height), ('width', width)):
        if value <= 0:
            raise ValueError(f"{name} must be > 0, got {value}")

    if dir is None:
        dir = os.getcwd()
    path = os.path.join(dir, f"{filename}.jpg")

    if isinstance(plot, go.Figure):
        # Needs the kaleido engine at runtime
        scale = res / PLOTLY_BASE_DPI
        plot.write_image(
            path,
            format='jpg',
            width=int(round(width / scale)),
            height=int(round(height / scale)),
            scale=scale
        )
        return path

    fig = _resolve_figure(plot)
    original_size = fig.get_size_inches().copy()
    try:
        fig.set_size_inches(width / res, height / res)
        fig.savefig(path, dpi=res, format='jpg')
    finally:
        fig.set_size_inches(original_size)
        plt.close(fig)

    return path
