# Plot Runners Package
# Command-line entry points for batch plot generation

from . import run_plots

__all__ = [
    'run_plots',
]
