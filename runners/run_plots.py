"""
Plot Runner for Exploratory Analysis
Generates the cluster elbow curve and the supervised PCA view for a CSV
dataset described by a YAML config, and exports them to an output directory.
"""

import os
import sys
import argparse
import json

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np
import matplotlib
matplotlib.use('Agg')
import plotly.graph_objects as go

from statplots.config_schema import (
    validate_config,
    DEFAULT_DPI,
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    DEFAULT_KMAX
)
from statplots.io import load_config, load_dataset
from statplots.export import publish_plot
from statplots.supervised import visualize_supervised
from statplots.clustering import plot_cluster_elbow


def _export_kwargs(config: dict) -> dict:
    output = config.get('output') or {}
    return {
        'res': output.get('dpi', DEFAULT_DPI),
        'height': output.get('height', DEFAULT_HEIGHT),
        'width': output.get('width', DEFAULT_WIDTH)
    }


def run_elbow(df, config: dict, output_dir: str) -> str:
    """Export the Ward elbow curve for the configured (or all numeric) columns."""
    print("Generating cluster elbow curve...")
    elbow = config.get('elbow') or {}

    columns = elbow.get('columns') or df.select_dtypes(include=[np.number]).columns.tolist()
    data = df[columns].dropna()
    if len(data) < len(df):
        print(f"  Dropped {len(df) - len(data)} rows with missing values")

    kmax = elbow.get('kmax', DEFAULT_KMAX)
    fig = plot_cluster_elbow(data, kmax=kmax)
    path = publish_plot(fig, dir=output_dir, filename='elbow', **_export_kwargs(config))
    print(f"- elbow curve saved (k = 1..{kmax}, {len(columns)} columns)")
    return path


def run_pca(df, config: dict, output_dir: str) -> dict:
    """Export the supervised PCA view and its variance summary."""
    print("Generating supervised PCA view...")
    formula = config['data']['formula']
    dim = (config.get('pca') or {}).get('dim')

    result = visualize_supervised(formula, df, dim=dim)
    plot = result['plot']

    if isinstance(plot, go.Figure):
        plot_path = os.path.join(output_dir, 'pca_3d.html')
        plot.write_html(plot_path)
    else:
        plot_path = publish_plot(plot, dir=output_dir, filename='pca_2d', **_export_kwargs(config))

    summary = {
        'formula': formula,
        'var_explained': {k: float(v) for k, v in result['var_explained'].items()},
        'total_var_explained': result['total_var_explained']
    }
    summary_path = os.path.join(output_dir, 'pca_summary.json')
    with open(summary_path, 'w') as f:
        json.dump(summary, f, indent=2)

    print(f"- PCA view saved ({result['total_var_explained']:.1%} variance explained)")
    return {'plot': plot_path, 'summary': summary_path, **summary}


def run_plots(config: dict, output_dir: str = None) -> dict:
    """
    Run every enabled plot for a validated config.

    Args:
        config: Plot configuration dict
        output_dir: Overrides output.dir from the config

    Returns:
        Summary dict of written files
    """
    validate_config(config)
    output_dir = output_dir or (config.get('output') or {}).get('dir', 'plots_output')
    os.makedirs(output_dir, exist_ok=True)

    dataset_path = config['data']['dataset_path']

    print(f"\n{'='*60}")
    print("STATISTICAL PLOTS")
    print(f"{'='*60}")
    print(f"Dataset: {dataset_path}")
    print(f"Output: {output_dir}")

    df = load_dataset(dataset_path)
    print(f"Loaded: {len(df)} samples, {len(df.columns)} columns")

    summary = {'output_dir': output_dir, 'files': []}

    if (config.get('elbow') or {}).get('enabled', True):
        summary['files'].append(run_elbow(df, config, output_dir))

    if (config.get('pca') or {}).get('enabled', False):
        pca = run_pca(df, config, output_dir)
        summary['files'].extend([pca['plot'], pca['summary']])
        summary['pca'] = pca

    print(f"\n{'='*60}")
    print(f"PLOTS COMPLETE - {len(summary['files'])} files written")
    print(f"{'='*60}\n")

    return summary


def main():
    parser = argparse.ArgumentParser(description='Generate statistical plots for a dataset')
    parser.add_argument('--config', required=True, help='Path to YAML config')
    parser.add_argument('--output', default=None, help='Output directory (overrides output.dir)')

    args = parser.parse_args()

    config = load_config(args.config)
    run_plots(config, args.output)


if __name__ == '__main__':
    main()
