"""Render the diagnostic figures of an analysis to PNG files.

All functions receive precomputed series (a fitted model or a correlation
matrix) and only draw them; no statistics are computed here beyond the
presentation ordering of the correlation heatmap.

Figures:
    scatter_plot.png:
        Observations, the OLS line and its 95% mean-response band.
    qq_plot.png:
        Residual normal QQ plot with the quartile reference line.
    correlation_matrix.png:
        Lower-triangle heatmap of the numeric correlation matrix, annotated
        with the coefficients.
"""

from __future__ import annotations

import logging
import os
from typing import Dict, List

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from scipy.cluster.hierarchy import leaves_list, linkage
from scipy.spatial.distance import squareform

from .schema import QQColumns, RegressionLineColumns
from .stats.diagnostics import qq_line, qq_points
from .stats.regression import FittedModel, regression_line

logger = logging.getLogger(__name__)

FIGURE_DPI = 150
DATA_COLOR = "#00008b"
LINE_COLOR = "#a50f15"
CI_COLOR = "#f1c4c1"


def setup_plot_style() -> None:
    """Apply the shared minimal plot style.

    Returns:
        None: Update global matplotlib ``rcParams`` in-place.
    """
    plt.rcParams.update(
        {
            "font.size": 11,
            "axes.titlesize": 13,
            "axes.labelsize": 11,
            "axes.spines.top": False,
            "axes.spines.right": False,
            "axes.grid": True,
            "grid.alpha": 0.3,
            "grid.linestyle": ":",
            "legend.frameon": False,
            "savefig.dpi": FIGURE_DPI,
            "savefig.bbox": "tight",
        }
    )


def _save(fig: plt.Figure, output_dir: str, filename: str) -> str:
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, filename)
    fig.savefig(path)
    plt.close(fig)
    logger.info("Saved figure to %s", path)
    return path


def plot_scatter_with_fit(model: FittedModel, output_dir: str = "output") -> str:
    """Render the scatterplot with the regression line.

    Args:
        model (FittedModel): Fit whose complete rows are drawn.
        output_dir (str, optional): Directory for the PNG. Defaults to
            ``"output"``.

    Returns:
        str: Path to ``scatter_plot.png``.
    """
    setup_plot_style()
    cols = RegressionLineColumns()
    band = regression_line(model, points=200)

    fig, ax = plt.subplots(figsize=(7.0, 4.8))
    ax.fill_between(
        band[cols.x],
        band[cols.lower],
        band[cols.upper],
        facecolor=CI_COLOR,
        alpha=0.6,
        linewidth=0,
        label=f"{int(round(model.confidence_level * 100))}% CI (mean)",
        zorder=1,
    )
    ax.plot(
        band[cols.x],
        band[cols.fit],
        color=LINE_COLOR,
        linewidth=1.8,
        label="Linear fit",
        zorder=3,
    )
    ax.scatter(model.x, model.y, s=22, color=DATA_COLOR, zorder=4, label="Observed")
    ax.set_title("Scatterplot with Regression Line")
    ax.set_xlabel(model.predictor)
    ax.set_ylabel(model.response)
    ax.legend(loc="best")
    return _save(fig, output_dir, "scatter_plot.png")


def plot_qq(model: FittedModel, output_dir: str = "output") -> str:
    """Render the normal QQ plot of the residuals and return its path."""
    setup_plot_style()
    cols = QQColumns()
    points = qq_points(model.residuals)
    intercept, slope = qq_line(model.residuals)

    fig, ax = plt.subplots(figsize=(5.6, 5.0))
    ax.scatter(
        points[cols.theoretical],
        points[cols.sample],
        s=18,
        facecolors="none",
        edgecolors="black",
    )
    xs = np.array([points[cols.theoretical].min(), points[cols.theoretical].max()])
    ax.plot(xs, intercept + slope * xs, color="red", linewidth=2)
    ax.set_title("QQ Plot of Residuals")
    ax.set_xlabel("Theoretical Quantiles")
    ax.set_ylabel("Sample Quantiles")
    return _save(fig, output_dir, "qq_plot.png")


def hierarchical_order(corr: pd.DataFrame) -> List[str]:
    """Order variables by hierarchical clustering on ``1 - r`` distance.

    Mirrors the ``hc.order`` option of correlation heatmaps (complete linkage).
    """
    if corr.shape[0] < 3:
        return list(corr.columns)
    dist = (1.0 - corr.fillna(0.0)).clip(lower=0.0).to_numpy(copy=True)
    np.fill_diagonal(dist, 0.0)
    dist = (dist + dist.T) / 2.0
    order = leaves_list(linkage(squareform(dist, checks=False), method="complete"))
    return [corr.columns[i] for i in order]


def plot_correlation_matrix(
    corr: pd.DataFrame, output_dir: str = "output", hc_order: bool = True
) -> str:
    """Render the lower-triangle correlation heatmap and return its path.

    Args:
        corr (pandas.DataFrame): Symmetric correlation matrix, e.g. from
            :func:`olsview.summary.correlation_matrix`.
        output_dir (str, optional): Directory for the PNG.
        hc_order (bool, optional): Reorder variables by hierarchical
            clustering before drawing. Defaults to ``True``.
    """
    setup_plot_style()
    if hc_order:
        order = hierarchical_order(corr)
        corr = corr.loc[order, order]
    values = corr.to_numpy(dtype=float)
    masked = np.ma.array(values, mask=np.triu(np.ones_like(values, dtype=bool), k=1))

    size = max(4.0, 0.55 * len(corr) + 2.0)
    fig, ax = plt.subplots(figsize=(size, size * 0.85))
    image = ax.imshow(masked, cmap="RdBu_r", vmin=-1.0, vmax=1.0)
    for i in range(values.shape[0]):
        for j in range(i + 1):
            if np.isfinite(values[i, j]):
                ax.text(j, i, f"{values[i, j]:.2f}", ha="center", va="center", fontsize=8)
    ax.set_xticks(range(len(corr.columns)))
    ax.set_xticklabels(corr.columns, rotation=45, ha="right")
    ax.set_yticks(range(len(corr.index)))
    ax.set_yticklabels(corr.index)
    ax.grid(False)
    ax.set_title("Correlation Matrix")
    fig.colorbar(image, ax=ax, shrink=0.8, label="Corr")
    return _save(fig, output_dir, "correlation_matrix.png")


def plot_all(
    model: FittedModel, corr: pd.DataFrame | None, output_dir: str = "output"
) -> Dict[str, str]:
    """Render every figure available for the analysis; returns name -> path."""
    paths = {
        "scatter": plot_scatter_with_fit(model, output_dir),
        "qq": plot_qq(model, output_dir),
    }
    if corr is not None:
        paths["correlation"] = plot_correlation_matrix(corr, output_dir)
    return paths
