"""
Statistical routines for simple linear regression analysis.

This subpackage provides the numerical core: the OLS fit with its inference
and the residual diagnostics. Functions operate on datasets, arrays and
primitive types; nothing here renders text or figures.

Modules:
    regression:
        Closed-form OLS fit of one response on one predictor, coefficient
        t-tests and confidence intervals, the overall F-test, prediction and
        the fitted-line confidence band.

    diagnostics:
        Residual mean and standard deviation, normal QQ-plot points and the
        quartile reference line.

Design Principle:
    This subpackage has no dependencies on the narrative, reporting or
    plotting modules.
"""

from .diagnostics import plotting_positions, qq_line, qq_points, residual_moments
from .regression import (
    CONFIDENCE_LEVEL,
    MIN_COMPLETE_ROWS,
    CoefficientEstimate,
    FittedModel,
    fit,
    fit_arrays,
    plot_series,
    predict,
    regression_line,
    residual_table,
)

__all__ = [
    "CONFIDENCE_LEVEL",
    "MIN_COMPLETE_ROWS",
    "CoefficientEstimate",
    "FittedModel",
    "fit",
    "fit_arrays",
    "plot_series",
    "predict",
    "regression_line",
    "residual_table",
    "plotting_positions",
    "qq_line",
    "qq_points",
    "residual_moments",
]
