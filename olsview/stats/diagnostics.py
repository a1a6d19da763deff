"""Residual diagnostics: moments and normal QQ-plot series."""

from __future__ import annotations

from typing import Tuple

import numpy as np
import pandas as pd
from scipy.stats import norm

from ..errors import InsufficientDataError
from ..schema import QQColumns


def residual_moments(residuals: np.ndarray) -> Tuple[float, float]:
    """Return the mean and sample standard deviation (ddof=1) of residuals."""
    resid = np.asarray(residuals, dtype=float)
    if resid.size < 2:
        raise InsufficientDataError("At least 2 residuals are required.")
    return float(np.mean(resid)), float(np.std(resid, ddof=1))


def plotting_positions(n: int) -> np.ndarray:
    """Return R ``ppoints(n)``: ``(i - a) / (n + 1 - 2a)``.

    ``a`` is 3/8 for n <= 10 and 1/2 otherwise.
    """
    a = 3.0 / 8.0 if n <= 10 else 0.5
    i = np.arange(1, n + 1, dtype=float)
    return (i - a) / (n + 1 - 2 * a)


def qq_points(residuals: np.ndarray, columns: QQColumns = QQColumns()) -> pd.DataFrame:
    """Pair sorted residuals with standard normal quantiles for a QQ plot."""
    resid = np.sort(np.asarray(residuals, dtype=float))
    if resid.size == 0:
        raise InsufficientDataError("No residuals to plot.")
    theoretical = norm.ppf(plotting_positions(resid.size))
    return pd.DataFrame({columns.theoretical: theoretical, columns.sample: resid})


def qq_line(residuals: np.ndarray) -> Tuple[float, float]:
    """Return ``(intercept, slope)`` of the line through the residual quartiles.

    Mirrors R ``qqline``: the line joins the first and third sample quartiles
    (type 7) to the matching standard normal quartiles.
    """
    resid = np.asarray(residuals, dtype=float)
    if resid.size < 2:
        raise InsufficientDataError("At least 2 residuals are required.")
    y1, y3 = np.quantile(resid, [0.25, 0.75])
    x1, x3 = norm.ppf([0.25, 0.75])
    slope = float((y3 - y1) / (x3 - x1))
    return float(y1 - slope * x1), slope
