"""Simple linear regression by ordinary least squares.

This module supports:
- fitting ``response ~ predictor`` on the complete rows of a dataset,
- coefficient inference (standard errors, t-tests, confidence intervals) and
  the overall F-test,
- point prediction and the fitted-line series used by the scatter plot.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np
import pandas as pd
from scipy.stats import f as f_dist
from scipy.stats import t as student_t

from ..data_processing import Dataset, complete_pairs
from ..errors import (
    InsufficientDataError,
    InvalidFormatError,
    SingularFitError,
    TypeMismatchError,
)
from ..schema import RegressionLineColumns, ResidualColumns

logger = logging.getLogger(__name__)

MIN_COMPLETE_ROWS = 3
CONFIDENCE_LEVEL = 0.95


@dataclass(frozen=True)
class CoefficientEstimate:
    """Inference for one regression coefficient.

    Attributes:
        name: ``"(Intercept)"`` or the predictor name.
        estimate: Point estimate.
        std_error: Standard error of the estimate.
        t_value: ``estimate / std_error``.
        p_value: Two-sided p-value from Student's t with the residual df.
        ci_low: Lower bound of the confidence interval.
        ci_high: Upper bound of the confidence interval.
    """

    name: str
    estimate: float
    std_error: float
    t_value: float
    p_value: float
    ci_low: float
    ci_high: float


@dataclass(frozen=True, eq=False)
class FittedModel:
    """Outcome of one OLS fit of ``response ~ predictor``.

    The arrays hold only the complete rows used in the fit; ``row_labels``
    maps them back to the source dataset.
    """

    predictor: str
    response: str
    intercept: CoefficientEstimate
    slope: CoefficientEstimate
    x: np.ndarray
    y: np.ndarray
    fitted: np.ndarray
    residuals: np.ndarray
    row_labels: pd.Index
    r_squared: float
    adj_r_squared: float
    sigma: float
    df_resid: int
    f_statistic: float
    f_p_value: float
    confidence_level: float = CONFIDENCE_LEVEL

    @property
    def n(self) -> int:
        return int(self.x.size)

    @property
    def formula(self) -> str:
        return f"{self.response} ~ {self.predictor}"

    @property
    def coefficients(self) -> Tuple[CoefficientEstimate, CoefficientEstimate]:
        return self.intercept, self.slope

    @property
    def x_range(self) -> Tuple[float, float]:
        return float(self.x.min()), float(self.x.max())


def _coefficient(
    name: str, estimate: float, se: float, dof: int, t_crit: float
) -> CoefficientEstimate:
    with np.errstate(divide="ignore", invalid="ignore"):
        t_value = float(np.divide(estimate, se))
    if math.isnan(t_value):
        p_value = math.nan
    else:
        p_value = float(2.0 * student_t.sf(abs(t_value), dof))
    half_width = t_crit * se
    return CoefficientEstimate(
        name=name,
        estimate=float(estimate),
        std_error=float(se),
        t_value=t_value,
        p_value=p_value,
        ci_low=float(estimate - half_width),
        ci_high=float(estimate + half_width),
    )


def fit_arrays(
    x: np.ndarray,
    y: np.ndarray,
    predictor: str = "x",
    response: str = "y",
    row_labels: pd.Index | None = None,
    level: float = CONFIDENCE_LEVEL,
) -> FittedModel:
    """Fit an ordinary least-squares straight line to paired observations.

    Args:
        x (numpy.ndarray): Predictor values.
        y (numpy.ndarray): Response values, same length as ``x``.
        predictor (str): Predictor name used in the formula and coefficient.
        response (str): Response name used in the formula.
        row_labels (pandas.Index, optional): Source labels of the rows.
            Defaults to ``0..n-1``.
        level (float): Confidence level of the coefficient intervals.

    Returns:
        FittedModel: The fit and all derived statistics.

    Raises:
        InsufficientDataError: If fewer than 3 finite pairs remain.
        InvalidFormatError: If ``x`` or ``y`` holds an infinite value.
        SingularFitError: If the ``x`` values are all equal.

    Note:
        Pairs with a NaN are dropped before fitting. A constant response
        fits slope 0 with R-squared 0; its F-statistic and slope t-test are
        0/0 and come out NaN.

    References:
        Closed-form OLS for one predictor: b1 = Sxy / Sxx, b0 = ybar - b1 xbar.
    """
    x_arr = np.asarray(x, dtype=float)
    y_arr = np.asarray(y, dtype=float)
    if x_arr.shape != y_arr.shape:
        raise InvalidFormatError("x and y must have the same length.")
    labels = pd.RangeIndex(x_arr.size) if row_labels is None else pd.Index(row_labels)
    mask = ~(np.isnan(x_arr) | np.isnan(y_arr))
    if np.isinf(x_arr[mask]).any() or np.isinf(y_arr[mask]).any():
        raise InvalidFormatError("x and y must not contain infinite values.")
    x_arr = x_arr[mask]
    y_arr = y_arr[mask]
    labels = labels[mask]
    n = int(x_arr.size)
    if n < MIN_COMPLETE_ROWS:
        raise InsufficientDataError(
            f"Regression needs at least {MIN_COMPLETE_ROWS} complete rows; found {n}."
        )

    xbar = float(np.mean(x_arr))
    ybar = float(np.mean(y_arr))
    dx = x_arr - xbar
    dy = y_arr - ybar
    sxx = float(np.sum(dx**2))
    if sxx <= 0 or np.ptp(x_arr) == 0:
        raise SingularFitError(f"Predictor '{predictor}' is constant; slope is undefined.")
    if np.ptp(y_arr) == 0:
        # Constant response: horizontal line through the data, nothing explained.
        ybar = float(y_arr[0])
        dy = np.zeros_like(y_arr)
    sst = float(np.sum(dy**2))
    sxy = float(np.sum(dx * dy))

    slope = sxy / sxx
    intercept = ybar - slope * xbar
    fitted = intercept + slope * x_arr
    resid = y_arr - fitted

    dof = n - 2
    ssr = float(np.sum(resid**2))
    mse = ssr / dof
    sigma = math.sqrt(mse)
    r2 = min(max(1.0 - ssr / sst, 0.0), 1.0) if sst > 0 else 0.0
    adj_r2 = 1.0 - (1.0 - r2) * (n - 1) / dof

    with np.errstate(divide="ignore", invalid="ignore"):
        f_stat = float(np.divide(sst - ssr, mse))
    f_p = float(f_dist.sf(f_stat, 1, dof)) if not math.isnan(f_stat) else math.nan

    se_slope = math.sqrt(mse / sxx)
    se_intercept = math.sqrt(mse * (1.0 / n + xbar**2 / sxx))
    t_crit = float(student_t.ppf(0.5 + level / 2.0, dof))

    model = FittedModel(
        predictor=predictor,
        response=response,
        intercept=_coefficient("(Intercept)", intercept, se_intercept, dof, t_crit),
        slope=_coefficient(predictor, slope, se_slope, dof, t_crit),
        x=x_arr,
        y=y_arr,
        fitted=fitted,
        residuals=resid,
        row_labels=labels,
        r_squared=float(r2),
        adj_r_squared=float(adj_r2),
        sigma=float(sigma),
        df_resid=dof,
        f_statistic=f_stat,
        f_p_value=f_p,
        confidence_level=level,
    )
    logger.info(
        "Fitted %s on %d rows: intercept=%.4g slope=%.4g R2=%.4f",
        model.formula,
        n,
        intercept,
        slope,
        r2,
    )
    return model


def fit(dataset: Dataset, predictor: str, response: str) -> FittedModel:
    """Fit ``response ~ predictor`` on the complete rows of ``dataset``.

    Raises:
        ColumnNotFoundError: If either column is absent.
        TypeMismatchError: If either column is categorical.
        InsufficientDataError: If fewer than 3 complete rows remain.
        InvalidFormatError: If either column holds an infinite value.
        SingularFitError: If the predictor is constant.
    """
    x_arr, y_arr, labels = complete_pairs(dataset, predictor, response)
    dropped = dataset.n_rows - int(x_arr.size)
    if dropped:
        logger.warning(
            "Dropped %d of %d rows with missing '%s' or '%s'",
            dropped,
            dataset.n_rows,
            predictor,
            response,
        )
    return fit_arrays(x_arr, y_arr, predictor, response, row_labels=labels)


def predict(model: FittedModel, x_value) -> float:
    """Return ``intercept + slope * x_value``.

    No extrapolation guard is applied; any real ``x_value`` is accepted.

    Raises:
        TypeMismatchError: If ``x_value`` cannot be read as a real number.
    """
    try:
        x_num = float(x_value)
    except (TypeError, ValueError) as exc:
        raise TypeMismatchError(
            f"Prediction input {x_value!r} is not a number."
        ) from exc
    return model.intercept.estimate + model.slope.estimate * x_num


def regression_line(
    model: FittedModel,
    points: int = 100,
    level: float = CONFIDENCE_LEVEL,
    columns: RegressionLineColumns = RegressionLineColumns(),
) -> pd.DataFrame:
    """Return the fitted line and its mean-response confidence band.

    The band half-width at ``x0`` is ``t * sigma * sqrt(1/n + (x0 - xbar)^2 / Sxx)``
    over ``points`` evenly spaced values spanning the observed predictor range.
    """
    lo, hi = model.x_range
    grid = np.linspace(lo, hi, int(points))
    xbar = float(np.mean(model.x))
    sxx = float(np.sum((model.x - xbar) ** 2))
    fit_values = model.intercept.estimate + model.slope.estimate * grid
    t_crit = float(student_t.ppf(0.5 + level / 2.0, model.df_resid))
    half = t_crit * model.sigma * np.sqrt(1.0 / model.n + (grid - xbar) ** 2 / sxx)
    return pd.DataFrame(
        {
            columns.x: grid,
            columns.fit: fit_values,
            columns.lower: fit_values - half,
            columns.upper: fit_values + half,
        }
    )


def residual_table(
    model: FittedModel, columns: ResidualColumns = ResidualColumns()
) -> pd.DataFrame:
    """Return actual, fitted and residual values indexed by source row label."""
    return pd.DataFrame(
        {
            columns.actual: model.y,
            columns.fitted: model.fitted,
            columns.residual: model.residuals,
        },
        index=model.row_labels,
    )


def plot_series(model: FittedModel) -> pd.DataFrame:
    """Return the named x, y, fitted and residual series handed to plotting."""
    return pd.DataFrame(
        {
            "x": model.x,
            "y": model.y,
            "fitted": model.fitted,
            "residuals": model.residuals,
        },
        index=model.row_labels,
    )
