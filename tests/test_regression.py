import logging

import numpy as np
import pandas as pd
import pytest

from olsview.data_processing import load
from olsview.errors import (
    ColumnNotFoundError,
    InsufficientDataError,
    InvalidFormatError,
    SingularFitError,
    TypeMismatchError,
)
from olsview.stats.regression import (
    fit,
    fit_arrays,
    plot_series,
    predict,
    regression_line,
    residual_table,
)


def _small_dataset():
    return load(pd.DataFrame({"x": [1.0, 2.0, 3.0, 4.0], "y": [2.0, 4.0, 5.0, 8.0]}))


def test_small_example_golden_values():
    model = fit(_small_dataset(), "x", "y")
    assert model.slope.estimate == pytest.approx(1.9)
    assert model.intercept.estimate == pytest.approx(0.0, abs=1e-12)
    assert model.r_squared == pytest.approx(0.9626666667)
    assert model.adj_r_squared == pytest.approx(0.944)
    assert model.sigma == pytest.approx(0.5916079783)
    assert model.df_resid == 2
    assert model.slope.std_error == pytest.approx(0.2645751311)
    assert model.intercept.std_error == pytest.approx(0.7245688373)
    assert model.slope.t_value == pytest.approx(7.1813249872)
    assert model.f_statistic == pytest.approx(51.5714285714)
    assert model.f_p_value == pytest.approx(1.8844218961e-02)
    assert model.slope.ci_low == pytest.approx(0.761625, abs=1e-6)
    assert model.slope.ci_high == pytest.approx(3.038375, abs=1e-6)
    assert np.allclose(model.residuals, [0.1, 0.2, -0.7, 0.4])


def test_mtcars_mpg_on_wt_matches_reference():
    model = fit(load("mtcars"), "wt", "mpg")
    assert model.formula == "mpg ~ wt"
    assert model.n == 32
    assert model.df_resid == 30
    assert model.intercept.estimate == pytest.approx(37.2851, abs=1e-4)
    assert model.slope.estimate == pytest.approx(-5.3445, abs=1e-4)
    assert model.intercept.std_error == pytest.approx(1.8776, abs=1e-4)
    assert model.slope.std_error == pytest.approx(0.5591, abs=1e-4)
    assert model.r_squared == pytest.approx(0.7528, abs=1e-4)
    assert model.adj_r_squared == pytest.approx(0.7446, abs=1e-4)
    assert model.sigma == pytest.approx(3.046, abs=1e-3)
    assert model.f_statistic == pytest.approx(91.375, abs=1e-3)
    assert model.f_p_value == pytest.approx(1.294e-10, rel=1e-3)
    assert model.intercept.ci_low == pytest.approx(33.4505, abs=1e-4)
    assert model.intercept.ci_high == pytest.approx(41.1198, abs=1e-4)
    assert model.slope.ci_low == pytest.approx(-6.4863, abs=1e-4)
    assert model.slope.ci_high == pytest.approx(-4.2026, abs=1e-4)


def test_faithful_waiting_on_eruptions():
    model = fit(load("faithful"), "eruptions", "waiting")
    assert model.intercept.estimate == pytest.approx(33.4744, abs=1e-4)
    assert model.slope.estimate == pytest.approx(10.7296, abs=1e-4)
    assert model.r_squared == pytest.approx(0.8115, abs=1e-4)


def test_predict_reconstructs_fitted_values():
    model = fit(load("mtcars"), "hp", "qsec")
    for x_i, fitted_i in zip(model.x, model.fitted):
        assert predict(model, x_i) == pytest.approx(fitted_i)


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_normal_equations_and_r2_bounds(seed):
    rng = np.random.default_rng(seed)
    n = int(rng.integers(3, 60))
    x = rng.normal(10.0, 3.0, size=n)
    y = 2.0 - 0.7 * x + rng.normal(0.0, 4.0, size=n)
    model = fit_arrays(x, y)
    assert np.sum(model.residuals) == pytest.approx(0.0, abs=1e-8)
    assert np.sum(model.residuals * model.x) == pytest.approx(0.0, abs=1e-6)
    assert 0.0 <= model.r_squared <= 1.0
    assert model.adj_r_squared <= model.r_squared


def test_f_statistic_equals_squared_slope_t():
    model = fit(load("faithful"), "eruptions", "waiting")
    assert model.f_statistic == pytest.approx(model.slope.t_value**2)
    assert model.f_p_value == pytest.approx(model.slope.p_value, rel=1e-6)


def test_confidence_interval_is_centered_on_estimate():
    model = fit(load("mtcars"), "disp", "mpg")
    for coef in model.coefficients:
        assert coef.ci_low < coef.estimate < coef.ci_high
        assert coef.estimate - coef.ci_low == pytest.approx(coef.ci_high - coef.estimate)


def test_constant_predictor_raises():
    ds = load(pd.DataFrame({"x": [0.1, 0.1, 0.1, 0.1], "y": [1.0, 2.0, 3.0, 5.0]}))
    with pytest.raises(SingularFitError, match="constant"):
        fit(ds, "x", "y")


def test_constant_response_fits_flat_line():
    ds = load(pd.DataFrame({"x": [1.0, 2.0, 3.0], "y": [4.0, 4.0, 4.0]}))
    model = fit(ds, "x", "y")
    assert model.slope.estimate == 0.0
    assert model.intercept.estimate == 4.0
    assert np.all(model.residuals == 0.0)
    assert model.sigma == 0.0
    assert model.r_squared == 0.0
    assert np.isnan(model.f_statistic)
    assert np.isnan(model.f_p_value)
    assert np.isnan(model.slope.p_value)
    assert predict(model, 10.0) == 4.0


def test_infinite_value_is_rejected_not_dropped():
    ds = load(b"x,y\n1,2\n2,4\nInf,5\n4,8\n5,9\n")
    assert ds.kinds["x"] == "numeric"
    with pytest.raises(InvalidFormatError, match="Column 'x' contains infinite values"):
        fit(ds, "x", "y")


def test_fit_arrays_rejects_infinite_values():
    with pytest.raises(InvalidFormatError, match="infinite"):
        fit_arrays([1.0, 2.0, 3.0, 4.0], [1.0, -np.inf, 2.0, 3.0])


def test_too_few_complete_rows_raise():
    ds = load(b"x,y\n1,2\n2,\n3,5\n,7\n")
    with pytest.raises(InsufficientDataError, match="at least 3 complete rows"):
        fit(ds, "x", "y")


def test_categorical_column_raises():
    ds = load(b"x,y,g\n1,2,a\n2,3,b\n3,5,c\n")
    with pytest.raises(TypeMismatchError):
        fit(ds, "g", "y")


def test_missing_column_raises():
    with pytest.raises(ColumnNotFoundError):
        fit(load("mtcars"), "weight", "mpg")


def test_dropped_rows_are_logged_and_excluded(caplog):
    caplog.set_level(logging.WARNING)
    ds = load(b"x,y\n1,2\n2,\n3,6\n4,8.5\n5,9\n")
    model = fit(ds, "x", "y")
    assert model.n == 4
    assert list(model.row_labels) == [0, 2, 3, 4]
    assert any("Dropped 1 of 5 rows" in rec.message for rec in caplog.records)


def test_perfect_fit_has_zero_error():
    model = fit_arrays([1.0, 2.0, 3.0, 4.0], [3.0, 5.0, 7.0, 9.0])
    assert model.r_squared == 1.0
    assert model.sigma == 0.0
    assert model.slope.p_value == 0.0
    assert model.f_p_value == 0.0


def test_predict_is_permissive_about_range_and_strings():
    model = fit(_small_dataset(), "x", "y")
    assert predict(model, 100.0) == pytest.approx(190.0)
    assert predict(model, "2") == pytest.approx(3.8)


def test_predict_rejects_non_numeric_input():
    model = fit(_small_dataset(), "x", "y")
    with pytest.raises(TypeMismatchError, match="not a number"):
        predict(model, "abc")


def test_regression_line_band_is_narrowest_at_mean():
    model = fit(load("mtcars"), "wt", "mpg")
    band = regression_line(model, points=101)
    assert band["x"].iloc[0] == pytest.approx(model.x.min())
    assert band["x"].iloc[-1] == pytest.approx(model.x.max())
    assert (band["lower"] <= band["fit"]).all()
    assert (band["fit"] <= band["upper"]).all()
    width = band["upper"] - band["lower"]
    narrowest = band["x"].iloc[int(width.idxmin())]
    assert abs(narrowest - model.x.mean()) < (model.x.max() - model.x.min()) / 50


def test_residual_table_uses_row_labels():
    model = fit(load("mtcars"), "wt", "mpg")
    table = residual_table(model)
    assert list(table.columns) == ["Actual_Y", "Fitted_Y", "Residuals"]
    assert table.loc["Mazda RX4", "Actual_Y"] == 21.0
    row = table.loc["Mazda RX4"]
    assert row["Residuals"] == pytest.approx(row["Actual_Y"] - row["Fitted_Y"])


def test_plot_series_columns():
    series = plot_series(fit(_small_dataset(), "x", "y"))
    assert list(series.columns) == ["x", "y", "fitted", "residuals"]
    assert len(series) == 4
