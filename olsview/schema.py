"""Define standardized labels for tables handed to the display layer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ResidualColumns:
    """Column labels of the residuals table.

    Attributes:
        actual: Observed response value for a complete row.
        fitted: Model-fitted response value for the same row.
        residual: ``actual - fitted``.
    """

    actual: str = "Actual_Y"
    fitted: str = "Fitted_Y"
    residual: str = "Residuals"


@dataclass(frozen=True)
class SummaryLabels:
    """Row labels of the numeric dataset summary, as R's ``summary()`` prints them."""

    min: str = "Min."
    q1: str = "1st Qu."
    median: str = "Median"
    mean: str = "Mean"
    q3: str = "3rd Qu."
    max: str = "Max."

    def items(self):
        """Return ``(stat_key, label)`` pairs in display order."""
        return [
            ("min", self.min),
            ("q1", self.q1),
            ("median", self.median),
            ("mean", self.mean),
            ("q3", self.q3),
            ("max", self.max),
        ]


@dataclass(frozen=True)
class RegressionLineColumns:
    """Column labels of the regression line / confidence band series."""

    x: str = "x"
    fit: str = "fit"
    lower: str = "lower"
    upper: str = "upper"


@dataclass(frozen=True)
class QQColumns:
    """Column labels of the residual QQ-plot series."""

    theoretical: str = "theoretical"
    sample: str = "sample"
