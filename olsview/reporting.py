"""Assemble fitted-model results into a summary record and its text forms.

The text written by :func:`write_summary` is the downloadable
``regression_summary.txt`` artifact; its layout and number formatting are
fixed so that exported files compare equal across runs.
"""

from __future__ import annotations

import logging
import math
import os
from typing import Dict, List

from .data_processing import Dataset
from .narrative import NarrativeReport
from .stats.regression import FittedModel

logger = logging.getLogger(__name__)

SUMMARY_FILENAME = "regression_summary.txt"
R_SIGNIFICANT_DIGITS = 15

_NARRATIVE_FIELDS = (
    "bias",
    "variability",
    "predictive_power",
    "overall_significance",
    "intercept_significance",
    "slope_significance",
    "residual_mean",
    "residual_sd",
)


def format_rounded(value: float, digits: int = 3) -> str:
    """Format ``value`` rounded to ``digits`` decimals without trailing zeros.

    Args:
        value (float): Number to format.
        digits (int): Decimal places kept by rounding.

    Returns:
        str: For example ``1.9`` for 1.9, ``-5.344`` for -5.34447 and ``0``
        for -0.0001 at 3 digits. Scientific notation is used when it is
        narrower, so 1e-4 at 5 digits gives ``1e-04`` and 100000 gives
        ``1e+05``.

    Note:
        Matches how R prints ``round(x, digits)`` when pasted into text:
        up to 15 significant digits, fixed notation unless scientific is
        strictly shorter.
    """
    v = float(value)
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "Inf" if v > 0 else "-Inf"
    rounded = round(v, digits)
    if rounded == 0:
        return "0"
    mantissa, exponent = f"{rounded:.{R_SIGNIFICANT_DIGITS - 1}e}".split("e")
    if "." in mantissa:
        mantissa = mantissa.rstrip("0").rstrip(".")
    scientific = f"{mantissa}e{exponent}"
    n_digits = len(mantissa.lstrip("-").replace(".", ""))
    fixed = f"{rounded:.{max(0, n_digits - 1 - int(exponent))}f}"
    return fixed if len(fixed) <= len(scientific) else scientific


def format_scientific(value: float, digits: int = 7) -> str:
    """Format ``value`` in scientific notation with up to ``digits`` significant digits.

    Trailing zeros of the mantissa are dropped and the exponent has at least
    two digits, e.g. ``1.293959e-10``, ``2e-04`` and ``0e+00``.
    """
    v = float(value)
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "Inf" if v > 0 else "-Inf"
    if v == 0:
        return "0e+00"
    mantissa, exponent = f"{v:.{digits - 1}e}".split("e")
    if "." in mantissa:
        mantissa = mantissa.rstrip("0").rstrip(".")
    return f"{mantissa}e{exponent}"


def to_summary_record(model: FittedModel, narrative: NarrativeReport) -> Dict[str, object]:
    """Flatten a fitted model and its narrative into a plain dictionary.

    Args:
        model (FittedModel): Result of :func:`olsview.stats.regression.fit`.
        narrative (NarrativeReport): Result of :func:`olsview.narrative.classify`
            for the same model.

    Returns:
        dict[str, object]: Fields in display order. ``fitted`` and
        ``residuals`` are plain lists aligned with ``row_labels``, the labels
        of the rows used in the fit.
    """
    record: Dict[str, object] = {
        "formula": model.formula,
        "predictor": model.predictor,
        "response": model.response,
        "n": model.n,
        "confidence_level": model.confidence_level,
    }
    for prefix, coef in (("intercept", model.intercept), ("slope", model.slope)):
        record[prefix] = coef.estimate
        record[f"{prefix}_se"] = coef.std_error
        record[f"{prefix}_t"] = coef.t_value
        record[f"{prefix}_p"] = coef.p_value
        record[f"{prefix}_ci_low"] = coef.ci_low
        record[f"{prefix}_ci_high"] = coef.ci_high
    record.update(
        {
            "r_squared": model.r_squared,
            "adj_r_squared": model.adj_r_squared,
            "sigma": model.sigma,
            "df_resid": model.df_resid,
            "f_statistic": model.f_statistic,
            "f_df": (1, model.df_resid),
            "f_p_value": model.f_p_value,
            "row_labels": list(model.row_labels),
            "fitted": model.fitted.tolist(),
            "residuals": model.residuals.tolist(),
        }
    )
    for field in _NARRATIVE_FIELDS:
        record[field] = getattr(narrative, field)
    return record


def to_text(record: Dict[str, object]) -> str:
    """Render a summary record as the ``regression_summary.txt`` template."""
    level = int(round(100 * float(record.get("confidence_level", 0.95))))
    lines = [
        "Regression Summary",
        "=================",
        f"Formula: {record['formula']}",
        "",
        "Coefficients:",
    ]
    for prefix, label in (("intercept", "Intercept"), ("slope", "Slope")):
        lines.append(
            f"{label}: {format_rounded(record[prefix])} "
            f"({level}% CI: {format_rounded(record[f'{prefix}_ci_low'])} - "
            f"{format_rounded(record[f'{prefix}_ci_high'])})"
        )
    lines += [
        "",
        "Model Fit Statistics:",
        f"R-squared: {format_rounded(record['r_squared'])}",
        f"Adjusted R-squared: {format_rounded(record['adj_r_squared'])}",
        f"Residual Standard Error: {format_rounded(record['sigma'])}",
        f"Degrees of Freedom: {int(record['df_resid'])}",
        "",
        f"F-statistic: {format_rounded(record['f_statistic'])}",
        f"P-value for F-test: {format_scientific(record['f_p_value'])}",
    ]
    return "\n".join(lines) + "\n"


def write_summary(record: Dict[str, object], output_dir: str = "output") -> str:
    """Write the text summary to ``<output_dir>/regression_summary.txt``.

    Returns:
        str: Path of the written file.

    Note:
        One newline is appended after the template, as R ``writeLines`` does.
    """
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, SUMMARY_FILENAME)
    with open(path, "w", encoding="utf-8", newline="\n") as fh:
        fh.write(to_text(record) + "\n")
    logger.info("Saved regression summary to %s", path)
    return path


def model_details_text(record: Dict[str, object], narrative: NarrativeReport) -> str:
    """Render the model-summary panel: key statistics followed by the analysis."""
    lines = [
        "Model Summary",
        "Regression Line Equation: "
        f"y = {format_rounded(record['intercept'])} + {format_rounded(record['slope'])}x",
        f"R-squared: {format_rounded(record['r_squared'])}",
        f"Adjusted R-squared: {format_rounded(record['adj_r_squared'])}",
        f"Residual Standard Error: {format_rounded(record['sigma'])}",
        f"F-statistic: {format_rounded(record['f_statistic'])}",
        f"P-value for F-test: {format_scientific(record['f_p_value'])}",
    ]
    for prefix, label in (("intercept", "Intercept"), ("slope", "Slope")):
        lines.append(
            f"{label}: Estimate = {format_rounded(record[prefix])}, "
            f"t-statistic = {format_rounded(record[f'{prefix}_t'])}, "
            f"p-value = {format_scientific(record[f'{prefix}_p'])}"
        )
    r2_text, f_text, intercept_text, slope_text = narrative.model_sentences()
    lines += [
        "",
        "Analysis",
        r2_text,
        f_text,
        f"Intercept Utility: {intercept_text}",
        f"Slope Utility: {slope_text}",
    ]
    return "\n".join(lines)


def residual_analysis_text(narrative: NarrativeReport) -> str:
    """Render the residual-analysis panel."""
    lines: List[str] = [
        "Residual Analysis",
        f"Mean of Residuals: {format_rounded(narrative.residual_mean, 5)}",
        f"Standard Deviation of Residuals: {format_rounded(narrative.residual_sd, 5)}",
    ]
    return "\n".join(lines + narrative.residual_sentences())


def dataset_overview_text(dataset: Dataset) -> str:
    """Render the introduction of the dataset-summary panel."""
    return (
        f"This dataset contains {dataset.n_rows} rows and {dataset.n_cols} columns. "
        "The table below provides a summary of each column, including measures "
        "such as the mean, median, and range for numeric variables, as well as "
        "the distribution of values for categorical variables. This overview "
        "helps in understanding the structure and content of the data."
    )


def prediction_text(value: float) -> str:
    return f"Predicted Value: {format_rounded(value, 2)}"
