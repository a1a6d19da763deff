"""Rule-based interpretation of a fitted model.

Every judgment is a fixed-threshold comparison on a field of the fitted
model, so the same model always yields the same labels. Comparisons use
``<`` for the "small is good" metrics and ``>=`` for R-squared; values that
land exactly on a threshold fall on the side those operators give.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .stats.diagnostics import residual_moments
from .stats.regression import FittedModel

NO_BIAS = "no significant bias"
POTENTIAL_BIAS = "potential bias"
TIGHT = "tightly clustered"
LARGE_VARIABILITY = "larger variability"
STRONG = "strong"
ACCEPTABLE = "acceptable"
WEAK = "weak"
SIGNIFICANT_OVERALL = "statistically significant overall"
SIGNIFICANT = "statistically significant"
NOT_SIGNIFICANT = "not statistically significant"


@dataclass(frozen=True)
class NarrativeThresholds:
    """Policy constants for the narrative labels.

    Attributes:
        bias_tolerance: ``|mean(residuals)|`` below this is unbiased.
        residual_sd_cutoff: Residual sd below this is tightly clustered.
        strong_r2: R-squared at or above this is strong.
        moderate_r2: R-squared at or above this (and below ``strong_r2``) is
            acceptable.
        alpha: Significance level for the F-test and coefficient t-tests.
    """

    bias_tolerance: float = 1e-5
    residual_sd_cutoff: float = 1.0
    strong_r2: float = 0.7
    moderate_r2: float = 0.4
    alpha: float = 0.05


@dataclass(frozen=True)
class NarrativeReport:
    """Categorical judgments about one fitted model."""

    bias: str
    variability: str
    predictive_power: str
    overall_significance: str
    intercept_significance: str
    slope_significance: str
    residual_mean: float
    residual_sd: float

    def residual_sentences(self) -> List[str]:
        if self.bias == NO_BIAS:
            bias = (
                "The residuals have a mean close to zero, indicating no "
                "significant bias in predictions."
            )
        else:
            bias = (
                "The residuals have a non-zero mean, suggesting potential bias "
                "in predictions."
            )
        if self.variability == TIGHT:
            spread = (
                "The residuals have a low standard deviation, indicating tightly "
                "clustered errors."
            )
        else:
            spread = (
                "The residuals have a high standard deviation, suggesting larger "
                "variability in errors."
            )
        return [bias, spread]

    def model_sentences(self) -> List[str]:
        proportion = {STRONG: "high", ACCEPTABLE: "moderate", WEAK: "low"}[
            self.predictive_power
        ]
        r2 = (
            f"The model explains a {proportion} proportion of the variability in "
            "the response variable, indicating "
            f"{self.predictive_power} predictive power."
        )
        if self.overall_significance == SIGNIFICANT_OVERALL:
            f_test = (
                "The F-test indicates that the model is statistically significant "
                "overall, meaning that the predictor variable is useful for "
                "explaining the response variable."
            )
        else:
            f_test = (
                "The F-test indicates that the model is not statistically "
                "significant overall, meaning that the predictor variable may not "
                "explain the response variable well."
            )
        if self.intercept_significance == SIGNIFICANT:
            intercept = (
                "The intercept is statistically significant, indicating that it "
                "contributes meaningfully to the model."
            )
        else:
            intercept = (
                "The intercept is not statistically significant, suggesting it may "
                "not meaningfully contribute to the model."
            )
        if self.slope_significance == SIGNIFICANT:
            slope = (
                "The slope is statistically significant, indicating a meaningful "
                "relationship between the predictor and response variable."
            )
        else:
            slope = (
                "The slope is not statistically significant, suggesting there may "
                "not be a strong relationship between the predictor and response "
                "variable."
            )
        return [r2, f_test, intercept, slope]

    def sentences(self) -> List[str]:
        """Return the full interpretation, residual analysis first."""
        return self.residual_sentences() + self.model_sentences()


def _significance(p_value: float, alpha: float, significant: str) -> str:
    # NaN compares False, so an undefined p-value is never significant.
    return significant if p_value < alpha else NOT_SIGNIFICANT


def predictive_power(
    r_squared: float, thresholds: NarrativeThresholds = NarrativeThresholds()
) -> str:
    if r_squared >= thresholds.strong_r2:
        return STRONG
    if r_squared >= thresholds.moderate_r2:
        return ACCEPTABLE
    return WEAK


def classify(
    model: FittedModel, thresholds: NarrativeThresholds = NarrativeThresholds()
) -> NarrativeReport:
    """Map the statistics of ``model`` to narrative labels.

    Args:
        model: A fitted model.
        thresholds: Policy constants; the defaults reproduce the reference
            wording exactly.

    Returns:
        NarrativeReport: Labels plus the residual mean and sd they were
        derived from.
    """
    mean, sd = residual_moments(model.residuals)
    return NarrativeReport(
        bias=NO_BIAS if abs(mean) < thresholds.bias_tolerance else POTENTIAL_BIAS,
        variability=TIGHT if sd < thresholds.residual_sd_cutoff else LARGE_VARIABILITY,
        predictive_power=predictive_power(model.r_squared, thresholds),
        overall_significance=_significance(
            model.f_p_value, thresholds.alpha, SIGNIFICANT_OVERALL
        ),
        intercept_significance=_significance(
            model.intercept.p_value, thresholds.alpha, SIGNIFICANT
        ),
        slope_significance=_significance(
            model.slope.p_value, thresholds.alpha, SIGNIFICANT
        ),
        residual_mean=mean,
        residual_sd=sd,
    )
