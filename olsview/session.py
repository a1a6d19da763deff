"""Own the state of one interactive analysis and drive the pipeline.

An :class:`AnalysisSession` holds the current dataset, the selected
variables and the current fit. Each user action replaces the state it
affects and clears everything derived from it:

- ``load`` replaces the dataset and clears the selection and the model,
- ``select`` replaces the selection and clears the model,
- ``run_regression`` replaces the model.

Everything else is computed on demand from the current state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import pandas as pd

from . import data_processing, reporting, summary
from .data_processing import Dataset
from .errors import InsufficientDataError
from .narrative import NarrativeReport, NarrativeThresholds, classify
from .stats.regression import FittedModel, fit, predict, residual_table

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VariableSelection:
    predictor: str
    response: str


class AnalysisSession:
    """Explicit replacement for the reactive "current dataset / current model" cells."""

    def __init__(self, thresholds: NarrativeThresholds = NarrativeThresholds()):
        self.thresholds = thresholds
        self.dataset: Optional[Dataset] = None
        self.selection: Optional[VariableSelection] = None
        self.model: Optional[FittedModel] = None

    def _require_dataset(self) -> Dataset:
        if self.dataset is None:
            raise InsufficientDataError("No dataset loaded.")
        return self.dataset

    def _require_model(self) -> FittedModel:
        if self.model is None:
            raise InsufficientDataError("No regression has been run.")
        return self.model

    def load(self, source) -> Dataset:
        """Load a new dataset; the previous selection and model are discarded."""
        dataset = data_processing.load(source)
        self.dataset = dataset
        self.selection = None
        self.model = None
        return dataset

    def clear(self) -> None:
        """Drop all state, as choosing "None" in the sample-data list does."""
        self.dataset = None
        self.selection = None
        self.model = None

    def column_names(self) -> List[str]:
        return data_processing.column_names(self._require_dataset())

    def select(self, predictor: str, response: str) -> VariableSelection:
        """Choose the predictor and response; the current model is discarded."""
        dataset = self._require_dataset()
        data_processing.require_numeric(dataset, predictor)
        data_processing.require_numeric(dataset, response)
        self.selection = VariableSelection(predictor, response)
        self.model = None
        return self.selection

    def run_regression(self) -> FittedModel:
        dataset = self._require_dataset()
        if self.selection is None:
            raise InsufficientDataError("Select a predictor and a response first.")
        self.model = fit(dataset, self.selection.predictor, self.selection.response)
        return self.model

    def predict(self, x_value) -> float:
        """Predict the response at ``x_value``; values outside the data are allowed."""
        model = self._require_model()
        value = predict(model, x_value)
        lo, hi = model.x_range
        if not lo <= float(x_value) <= hi:
            logger.warning(
                "Predicting at %s=%s outside the observed range [%g, %g]",
                model.predictor,
                x_value,
                lo,
                hi,
            )
        return value

    def dataset_summary(self) -> Dict[str, Dict[str, object]]:
        return summary.summarize(self._require_dataset())

    def correlation_matrix(self) -> pd.DataFrame:
        return summary.correlation_matrix(self._require_dataset())

    def residuals(self) -> pd.DataFrame:
        return residual_table(self._require_model())

    def narrative(self) -> NarrativeReport:
        return classify(self._require_model(), self.thresholds)

    def summary_record(self) -> Dict[str, object]:
        model = self._require_model()
        return reporting.to_summary_record(model, classify(model, self.thresholds))

    def report_text(self) -> str:
        return reporting.to_text(self.summary_record())

    def export_summary(self, output_dir: str = "output") -> str:
        """Write ``regression_summary.txt`` for the current model and return its path."""
        return reporting.write_summary(self.summary_record(), output_dir)
