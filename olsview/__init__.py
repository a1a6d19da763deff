"""
A Python package for exploratory simple linear regression.

Fits an ordinary least-squares line of one numeric response on one numeric
predictor and explains the result in plain language.

Modules:
    - data_processing: Loads uploaded CSV bytes or built-in datasets into typed columns.
    - summary: Per-column descriptive statistics and the correlation matrix.
    - stats: OLS fit, inference, prediction and residual diagnostics.
    - narrative: Threshold rules that turn statistics into qualitative labels.
    - reporting: Summary record and the exportable text report.
    - session: Owns the current dataset, selection and model.
    - plotting: Scatter, QQ and correlation figures.
"""

__version__ = "1.0.0"

from .data_processing import (
    Dataset,
    column_names,
    complete_pairs,
    is_numeric,
    load,
    load_csv_file,
    numeric_columns,
)
from .errors import (
    AnalysisError,
    ColumnNotFoundError,
    InsufficientDataError,
    InvalidFormatError,
    SingularFitError,
    TypeMismatchError,
)
from .narrative import NarrativeReport, NarrativeThresholds, classify
from .reporting import to_summary_record, to_text, write_summary
from .session import AnalysisSession, VariableSelection
from .stats import FittedModel, fit, predict
from .summary import correlation_matrix, summarize, summary_table

__all__ = [
    # Dataset adapter
    "Dataset",
    "load",
    "load_csv_file",
    "column_names",
    "is_numeric",
    "numeric_columns",
    "complete_pairs",
    # Descriptive summary
    "summarize",
    "summary_table",
    "correlation_matrix",
    # Regression
    "FittedModel",
    "fit",
    "predict",
    # Narrative and reporting
    "NarrativeThresholds",
    "NarrativeReport",
    "classify",
    "to_summary_record",
    "to_text",
    "write_summary",
    # Session
    "AnalysisSession",
    "VariableSelection",
    # Errors
    "AnalysisError",
    "InvalidFormatError",
    "InsufficientDataError",
    "SingularFitError",
    "TypeMismatchError",
    "ColumnNotFoundError",
]
