"""Typed failures raised by the analysis pipeline.

Every error derives from :class:`AnalysisError` so a front end can report any
pipeline failure with a single ``except`` clause. Each subclass also derives
from the builtin exception it refines, so callers that already catch
``ValueError``/``TypeError``/``KeyError`` keep working.
"""

from __future__ import annotations


class AnalysisError(Exception):
    """Base class for all analysis failures."""


class InvalidFormatError(AnalysisError, ValueError):
    """Input table is empty, malformed, or not tabular."""


class InsufficientDataError(AnalysisError, ValueError):
    """Too few rows or columns for the requested operation."""


class SingularFitError(AnalysisError, ValueError):
    """Degenerate variance makes the least-squares fit undefined."""


class TypeMismatchError(AnalysisError, TypeError):
    """A non-numeric value or column was used where a number is required."""


class ColumnNotFoundError(AnalysisError, KeyError):
    """A selected column does not exist in the current dataset."""

    def __str__(self) -> str:
        # KeyError repr-quotes its message; keep it readable.
        return str(self.args[0]) if self.args else ""
