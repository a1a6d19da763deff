"""
Normalize uploaded or built-in tables into a typed column store.
"""

# Algorithm summary: decode uploaded bytes, reject ragged or empty tables
# before pandas sees them, read every cell as text, then classify each column
# as numeric when all of its non-missing cells parse as real numbers.

from __future__ import annotations

import csv
import io
import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np
import pandas as pd

from .errors import ColumnNotFoundError, InvalidFormatError, TypeMismatchError

logger = logging.getLogger(__name__)

NUMERIC = "numeric"
CATEGORICAL = "categorical"

MAX_UPLOAD_BYTES = 50 * 1024 * 1024

DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")

# Built-in name -> (file under DATA_DIR, column holding row labels or None).
BUILTIN_DATASETS: Dict[str, Tuple[str, str | None]] = {
    "mtcars": ("mtcars.csv", "model"),
    "faithful": ("faithful.csv", None),
}


@dataclass(frozen=True, eq=False)
class Dataset:
    """An immutable table whose columns are each numeric or categorical.

    Attributes:
        frame: Column data. Numeric columns are float64 with NaN for missing
            cells; categorical columns hold the original strings.
        kinds: Column name -> ``"numeric"`` or ``"categorical"``, in column order.
        name: Label of the source (built-in name or ``"uploaded"``).
    """

    frame: pd.DataFrame
    kinds: Dict[str, str]
    name: str = "uploaded"

    @property
    def n_rows(self) -> int:
        return int(self.frame.shape[0])

    @property
    def n_cols(self) -> int:
        return int(self.frame.shape[1])

    def column(self, name: str) -> pd.Series:
        _require_column(self, name)
        return self.frame[name]


def _require_column(dataset: Dataset, name: str) -> None:
    if name not in dataset.kinds:
        raise ColumnNotFoundError(
            f"Column '{name}' not found; available columns: {list(dataset.kinds)}"
        )


def _missing_mask(series: pd.Series) -> pd.Series:
    missing = series.isna()
    if series.dtype == object:
        missing = missing | series.astype(str).str.strip().eq("")
    return missing


def _classify_column(series: pd.Series) -> Tuple[str, pd.Series]:
    """Return the column kind and its converted values."""
    if pd.api.types.is_bool_dtype(series):
        return CATEGORICAL, series.astype(object)

    missing = _missing_mask(series)
    if series.dtype == object:
        candidate = series.where(~missing).astype(str).str.strip()
        candidate = candidate.where(~missing)
    else:
        candidate = series
    numeric = pd.to_numeric(candidate, errors="coerce")

    if numeric[~missing].notna().all():
        return NUMERIC, numeric.astype(float)
    return CATEGORICAL, series.where(~missing).astype(object)


def from_frame(frame: pd.DataFrame, name: str = "data frame") -> Dataset:
    """Build a :class:`Dataset` from an already-parsed table.

    Args:
        frame: Table with one column per variable.
        name: Source label stored on the dataset.

    Returns:
        Dataset: Typed copy of ``frame``; the input is not modified.

    Raises:
        InvalidFormatError: If the table has no columns, no rows, or duplicated
            column names.
    """
    if frame.shape[1] == 0:
        raise InvalidFormatError("Table has no columns.")
    if frame.shape[0] == 0:
        raise InvalidFormatError("Table has no data rows.")

    columns = [str(col) for col in frame.columns]
    duplicated = sorted({col for col in columns if columns.count(col) > 1})
    if duplicated:
        raise InvalidFormatError(f"Duplicate column names: {duplicated}")

    converted = {}
    kinds: Dict[str, str] = {}
    for label, col in zip(columns, frame.columns):
        kind, values = _classify_column(frame[col])
        converted[label] = values.to_numpy()
        kinds[label] = kind

    typed = pd.DataFrame(converted, index=frame.index)
    logger.info(
        "Loaded dataset '%s' with %d rows and %d columns (%d numeric)",
        name,
        typed.shape[0],
        typed.shape[1],
        sum(1 for kind in kinds.values() if kind == NUMERIC),
    )
    return Dataset(frame=typed, kinds=kinds, name=name)


def _check_row_widths(text: str) -> None:
    """Reject tables whose rows do not all have the header's field count."""
    width = None
    for lineno, row in enumerate(csv.reader(io.StringIO(text)), start=1):
        if not row:
            continue
        if width is None:
            width = len(row)
            continue
        if len(row) != width:
            raise InvalidFormatError(
                f"Row {lineno} has {len(row)} fields; expected {width}."
            )
    if width is None:
        raise InvalidFormatError("Uploaded file contains no table.")


def read_csv_bytes(raw: bytes, name: str = "uploaded") -> Dataset:
    """Parse raw CSV bytes (header row first) into a :class:`Dataset`.

    Args:
        raw: File content as uploaded.
        name: Source label stored on the dataset.

    Returns:
        Dataset: The typed table.

    Raises:
        InvalidFormatError: If the content is empty, too large, not UTF-8
            text, ragged, or has a header but no data rows.
    """
    if len(raw) > MAX_UPLOAD_BYTES:
        raise InvalidFormatError(
            f"Uploaded file is {len(raw)} bytes; the limit is {MAX_UPLOAD_BYTES}."
        )
    if not raw.strip():
        raise InvalidFormatError("Uploaded file is empty.")

    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise InvalidFormatError("Uploaded file is not UTF-8 text.") from exc
    if "\x00" in text:
        raise InvalidFormatError("Uploaded file is not a text table.")

    try:
        _check_row_widths(text)
    except csv.Error as exc:
        raise InvalidFormatError(f"Malformed CSV: {exc}") from exc

    try:
        frame = pd.read_csv(io.StringIO(text), dtype=str)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise InvalidFormatError(f"Malformed CSV: {exc}") from exc

    return from_frame(frame, name=name)


def load_builtin(name: str) -> Dataset:
    """Load one of the bundled example datasets (``mtcars`` or ``faithful``)."""
    if name not in BUILTIN_DATASETS:
        raise InvalidFormatError(
            f"Unknown built-in dataset '{name}'; choose from {sorted(BUILTIN_DATASETS)}."
        )
    filename, index_col = BUILTIN_DATASETS[name]
    frame = pd.read_csv(os.path.join(DATA_DIR, filename), index_col=index_col)
    frame.index.name = None
    return from_frame(frame, name=name)


def load(source) -> Dataset:
    """Load a dataset from a built-in name, raw CSV bytes, or a DataFrame.

    Args:
        source: ``"mtcars"``/``"faithful"``, the bytes of an uploaded CSV file,
            or a :class:`pandas.DataFrame`.

    Returns:
        Dataset: A fresh dataset; callers replace any previous one wholesale.

    Raises:
        InvalidFormatError: If the source cannot be turned into a non-empty
            rectangular table.
    """
    if isinstance(source, pd.DataFrame):
        return from_frame(source)
    if isinstance(source, (bytes, bytearray, memoryview)):
        return read_csv_bytes(bytes(source))
    if isinstance(source, str):
        return load_builtin(source)
    raise InvalidFormatError(
        f"Unsupported dataset source of type {type(source).__name__}."
    )


def load_csv_file(filepath) -> Dataset:
    """
    Load a dataset from a CSV file on disk.

    Args:
        filepath (str): Path to the CSV file.

    Returns:
        Dataset: Loaded dataset named after the file.
    """
    with open(filepath, "rb") as fh:
        raw = fh.read()
    return read_csv_bytes(raw, name=os.path.basename(str(filepath)))


def column_names(dataset: Dataset) -> List[str]:
    """Return column names in table order."""
    return list(dataset.kinds)


def is_numeric(dataset: Dataset, name: str) -> bool:
    """Return True if every non-missing value of column ``name`` is a real number."""
    _require_column(dataset, name)
    return dataset.kinds[name] == NUMERIC


def numeric_columns(dataset: Dataset) -> List[str]:
    """Return the names of numeric columns in table order."""
    return [name for name, kind in dataset.kinds.items() if kind == NUMERIC]


def require_numeric(dataset: Dataset, name: str) -> None:
    """Raise :class:`TypeMismatchError` unless ``name`` is a numeric column."""
    if not is_numeric(dataset, name):
        raise TypeMismatchError(
            f"Column '{name}' is categorical; a numeric column is required."
        )


def complete_pairs(
    dataset: Dataset, x_name: str, y_name: str
) -> Tuple[np.ndarray, np.ndarray, pd.Index]:
    """Return the (x, y) values of rows complete in both columns.

    Args:
        dataset: Source dataset.
        x_name: Numeric predictor column.
        y_name: Numeric response column.

    Returns:
        tuple: ``(x, y, labels)`` where ``labels`` are the original row labels
        of the retained rows.

    Raises:
        ColumnNotFoundError: If either column is absent.
        TypeMismatchError: If either column is categorical.
        InvalidFormatError: If either column holds ``Inf`` or ``-Inf``.
    """
    require_numeric(dataset, x_name)
    require_numeric(dataset, y_name)
    x_arr = dataset.frame[x_name].to_numpy(dtype=float)
    y_arr = dataset.frame[y_name].to_numpy(dtype=float)
    for name, values in ((x_name, x_arr), (y_name, y_arr)):
        if np.isinf(values).any():
            raise InvalidFormatError(
                f"Column '{name}' contains infinite values; only missing cells are dropped."
            )
    mask = ~(np.isnan(x_arr) | np.isnan(y_arr))
    return x_arr[mask], y_arr[mask], dataset.frame.index[mask]
