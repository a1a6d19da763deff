"""Per-column descriptive statistics and the numeric correlation matrix."""

from __future__ import annotations

from typing import Dict

import numpy as np
import pandas as pd

from .data_processing import NUMERIC, Dataset, numeric_columns
from .errors import InsufficientDataError
from .schema import SummaryLabels


def _numeric_summary(series: pd.Series) -> Dict[str, float]:
    values = series.dropna()
    if values.empty:
        stats = {key: np.nan for key, _ in SummaryLabels().items()}
    else:
        # pandas' default linear interpolation matches R's quantile type 7.
        stats = {
            "min": float(values.min()),
            "q1": float(values.quantile(0.25)),
            "median": float(values.median()),
            "mean": float(values.mean()),
            "q3": float(values.quantile(0.75)),
            "max": float(values.max()),
        }
    stats["n_missing"] = int(series.isna().sum())
    return stats


def _categorical_summary(series: pd.Series) -> Dict[str, object]:
    values = series.dropna()
    # value_counts sorts by frequency; a stable sort keeps first-seen order on ties.
    counts = values.value_counts(sort=False).sort_values(
        ascending=False, kind="stable"
    )
    return {
        "counts": {str(k): int(v) for k, v in counts.items()},
        "most_frequent": str(counts.index[0]) if not counts.empty else None,
        "n_missing": int(series.isna().sum()),
    }


def summarize(dataset: Dataset) -> Dict[str, Dict[str, object]]:
    """Summarize every column of the dataset.

    Numeric columns report ``min``, ``q1``, ``median``, ``mean``, ``q3``,
    ``max`` and ``n_missing``. Categorical columns report ``counts`` (value ->
    frequency, most frequent first), ``most_frequent`` and ``n_missing``. Each
    entry also carries its ``kind``.
    """
    result = {}
    for name, kind in dataset.kinds.items():
        series = dataset.frame[name]
        if kind == NUMERIC:
            stats = _numeric_summary(series)
        else:
            stats = _categorical_summary(series)
        result[name] = {"kind": kind, **stats}
    return result


def summary_table(dataset: Dataset, labels: SummaryLabels = SummaryLabels()) -> pd.DataFrame:
    """Tabulate the numeric summaries, one row per numeric column.

    Columns use R ``summary()`` labels; an ``NA's`` column is added only when
    some numeric column has missing values.
    """
    stats = summarize(dataset)
    rows = {}
    for name in numeric_columns(dataset):
        entry = stats[name]
        rows[name] = {label: entry[key] for key, label in labels.items()}
        rows[name]["NA's"] = entry["n_missing"]
    table = pd.DataFrame.from_dict(rows, orient="index")
    if not table.empty and table["NA's"].sum() == 0:
        table = table.drop(columns="NA's")
    return table


def correlation_matrix(dataset: Dataset) -> pd.DataFrame:
    """Return the Pearson correlation matrix of the numeric columns.

    Each pair uses only the rows where both of its columns are present, so a
    missing value affects only the pairs that involve its column.

    Raises:
        InsufficientDataError: If fewer than two numeric columns exist.
    """
    names = numeric_columns(dataset)
    if len(names) < 2:
        raise InsufficientDataError(
            f"Correlation requires at least 2 numeric columns; found {len(names)}."
        )
    return dataset.frame[names].corr(method="pearson")
