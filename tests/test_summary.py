import numpy as np
import pandas as pd
import pytest

from olsview.data_processing import load
from olsview.errors import InsufficientDataError
from olsview.summary import correlation_matrix, summarize, summary_table


def test_numeric_summary_matches_five_number_summary():
    stats = summarize(load("mtcars"))["mpg"]
    assert stats["kind"] == "numeric"
    assert stats["min"] == 10.4
    assert np.isclose(stats["q1"], 15.425)
    assert np.isclose(stats["median"], 19.2)
    assert np.isclose(stats["mean"], 20.090625)
    assert np.isclose(stats["q3"], 22.8)
    assert stats["max"] == 33.9
    assert stats["n_missing"] == 0


def test_categorical_summary_counts():
    ds = load(b"x,group\n1,b\n2,a\n3,a\n4,\n5,b\n6,a\n")
    stats = summarize(ds)["group"]
    assert stats["kind"] == "categorical"
    assert stats["counts"] == {"a": 3, "b": 2}
    assert list(stats["counts"]) == ["a", "b"]
    assert stats["most_frequent"] == "a"
    assert stats["n_missing"] == 1


def test_summary_table_uses_r_labels():
    table = summary_table(load("faithful"))
    assert list(table.index) == ["eruptions", "waiting"]
    assert list(table.columns) == ["Min.", "1st Qu.", "Median", "Mean", "3rd Qu.", "Max."]
    assert table.loc["waiting", "Min."] == 43
    assert table.loc["waiting", "Max."] == 96


def test_summary_table_reports_missing_counts():
    table = summary_table(load(b"x,y\n1,2\n2,\n3,4\n"))
    assert table.loc["y", "NA's"] == 1
    assert table.loc["x", "NA's"] == 0


def test_perfectly_correlated_columns():
    ds = load(pd.DataFrame({"a": [1, 2, 3], "b": [2, 4, 6]}))
    corr = correlation_matrix(ds)
    assert corr.loc["a", "b"] == pytest.approx(1.0)
    assert corr.loc["b", "a"] == pytest.approx(1.0)


def test_correlation_uses_pairwise_complete_rows():
    frame = pd.DataFrame(
        {
            "a": [1.0, 2.0, 3.0, 4.0, np.nan],
            "b": [2.0, 1.0, 4.0, 3.0, 6.0],
            "c": [5.0, 3.0, 4.0, 1.0, 2.0],
        }
    )
    corr = correlation_matrix(load(frame))
    # b-c keeps all five rows; only pairs involving a lose the last row.
    assert corr.loc["b", "c"] == pytest.approx(np.corrcoef(frame["b"], frame["c"])[0, 1])
    assert corr.loc["a", "b"] == pytest.approx(
        np.corrcoef(frame["a"][:4], frame["b"][:4])[0, 1]
    )
    assert np.allclose(corr.to_numpy(), corr.to_numpy().T)


def test_correlation_ignores_categorical_columns():
    corr = correlation_matrix(load(b"x,y,g\n1,2,a\n2,3,b\n3,5,a\n"))
    assert list(corr.columns) == ["x", "y"]


def test_faithful_correlation():
    corr = correlation_matrix(load("faithful"))
    assert corr.loc["eruptions", "waiting"] == pytest.approx(0.9008112, abs=1e-7)


def test_correlation_needs_two_numeric_columns():
    with pytest.raises(InsufficientDataError):
        correlation_matrix(load(b"x,g\n1,a\n2,b\n"))
