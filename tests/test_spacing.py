import numpy as np
import pandas as pd
import pytest

from macroeconometrics import IrregularSpacingError, check_regular_spacing, is_regularly_spaced


def test_regular_numeric_index() -> None:
    check_regular_spacing(pd.Index([0.0, 0.5, 1.0, 1.5]))
    check_regular_spacing(pd.RangeIndex(0, 10))


def test_irregular_numeric_index_reports_position() -> None:
    with pytest.raises(IrregularSpacingError) as excinfo:
        check_regular_spacing(pd.Index([0, 1, 2, 4]))
    err = excinfo.value
    # interval between the 3rd and 4th timestamps
    assert err.position == 2
    assert err.expected == 1.0
    assert err.observed == 2.0


def test_first_violation_wins() -> None:
    with pytest.raises(IrregularSpacingError) as excinfo:
        check_regular_spacing(pd.Index([0, 1, 3, 4, 7]))
    assert excinfo.value.position == 1


def test_tolerance() -> None:
    idx = pd.Index([0.0, 1.0, 2.0 + 1e-12, 3.0])
    check_regular_spacing(idx, rtol=1e-8)
    with pytest.raises(IrregularSpacingError):
        check_regular_spacing(pd.Index([0.0, 1.0, 2.1, 3.0]), rtol=1e-3)


def test_decreasing_or_repeated_timestamps() -> None:
    with pytest.raises(IrregularSpacingError) as excinfo:
        check_regular_spacing(pd.Index([3, 2, 1]))
    assert excinfo.value.position == 0
    with pytest.raises(IrregularSpacingError):
        check_regular_spacing(pd.Index([0, 0, 0]))


def test_short_indexes_are_regular() -> None:
    check_regular_spacing(pd.Index([]))
    check_regular_spacing(pd.Index([5.0]))
    check_regular_spacing(pd.Index([5.0, 9.0]))


def test_calendar_frequencies_are_regular() -> None:
    check_regular_spacing(pd.date_range("2000-01-01", periods=24, freq="MS"))
    check_regular_spacing(pd.period_range("1990Q1", periods=12, freq="Q"))
    check_regular_spacing(pd.date_range("2020-01-01", periods=10, freq="D"))


def test_irregular_dates() -> None:
    idx = pd.DatetimeIndex(["2020-01-01", "2020-01-02", "2020-01-03", "2020-01-07"])
    with pytest.raises(IrregularSpacingError) as excinfo:
        check_regular_spacing(idx)
    assert excinfo.value.position == 2
    assert excinfo.value.expected == "D"
    assert excinfo.value.observed == pd.Timedelta(days=4)


def test_is_regularly_spaced() -> None:
    assert is_regularly_spaced(np.arange(5))
    assert not is_regularly_spaced([0, 1, 2, 4])


def test_missing_month_reported_at_the_gap() -> None:
    idx = pd.DatetimeIndex(["2001-01-01", "2001-02-01", "2001-03-01", "2001-05-01"])
    with pytest.raises(IrregularSpacingError) as excinfo:
        check_regular_spacing(idx)
    assert excinfo.value.position == 2
    assert excinfo.value.observed == pd.Timestamp("2001-05-01") - pd.Timestamp("2001-03-01")


def test_missing_quarter_late_in_series() -> None:
    idx = pd.date_range("1990-03-31", periods=12, freq="QE").delete(8)
    with pytest.raises(IrregularSpacingError) as excinfo:
        check_regular_spacing(idx)
    assert excinfo.value.position == 7


def test_month_end_series_is_regular() -> None:
    check_regular_spacing(pd.date_range("2001-01-31", periods=30, freq="ME"))
