from __future__ import annotations

import numpy as np
import pandas as pd

from ..errors import IrregularSpacingError


def _numeric_deltas(index: pd.Index) -> np.ndarray:
    if isinstance(index, pd.PeriodIndex):
        return np.diff(index.asi8).astype(float)
    if isinstance(index, (pd.DatetimeIndex, pd.TimedeltaIndex)):
        return np.asarray((index[1:] - index[:-1]).total_seconds(), dtype=float)
    try:
        t = np.asarray(index, dtype=float)
    except (TypeError, ValueError) as e:
        raise TypeError(f"cannot compute time deltas for index of dtype {index.dtype}") from e
    return np.diff(t)


def _leading_freq(index: pd.DatetimeIndex) -> str | None:
    # month/quarter starts etc. have unequal day counts but a fixed calendar step
    if len(index) < 3:
        return None
    try:
        return pd.infer_freq(index[:3])
    except (TypeError, ValueError):
        return None


def _check_calendar_steps(index: pd.DatetimeIndex, freq: str) -> None:
    expected = pd.date_range(start=index[0], periods=len(index), freq=freq)
    bad = np.flatnonzero(np.asarray(index != expected))
    if bad.size:
        j = max(int(bad[0]), 1)
        raise IrregularSpacingError(j - 1, expected=freq, observed=index[j] - index[j - 1])


def check_regular_spacing(index: pd.Index, *, rtol: float = 1e-8, atol: float = 0.0) -> None:
    """Raise if consecutive timestamps are not equally spaced.

    Deltas are scanned once and each one is compared with the first delta
    using ``numpy.isclose(delta, first, rtol=rtol, atol=atol)``. Timestamps
    must be strictly increasing.

    When a calendar frequency (monthly, quarterly, business-daily, ...) can
    be inferred from the first three timestamps of a
    :class:`pandas.DatetimeIndex`, every timestamp is compared with that
    calendar step instead, so unequal day counts are not violations and a
    missing period is reported at the interval that skips it. :class:`pandas.PeriodIndex`
    steps are compared on their ordinals.

    Parameters
    ----------
    index:
        Chronological time index.
    rtol, atol:
        Tolerances for comparing deltas.

    Raises
    ------
    IrregularSpacingError
        At the first interval whose delta differs from the first one. The
        error's ``position`` is the index ``i`` of the interval between
        timestamps ``i`` and ``i + 1``.
    """
    idx = index if isinstance(index, pd.Index) else pd.Index(index)
    if len(idx) < 2:
        return

    if isinstance(idx, pd.DatetimeIndex):
        freq = _leading_freq(idx)
        if freq is not None:
            _check_calendar_steps(idx, freq)
            return

    deltas = _numeric_deltas(idx)
    first = float(deltas[0])
    if not np.isfinite(first) or first <= 0:
        raise IrregularSpacingError(0, expected="a positive delta", observed=first)

    ok = np.isclose(deltas, first, rtol=rtol, atol=atol)
    bad = np.flatnonzero(~ok)
    if bad.size:
        i = int(bad[0])
        raise IrregularSpacingError(i, expected=first, observed=float(deltas[i]))


def is_regularly_spaced(index: pd.Index, *, rtol: float = 1e-8, atol: float = 0.0) -> bool:
    try:
        check_regular_spacing(index, rtol=rtol, atol=atol)
    except IrregularSpacingError:
        return False
    return True
