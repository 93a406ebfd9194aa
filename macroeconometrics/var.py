from __future__ import annotations

import numpy as np

from .errors import DimensionMismatch


def stack_lags(window: np.ndarray) -> np.ndarray:
    """Turn a chronological ``(p, N)`` window into the stacked lag vector.

    ``window[0]`` is the oldest observation and ``window[-1]`` the most recent.
    The result is ``(y_{t-1}, ..., y_{t-p})`` with length ``N * p``.
    """
    w = np.asarray(window, dtype=float)
    if w.ndim != 2:
        raise DimensionMismatch("window must be a 2D array of shape (p, N)")
    return w[::-1, :].reshape(-1)


def lag_matrix(y: np.ndarray, p: int) -> np.ndarray:
    """Stacked lag vectors for every row ``t = p, ..., T-1`` of ``y``.

    Row ``i`` of the result equals ``stack_lags(y[i : i + p])``, so the result
    has shape ``(T - p, N * p)``.
    """
    v = np.asarray(y, dtype=float)
    if v.ndim != 2:
        raise ValueError("y must be a 2D array of shape (T, N)")
    if p < 0:
        raise ValueError("p must be >= 0")

    t, n = v.shape
    if t <= p:
        raise ValueError("T must be > p")
    if p == 0:
        return np.empty((t, 0), dtype=float)

    xlags = [v[p - lag : t - lag, :] for lag in range(1, p + 1)]
    return np.concatenate(xlags, axis=1)


def var_step(b0: np.ndarray, B: np.ndarray, y_lags: np.ndarray, eps: np.ndarray) -> np.ndarray:
    """Evaluate ``y_t = b0 + B @ y_lags + eps`` for one realised parameter set.

    Parameters
    ----------
    b0:
        Intercept of shape ``(N,)``.
    B:
        Stacked lag coefficients ``[B_1, ..., B_p]`` of shape ``(N, N * p)``.
    y_lags:
        Stacked lag history ``(y_{t-1}, ..., y_{t-p})`` of length ``N * p``.
    eps:
        Realised disturbance of length ``N``.

    Raises
    ------
    DimensionMismatch
        If any argument has the wrong length.
    """
    c = np.asarray(b0, dtype=float)
    a = np.asarray(B, dtype=float)
    x = np.asarray(y_lags, dtype=float)
    e = np.asarray(eps, dtype=float)

    if c.ndim != 1:
        raise DimensionMismatch(f"b0 must be 1D, got shape {c.shape}")
    n = c.shape[0]
    if a.ndim != 2 or a.shape[0] != n:
        raise DimensionMismatch(f"B must have shape ({n}, N*p), got {a.shape}")
    if x.shape != (a.shape[1],):
        raise DimensionMismatch(f"lag history must have length {a.shape[1]}, got shape {x.shape}")
    if e.shape != (n,):
        raise DimensionMismatch(f"disturbance must have length {n}, got shape {e.shape}")

    return c + a @ x + e


def companion_matrix(B: np.ndarray, n: int, p: int) -> np.ndarray:
    """Companion form of the stacked lag coefficients (shape ``(N*p, N*p)``)."""
    a = np.asarray(B, dtype=float)
    if a.shape != (n, n * p):
        raise DimensionMismatch(f"B must have shape ({n}, {n * p}), got {a.shape}")

    if p <= 1:
        return a.reshape(n * p, n * p)

    eye = np.eye(n * (p - 1), dtype=float)
    bottom = np.concatenate([eye, np.zeros((n * (p - 1), n), dtype=float)], axis=1)
    return np.concatenate([a, bottom], axis=0)


def is_stationary(B: np.ndarray, n: int, p: int, *, tol: float = 1e-10) -> bool:
    if p == 0:
        return True
    f = companion_matrix(B, n=n, p=p)
    eigvals = np.linalg.eigvals(f)
    return bool(np.max(np.abs(eigvals)) < (1.0 - tol))
