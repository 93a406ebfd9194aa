from __future__ import annotations

import numpy as np
import scipy.linalg


def symmetrize(a: np.ndarray) -> np.ndarray:
    x = np.asarray(a, dtype=float)
    if x.ndim != 2 or x.shape[0] != x.shape[1]:
        raise ValueError("a must be a square 2D array")
    return 0.5 * (x + x.T)


def is_symmetric(a: np.ndarray, *, tol: float = 1e-8) -> bool:
    x = np.asarray(a, dtype=float)
    if x.ndim != 2 or x.shape[0] != x.shape[1]:
        raise ValueError("a must be a square 2D array")
    return bool(np.max(np.abs(x - x.T), initial=0.0) <= tol)


def is_psd(a: np.ndarray, *, tol: float = 1e-10) -> bool:
    """Whether the symmetric part of ``a`` is positive semi-definite.

    The smallest eigenvalue may be negative by at most ``tol`` times the
    largest absolute eigenvalue, or by ``tol`` when that is below one.
    """
    x = symmetrize(a)
    if x.shape[0] == 0:
        return True
    if not np.all(np.isfinite(x)):
        return False
    eig = scipy.linalg.eigvalsh(x, check_finite=False)
    scale = max(float(np.max(np.abs(eig))), 1.0)
    return bool(eig[0] >= -tol * scale)


def cholesky_jitter(a: np.ndarray, *, jitter: float = 1e-10, max_tries: int = 6) -> np.ndarray:
    x = symmetrize(np.asarray(a, dtype=float))

    n = x.shape[0]
    for i in range(max_tries):
        try:
            return np.linalg.cholesky(x)
        except np.linalg.LinAlgError:
            x = x + (jitter * (10.0**i)) * np.eye(n, dtype=float)

    raise np.linalg.LinAlgError("cholesky failed even after adding jitter")
