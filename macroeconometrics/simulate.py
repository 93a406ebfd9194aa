from __future__ import annotations

import logging

import numpy as np

from .errors import DimensionMismatch, UnsupportedOperation
from .estimated import BayesianEstimated
from .linalg import cholesky_jitter
from .model import VAR, sample_layout
from .var import stack_lags

logger = logging.getLogger(__name__)


def simulate_path(
    model: VAR,
    horizon: int,
    *,
    rng: np.random.Generator,
    draw: int | None = None,
    chain: int | None = None,
    y_last: np.ndarray | None = None,
) -> np.ndarray:
    """Simulate one path of the VAR for a single realised parameter set.

    Disturbances are drawn as ``eps_t = L z_t`` with ``L`` a (jittered)
    Cholesky factor of ``Sigma`` and ``z_t`` standard normal; each step is
    evaluated with :meth:`~macroeconometrics.model.VAR.step`.

    Args:
        model: the VAR to simulate from.
        horizon: number of steps to simulate (>= 1).
        draw, chain: posterior draw to use for sampled parameters.
        y_last: (p, N) history in chronological order. Convention:
            y_last[0] is the oldest lag and y_last[-1] is the most recent.
            Defaults to the last ``p`` rows of ``model.data``.

    Returns:
        path: (horizon, N)
    """
    if int(horizon) < 1:
        raise ValueError("horizon must be >= 1")

    n, p = model.n, model.p
    _b0, _B, sigma = model.parameters(draw, chain)

    if y_last is None:
        window = model.data.values[model.data.T - p :, :].copy()
    else:
        window = np.array(y_last, dtype=float)
    if window.shape != (p, n):
        raise DimensionMismatch(f"y_last must have shape ({p}, {n}), got {window.shape}")

    chol = cholesky_jitter(sigma)

    path = np.empty((int(horizon), n), dtype=float)
    for h in range(int(horizon)):
        eps = chol @ rng.standard_normal(n)
        y_next = model.step(stack_lags(window), eps, draw=draw, chain=chain)
        path[h] = y_next
        if p > 0:
            window = np.vstack([window[1:, :], y_next])

    return path


def _sample_layout(model: VAR) -> BayesianEstimated:
    ref = sample_layout(model.B, model.b0, model.Sigma)
    if ref is None:
        raise UnsupportedOperation("model has no sampled parameters; use simulate_path instead")
    return ref


def predictive_draws(
    model: VAR,
    horizon: int,
    *,
    rng: np.random.Generator,
    y_last: np.ndarray | None = None,
) -> BayesianEstimated:
    """Posterior predictive paths, one simulated path per posterior draw.

    Returns:
        A :class:`~macroeconometrics.estimated.BayesianEstimated` of parameter
        shape ``(horizon, N)`` with the same draw/chain layout as the model's
        sampled parameters.
    """
    ref = _sample_layout(model)

    paths = []
    for c in range(ref.n_chains):
        for d in range(ref.n_draws):
            paths.append(
                simulate_path(
                    model,
                    horizon,
                    rng=rng,
                    draw=d,
                    chain=c if ref.chains else None,
                    y_last=y_last,
                )
            )

    logger.debug("simulated %d predictive paths of length %d", len(paths), horizon)
    return ref.like(np.stack(paths), None)
