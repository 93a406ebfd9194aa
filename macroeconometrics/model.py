from __future__ import annotations

from dataclasses import dataclass, field, replace
import logging
from typing import Any

import numpy as np
import pandas as pd

from .config import ValidationConfig, default_config
from .data.dataset import Dataset
from .data.spacing import check_regular_spacing
from .errors import CovarianceError, DimensionMismatch, ShapeMismatch
from .estimated import BayesianEstimated, Estimated, as_estimated
from .linalg import is_psd, is_symmetric
from .var import companion_matrix, is_stationary, stack_lags, var_step

logger = logging.getLogger(__name__)


def _as_count(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise DimensionMismatch(f"{name} must be an integer, got {value!r}")
    return int(value)


def _as_dataset(data: Any) -> Dataset:
    if isinstance(data, Dataset):
        return data
    if isinstance(data, pd.DataFrame):
        return Dataset.from_frame(data)
    raise TypeError("data must be a Dataset or a pandas DataFrame")


def sample_layout(*quantities: Estimated) -> BayesianEstimated | None:
    """Return the first sampled quantity, after checking all sampled ones agree.

    Sampled quantities describe one joint posterior only if they share the
    same draw count and chain layout.

    Raises
    ------
    ShapeMismatch
        If two sampled quantities have different sample shapes.
    """
    sampled = [q for q in quantities if isinstance(q, BayesianEstimated)]
    if not sampled:
        return None
    ref = sampled[0]
    for q in sampled[1:]:
        if q.chains != ref.chains or q.sample_shape != ref.sample_shape:
            raise ShapeMismatch(
                f"sampled parameters disagree on sample shape: {ref.sample_shape} (chains={ref.chains}) "
                f"vs {q.sample_shape} (chains={q.chains})"
            )
    return ref


@dataclass(frozen=True, slots=True, eq=False)
class VAR:
    """Vector autoregression whose parameters may be fixed, estimated or sampled.

    Every VAR(p) model has the form

    .. math::

        y_t = b_0 + B_1 y_{t-1} + \\dots + B_p y_{t-p} + \\varepsilon_t,
        \\qquad \\varepsilon_t \\sim N(0, \\Sigma)

    where each :math:`B_i` is ``(N, N)`` and :math:`b_0` is ``(N,)``. Stacking
    the lag matrices gives the equivalent form

    .. math::

        y_t = b_0 + B \\tilde{y}_{t-1} + \\varepsilon_t

    with ``B = [B_1, ..., B_p]`` of shape ``(N, N*p)`` and
    :math:`\\tilde{y}_{t-1} = (y_{t-1}, \\dots, y_{t-p})`.

    The model only describes structure. How ``B``, ``b0`` and ``Sigma`` were
    obtained is carried by their estimated-quantity variant
    (:class:`~macroeconometrics.estimated.FixedEstimated`,
    :class:`~macroeconometrics.estimated.FrequentistEstimated` or
    :class:`~macroeconometrics.estimated.BayesianEstimated`). Plain arrays are
    treated as fixed.

    VAR models are only appropriate for regularly spaced observations, which
    is checked at construction.

    Parameters
    ----------
    n:
        Number of variables ``N`` (> 0).
    p:
        Number of lags (>= 0).
    B:
        Lag coefficients with parameter shape ``(N, N*p)``.
    b0:
        Intercept with parameter shape ``(N,)``.
    Sigma:
        Disturbance covariance with parameter shape ``(N, N)``; every value
        or draw must be symmetric positive semi-definite.
    data:
        Observations, a :class:`~macroeconometrics.data.dataset.Dataset` (kept
        by reference) or a :class:`pandas.DataFrame` indexed by time.
    config:
        Validation tolerances. Defaults to
        :func:`~macroeconometrics.config.default_config`.

    Raises
    ------
    DimensionMismatch
        If ``n``/``p`` are invalid, a parameter has the wrong shape, or
        ``data`` has the wrong width or fewer than ``p + 1`` rows.
    ShapeMismatch
        If sampled parameters have different draw counts or chain layouts.
    CovarianceError
        If ``Sigma`` (or one of its draws) is not symmetric PSD.
    IrregularSpacingError
        If the time index of ``data`` is not regularly spaced.
    """
    n: int
    p: int
    B: Estimated
    b0: Estimated
    Sigma: Estimated
    data: Dataset
    config: ValidationConfig | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        n = _as_count(self.n, "n")
        p = _as_count(self.p, "p")
        if n <= 0:
            raise DimensionMismatch(f"n must be > 0, got {n}")
        if p < 0:
            raise DimensionMismatch(f"p must be >= 0, got {p}")
        object.__setattr__(self, "n", n)
        object.__setattr__(self, "p", p)

        cfg = self.config if self.config is not None else default_config()
        object.__setattr__(self, "config", cfg)

        expected = {"B": (n, n * p), "b0": (n,), "Sigma": (n, n)}
        for name, shape in expected.items():
            q = as_estimated(getattr(self, name))
            if q.param_shape != shape:
                raise DimensionMismatch(f"{name} must have shape {shape}, got {q.param_shape}")
            object.__setattr__(self, name, q)

        sample_layout(self.B, self.b0, self.Sigma)

        if cfg.check_covariance:
            self._check_covariance(cfg)

        ds = _as_dataset(self.data)
        if ds.N != n:
            raise DimensionMismatch(f"data has {ds.N} variables, expected n={n}")
        if ds.T < p + 1:
            raise DimensionMismatch(f"data needs at least p + 1 = {p + 1} observations, got {ds.T}")
        object.__setattr__(self, "data", ds)

        check_regular_spacing(ds.time_index, rtol=cfg.spacing_rtol, atol=cfg.spacing_atol)

        logger.debug(
            "constructed VAR(n=%d, p=%d) on %d observations [B=%s, b0=%s, Sigma=%s]",
            n,
            p,
            ds.T,
            self.B.kind,
            self.b0.kind,
            self.Sigma.kind,
        )

    def _check_covariance(self, cfg: ValidationConfig) -> None:
        sigma = self.Sigma
        if isinstance(sigma, BayesianEstimated):
            mats = sigma.iter_draws()
        else:
            mats = iter([sigma.value])

        for i, s in enumerate(mats):
            where = f" (draw {i}, chain-major)" if isinstance(sigma, BayesianEstimated) else ""
            if not is_symmetric(s, tol=cfg.symmetry_tol):
                raise CovarianceError(f"Sigma is not symmetric{where}")
            if not is_psd(s, tol=cfg.psd_tol):
                raise CovarianceError(f"Sigma is not positive semi-definite{where}")

    @property
    def nobs(self) -> int:
        return self.data.T

    @property
    def variables(self) -> list[str]:
        return list(self.data.variables)

    @property
    def time_index(self) -> pd.Index:
        return self.data.time_index

    @property
    def is_bayesian(self) -> bool:
        return any(isinstance(q, BayesianEstimated) for q in (self.B, self.b0, self.Sigma))

    @staticmethod
    def _realise(q: Estimated, name: str, draw: int | None, chain: int | None) -> np.ndarray:
        if isinstance(q, BayesianEstimated):
            if draw is None:
                raise ValueError(f"{name} is sampled; pass draw= (and chain= for stacked chains)")
            return q.draw(draw, chain)
        return q.value

    def parameters(self, draw: int | None = None, chain: int | None = None) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Realised ``(b0, B, Sigma)`` arrays.

        Fixed and frequentist parameters return their value; sampled parameters
        return the requested draw.
        """
        return (
            self._realise(self.b0, "b0", draw, chain),
            self._realise(self.B, "B", draw, chain),
            self._realise(self.Sigma, "Sigma", draw, chain),
        )

    def step(
        self,
        y_lags: np.ndarray,
        eps: np.ndarray,
        *,
        draw: int | None = None,
        chain: int | None = None,
    ) -> np.ndarray:
        """Evaluate ``y_t = b0 + B @ y_lags + eps`` once.

        Parameters
        ----------
        y_lags:
            Stacked lag history ``(y_{t-1}, ..., y_{t-p})`` of length ``n * p``.
        eps:
            Realised disturbance of length ``n``.
        draw, chain:
            Which posterior draw to use for sampled parameters. Ignored for
            fixed and frequentist parameters.

        Returns
        -------
        numpy.ndarray
            ``y_t`` with shape ``(n,)``.
        """
        b0 = self._realise(self.b0, "b0", draw, chain)
        B = self._realise(self.B, "B", draw, chain)
        return var_step(b0, B, y_lags, eps)

    def lag_vector(self, t: int) -> np.ndarray:
        """Stacked lag history preceding row ``t`` of ``data`` (``p <= t <= T``)."""
        t = int(t)
        if not (self.p <= t <= self.data.T):
            raise IndexError(f"t must be in [{self.p}, {self.data.T}], got {t}")
        if self.p == 0:
            return np.empty(0, dtype=float)
        return stack_lags(self.data.values[t - self.p : t])

    def companion(self, draw: int | None = None, chain: int | None = None) -> np.ndarray:
        B = self._realise(self.B, "B", draw, chain)
        return companion_matrix(B, n=self.n, p=self.p)

    def is_stationary(self, draw: int | None = None, chain: int | None = None, *, tol: float = 1e-10) -> bool:
        B = self._realise(self.B, "B", draw, chain)
        return is_stationary(B, n=self.n, p=self.p, tol=tol)

    def with_parameters(self, **changes: Any) -> "VAR":
        """Return a new, fully validated model with some fields replaced."""
        return replace(self, **changes)
