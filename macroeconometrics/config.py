from __future__ import annotations

from dataclasses import dataclass
import os

import numpy as np


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return float(default)
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class ValidationConfig:
    """Numerical tolerances used when validating a :class:`~macroeconometrics.model.VAR`.

    Parameters
    ----------
    spacing_rtol, spacing_atol:
        Relative and absolute tolerance used to compare each timestamp delta
        with the first delta (see :func:`numpy.isclose`).
    psd_tol:
        Smallest eigenvalue accepted for a covariance matrix is ``-psd_tol``
        times its largest absolute eigenvalue (or ``-psd_tol`` for a zero
        matrix).
    symmetry_tol:
        Maximum absolute asymmetry ``|S - S.T|`` accepted for a covariance.
    check_covariance:
        Whether ``Sigma`` (every draw, for sampled quantities) is checked.
    """
    spacing_rtol: float = 1e-8
    spacing_atol: float = 0.0
    psd_tol: float = 1e-10
    symmetry_tol: float = 1e-8
    check_covariance: bool = True

    def __post_init__(self) -> None:
        for name in ("spacing_rtol", "spacing_atol", "psd_tol", "symmetry_tol"):
            v = getattr(self, name)
            if not np.isfinite(v) or v < 0:
                raise ValueError(f"{name} must be finite and >= 0")

    @staticmethod
    def from_env() -> "ValidationConfig":
        """Build a configuration from ``MACROECONOMETRICS_*`` environment variables.

        Recognised variables are ``MACROECONOMETRICS_SPACING_RTOL``,
        ``MACROECONOMETRICS_PSD_TOL`` and ``MACROECONOMETRICS_CHECK_COVARIANCE``.
        Unset variables fall back to the dataclass defaults.
        """
        base = ValidationConfig()
        return ValidationConfig(
            spacing_rtol=_env_float("MACROECONOMETRICS_SPACING_RTOL", base.spacing_rtol),
            spacing_atol=base.spacing_atol,
            psd_tol=_env_float("MACROECONOMETRICS_PSD_TOL", base.psd_tol),
            symmetry_tol=base.symmetry_tol,
            check_covariance=_env_flag("MACROECONOMETRICS_CHECK_COVARIANCE", base.check_covariance),
        )


def default_config() -> ValidationConfig:
    return ValidationConfig.from_env()
