from __future__ import annotations

from dataclasses import dataclass
import numbers
import operator
from typing import Any, Callable, ClassVar, Iterator, Protocol, Union

import numpy as np

from .errors import DimensionMismatch, MacroEconometricsError, ShapeMismatch, UnsupportedOperation


_BinaryOp = Callable[[Any, Any], Any]


def real_array(value: Any, *, copy: bool = False) -> np.ndarray:
    """Convert ``value`` to a float array, rejecting complex input.

    A plain ``dtype=float`` cast would silently drop imaginary parts.
    """
    if np.iscomplexobj(value):
        raise TypeError("estimated quantities must be real-valued, got complex input")
    return np.array(value, dtype=float, copy=copy or None)


def _frozen_array(value: Any) -> np.ndarray:
    x = real_array(value, copy=True)
    x.setflags(write=False)
    return x


class EstimatedQuantity(Protocol):
    """Read interface shared by every estimated-quantity variant."""

    kind: ClassVar[str]

    @property
    def value(self) -> np.ndarray: ...

    @property
    def shape(self) -> tuple[int, ...]: ...

    @property
    def param_shape(self) -> tuple[int, ...]: ...

    def point_estimate(self) -> np.ndarray: ...


class _ArrayForwarding:
    """Array behaviour forwarded to ``value``.

    Every operator is spelled out so that the result variant is decided by
    :func:`combine`, never by NumPy's own coercion rules.
    """

    __slots__ = ()

    # ndarray <op> quantity must reach the reflected methods below
    __array_ufunc__ = None
    __hash__ = None  # type: ignore[assignment]

    value: np.ndarray

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(self.value.shape)

    @property
    def ndim(self) -> int:
        return int(self.value.ndim)

    @property
    def size(self) -> int:
        return int(self.value.size)

    def __len__(self) -> int:
        return len(self.value)

    def __getitem__(self, key: Any) -> Any:
        return self.value[key]

    def __iter__(self) -> Iterator[Any]:
        return iter(self.value)

    def __array__(self, dtype: Any = None, copy: bool | None = None) -> np.ndarray:
        if copy:
            return np.array(self.value, dtype=dtype, copy=True)
        return np.asarray(self.value, dtype=dtype)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ESTIMATED_TYPES):
            return NotImplemented
        if type(self) is not type(other):
            return False
        if getattr(self, "chains", False) != getattr(other, "chains", False):
            return False
        return bool(np.array_equal(self.value, other.value))

    def __add__(self, other: Any) -> Any:
        return _binary(operator.add, self, other)

    def __radd__(self, other: Any) -> Any:
        return _binary(operator.add, other, self)

    def __sub__(self, other: Any) -> Any:
        return _binary(operator.sub, self, other)

    def __rsub__(self, other: Any) -> Any:
        return _binary(operator.sub, other, self)

    def __mul__(self, other: Any) -> Any:
        return _binary(operator.mul, self, other)

    def __rmul__(self, other: Any) -> Any:
        return _binary(operator.mul, other, self)

    def __truediv__(self, other: Any) -> Any:
        return _binary(operator.truediv, self, other)

    def __rtruediv__(self, other: Any) -> Any:
        return _binary(operator.truediv, other, self)

    def __matmul__(self, other: Any) -> Any:
        return _binary(operator.matmul, self, other)

    def __rmatmul__(self, other: Any) -> Any:
        return _binary(operator.matmul, other, self)

    def __neg__(self) -> Any:
        return _negate(self)


@dataclass(frozen=True, slots=True, eq=False)
class FixedEstimated(_ArrayForwarding):
    """A quantity pinned to a known value.

    The quantity is no longer estimated in the statistical sense, but it can be
    used anywhere an estimated quantity is expected.

    Parameters
    ----------
    value:
        Array-like value; stored as a read-only float copy. Complex
        input raises :class:`TypeError`.
    """
    value: np.ndarray

    kind: ClassVar[str] = "fixed"

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _frozen_array(self.value))

    @property
    def metadata(self) -> Any:
        raise UnsupportedOperation("FixedEstimated carries no metadata")

    @property
    def param_shape(self) -> tuple[int, ...]:
        return tuple(self.value.shape)

    def point_estimate(self) -> np.ndarray:
        return self.value


@dataclass(frozen=True, slots=True, eq=False)
class FrequentistEstimated(_ArrayForwarding):
    """A point estimate with optional, uninterpreted metadata.

    ``metadata`` may hold standard errors, a covariance matrix, convergence
    information or anything else the estimator wishes to keep. It is attached
    as-is and never read by this package.
    """
    value: np.ndarray
    metadata: Any = None

    kind: ClassVar[str] = "frequentist"

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _frozen_array(self.value))

    @property
    def param_shape(self) -> tuple[int, ...]:
        return tuple(self.value.shape)

    def point_estimate(self) -> np.ndarray:
        return self.value


@dataclass(frozen=True, slots=True, eq=False)
class BayesianEstimated(_ArrayForwarding):
    """Posterior samples of a quantity.

    Conjugacy is rare in applied work, so every Bayesian quantity is represented
    by its draws. Sample axes trail the parameter axes:

    - ``chains=False``: ``value.shape == param_shape + (n_draws,)``
    - ``chains=True``: ``value.shape == param_shape + (n_draws, n_chains)``

    Parameters
    ----------
    value:
        Array of draws; stored as a read-only float copy. Complex
        input raises :class:`TypeError`.
    metadata:
        Anything the sampler wants to keep next to the draws (warnings,
        acceptance rates, ...). Never interpreted here.
    chains:
        Whether the last axis indexes sampling chains.
    """
    value: np.ndarray
    metadata: Any = None
    chains: bool = False

    kind: ClassVar[str] = "bayesian"

    def __post_init__(self) -> None:
        x = _frozen_array(self.value)
        need = 2 if self.chains else 1
        if x.ndim < need:
            raise DimensionMismatch(
                f"BayesianEstimated value needs at least {need} trailing sample axis(es), got shape {x.shape}"
            )
        if any(s < 1 for s in x.shape[-need:]):
            raise DimensionMismatch("BayesianEstimated needs at least one draw per chain")
        object.__setattr__(self, "value", x)
        object.__setattr__(self, "chains", bool(self.chains))

    @staticmethod
    def from_leading_draws(draws: np.ndarray, *, metadata: Any = None) -> "BayesianEstimated":
        """Build a quantity from a draw-first array of shape ``(D, ...)``.

        Samplers usually store draws along the first axis; this moves that
        axis to the end.
        """
        d = real_array(draws)
        if d.ndim < 1:
            raise DimensionMismatch("draws must have a leading draw axis")
        return BayesianEstimated(np.moveaxis(d, 0, -1), metadata=metadata)

    @property
    def _sample_ndim(self) -> int:
        return 2 if self.chains else 1

    @property
    def _sample_axes(self) -> tuple[int, ...]:
        nd = self.value.ndim
        return tuple(range(nd - self._sample_ndim, nd))

    @property
    def param_shape(self) -> tuple[int, ...]:
        return tuple(self.value.shape[: -self._sample_ndim])

    @property
    def sample_shape(self) -> tuple[int, ...]:
        return tuple(self.value.shape[-self._sample_ndim :])

    @property
    def n_draws(self) -> int:
        return int(self.value.shape[-self._sample_ndim])

    @property
    def n_chains(self) -> int:
        return int(self.value.shape[-1]) if self.chains else 1

    def _flat_samples(self) -> np.ndarray:
        # (S, *param_shape), chain-major
        if self.chains:
            v = np.moveaxis(self.value, (-1, -2), (0, 1))
            return v.reshape((self.n_chains * self.n_draws,) + self.param_shape)
        return np.moveaxis(self.value, -1, 0)

    def like(self, flat: np.ndarray, metadata: Any = None) -> "BayesianEstimated":
        """Build a quantity with this one's sample layout.

        ``flat`` holds one entry per sample in chain-major order, shape
        ``(n_chains * n_draws, ...)``.
        """
        flat = np.asarray(flat, dtype=float)
        if flat.ndim < 1 or flat.shape[0] != self.n_chains * self.n_draws:
            raise ShapeMismatch(f"expected {self.n_chains * self.n_draws} samples, got shape {flat.shape}")
        out_shape = tuple(flat.shape[1:])
        if self.chains:
            v = flat.reshape((self.n_chains, self.n_draws) + out_shape)
            return BayesianEstimated(np.moveaxis(v, (0, 1), (-1, -2)), metadata=metadata, chains=True)
        return BayesianEstimated(np.moveaxis(flat, 0, -1), metadata=metadata)

    def draw(self, index: int, chain: int | None = None) -> np.ndarray:
        """Return one realised parameter array of shape ``param_shape``."""
        if self.chains:
            if chain is None:
                raise ValueError("chain must be given for chain-stacked draws")
            return self.value[..., index, chain]
        if chain not in (None, 0):
            raise ValueError("quantity has a single chain")
        return self.value[..., index]

    def iter_draws(self) -> Iterator[np.ndarray]:
        yield from self._flat_samples()

    def pooled(self) -> "BayesianEstimated":
        """Merge chains into a single draw axis (chain-major order)."""
        if not self.chains:
            return self
        return BayesianEstimated(np.moveaxis(self._flat_samples(), 0, -1), metadata=self.metadata)

    def mean(self) -> np.ndarray:
        return self.value.mean(axis=self._sample_axes)

    def std(self, ddof: int = 0) -> np.ndarray:
        return self.value.std(axis=self._sample_axes, ddof=ddof)

    def quantile(self, q: float | np.ndarray) -> np.ndarray:
        return np.quantile(self.value, q, axis=self._sample_axes)

    def point_estimate(self) -> np.ndarray:
        return self.mean()


Estimated = Union[FixedEstimated, FrequentistEstimated, BayesianEstimated]
ESTIMATED_TYPES = (FixedEstimated, FrequentistEstimated, BayesianEstimated)


def is_estimated(x: object) -> bool:
    return isinstance(x, ESTIMATED_TYPES)


def as_estimated(x: Any) -> Estimated:
    """Return ``x`` unchanged if it is an estimated quantity, else wrap it as fixed."""
    if isinstance(x, ESTIMATED_TYPES):
        return x
    return FixedEstimated(x)


def _fixed_fixed(op: _BinaryOp, left: Estimated, right: Estimated) -> Estimated:
    return FixedEstimated(op(left.value, right.value))


def _point_point(op: _BinaryOp, left: Estimated, right: Estimated) -> Estimated:
    return FrequentistEstimated(op(left.value, right.value))


def _point_bayesian(op: _BinaryOp, left: Estimated, right: BayesianEstimated) -> Estimated:
    flat = np.stack([op(left.value, s) for s in right._flat_samples()])
    return right.like(flat, right.metadata)


def _bayesian_point(op: _BinaryOp, left: BayesianEstimated, right: Estimated) -> Estimated:
    flat = np.stack([op(s, right.value) for s in left._flat_samples()])
    return left.like(flat, left.metadata)


def _bayesian_bayesian(op: _BinaryOp, left: BayesianEstimated, right: BayesianEstimated) -> Estimated:
    if left.chains != right.chains or left.sample_shape != right.sample_shape:
        raise ShapeMismatch(
            f"cannot combine draws with sample shapes {left.sample_shape} (chains={left.chains}) "
            f"and {right.sample_shape} (chains={right.chains})"
        )
    flat = np.stack([op(a, b) for a, b in zip(left._flat_samples(), right._flat_samples(), strict=True)])
    return left.like(flat, None)


_COMBINE: dict[tuple[str, str], Callable[[_BinaryOp, Any, Any], Estimated]] = {
    ("fixed", "fixed"): _fixed_fixed,
    ("fixed", "frequentist"): _point_point,
    ("frequentist", "fixed"): _point_point,
    ("frequentist", "frequentist"): _point_point,
    ("fixed", "bayesian"): _point_bayesian,
    ("frequentist", "bayesian"): _point_bayesian,
    ("bayesian", "fixed"): _bayesian_point,
    ("bayesian", "frequentist"): _bayesian_point,
    ("bayesian", "bayesian"): _bayesian_bayesian,
}


def combine(op: _BinaryOp, left: Any, right: Any) -> Estimated:
    """Apply a binary array operator to two quantities.

    Plain arrays and scalars are treated as fixed quantities. The result
    variant is looked up in the pairwise table ``_COMBINE``:

    - fixed with fixed gives fixed
    - any point variant with a frequentist operand gives frequentist, without
      metadata
    - a point variant with a Bayesian operand gives Bayesian: the point value is
      combined with every draw and the Bayesian metadata is kept
    - Bayesian with Bayesian needs matching sample shapes and gives Bayesian
      without metadata; otherwise :class:`~macroeconometrics.errors.ShapeMismatch`

    Errors raised by NumPy keep their type and get a note naming the operands.
    """
    a = as_estimated(left)
    b = as_estimated(right)
    rule = _COMBINE[(a.kind, b.kind)]
    try:
        return rule(op, a, b)
    except MacroEconometricsError:
        raise
    except (ValueError, TypeError) as e:
        name = getattr(op, "__name__", repr(op))
        e.add_note(f"while applying {name} to {type(a).__name__} {a.shape} and {type(b).__name__} {b.shape}")
        raise


def _is_operand(x: object) -> bool:
    return isinstance(x, (*ESTIMATED_TYPES, np.ndarray, numbers.Number, list, tuple))


def _binary(op: _BinaryOp, left: Any, right: Any) -> Any:
    if not (_is_operand(left) and _is_operand(right)):
        return NotImplemented
    return combine(op, left, right)


def _negate(q: Estimated) -> Estimated:
    if isinstance(q, BayesianEstimated):
        return BayesianEstimated(-q.value, metadata=q.metadata, chains=q.chains)
    if isinstance(q, FrequentistEstimated):
        return FrequentistEstimated(-q.value)
    return FixedEstimated(-q.value)
