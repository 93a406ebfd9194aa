from __future__ import annotations

import logging
import threading
from typing import Any, Sequence

import numpy as np

from .errors import ShapeMismatch
from .estimated import BayesianEstimated, real_array

logger = logging.getLogger(__name__)


class ChainBuilder:
    """Collect independently sampled chains into one :class:`BayesianEstimated`.

    Chains may be added from several worker threads in any order. The stacked
    quantity only exists once every chain has been added, so a partially
    filled draw array is never handed out.

    Parameters
    ----------
    n_chains:
        Number of chains expected.
    metadata:
        Metadata attached to the built quantity.

    Examples
    --------
    >>> builder = ChainBuilder(2)
    >>> builder.add_chain(np.zeros((3, 100)), index=0)
    0
    >>> builder.add_chain(np.ones((3, 100)), index=1)
    1
    >>> builder.build().shape
    (3, 100, 2)
    """

    def __init__(self, n_chains: int, *, metadata: Any = None) -> None:
        if int(n_chains) < 1:
            raise ValueError("n_chains must be >= 1")
        self._n_chains = int(n_chains)
        self._metadata = metadata
        self._slots: list[np.ndarray | None] = [None] * self._n_chains
        self._shape: tuple[int, ...] | None = None
        self._lock = threading.Lock()

    @property
    def n_chains(self) -> int:
        return self._n_chains

    @property
    def n_completed(self) -> int:
        with self._lock:
            return sum(s is not None for s in self._slots)

    @property
    def complete(self) -> bool:
        return self.n_completed == self._n_chains

    def add_chain(self, draws: np.ndarray, *, index: int | None = None) -> int:
        """Store one finished chain of shape ``param_shape + (n_draws,)``.

        Parameters
        ----------
        draws:
            The chain's draws, draw axis last.
        index:
            Slot to fill. If omitted, the first empty slot is used.

        Returns
        -------
        int
            The slot that was filled.
        """
        x = real_array(draws, copy=True)
        if x.ndim < 1 or x.shape[-1] < 1:
            raise ShapeMismatch("a chain needs a trailing draw axis with at least one draw")

        with self._lock:
            if self._shape is not None and x.shape != self._shape:
                raise ShapeMismatch(f"chain has shape {x.shape}, expected {self._shape}")

            if index is None:
                free = [i for i, s in enumerate(self._slots) if s is None]
                if not free:
                    raise ValueError("all chains have already been added")
                slot = free[0]
            else:
                slot = int(index)
                if not (0 <= slot < self._n_chains):
                    raise ValueError(f"chain index must be in [0, {self._n_chains})")
                if self._slots[slot] is not None:
                    raise ValueError(f"chain {slot} has already been added")

            self._slots[slot] = x
            if self._shape is None:
                self._shape = x.shape

        logger.debug("stored chain %d with shape %s", slot, x.shape)
        return slot

    def build(self) -> BayesianEstimated:
        """Stack all chains along a new trailing axis.

        Raises
        ------
        ValueError
            If some chains are still missing.
        """
        with self._lock:
            missing = [i for i, s in enumerate(self._slots) if s is None]
            if missing:
                raise ValueError(f"chains not yet added: {missing}")
            stacked = np.stack(self._slots, axis=-1)  # type: ignore[arg-type]

        logger.debug("built %d chains into shape %s", self._n_chains, stacked.shape)
        return BayesianEstimated(stacked, metadata=self._metadata, chains=True)


def stack_chains(chains: Sequence[np.ndarray], *, metadata: Any = None) -> BayesianEstimated:
    """Stack finished chains (each ``param_shape + (n_draws,)``) in one call."""
    if len(chains) == 0:
        raise ValueError("at least one chain is required")
    builder = ChainBuilder(len(chains), metadata=metadata)
    for i, c in enumerate(chains):
        builder.add_chain(c, index=i)
    return builder.build()
