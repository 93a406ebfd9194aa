from __future__ import annotations


class MacroEconometricsError(ValueError):
    pass


class DimensionMismatch(MacroEconometricsError):
    """Shapes or counts of model dimensions, parameters or data disagree."""


class ShapeMismatch(MacroEconometricsError):
    """Two sampled quantities cannot be combined draw by draw."""


class CovarianceError(MacroEconometricsError):
    """A covariance matrix (or one of its draws) is not symmetric PSD."""


class UnsupportedOperation(MacroEconometricsError, TypeError):
    """The requested operation is not defined for this variant."""


class IrregularSpacingError(MacroEconometricsError):
    """Observation timestamps are not regularly spaced.

    Attributes
    ----------
    position:
        Index ``i`` of the offending interval, i.e. the interval between
        timestamps ``i`` and ``i + 1``.
    expected:
        Reference spacing (the first delta).
    observed:
        Delta found at ``position``.
    """

    def __init__(self, position: int, expected: object, observed: object) -> None:
        self.position = int(position)
        self.expected = expected
        self.observed = observed
        super().__init__(
            f"irregular spacing between observations {self.position} and {self.position + 1}: "
            f"expected delta {expected!r}, got {observed!r}"
        )
