import logging

from .chains import ChainBuilder, stack_chains
from .config import ValidationConfig, default_config
from .data.dataset import Dataset
from .data.spacing import check_regular_spacing, is_regularly_spaced
from .errors import (
    CovarianceError,
    DimensionMismatch,
    IrregularSpacingError,
    MacroEconometricsError,
    ShapeMismatch,
    UnsupportedOperation,
)
from .estimated import (
    BayesianEstimated,
    Estimated,
    EstimatedQuantity,
    FixedEstimated,
    FrequentistEstimated,
    as_estimated,
    combine,
    is_estimated,
)
from .model import VAR
from .simulate import predictive_draws, simulate_path
from .var import var_step

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Estimated quantities
    "BayesianEstimated",
    "ChainBuilder",
    "Estimated",
    "EstimatedQuantity",
    "FixedEstimated",
    "FrequentistEstimated",
    "as_estimated",
    "combine",
    "is_estimated",
    "stack_chains",
    # Model
    "Dataset",
    "VAR",
    "ValidationConfig",
    "check_regular_spacing",
    "default_config",
    "is_regularly_spaced",
    "predictive_draws",
    "simulate_path",
    "var_step",
    # Errors
    "CovarianceError",
    "DimensionMismatch",
    "IrregularSpacingError",
    "MacroEconometricsError",
    "ShapeMismatch",
    "UnsupportedOperation",
    # Metadata
    "__version__",
]

__version__ = "0.1.0"
