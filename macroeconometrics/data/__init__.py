from .dataset import Dataset
from .spacing import check_regular_spacing, is_regularly_spaced

__all__ = [
    "Dataset",
    "check_regular_spacing",
    "is_regularly_spaced",
]
