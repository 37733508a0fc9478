from .core import (
    KMeansLloyd,
    KMeansResult,
    KMeansYinyang,
    MultiprocessingConfig,
    YinyangConfig,
)
from .errors import (
    DimensionMismatchError,
    EmptyDatasetError,
    InvalidClusterCountError,
    InvalidConfigError,
    KMeansInputError,
)

__all__ = [
    "KMeansLloyd",
    "KMeansResult",
    "KMeansYinyang",
    "MultiprocessingConfig",
    "YinyangConfig",
    "DimensionMismatchError",
    "EmptyDatasetError",
    "InvalidClusterCountError",
    "InvalidConfigError",
    "KMeansInputError",
]

__version__ = "0.1.0"
