from .dataset import Dataset, DatasetConfig, generate_blobs, pick_initial_centroids
from .validation import validate_dataset, validate_inputs

__all__ = [
    "Dataset",
    "DatasetConfig",
    "generate_blobs",
    "pick_initial_centroids",
    "validate_dataset",
    "validate_inputs",
]
