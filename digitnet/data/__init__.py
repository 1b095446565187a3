"""Data helpers for digitnet."""
from .dataset import DatasetFormatError, DigitDataset, load_images, load_labels, normalize_image, one_hot

__all__ = [
    "DatasetFormatError",
    "DigitDataset",
    "load_images",
    "load_labels",
    "normalize_image",
    "one_hot",
]
