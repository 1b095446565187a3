"""Loading of IDX-formatted digit datasets."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np

from ..config import IMAGE_SIZE, NUM_CLASSES

LABELS_MAGIC = 0x00000801
IMAGES_MAGIC = 0x00000803

_HEADER_DTYPE = np.dtype(">u4")


class DatasetFormatError(ValueError):
    """Raised when an IDX file does not have the expected layout."""


def _read_header(raw: bytes, count: int, path: Path) -> tuple[int, ...]:
    size = count * _HEADER_DTYPE.itemsize
    if len(raw) < size:
        raise DatasetFormatError(f"{path}: header truncated ({len(raw)} bytes, expected at least {size})")
    return tuple(int(value) for value in np.frombuffer(raw, dtype=_HEADER_DTYPE, count=count))


def load_labels(path: Path) -> np.ndarray:
    raw = Path(path).read_bytes()
    magic, length = _read_header(raw, 2, path)
    if magic != LABELS_MAGIC:
        raise DatasetFormatError(f"{path}: invalid labels magic number {magic:#010x} (expected {LABELS_MAGIC:#010x})")
    labels = np.frombuffer(raw, dtype=np.uint8, offset=8)
    if labels.size != length:
        raise DatasetFormatError(f"{path}: header declares {length} labels, file holds {labels.size}")
    return labels.copy()


def load_images(path: Path, image_size: int = IMAGE_SIZE) -> np.ndarray:
    """Return an array of shape ``(count, image_size**2)`` holding raw pixel bytes."""
    raw = Path(path).read_bytes()
    magic, length, rows, cols = _read_header(raw, 4, path)
    if magic != IMAGES_MAGIC:
        raise DatasetFormatError(f"{path}: invalid images magic number {magic:#010x} (expected {IMAGES_MAGIC:#010x})")
    if (rows, cols) != (image_size, image_size):
        raise DatasetFormatError(f"{path}: invalid image size {cols}x{rows} (expected {image_size}x{image_size})")
    pixels = np.frombuffer(raw, dtype=np.uint8, offset=16)
    expected = length * image_size * image_size
    if pixels.size != expected:
        raise DatasetFormatError(f"{path}: header declares {expected} pixel bytes, file holds {pixels.size}")
    return pixels.reshape(length, image_size * image_size).copy()


def normalize_image(pixels: np.ndarray) -> np.ndarray:
    return np.asarray(pixels, dtype=np.float64) / 255.0


def one_hot(label: int, num_classes: int = NUM_CLASSES) -> np.ndarray:
    vector = np.zeros(num_classes)
    if 0 <= label < num_classes:
        vector[label] = 1.0
    return vector


@dataclass(slots=True)
class DigitDataset:
    images: np.ndarray
    labels: np.ndarray

    def __post_init__(self) -> None:
        if self.images.ndim != 2:
            raise ValueError("images must be 2D (num_samples, flattened_pixels)")
        if self.labels.shape[0] != self.images.shape[0]:
            raise ValueError(
                f"labels must align with images ({self.labels.shape[0]} labels, {self.images.shape[0]} images)"
            )

    def __len__(self) -> int:
        return self.num_samples

    @property
    def num_samples(self) -> int:
        return self.images.shape[0]

    @property
    def input_dim(self) -> int:
        return self.images.shape[1]

    def input_vector(self, index: int) -> np.ndarray:
        return normalize_image(self.images[index])

    def expected_vector(self, index: int) -> np.ndarray:
        return one_hot(int(self.labels[index]))

    @classmethod
    def load(cls, labels_path: Path, images_path: Path, image_size: int = IMAGE_SIZE) -> "DigitDataset":
        return cls(images=load_images(images_path, image_size), labels=load_labels(labels_path))
