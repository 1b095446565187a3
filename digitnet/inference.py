"""Inference helpers for applying a trained network to image files."""
from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image

from .config import IMAGE_SIZE
from .data.dataset import normalize_image
from .models.network import Network


def load_bitmap_from_path(image_path: Path, image_size: int = IMAGE_SIZE) -> np.ndarray:
    """Return the image as ``image_size**2`` greyscale bytes (0-255)."""
    image = Image.open(image_path).convert("L")
    resized = image.resize((image_size, image_size), Image.Resampling.LANCZOS)
    return np.asarray(resized, dtype=np.uint8).reshape(-1)


def predict_bitmap(network: Network, pixels: np.ndarray) -> tuple[int, float, np.ndarray]:
    probs = network.process(normalize_image(np.asarray(pixels).reshape(-1))).copy()
    predicted = int(np.argmax(probs))
    return predicted, float(probs[predicted]), probs
