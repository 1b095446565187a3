import numpy as np
from PIL import Image

from digitnet.config import IMAGE_SIZE, NUM_CLASSES
from digitnet.inference import load_bitmap_from_path, predict_bitmap
from digitnet.models.network import Network


def test_load_bitmap_converts_and_resizes(tmp_path):
    path = tmp_path / "digit.png"
    Image.new("RGB", (56, 40), color=(255, 255, 255)).save(path)
    pixels = load_bitmap_from_path(path)
    assert pixels.shape == (IMAGE_SIZE * IMAGE_SIZE,)
    assert pixels.dtype == np.uint8
    assert pixels.min() >= 250


def test_predict_bitmap_returns_distribution():
    network = Network.create([IMAGE_SIZE**2, 16, NUM_CLASSES], rng=np.random.default_rng(0))
    pixels = np.arange(IMAGE_SIZE**2) % 256
    digit, confidence, probs = predict_bitmap(network, pixels)
    assert probs.shape == (NUM_CLASSES,)
    assert abs(probs.sum() - 1.0) < 1e-9
    assert digit == int(np.argmax(probs))
    assert confidence == probs[digit]
