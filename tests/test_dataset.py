import struct

import numpy as np
import pytest

from digitnet.data.dataset import (
    IMAGES_MAGIC,
    LABELS_MAGIC,
    DatasetFormatError,
    DigitDataset,
    load_images,
    load_labels,
    normalize_image,
    one_hot,
)


def _write_labels(path, labels, magic=LABELS_MAGIC, count=None):
    count = len(labels) if count is None else count
    path.write_bytes(struct.pack(">II", magic, count) + bytes(labels))


def _write_images(path, images, size, magic=IMAGES_MAGIC):
    payload = b"".join(bytes(image) for image in images)
    path.write_bytes(struct.pack(">IIII", magic, len(images), size, size) + payload)


def test_load_labels(tmp_path):
    path = tmp_path / "labels"
    _write_labels(path, [3, 1, 4, 1, 5])
    np.testing.assert_array_equal(load_labels(path), [3, 1, 4, 1, 5])


def test_load_labels_rejects_bad_magic(tmp_path):
    path = tmp_path / "labels"
    _write_labels(path, [1, 2], magic=IMAGES_MAGIC)
    with pytest.raises(DatasetFormatError, match="magic"):
        load_labels(path)


def test_load_labels_rejects_count_mismatch(tmp_path):
    path = tmp_path / "labels"
    _write_labels(path, [1, 2], count=5)
    with pytest.raises(DatasetFormatError):
        load_labels(path)


def test_truncated_header(tmp_path):
    path = tmp_path / "labels"
    path.write_bytes(b"\x00\x00")
    with pytest.raises(DatasetFormatError, match="truncated"):
        load_labels(path)


def test_load_images(tmp_path):
    path = tmp_path / "images"
    images = [list(range(9)), list(range(100, 109))]
    _write_images(path, images, 3)
    loaded = load_images(path, image_size=3)
    assert loaded.shape == (2, 9)
    np.testing.assert_array_equal(loaded[1], range(100, 109))


def test_load_images_rejects_wrong_dimensions(tmp_path):
    path = tmp_path / "images"
    _write_images(path, [[0] * 16], 4)
    with pytest.raises(DatasetFormatError, match="4x4"):
        load_images(path, image_size=3)


def test_one_hot():
    np.testing.assert_array_equal(one_hot(2), [0, 0, 1, 0, 0, 0, 0, 0, 0, 0])
    assert not one_hot(10).any()
    assert one_hot(0).shape == (10,)


def test_dataset_vectors(tmp_path):
    labels_path, images_path = tmp_path / "labels", tmp_path / "images"
    _write_labels(labels_path, [7, 2])
    _write_images(images_path, [[255, 0, 51, 102], [0, 0, 0, 0]], 2)
    dataset = DigitDataset.load(labels_path, images_path, image_size=2)
    assert len(dataset) == 2
    assert dataset.input_dim == 4
    np.testing.assert_allclose(dataset.input_vector(0), [1.0, 0.0, 0.2, 0.4])
    assert dataset.expected_vector(0)[7] == 1.0
    assert dataset.expected_vector(1).sum() == 1.0


def test_dataset_requires_alignment():
    with pytest.raises(ValueError):
        DigitDataset(images=np.zeros((3, 4), dtype=np.uint8), labels=np.zeros(2, dtype=np.uint8))


def test_normalize_image():
    np.testing.assert_allclose(normalize_image(np.array([0, 255], dtype=np.uint8)), [0.0, 1.0])
