#!/usr/bin/env python3
"""Predict the digit shown in an image file using a trained network."""
from __future__ import annotations

import argparse
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


import numpy as np

from digitnet.config import load_config
from digitnet.inference import load_bitmap_from_path, predict_bitmap
from digitnet.models.functions import Cost
from digitnet.persistence import initialize_network
from digitnet.rendering import render_image, render_probabilities


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Predict the digit rendered in an image")
    parser.add_argument("--config", type=Path, default=Path("config.json"), help="Path to the JSON configuration file")
    parser.add_argument("--parameters", type=Path, default=None, help="Trained parameter file (overrides the config)")
    parser.add_argument("--image", type=Path, required=True, help="Path to an image (PNG, JPEG, etc.); resized to 28x28")
    parser.add_argument("--top-k", type=int, default=3, help="Show the top-k most likely digits")
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    config = load_config(args.config)
    parameters_path = args.parameters or config.parameters_path
    if not parameters_path.exists():
        raise FileNotFoundError(f"No trained parameters at {parameters_path}")
    network = initialize_network(config.layer_sizes, parameters_path, cost=Cost(config.cost))

    pixels = load_bitmap_from_path(args.image)
    digit, confidence, probs = predict_bitmap(network, pixels)

    print(render_image(pixels))
    print(" " + "".join(f"{n:<3}" for n in range(len(probs))))
    print(render_probabilities(probs))
    print(f"Prediction: {digit}")
    print(f"Confidence: {confidence:.4f}")

    top_k = min(args.top_k, len(probs))
    print("Top candidates:")
    for idx in np.argsort(probs)[::-1][:top_k]:
        print(f"  {int(idx)} -> {probs[idx]:.4f}")


if __name__ == "__main__":
    main()
