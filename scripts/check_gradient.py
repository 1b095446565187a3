#!/usr/bin/env python3
"""Compare backpropagated gradients with central finite differences."""
from __future__ import annotations

import argparse
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


import numpy as np

from digitnet.config import load_config
from digitnet.data.dataset import DigitDataset
from digitnet.gradcheck import finite_difference_gradient, relative_difference
from digitnet.models.functions import Cost
from digitnet.persistence import initialize_network


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Check the analytic gradient on one training example")
    parser.add_argument("--config", type=Path, default=Path("config.json"), help="Path to the JSON configuration file")
    parser.add_argument("--index", type=int, default=0, help="Training example to check")
    parser.add_argument("--epsilon", type=float, default=1e-6, help="Finite-difference step")
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    config = load_config(args.config)
    network = initialize_network(config.layer_sizes, config.parameters_path, cost=Cost(config.cost))
    train_ds = DigitDataset.load(config.train.labels, config.train.images)

    inputs = train_ds.input_vector(args.index)
    expected = train_ds.expected_vector(args.index)
    numeric = finite_difference_gradient(network, inputs, expected, epsilon=args.epsilon)
    network.process(inputs)
    analytic = network.gradient(expected)

    diff = relative_difference(analytic, numeric)
    print(f"nan: {bool(np.isnan(diff).any())}")
    print(f"avg: {diff.mean()}, sum: {diff.sum()}, max: {diff.max()}")


if __name__ == "__main__":
    main()
