#!/usr/bin/env python3
"""Train the digit classifier, or evaluate it on the test split with --test."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


import numpy as np

from digitnet.config import apply_overrides, load_config
from digitnet.data.dataset import DigitDataset
from digitnet.models.functions import Cost
from digitnet.persistence import initialize_network
from digitnet.rendering import render_prediction
from digitnet.training import Trainer, TrainingConfig


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Train a dense neural network on IDX digit images.")
    parser.add_argument("--config", type=Path, default=Path("config.json"), help="Path to the JSON configuration file")
    parser.add_argument("--test", action="store_true", help="Evaluate the saved network on the test split instead of training")
    parser.add_argument("--parameters", type=Path, default=None, help="Parameter file to load and save (overrides the config)")
    parser.add_argument("--epochs", type=int, default=None, help="Number of training epochs")
    parser.add_argument("--batch-size", type=int, default=None, help="Mini-batch size")
    parser.add_argument("--learning-rate", type=float, default=None, help="Learning rate for gradient descent")
    parser.add_argument("--workers", type=int, default=None, help="Number of worker threads")
    parser.add_argument("--show", type=int, default=10, help="Test examples to render in evaluation mode")
    parser.add_argument("--quiet", action="store_true", help="Disable progress bars")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = apply_overrides(
        load_config(args.config),
        epochs=args.epochs,
        batch_size=args.batch_size,
        learning_rate=args.learning_rate,
        workers=args.workers,
    )
    parameters_path = args.parameters or config.parameters_path
    network = initialize_network(
        config.layer_sizes,
        parameters_path,
        cost=Cost(config.cost),
        rng=np.random.default_rng(config.seed),
    )

    trainer = Trainer(
        network,
        TrainingConfig(
            epochs=config.epochs,
            batch_size=config.batch_size,
            learning_rate=config.learning_rate,
            momentum_decay=config.momentum_decay,
            workers=config.workers,
            shuffle_seed=config.seed,
        ),
        parameters_path=parameters_path,
        show_progress=not args.quiet,
    )

    if not args.test:
        train_ds = DigitDataset.load(config.train.labels, config.train.images)
        history = trainer.fit(train_ds)
        for result in history:
            print(f"Epoch {result.epoch}: overall avg cost {result.train_cost:.6f}")
        print(f"Parameters saved to {parameters_path}")
        return

    test_ds = DigitDataset.load(config.test.labels, config.test.images)
    for idx in range(min(args.show, test_ds.num_samples)):
        output = network.process(test_ds.input_vector(idx))
        cost = network.cost(test_ds.expected_vector(idx))
        print(render_prediction(int(test_ds.labels[idx]), test_ds.images[idx], output, cost))

    result = trainer.evaluate(test_ds)
    print(f"avg cost: {result.cost}")
    print(f"accuracy: {result.accuracy * 100.0}%")


if __name__ == "__main__":
    main()
