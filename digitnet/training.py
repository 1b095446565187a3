"""Training loop orchestration for the digit classifier."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from pathlib import Path

import numpy as np
from tqdm import tqdm

from .data.dataset import DigitDataset
from .models.network import Network
from .persistence import save_parameters
from .workers import WorkerPool

logger = logging.getLogger(__name__)


@dataclass
class TrainingConfig:
    epochs: int = 10
    batch_size: int = 100
    learning_rate: float = 0.01
    momentum_decay: float = 0.9
    workers: int = 16
    shuffle_seed: int | None = None


@dataclass
class TrainingEpochResult:
    epoch: int
    train_cost: float
    batches: int


@dataclass
class EvaluationResult:
    cost: float
    accuracy: float
    samples: int


def momentum_step(
    momentum: np.ndarray,
    gradient: np.ndarray,
    learning_rate: float,
    decay: float,
) -> tuple[np.ndarray, np.ndarray]:
    """Return ``(new_momentum, step)``.

    The step reuses the freshly updated momentum: ``step = decay * m' + lr * g``.
    """
    scaled = learning_rate * gradient
    new_momentum = decay * momentum + scaled
    step = decay * new_momentum + scaled
    return new_momentum, step


def _example_job(inputs: np.ndarray, expected: np.ndarray, network: Network) -> tuple[np.ndarray, float]:
    with network.shared.read():
        network.process(inputs)
        return network.gradient(expected), network.cost(expected)


class Trainer:
    def __init__(
        self,
        network: Network,
        config: TrainingConfig | None = None,
        parameters_path: Path | None = None,
        show_progress: bool = True,
    ) -> None:
        self.network = network
        self.config = config or TrainingConfig()
        self.parameters_path = parameters_path
        self.show_progress = show_progress
        self.history: list[TrainingEpochResult] = []
        with network.shared.read() as conf:
            self.momentum = np.zeros(conf.parameter_count)
        self._rng = np.random.default_rng(self.config.shuffle_seed)

    def fit(self, dataset: DigitDataset) -> list[TrainingEpochResult]:
        if dataset.num_samples == 0:
            raise ValueError("cannot train on an empty dataset")
        with WorkerPool(self.config.workers, self.network.spawn) as pool:
            for epoch in range(1, self.config.epochs + 1):
                result = self._run_epoch(pool, dataset, epoch)
                self.history.append(result)
                logger.info("Epoch %d/%d: average cost %.6f", epoch, self.config.epochs, result.train_cost)
                if self.parameters_path is not None:
                    with self.network.shared.read() as conf:
                        save_parameters(conf, self.parameters_path)
        return self.history

    def _run_epoch(self, pool: WorkerPool, dataset: DigitDataset, epoch: int) -> TrainingEpochResult:
        ordering = self._rng.permutation(dataset.num_samples)
        batch_size = self.config.batch_size
        batches = [ordering[start : start + batch_size] for start in range(0, len(ordering), batch_size)]

        progress = tqdm(
            batches,
            desc=f"Epoch {epoch}/{self.config.epochs}",
            unit="batch",
            disable=not self.show_progress,
        )
        overall_cost = 0.0
        for batch in progress:
            batch_cost = self.train_batch(pool, dataset, batch)
            overall_cost += batch_cost / len(batches)
            progress.set_postfix(cost=f"{batch_cost:.4f}")
        progress.close()
        return TrainingEpochResult(epoch=epoch, train_cost=overall_cost, batches=len(batches))

    def train_batch(self, pool: WorkerPool, dataset: DigitDataset, indices: np.ndarray) -> float:
        """Run one batch through the pool, apply the update and return the mean cost."""
        for idx in indices:
            pool.submit(partial(_example_job, dataset.input_vector(idx), dataset.expected_vector(idx)))
        gradients, costs = zip(*pool.collect(len(indices)))
        self.apply_gradient(np.mean(gradients, axis=0))
        return float(np.mean(costs))

    def apply_gradient(self, gradient: np.ndarray) -> np.ndarray:
        self.momentum, step = momentum_step(
            self.momentum,
            gradient,
            learning_rate=self.config.learning_rate,
            decay=self.config.momentum_decay,
        )
        with self.network.shared.write() as conf:
            conf.load(conf.flatten() - step)
        return step

    def evaluate(self, dataset: DigitDataset) -> EvaluationResult:
        total_cost = 0.0
        total_correct = 0
        indices = tqdm(
            range(dataset.num_samples),
            desc="Evaluating",
            unit="image",
            disable=not self.show_progress,
        )
        for idx in indices:
            output = self.network.process(dataset.input_vector(idx))
            total_cost += self.network.cost(dataset.expected_vector(idx))
            total_correct += int(np.argmax(output) == dataset.labels[idx])

        samples = dataset.num_samples
        if samples == 0:
            return EvaluationResult(cost=0.0, accuracy=0.0, samples=0)
        return EvaluationResult(cost=total_cost / samples, accuracy=total_correct / samples, samples=samples)
