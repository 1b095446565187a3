"""Activation and cost functions used by the dense layers."""
from __future__ import annotations

from enum import Enum

import numpy as np


class Activation(Enum):
    RELU = "relu"
    SOFTMAX = "softmax"

    def apply(self, z: np.ndarray) -> np.ndarray:
        if self is Activation.RELU:
            return np.maximum(z, 0.0)
        # Shifting by the max leaves the result unchanged but keeps exp finite.
        exp_scores = np.exp(z - z.max())
        return exp_scores / exp_scores.sum()

    def derivative(self, z: np.ndarray) -> np.ndarray:
        """Return the Jacobian of the activation evaluated at pre-activation ``z``."""
        if self is Activation.RELU:
            # Zero input counts as active.
            return np.diag((z >= 0.0).astype(np.float64))
        exp_scores = np.exp(z - z.max())
        total = exp_scores.sum()
        return (np.diag(exp_scores) * total - np.outer(exp_scores, exp_scores)) / total**2


class Cost(Enum):
    SQUARED_ERROR = "squared_error"
    CATEGORICAL_CROSS_ENTROPY = "categorical_cross_entropy"

    def evaluate(self, actual: np.ndarray, expected: np.ndarray) -> float:
        if self is Cost.SQUARED_ERROR:
            error = actual - expected
            return float(np.sum(error * error))
        # No clamping: a zero probability on an expected class gives inf/nan.
        return float(-np.sum(expected * np.log(actual)))

    def derivative(self, actual: np.ndarray, expected: np.ndarray) -> np.ndarray:
        if self is Cost.SQUARED_ERROR:
            return 2.0 * (actual - expected)
        return -expected / actual
