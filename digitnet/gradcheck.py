"""Numerical verification of the analytic gradient."""
from __future__ import annotations

import numpy as np

from .models.network import Network


def finite_difference_gradient(
    network: Network,
    inputs: np.ndarray,
    expected: np.ndarray,
    epsilon: float = 1e-6,
) -> np.ndarray:
    """Central differences of the cost with respect to every canonical parameter.

    Parameters are perturbed in place through ``load`` and restored afterwards.
    """
    with network.shared.read() as conf:
        original = conf.flatten()
    numeric = np.zeros_like(original)
    perturbed = original.copy()
    try:
        for idx in range(original.size):
            perturbed[idx] = original[idx] + epsilon
            with network.shared.write() as conf:
                conf.load(perturbed)
            network.process(inputs)
            upper = network.cost(expected)

            perturbed[idx] = original[idx] - epsilon
            with network.shared.write() as conf:
                conf.load(perturbed)
            network.process(inputs)
            lower = network.cost(expected)

            perturbed[idx] = original[idx]
            numeric[idx] = (upper - lower) / (2.0 * epsilon)
    finally:
        with network.shared.write() as conf:
            conf.load(original)
    return numeric


def relative_difference(analytic: np.ndarray, numeric: np.ndarray, epsilon: float = 1e-10) -> np.ndarray:
    return np.abs(analytic - numeric) / (np.maximum(np.abs(analytic), np.abs(numeric)) + epsilon)
