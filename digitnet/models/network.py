"""A stack of dense layers with hand-written forward and backward passes.

Parameters are exchanged as one flat vector in a fixed canonical order: layers
are visited from last to first and each contributes its weight entries
(column-major) followed by its biases. ``flatten``, ``load`` and ``gradient``
all follow this order, so a gradient can be subtracted directly from a
flattened parameter vector.
"""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Sequence

import numpy as np

from ..utils.locks import ReadWriteLock
from .functions import Activation, Cost

WEIGHT_ORDER = "F"


@dataclass
class LayerParams:
    weights: np.ndarray
    biases: np.ndarray
    activation: Activation

    @property
    def input_size(self) -> int:
        return self.weights.shape[1]

    @property
    def output_size(self) -> int:
        return self.weights.shape[0]

    @property
    def parameter_count(self) -> int:
        return self.weights.size + self.biases.size

    def pre_activation(self, prev: np.ndarray) -> np.ndarray:
        return self.weights @ prev + self.biases

    def calculate(self, prev: np.ndarray) -> np.ndarray:
        return self.activation.apply(self.pre_activation(prev))

    def jacobian(self, prev: np.ndarray) -> np.ndarray:
        return self.activation.derivative(self.pre_activation(prev))

    def copy(self) -> "LayerParams":
        return LayerParams(self.weights.copy(), self.biases.copy(), self.activation)


@dataclass
class NetworkConfig:
    layers: list[LayerParams]
    cost: Cost = Cost.CATEGORICAL_CROSS_ENTROPY

    def __post_init__(self) -> None:
        if not self.layers:
            raise ValueError("a network needs at least one layer")
        for idx, layer in enumerate(self.layers):
            if layer.weights.ndim != 2 or layer.biases.shape != (layer.output_size,):
                raise ValueError(
                    f"layer {idx}: biases of shape {layer.biases.shape} do not match "
                    f"weights of shape {layer.weights.shape}"
                )
            if idx > 0 and layer.input_size != self.layers[idx - 1].output_size:
                raise ValueError(
                    f"layer {idx}: expected {self.layers[idx - 1].output_size} inputs, "
                    f"got weights with {layer.input_size} columns"
                )
        if self.layers[-1].activation is not Activation.SOFTMAX:
            raise ValueError("the output layer must use the softmax activation")

    @classmethod
    def random(
        cls,
        layer_sizes: Sequence[int],
        cost: Cost = Cost.CATEGORICAL_CROSS_ENTROPY,
        rng: np.random.Generator | None = None,
    ) -> "NetworkConfig":
        """He-scaled uniform weights and zero biases; ReLU everywhere but the softmax output."""
        if len(layer_sizes) < 2:
            raise ValueError("layer_sizes must name the input size and at least one layer")
        rng = rng or np.random.default_rng()
        layers = []
        for fan_in, fan_out in zip(layer_sizes[:-1], layer_sizes[1:]):
            magnitude = np.sqrt(2.0 / fan_in)
            layers.append(
                LayerParams(
                    weights=rng.uniform(-magnitude, magnitude, size=(fan_out, fan_in)),
                    biases=np.zeros(fan_out),
                    activation=Activation.RELU,
                )
            )
        layers[-1].activation = Activation.SOFTMAX
        return cls(layers=layers, cost=cost)

    @property
    def layer_sizes(self) -> tuple[int, ...]:
        return (self.layers[0].input_size, *(layer.output_size for layer in self.layers))

    @property
    def parameter_count(self) -> int:
        return sum(layer.parameter_count for layer in self.layers)

    def flatten(self) -> np.ndarray:
        parts: list[np.ndarray] = []
        for layer in reversed(self.layers):
            parts.append(layer.weights.ravel(order=WEIGHT_ORDER))
            parts.append(layer.biases)
        return np.concatenate(parts)

    def load(self, values: Iterable[float]) -> None:
        """Overwrite parameters in canonical order.

        A short vector only overwrites a prefix; values past the parameter count
        are ignored.
        """
        data = np.asarray(values if isinstance(values, np.ndarray) else list(values), dtype=np.float64)
        offset = 0
        for layer in reversed(self.layers):
            if offset >= data.size:
                break
            chunk = data[offset : offset + layer.weights.size]
            flat = layer.weights.ravel(order=WEIGHT_ORDER)
            flat[: chunk.size] = chunk
            layer.weights[...] = flat.reshape(layer.weights.shape, order=WEIGHT_ORDER)
            offset += chunk.size

            chunk = data[offset : offset + layer.biases.size]
            layer.biases[: chunk.size] = chunk
            offset += chunk.size

    def copy(self) -> "NetworkConfig":
        return NetworkConfig(layers=[layer.copy() for layer in self.layers], cost=self.cost)


@dataclass
class NetworkState:
    layers: list[np.ndarray] = field(default_factory=list)

    @classmethod
    def zeros(cls, layer_sizes: Sequence[int]) -> "NetworkState":
        return cls(layers=[np.zeros(size) for size in layer_sizes])


class SharedNetworkConfig:
    """A ``NetworkConfig`` guarded by a reader/writer lock."""

    def __init__(self, config: NetworkConfig) -> None:
        self._config = config
        self._lock = ReadWriteLock()

    @contextmanager
    def read(self) -> Iterator[NetworkConfig]:
        with self._lock.read():
            yield self._config

    @contextmanager
    def write(self) -> Iterator[NetworkConfig]:
        with self._lock.write():
            yield self._config


class Network:
    """Binds a shared configuration to a private activation cache."""

    def __init__(self, shared: SharedNetworkConfig, state: NetworkState | None = None) -> None:
        self.shared = shared
        if state is None:
            with shared.read() as conf:
                state = NetworkState.zeros(conf.layer_sizes)
        self.state = state

    @classmethod
    def create(
        cls,
        layer_sizes: Sequence[int],
        cost: Cost = Cost.CATEGORICAL_CROSS_ENTROPY,
        rng: np.random.Generator | None = None,
    ) -> "Network":
        return cls.from_config(NetworkConfig.random(layer_sizes, cost=cost, rng=rng))

    @classmethod
    def from_config(cls, config: NetworkConfig) -> "Network":
        return cls(SharedNetworkConfig(config))

    def spawn(self) -> "Network":
        """Return a network sharing this configuration with its own fresh state."""
        return Network(self.shared, NetworkState.zeros([values.size for values in self.state.layers]))

    @property
    def output(self) -> np.ndarray:
        return self.state.layers[-1]

    def process(self, inputs: np.ndarray) -> np.ndarray:
        layers = self.state.layers
        if np.shape(inputs) != layers[0].shape:
            raise ValueError(f"expected input of shape {layers[0].shape}, got {np.shape(inputs)}")
        layers[0][...] = inputs
        with self.shared.read() as conf:
            for idx, layer in enumerate(conf.layers):
                layers[idx + 1][...] = layer.calculate(layers[idx])
        return self.output

    def cost(self, expected: np.ndarray) -> float:
        with self.shared.read() as conf:
            return conf.cost.evaluate(self.output, expected)

    def gradient(self, expected: np.ndarray) -> np.ndarray:
        """Backpropagate the cost of the last ``process`` call against ``expected``."""
        with self.shared.read() as conf:
            jacobians = [
                layer.jacobian(prev) for layer, prev in zip(conf.layers, self.state.layers)
            ]
            node_derivs = [conf.cost.derivative(self.output, expected)]
            for layer, jacobian in zip(reversed(conf.layers), reversed(jacobians)):
                node_derivs.append(layer.weights.T @ (jacobian @ node_derivs[-1]))

        parts: list[np.ndarray] = []
        for prev, jacobian, node_deriv in zip(
            reversed(self.state.layers[:-1]), reversed(jacobians), node_derivs
        ):
            bias_grad = jacobian @ node_deriv
            weight_grad = np.outer(bias_grad, prev)
            parts.append(weight_grad.ravel(order=WEIGHT_ORDER))
            parts.append(bias_grad)
        return np.concatenate(parts)
