"""Reading and writing the flat parameter file."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

import numpy as np

from .models.functions import Cost
from .models.network import Network, NetworkConfig

logger = logging.getLogger(__name__)

PARAMETER_DTYPE = np.dtype(">f8")


class ParameterFileError(ValueError):
    """Raised when a parameter file cannot belong to the network being loaded."""


def save_parameters(config: NetworkConfig, target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(config.flatten().astype(PARAMETER_DTYPE).tobytes())
    logger.debug("Saved %d parameters to %s", config.parameter_count, target)


def read_parameters(source: Path) -> np.ndarray:
    raw = source.read_bytes()
    if len(raw) % PARAMETER_DTYPE.itemsize:
        raise ParameterFileError(
            f"{source}: size {len(raw)} is not a multiple of {PARAMETER_DTYPE.itemsize} bytes"
        )
    return np.frombuffer(raw, dtype=PARAMETER_DTYPE).astype(np.float64)


def load_parameters(config: NetworkConfig, source: Path) -> bool:
    """Load ``source`` into ``config`` if it exists; return whether anything was loaded.

    Files shorter than the parameter count only overwrite a prefix.
    """
    if not source.exists():
        return False
    values = read_parameters(source)
    if values.size > config.parameter_count:
        raise ParameterFileError(
            f"{source}: holds {values.size} parameters, network has {config.parameter_count}"
        )
    config.load(values)
    if values.size < config.parameter_count:
        logger.warning(
            "%s holds %d of %d parameters; the remainder keeps its initial values",
            source,
            values.size,
            config.parameter_count,
        )
    else:
        logger.info("Loaded parameters from %s", source)
    return True


def initialize_network(
    layer_sizes: Sequence[int],
    parameters_path: Path | None = None,
    cost: Cost = Cost.CATEGORICAL_CROSS_ENTROPY,
    rng: np.random.Generator | None = None,
) -> Network:
    network = Network.create(layer_sizes, cost=cost, rng=rng)
    if parameters_path is not None:
        with network.shared.write() as conf:
            if not load_parameters(conf, parameters_path):
                logger.info("No parameter file at %s; starting from random weights", parameters_path)
    return network
