"""Configuration values and config-file loading for the digit classifier."""
from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping

IMAGE_SIZE = 28
NUM_CLASSES = 10


class ConfigError(ValueError):
    """Raised when the configuration file is missing keys or holds invalid values."""


@dataclass(frozen=True)
class DatasetPaths:
    labels: Path
    images: Path


@dataclass(frozen=True)
class ProjectConfig:
    train: DatasetPaths
    test: DatasetPaths
    hidden_layers: tuple[int, ...]
    learning_rate: float
    momentum_decay: float
    batch_size: int
    epochs: int
    cost: str = "categorical_cross_entropy"
    workers: int = 16
    parameters_path: Path = Path("network")
    seed: int | None = None

    @property
    def layer_sizes(self) -> tuple[int, ...]:
        return (IMAGE_SIZE**2, *self.hidden_layers, NUM_CLASSES)


def _require(payload: Mapping[str, Any], key: str, context: str = "") -> Any:
    if key not in payload:
        raise ConfigError(f"Missing config key '{context}{key}'")
    return payload[key]


def _positive_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"'{key}' must be a positive integer, got {value!r}")
    return value


def _number(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"'{key}' must be a number, got {value!r}")
    return float(value)


def _dataset_paths(payload: Mapping[str, Any], split: str, base_dir: Path) -> DatasetPaths:
    data = _require(payload, "data")
    entry = _require(data, split, "data.")
    labels = Path(_require(entry, "labels", f"data.{split}."))
    images = Path(_require(entry, "images", f"data.{split}."))
    return DatasetPaths(labels=base_dir / labels, images=base_dir / images)


def parse_config(payload: Mapping[str, Any], base_dir: Path = Path(".")) -> ProjectConfig:
    hidden = _require(payload, "hidden_layers")
    if not isinstance(hidden, list):
        raise ConfigError(f"'hidden_layers' must be a list, got {hidden!r}")
    hidden_layers = tuple(_positive_int(size, "hidden_layers") for size in hidden)

    cost = payload.get("cost", "categorical_cross_entropy")
    if cost not in ("categorical_cross_entropy", "squared_error"):
        raise ConfigError(f"Unknown cost function {cost!r}")

    seed = payload.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise ConfigError(f"'seed' must be an integer, got {seed!r}")

    return ProjectConfig(
        train=_dataset_paths(payload, "train", base_dir),
        test=_dataset_paths(payload, "test", base_dir),
        hidden_layers=hidden_layers,
        learning_rate=_number(_require(payload, "learning_rate"), "learning_rate"),
        momentum_decay=_number(_require(payload, "momentum_decay"), "momentum_decay"),
        batch_size=_positive_int(_require(payload, "batch_size"), "batch_size"),
        epochs=_positive_int(_require(payload, "epochs"), "epochs"),
        cost=cost,
        workers=_positive_int(payload.get("workers", 16), "workers"),
        parameters_path=base_dir / Path(payload.get("parameters_path", "network")),
        seed=seed,
    )


def load_config(path: Path) -> ProjectConfig:
    try:
        payload = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file {path} is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return parse_config(payload, base_dir=path.parent)


_OVERRIDE_VALIDATORS = {
    "epochs": _positive_int,
    "batch_size": _positive_int,
    "workers": _positive_int,
    "learning_rate": _number,
}


def apply_overrides(config: ProjectConfig, **overrides: Any) -> ProjectConfig:
    """Return ``config`` with the non-``None`` overrides validated and applied."""
    changes = {}
    for key, value in overrides.items():
        if value is None:
            continue
        if key not in _OVERRIDE_VALIDATORS:
            raise ConfigError(f"'{key}' cannot be overridden")
        changes[key] = _OVERRIDE_VALIDATORS[key](value, key)
    return replace(config, **changes)
