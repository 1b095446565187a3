"""Public API for the digit classifier."""
from .config import IMAGE_SIZE, NUM_CLASSES, ConfigError, ProjectConfig, load_config
from .data.dataset import DatasetFormatError, DigitDataset
from .inference import predict_bitmap
from .models import Activation, Cost, Network, NetworkConfig
from .persistence import ParameterFileError, initialize_network
from .training import Trainer, TrainingConfig
from .workers import WorkerError, WorkerPool

__all__ = [
    "IMAGE_SIZE",
    "NUM_CLASSES",
    "ConfigError",
    "ProjectConfig",
    "load_config",
    "DatasetFormatError",
    "DigitDataset",
    "predict_bitmap",
    "Activation",
    "Cost",
    "Network",
    "NetworkConfig",
    "ParameterFileError",
    "initialize_network",
    "Trainer",
    "TrainingConfig",
    "WorkerError",
    "WorkerPool",
]
