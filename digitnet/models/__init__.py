"""Network model and its numeric building blocks."""
from .functions import Activation, Cost
from .network import LayerParams, Network, NetworkConfig, NetworkState, SharedNetworkConfig

__all__ = [
    "Activation",
    "Cost",
    "LayerParams",
    "Network",
    "NetworkConfig",
    "NetworkState",
    "SharedNetworkConfig",
]
