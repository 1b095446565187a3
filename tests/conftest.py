import numpy as np
import pytest

from digitnet.models.functions import Activation, Cost
from digitnet.models.network import LayerParams, Network, NetworkConfig


def make_golden_config(cost: Cost = Cost.CATEGORICAL_CROSS_ENTROPY) -> NetworkConfig:
    return NetworkConfig(
        layers=[
            LayerParams(
                weights=np.array([[0.5, -0.5], [-1.0, 1.0], [0.25, 0.0]]),
                biases=np.array([0.0, 0.5, 0.0]),
                activation=Activation.RELU,
            ),
            LayerParams(
                weights=np.array([[1.0, 2.0, -2.0], [0.0, 1.0, 2.0]]),
                biases=np.array([0.0, 0.0]),
                activation=Activation.SOFTMAX,
            ),
        ],
        cost=cost,
    )


@pytest.fixture
def golden_network():
    return Network.from_config(make_golden_config())
