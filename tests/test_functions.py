import numpy as np
import pytest

from digitnet.models.functions import Activation, Cost


def test_relu_clamps_negatives():
    z = np.array([-2.0, 0.0, 3.5])
    np.testing.assert_array_equal(Activation.RELU.apply(z), [0.0, 0.0, 3.5])


def test_relu_derivative_treats_zero_as_active():
    jacobian = Activation.RELU.derivative(np.array([-1.0, 0.0, 2.0]))
    np.testing.assert_array_equal(jacobian, np.diag([0.0, 1.0, 1.0]))


@pytest.mark.parametrize("z", [np.array([0.0, 0.5]), np.array([-3.0, 1.0, 7.0]), np.array([1000.0, -1000.0, 999.0])])
def test_softmax_is_a_distribution(z):
    probs = Activation.SOFTMAX.apply(z)
    assert probs.sum() == pytest.approx(1.0)
    assert np.all((probs >= 0.0) & (probs <= 1.0))


def test_softmax_jacobian_matches_finite_differences():
    z = np.array([0.3, -1.2, 0.8, 0.0])
    eps = 1e-6
    numeric = np.zeros((z.size, z.size))
    for j in range(z.size):
        step = np.zeros_like(z)
        step[j] = eps
        numeric[:, j] = (Activation.SOFTMAX.apply(z + step) - Activation.SOFTMAX.apply(z - step)) / (2 * eps)
    np.testing.assert_allclose(Activation.SOFTMAX.derivative(z), numeric, atol=1e-8)


def test_softmax_jacobian_closed_form():
    z = np.array([0.0, 0.5])
    probs = Activation.SOFTMAX.apply(z)
    expected = np.diag(probs) - np.outer(probs, probs)
    np.testing.assert_allclose(Activation.SOFTMAX.derivative(z), expected)


def test_squared_error():
    actual = np.array([0.25, 0.75])
    expected = np.array([1.0, 0.0])
    assert Cost.SQUARED_ERROR.evaluate(actual, expected) == pytest.approx(0.5625 + 0.5625)
    np.testing.assert_allclose(Cost.SQUARED_ERROR.derivative(actual, expected), [-1.5, 1.5])


def test_cross_entropy():
    actual = np.array([0.25, 0.75])
    expected = np.array([0.0, 1.0])
    assert Cost.CATEGORICAL_CROSS_ENTROPY.evaluate(actual, expected) == pytest.approx(-np.log(0.75))
    np.testing.assert_allclose(Cost.CATEGORICAL_CROSS_ENTROPY.derivative(actual, expected), [0.0, -1.0 / 0.75])


def test_cross_entropy_is_unguarded_at_zero_probability():
    with np.errstate(divide="ignore", invalid="ignore"):
        cost = Cost.CATEGORICAL_CROSS_ENTROPY.evaluate(np.array([0.0, 1.0]), np.array([1.0, 0.0]))
        deriv = Cost.CATEGORICAL_CROSS_ENTROPY.derivative(np.array([0.0, 1.0]), np.array([1.0, 0.0]))
    assert not np.isfinite(cost)
    assert not np.isfinite(deriv[0])
