"""Tests for the Gaussian kernel and distance helpers."""

import math

import numpy as np
import pytest

from lshkde import InvalidArgumentError
from lshkde.density.kernels import (
    gaussian_kernel,
    gaussian_kernel_points,
    squared_distance,
    pairwise_squared_distances,
)


def test_kernel_at_zero_distance_is_one():
    assert gaussian_kernel(0.7, 0.0) == 1.0


def test_kernel_scalar_value():
    assert gaussian_kernel(2.0, 3.0) == pytest.approx(math.exp(-6.0))
    assert isinstance(gaussian_kernel(2.0, 3.0), float)


def test_kernel_vectorised():
    d2 = np.array([0.0, 1.0, 2.0])
    out = gaussian_kernel(0.5, d2)
    assert out.shape == (3,)
    np.testing.assert_allclose(out, np.exp(-0.5 * d2))


def test_squared_distance():
    assert squared_distance([0.0, 0.0], [3.0, 4.0]) == pytest.approx(25.0)
    assert gaussian_kernel_points(1.0, [1.0, 1.0], [1.0, 1.0]) == 1.0


def test_squared_distance_dimension_mismatch():
    with pytest.raises(InvalidArgumentError):
        squared_distance([0.0, 0.0], [1.0, 2.0, 3.0])


def test_pairwise_exact_zero_for_identical_rows():
    rng = np.random.default_rng(0)
    X = rng.standard_normal((5, 4))
    d2 = pairwise_squared_distances(X, X)
    assert d2.shape == (5, 5)
    assert np.all(np.diag(d2) == 0.0)
    assert d2[0, 1] == pytest.approx(squared_distance(X[0], X[1]))


def test_pairwise_empty_and_mismatch():
    X = np.ones((3, 2))
    assert pairwise_squared_distances(np.empty((0, 2)), X).shape == (0, 3)
    with pytest.raises(InvalidArgumentError):
        pairwise_squared_distances(np.ones((1, 3)), X)
