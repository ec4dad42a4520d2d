"""Tests for the exact Gaussian KDE baseline."""

import numpy as np
import pytest

from lshkde import ExactEngine, InvalidArgumentError


def brute_force(data, a, queries):
    d2 = ((queries[:, None, :] - data[None, :, :]) ** 2).sum(axis=-1)
    return np.exp(-a * d2).mean(axis=1)


def test_single_point_dataset_returns_one_over_n():
    engine = ExactEngine([[1.0, 2.0]], 0.5)
    assert engine.n == 1
    np.testing.assert_array_equal(engine.query([[1.0, 2.0]]), [1.0])


def test_matches_brute_force(gaussian_data):
    queries = np.random.default_rng(1).standard_normal((30, 2))
    engine = ExactEngine(gaussian_data, 0.8)
    np.testing.assert_allclose(engine.query(queries), brute_force(gaussian_data, 0.8, queries),
                               rtol=1e-4)


def test_numpy_path_is_exact(gaussian_data):
    queries = np.random.default_rng(2).standard_normal((10, 2))
    engine = ExactEngine(gaussian_data, 1.3, use_jax=False)
    assert not engine.use_jax
    np.testing.assert_allclose(engine.query(queries), brute_force(gaussian_data, 1.3, queries),
                               rtol=1e-12)


def test_deterministic(gaussian_data):
    queries = np.random.default_rng(3).standard_normal((40, 2))
    engine = ExactEngine(gaussian_data, 1.0, num_workers=4)
    np.testing.assert_array_equal(engine.query(queries), engine.query(queries))


def test_chunking_preserves_order(gaussian_data):
    queries = np.random.default_rng(4).standard_normal((50, 2))
    serial = ExactEngine(gaussian_data, 1.0, num_workers=1).query(queries)
    parallel = ExactEngine(gaussian_data, 1.0, num_workers=4).query(queries)
    np.testing.assert_allclose(serial, parallel, rtol=1e-5)


def test_small_blocks(gaussian_data):
    from lshkde import configure
    configure(max_block_elements=100)
    queries = np.random.default_rng(5).standard_normal((7, 2))
    engine = ExactEngine(gaussian_data, 1.0, use_jax=False)
    np.testing.assert_allclose(engine.query(queries), brute_force(gaussian_data, 1.0, queries),
                               rtol=1e-12)


def test_single_point_query_and_empty_query(gaussian_data):
    engine = ExactEngine(gaussian_data, 1.0)
    assert engine.query(np.zeros(2)).shape == (1,)
    assert engine.query(np.empty((0, 2))).shape == (0,)


@pytest.mark.parametrize("a", [0.0, -1.0, float("nan"), float("inf")])
def test_invalid_bandwidth(a):
    with pytest.raises(InvalidArgumentError):
        ExactEngine(np.zeros((3, 2)), a)


def test_invalid_data_and_queries():
    with pytest.raises(InvalidArgumentError):
        ExactEngine(np.empty((0, 2)), 1.0)
    with pytest.raises(InvalidArgumentError):
        ExactEngine(np.zeros((2, 2, 2)), 1.0)
    engine = ExactEngine(np.zeros((3, 2)), 1.0)
    with pytest.raises(InvalidArgumentError):
        engine.query(np.zeros((4, 3)))


def test_far_query_keeps_double_precision():
    # exp(-196) is far below the float32 range but representable in float64.
    data = [[0.0, 0.0], [1e-4, 0.0]]
    q = [[14.0, 0.0]]
    default = ExactEngine(data, 1.0).query(q)
    reference = ExactEngine(data, 1.0, use_jax=False).query(q)
    assert reference[0] > 0.0
    assert default[0] > 0.0
    np.testing.assert_allclose(default, reference, rtol=1e-6)
