"""Tests for the E2LSH near-neighbour index."""

import numpy as np
import pytest

from lshkde import InvalidArgumentError
from lshkde.density.lsh import E2LSH, LSHFunction, collision_probability


def test_collision_probability_bounds():
    assert collision_probability(0.0) == 1.0
    values = [collision_probability(c) for c in (0.1, 0.5, 1.0, 2.0, 4.0, 8.0)]
    assert all(0.0 < v < 1.0 for v in values)
    assert all(a > b for a, b in zip(values, values[1:]))


def test_wider_buckets_collide_more():
    assert collision_probability(1.0, w=8.0) > collision_probability(1.0, w=4.0)


def test_lsh_function_shapes():
    fn = LSHFunction(5, 3, np.random.default_rng(0))
    keys = fn.apply(np.zeros((7, 3)))
    assert keys.shape == (7, 5)
    assert keys.dtype == np.int64


def test_indexed_point_finds_itself():
    rng = np.random.default_rng(1)
    points = rng.standard_normal((300, 4))
    index = E2LSH(3, 5, points, np.random.default_rng(2))
    assert len(index) == 300
    for i in (0, 17, 299):
        hits = index.query(points[i])
        assert i in hits
        assert np.all(np.diff(hits) > 0)
        assert hits.max() < 300


def test_far_query_has_few_candidates():
    rng = np.random.default_rng(3)
    points = rng.standard_normal((200, 2))
    index = E2LSH(4, 3, points, np.random.default_rng(4))
    assert index.query(np.array([1e6, -1e6])).size == 0


def test_invalid_parameters():
    points = np.zeros((4, 2))
    with pytest.raises(InvalidArgumentError):
        E2LSH(0, 1, points, np.random.default_rng(0))
    index = E2LSH(1, 1, points, np.random.default_rng(0))
    with pytest.raises(InvalidArgumentError):
        index.query(np.zeros(3))
