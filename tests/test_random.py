"""Tests for generator spawning and Bernoulli sampling."""

import numpy as np
import pytest

from lshkde.utils.random import (
    rng_key,
    spawn_generators,
    uniform,
    bernoulli_sample,
    random_seed,
)


def test_rng_key_passes_generators_through():
    gen = np.random.default_rng(1)
    assert rng_key(gen) is gen
    assert isinstance(rng_key(3), np.random.Generator)


def test_spawned_generators_are_reproducible_and_independent():
    first = [g.random(4) for g in spawn_generators(42, 3)]
    second = [g.random(4) for g in spawn_generators(42, 3)]
    for a, b in zip(first, second):
        np.testing.assert_array_equal(a, b)
    assert not np.array_equal(first[0], first[1])
    assert spawn_generators(42, 0) == []


def test_spawn_from_generator():
    gens = spawn_generators(np.random.default_rng(7), 2)
    assert len(gens) == 2
    assert all(isinstance(g, np.random.Generator) for g in gens)


def test_uniform_range_and_shape():
    x = uniform(0, (10, 3), minval=2.0, maxval=3.0)
    assert x.shape == (10, 3)
    assert np.all((x >= 2.0) & (x < 3.0))


def test_bernoulli_extremes():
    assert bernoulli_sample(0, 100, 0.0).size == 0
    np.testing.assert_array_equal(bernoulli_sample(0, 100, 1.0), np.arange(100))
    assert bernoulli_sample(0, 0, 0.5).size == 0


def test_bernoulli_rate():
    idx = bernoulli_sample(11, 100_000, 0.25)
    assert np.all(np.diff(idx) > 0)
    assert abs(idx.size / 100_000 - 0.25) < 0.01


def test_bernoulli_rejects_bad_probability():
    with pytest.raises(ValueError):
        bernoulli_sample(0, 10, 1.5)


def test_random_seed_is_int():
    assert random_seed(5) == random_seed(5)
    assert 0 <= random_seed() < 2**63
