"""Shared fixtures for the lshkde test suite."""

import numpy as np
import pytest

from lshkde.utils.config import reset_config


@pytest.fixture(autouse=True)
def _fresh_config():
    """Every test starts and ends with the default package configuration."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def gaussian_data():
    """1000 standard normal points in 2D."""
    rng = np.random.default_rng(12345)
    return rng.standard_normal((1000, 2))


@pytest.fixture
def center_queries():
    """Query points concentrated where the Gaussian dataset is dense."""
    rng = np.random.default_rng(54321)
    return 0.5 * rng.standard_normal((20, 2))
