# lshkde/density/base.py
"""
Input validation shared by the density engines.

Both engines take a dense (N, D) dataset and a Gaussian bandwidth ``a`` and
answer ``query(points) -> (M,)`` density values in input order.
"""

from __future__ import annotations
import math
import numpy as np

from ..exceptions import InvalidArgumentError
from ..utils.config import get_config


def _as_dataset(data) -> np.ndarray:
    """Read-only (N, D) copy of the dataset in the configured dtype."""
    dtype = getattr(np, get_config().dtype)
    X = np.array(data, dtype=dtype, copy=True)
    if X.ndim == 1:
        X = X.reshape(1, -1)
    if X.ndim != 2:
        raise InvalidArgumentError(f"data must be (N, D), got shape {X.shape}")
    if X.shape[0] == 0 or X.shape[1] == 0:
        raise InvalidArgumentError(f"data must be non-empty, got shape {X.shape}")
    if not np.all(np.isfinite(X)):
        raise InvalidArgumentError("data contains NaN or infinite values")
    X.setflags(write=False)
    return X


def _as_queries(points, dimension: int) -> np.ndarray:
    """(M, D) view of the query points, checked against the dataset dimension."""
    Q = np.asarray(points, dtype=np.float64)
    if Q.size == 0 and Q.ndim <= 2:
        return np.empty((0, dimension), dtype=np.float64)
    if Q.ndim == 1:
        Q = Q.reshape(1, -1)
    if Q.ndim != 2:
        raise InvalidArgumentError(f"points must be (M, D), got shape {Q.shape}")
    if Q.shape[1] != dimension:
        raise InvalidArgumentError(
            f"dimension mismatch: queries have {Q.shape[1]} columns, data has {dimension}")
    return Q


def _check_bandwidth(a) -> float:
    a = float(a)
    if not (math.isfinite(a) and a > 0):
        raise InvalidArgumentError(f"bandwidth a must be positive and finite, got {a}")
    return a
