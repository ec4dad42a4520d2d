# lshkde/density/kernels.py
"""
Gaussian kernel and squared-distance helpers.

The kernel is parameterised by the bandwidth ``a`` as
``k(a, d^2) = exp(-a * d^2)``; it is unnormalised, so ``k(a, 0) == 1``.
"""

from __future__ import annotations
import numpy as np
from scipy.spatial.distance import cdist

from ..exceptions import InvalidArgumentError


def gaussian_kernel(a: float, squared_distance):
    """
    Gaussian kernel of a squared distance.

    Parameters
    ----------
    a : float
        Bandwidth, assumed positive (validated by the engines)
    squared_distance : float or array_like
        Squared Euclidean distance(s)

    Returns
    -------
    float or np.ndarray
        ``exp(-a * squared_distance)``
    """
    if np.ndim(squared_distance) == 0:
        return float(np.exp(-a * float(squared_distance)))
    return np.exp(-a * np.asarray(squared_distance, dtype=np.float64))


def squared_distance(u, v) -> float:
    """Squared Euclidean distance between two points of equal dimension."""
    u = np.asarray(u, dtype=np.float64).ravel()
    v = np.asarray(v, dtype=np.float64).ravel()
    if u.shape != v.shape:
        raise InvalidArgumentError(
            f"dimension mismatch: {u.shape[0]} vs {v.shape[0]}")
    diff = u - v
    return float(np.dot(diff, diff))


def gaussian_kernel_points(a: float, u, v) -> float:
    """Gaussian kernel between two points."""
    return gaussian_kernel(a, squared_distance(u, v))


def pairwise_squared_distances(Q: np.ndarray, X: np.ndarray) -> np.ndarray:
    """
    Squared distances between every query row and every data row.

    Parameters
    ----------
    Q : np.ndarray
        Query points, shape (M, D)
    X : np.ndarray
        Data points, shape (S, D)

    Returns
    -------
    np.ndarray
        Shape (M, S); identical rows give exactly zero
    """
    if Q.shape[1] != X.shape[1]:
        raise InvalidArgumentError(
            f"dimension mismatch: queries have {Q.shape[1]} columns, data has {X.shape[1]}")
    if Q.shape[0] == 0 or X.shape[0] == 0:
        return np.zeros((Q.shape[0], X.shape[0]), dtype=np.float64)
    return cdist(Q, X, metric="sqeuclidean")
