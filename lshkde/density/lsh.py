# lshkde/density/lsh.py
"""
Euclidean locality-sensitive hashing (E2LSH).

Each table hashes a point with K concatenated p-stable projections
``floor((a . x + b) / w)``; points sharing a bucket with the query in any
of the L tables are returned as near-neighbour candidates. The radius
guarantee is probabilistic: callers must re-check distances.
"""

from __future__ import annotations
from typing import Dict, List
import math
import numpy as np
from scipy.stats import norm

from ..exceptions import InvalidArgumentError

DEFAULT_BUCKET_WIDTH = 4.0


def collision_probability(c: float, w: float = DEFAULT_BUCKET_WIDTH) -> float:
    """
    Probability that two points at distance ``c`` share a bucket under one
    p-stable hash of bucket width ``w``.

    Parameters
    ----------
    c : float
        Distance between the points
    w : float
        Bucket width

    Returns
    -------
    float
        Collision probability in (0, 1]
    """
    if c < 1e-5:
        return 1.0
    t = w / c
    return float(1.0 - 2.0 * norm.cdf(-t)
                 - (2.0 / (math.sqrt(2.0 * math.pi) * t)) * (1.0 - math.exp(-(t * t) / 2.0)))


class LSHFunction:
    """
    K concatenated p-stable hash functions for one table.

    Parameters
    ----------
    K : int
        Number of projections
    dimension : int
        Dimension of hashed points
    rng : np.random.Generator
        Source of the projection directions and offsets
    bucket_width : float
        Bucket width w
    """

    def __init__(self, K: int, dimension: int, rng: np.random.Generator,
                 bucket_width: float = DEFAULT_BUCKET_WIDTH):
        self.K = int(K)
        self.dimension = int(dimension)
        self.bucket_width = float(bucket_width)
        self.directions = rng.standard_normal((self.K, self.dimension))
        self.offsets = rng.uniform(0.0, self.bucket_width, self.K)

    def apply(self, points: np.ndarray) -> np.ndarray:
        """Hash rows of ``points`` (N, D) to integer keys (N, K)."""
        proj = points @ self.directions.T + self.offsets
        return np.floor(proj / self.bucket_width).astype(np.int64)


class E2LSH:
    """
    L hash tables of K projections each over a fixed point set.

    Parameters
    ----------
    K : int
        Hash functions per table
    L : int
        Number of tables
    points : np.ndarray
        Points to index, shape (N, D); only their keys are retained
    rng : np.random.Generator
        Source of the hash functions
    bucket_width : float
        Bucket width w
    """

    def __init__(self, K: int, L: int, points: np.ndarray, rng: np.random.Generator,
                 bucket_width: float = DEFAULT_BUCKET_WIDTH):
        if K < 1 or L < 1:
            raise InvalidArgumentError(f"K and L must be positive, got K={K}, L={L}")
        points = np.asarray(points)
        if points.ndim != 2:
            raise InvalidArgumentError(f"points must be (N, D), got shape {points.shape}")

        self.K = int(K)
        self.L = int(L)
        self.size = int(points.shape[0])
        self.dimension = int(points.shape[1])
        self.dtype = points.dtype
        self.functions: List[LSHFunction] = []
        self.tables: List[Dict[bytes, np.ndarray]] = []

        for _ in range(self.L):
            fn = LSHFunction(self.K, self.dimension, rng, bucket_width)
            self.functions.append(fn)
            self.tables.append(self._build_table(fn.apply(points)))

    @staticmethod
    def _build_table(keys: np.ndarray) -> Dict[bytes, np.ndarray]:
        """Group point indices by their (K,) key row."""
        if keys.shape[0] == 0:
            return {}
        uniq, inverse, counts = np.unique(keys, axis=0, return_inverse=True, return_counts=True)
        order = np.argsort(inverse.ravel(), kind="stable")
        groups = np.split(order, np.cumsum(counts)[:-1])
        return {row.tobytes(): idx for row, idx in zip(uniq, groups)}

    def __len__(self) -> int:
        return self.size

    def query(self, q: np.ndarray) -> np.ndarray:
        """
        Indices of points that collide with ``q`` in at least one table.

        Returns
        -------
        np.ndarray
            Sorted, deduplicated int64 row indices of the indexed points
        """
        q = np.asarray(q, dtype=self.dtype).reshape(1, -1)
        if q.shape[1] != self.dimension:
            raise InvalidArgumentError(
                f"dimension mismatch: query has {q.shape[1]} columns, index has {self.dimension}")

        hits = []
        for fn, table in zip(self.functions, self.tables):
            bucket = table.get(np.ascontiguousarray(fn.apply(q)[0]).tobytes())
            if bucket is not None:
                hits.append(bucket)
        if not hits:
            return np.empty(0, dtype=np.int64)
        return np.unique(np.concatenate(hits)).astype(np.int64, copy=False)
