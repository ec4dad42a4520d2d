# lshkde/density/exact.py
"""
Exact Gaussian KDE baseline.

Brute force: every query is compared against every data point. Queries are
split into one contiguous chunk per worker; each chunk is evaluated in row
blocks bounded by ``config.max_block_elements``. With JAX installed the block
kernel sum is JIT-compiled, otherwise it runs on NumPy.
"""

from __future__ import annotations
from typing import Optional
import numpy as np

from ..utils.config import get_config
from ..utils.jax_utils import JAX_AVAILABLE, maybe_jit, to_numpy, x64_enabled
from ..utils.logging import Timer
from ..utils.parallel import WorkerPool
from .base import _as_dataset, _as_queries, _check_bandwidth

if JAX_AVAILABLE:
    import jax.numpy as jnp


def _block_density_numpy(Q: np.ndarray, X: np.ndarray, a: float) -> np.ndarray:
    diff = Q[:, None, :] - X[None, :, :]
    d2 = np.einsum("mnd,mnd->mn", diff, diff)
    return np.exp(-a * d2).mean(axis=1)


def _block_density_jax(Q, X, a):
    diff = Q[:, None, :] - X[None, :, :]
    d2 = jnp.sum(diff * diff, axis=-1)
    return jnp.mean(jnp.exp(-a * d2), axis=1)


class ExactEngine:
    """
    Exact Gaussian KDE.

    Parameters
    ----------
    data : array_like
        Dataset, shape (N, D)
    a : float
        Gaussian bandwidth
    num_workers : int, optional
        Worker pool size; defaults to the package config or hardware parallelism
    use_jax : bool, optional
        JIT the kernel sums; defaults to ``config.use_jax_jit`` when JAX is installed
        and runs at the dataset precision
    """

    def __init__(self, data, a: float, *, num_workers: Optional[int] = None,
                 use_jax: Optional[bool] = None):
        cfg = get_config()
        self.a = _check_bandwidth(a)
        self.data = _as_dataset(data)
        self.n, self.d = int(self.data.shape[0]), int(self.data.shape[1])
        self.num_workers = cfg.resolve_num_workers(num_workers)
        self._max_block_elements = int(cfg.max_block_elements)
        self._verbose = bool(cfg.verbose)

        if use_jax is None:
            use_jax = cfg.use_jax_jit
        # A float64 dataset only goes through JAX when JAX computes in float64.
        self.use_jax = (bool(use_jax) and JAX_AVAILABLE
                        and (self.data.dtype == np.float32 or x64_enabled()))
        self._block_density = (maybe_jit(_block_density_jax) if self.use_jax
                               else _block_density_numpy)

    def __repr__(self) -> str:
        return f"ExactEngine(n={self.n}, d={self.d}, a={self.a}, use_jax={self.use_jax})"

    def _chunk_density(self, Q: np.ndarray) -> np.ndarray:
        """Exact densities for a contiguous chunk of queries."""
        rows = max(1, self._max_block_elements // max(1, self.n * self.d))
        out = np.empty(Q.shape[0], dtype=np.float64)
        for start in range(0, Q.shape[0], rows):
            block = Q[start:start + rows].astype(self.data.dtype, copy=False)
            out[start:start + rows] = to_numpy(self._block_density(block, self.data, self.a),
                                               dtype=np.float64)
        return out

    def query(self, points) -> np.ndarray:
        """
        Exact mean kernel value at each query point.

        Parameters
        ----------
        points : array_like
            Query points, shape (M, D), or one point of shape (D,)

        Returns
        -------
        np.ndarray
            Shape (M,), in input order
        """
        Q = _as_queries(points, self.d)
        m = int(Q.shape[0])
        if m == 0:
            return np.zeros(0, dtype=np.float64)

        with Timer("Exact query", verbose=self._verbose):
            # Too few queries to be worth splitting.
            if m < self.num_workers:
                return self._chunk_density(Q)

            chunks = np.array_split(Q, self.num_workers, axis=0)
            with WorkerPool(self.num_workers) as pool:
                parts = pool.run(self._chunk_density, chunks, desc="Exact KDE")
            return np.concatenate(parts)
