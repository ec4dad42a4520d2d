# lshkde/density/hash_unit.py
"""
CKNS hash units.

A hash unit serves one (density guess, distance level) pair. It keeps each
dataset point with probability ``p = 2^-j * 2^-log_nmu`` and, when the
sample is large enough, indexes it with E2LSH tuned so that points within
``r_j`` of a query are found with good probability. A query sums the
importance-weighted kernel values of sampled points in the annulus
``(r_{j-1}, r_j]`` around it.

Notation
--------
n        number of data points
log_nmu  guessed log2(n * mu), mu being the query's density
J        number of distance levels for a guess
j        level index, 1 <= j <= J
"""

from __future__ import annotations
from typing import Optional, Tuple
import math
import numpy as np

from ..exceptions import InternalInvariantError
from ..utils.random import bernoulli_sample
from .kernels import gaussian_kernel, pairwise_squared_distances
from .lsh import E2LSH, collision_probability, DEFAULT_BUCKET_WIDTH

LOG_TWO = math.log(2.0)

HASH_UNIT_CUTOFF = 1000     # samples up to this size are scanned, not hashed
K2_CONSTANT = 1.0           # L = C2 * log2(n) * 2^phi_j


# ---------- CKNS parameters ----------

def ckns_J(n: int, log_nmu: int) -> int:
    """Number of distance levels J = ceil(log2 n) - log_nmu."""
    if n < 1 or not log_nmu < math.log2(n):
        raise InternalInvariantError(
            f"log_nmu={log_nmu} must be below log2(n)={math.log2(max(n, 1)):.3f}")
    return int(math.ceil(math.log2(n))) - int(log_nmu)


def ckns_p_sampling(j: int, log_nmu: int) -> float:
    """Sampling probability 2^-j * 2^-log_nmu for level j."""
    return 2.0 ** (-j) * 2.0 ** (-log_nmu)


def ckns_gaussian_rj_squared(j: int, a: float) -> float:
    """Squared outer radius of level j: the kernel value there is 2^-j."""
    return j * LOG_TWO / a


def ckns_gaussian_create_lsh_params(J: int, j: int, n: int, a: float,
                                    bucket_width: float = DEFAULT_BUCKET_WIDTH,
                                    k2_constant: float = K2_CONSTANT) -> Tuple[int, int]:
    """
    E2LSH parameters for level j of a guess with J levels.

    Returns
    -------
    (K, L) : tuple of int
        Hash functions per table and number of tables
    """
    r_j = math.sqrt(ckns_gaussian_rj_squared(j, a))
    p_j = collision_probability(r_j, bucket_width)
    phi_j = math.ceil((j / J) * (J - j + 1))
    if p_j >= 1.0:
        k_j = 1
    else:
        k_j = max(1, int(math.floor(-phi_j / math.log2(p_j))))
    L = int(math.ceil(k2_constant * math.log2(n) * 2.0 ** phi_j))
    return k_j, max(1, L)


# ---------- Hash unit ----------

class CKNSHashUnit:
    """
    One sampled, optionally LSH-indexed, level of the CKNS structure.

    Parameters
    ----------
    a : float
        Gaussian bandwidth
    data : np.ndarray
        Full read-only dataset, shape (N, D); the unit keeps a reference to it
        and the indices of its sampled rows
    log_nmu : int
        Density guess log2(n * mu)
    j : int
        Distance level, 1 <= j <= J(n, log_nmu)
    rng : np.random.Generator
        Generator owned by this unit's construction task
    cutoff : int
        Largest sample that is scanned instead of hashed
    bucket_width, k2_constant : float
        E2LSH tuning
    """

    def __init__(self, a: float, data: np.ndarray, log_nmu: int, j: int,
                 rng: np.random.Generator,
                 cutoff: int = HASH_UNIT_CUTOFF,
                 bucket_width: float = DEFAULT_BUCKET_WIDTH,
                 k2_constant: float = K2_CONSTANT):
        n = int(data.shape[0])
        J = ckns_J(n, log_nmu)
        if not 1 <= j <= J:
            raise InternalInvariantError(f"level j={j} outside 1..{J} for log_nmu={log_nmu}")

        self.a = float(a)
        self.log_nmu = int(log_nmu)
        self.j = int(j)
        self.n = n
        self.p_sampling = ckns_p_sampling(j, log_nmu)
        self._rj_squared = ckns_gaussian_rj_squared(j, a)
        # r_0 = 0, so points coinciding with the query fall in no level.
        self._rj_minus_1_squared = ckns_gaussian_rj_squared(j - 1, a) if j > 1 else 0.0

        self.data = data
        self.indices = bernoulli_sample(rng, n, self.p_sampling)
        self.indices.setflags(write=False)
        self.num_sampled = int(self.indices.shape[0])
        self.index: Optional[E2LSH] = None

        if self.num_sampled <= cutoff:
            self.below_cutoff = True
        else:
            self.below_cutoff = False
            K, L = ckns_gaussian_create_lsh_params(J, j, n, a, bucket_width, k2_constant)
            self.index = E2LSH(K, L, data[self.indices], rng, bucket_width=bucket_width)

    @property
    def points(self) -> np.ndarray:
        """Sampled rows, gathered from the shared dataset on each access."""
        return self.data[self.indices]

    def __repr__(self) -> str:
        kind = "scan" if self.below_cutoff else f"lsh(K={self.index.K}, L={self.index.L})"
        return (f"CKNSHashUnit(log_nmu={self.log_nmu}, j={self.j}, "
                f"sampled={self.num_sampled}, {kind})")

    def _annulus_sum(self, d2: np.ndarray) -> np.ndarray:
        """Importance-weighted kernel sum over distances inside the annulus (last axis)."""
        inside = (d2 > self._rj_minus_1_squared) & (d2 <= self._rj_squared)
        return np.where(inside, gaussian_kernel(self.a, d2), 0.0).sum(axis=-1) / self.p_sampling

    def query_many(self, Q: np.ndarray) -> np.ndarray:
        """
        Level estimates for several query points.

        Parameters
        ----------
        Q : np.ndarray
            Query points, shape (M, D)

        Returns
        -------
        np.ndarray
            Shape (M,), unnormalised contributions of this level
        """
        m = int(Q.shape[0])
        if m == 0 or self.num_sampled == 0:
            return np.zeros(m, dtype=np.float64)

        if self.below_cutoff:
            return self._annulus_sum(pairwise_squared_distances(Q, self.points))

        out = np.zeros(m, dtype=np.float64)
        for i in range(m):
            candidates = self.index.query(Q[i])
            if candidates.size:
                rows = self.data[self.indices[candidates]]
                d2 = pairwise_squared_distances(Q[i:i + 1], rows)[0]
                out[i] = self._annulus_sum(d2)
        return out

    def query(self, q: np.ndarray) -> float:
        """Level estimate for a single query point."""
        q = np.asarray(q, dtype=np.float64).reshape(1, -1)
        return float(self.query_many(q)[0])
