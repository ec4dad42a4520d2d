# lshkde/density/ckns.py
"""
CKNS approximate Gaussian kernel density estimation.

The engine holds a grid of hash units indexed by
(guess iteration, repetition, level). Guesses are ``log_nmu = 0, 2, 4, ...``
below ``log2(n)``; every guess has ``k1`` independent repetitions, and each
repetition has one hash unit per distance level ``j = 1..J(n, log_nmu)``.

A query walks the guesses from the loosest (largest log_nmu) down. For each
guess the k1 repetitions are evaluated in parallel, their median is taken per
point, and a point is resolved as soon as its median clears the guess.
Points never resolved get the floor density ``1/n``.
"""

from __future__ import annotations
from typing import List, Optional, Tuple
import math
import numpy as np

from ..exceptions import InvalidArgumentError, InternalInvariantError
from ..utils.config import get_config
from ..utils.logging import Timer
from ..utils.parallel import WorkerPool
from ..utils.random import KeyLike, spawn_generators
from .base import _as_dataset, _as_queries, _check_bandwidth
from .hash_unit import CKNSHashUnit, ckns_J

# (iteration, repetition, level j)
_Slot = Tuple[int, int, int]


def ckns_k1(n: int, eps: float, k1_constant: float = 0.2) -> int:
    """Number of independent repetitions k1 = ceil(C1 * ln(n) / eps^2)."""
    return int(math.ceil(k1_constant * math.log(n) / (eps * eps)))


def ckns_num_log_nmu_iterations(n: int) -> int:
    """Number of density guesses; only every other value of log_nmu is built."""
    max_log_nmu = int(math.ceil(math.log2(n)))
    return int(math.ceil(max_log_nmu / 2))


def _upper_median(estimates: np.ndarray) -> np.ndarray:
    """Per-column element k1 // 2 of the sorted (k1, M) estimates."""
    k = estimates.shape[0] // 2
    return np.partition(estimates, k, axis=0)[k]


class KDEEngine:
    """
    CKNS Gaussian KDE: build once, query many.

    Parameters
    ----------
    data : array_like
        Dataset, shape (N, D)
    a : float
        Gaussian bandwidth, kernel ``exp(-a * |x - y|^2)``
    eps : float
        Accuracy parameter in (0, 1]; smaller is more accurate and slower
    seed : int, Generator or None
        Root of every sampling and hashing decision; None is non-reproducible
    num_workers : int, optional
        Worker pool size; defaults to the package config or hardware parallelism

    Attributes
    ----------
    n, d : int
        Dataset size and dimension
    k1 : int
        Repetitions per guess
    max_log_nmu : int
        ceil(log2 n)
    num_log_nmu_iterations : int
        Number of density guesses
    construction_time : float
        Wall time spent building the grid, in seconds
    """

    def __init__(self, data, a: float, eps: float = 1.0, *,
                 seed: KeyLike = None, num_workers: Optional[int] = None):
        eps = float(eps)
        if not (0.0 < eps <= 1.0):
            raise InvalidArgumentError(f"eps must be in (0, 1], got {eps}")

        cfg = get_config()
        self.a = _check_bandwidth(a)
        self.eps = eps
        self.data = _as_dataset(data)
        self.n, self.d = int(self.data.shape[0]), int(self.data.shape[1])
        self.num_workers = cfg.resolve_num_workers(num_workers)

        self._cutoff = int(cfg.hash_unit_cutoff)
        self._bucket_width = float(cfg.lsh_bucket_width)
        self._k2_constant = float(cfg.k2_constant)
        self._verbose = bool(cfg.verbose)

        self.max_log_nmu = int(math.ceil(math.log2(self.n)))
        self.num_log_nmu_iterations = ckns_num_log_nmu_iterations(self.n)
        self.k1 = ckns_k1(self.n, eps, cfg.k1_constant)

        # Pre-sized grid; every slot is written exactly once by its own task.
        self._hash_units: List[List[List[Optional[CKNSHashUnit]]]] = [
            [[None] * self.num_levels(it) for _ in range(self.k1)]
            for it in range(self.num_log_nmu_iterations)
        ]

        with Timer("CKNS construction", verbose=self._verbose) as timer:
            self._build(seed)
        self.construction_time = timer.elapsed

    # ---------- Construction ----------

    @staticmethod
    def log_nmu_for_iteration(iteration: int) -> int:
        return 2 * iteration

    def num_levels(self, iteration: int) -> int:
        """J for the given guess iteration."""
        return ckns_J(self.n, self.log_nmu_for_iteration(iteration))

    def _slots(self) -> List[_Slot]:
        if self.num_log_nmu_iterations == 0:
            return []
        # Low levels of the smallest guesses first: they sample the most points.
        max_J = ckns_J(self.n, 0)
        slots = []
        for j_offset in range(max_J - 1, -1, -1):
            for it in range(self.num_log_nmu_iterations):
                j = self.num_levels(it) - j_offset
                if j >= 1:
                    slots.extend((it, rep, j) for rep in range(self.k1))
        return slots

    def _build(self, seed: KeyLike) -> None:
        slots = self._slots()
        if not slots:
            return
        # Generators are assigned by slot, not by task order, so a seed fixes the grid.
        ordered = sorted(slots)
        generators = dict(zip(ordered, spawn_generators(seed, len(ordered))))

        def build_one(slot: _Slot) -> None:
            it, rep, j = slot
            self._hash_units[it][rep][j - 1] = CKNSHashUnit(
                self.a, self.data, self.log_nmu_for_iteration(it), j, generators[slot],
                cutoff=self._cutoff,
                bucket_width=self._bucket_width,
                k2_constant=self._k2_constant,
            )

        with WorkerPool(self.num_workers) as pool:
            pool.run(build_one, slots, desc="Building hash units")

        missing = [s for s in slots if self._hash_units[s[0]][s[1]][s[2] - 1] is None]
        if missing:
            raise InternalInvariantError(f"{len(missing)} hash units were not built")

    @property
    def num_hash_units(self) -> int:
        return sum(len(levels) for reps in self._hash_units for levels in reps)

    def hash_unit(self, iteration: int, repetition: int, j: int) -> CKNSHashUnit:
        """Hash unit for guess ``iteration``, repetition and level ``j`` (1-based)."""
        return self._hash_units[iteration][repetition][j - 1]

    def __repr__(self) -> str:
        return (f"KDEEngine(n={self.n}, d={self.d}, a={self.a}, eps={self.eps}, "
                f"k1={self.k1}, guesses={self.num_log_nmu_iterations}, "
                f"hash_units={self.num_hash_units})")

    # ---------- Query ----------

    def _repetition_estimate(self, iteration: int, repetition: int, Q: np.ndarray) -> np.ndarray:
        """Sum of level estimates of one repetition for every row of Q."""
        total = np.zeros(Q.shape[0], dtype=np.float64)
        for unit in self._hash_units[iteration][repetition]:
            total += unit.query_many(Q)
        return total

    def query(self, points) -> np.ndarray:
        """
        Approximate kernel density at each query point.

        Parameters
        ----------
        points : array_like
            Query points, shape (M, D), or one point of shape (D,)

        Returns
        -------
        np.ndarray
            Shape (M,), strictly positive, in input order
        """
        Q = _as_queries(points, self.d)
        m = int(Q.shape[0])
        results = np.zeros(m, dtype=np.float64)
        resolved = np.zeros(m, dtype=bool)
        if m == 0:
            return results

        with Timer("CKNS query", verbose=self._verbose), WorkerPool(self.num_workers) as pool:
            for it in range(self.num_log_nmu_iterations - 1, -1, -1):
                active = np.flatnonzero(~resolved)
                if active.size == 0:
                    break
                log_nmu = self.log_nmu_for_iteration(it)
                Qa = Q[active]

                # Barrier: all k1 repetitions finish before the guess is judged.
                per_rep = pool.run(lambda rep: self._repetition_estimate(it, rep, Qa),
                                   range(self.k1), desc=f"Guess log_nmu={log_nmu}")
                median = _upper_median(np.stack(per_rep, axis=0))

                with np.errstate(divide="ignore"):
                    accepted = np.log(median) >= log_nmu
                done = active[accepted]
                results[done] = median[accepted] / self.n
                resolved[done] = True

        results[~resolved] = 1.0 / self.n
        return results
