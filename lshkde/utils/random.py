# lshkde/utils/random.py
"""
Random number generation for the sampling engines.

Every worker task receives its own ``numpy.random.Generator`` spawned from a
single seed, so concurrent tasks never share generator state. A fixed seed
therefore fixes every sampling decision regardless of thread scheduling.
"""

from __future__ import annotations
from typing import List, Optional, Sequence, Union
import numpy as np

# Type aliases
KeyLike = Union[int, np.random.Generator, np.random.SeedSequence, None]
Shape = Union[int, Sequence[int]]


def rng_key(seed: KeyLike = None) -> np.random.Generator:
    """
    Create a generator from a seed.

    Parameters
    ----------
    seed : int, SeedSequence, Generator or None
        Random seed; an existing Generator is returned unchanged and
        None draws fresh OS entropy.

    Returns
    -------
    np.random.Generator
    """
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.Generator(np.random.PCG64(seed))


def spawn_generators(key: KeyLike, num: int) -> List[np.random.Generator]:
    """
    Derive ``num`` independent generators from a seed or generator.

    Parameters
    ----------
    key : KeyLike
        Root seed. A Generator is consumed to derive the root entropy.
    num : int
        Number of generators to create

    Returns
    -------
    list of np.random.Generator
    """
    if num < 0:
        raise ValueError("num must be non-negative")
    if isinstance(key, np.random.Generator):
        root = np.random.SeedSequence(key.integers(0, 2**63, size=4))
    elif isinstance(key, np.random.SeedSequence):
        root = key
    else:
        root = np.random.SeedSequence(key)
    return [np.random.Generator(np.random.PCG64(s)) for s in root.spawn(num)]


def uniform(key: KeyLike, shape: Shape = (), minval: float = 0.0, maxval: float = 1.0) -> np.ndarray:
    """Sample from U[minval, maxval)."""
    shape_tuple = (shape,) if isinstance(shape, int) else tuple(shape)
    return rng_key(key).uniform(minval, maxval, shape_tuple)


def bernoulli_sample(key: KeyLike, n: int, p: float) -> np.ndarray:
    """
    Keep each of ``n`` items independently with probability ``p``.

    Returns
    -------
    np.ndarray
        Sorted int64 indices of the kept items
    """
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"sampling probability must be in [0, 1], got {p}")
    if n == 0:
        return np.empty(0, dtype=np.int64)
    draws = uniform(key, n)
    return np.flatnonzero(draws < p).astype(np.int64, copy=False)


def random_seed(key: Optional[KeyLike] = None) -> int:
    """Draw a 63-bit integer seed, for reporting or re-seeding a run."""
    return int(rng_key(key).integers(0, 2**63))
