"""
Density estimators: CKNS approximate Gaussian KDE and the exact baseline.

Exports:
- KDEEngine: LSH-based approximate Gaussian KDE (build once, query many)
- ExactEngine: brute-force Gaussian KDE, chunk-parallel over queries
- CKNSHashUnit and the CKNS parameter formulas
- E2LSH near-neighbour index and kernel helpers
"""

from .ckns import KDEEngine, ckns_k1, ckns_num_log_nmu_iterations
from .exact import ExactEngine
from .hash_unit import (
    CKNSHashUnit,
    ckns_J,
    ckns_p_sampling,
    ckns_gaussian_rj_squared,
    ckns_gaussian_create_lsh_params,
)
from .lsh import E2LSH, LSHFunction, collision_probability
from .kernels import (
    gaussian_kernel,
    gaussian_kernel_points,
    squared_distance,
    pairwise_squared_distances,
)

__all__ = [
    "KDEEngine",
    "ExactEngine",
    "ckns_k1",
    "ckns_num_log_nmu_iterations",
    "CKNSHashUnit",
    "ckns_J",
    "ckns_p_sampling",
    "ckns_gaussian_rj_squared",
    "ckns_gaussian_create_lsh_params",
    "E2LSH",
    "LSHFunction",
    "collision_probability",
    "gaussian_kernel",
    "gaussian_kernel_points",
    "squared_distance",
    "pairwise_squared_distances",
]
