"""
LSHKDE: approximate Gaussian kernel density estimation with layered LSH.

A package for fast density queries against a fixed dataset with:
- CKNS approximate Gaussian KDE (sampling + Euclidean LSH, median of repetitions)
- Exact brute-force baseline for validation and benchmarking
- Thread-pool parallel construction and round-barriered queries
- Seeded, per-task random generators

Core workflow:
1. Load a dense (N, D) dataset → numpy array
2. Build the index → KDEEngine(data, a, eps)
3. Query densities → engine.query(points)
4. Validate → ExactEngine(data, a).query(points)
"""

from __future__ import annotations

# Version info
__version__ = "0.1.0"
__author__ = "LSHKDE Contributors"

from .exceptions import LSHKDEError, InvalidArgumentError, InternalInvariantError
from .utils.jax_utils import JAX_AVAILABLE
from .utils.config import configure, get_config, reset_config
from .utils.diagnostics import check_system_requirements
from .density.ckns import KDEEngine
from .density.exact import ExactEngine
from .density.kernels import gaussian_kernel

__all__ = [
    # Version
    "__version__",
    # Utilities
    "JAX_AVAILABLE",
    "configure",
    "get_config",
    "reset_config",
    "check_system_requirements",
    # Errors
    "LSHKDEError",
    "InvalidArgumentError",
    "InternalInvariantError",
    # Density estimation
    "KDEEngine",
    "ExactEngine",
    "gaussian_kernel",
]
