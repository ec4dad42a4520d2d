# lshkde/utils/config.py
"""
Global package configuration.

Provides centralized settings for data types, worker pool sizing,
the CKNS tuning constants and progress/verbosity across all modules.
Engines read the configuration once, at construction time.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Dict, Any, Optional
import os
import warnings
import psutil

from .jax_utils import JAX_AVAILABLE, jax


@dataclass
class PackageConfig:
    """
    Global configuration for lshkde.

    Controls data types, parallelism, CKNS constants and
    monitoring settings across all modules.
    """
    # Data type settings
    dtype: str = "float64"              # 'float32' | 'float64'

    # Parallelism
    num_workers: Optional[int] = None   # None = hardware parallelism

    # CKNS constants
    hash_unit_cutoff: int = 1000        # brute-force units with at most this many samples
    k1_constant: float = 0.2            # k1 = C1 * ln(n) / eps^2
    k2_constant: float = 1.0            # L  = C2 * log2(n) * 2^phi_j
    lsh_bucket_width: float = 4.0       # E2LSH bucket width w

    # Exact evaluation
    max_block_elements: int = 2 ** 22   # query_rows * n * d per kernel block
    use_jax_jit: bool = True            # JIT exact kernel sums when JAX is present

    # Progress and monitoring
    show_progress: bool = False         # tqdm bars for construction/query
    verbose: bool = False               # timing reports

    # Environment settings
    _system_memory_gb: float = field(init=False, default=0.0)
    _cpu_count: int = field(init=False, default=1)

    def __post_init__(self):
        self._detect_system_resources()
        self._validate_config()
        self._apply_jax_config()

    def _detect_system_resources(self):
        """Detect available system resources."""
        self._system_memory_gb = psutil.virtual_memory().total / (1024**3)
        self._cpu_count = psutil.cpu_count(logical=True) or os.cpu_count() or 1

    def _validate_config(self):
        """Validate configuration settings."""
        if self.dtype not in ["float32", "float64"]:
            raise ValueError(f"dtype must be 'float32' or 'float64', got '{self.dtype}'")

        if self.num_workers is not None and int(self.num_workers) < 1:
            raise ValueError(f"num_workers must be positive, got {self.num_workers}")

        if int(self.hash_unit_cutoff) < 0:
            raise ValueError("hash_unit_cutoff must be non-negative")

        for name in ("k1_constant", "k2_constant", "lsh_bucket_width"):
            if not float(getattr(self, name)) > 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")

        if int(self.max_block_elements) < 1:
            raise ValueError("max_block_elements must be positive")

        if self.use_jax_jit and not JAX_AVAILABLE and self.verbose:
            warnings.warn("use_jax_jit is set but JAX is not installed; exact sums run on NumPy")

    def _apply_jax_config(self):
        """Match JAX float width to ``dtype``."""
        if not JAX_AVAILABLE:
            return
        # JAX defaults to float32 and silently downcasts float64 inputs.
        jax.config.update("jax_enable_x64", self.dtype == "float64")

    # ---------- Utility methods ----------

    def resolve_num_workers(self, requested: Optional[int] = None) -> int:
        """Worker count for a pool: explicit request, then config, then hardware."""
        if requested is not None:
            if int(requested) < 1:
                raise ValueError(f"num_workers must be positive, got {requested}")
            return int(requested)
        if self.num_workers is not None:
            return int(self.num_workers)
        return max(1, int(self._cpu_count))

    def get_system_info(self) -> Dict[str, Any]:
        """Get system resource information."""
        return {
            "system_memory_gb": self._system_memory_gb,
            "cpu_count": self._cpu_count,
            "jax_available": JAX_AVAILABLE,
            "current_config": {
                "dtype": self.dtype,
                "num_workers": self.resolve_num_workers(),
                "hash_unit_cutoff": self.hash_unit_cutoff,
                "k1_constant": self.k1_constant,
                "k2_constant": self.k2_constant,
                "use_jax_jit": self.use_jax_jit,
            }
        }


# Global configuration instance
_global_config = PackageConfig()


def get_config() -> PackageConfig:
    """Get global package configuration."""
    return _global_config


def configure(**kwargs) -> None:
    """
    Configure package settings.

    Parameters
    ----------
    **kwargs : dict
        Configuration parameters to update
    """
    global _global_config
    updates = {}
    for key, value in kwargs.items():
        if hasattr(_global_config, key) and not key.startswith("_"):
            updates[key] = value
        else:
            warnings.warn(f"Unknown configuration parameter: {key}")

    # replace() re-runs validation; the current config is untouched if it raises.
    _global_config = replace(_global_config, **updates)


def reset_config() -> None:
    """Reset configuration to defaults."""
    global _global_config
    _global_config = PackageConfig()
