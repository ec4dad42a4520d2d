# lshkde/utils/__init__.py
"""
Utilities for lshkde.

Contains:
- config: global package configuration
- jax_utils: JAX guards and jit helper
- logging: timers, memory monitoring, progress bars
- parallel: fixed-size worker pool with fan-out/fan-in
- random: per-task generators and Bernoulli sampling
- diagnostics: dependency checks
"""

from .config import (
    PackageConfig,
    get_config,
    configure,
    reset_config,
)

from .jax_utils import (
    JAX_AVAILABLE,
    get_jax_version,
    get_devices,
    to_numpy,
    x64_enabled,
    maybe_jit,
)

from .logging import (
    Timer,
    timeit,
    memory_info,
    make_progress,
)

from .parallel import (
    WorkerPool,
    resolve_num_workers,
)

from .random import (
    rng_key,
    spawn_generators,
    uniform,
    bernoulli_sample,
    random_seed,
    KeyLike,
    Shape,
)

from .diagnostics import (
    check_system_requirements,
    missing_requirements,
    suggest_installation_commands,
)

__all__ = [
    # config
    "PackageConfig",
    "get_config",
    "configure",
    "reset_config",
    # jax_utils
    "JAX_AVAILABLE",
    "get_jax_version",
    "get_devices",
    "to_numpy",
    "x64_enabled",
    "maybe_jit",
    # logging
    "Timer",
    "timeit",
    "memory_info",
    "make_progress",
    # parallel
    "WorkerPool",
    "resolve_num_workers",
    # random
    "rng_key",
    "spawn_generators",
    "uniform",
    "bernoulli_sample",
    "random_seed",
    "KeyLike",
    "Shape",
    # diagnostics
    "check_system_requirements",
    "missing_requirements",
    "suggest_installation_commands",
]
