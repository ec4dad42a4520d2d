from __future__ import annotations
from typing import Any, Callable, Optional, Sequence

try:
    import jax
    import jax.numpy as jnp
    from jax import jit as _jit
    JAX_AVAILABLE = True
except Exception:
    JAX_AVAILABLE = False
    jax = None  # type: ignore
    jnp = None  # type: ignore

import numpy as np

def get_jax_version() -> Optional[str]:
    """Return the JAX version string if available, else None."""
    return getattr(jax, "__version__", None) if JAX_AVAILABLE else None

def get_devices(kind: Optional[str] = None):
    """
    Return the list of JAX devices, or [] if JAX is unavailable.

    kind: 'cpu'|'gpu'|'tpu' or None for all.
    """
    if not JAX_AVAILABLE:
        return []
    try:
        return jax.devices(kind) if kind else jax.devices()
    except RuntimeError:
        return []

def x64_enabled() -> bool:
    """True when JAX computes in 64-bit floats; False if JAX is unavailable."""
    return bool(JAX_AVAILABLE and jax.config.jax_enable_x64)

def to_numpy(x: Any, dtype: Any = None) -> np.ndarray:
    """Convert JAX/NumPy arrays to a host NumPy array."""
    return np.asarray(x, dtype=dtype)

def maybe_jit(fn: Callable, enable: bool = True, static_argnums: Optional[Sequence[int]] = None):
    """
    JIT-wrap `fn` with JAX when available and enabled; otherwise return `fn` unchanged.
    """
    if JAX_AVAILABLE and enable:
        return _jit(fn, static_argnums=static_argnums)
    return fn
