# lshkde/utils/logging.py
"""
Logging utilities: timers, memory monitoring, and progress bars.

Lightweight monitoring for engine construction and queries. Reports are
printed only when requested; progress bars use tqdm.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
import time
from contextlib import contextmanager

import psutil
from tqdm import tqdm


class Timer:
    """
    Simple timer for performance monitoring.

    Can be used as a context manager or manually started/stopped.
    Tracks wall time and, optionally, resident memory.
    """

    def __init__(self, name: str = "Timer", track_memory: bool = False, verbose: bool = True):
        self.name = name
        self.track_memory = track_memory
        self.verbose = verbose
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.start_memory: Optional[Dict[str, Any]] = None
        self.end_memory: Optional[Dict[str, Any]] = None

    def start(self) -> None:
        """Start the timer."""
        self.start_time = time.perf_counter()
        self.end_time = None
        if self.track_memory:
            self.start_memory = memory_info()

    def stop(self) -> float:
        """Stop the timer and return elapsed time in seconds."""
        if self.start_time is None:
            raise RuntimeError("Timer not started")
        self.end_time = time.perf_counter()
        if self.track_memory:
            self.end_memory = memory_info()
        return self.elapsed

    @property
    def elapsed(self) -> float:
        """Get elapsed time in seconds."""
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else time.perf_counter()
        return end - self.start_time

    @property
    def memory_delta(self) -> Optional[Dict[str, Any]]:
        """Get memory usage delta (if tracking enabled)."""
        if not self.track_memory or self.start_memory is None or self.end_memory is None:
            return None

        delta = {}
        for key in self.start_memory:
            if key in self.end_memory:
                delta[key] = self.end_memory[key] - self.start_memory[key]
        return delta

    def __enter__(self) -> 'Timer':
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
        if self.verbose and exc_type is None:
            self.report()

    def report(self) -> None:
        """Print a timing report."""
        print(f"{self.name}: {self.elapsed:.6f}s")
        delta = self.memory_delta
        if delta is not None and "rss_mb" in delta:
            print(f"  Memory delta: {delta['rss_mb']:.1f} MB")


@contextmanager
def timeit(name: str = "Operation", track_memory: bool = False, verbose: bool = True):
    """
    Context manager for timing operations.

    Example
    -------
    >>> with timeit("Exact KDE"):
    ...     pass
    """
    timer = Timer(name, track_memory=track_memory, verbose=verbose)
    with timer:
        yield timer


def memory_info() -> Dict[str, float]:
    """
    Get current memory usage information.

    Returns
    -------
    dict
        Memory info with keys 'rss_mb', 'vms_mb', 'available_mb', 'percent_used'
    """
    process = psutil.Process()
    mem = process.memory_info()
    vm = psutil.virtual_memory()
    return {
        "rss_mb": mem.rss / 1024 / 1024,
        "vms_mb": mem.vms / 1024 / 1024,
        "available_mb": vm.available / 1024 / 1024,
        "percent_used": vm.percent,
    }


def make_progress(total: int, desc: str = "Working", enabled: bool = True) -> tqdm:
    """Create a tqdm progress bar; a disabled bar keeps the same interface."""
    return tqdm(total=total, desc=desc, leave=False, disable=not enabled)
