# lshkde/utils/parallel.py
"""
Fixed-size thread pool with structured fan-out/fan-in.

``WorkerPool.run`` submits a fixed task set, waits for all of it and
returns the results in submission order. The first task failure cancels
every task that has not started and is re-raised to the caller, so a
caller never observes a partial result.
"""

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor, Future, as_completed
from typing import Callable, Iterable, List, Optional, TypeVar

from .config import get_config
from .logging import make_progress

T = TypeVar("T")
R = TypeVar("R")


def resolve_num_workers(num_workers: Optional[int] = None) -> int:
    """Worker count: explicit value, else package config, else hardware parallelism."""
    return get_config().resolve_num_workers(num_workers)


class WorkerPool:
    """
    Context-managed ``ThreadPoolExecutor`` used by both engines.

    Parameters
    ----------
    num_workers : int, optional
        Pool size; resolved through ``resolve_num_workers``
    show_progress : bool, optional
        Show a tqdm bar per ``run`` call; defaults to the package config
    """

    def __init__(self, num_workers: Optional[int] = None, show_progress: Optional[bool] = None):
        self.num_workers = resolve_num_workers(num_workers)
        if show_progress is None:
            show_progress = get_config().show_progress
        self.show_progress = bool(show_progress)
        self._executor: Optional[ThreadPoolExecutor] = None

    def __enter__(self) -> "WorkerPool":
        self._executor = ThreadPoolExecutor(max_workers=self.num_workers,
                                            thread_name_prefix="lshkde")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown(cancel=exc_type is not None)

    def shutdown(self, cancel: bool = False) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True, cancel_futures=cancel)
            self._executor = None

    def run(self, fn: Callable[[T], R], items: Iterable[T], desc: Optional[str] = None) -> List[R]:
        """
        Apply ``fn`` to every item concurrently and join.

        Returns
        -------
        list
            ``fn(item)`` for each item, in item order
        """
        if self._executor is None:
            raise RuntimeError("WorkerPool must be used as a context manager")

        items = list(items)
        futures: List[Future] = [self._executor.submit(fn, item) for item in items]
        bar = make_progress(len(futures), desc=desc or "Tasks", enabled=self.show_progress)
        try:
            for future in as_completed(futures):
                exc = future.exception()
                if exc is not None:
                    for pending in futures:
                        pending.cancel()
                    raise exc
                bar.update(1)
        finally:
            bar.close()
        return [future.result() for future in futures]
