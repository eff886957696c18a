"""Join helpers for fanning work out to a bounded thread pool."""

from __future__ import annotations

from concurrent.futures import Executor, Future, as_completed
from typing import Callable, Dict, List, Optional, Sequence, TypeVar

T = TypeVar("T")


def join_all(executor: Executor, calls: Sequence[Callable[[], T]]) -> List[T]:
    """Run ``calls`` on ``executor`` and wait for all of them.

    Results keep the order of ``calls``. The first failure cancels every call
    that has not started yet and is re-raised; calls already running finish on
    their own.
    """
    future_map: Dict[Future, int] = {executor.submit(call): idx for idx, call in enumerate(calls)}
    results: List[Optional[T]] = [None] * len(calls)
    try:
        for future in as_completed(future_map):
            results[future_map[future]] = future.result()
    except Exception:
        for future in future_map:
            future.cancel()
        raise
    return results  # type: ignore[return-value]
