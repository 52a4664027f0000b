"""
Priority-aware background executor.

Work units run on a ThreadPoolExecutor, but not in submission order:
each submit() pushes the unit onto a heap ordered by (priority, arrival)
and schedules one drain call on the pool. Whenever a worker frees up,
the drain call runs the most urgent unit still waiting, so a HIGH unit
submitted behind a backlog of LOW ones starts next.

Two lanes are used by the resolver:
    Priority.HIGH  latency-sensitive requests (artist top hits)
    Priority.LOW   everything else

The priority is fixed at submission; nothing changes the scheduling of
a unit once it is running.
"""

import heapq
import itertools
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from enum import IntEnum
from typing import Any, Callable

from hatchet_resolver.core.logger import get_logger

logger = get_logger(__name__)


class Priority(IntEnum):
    """Executor lanes; lower values run first."""
    HIGH = 0
    LOW = 10


class PriorityExecutor:
    """
    Fire-and-forget executor with priority lanes.

    Attributes:
        max_workers: Number of worker threads.

    Example:
        executor = PriorityExecutor(max_workers=4)
        future = executor.submit(lambda: work(), Priority.HIGH)
        future.result()
        executor.shutdown()
    """

    def __init__(self, max_workers: int = 4, thread_name_prefix: str = "hatchet-resolver") -> None:
        self.max_workers = max_workers
        self._pool = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix=thread_name_prefix
        )
        self._lock = threading.Lock()
        self._queue: list[tuple[int, int, Callable[[], Any], Future]] = []
        self._sequence = itertools.count()
        self._shutdown = False

    def submit(self, fn: Callable[[], Any], priority: Priority = Priority.LOW) -> Future:
        """
        Queue fn and return a Future for its result.

        Raises:
            RuntimeError: If the executor has been shut down.
        """
        future: Future = Future()
        with self._lock:
            if self._shutdown:
                raise RuntimeError("cannot submit after shutdown")
            # The sequence number keeps FIFO order within a lane
            heapq.heappush(self._queue, (int(priority), next(self._sequence), fn, future))
        self._pool.submit(self._run_next)
        return future

    def _run_next(self) -> None:
        with self._lock:
            priority, _, fn, future = heapq.heappop(self._queue)

        if not future.set_running_or_notify_cancel():
            return

        try:
            result = fn()
        except Exception as e:
            future.set_exception(e)
        else:
            future.set_result(result)

    def pending(self) -> int:
        """Number of units queued but not started."""
        with self._lock:
            return len(self._queue)

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            self._shutdown = True
        self._pool.shutdown(wait=wait)
