"""
Results sink.

The dispatcher reports every finished resolve/send call exactly once,
with a list holding the request id when it fully succeeded and an
empty list otherwise. Absence from the completed set is the only
failure signal the sink sees.
"""

import threading
from typing import Iterable, Protocol


class ResultsSink(Protocol):
    def report_completed(self, ids: Iterable[str]) -> None: ...


class CompletedRequests:
    """
    Thread-safe set of completed request ids, with blocking waits.

    Attributes:
        reports: Number of report_completed() calls received, including
                 empty ones.

    Example:
        sink = CompletedRequests()
        dispatcher = InfoDispatcher(..., sink=sink)
        dispatcher.resolve(request)
        if sink.wait_for(request.id, timeout=10):
            ...
    """

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self._completed: set[str] = set()
        self.reports = 0

    def report_completed(self, ids: Iterable[str]) -> None:
        with self._condition:
            self._completed.update(ids)
            self.reports += 1
            self._condition.notify_all()

    def is_completed(self, request_id: str) -> bool:
        with self._condition:
            return request_id in self._completed

    def completed_ids(self) -> frozenset[str]:
        with self._condition:
            return frozenset(self._completed)

    def wait_for(self, request_id: str, timeout: float | None = None) -> bool:
        """
        Block until request_id is reported completed or timeout expires.

        Returns:
            True if the request completed. False on timeout; a failed
            request is indistinguishable from a slow one here.
        """
        with self._condition:
            return self._condition.wait_for(
                lambda: request_id in self._completed, timeout=timeout
            )
