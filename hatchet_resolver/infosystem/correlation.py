"""
Correlation store: request id -> caller-owned fill target.

A caller registers the object it wants enriched before the request is
dispatched; the work unit completing that request looks it up, fills
it, and the dispatcher drops the entry when the request finishes,
successfully or not.
"""

import threading
from typing import Any


class CorrelationStore:
    """
    Lock-guarded map from request id to fill target.

    The store holds plain references; it never copies or mutates targets.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._targets: dict[str, Any] = {}

    def register(self, request_id: str, target: Any) -> None:
        with self._lock:
            self._targets[request_id] = target

    def get(self, request_id: str) -> Any | None:
        with self._lock:
            return self._targets.get(request_id)

    def pop(self, request_id: str) -> Any | None:
        """Remove and return the target for request_id (None if absent)."""
        with self._lock:
            return self._targets.pop(request_id, None)

    def __contains__(self, request_id: object) -> bool:
        with self._lock:
            return request_id in self._targets

    def __len__(self) -> int:
        with self._lock:
            return len(self._targets)
