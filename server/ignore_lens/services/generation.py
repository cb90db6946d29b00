"""Generation tokens that keep stale evaluation passes from being applied.

Every pass takes a token when it starts. Starting a newer pass for the same
document makes older tokens stale; a stale pass may still finish, but its
result is dropped instead of replacing the newer one.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Generic, TypeVar

logger = logging.getLogger(__name__)

R = TypeVar("R")


class GenerationTracker:
    """Monotonic per-key counters."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._latest: Dict[str, int] = {}

    def begin(self, key: str) -> int:
        with self._lock:
            token = self._latest.get(key, 0) + 1
            self._latest[key] = token
            return token

    def latest(self, key: str) -> int:
        with self._lock:
            return self._latest.get(key, 0)

    def is_current(self, key: str, token: int) -> bool:
        with self._lock:
            return self._latest.get(key, 0) == token


class ResultStore(Generic[R]):
    """Latest committed result per document, guarded by generation tokens."""

    def __init__(self, tracker: GenerationTracker | None = None) -> None:
        self._tracker = tracker or GenerationTracker()
        self._lock = threading.Lock()
        self._results: Dict[str, tuple[int, R]] = {}

    @property
    def tracker(self) -> GenerationTracker:
        return self._tracker

    def begin(self, key: str) -> int:
        return self._tracker.begin(key)

    def commit(self, key: str, token: int, result: R) -> bool:
        """Store ``result`` unless a newer pass for ``key`` has started."""

        with self._lock:
            if not self._tracker.is_current(key, token):
                logger.info(
                    "evaluation_discarded",
                    extra={
                        "document_id": key,
                        "generation": token,
                        "latest_generation": self._tracker.latest(key),
                    },
                )
                return False
            committed = self._results.get(key)
            if committed is not None and committed[0] > token:
                return False
            self._results[key] = (token, result)
            return True

    def get(self, key: str) -> R | None:
        with self._lock:
            committed = self._results.get(key)
        return committed[1] if committed is not None else None

    def clear(self) -> None:
        with self._lock:
            self._results.clear()
