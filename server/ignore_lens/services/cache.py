"""Memoisation of evaluation reports for identical document snapshots."""

from __future__ import annotations

import hashlib
import json
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Iterable

from ignore_lens.engine.types import EvaluationReport


def snapshot_key(content: str, candidates: Iterable[str], base_dir: str | None = None) -> str:
    """Digest identifying a (document, file list, base dir) snapshot.

    Candidate order is irrelevant to evaluation, so the list is sorted first.
    """

    serialised = json.dumps(
        {"content": content, "candidates": sorted(set(candidates)), "base_dir": base_dir or ""},
        sort_keys=True,
    )
    return hashlib.sha256(serialised.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class EvaluationCacheEntry:
    report: EvaluationReport
    timestamp: float


class EvaluationCache:
    """Thread-safe LRU cache with TTL expiry.

    Cached reports must be treated as read-only; their ``state`` is the
    final state of a completed pass.
    """

    def __init__(
        self,
        ttl_seconds: int,
        max_size: int,
        *,
        time_func: Callable[[], float] | None = None,
    ) -> None:
        self._ttl = ttl_seconds
        self._max_size = max_size
        self._time = time_func or time.time
        self._lock = threading.Lock()
        self._store: OrderedDict[str, EvaluationCacheEntry] = OrderedDict()

    def get(self, key: str) -> EvaluationReport | None:
        now = self._time()
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if now - entry.timestamp > self._ttl:
                self._store.pop(key, None)
                return None
            self._store.move_to_end(key)
            return entry.report

    def put(self, key: str, report: EvaluationReport) -> None:
        if self._max_size <= 0:
            return
        entry = EvaluationCacheEntry(report=report, timestamp=self._time())
        with self._lock:
            self._store.pop(key, None)
            self._store[key] = entry
            while len(self._store) > self._max_size:
                self._store.popitem(last=False)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
