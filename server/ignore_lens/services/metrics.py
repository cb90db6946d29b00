"""Evaluation counters exposed on the metrics endpoint."""

from __future__ import annotations

import threading
from typing import Any, Dict


class StatsTracker:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._stats: Dict[str, Any] = {
            "evaluate_total": 0,
            "evaluate_stale": 0,
            "cache_hits": 0,
            "patterns_total": 0,
            "avg_evaluate_ms": 0.0,
        }

    def record_evaluation(self, duration_ms: float, pattern_count: int) -> None:
        with self._lock:
            self._stats["evaluate_total"] += 1
            self._stats["patterns_total"] += max(pattern_count, 0)
            # exponential moving average
            self._stats["avg_evaluate_ms"] = (
                self._stats["avg_evaluate_ms"] * 0.99 + duration_ms * 0.01
            )

    def increment_stale(self) -> None:
        with self._lock:
            self._stats["evaluate_stale"] += 1

    def increment_cache_hit(self) -> None:
        with self._lock:
            self._stats["cache_hits"] += 1

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._stats)
