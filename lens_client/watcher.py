"""Debounced re-evaluation on workspace changes."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

RELEVANT_EVENTS = frozenset({"created", "deleted", "modified", "moved"})


class DebouncedTrigger:
    """Coalesce bursts of triggers into one callback after ``delay_s`` of quiet."""

    def __init__(self, callback: Callable[[str], None], delay_s: float) -> None:
        self._callback = callback
        self._delay = delay_s
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None

    def trigger(self, reason: str) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self._delay, self._fire, args=[reason])
            self._timer.daemon = True
            self._timer.start()

    def _fire(self, reason: str) -> None:
        with self._lock:
            self._timer = None
        try:
            self._callback(reason)
        except Exception:
            logger.exception("Re-evaluation after %s failed", reason)

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None


class WorkspaceChangeHandler(FileSystemEventHandler):
    def __init__(self, trigger: DebouncedTrigger) -> None:
        self._trigger = trigger

    def on_any_event(self, event) -> None:
        if event.event_type not in RELEVANT_EVENTS:
            return
        src_path = getattr(event, "src_path", "")
        if isinstance(src_path, bytes):
            src_path = src_path.decode("utf-8", errors="replace")
        if "/.git/" in src_path.replace("\\", "/"):
            return
        self._trigger.trigger(f"{event.event_type}: {src_path}")


def start_watching(root: Path, trigger: DebouncedTrigger) -> Observer:
    observer = Observer()
    observer.schedule(WorkspaceChangeHandler(trigger), str(root), recursive=True)
    observer.start()
    logger.info("Watching %s for changes", root)
    return observer
