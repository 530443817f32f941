# tests/fakes.py

from __future__ import annotations

import threading
import time


class RecordingProcessor:
    """
    Deterministic processor for unit tests.

    - Captures intents for assertions
    - Tracks how many calls overlap (should never exceed 1)
    - Optionally sleeps to widen the window for overlap
    """

    def __init__(self, result: str = "ok", delay_s: float = 0.0) -> None:
        self.result = result
        self.delay_s = delay_s
        self.calls: list[str] = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def process(self, intent: str) -> str:
        with self._lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
            self.calls.append(intent)
        try:
            if self.delay_s:
                time.sleep(self.delay_s)
            return f"{self.result}:{intent}"
        finally:
            with self._lock:
                self.active -= 1


class BlockingProcessor:
    """
    Holds each call until release() so tests can observe a task mid-run.
    """

    def __init__(self) -> None:
        self.started = threading.Event()
        self._release = threading.Event()

    def release(self) -> None:
        self._release.set()

    def process(self, intent: str) -> str:
        self.started.set()
        if not self._release.wait(timeout=5.0):
            raise RuntimeError("BlockingProcessor was never released")
        return f"done:{intent}"


class ExplodingProcessor:
    """Raises the given exception for every intent."""

    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    def process(self, intent: str) -> str:
        raise self.exc


class FakeClock:
    """Manually advanced clock for TaskStore tests."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
