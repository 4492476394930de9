"""Tick scheduling for the animation loop."""

from __future__ import annotations

import threading
from typing import Callable, Protocol

from .logging_setup import get_logger


def tick_interval_ms(frame_rate: int) -> int:
    if frame_rate <= 0:
        raise ValueError(f"frame_rate must be positive, got {frame_rate}")
    return 1000 // frame_rate


class Ticker(Protocol):
    @property
    def running(self) -> bool: ...

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None: ...

    def stop(self) -> None: ...


class ManualTicker:
    """Ticker driven by explicit ``fire`` calls, for offline rendering."""

    def __init__(self) -> None:
        self.interval_ms: int | None = None
        self._callback: Callable[[], None] | None = None

    @property
    def running(self) -> bool:
        return self._callback is not None

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self.interval_ms = interval_ms
        self._callback = callback

    def stop(self) -> None:
        self._callback = None

    def fire(self, count: int = 1) -> int:
        fired = 0
        for _ in range(count):
            if self._callback is None:
                break
            self._callback()
            fired += 1
        return fired


class ThreadTicker:
    """Runs the callback on one worker thread, waiting ``interval_ms`` after each call.

    The first call happens immediately. ``stop`` only prevents the next call;
    a callback already running finishes normally.
    """

    def __init__(self, name: str = "wanderspectrum-ticker") -> None:
        self.name = name
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._logger = get_logger("scheduler")

    @property
    def running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive() and not self._stop_event.is_set()

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        if interval_ms < 0:
            raise ValueError("interval_ms must not be negative")
        self.stop()
        with self._lock:
            stop_event = threading.Event()
            self._stop_event = stop_event
            self._thread = threading.Thread(
                target=self._run,
                args=(interval_ms / 1000.0, callback, stop_event),
                name=self.name,
                daemon=True,
            )
            self._thread.start()
        self._logger.debug("ticker started", extra={"event": "ticker_started"})

    def stop(self, timeout: float | None = 2.0) -> None:
        with self._lock:
            thread = self._thread
            self._stop_event.set()
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _run(self, interval_s: float, callback: Callable[[], None], stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            try:
                callback()
            except Exception:
                self._logger.exception("ticker callback failed", extra={"event": "tick_error"})
            if stop_event.wait(interval_s):
                break
