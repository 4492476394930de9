"""Scroll animation engine: random-walk scrolling over a cached color buffer."""

from __future__ import annotations

import random
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from wanderspectrum_renderer import BLACK, Canvas, ColorBuffer, GridGeometry, RenderTarget, build_buffer

from .config import (
    ANIMATION_DEFAULTS,
    FRAME_RATE_KEY,
    MINIMUM_DIRECTION_SWITCH_SECONDS_KEY,
    PIXEL_SIZE_KEY,
    SCROLL_VELOCITY_KEY,
)
from .logging_setup import get_logger
from .scheduler import ThreadTicker, Ticker, tick_interval_ms

FLIP_ODDS = 10


class InvalidConfigurationError(ValueError):
    pass


class SettingsSource(Protocol):
    def get(self, key: str, default: int | None = None) -> int: ...


@dataclass(frozen=True)
class AnimationSettings:
    scroll_velocity: int
    pixel_size: int
    frame_rate: int
    minimum_direction_switch_seconds: int

    @classmethod
    def from_store(cls, store: SettingsSource, defaults: dict[str, int] | None = None) -> AnimationSettings:
        defaults = defaults or ANIMATION_DEFAULTS
        return cls(
            scroll_velocity=store.get(SCROLL_VELOCITY_KEY, defaults[SCROLL_VELOCITY_KEY]),
            pixel_size=store.get(PIXEL_SIZE_KEY, defaults[PIXEL_SIZE_KEY]),
            frame_rate=store.get(FRAME_RATE_KEY, defaults[FRAME_RATE_KEY]),
            minimum_direction_switch_seconds=store.get(
                MINIMUM_DIRECTION_SWITCH_SECONDS_KEY, defaults[MINIMUM_DIRECTION_SWITCH_SECONDS_KEY]
            ),
        )

    def validate(self) -> AnimationSettings:
        if self.pixel_size <= 0:
            raise InvalidConfigurationError(f"pixel_size must be positive, got {self.pixel_size}")
        if self.frame_rate <= 0:
            raise InvalidConfigurationError(f"frame_rate must be positive, got {self.frame_rate}")
        if self.minimum_direction_switch_seconds < 0:
            raise InvalidConfigurationError(
                f"minimum_direction_switch_seconds must not be negative, got {self.minimum_direction_switch_seconds}"
            )
        return self

    @property
    def minimum_ticks_between_switches(self) -> int:
        return self.minimum_direction_switch_seconds * self.frame_rate

    @property
    def tick_interval_ms(self) -> int:
        return tick_interval_ms(self.frame_rate)


@dataclass
class AnimationState:
    vertical_offset: int = 0
    velocity: int = 0
    ticks_since_direction_change: int = 0

    def maybe_flip(self, draw: int, minimum_ticks: int) -> bool:
        """Reverse direction when the draw hits and the minimum dwell has passed."""
        if draw == 0 and self.ticks_since_direction_change > minimum_ticks:
            self.velocity = -self.velocity
            self.ticks_since_direction_change = 0
            return True
        return False

    def advance(self) -> None:
        self.vertical_offset += self.velocity
        self.ticks_since_direction_change += 1


class AnimatorPhase(str, Enum):
    IDLE = "Idle"
    ACTIVE = "Active"


@dataclass
class AnimatorStatus:
    phase: AnimatorPhase = AnimatorPhase.IDLE
    frames_drawn: int = 0
    frames_skipped: int = 0
    direction_changes: int = 0
    buffer_builds: int = 0
    tick_errors: int = 0
    fps: float = 0.0
    last_tick_ms: float = 0.0
    last_error: str = ""


class ScrollAnimator:
    def __init__(
        self,
        target: RenderTarget,
        store: SettingsSource,
        ticker: Ticker | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.target = target
        self.store = store
        self.ticker = ticker or ThreadTicker()
        self.rng = rng or random.Random()
        self._clock = clock

        self._lock = threading.RLock()
        self._active = False
        self._settings: AnimationSettings | None = None
        self._state = AnimationState()
        self._buffer: ColorBuffer | None = None
        self._buffer_stale = True
        self._status = AnimatorStatus()
        self._last_tick_start: float | None = None
        self._logger = get_logger("animator")

    @property
    def active(self) -> bool:
        return self._active

    @property
    def settings(self) -> AnimationSettings | None:
        return self._settings

    @property
    def state(self) -> AnimationState:
        return self._state

    @property
    def buffer(self) -> ColorBuffer | None:
        return self._buffer

    @property
    def status(self) -> AnimatorStatus:
        return self._status

    def set_visible(self, visible: bool) -> None:
        if visible and not self._active:
            self.activate()
        elif not visible and self._active:
            self.deactivate()

    def activate(self) -> None:
        settings = AnimationSettings.from_store(self.store).validate()
        with self._lock:
            if self._settings is None or settings.pixel_size != self._settings.pixel_size:
                self._buffer_stale = True
            self._settings = settings
            self._state = AnimationState(velocity=settings.scroll_velocity)
            self._last_tick_start = None
            self._active = True
            self._status.phase = AnimatorPhase.ACTIVE
        self._logger.info(
            "animation activated",
            extra={
                "event": "activated",
                "velocity": settings.scroll_velocity,
                "pixel_size": settings.pixel_size,
                "frame_rate": settings.frame_rate,
            },
        )
        self.ticker.start(settings.tick_interval_ms, self._scheduled_tick)

    def deactivate(self) -> None:
        with self._lock:
            self._active = False
            self._status.phase = AnimatorPhase.IDLE
            self._status.fps = 0.0
        self.ticker.stop()
        self._logger.info("animation deactivated", extra={"event": "deactivated"})

    def _scheduled_tick(self) -> None:
        if not self._active:
            return
        try:
            self.tick()
        except Exception as exc:
            with self._lock:
                self._status.tick_errors += 1
                self._status.last_error = str(exc)
            self._logger.exception("frame failed", extra={"event": "tick_error"})

    def tick(self) -> bool:
        """Advance and draw one frame. Returns False when the target was unavailable."""
        with self._lock:
            settings = self._settings
            if settings is None:
                raise RuntimeError("animator has not been activated")

            start = self._clock()
            self._update_fps(start)
            canvas = self.target.lock_surface()
            if canvas is None:
                self._status.frames_skipped += 1
                self._logger.debug("render target unavailable", extra={"event": "frame_skipped"})
                return False

            try:
                buffer = self._ensure_buffer(canvas, settings)
                canvas.fill(BLACK)
                if self._state.maybe_flip(self.rng.randrange(FLIP_ODDS), settings.minimum_ticks_between_switches):
                    self._status.direction_changes += 1
                    self._logger.debug(
                        "direction changed",
                        extra={
                            "event": "direction_changed",
                            "velocity": self._state.velocity,
                            "vertical_offset": self._state.vertical_offset,
                        },
                    )
                self._state.advance()
                self._blit(canvas, buffer, self._state.vertical_offset)
            finally:
                self.target.present_and_unlock(canvas)

            self._status.frames_drawn += 1
            self._status.last_tick_ms = (self._clock() - start) * 1000.0
            return True

    def _ensure_buffer(self, canvas: Canvas, settings: AnimationSettings) -> ColorBuffer:
        geometry = GridGeometry(width=canvas.width, height=canvas.height, pixel_size=settings.pixel_size)
        if self._buffer is None or self._buffer_stale or self._buffer.geometry != geometry:
            self._buffer = build_buffer(canvas.width, canvas.height, settings.pixel_size)
            self._buffer_stale = False
            self._status.buffer_builds += 1
            self._logger.info(
                f"color buffer built {self._buffer.width}x{self._buffer.height}",
                extra={"event": "buffer_built", "pixel_size": settings.pixel_size},
            )
        return self._buffer

    @staticmethod
    def _blit(canvas: Canvas, buffer: ColorBuffer, vertical_offset: int) -> None:
        geometry = buffer.geometry
        size = geometry.pixel_size
        for x in range(geometry.grid_width):
            for y in range(geometry.visible_rows):
                canvas.fill_rect(x * size, y * size, size, size, buffer.wrapped(x, y + vertical_offset))

    def _update_fps(self, now: float) -> None:
        if self._last_tick_start is not None:
            elapsed = max(now - self._last_tick_start, 1e-9)
            fps = 1.0 / elapsed
            self._status.fps = fps if self._status.fps == 0 else (0.75 * self._status.fps + 0.25 * fps)
        self._last_tick_start = now
