"""Runtime performance budgeting against the configured frame rate."""

from __future__ import annotations

from dataclasses import dataclass

import psutil


@dataclass(frozen=True)
class PerformanceTargets:
    cpu_percent_max: float = 25.0
    rss_mb_max: float = 300.0
    fps_tolerance: float = 0.2


@dataclass(frozen=True)
class BudgetStatus:
    cpu_percent: float
    rss_mb: float
    fps: float
    target_fps: float
    overloaded: bool
    warning: str | None


class PerformanceController:
    def __init__(self, targets: PerformanceTargets | None = None) -> None:
        self.targets = targets or PerformanceTargets()
        self._process = psutil.Process()
        # Prime non-blocking CPU measurement.
        self._process.cpu_percent(interval=None)

    def sample(self, fps: float, frame_rate: int) -> BudgetStatus:
        cpu = float(self._process.cpu_percent(interval=None))
        rss_mb = float(self._process.memory_info().rss) / (1024 * 1024)
        return self.evaluate(cpu, rss_mb, fps, frame_rate)

    def evaluate(self, cpu_percent: float, rss_mb: float, fps: float, frame_rate: int) -> BudgetStatus:
        overloaded = cpu_percent > self.targets.cpu_percent_max or rss_mb > self.targets.rss_mb_max
        # The tick interval is truncated to whole milliseconds, so the achievable rate is 1000 // (1000 // rate).
        target_fps = 1000.0 / max(1, 1000 // max(1, frame_rate))
        low = target_fps * (1.0 - self.targets.fps_tolerance)
        high = target_fps * (1.0 + self.targets.fps_tolerance)

        warning = None
        if overloaded:
            warning = "resource_overload"
        elif fps < low:
            warning = "below_fps_target"
        elif fps > high:
            warning = "above_fps_target"

        return BudgetStatus(
            cpu_percent=cpu_percent,
            rss_mb=rss_mb,
            fps=float(fps),
            target_fps=target_fps,
            overloaded=overloaded,
            warning=warning,
        )
