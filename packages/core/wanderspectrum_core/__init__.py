"""Core app services for settings, animation, scheduling, and diagnostics."""

from .animator import (
    AnimationSettings,
    AnimationState,
    AnimatorPhase,
    AnimatorStatus,
    InvalidConfigurationError,
    ScrollAnimator,
)
from .config import AppConfig, SettingsStore, load_config, save_config
from .diagnostics import build_doctor_payload
from .performance import BudgetStatus, PerformanceController, PerformanceTargets
from .scheduler import ManualTicker, ThreadTicker, Ticker, tick_interval_ms

__all__ = [
    "AnimationSettings",
    "AnimationState",
    "AnimatorPhase",
    "AnimatorStatus",
    "AppConfig",
    "BudgetStatus",
    "InvalidConfigurationError",
    "ManualTicker",
    "PerformanceController",
    "PerformanceTargets",
    "ScrollAnimator",
    "SettingsStore",
    "ThreadTicker",
    "Ticker",
    "build_doctor_payload",
    "load_config",
    "save_config",
    "tick_interval_ms",
]
