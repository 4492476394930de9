"""Persistent app settings schema, load/save helpers, and the key-value store."""

from __future__ import annotations

import json
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


CONFIG_VERSION = 2

SCROLL_VELOCITY_KEY = "scroll_velocity"
PIXEL_SIZE_KEY = "pixel_size"
FRAME_RATE_KEY = "frame_rate"
MINIMUM_DIRECTION_SWITCH_SECONDS_KEY = "minimum_direction_switch_seconds"

SETTING_RANGES: dict[str, tuple[int, int]] = {
    SCROLL_VELOCITY_KEY: (-50, 50),
    PIXEL_SIZE_KEY: (1, 64),
    FRAME_RATE_KEY: (1, 60),
    MINIMUM_DIRECTION_SWITCH_SECONDS_KEY: (0, 60),
}


@dataclass
class AnimationConfig:
    scroll_velocity: int = 1
    pixel_size: int = 8
    frame_rate: int = 30
    minimum_direction_switch_seconds: int = 5


@dataclass
class WindowConfig:
    width: int = 480
    height: int = 800
    fullscreen: bool = False


@dataclass
class DiagnosticsConfig:
    keep_log_files: int = 7


@dataclass
class PerformanceConfig:
    cpu_percent_max: float = 25.0
    rss_mb_max: float = 300.0
    fps_tolerance: float = 0.2


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    animation: AnimationConfig = field(default_factory=AnimationConfig)
    window: WindowConfig = field(default_factory=WindowConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)


DEFAULT_CONFIG = AppConfig()
ANIMATION_DEFAULTS: dict[str, int] = asdict(AnimationConfig())


def config_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "WanderSpectrum"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "WanderSpectrum"
    return Path.home() / ".config" / "wanderspectrum"


def config_path() -> Path:
    return config_root() / "config.json"


def _merge(dataclass_type, raw: Any):
    defaults = dataclass_type()  # type: ignore[misc]
    if not isinstance(raw, dict):
        return defaults
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def clamp_setting(key: str, value: Any) -> int:
    low, high = SETTING_RANGES[key]
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        number = ANIMATION_DEFAULTS[key]
    return max(low, min(high, number))


def _normalize_animation(cfg: AppConfig) -> None:
    for key in SETTING_RANGES:
        setattr(cfg.animation, key, clamp_setting(key, getattr(cfg.animation, key)))


def _coerce(cast, value: Any, default: Any) -> Any:
    try:
        return cast(value)
    except (TypeError, ValueError, OverflowError):
        return default


def _normalize_window(cfg: AppConfig) -> None:
    defaults = WindowConfig()
    cfg.window.width = max(64, _coerce(int, cfg.window.width, defaults.width))
    cfg.window.height = max(64, _coerce(int, cfg.window.height, defaults.height))
    cfg.window.fullscreen = bool(cfg.window.fullscreen)


def _normalize_performance(cfg: AppConfig) -> None:
    defaults = PerformanceConfig()
    cpu = _coerce(float, cfg.performance.cpu_percent_max, defaults.cpu_percent_max)
    rss = _coerce(float, cfg.performance.rss_mb_max, defaults.rss_mb_max)
    tolerance = _coerce(float, cfg.performance.fps_tolerance, defaults.fps_tolerance)
    cfg.performance.cpu_percent_max = max(1.0, cpu)
    cfg.performance.rss_mb_max = max(64.0, rss)
    cfg.performance.fps_tolerance = min(0.9, max(0.0, tolerance))


def _normalize_diagnostics(cfg: AppConfig) -> None:
    keep = _coerce(int, cfg.diagnostics.keep_log_files, DiagnosticsConfig().keep_log_files)
    cfg.diagnostics.keep_log_files = max(1, keep)


def _migrate(raw: dict[str, Any]) -> dict[str, Any]:
    # An unreadable version is treated as the oldest layout.
    version = _coerce(int, raw.get("config_version", 1), 1)
    data = dict(raw)

    if version < 2:
        # v1 stored the four animation values flat at the top level.
        animation = data.get("animation")
        animation = dict(animation) if isinstance(animation, dict) else {}
        for key in SETTING_RANGES:
            if key in data:
                animation.setdefault(key, data.pop(key))
        data["animation"] = animation
        data.setdefault("window", {})
        data.setdefault("performance", {})
        data["config_version"] = 2

    return data


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except Exception:
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()

    data = _migrate(raw)
    cfg = AppConfig(
        config_version=_coerce(int, data.get("config_version"), CONFIG_VERSION),
        animation=_merge(AnimationConfig, data.get("animation", {})),
        window=_merge(WindowConfig, data.get("window", {})),
        diagnostics=_merge(DiagnosticsConfig, data.get("diagnostics", {})),
        performance=_merge(PerformanceConfig, data.get("performance", {})),
    )

    _normalize_animation(cfg)
    _normalize_window(cfg)
    _normalize_diagnostics(cfg)
    _normalize_performance(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path


class SettingsStore:
    """Key-value view of the animation settings in the config file.

    Every call reads or writes the file synchronously so edits made by the
    settings dialog are visible to the next activation.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or config_path()

    def get(self, key: str, default: int | None = None) -> int:
        if key not in SETTING_RANGES:
            raise KeyError(key)
        stored = self._stored_animation()
        if key not in stored:
            return ANIMATION_DEFAULTS[key] if default is None else int(default)
        return clamp_setting(key, stored[key])

    def _stored_animation(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except Exception:
            return {}
        if not isinstance(raw, dict):
            return {}
        animation = _migrate(raw).get("animation", {})
        return animation if isinstance(animation, dict) else {}

    def set(self, key: str, value: int) -> None:
        if key not in SETTING_RANGES:
            raise KeyError(key)
        cfg = load_config(self.path)
        setattr(cfg.animation, key, clamp_setting(key, value))
        save_config(cfg, self.path)

    def reset(self) -> dict[str, int]:
        cfg = load_config(self.path)
        cfg.animation = AnimationConfig()
        save_config(cfg, self.path)
        return dict(ANIMATION_DEFAULTS)

    def as_dict(self) -> dict[str, int]:
        return asdict(load_config(self.path).animation)
