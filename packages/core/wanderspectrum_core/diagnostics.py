"""Doctor payload for local troubleshooting."""

from __future__ import annotations

import platform
import re
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any

from wanderspectrum_renderer import GridGeometry

from .config import AppConfig, config_path, config_root
from .scheduler import tick_interval_ms


_SECRET_RE = re.compile(r"(token|secret|password|apikey|api_key|auth)", re.IGNORECASE)


def redact(value: Any) -> Any:
    if isinstance(value, dict):
        out: dict[str, Any] = {}
        for k, v in value.items():
            if _SECRET_RE.search(k):
                out[k] = "***REDACTED***"
            else:
                out[k] = redact(v)
        return out
    if isinstance(value, list):
        return [redact(v) for v in value]
    return value


def build_doctor_payload(cfg: AppConfig) -> dict[str, Any]:
    geometry = GridGeometry(
        width=cfg.window.width,
        height=cfg.window.height,
        pixel_size=cfg.animation.pixel_size,
    )
    return {
        "ts_utc": datetime.now(timezone.utc).isoformat(),
        "platform": platform.platform(),
        "python": platform.python_version(),
        "config_path": str(config_path()),
        "log_dir": str(config_root() / "logs"),
        "config": redact(asdict(cfg)),
        "geometry": {
            "grid_width": geometry.grid_width,
            "buffer_height": geometry.buffer_height,
            "visible_rows": geometry.visible_rows,
            "tick_interval_ms": tick_interval_ms(cfg.animation.frame_rate),
        },
    }
