"""CLI entrypoints for the WanderSpectrum desktop app, offline rendering, and diagnostics."""

from __future__ import annotations

import argparse
import json
import random
import time
from dataclasses import asdict
from pathlib import Path

from wanderspectrum_core import (
    ManualTicker,
    PerformanceController,
    PerformanceTargets,
    ScrollAnimator,
    SettingsStore,
    ThreadTicker,
    build_doctor_payload,
    load_config,
)
from wanderspectrum_core.config import SETTING_RANGES
from wanderspectrum_core.logging_setup import configure_logging, get_logger
from wanderspectrum_renderer import ImageSurface


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _config_file(args: argparse.Namespace) -> Path | None:
    return Path(args.config).expanduser().resolve() if args.config else None


def _surface_size(args: argparse.Namespace) -> tuple[int, int]:
    cfg = load_config(_config_file(args))
    return (args.width or cfg.window.width, args.height or cfg.window.height)


def cmd_run(args: argparse.Namespace) -> int:
    from .app import run_gui

    return run_gui(_config_file(args))


def cmd_render(args: argparse.Namespace) -> int:
    width, height = _surface_size(args)
    surface = ImageSurface(width, height)
    ticker = ManualTicker()
    animator = ScrollAnimator(
        surface,
        SettingsStore(_config_file(args)),
        ticker=ticker,
        rng=random.Random(args.seed),
    )

    animator.activate()
    ticks = ticker.fire(args.ticks)
    animator.deactivate()
    out = surface.save(Path(args.out).expanduser().resolve())

    state = animator.state
    _print_json(
        {
            "success": True,
            "out": str(out),
            "ticks": ticks,
            "size": [width, height],
            "vertical_offset": state.vertical_offset,
            "velocity": state.velocity,
            "direction_changes": animator.status.direction_changes,
            "tick_errors": animator.status.tick_errors,
        }
    )
    return 0


def cmd_benchmark(args: argparse.Namespace) -> int:
    cfg = load_config(_config_file(args))
    width, height = _surface_size(args)
    surface = ImageSurface(width, height)
    animator = ScrollAnimator(surface, SettingsStore(_config_file(args)), ticker=ThreadTicker())
    perf = PerformanceController(
        PerformanceTargets(
            cpu_percent_max=cfg.performance.cpu_percent_max,
            rss_mb_max=cfg.performance.rss_mb_max,
            fps_tolerance=cfg.performance.fps_tolerance,
        )
    )

    animator.activate()
    settings = animator.settings
    samples = []
    start = time.perf_counter()
    deadline = start + args.seconds
    while time.perf_counter() < deadline:
        time.sleep(0.5)
        samples.append(asdict(perf.sample(animator.status.fps, settings.frame_rate)))
    animator.deactivate()

    elapsed = max(time.perf_counter() - start, 1e-9)
    status = animator.status
    fps_actual = status.frames_drawn / elapsed
    final = perf.evaluate(
        max((s["cpu_percent"] for s in samples), default=0.0),
        max((s["rss_mb"] for s in samples), default=0.0),
        fps_actual,
        settings.frame_rate,
    )

    _print_json(
        {
            "seconds": args.seconds,
            "frames": status.frames_drawn,
            "skipped": status.frames_skipped,
            "direction_changes": status.direction_changes,
            "last_tick_ms": status.last_tick_ms,
            "budget": asdict(final),
            "pass": final.warning is None,
        }
    )
    return 0


def cmd_settings_show(args: argparse.Namespace) -> int:
    _print_json(SettingsStore(_config_file(args)).as_dict())
    return 0


def cmd_settings_set(args: argparse.Namespace) -> int:
    store = SettingsStore(_config_file(args))
    store.set(args.key, args.value)
    _print_json({args.key: store.get(args.key)})
    return 0


def cmd_settings_reset(args: argparse.Namespace) -> int:
    _print_json(SettingsStore(_config_file(args)).reset())
    return 0


def cmd_doctor(args: argparse.Namespace) -> int:
    _print_json(build_doctor_payload(load_config(_config_file(args))))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wanderspectrum", description="WanderSpectrum animated spectrum background")
    parser.add_argument("--config", default=None, help="Optional path to config.json")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="Run desktop window")
    run_cmd.set_defaults(func=cmd_run)

    render_cmd = sub.add_parser("render", help="Render frames offline and save the last one as PNG")
    render_cmd.add_argument("--ticks", type=int, default=1)
    render_cmd.add_argument("--seed", type=int, default=None)
    render_cmd.add_argument("--width", type=int, default=None)
    render_cmd.add_argument("--height", type=int, default=None)
    render_cmd.add_argument("--out", default="wanderspectrum.png")
    render_cmd.set_defaults(func=cmd_render)

    bench_cmd = sub.add_parser("benchmark", help="Run the animation headless and report frame budget")
    bench_cmd.add_argument("--seconds", type=int, default=10)
    bench_cmd.add_argument("--width", type=int, default=None)
    bench_cmd.add_argument("--height", type=int, default=None)
    bench_cmd.set_defaults(func=cmd_benchmark)

    settings_cmd = sub.add_parser("settings", help="Show or edit animation settings")
    settings_sub = settings_cmd.add_subparsers(dest="settings_cmd", required=True)
    show_cmd = settings_sub.add_parser("show", help="Print current settings")
    show_cmd.set_defaults(func=cmd_settings_show)
    set_cmd = settings_sub.add_parser("set", help="Store one setting")
    set_cmd.add_argument("key", choices=sorted(SETTING_RANGES))
    set_cmd.add_argument("value", type=int)
    set_cmd.set_defaults(func=cmd_settings_set)
    reset_cmd = settings_sub.add_parser("reset", help="Restore default settings")
    reset_cmd.set_defaults(func=cmd_settings_reset)

    doctor_cmd = sub.add_parser("doctor", help="Print environment and configuration diagnostics")
    doctor_cmd.set_defaults(func=cmd_doctor)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    cfg = load_config(_config_file(args))
    configure_logging(keep_files=cfg.diagnostics.keep_log_files, console=False)
    get_logger().info("command start", extra={"event": f"cli_{args.command}"})
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
