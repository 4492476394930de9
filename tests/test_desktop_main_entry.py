from __future__ import annotations

import json
import runpy
from pathlib import Path

import wanderspectrum_app.__main__ as desktop_main
import wanderspectrum_app.cli as cli


def _quiet_logging(monkeypatch) -> list[dict]:
    calls: list[dict] = []
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: calls.append(kwargs))
    return calls


def test_no_arguments_opens_window(monkeypatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(desktop_main, "cli_main", lambda argv: calls.append(argv) or 0)

    assert desktop_main.main([]) == 0
    assert calls == [["run"]]


def test_settings_show_reads_config_file(monkeypatch, capsys, tmp_path) -> None:
    config = tmp_path / "config.json"
    config.write_text(
        json.dumps({"config_version": 2, "animation": {"frame_rate": 12}, "diagnostics": {"keep_log_files": 3}}),
        encoding="utf-8",
    )
    logging_calls = _quiet_logging(monkeypatch)

    rc = desktop_main.main(["--config", str(config), "settings", "show"])

    assert rc == 0
    shown = json.loads(capsys.readouterr().out)
    assert shown["frame_rate"] == 12
    assert shown["pixel_size"] == 8
    assert logging_calls == [{"keep_files": 3, "console": False}]


def test_render_writes_frame(monkeypatch, capsys, tmp_path) -> None:
    _quiet_logging(monkeypatch)
    out = tmp_path / "frames" / "frame.png"

    rc = desktop_main.main(
        [
            "--config", str(tmp_path / "config.json"),
            "render", "--ticks", "3", "--seed", "9",
            "--width", "48", "--height", "32",
            "--out", str(out),
        ]
    )

    assert rc == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["ticks"] == 3
    assert payload["size"] == [48, 32]
    assert payload["tick_errors"] == 0
    assert out.exists()


def test_main_module_runpath_without_package_context() -> None:
    main_path = Path(__file__).resolve().parents[1] / "apps" / "desktop" / "wanderspectrum_app" / "__main__.py"
    result = runpy.run_path(str(main_path))
    assert callable(result["main"])
