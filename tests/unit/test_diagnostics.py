import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from wanderspectrum_core.config import AppConfig
from wanderspectrum_core.diagnostics import build_doctor_payload, redact


class DiagnosticsTests(unittest.TestCase):
    def test_redact_nested(self):
        data = {"token": "abc", "nested": {"password": "x", "ok": 1}, "list": [{"api_key": "k"}]}
        out = redact(data)
        self.assertEqual(out["token"], "***REDACTED***")
        self.assertEqual(out["nested"]["password"], "***REDACTED***")
        self.assertEqual(out["nested"]["ok"], 1)
        self.assertEqual(out["list"][0]["api_key"], "***REDACTED***")

    def test_doctor_payload_geometry(self):
        payload = build_doctor_payload(AppConfig())
        self.assertIn("platform", payload)
        self.assertEqual(payload["config"]["animation"]["pixel_size"], 8)
        self.assertEqual(
            payload["geometry"],
            {"grid_width": 60, "buffer_height": 150, "visible_rows": 100, "tick_interval_ms": 33},
        )


if __name__ == "__main__":
    unittest.main()
