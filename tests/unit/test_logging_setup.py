import json
import logging
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from wanderspectrum_core.logging_setup import JsonFormatter, configure_logging, get_logger


def _owned(logger):
    return [h for h in logger.handlers if getattr(h, "wanderspectrum_owned", False)]


class JsonFormatterTests(unittest.TestCase):
    def test_extra_fields_become_top_level_keys(self):
        record = logging.makeLogRecord(
            {"name": "wanderspectrum.animator", "levelname": "INFO", "msg": "direction changed",
             "event": "direction_changed", "velocity": -3}
        )
        payload = json.loads(JsonFormatter().format(record))
        self.assertEqual(payload["msg"], "direction changed")
        self.assertEqual(payload["event"], "direction_changed")
        self.assertEqual(payload["velocity"], -3)
        self.assertNotIn("args", payload)

    def test_exception_text_included(self):
        try:
            raise OSError("display went away")
        except OSError:
            record = logging.makeLogRecord({"msg": "frame failed", "exc_info": sys.exc_info()})
        payload = json.loads(JsonFormatter().format(record))
        self.assertIn("OSError: display went away", payload["exc"])


class ConfigureLoggingTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.directory = Path(self._tmp.name)
        self.logger = get_logger()

    def tearDown(self):
        for handler in _owned(self.logger):
            self.logger.removeHandler(handler)
            handler.close()
        self._tmp.cleanup()

    def test_second_call_applies_new_retention(self):
        configure_logging(keep_files=7, console=True, directory=self.directory)
        configure_logging(keep_files=3, console=False, directory=self.directory)
        handlers = _owned(self.logger)
        self.assertEqual(len(handlers), 1)
        self.assertEqual(handlers[0].backupCount, 3)

    def test_writes_json_lines(self):
        configure_logging(keep_files=2, console=False, directory=self.directory)
        get_logger("animator").info("animation activated", extra={"event": "activated", "frame_rate": 30})
        for handler in _owned(self.logger):
            handler.flush()
        lines = (self.directory / "wanderspectrum.log").read_text(encoding="utf-8").splitlines()
        last = json.loads(lines[-1])
        self.assertEqual(last["logger"], "wanderspectrum.animator")
        self.assertEqual(last["event"], "activated")
        self.assertEqual(last["frame_rate"], 30)


if __name__ == "__main__":
    unittest.main()
