from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from loguru import logger

from algoscales.logs import LOG_FILENAME, configure_logging
from algoscales.state import SCREEN_TYPES, HomeScreen, check_exhaustive


class ConfigureLoggingTests(unittest.TestCase):
    def test_messages_go_to_log_file_at_level(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            log_dir = Path(tmp) / "logs"
            path = configure_logging("warning", log_dir)
            try:
                logger.info("hidden message")
                logger.warning("visible message")
                logger.complete()
            finally:
                logger.remove()

            text = path.read_text(encoding="utf-8")

        self.assertEqual(path, log_dir / LOG_FILENAME)
        self.assertIn("visible message", text)
        self.assertNotIn("hidden message", text)


class ExhaustiveDispatchTests(unittest.TestCase):
    def test_missing_screen_type_is_reported(self) -> None:
        with self.assertRaises(RuntimeError) as ctx:
            check_exhaustive({HomeScreen: object()}, "views")

        self.assertIn("SessionScreen", str(ctx.exception))

    def test_complete_table_passes(self) -> None:
        check_exhaustive({screen_type: None for screen_type in SCREEN_TYPES}, "views")


if __name__ == "__main__":
    unittest.main()
