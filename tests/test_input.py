"""Regression tests for raw-key decoding.

Covers ESC timing, arrow sequences, control-key tokens, and multibyte text.
"""

import os
import time
import unittest

from algoscales import input as input_mod


class ReadKeyRegressionTests(unittest.TestCase):
    def setUp(self) -> None:
        input_mod._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        input_mod._PENDING_BYTES.clear()

    def _read_all(self, payload: bytes, count: int) -> list[str]:
        read_fd, write_fd = os.pipe()
        try:
            os.write(write_fd, payload)
            return [input_mod.read_key(read_fd, timeout_ms=20) for _ in range(count)]
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_single_escape_returns_esc_without_second_keypress(self) -> None:
        started = time.monotonic()
        keys = self._read_all(b"\x1b", 1)
        elapsed = time.monotonic() - started

        self.assertEqual(keys, ["ESC"])
        self.assertLess(elapsed, 0.2)

    def test_arrow_sequences_are_recognized(self) -> None:
        self.assertEqual(self._read_all(b"\x1b[A\x1b[B\x1b[C\x1b[D", 4), ["UP", "DOWN", "RIGHT", "LEFT"])

    def test_escape_does_not_swallow_following_printable_key(self) -> None:
        self.assertEqual(self._read_all(b"\x1bq", 2), ["ESC", "q"])

    def test_control_keys_are_recognized(self) -> None:
        self.assertEqual(
            self._read_all(b"\x03\x04\r\x7f\t", 5),
            ["CTRL_C", "CTRL_D", "ENTER", "BACKSPACE", "TAB"],
        )

    def test_delete_sequence(self) -> None:
        self.assertEqual(self._read_all(b"\x1b[3~", 1), ["DELETE"])

    def test_page_keys(self) -> None:
        self.assertEqual(self._read_all(b"\x1b[5~\x1b[6~", 2), ["PAGE_UP", "PAGE_DOWN"])

    def test_multibyte_character_is_decoded_whole(self) -> None:
        self.assertEqual(self._read_all("\u00e9".encode("utf-8"), 1), ["\u00e9"])

    def test_timeout_without_input_returns_empty(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            key = input_mod.read_key(read_fd, timeout_ms=10)
        finally:
            os.close(read_fd)
            os.close(write_fd)

        self.assertEqual(key, "")


if __name__ == "__main__":
    unittest.main()
