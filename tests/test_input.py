"""Regression tests for raw-key decoding.

Covers ESC timing, arrow and paging sequences, and control-key token mapping.
"""

import os
import time
import unittest

from csvcols import input as input_mod


class ReadKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        input_mod._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        input_mod._PENDING_BYTES.clear()

    def _read_from(self, payload: bytes, reads: int = 1) -> list[str]:
        read_fd, write_fd = os.pipe()
        try:
            os.write(write_fd, payload)
            return [input_mod.read_key(read_fd, timeout_ms=20) for _ in range(reads)]
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_single_escape_returns_esc_without_second_keypress(self) -> None:
        started = time.monotonic()
        keys = self._read_from(b"\x1b")
        elapsed = time.monotonic() - started

        self.assertEqual(keys, ["ESC"])
        self.assertLess(elapsed, 0.2)

    def test_escape_does_not_swallow_following_printable_key(self) -> None:
        self.assertEqual(self._read_from(b"\x1ba", reads=2), ["ESC", "a"])

    def test_arrow_and_paging_sequences(self) -> None:
        self.assertEqual(
            self._read_from(b"\x1b[A\x1b[D\x1b[6~\x1b[5~\x1b[1;2C\x1b[1;2D", reads=6),
            ["UP", "LEFT", "PAGE_DOWN", "PAGE_UP", "SHIFT_RIGHT", "SHIFT_LEFT"],
        )

    def test_control_keys(self) -> None:
        self.assertEqual(
            self._read_from(b"\x04\x15\t\x7f\r\x03", reads=6),
            ["CTRL_D", "CTRL_U", "TAB", "BACKSPACE", "ENTER", "CTRL_C"],
        )

    def test_utf8_character_is_decoded_whole(self) -> None:
        self.assertEqual(self._read_from("é".encode("utf-8")), ["é"])

    def test_timeout_returns_empty_token(self) -> None:
        self.assertEqual(self._read_from(b""), [""])


if __name__ == "__main__":
    unittest.main()
