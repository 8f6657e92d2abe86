"""Regression tests for ANSI-aware width math and line shaping."""

import unittest

from algoscales import ansi as ansi_mod


class DisplayWidthTests(unittest.TestCase):
    def test_escapes_do_not_count(self) -> None:
        self.assertEqual(ansi_mod.display_width("\x1b[1;31mred\x1b[0m"), 3)

    def test_wide_and_combining_characters(self) -> None:
        self.assertEqual(ansi_mod.display_width("日本"), 4)
        self.assertEqual(ansi_mod.display_width("e\u0301"), 1)


class ClipTests(unittest.TestCase):
    def test_clip_keeps_styles_and_cuts_at_width(self) -> None:
        clipped = ansi_mod.clip_ansi_line("\x1b[32mabcdef\x1b[0m", 3)

        self.assertEqual(clipped, "\x1b[32mabc")

    def test_clip_never_splits_wide_character(self) -> None:
        self.assertEqual(ansi_mod.clip_ansi_line("a日本", 2), "a")

    def test_tabs_expand_to_spaces(self) -> None:
        self.assertEqual(ansi_mod.clip_ansi_line("a\tb", 20), "a       b")

    def test_pad_fills_to_width(self) -> None:
        self.assertEqual(ansi_mod.pad_ansi_line("ab", 4), "ab  ")


class WrapTests(unittest.TestCase):
    def test_wraps_on_word_boundaries_and_keeps_blank_lines(self) -> None:
        lines = ansi_mod.wrap_plain_text("one two three\n\nfour", 8)

        self.assertEqual(lines, ["one two", "three", "", "four"])

    def test_long_word_is_split(self) -> None:
        self.assertEqual(ansi_mod.wrap_plain_text("abcdefghij", 4), ["abcd", "efgh", "ij"])


if __name__ == "__main__":
    unittest.main()
