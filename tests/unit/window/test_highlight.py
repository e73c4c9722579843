"""Pygments highlighting tests."""

from __future__ import annotations

import unittest

from pygments.lexers import TextLexer

from archiveview.window.highlight import FALLBACK_STYLE, colorize, lexer_for_path, normalize_style


class HighlightTests(unittest.TestCase):
    def test_lexer_picked_from_entry_file_name(self) -> None:
        self.assertEqual(lexer_for_path("src/pkg/script.py").name, "Python")

    def test_unknown_extension_uses_plain_text(self) -> None:
        self.assertIsInstance(lexer_for_path("data/blob.zzqq"), TextLexer)

    def test_unknown_style_falls_back(self) -> None:
        self.assertEqual(normalize_style("no-such-style-anywhere"), FALLBACK_STYLE)
        self.assertEqual(normalize_style("default"), "default")

    def test_colorize_emits_ansi(self) -> None:
        out = colorize("def f():\n    return 1", "x.py", "monokai")
        self.assertIn("\x1b[", out)

    def test_colorize_preserves_line_count(self) -> None:
        samples = ["x = 1", "x = 1\n", "\n\nx = 1\n\n", "a\nb\nc"]
        for text in samples:
            with self.subTest(text=text):
                self.assertEqual(colorize(text, "x.py").count("\n"), text.count("\n"))

    def test_empty_text_is_unchanged(self) -> None:
        self.assertEqual(colorize("", "x.py"), "")


if __name__ == "__main__":
    unittest.main()
