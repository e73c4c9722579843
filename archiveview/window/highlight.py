"""Pygments syntax highlighting for materialized blocks.

Each block is highlighted on its own, so multi-line tokens spanning a block
boundary may lose their coloring at the seam.
"""

from __future__ import annotations

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

FALLBACK_STYLE = "monokai"

_FORMATTERS: dict[str, Terminal256Formatter] = {}
_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()
# highlighted blocks must keep their exact line count
_LEXER_OPTIONS = {"stripnl": False, "ensurenl": False}


def normalize_style(style: str) -> str:
    """Validate a style name with cache-backed checks, falling back to monokai."""
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return FALLBACK_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        _INVALID_STYLES.add(style)
        return FALLBACK_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = Terminal256Formatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def lexer_for_path(path: str, sample: str = "") -> Lexer:
    """Pick a lexer from the entry file name, plain text when unknown."""
    name = path.rsplit("/", 1)[-1]
    try:
        return get_lexer_for_filename(name, sample, **_LEXER_OPTIONS)
    except ClassNotFound:
        return TextLexer(**_LEXER_OPTIONS)


def colorize(text: str, path: str, style: str = FALLBACK_STYLE) -> str:
    """Return ``text`` with ANSI colors for terminal output."""
    if not text:
        return text
    return highlight(text, lexer_for_path(path, text), _formatter_for_style(normalize_style(style)))


__all__ = [
    "FALLBACK_STYLE",
    "normalize_style",
    "lexer_for_path",
    "colorize",
]
