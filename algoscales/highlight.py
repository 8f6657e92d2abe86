"""Syntax highlighting for code blocks shown in problem and session views.

Pygments is imported on first use to keep startup fast. Terminal control bytes
are neutralized before highlighting so problem files cannot drive the tty.
"""

from __future__ import annotations

import re
from functools import lru_cache

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")

LANGUAGE_LEXERS: dict[str, str] = {
    "python": "python",
    "javascript": "javascript",
    "typescript": "typescript",
    "go": "go",
    "java": "java",
    "cpp": "cpp",
    "rust": "rust",
}


def sanitize_terminal_text(source: str) -> str:
    """Replace control bytes (except tab/newline/CR) with printable escapes."""
    return _CONTROL_RE.sub(lambda match: f"\\x{ord(match.group(0)):02x}", source)


@lru_cache(maxsize=16)
def _formatter_for_style(style: str):
    from pygments.formatters import Terminal256Formatter
    from pygments.styles import get_all_styles

    if style not in set(get_all_styles()):
        style = "monokai"
    return Terminal256Formatter(style=style)


@lru_cache(maxsize=16)
def _lexer_for_language(language: str):
    from pygments.lexers import TextLexer, get_lexer_by_name
    from pygments.util import ClassNotFound

    alias = LANGUAGE_LEXERS.get(language.lower(), language.lower())
    try:
        return get_lexer_by_name(alias)
    except ClassNotFound:
        return TextLexer()


def colorize_code(source: str, language: str, style: str) -> list[str]:
    """Return highlighted lines for ``source``; empty ``style`` means plain text."""
    safe = sanitize_terminal_text(source.expandtabs(4))
    if not style:
        return safe.splitlines()

    from pygments import highlight

    rendered = highlight(safe, _lexer_for_language(language), _formatter_for_style(style))
    lines = rendered.splitlines()
    # Pygments always terminates output with a newline; drop an extra blank row.
    while len(lines) > len(safe.splitlines()) and lines and not lines[-1].strip():
        lines.pop()
    return lines
