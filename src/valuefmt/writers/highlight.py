"""Syntax highlighting of encoded documents for terminals."""

from __future__ import annotations

import io
import logging

from pygments.styles import get_all_styles
from rich.console import Console
from rich.syntax import RICH_SYNTAX_THEMES, Syntax

logger = logging.getLogger(__name__)

# Theme used for pretty output and for unknown theme names
DEFAULT_THEME = "native"

# Theme name that disables highlighting
NOOP_THEME = "noop"

THEMES: frozenset[str] = frozenset(get_all_styles()) | frozenset(RICH_SYNTAX_THEMES)


def resolve_theme(name: str | None) -> str | None:
    """Resolve a theme name against :data:`THEMES`.

    Returns:
        The theme to highlight with, or None if highlighting is disabled.
        Unknown names resolve to :data:`DEFAULT_THEME`.

    Examples:
        >>> resolve_theme("monokai")
        'monokai'
        >>> resolve_theme("no-such-theme")
        'native'
        >>> resolve_theme("noop") is None
        True
    """
    if not name or name == NOOP_THEME:
        return None
    if name in THEMES:
        return name
    logger.debug("Unknown theme %r, falling back to %r", name, DEFAULT_THEME)
    return DEFAULT_THEME


def highlight(source: str, lexer: str, theme: str) -> str:
    """Return ``source`` colored with 8-color ANSI escape sequences.

    Args:
        source: Document text.
        lexer: Pygments lexer name, e.g. ``"json"`` or ``"yaml"``.
        theme: A name from :data:`THEMES`.
    """
    syntax = Syntax(source, lexer, theme=theme, background_color="default")
    text = syntax.highlight(source)
    text.rstrip()

    buf = io.StringIO()
    console = Console(
        file=buf,
        force_terminal=True,
        color_system="standard",
        highlight=False,
        emoji=False,
        markup=False,
    )
    console.print(text, end="", soft_wrap=True)
    return buf.getvalue()
