# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Console status lines for run summaries, with optional colour and emoji."""

from __future__ import annotations

import sys
from enum import Enum
from functools import lru_cache
from typing import Final

from rich.console import Console
from rich.rule import Rule
from rich.text import Text


class Tone(str, Enum):
    """Kind of status line printed in a summary."""

    CLEAN = "clean"
    FINDINGS = "findings"
    DETAIL = "detail"


# marker glyph, rich style
_TONE_MARKERS: Final[dict[Tone, tuple[str, str]]] = {
    Tone.CLEAN: ("✅", "green"),
    Tone.FINDINGS: ("⚠️", "yellow"),
    Tone.DETAIL: ("•", "cyan"),
}


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@lru_cache(maxsize=8)
def get_console(*, color: bool, emoji: bool) -> Console:
    """Return a cached Rich console configured for the presentation flags.

    Args:
        color: ``True`` when ANSI colour output should be enabled.
        emoji: ``True`` when Rich should render emoji glyphs.

    Returns:
        Console: Console shared by every caller using the same flags.
    """

    tty = detect_tty()
    return Console(
        color_system="auto" if color and tty else None,
        force_terminal=tty,
        no_color=not (color and tty),
        emoji=emoji,
        soft_wrap=True,
    )


def section(title: str, *, use_color: bool) -> None:
    """Print a section header, as a rule when colour is enabled."""

    console = get_console(color=use_color, emoji=False)
    if use_color:
        console.print()
        console.print(Rule(title))
    else:
        console.print(Text(f"\n--- {title} ---"))


def status(msg: str, tone: Tone, *, use_emoji: bool, use_color: bool | None = None, indent: int = 0) -> None:
    """Print one summary line for ``tone``.

    Args:
        msg: Message text; never interpreted as Rich markup.
        tone: Selects the marker glyph and colour.
        use_emoji: Prefix the line with the tone's glyph.
        use_color: Optional explicit colour flag overriding TTY detection.
        indent: Number of leading spaces, used for nested detail lines.
    """

    color_enabled = detect_tty() if use_color is None else use_color
    glyph, style = _TONE_MARKERS[tone]
    text = Text(" " * indent)
    if use_emoji:
        text.append(f"{glyph} ")
    text.append(msg, style=style if color_enabled else None)
    get_console(color=color_enabled, emoji=use_emoji).print(text)


__all__ = ["Tone", "detect_tty", "get_console", "section", "status"]
