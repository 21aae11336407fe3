"""Inline emphasis for display: headers, bold and italic.

The parser is a single left-to-right pass over one logical line. The first
opening marker found governs until its own close is located (or the line
ends); nested emphasis is not recognised. Markup characters are kept in the
output as low-emphasis runs, so the rendered text has exactly the same
characters as the source line.
"""

from enum import IntFlag
from typing import NamedTuple


class StyleFlags(IntFlag):
    """Emphasis bits carried by every rendered character."""
    NONE = 0
    BOLD = 1
    ITALIC = 2
    MARKER = 4  # Markup characters, drawn in the guide colour
    FADED = 8  # Focus mode: lines other than the cursor's


class StyledRun(NamedTuple):
    text: str
    style: StyleFlags = StyleFlags.NONE


HEADER_PREFIXES = ("## ", "# ")
EMPHASIS_MARKERS = ("*", "_")


def _strip_terminator(line: str) -> str:
    # A "\r" before the terminator is content and keeps its column
    if line.endswith("\n"):
        line = line[:-1]
    return line


def parse_line(line: str) -> list[StyledRun]:
    """Split one logical line into styled runs.

    Accepts the line with or without its terminator. Empty runs are never
    produced, so an empty line yields an empty list.
    """
    raw = _strip_terminator(line)
    runs: list[StyledRun] = []

    def emit(text: str, style: StyleFlags = StyleFlags.NONE):
        if text:
            runs.append(StyledRun(text, style))

    # Headers: dimmed marker, the rest bold, no inline parsing
    for prefix in HEADER_PREFIXES:
        if raw.startswith(prefix):
            emit(prefix, StyleFlags.MARKER)
            emit(raw[len(prefix):], StyleFlags.BOLD)
            return runs

    pending: list[str] = []  # Plain characters not yet flushed
    i = 0
    length = len(raw)
    while i < length:
        c = raw[i]
        if c not in EMPHASIS_MARKERS:
            pending.append(c)
            i += 1
            continue

        emit("".join(pending))
        pending = []

        if i + 1 < length and raw[i + 1] == c:
            marker = c * 2
            style = StyleFlags.BOLD
        else:
            marker = c
            style = StyleFlags.ITALIC

        body_start = i + len(marker)
        close = raw.find(marker, body_start)
        if close == -1:
            # Unmatched: everything to the end of the line stays literal
            emit(marker)
            emit(raw[body_start:])
            i = length
        else:
            emit(marker, StyleFlags.MARKER)
            emit(raw[body_start:close], style)
            emit(marker, StyleFlags.MARKER)
            i = close + len(marker)

    emit("".join(pending))
    return runs


def flatten_runs(runs: list[StyledRun]) -> list[tuple[str, StyleFlags]]:
    """Expand runs into per-character ``(char, style)`` cells."""
    return [(ch, run.style) for run in runs for ch in run.text]
