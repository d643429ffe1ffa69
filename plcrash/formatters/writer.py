"""Line-oriented text writer with fixed-width field helpers.

Formatters describe each line as a sequence of typed writes (padded text,
hex numbers of a declared width) instead of ad hoc string concatenation, so
column rules are testable in isolation.
"""

from __future__ import annotations

from enum import Enum


class Align(Enum):
    LEFT = "<"
    RIGHT = ">"


def fixed(text: str, width: int, align: Align = Align.LEFT, *, truncate: bool = False) -> str:
    """Pad ``text`` to ``width``; optionally cut it to exactly ``width``.

    Truncation never adds an ellipsis.
    """
    padded = format(text, f"{align.value}{width}")
    if truncate:
        return padded[:width]
    return padded


def hex_field(value: int, width: int = 0, *, fill: str = "0") -> str:
    """``0x``-prefixed lowercase hex, right-justified to ``width`` digits."""
    if width <= 0:
        return f"0x{value:x}"
    return f"0x{value:{fill}>{width}x}"


class TextWriter:
    """Accumulates lines terminated by ``\\n``."""

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._current: list[str] = []

    def text(self, value: str) -> TextWriter:
        self._current.append(value)
        return self

    def field(self, value: str, width: int, align: Align = Align.LEFT, *, truncate: bool = False) -> TextWriter:
        self._current.append(fixed(value, width, align, truncate=truncate))
        return self

    def hex(self, value: int, width: int = 0, *, fill: str = "0") -> TextWriter:
        self._current.append(hex_field(value, width, fill=fill))
        return self

    def end_line(self) -> TextWriter:
        self._lines.append("".join(self._current))
        self._current = []
        return self

    def line(self, value: str = "") -> TextWriter:
        """Append ``value`` to the current line and end it."""
        return self.text(value).end_line()

    def getvalue(self) -> str:
        lines = self._lines
        if self._current:
            lines = lines + ["".join(self._current)]
        return "".join(f"{line}\n" for line in lines)
