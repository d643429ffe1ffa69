"""Pluggable crash report formatter registry.

An ABC + registry dict + factory. Add a new layout by dropping in one file
and registering it here.
"""

from .base import ReportFormatter, TextFormat
from .ios import IOSTextFormatter
from .writer import Align, TextWriter

__all__ = [
    "Align",
    "IOSTextFormatter",
    "ReportFormatter",
    "TextFormat",
    "TextWriter",
    "get_formatter",
    "text_format_for_name",
]

# Registry: text format -> formatter class
_FORMATTERS: dict[TextFormat, type[ReportFormatter]] = {
    TextFormat.IOS: IOSTextFormatter,
}

# Command line names; "iphone" is kept for compatibility with older tooling
_FORMAT_NAMES: dict[str, TextFormat] = {
    "ios": TextFormat.IOS,
    "iphone": TextFormat.IOS,
}


def get_formatter(text_format: TextFormat) -> ReportFormatter:
    """Get the formatter for a text format. Raises ValueError if none is registered."""
    cls = _FORMATTERS.get(text_format)
    if cls is None:
        raise ValueError(f"Unsupported text format: {text_format!r}")
    return cls()


def text_format_for_name(name: str) -> TextFormat:
    """Map a case-insensitive format name (``ios``, ``iphone``) to a TextFormat."""
    try:
        return _FORMAT_NAMES[name.lower()]
    except KeyError:
        raise ValueError(f"Unsupported format: {name}") from None
