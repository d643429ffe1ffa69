"""Crash log conversion command for plcrashutil."""

from __future__ import annotations

import logging
import sys

from plcrash.errors import CrashReportError
from plcrash.formatters import text_format_for_name
from plcrash.report import decode, render
from plcrash.cli.helpers import _print, _print_error, _read_file

logger = logging.getLogger(__name__)


def cmd_convert(*, path: str, format_name: str, json_mode: bool) -> int:
    """Decode a ``.plcrash`` file and print it in the requested text format.

    Args:
        path: Crash log file to read.
        format_name: Output format name, ``ios`` or ``iphone`` (any case).
        json_mode: Emit ``{"report": ..., "format": ...}`` instead of raw text.

    Returns:
        Exit code: 0 on success, 1 on an unsupported format, an unreadable
        file or a malformed crash log.
    """
    try:
        text_format = text_format_for_name(format_name)
    except ValueError as e:
        _print_error(str(e), json_mode=json_mode)
        return 1

    try:
        data = _read_file(path)
    except OSError as e:
        logger.debug("Failed to read %s", path, exc_info=True)
        _print_error(f"Could not read {path}: {e.strerror or e}", json_mode=json_mode)
        return 1

    try:
        report = decode(data)
    except CrashReportError as e:
        logger.debug("Failed to decode %s", path, exc_info=True)
        _print_error(f"{path}: {e}", json_mode=json_mode)
        return 1

    text = render(report, text_format)
    if json_mode:
        _print({"report": text, "format": text_format.name.lower()}, json_mode=True)
    else:
        # Rendered text already ends with a newline
        sys.stdout.write(text)
    return 0
