"""
plcrashutil: command line converter for PLCrashReporter crash logs.

Main commands:
- convert: decode a .plcrash file and print it as an iOS-style text crash log

Entry points:
- plcrashutil: Main CLI entry point (installed via pip)
- python -m plcrash
- Can also be imported and called programmatically via main(argv)
"""

from __future__ import annotations

from plcrash.cli.helpers import _print, _print_error
from plcrash.cli.convert_cmd import cmd_convert
from plcrash.cli.dispatch import main

__all__ = [
    "_print",
    "_print_error",
    "cmd_convert",
    "main",
]
