"""Shared utilities for plcrashutil CLI commands."""

from __future__ import annotations

import json
import sys
from typing import Any


def _print(obj: Any, *, json_mode: bool) -> None:
    if json_mode:
        print(json.dumps(obj, indent=2, sort_keys=True))
    else:
        if isinstance(obj, str):
            print(obj)
        else:
            print(json.dumps(obj, indent=2, sort_keys=True))


def _print_error(message: str, *, json_mode: bool) -> None:
    """Errors go to stdout as ``{"error": ...}`` in JSON mode, else to stderr."""
    if json_mode:
        _print({"error": message}, json_mode=True)
    else:
        print(message, file=sys.stderr)


def _read_file(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()
