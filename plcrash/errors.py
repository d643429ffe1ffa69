"""Exception hierarchy for crash log decoding.

Container-level errors (TruncatedInput, InvalidHeader, UnsupportedVersion)
are raised before any message decoding. DecodeError is raised by the model
extractor when a structurally present section is missing a required field,
or when the protobuf payload itself cannot be parsed.
"""

from __future__ import annotations

from typing import Optional


class CrashReportError(ValueError):
    """Base class for all crash log decode failures."""


class TruncatedInput(CrashReportError):
    """The buffer is too short to hold the magic and version header."""

    def __init__(self, length: int):
        self.length = length
        super().__init__("Could not decode truncated crash log")


class InvalidHeader(CrashReportError):
    """The file magic does not match."""

    def __init__(self, magic: bytes):
        self.magic = magic
        super().__init__("Could not decode invalid crash log header")


class UnsupportedVersion(CrashReportError):
    """The container version byte is not one this decoder understands."""

    def __init__(self, version: int):
        self.version = version
        super().__init__(f"Could not decode unsupported crash report version: {version}")


class DecodeError(CrashReportError):
    """A required field is missing or malformed within a present section."""

    def __init__(self, section: str, detail: Optional[str] = None):
        self.section = section
        self.detail = detail
        message = f"Could not decode crash log: malformed {section}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
