"""Crash log container header validation.

File format:
    magic:    7B  "plcrash" (ASCII)
    version:  1B  (1)
    payload:  remainder, a protobuf-encoded ``plcrash.CrashReport`` message
"""

from __future__ import annotations

import logging

from .errors import InvalidHeader, TruncatedInput, UnsupportedVersion

logger = logging.getLogger(__name__)

FILE_MAGIC = b"plcrash"
FILE_VERSION = 1
HEADER_SIZE = len(FILE_MAGIC) + 1  # magic + version byte


def validate_container(data: bytes) -> bytes:
    """Check the container header and return the message payload.

    Args:
        data: Raw crash log bytes as written by the device-side reporter.

    Returns:
        The bytes following the 8-byte header.

    Raises:
        TruncatedInput: If fewer than 8 bytes are supplied.
        InvalidHeader: If the first 7 bytes are not ``b"plcrash"``.
        UnsupportedVersion: If the version byte is not ``FILE_VERSION``.
    """
    data = bytes(data)
    if len(data) < HEADER_SIZE:
        raise TruncatedInput(len(data))

    magic = data[: len(FILE_MAGIC)]
    if magic != FILE_MAGIC:
        raise InvalidHeader(magic)

    version = data[len(FILE_MAGIC)]
    if version != FILE_VERSION:
        raise UnsupportedVersion(version)

    logger.debug("Container header ok (version %d, %d payload bytes)", version, len(data) - HEADER_SIZE)
    return data[HEADER_SIZE:]


def encode_container(payload: bytes, *, version: int = FILE_VERSION) -> bytes:
    """Prefix a serialized CrashReport message with the container header."""
    if not 0 <= version <= 0xFF:
        raise ValueError(f"Version does not fit in one byte: {version}")
    return FILE_MAGIC + bytes([version]) + bytes(payload)
