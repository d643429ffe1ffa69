"""Public decode / render pipeline.

    raw bytes -> validate_container -> parse_payload -> extract_report -> CrashReport
    CrashReport -> get_formatter(text_format).format_report -> text
"""

from __future__ import annotations

import logging
from typing import Optional

from .container import validate_container
from .extractor import extract_report, parse_payload
from .formatters import TextFormat, get_formatter
from .model import BinaryImageInfo, CrashReport

logger = logging.getLogger(__name__)


def decode(data: bytes) -> CrashReport:
    """Decode a ``.plcrash`` container into the report model.

    Raises:
        TruncatedInput, InvalidHeader, UnsupportedVersion: Bad container header.
        DecodeError: The payload is not a well-formed CrashReport message.
    """
    payload = validate_container(data)
    message = parse_payload(payload)
    report = extract_report(message)
    logger.debug("Decoded crash report for %s", report.application_info.identifier)
    return report


def render(report: CrashReport, text_format: TextFormat = TextFormat.IOS) -> str:
    """Render ``report`` in the requested text layout."""
    return get_formatter(text_format).format_report(report)


def image_for_address(report: CrashReport, address: int) -> Optional[BinaryImageInfo]:
    """Return the binary image of ``report`` that contains ``address``, or None."""
    return report.image_for_address(address)
