"""Base report formatter ABC and the text format selector."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum

from ..model import CrashReport


class TextFormat(IntEnum):
    """Supported text renderings of a crash report."""

    IOS = 0  # Apple iOS-compatible crash log


class ReportFormatter(ABC):
    """Base class for crash report text formatters.

    Formatters are stateless: ``format_report`` must be a pure function of
    the report so one instance may serve concurrent callers.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name, e.g. 'Apple iOS'."""

    @abstractmethod
    def format_report(self, report: CrashReport) -> str:
        """Render ``report`` as text. Never fails for a well-formed report."""
