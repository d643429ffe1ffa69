"""
plcrash: decoder and formatter for PLCrashReporter ``.plcrash`` crash logs.

Decodes the binary container (``"plcrash"`` magic, version byte, protobuf
CrashReport payload) into an immutable report model and renders it as an
Apple iOS-style text crash log.

Entry points:
- decode(data) -> CrashReport
- render(report, text_format=TextFormat.IOS) -> str
- plcrashutil: command line converter (installed via pip)
"""

from __future__ import annotations

from .errors import (
    CrashReportError,
    DecodeError,
    InvalidHeader,
    TruncatedInput,
    UnsupportedVersion,
)
from .formatters import TextFormat
from .model import (
    ApplicationInfo,
    Architecture,
    BinaryImageInfo,
    CrashReport,
    ExceptionInfo,
    MachExceptionInfo,
    MachineInfo,
    OperatingSystem,
    ProcessInfo,
    ProcessorInfo,
    ProcessorTypeEncoding,
    RegisterInfo,
    SignalInfo,
    StackFrameInfo,
    SymbolInfo,
    SystemInfo,
    ThreadInfo,
)
from .report import decode, image_for_address, render

__version__ = "1.0.0"

__all__ = [
    "ApplicationInfo",
    "Architecture",
    "BinaryImageInfo",
    "CrashReport",
    "CrashReportError",
    "DecodeError",
    "ExceptionInfo",
    "InvalidHeader",
    "MachExceptionInfo",
    "MachineInfo",
    "OperatingSystem",
    "ProcessInfo",
    "ProcessorInfo",
    "ProcessorTypeEncoding",
    "RegisterInfo",
    "SignalInfo",
    "StackFrameInfo",
    "SymbolInfo",
    "SystemInfo",
    "TextFormat",
    "ThreadInfo",
    "TruncatedInput",
    "UnsupportedVersion",
    "decode",
    "image_for_address",
    "render",
]
