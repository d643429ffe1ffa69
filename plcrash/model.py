"""Immutable, version-independent crash report model.

Every value here is produced once by :mod:`plcrash.extractor` and never
mutated afterwards. Sections that only exist in later report format versions
(machine info, process info, the report UUID) are ``Optional`` and the
``has_*`` properties are derived from their presence alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Optional
from uuid import UUID

from .resolver import image_for_address


class _WireEnum(IntEnum):
    """IntEnum that keeps unmapped wire values instead of raising.

    ``OperatingSystem(9)`` yields a pseudo-member named ``UNRECOGNIZED`` whose
    value is still 9, so newer report producers degrade to an "unknown"
    display rather than a decode failure.
    """

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, int):
            return None
        member = int.__new__(cls, value)
        member._name_ = "UNRECOGNIZED"
        member._value_ = value
        return member

    @property
    def is_recognized(self) -> bool:
        return self._name_ != "UNRECOGNIZED"


class OperatingSystem(_WireEnum):
    """Operating system under which the crash log was generated."""

    MAC_OS_X = 0
    IPHONE_OS = 1
    IPHONE_SIMULATOR = 2  # Mac OS X with simulator runtime libraries
    UNKNOWN = 3
    APPLE_TVOS = 4


class Architecture(_WireEnum):
    """Legacy processor architecture codes (deprecated in v1.1+ reports)."""

    X86_32 = 0
    X86_64 = 1
    ARMV6 = 2
    PPC = 3
    PPC64 = 4
    ARMV7 = 5
    UNKNOWN = 6


class ProcessorTypeEncoding(_WireEnum):
    """How ProcessorInfo.type/subtype are to be interpreted."""

    UNKNOWN = 0
    MACH = 1  # Apple Mach-O cpu_type_t / cpu_subtype_t


@dataclass(frozen=True)
class ProcessorInfo:
    type_encoding: ProcessorTypeEncoding
    type: int
    subtype: int

    @property
    def is_mach(self) -> bool:
        return self.type_encoding == ProcessorTypeEncoding.MACH


@dataclass(frozen=True)
class SystemInfo:
    operating_system: OperatingSystem
    os_version: str
    os_build: Optional[str]
    architecture: Architecture
    processor_info: ProcessorInfo
    timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class MachineInfo:
    """Host hardware description. Only present in v1.1+ reports."""

    model_name: Optional[str]
    processor_info: Optional[ProcessorInfo]
    processor_count: int
    logical_processor_count: int


@dataclass(frozen=True)
class ApplicationInfo:
    identifier: str  # CFBundleIdentifier
    version: str  # CFBundleVersion
    marketing_version: Optional[str] = None  # CFBundleShortVersionString


@dataclass(frozen=True)
class ProcessInfo:
    process_name: Optional[str]
    process_id: int
    process_path: Optional[str]
    start_time: Optional[datetime]
    parent_process_name: Optional[str]
    parent_process_id: int
    native: bool
    """False when the process ran under process-level CPU emulation (Rosetta)."""


@dataclass(frozen=True)
class SignalInfo:
    name: str
    code: str
    address: int


@dataclass(frozen=True)
class MachExceptionInfo:
    type: int
    codes: tuple[int, ...]


@dataclass(frozen=True)
class SymbolInfo:
    symbol_name: str
    start_address: int
    end_address: int = 0  # informational only, 0 if unknown


@dataclass(frozen=True)
class StackFrameInfo:
    instruction_pointer: int
    symbol_info: Optional[SymbolInfo] = None


@dataclass(frozen=True)
class RegisterInfo:
    name: str
    value: int


@dataclass(frozen=True)
class ThreadInfo:
    thread_number: int
    stack_frames: tuple[StackFrameInfo, ...]
    """Innermost frame first."""
    crashed: bool
    registers: tuple[RegisterInfo, ...]


@dataclass(frozen=True)
class BinaryImageInfo:
    code_type: Optional[ProcessorInfo]
    base_address: int
    size: int
    name: str
    """Absolute path of the image."""
    uuid: Optional[str] = None
    """Uppercase hyphenated Mach-O UUID, matches the dSYM."""

    @property
    def has_uuid(self) -> bool:
        return bool(self.uuid)


@dataclass(frozen=True)
class ExceptionInfo:
    name: str
    reason: str
    stack_frames: Optional[tuple[StackFrameInfo, ...]] = None


@dataclass(frozen=True)
class CrashReport:
    """Decoded crash log, the root of the model."""

    system_info: SystemInfo
    application_info: ApplicationInfo
    signal_info: SignalInfo
    threads: tuple[ThreadInfo, ...] = ()
    images: tuple[BinaryImageInfo, ...] = ()
    machine_info: Optional[MachineInfo] = None
    process_info: Optional[ProcessInfo] = None
    mach_exception_info: Optional[MachExceptionInfo] = None
    exception_info: Optional[ExceptionInfo] = None
    custom_data: Optional[bytes] = None
    uuid: Optional[UUID] = None
    """Client-generated report UUID (v1.2+ reports)."""

    @property
    def has_machine_info(self) -> bool:
        return self.machine_info is not None

    @property
    def has_process_info(self) -> bool:
        return self.process_info is not None

    @property
    def has_exception_info(self) -> bool:
        return self.exception_info is not None

    @property
    def crashed_thread(self) -> Optional[ThreadInfo]:
        """First thread flagged as crashed, in payload order."""
        for thread in self.threads:
            if thread.crashed:
                return thread
        return None

    def image_for_address(self, address: int) -> Optional[BinaryImageInfo]:
        """Return the binary image containing ``address``, or None."""
        return image_for_address(self.images, address)
