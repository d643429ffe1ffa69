"""Decoded CrashReport message -> immutable report model.

Handles every crash log format generation:

- v1:   system info carries only the legacy architecture enum; processor
        info is synthesized from it.
- v1.1: adds machine info (host processor, model) and process info.
- v1.2: adds the report UUID.

Optional sections missing from the payload are left as ``None``. A section
that is present but lacks one of its required fields raises
:class:`~plcrash.errors.DecodeError` naming that section; no partial report
is ever returned.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Optional
from uuid import UUID

from google.protobuf.message import DecodeError as _ProtobufDecodeError

from . import crash_report_pb2
from .cpu_types import (
    CPU_SUBTYPE_ARM_V6,
    CPU_SUBTYPE_ARM_V7,
    CPU_SUBTYPE_POWERPC_ALL,
    CPU_SUBTYPE_X86_64_ALL,
    CPU_SUBTYPE_X86_ALL,
    CPU_TYPE_ARM,
    CPU_TYPE_POWERPC,
    CPU_TYPE_POWERPC64,
    CPU_TYPE_X86,
    CPU_TYPE_X86_64,
)
from .errors import DecodeError
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

logger = logging.getLogger(__name__)

UUID_LENGTH = 16

# Legacy architecture -> (cpu type, cpu subtype)
_LEGACY_PROCESSORS = MappingProxyType({
    Architecture.X86_32: (CPU_TYPE_X86, CPU_SUBTYPE_X86_ALL),
    Architecture.X86_64: (CPU_TYPE_X86_64, CPU_SUBTYPE_X86_64_ALL),
    Architecture.ARMV6: (CPU_TYPE_ARM, CPU_SUBTYPE_ARM_V6),
    Architecture.ARMV7: (CPU_TYPE_ARM, CPU_SUBTYPE_ARM_V7),
    Architecture.PPC: (CPU_TYPE_POWERPC, CPU_SUBTYPE_POWERPC_ALL),
    Architecture.PPC64: (CPU_TYPE_POWERPC64, CPU_SUBTYPE_POWERPC_ALL),
})

# Processor.TypeEncoding wire value -> model encoding
_TYPE_ENCODINGS = MappingProxyType({
    crash_report_pb2.TYPE_ENCODING_MACH: ProcessorTypeEncoding.MACH,
    crash_report_pb2.TYPE_ENCODING_UNKNOWN: ProcessorTypeEncoding.UNKNOWN,
})


# =============================================================================
# Payload parsing
# =============================================================================

def parse_payload(payload: bytes) -> crash_report_pb2.CrashReport:
    """Deserialize the protobuf payload that follows the container header."""
    message = crash_report_pb2.CrashReport()
    try:
        message.ParseFromString(payload)
    except _ProtobufDecodeError as exc:
        raise DecodeError("report", str(exc)) from exc
    return message


# =============================================================================
# Field helpers
# =============================================================================

def _require(message, section: str, *fields: str) -> None:
    for name in fields:
        if not message.HasField(name):
            raise DecodeError(section, f"missing {name}")


def _optional_string(message, name: str) -> Optional[str]:
    """Empty and absent strings are both normalized to None."""
    value = getattr(message, name)
    return value or None


def _timestamp(seconds: int, section: str) -> Optional[datetime]:
    """Epoch seconds -> UTC datetime; 0 means the value was not recorded."""
    if seconds == 0:
        return None
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise DecodeError(section, f"timestamp out of range: {seconds}") from exc


def _uuid(raw: bytes) -> Optional[UUID]:
    """16 raw bytes -> UUID, first three groups little-endian (GUID layout)."""
    if len(raw) != UUID_LENGTH:
        return None
    return UUID(bytes_le=bytes(raw))


def _signed32(value: int) -> int:
    return value - (1 << 32) if value & (1 << 31) else value


# =============================================================================
# Section extractors
# =============================================================================

def synthesize_processor_info(architecture: Architecture) -> ProcessorInfo:
    """Derive processor info from the legacy (v1) architecture enum."""
    pair = _LEGACY_PROCESSORS.get(architecture)
    if pair is None:
        logger.debug("No processor mapping for legacy architecture %d", int(architecture))
        return ProcessorInfo(ProcessorTypeEncoding.UNKNOWN, 0, 0)
    cpu_type, cpu_subtype = pair
    return ProcessorInfo(ProcessorTypeEncoding.MACH, cpu_type, cpu_subtype)


def _extract_processor(message, section: str) -> ProcessorInfo:
    _require(message, section, "type", "subtype")
    encoding = _TYPE_ENCODINGS.get(message.encoding, ProcessorTypeEncoding.UNKNOWN)
    return ProcessorInfo(encoding, message.type, message.subtype)


def _extract_machine_info(message) -> MachineInfo:
    processor = None
    if message.HasField("processor"):
        processor = _extract_processor(message.processor, "machine_info.processor")
    return MachineInfo(
        model_name=_optional_string(message, "model"),
        processor_info=processor,
        processor_count=message.processor_count,
        logical_processor_count=message.logical_processor_count,
    )


def _extract_system_info(message, host_processor: Optional[ProcessorInfo]) -> SystemInfo:
    _require(message, "system_info", "operating_system", "os_version")

    if message.HasField("architecture"):
        architecture = Architecture(message.architecture)
    else:
        architecture = Architecture.UNKNOWN

    processor = host_processor
    if processor is None:
        processor = synthesize_processor_info(architecture)
        logger.debug("Synthesized processor info from legacy architecture: %s", processor)

    return SystemInfo(
        operating_system=OperatingSystem(message.operating_system),
        os_version=message.os_version,
        os_build=_optional_string(message, "os_build"),
        architecture=architecture,
        processor_info=processor,
        timestamp=_timestamp(message.timestamp, "system_info"),
    )


def _extract_application_info(message) -> ApplicationInfo:
    _require(message, "application_info", "identifier", "version")
    return ApplicationInfo(
        identifier=message.identifier,
        version=message.version,
        marketing_version=_optional_string(message, "marketing_version"),
    )


def _extract_process_info(message) -> ProcessInfo:
    _require(message, "process_info", "process_id", "parent_process_id")
    return ProcessInfo(
        process_name=_optional_string(message, "process_name"),
        process_id=message.process_id,
        process_path=_optional_string(message, "process_path"),
        start_time=_timestamp(message.start_time, "process_info"),
        parent_process_name=_optional_string(message, "parent_process_name"),
        parent_process_id=message.parent_process_id,
        native=message.native,
    )


def _extract_signal_info(message) -> SignalInfo:
    _require(message, "signal", "name", "code", "address")
    return SignalInfo(name=message.name, code=message.code, address=message.address)


def _extract_mach_exception_info(message) -> MachExceptionInfo:
    _require(message, "signal.mach_exception", "type")
    return MachExceptionInfo(type=message.type, codes=tuple(message.codes))


def _extract_frame(message, section: str) -> StackFrameInfo:
    _require(message, section, "pc")
    symbol = None
    if message.HasField("symbol"):
        _require(message.symbol, f"{section}.symbol", "name", "start_address")
        symbol = SymbolInfo(
            symbol_name=message.symbol.name,
            start_address=message.symbol.start_address,
            end_address=message.symbol.end_address,
        )
    return StackFrameInfo(instruction_pointer=message.pc, symbol_info=symbol)


def _extract_thread(message, section: str) -> ThreadInfo:
    _require(message, section, "thread_number", "crashed")
    frames = tuple(
        _extract_frame(frame, f"{section}.frames[{i}]")
        for i, frame in enumerate(message.frames)
    )
    registers = []
    for i, register in enumerate(message.registers):
        _require(register, f"{section}.registers[{i}]", "name", "value")
        registers.append(RegisterInfo(name=register.name, value=register.value))
    return ThreadInfo(
        thread_number=_signed32(message.thread_number),
        stack_frames=frames,
        crashed=message.crashed,
        registers=tuple(registers),
    )


def _extract_image(message, section: str) -> BinaryImageInfo:
    _require(message, section, "base_address", "size", "name")
    code_type = None
    if message.HasField("code_type"):
        code_type = _extract_processor(message.code_type, f"{section}.code_type")
    image_uuid = _uuid(message.uuid)
    return BinaryImageInfo(
        code_type=code_type,
        base_address=message.base_address,
        size=message.size,
        name=message.name,
        uuid=str(image_uuid).upper() if image_uuid is not None else None,
    )


def _extract_exception_info(message) -> ExceptionInfo:
    _require(message, "exception", "name", "reason")
    frames = None
    if len(message.frames) > 0:
        frames = tuple(
            _extract_frame(frame, f"exception.frames[{i}]")
            for i, frame in enumerate(message.frames)
        )
    return ExceptionInfo(name=message.name, reason=message.reason, stack_frames=frames)


# =============================================================================
# Report
# =============================================================================

def extract_report(message: crash_report_pb2.CrashReport) -> CrashReport:
    """Build the report model from a decoded CrashReport message.

    Raises:
        DecodeError: A required section, or a required field inside a
            present section, is missing.
    """
    for section in ("system_info", "application_info", "signal"):
        if not message.HasField(section):
            raise DecodeError(section, "section missing")

    report_uuid = None
    if message.HasField("report_info"):
        report_uuid = _uuid(message.report_info.uuid)

    machine_info = None
    if message.HasField("machine_info"):
        machine_info = _extract_machine_info(message.machine_info)
    else:
        logger.debug("No machine info (pre-v1.1 report)")

    process_info = None
    if message.HasField("process_info"):
        process_info = _extract_process_info(message.process_info)
    else:
        logger.debug("No process info (pre-v1.1 report)")

    mach_exception_info = None
    if message.signal.HasField("mach_exception"):
        mach_exception_info = _extract_mach_exception_info(message.signal.mach_exception)

    exception_info = None
    if message.HasField("exception"):
        exception_info = _extract_exception_info(message.exception)

    report = CrashReport(
        system_info=_extract_system_info(
            message.system_info,
            machine_info.processor_info if machine_info is not None else None,
        ),
        application_info=_extract_application_info(message.application_info),
        signal_info=_extract_signal_info(message.signal),
        threads=tuple(
            _extract_thread(thread, f"threads[{i}]")
            for i, thread in enumerate(message.threads)
        ),
        images=tuple(
            _extract_image(image, f"binary_images[{i}]")
            for i, image in enumerate(message.binary_images)
        ),
        machine_info=machine_info,
        process_info=process_info,
        mach_exception_info=mach_exception_info,
        exception_info=exception_info,
        custom_data=bytes(message.custom_data) or None,
        uuid=report_uuid,
    )
    logger.debug(
        "Extracted report: %d threads, %d images, exception=%s",
        len(report.threads),
        len(report.images),
        report.has_exception_info,
    )
    return report
