"""Apple iOS-compatible crash log formatter.

Reproduces the layout of the native crash logs: header blocks, per-thread
backtraces, the crashed thread's register state, and the binary image list
sorted by load address. Unavailable values are rendered as ``???``.
"""

from __future__ import annotations

import posixpath
from datetime import datetime
from typing import Optional

from .. import cpu_types
from ..model import CrashReport, OperatingSystem, ProcessorInfo, StackFrameInfo, ThreadInfo
from .base import ReportFormatter
from .writer import Align, TextWriter

UNKNOWN = "???"
REPORT_VERSION = 104

FRAME_INDEX_WIDTH = 4
FRAME_IMAGE_WIDTH = 35
REGISTER_NAME_WIDTH = 6
REGISTERS_PER_LINE = 4

_U64_MASK = (1 << 64) - 1

_OS_NAMES = {
    OperatingSystem.MAC_OS_X: "Mac OS X",
    OperatingSystem.IPHONE_OS: "iPhone OS",
    OperatingSystem.IPHONE_SIMULATOR: "Mac OS X",
    OperatingSystem.APPLE_TVOS: "Apple tvOS",
}

# Apple strips the leading '_' from C symbols in its reports on these systems
_STRIP_UNDERSCORE_OS = frozenset({
    OperatingSystem.MAC_OS_X,
    OperatingSystem.IPHONE_OS,
    OperatingSystem.IPHONE_SIMULATOR,
    OperatingSystem.APPLE_TVOS,
})


def os_display_name(operating_system: OperatingSystem) -> str:
    if operating_system.is_recognized and operating_system in _OS_NAMES:
        return _OS_NAMES[operating_system]
    return f"Unknown ({int(operating_system)})"


def format_timestamp(value: Optional[datetime]) -> str:
    """``2009-02-11 14:23:05.000 +00:00``, or ``???``."""
    if value is None:
        return UNKNOWN
    offset = value.utcoffset()
    minutes = int(offset.total_seconds() // 60) if offset is not None else 0
    sign = "-" if minutes < 0 else "+"
    hours, minutes = divmod(abs(minutes), 60)
    millis = value.microsecond // 1000
    return f"{value:%Y-%m-%d %H:%M:%S}.{millis:03d} {sign}{hours:02d}:{minutes:02d}"


def best_processor_info(report: CrashReport) -> ProcessorInfo:
    """Host processor from machine info (v1.1+), else the system info one."""
    if report.machine_info is not None and report.machine_info.processor_info is not None:
        return report.machine_info.processor_info
    return report.system_info.processor_info


def _file_name(path: str) -> str:
    return posixpath.basename(path)


def _or_unknown(value) -> str:
    return UNKNOWN if value is None or value == "" else str(value)


class IOSTextFormatter(ReportFormatter):
    """Formats a report in the standard Apple iOS crash log layout."""

    @property
    def name(self) -> str:
        return "Apple iOS"

    def format_report(self, report: CrashReport) -> str:
        processor = best_processor_info(report)
        code_type = cpu_types.code_type(processor)
        ctx = _RenderContext(report, code_type)

        w = TextWriter()
        self._write_identity(w, report)
        self._write_process(w, report, code_type.name)
        w.line()
        self._write_system(w, report)
        w.line()
        self._write_signal(w, report)
        w.line()

        exception = report.exception_info
        if exception is not None:
            w.line("Application Specific Information:")
            w.line(
                f"*** Terminating app due to uncaught exception '{exception.name}', "
                f"reason: '{exception.reason}'"
            )
            w.line()

        if exception is not None and exception.stack_frames:
            w.line("Last Exception Backtrace:")
            for index, frame in enumerate(exception.stack_frames):
                ctx.write_frame(w, index, frame)
            w.line()

        for thread in report.threads:
            self._write_thread(w, ctx, thread)

        crashed = report.crashed_thread
        if crashed is not None:
            self._write_registers(w, ctx, crashed)

        self._write_images(w, ctx)
        return w.getvalue()

    # -------------------------------------------------------------------------
    # Header blocks
    # -------------------------------------------------------------------------

    def _write_identity(self, w: TextWriter, report: CrashReport) -> None:
        incident = str(report.uuid).upper() if report.uuid is not None else UNKNOWN
        model = report.machine_info.model_name if report.machine_info is not None else None
        w.line(f"Incident Identifier: {incident}")
        w.line(f"Hardware Model:      {_or_unknown(model)}")

    def _write_process(self, w: TextWriter, report: CrashReport, code_type_name: str) -> None:
        process = report.process_info
        if process is not None:
            name, pid = _or_unknown(process.process_name), str(process.process_id)
            path = _or_unknown(process.process_path)
            parent, ppid = _or_unknown(process.parent_process_name), str(process.parent_process_id)
        else:
            name = pid = path = parent = ppid = UNKNOWN

        app = report.application_info
        version = app.version
        if app.marketing_version:
            version = f"{app.marketing_version} ({app.version})"

        w.line(f"Process:         {name} [{pid}]")
        w.line(f"Path:            {path}")
        w.line(f"Identifier:      {app.identifier}")
        w.line(f"Version:         {version}")
        w.line(f"Code Type:       {code_type_name}")
        w.line(f"Parent Process:  {parent} [{ppid}]")

    def _write_system(self, w: TextWriter, report: CrashReport) -> None:
        system = report.system_info
        w.line(f"Date/Time:       {format_timestamp(system.timestamp)}")
        w.line(
            f"OS Version:      {os_display_name(system.operating_system)} "
            f"{system.os_version} ({_or_unknown(system.os_build)})"
        )
        w.line(f"Report Version:  {REPORT_VERSION}")

    def _write_signal(self, w: TextWriter, report: CrashReport) -> None:
        signal = report.signal_info
        w.line(f"Exception Type:  {signal.name}")
        w.text(f"Exception Codes: {signal.code} at ").hex(signal.address, 16).end_line()
        crashed = report.crashed_thread
        if crashed is not None:
            w.line(f"Crashed Thread:  {crashed.thread_number}")

    # -------------------------------------------------------------------------
    # Threads and registers
    # -------------------------------------------------------------------------

    def _write_thread(self, w: TextWriter, ctx: _RenderContext, thread: ThreadInfo) -> None:
        if thread.crashed:
            w.line(f"Thread {thread.thread_number} Crashed:")
        else:
            w.line(f"Thread {thread.thread_number}:")
        for index, frame in enumerate(thread.stack_frames):
            ctx.write_frame(w, index, frame)
        w.line()

    def _write_registers(self, w: TextWriter, ctx: _RenderContext, thread: ThreadInfo) -> None:
        w.line(f"Thread {thread.thread_number} crashed with {ctx.code_type.name} Thread State:")
        column = 0
        for register in thread.registers:
            name = cpu_types.register_name(ctx.host_processor, register.name)
            w.field(name, REGISTER_NAME_WIDTH, Align.RIGHT).text(": ")
            w.hex(register.value, ctx.address_width).text(" ")
            column += 1
            if column == REGISTERS_PER_LINE:
                w.end_line()
                column = 0
        if column != 0:
            w.end_line()
        w.line()

    # -------------------------------------------------------------------------
    # Binary images
    # -------------------------------------------------------------------------

    def _write_images(self, w: TextWriter, ctx: _RenderContext) -> None:
        report = ctx.report
        process_path = report.process_info.process_path if report.process_info is not None else None

        w.line("Binary Images:")
        # sorted() is stable, so images sharing a base keep payload order
        for image in sorted(report.images, key=lambda image: image.base_address):
            end_address = image.base_address + max(1, image.size) - 1
            designator = "+" if process_path is not None and image.name == process_path else " "
            w.hex(image.base_address, ctx.address_width, fill=" ").text(" - ")
            w.hex(end_address, ctx.address_width, fill=" ").text(" ")
            w.text(f"{designator}{_file_name(image.name)} {cpu_types.architecture_name(image.code_type)}  ")
            w.text(f"<{image.uuid if image.has_uuid else UNKNOWN}> {image.name}")
            w.end_line()


class _RenderContext:
    """Per-render values that are derived once from the report."""

    def __init__(self, report: CrashReport, code_type: cpu_types.CodeType):
        self.report = report
        # Register aliases only apply when the report names its host processor
        machine = report.machine_info
        self.host_processor = machine.processor_info if machine is not None else None
        self.code_type = code_type
        self.address_width = 16 if code_type.lp64 else 8
        self.strip_underscore = report.system_info.operating_system in _STRIP_UNDERSCORE_OS

    def symbol_name(self, name: str) -> str:
        if self.strip_underscore and name.startswith("_") and len(name) > 1:
            return name[1:]
        return name

    def write_frame(self, w: TextWriter, index: int, frame: StackFrameInfo) -> None:
        """``<index> <image name> <ip> <symbol + offset | base + offset>``"""
        ip = frame.instruction_pointer
        image_name = UNKNOWN
        base_address = 0
        pc_offset = 0

        image = self.report.image_for_address(ip)
        if image is not None:
            image_name = _file_name(image.name)
            base_address = image.base_address
            pc_offset = ip - base_address

        symbol = frame.symbol_info
        if symbol is not None:
            offset = (ip - symbol.start_address) & _U64_MASK
            location = f"{self.symbol_name(symbol.symbol_name)} + {offset}"
        else:
            location = f"0x{base_address:x} + {pc_offset}"

        w.field(str(index), FRAME_INDEX_WIDTH)
        w.field(image_name, FRAME_IMAGE_WIDTH, truncate=True).text(" ")
        w.hex(ip, self.address_width).text(f" {location}")
        w.end_line()
