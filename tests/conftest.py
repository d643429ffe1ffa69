"""Shared pytest fixtures for plcrash tests.

Payloads are built with the real protobuf message classes, so every test
exercises the same wire format a device-side reporter produces.
"""

from __future__ import annotations

import pytest

from plcrash import crash_report_pb2
from plcrash.container import encode_container
from plcrash.cpu_types import (
    CPU_SUBTYPE_ARM64_V8,
    CPU_SUBTYPE_X86_ALL,
    CPU_TYPE_ARM64,
    CPU_TYPE_X86,
)
from plcrash.extractor import extract_report

# 2009-02-11 14:23:05 UTC
DEMO_TIMESTAMP = 1234362185

DEMO_APP_PATH = "/Users/bob/DemoCrash.app/Contents/MacOS/DemoCrash"
DEMO_CF_PATH = "/System/Library/Frameworks/CoreFoundation.framework/Versions/A/CoreFoundation"
DEMO_CF_UUID = bytes.fromhex("a0b1c2d3e4f5061728394a5b6c7d8e9f")

REPORT_UUID = bytes.fromhex("0123456789abcdef0123456789abcdef")


def _set_processor(processor, cpu_type: int, cpu_subtype: int) -> None:
    processor.encoding = crash_report_pb2.TYPE_ENCODING_MACH
    processor.type = cpu_type
    processor.subtype = cpu_subtype


def build_demo_message() -> crash_report_pb2.CrashReport:
    """v1 report: a 32-bit x86 Mac OS X app that died with SIGBUS."""
    msg = crash_report_pb2.CrashReport()

    msg.system_info.operating_system = 0  # Mac OS X
    msg.system_info.os_version = "10.5.6"
    msg.system_info.os_build = "9G55"
    msg.system_info.architecture = 0  # X86_32
    msg.system_info.timestamp = DEMO_TIMESTAMP

    msg.application_info.identifier = "com.yourcompany.DemoCrash"
    msg.application_info.version = "1.0"

    msg.signal.name = "SIGBUS"
    msg.signal.code = "BUS_ADRERR"
    msg.signal.address = 0

    crashed = msg.threads.add()
    crashed.thread_number = 0
    crashed.crashed = True
    frame = crashed.frames.add()
    frame.pc = 0x1F8A
    frame.symbol.name = "_main"
    frame.symbol.start_address = 0x1F00
    crashed.frames.add().pc = 0x90DC5C5B
    for name, value in (
        ("eax", 0x0),
        ("ebx", 0x1F6C),
        ("ecx", 0xBFFFF8C0),
        ("edx", 0x1),
        ("edi", 0x0),
    ):
        register = crashed.registers.add()
        register.name = name
        register.value = value

    idle = msg.threads.add()
    idle.thread_number = 1
    idle.crashed = False
    idle.frames.add().pc = 0xDEADBEEF

    cf = msg.binary_images.add()
    cf.base_address = 0x90D80000
    cf.size = 0x133000
    cf.name = DEMO_CF_PATH
    cf.uuid = DEMO_CF_UUID
    _set_processor(cf.code_type, CPU_TYPE_X86, CPU_SUBTYPE_X86_ALL)

    app = msg.binary_images.add()
    app.base_address = 0x1000
    app.size = 0x2000
    app.name = DEMO_APP_PATH
    _set_processor(app.code_type, CPU_TYPE_X86, CPU_SUBTYPE_X86_ALL)

    return msg


def build_modern_message() -> crash_report_pb2.CrashReport:
    """v1.2 report: arm64 iPhone with machine, process and report info."""
    msg = crash_report_pb2.CrashReport()

    msg.system_info.operating_system = 1  # iPhone OS
    msg.system_info.os_version = "9.3.2"
    msg.system_info.os_build = "13F69"
    msg.system_info.timestamp = DEMO_TIMESTAMP

    msg.machine_info.model = "iPhone7,2"
    _set_processor(msg.machine_info.processor, CPU_TYPE_ARM64, CPU_SUBTYPE_ARM64_V8)
    msg.machine_info.processor_count = 2
    msg.machine_info.logical_processor_count = 2

    msg.application_info.identifier = "com.example.Pager"
    msg.application_info.version = "42"
    msg.application_info.marketing_version = "2.1"

    msg.process_info.process_name = "Pager"
    msg.process_info.process_id = 311
    msg.process_info.process_path = "/var/containers/Bundle/Application/Pager.app/Pager"
    msg.process_info.parent_process_name = "launchd"
    msg.process_info.parent_process_id = 1

    msg.report_info.uuid = REPORT_UUID

    msg.signal.name = "SIGABRT"
    msg.signal.code = "#0"
    msg.signal.address = 0x1A2B3C4D
    msg.signal.mach_exception.type = 1
    msg.signal.mach_exception.codes.extend([2, 0x1A2B3C4D])

    msg.exception.name = "NSRangeException"
    msg.exception.reason = "index 3 beyond bounds [0 .. 2]"
    frame = msg.exception.frames.add()
    frame.pc = 0x100004010
    frame.symbol.name = "-[Pager pageAt:]"
    frame.symbol.start_address = 0x100004000

    thread = msg.threads.add()
    thread.thread_number = 0
    thread.crashed = True
    thread.frames.add().pc = 0x100004020
    for name, value in (("x0", 0x0), ("r12", 0x10), ("sp", 0x16FDFF000)):
        register = thread.registers.add()
        register.name = name
        register.value = value

    image = msg.binary_images.add()
    image.base_address = 0x100000000
    image.size = 0x8000
    image.name = "/var/containers/Bundle/Application/Pager.app/Pager"
    image.uuid = DEMO_CF_UUID
    _set_processor(image.code_type, CPU_TYPE_ARM64, CPU_SUBTYPE_ARM64_V8)

    return msg


@pytest.fixture
def demo_message():
    return build_demo_message()


@pytest.fixture
def demo_container(demo_message):
    return encode_container(demo_message.SerializeToString())


@pytest.fixture
def demo_report(demo_message):
    return extract_report(demo_message)


@pytest.fixture
def modern_message():
    return build_modern_message()


@pytest.fixture
def modern_report(modern_message):
    return extract_report(modern_message)
