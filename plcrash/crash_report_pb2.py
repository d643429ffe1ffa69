"""Protobuf schema for the ``plcrash.CrashReport`` payload.

The schema is declared in Python with ``descriptor_pb2`` and registered in the
default descriptor pool, then turned into message classes the same way
protoc-generated ``_pb2`` modules are.

Wire-compatible with the device-side ``crash_report.proto`` with two
deliberate differences:

- Every field is ``optional``. Fields the reporter marks ``required`` are
  checked by the extractor instead, so a missing field is reported against
  the section that owns it rather than as a bare parse failure.
- Enum-typed fields (operating system, architecture, processor type
  encoding) are declared as plain varints so values unknown to this decoder
  survive parsing instead of being diverted to the unknown-field set.
"""

from __future__ import annotations

from google.protobuf import descriptor_pb2 as _descriptor_pb2
from google.protobuf import descriptor_pool as _descriptor_pool
from google.protobuf import symbol_database as _symbol_database
from google.protobuf.internal import builder as _builder

_sym_db = _symbol_database.Default()

_FDP = _descriptor_pb2.FieldDescriptorProto

PACKAGE = "plcrash"

# Processor.TypeEncoding wire values
TYPE_ENCODING_MACH = 0
TYPE_ENCODING_UNKNOWN = 1


def _ref(name: str) -> str:
    return f".{PACKAGE}.CrashReport.{name}"


def _field(name, number, ftype, *, repeated=False, type_name=None, default=None):
    field = _FDP(
        name=name,
        number=number,
        type=ftype,
        label=_FDP.LABEL_REPEATED if repeated else _FDP.LABEL_OPTIONAL,
    )
    if type_name is not None:
        field.type_name = type_name
    if default is not None:
        field.default_value = default
    return field


def _message(name, fields, nested=()):
    msg = _descriptor_pb2.DescriptorProto(name=name)
    msg.field.extend(fields)
    msg.nested_type.extend(nested)
    return msg


def _build_file() -> _descriptor_pb2.FileDescriptorProto:
    system_info = _message("SystemInfo", [
        _field("operating_system", 1, _FDP.TYPE_INT32),
        _field("os_version", 2, _FDP.TYPE_STRING),
        _field("architecture", 3, _FDP.TYPE_INT32),
        _field("timestamp", 4, _FDP.TYPE_INT64),
        _field("os_build", 5, _FDP.TYPE_STRING),
    ])
    processor = _message("Processor", [
        _field("encoding", 1, _FDP.TYPE_INT32, default=str(TYPE_ENCODING_MACH)),
        _field("type", 2, _FDP.TYPE_UINT64),
        _field("subtype", 3, _FDP.TYPE_UINT64),
    ])
    machine_info = _message("MachineInfo", [
        _field("model", 1, _FDP.TYPE_STRING),
        _field("processor", 2, _FDP.TYPE_MESSAGE, type_name=_ref("Processor")),
        _field("processor_count", 3, _FDP.TYPE_UINT32),
        _field("logical_processor_count", 4, _FDP.TYPE_UINT32),
    ])
    application_info = _message("ApplicationInfo", [
        _field("identifier", 1, _FDP.TYPE_STRING),
        _field("version", 2, _FDP.TYPE_STRING),
        _field("marketing_version", 3, _FDP.TYPE_STRING),
    ])
    symbol = _message("Symbol", [
        _field("name", 1, _FDP.TYPE_STRING),
        _field("start_address", 2, _FDP.TYPE_UINT64),
        _field("end_address", 3, _FDP.TYPE_UINT64),
    ])
    stack_frame = _message("StackFrame", [
        _field("pc", 3, _FDP.TYPE_UINT64),
        _field("symbol", 6, _FDP.TYPE_MESSAGE, type_name=_ref("Thread.StackFrame.Symbol")),
    ], nested=[symbol])
    register_value = _message("RegisterValue", [
        _field("name", 1, _FDP.TYPE_STRING),
        _field("value", 2, _FDP.TYPE_UINT64),
    ])
    thread = _message("Thread", [
        _field("thread_number", 1, _FDP.TYPE_UINT32),
        _field("frames", 2, _FDP.TYPE_MESSAGE, repeated=True, type_name=_ref("Thread.StackFrame")),
        _field("crashed", 3, _FDP.TYPE_BOOL),
        _field("registers", 4, _FDP.TYPE_MESSAGE, repeated=True, type_name=_ref("Thread.RegisterValue")),
    ], nested=[stack_frame, register_value])
    binary_image = _message("BinaryImage", [
        _field("base_address", 1, _FDP.TYPE_UINT64),
        _field("size", 2, _FDP.TYPE_UINT64),
        _field("name", 3, _FDP.TYPE_STRING),
        _field("uuid", 4, _FDP.TYPE_BYTES),
        _field("code_type", 5, _FDP.TYPE_MESSAGE, type_name=_ref("Processor")),
    ])
    exception = _message("Exception", [
        _field("name", 1, _FDP.TYPE_STRING),
        _field("reason", 2, _FDP.TYPE_STRING),
        _field("frames", 3, _FDP.TYPE_MESSAGE, repeated=True, type_name=_ref("Thread.StackFrame")),
    ])
    mach_exception = _message("MachException", [
        _field("type", 1, _FDP.TYPE_UINT64),
        _field("codes", 2, _FDP.TYPE_UINT64, repeated=True),
    ])
    signal = _message("Signal", [
        _field("name", 1, _FDP.TYPE_STRING),
        _field("code", 2, _FDP.TYPE_STRING),
        _field("address", 3, _FDP.TYPE_UINT64),
        _field("mach_exception", 4, _FDP.TYPE_MESSAGE, type_name=_ref("Signal.MachException")),
    ], nested=[mach_exception])
    process_info = _message("ProcessInfo", [
        _field("process_name", 1, _FDP.TYPE_STRING),
        _field("process_id", 2, _FDP.TYPE_UINT32),
        _field("process_path", 3, _FDP.TYPE_STRING),
        _field("parent_process_name", 4, _FDP.TYPE_STRING),
        _field("parent_process_id", 5, _FDP.TYPE_UINT32),
        _field("native", 6, _FDP.TYPE_BOOL, default="true"),
        _field("start_time", 7, _FDP.TYPE_UINT64),
    ])
    report_info = _message("ReportInfo", [
        _field("user_requested", 1, _FDP.TYPE_BOOL),
        _field("uuid", 2, _FDP.TYPE_BYTES),
    ])

    crash_report = _message("CrashReport", [
        _field("system_info", 1, _FDP.TYPE_MESSAGE, type_name=_ref("SystemInfo")),
        _field("application_info", 2, _FDP.TYPE_MESSAGE, type_name=_ref("ApplicationInfo")),
        _field("threads", 3, _FDP.TYPE_MESSAGE, repeated=True, type_name=_ref("Thread")),
        _field("binary_images", 4, _FDP.TYPE_MESSAGE, repeated=True, type_name=_ref("BinaryImage")),
        _field("exception", 5, _FDP.TYPE_MESSAGE, type_name=_ref("Exception")),
        _field("signal", 6, _FDP.TYPE_MESSAGE, type_name=_ref("Signal")),
        _field("process_info", 7, _FDP.TYPE_MESSAGE, type_name=_ref("ProcessInfo")),
        _field("machine_info", 8, _FDP.TYPE_MESSAGE, type_name=_ref("MachineInfo")),
        _field("report_info", 9, _FDP.TYPE_MESSAGE, type_name=_ref("ReportInfo")),
        _field("custom_data", 10, _FDP.TYPE_BYTES),
    ], nested=[
        system_info,
        processor,
        machine_info,
        application_info,
        thread,
        binary_image,
        exception,
        signal,
        process_info,
        report_info,
    ])

    file_proto = _descriptor_pb2.FileDescriptorProto(
        name="plcrash/crash_report.proto",
        package=PACKAGE,
        syntax="proto2",
    )
    file_proto.message_type.append(crash_report)
    return file_proto


DESCRIPTOR = _descriptor_pool.Default().AddSerializedFile(_build_file().SerializeToString())

_globals = globals()
_builder.BuildMessageAndEnumDescriptors(DESCRIPTOR, _globals)
_builder.BuildTopDescriptorsAndMessages(DESCRIPTOR, __name__, _globals)

__all__ = ["CrashReport", "DESCRIPTOR", "TYPE_ENCODING_MACH", "TYPE_ENCODING_UNKNOWN"]
