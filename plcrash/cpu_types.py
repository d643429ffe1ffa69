"""Mach-O CPU type tables.

Maps ``cpu_type_t`` / ``cpu_subtype_t`` pairs (from ``mach/machine.h``) to
the code type label and pointer width used in the crash log header, and to
the short architecture names used in the binary image list. All tables are
read-only.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import NamedTuple, Optional

from .model import ProcessorInfo

# =============================================================================
# mach/machine.h constants
# =============================================================================

CPU_ARCH_ABI64 = 0x01000000
CPU_ARCH_MASK = 0xFF000000  # ABI bits of cpu_type_t
CPU_SUBTYPE_MASK = 0xFF000000  # capability bits of cpu_subtype_t

CPU_TYPE_X86 = 7
CPU_TYPE_X86_64 = CPU_TYPE_X86 | CPU_ARCH_ABI64
CPU_TYPE_ARM = 12
CPU_TYPE_ARM64 = CPU_TYPE_ARM | CPU_ARCH_ABI64
CPU_TYPE_POWERPC = 18
CPU_TYPE_POWERPC64 = CPU_TYPE_POWERPC | CPU_ARCH_ABI64

CPU_SUBTYPE_X86_ALL = 3
CPU_SUBTYPE_X86_64_ALL = 3
CPU_SUBTYPE_X86_64_H = 8

CPU_SUBTYPE_ARM_V6 = 6
CPU_SUBTYPE_ARM_V7 = 9
CPU_SUBTYPE_ARM_V7F = 10
CPU_SUBTYPE_ARM_V7S = 11
CPU_SUBTYPE_ARM_V7K = 12

CPU_SUBTYPE_ARM64_ALL = 0
CPU_SUBTYPE_ARM64_V8 = 1
CPU_SUBTYPE_ARM64E = 2

CPU_SUBTYPE_POWERPC_ALL = 0

UNKNOWN_ARCH_NAME = "???"


class CodeType(NamedTuple):
    """Header code type label and whether the architecture is LP64."""

    name: str
    lp64: bool


# =============================================================================
# Lookup tables
# =============================================================================

_CODE_TYPES = MappingProxyType({
    CPU_TYPE_ARM: CodeType("ARM", False),
    CPU_TYPE_ARM64: CodeType("ARM-64", True),
    CPU_TYPE_X86: CodeType("X86", False),
    CPU_TYPE_X86_64: CodeType("X86-64", True),
    CPU_TYPE_POWERPC: CodeType("PPC", False),
    CPU_TYPE_POWERPC64: CodeType("PPC-64", True),
})

# (cpu type, masked subtype) -> short name; types without a subtype entry
# fall back to _DEFAULT_ARCH_NAMES.
_ARCH_NAMES = MappingProxyType({
    (CPU_TYPE_ARM, CPU_SUBTYPE_ARM_V6): "armv6",
    (CPU_TYPE_ARM, CPU_SUBTYPE_ARM_V7): "armv7",
    (CPU_TYPE_ARM, CPU_SUBTYPE_ARM_V7F): "armv7f",
    (CPU_TYPE_ARM, CPU_SUBTYPE_ARM_V7S): "armv7s",
    (CPU_TYPE_ARM, CPU_SUBTYPE_ARM_V7K): "armv7k",
    (CPU_TYPE_ARM64, CPU_SUBTYPE_ARM64_ALL): "arm64",
    (CPU_TYPE_ARM64, CPU_SUBTYPE_ARM64_V8): "armv8",
    (CPU_TYPE_ARM64, CPU_SUBTYPE_ARM64E): "arm64e",
    (CPU_TYPE_X86_64, CPU_SUBTYPE_X86_64_H): "x86_64h",
})

_DEFAULT_ARCH_NAMES = MappingProxyType({
    CPU_TYPE_ARM: "armv7",
    CPU_TYPE_ARM64: "arm64-unknown",
    CPU_TYPE_X86: "i386",
    CPU_TYPE_X86_64: "x86_64",
    CPU_TYPE_POWERPC: "powerpc",
    CPU_TYPE_POWERPC64: "ppc64",
})

# Registers Apple renames in its own reports, keyed by ABI-masked cpu type
_REGISTER_ALIASES = MappingProxyType({
    CPU_TYPE_ARM: MappingProxyType({"r12": "ip"}),
})


# =============================================================================
# Queries
# =============================================================================

def code_type(processor: Optional[ProcessorInfo]) -> CodeType:
    """Return the header code type for a processor.

    Unmapped Mach types and non-Mach encodings are reported as unknown and
    default to 64-bit.
    """
    if processor is None or not processor.is_mach:
        return CodeType("Unknown", True)
    return _CODE_TYPES.get(processor.type, CodeType(f"Unknown ({processor.type})", True))


def architecture_name(processor: Optional[ProcessorInfo]) -> str:
    """Short architecture name for the binary image list (e.g. ``arm64e``)."""
    if processor is None or not processor.is_mach:
        return UNKNOWN_ARCH_NAME
    subtype = processor.subtype & ~CPU_SUBTYPE_MASK
    name = _ARCH_NAMES.get((processor.type, subtype))
    if name is not None:
        return name
    return _DEFAULT_ARCH_NAMES.get(processor.type, "unknown")


def register_name(processor: Optional[ProcessorInfo], name: str) -> str:
    """Apply the platform's display alias for a register name, if any.

    ``processor`` is the host processor from machine info; reports without
    one keep the raw register names.
    """
    if processor is None:
        return name
    aliases = _REGISTER_ALIASES.get(processor.type & ~CPU_ARCH_MASK)
    if aliases is None:
        return name
    return aliases.get(name, name)
