"""
Capstone Engine Code Table
==========================

Integer encodings the native Capstone library expects for architectures,
mode flags, options and status codes. Everything here is plain data: the
values are handed to the library unchanged and never interpreted locally.

Mode Flags
----------
Mode bits are shared between unrelated architectures, so several names
alias the same bit:

    bit 4:  THUMB (ARM), MICRO (MIPS), V9 (SPARC)
    bit 5:  MCLASS (ARM), MIPS3 (MIPS)
    bit 6:  V8 (ARM), MIPS32R6 (MIPS)

Whether a combination makes sense for a given architecture is decided by
the native engine when the handle is opened (CS_ERR_MODE on rejection).

Reference
---------
- capstone.h: https://github.com/capstone-engine/capstone/blob/v5/include/capstone/capstone.h

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from enum import IntEnum, IntFlag
from typing import Iterable, Union


# =============================================================================
# Architectures
# =============================================================================

class Arch(IntEnum):
    """
    Instruction-set architectures understood by the engine.

    Values match the cs_arch enumeration of Capstone 3.x to 5.x.
    """
    ARM = 0
    ARM64 = 1
    MIPS = 2
    X86 = 3
    PPC = 4
    SPARC = 5
    SYSZ = 6
    XCORE = 7


# =============================================================================
# Mode Flags
# =============================================================================

class Mode(IntFlag):
    """
    Engine mode bit-set (cs_mode).

    Combine with ``|``. Aliased names are expected; see the module docstring.
    """
    LITTLE_ENDIAN = 0
    ARM = 0
    MODE_16 = 1 << 1
    MODE_32 = 1 << 2
    MODE_64 = 1 << 3
    THUMB = 1 << 4
    MCLASS = 1 << 5
    V8 = 1 << 6
    MICRO = 1 << 4
    MIPS3 = 1 << 5
    MIPS32R6 = 1 << 6
    MIPSGP64 = 1 << 7
    V9 = 1 << 4
    BIG_ENDIAN = 1 << 31
    MIPS32 = 1 << 2
    MIPS64 = 1 << 3


# =============================================================================
# Options
# =============================================================================

class OptionType(IntEnum):
    """Runtime options accepted by cs_option()."""
    SYNTAX = 1      # Assembly output syntax
    DETAIL = 2      # Break down instruction structure into details
    MODE = 3        # Change engine mode at run time
    SKIPDATA = 5    # Skip data when disassembling
    UNSIGNED = 8    # Print immediates as unsigned


class OptionValue(IntEnum):
    """
    Well-known option values.

    Any unsigned integer is accepted by Engine.set_option(); these names
    only cover the common cases. SYNTAX_DEFAULT shares its value with OFF
    and SYNTAX_NOREGNAME with ON, so they are aliases here too.
    """
    OFF = 0
    ON = 3
    SYNTAX_DEFAULT = 0
    SYNTAX_INTEL = 1
    SYNTAX_ATT = 2
    SYNTAX_NOREGNAME = 3
    SYNTAX_MASM = 4


# =============================================================================
# Status Codes
# =============================================================================

class ErrorCode(IntEnum):
    """
    Native status codes (cs_err).

    Codes the library defines beyond this list are still valid status
    values; they are carried around as plain ints.
    """
    OK = 0
    MEM = 1
    ARCH = 2
    HANDLE = 3
    CSH = 4
    MODE = 5
    OPTION = 6
    DETAIL = 7
    MEMSETUP = 8
    VERSION = 9
    DIET = 10
    SKIPDATA = 11
    X86_ATT = 12
    X86_INTEL = 13
    X86_MASM = 14


def error_name(code: int) -> str:
    """Return the symbolic name of a status code, or its number if unknown."""
    try:
        return ErrorCode(code).name
    except ValueError:
        return str(code)


# cs_support() queries that are not architectures
SUPPORT_ALL_ARCH = 0xFFFF
SUPPORT_DIET = SUPPORT_ALL_ARCH + 1
SUPPORT_X86_REDUCE = SUPPORT_ALL_ARCH + 2


# =============================================================================
# Name Lookup (command-line and config parsing)
# =============================================================================

ARCH_NAMES: dict[str, Arch] = {
    "arm": Arch.ARM,
    "arm64": Arch.ARM64,
    "aarch64": Arch.ARM64,
    "mips": Arch.MIPS,
    "x86": Arch.X86,
    "ppc": Arch.PPC,
    "powerpc": Arch.PPC,
    "sparc": Arch.SPARC,
    "sysz": Arch.SYSZ,
    "systemz": Arch.SYSZ,
    "xcore": Arch.XCORE,
}

MODE_NAMES: dict[str, Mode] = {
    "little-endian": Mode.LITTLE_ENDIAN,
    "arm": Mode.ARM,
    "16": Mode.MODE_16,
    "32": Mode.MODE_32,
    "64": Mode.MODE_64,
    "thumb": Mode.THUMB,
    "mclass": Mode.MCLASS,
    "v8": Mode.V8,
    "micro": Mode.MICRO,
    "mips3": Mode.MIPS3,
    "mips32r6": Mode.MIPS32R6,
    "mipsgp64": Mode.MIPSGP64,
    "v9": Mode.V9,
    "big-endian": Mode.BIG_ENDIAN,
    "mips32": Mode.MIPS32,
    "mips64": Mode.MIPS64,
}

SYNTAX_NAMES: dict[str, OptionValue] = {
    "default": OptionValue.SYNTAX_DEFAULT,
    "intel": OptionValue.SYNTAX_INTEL,
    "att": OptionValue.SYNTAX_ATT,
    "noregname": OptionValue.SYNTAX_NOREGNAME,
    "masm": OptionValue.SYNTAX_MASM,
}


def parse_arch(name: str) -> Arch:
    """
    Look up an architecture by name (case-insensitive).

    Raises:
        ValueError: If the name is unknown
    """
    try:
        return ARCH_NAMES[name.strip().lower()]
    except KeyError:
        valid = ", ".join(sorted(ARCH_NAMES))
        raise ValueError(f"unknown architecture '{name}' (expected one of: {valid})")


def parse_mode(names: Union[str, Iterable[str]]) -> Mode:
    """
    Combine mode flag names into one Mode value.

    Accepts a single name, a comma/plus separated string ("thumb+big-endian")
    or an iterable of names. An empty input yields Mode.LITTLE_ENDIAN.

    Raises:
        ValueError: If any name is unknown
    """
    if isinstance(names, str):
        names = names.replace("+", ",").split(",")

    mode = Mode.LITTLE_ENDIAN
    for name in names:
        key = name.strip().lower()
        if not key:
            continue
        if key not in MODE_NAMES:
            valid = ", ".join(MODE_NAMES)
            raise ValueError(f"unknown mode '{name}' (expected one of: {valid})")
        mode |= MODE_NAMES[key]
    return mode
