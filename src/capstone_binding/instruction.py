"""
Decoded Instructions
====================

Owned instruction records and the code that copies them out of the
native cs_insn array returned by cs_disasm().

An Instruction shares no memory with the native library. Every field is
copied (address as int, raw bytes as bytes, text as str) before the
native array is released, so instructions stay valid after the engine
that produced them has been closed.

Text fields come from fixed-size C buffers that the library fills. They
are decoded as UTF-8; a field that does not decode is replaced as a whole
by INVALID_UTF8 rather than failing the call.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import ctypes
import logging
from dataclasses import dataclass
from typing import List

# Logger for this module
logger = logging.getLogger(__name__)

# Placeholder for mnemonic/operand text that is not valid UTF-8
INVALID_UTF8 = "<invalid UTF-8>"


def decode_text(raw: bytes) -> str:
    """Decode a C text buffer, substituting INVALID_UTF8 on bad input."""
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return INVALID_UTF8


# =============================================================================
# Data Structures
# =============================================================================

@dataclass(frozen=True)
class Instruction:
    """
    A single decoded instruction.

    Attributes:
        address: Address of the instruction (base address + offset)
        bytes: Raw machine code of the instruction
        mnemonic: Instruction mnemonic as printed by the engine (e.g. "mov")
        op_str: Operand text as printed by the engine (may be empty)
    """
    address: int
    bytes: bytes
    mnemonic: str
    op_str: str

    @property
    def size(self) -> int:
        """Length of the instruction in bytes."""
        return len(self.bytes)

    @classmethod
    def from_native(cls, insn: ctypes.Structure) -> "Instruction":
        """
        Copy one cs_insn structure into an Instruction.

        Only the first ``insn.size`` bytes of the fixed-capacity byte buffer
        are read, bounded by the buffer's capacity.
        """
        size = min(insn.size, len(insn.bytes))
        return cls(
            address=insn.address,
            bytes=bytes(insn.bytes[:size]),
            mnemonic=decode_text(insn.mnemonic),
            op_str=decode_text(insn.op_str),
        )

    def __str__(self) -> str:
        """Format as listing line: ADDRESS: BYTES  MNEMONIC OPERANDS"""
        hex_bytes = " ".join(f"{b:02x}" for b in self.bytes)
        # Pad to the width of a typical 8-byte instruction
        hex_bytes = hex_bytes.ljust(23)

        if self.op_str:
            asm = f"{self.mnemonic} {self.op_str}"
        else:
            asm = self.mnemonic

        return f"0x{self.address:08x}: {hex_bytes}  {asm}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "address": f"0x{self.address:x}",
            "address_int": self.address,
            "size": self.size,
            "bytes": self.bytes.hex(),
            "mnemonic": self.mnemonic,
            "op_str": self.op_str,
        }


# =============================================================================
# Materialization
# =============================================================================

def materialize(insn_ptr, count: int, library) -> List[Instruction]:
    """
    Copy a native cs_insn array into Instructions and free the array.

    The array is released with cs_free(insn_ptr, count) once copying is
    done, including when copying fails part-way. Callers must not touch
    insn_ptr afterwards.

    Args:
        insn_ptr: POINTER(cs_insn) returned through cs_disasm()
        count: Number of records cs_disasm() reported (>= 1)
        library: NativeLibrary that allocated the array

    Returns:
        Instructions in the order the engine produced them
    """
    try:
        instructions = [Instruction.from_native(insn_ptr[i]) for i in range(count)]
    finally:
        library.cs_free(insn_ptr, count)

    logger.debug(f"Materialized {count} instruction(s), native array released")
    return instructions
