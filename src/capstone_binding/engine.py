"""
Disassembly Engine Handle
=========================

Engine owns exactly one native Capstone handle (csh) from a successful
cs_open() until cs_close(). The handle is released exactly once, by
whichever comes first:

    - an explicit close()
    - leaving a ``with`` block (also when the block raises)
    - garbage collection of the Engine, or interpreter shutdown

After release the handle value is never passed to the library again; any
further call raises EngineClosedError before reaching native code. An
Engine cannot be copied or pickled, so two Python objects never share one
native handle.

An Engine is not thread-safe. Use one Engine per thread.

Usage:
    with Engine(Arch.X86, Mode.MODE_32) as engine:
        engine.set_option(OptionType.SYNTAX, OptionValue.SYNTAX_ATT)
        for insn in engine.disassemble(b"\\x55\\x89\\xe5", address=0x1000):
            print(insn)

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import ctypes
import logging
import weakref
from typing import List, Optional, Union

from capstone_binding.config import BindingConfig, get_default_config
from capstone_binding.constants import Arch, ErrorCode, Mode, OptionType, error_name
from capstone_binding.errors import EngineClosedError, EngineError
from capstone_binding.instruction import Instruction, materialize
from capstone_binding.native import get_library

# Logger for this module
logger = logging.getLogger(__name__)

MAX_ADDRESS = 0xFFFF_FFFF_FFFF_FFFF
# Largest value a size_t argument (count, option value) can carry
MAX_SIZE = 0xFFFF_FFFF_FFFF_FFFF


def _release_handle(library, handle: int, implicit: bool) -> None:
    """
    Close a native handle. Runs at most once per handle via weakref.finalize.

    Must not reference the Engine itself, otherwise the finalizer would keep
    it alive.
    """
    if implicit:
        logger.warning(f"Engine handle 0x{handle:x} was not closed explicitly; closing on collection")
    status = library.cs_close(ctypes.pointer(ctypes.c_size_t(handle)))
    if status != ErrorCode.OK:
        logger.warning(f"cs_close(0x{handle:x}) reported {error_name(status)}")
    else:
        logger.debug(f"Closed engine handle 0x{handle:x}")


class Engine:
    """
    A configured Capstone engine for one architecture and mode.

    Attributes:
        arch: Architecture the engine was opened for
        mode: Mode flags the engine was opened with
        closed: True once the native handle has been released
    """

    def __init__(
        self,
        arch: Arch,
        mode: Union[Mode, int] = Mode.LITTLE_ENDIAN,
        library=None,
        config: Optional[BindingConfig] = None,
    ):
        """
        Open a native engine.

        Args:
            arch: Target architecture
            mode: Mode bit-set; passed through to the library unchanged
            library: NativeLibrary to use (defaults to the process-wide one)
            config: Binding configuration (defaults to get_default_config())

        Raises:
            EngineError: If cs_open() rejects the architecture/mode
            LibraryLoadError: If the default library cannot be loaded
        """
        self._library = library if library is not None else get_library()
        self._config = config or get_default_config()
        self._arch = Arch(arch)
        if not 0 <= int(mode) <= 0xFFFF_FFFF:
            raise ValueError(f"mode 0x{int(mode):x} does not fit in 32 bits")
        self._mode = Mode(mode)

        handle = ctypes.c_size_t(0)
        status = self._library.cs_open(int(self._arch), int(self._mode), ctypes.pointer(handle))
        if status != ErrorCode.OK:
            logger.debug(f"cs_open({self._arch.name}, 0x{int(self._mode):x}) failed: {error_name(status)}")
            raise EngineError.from_status(status, self._library)

        self._handle = handle.value
        self._finalizer = weakref.finalize(self, _release_handle, self._library, self._handle, True)
        logger.debug(f"Opened {self._arch.name} engine, mode 0x{int(self._mode):x}, handle 0x{self._handle:x}")

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def arch(self) -> Arch:
        return self._arch

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def set_option(self, option: OptionType, value: int) -> None:
        """
        Change a runtime option of this engine.

        Args:
            option: Option to set
            value: Unsigned option value, meaning defined by the engine

        Raises:
            EngineError: If the engine rejects the option or value
            EngineClosedError: If the engine has been closed
            ValueError: If value does not fit in an unsigned 64-bit integer
        """
        self._check_open()
        if not 0 <= value <= MAX_SIZE:
            raise ValueError(f"option value must be an unsigned 64-bit integer, got {value}")

        status = self._library.cs_option(self._handle, int(option), int(value))
        if status != ErrorCode.OK:
            raise EngineError.from_status(status, self._library)
        logger.debug(f"Set option {getattr(option, 'name', option)} = {value}")

    def disassemble(
        self,
        code: Union[bytes, bytearray, memoryview],
        address: int = 0,
        count: int = 0,
    ) -> List[Instruction]:
        """
        Disassemble machine code.

        Decoding stops at the first byte sequence the engine cannot decode,
        at the end of ``code``, or after ``count`` instructions.

        Args:
            code: Machine code to decode
            address: Address of the first byte of ``code``
            count: Maximum number of instructions; 0 lets the engine decide
                (subject to BindingConfig.max_instructions)

        Returns:
            Decoded instructions in address order. Never empty.

        Raises:
            EngineError: If no instruction could be decoded (including empty
                input); carries the engine's last error code. When the
                engine left that code at OK (0), the description reads
                "no instruction decoded"
            EngineClosedError: If the engine has been closed
            TypeError: If code is not a bytes-like object
            ValueError: If address or count is out of range
        """
        self._check_open()
        if not isinstance(code, (bytes, bytearray, memoryview)):
            raise TypeError(f"code must be bytes-like, not {type(code).__name__}")
        if not 0 <= address <= MAX_ADDRESS:
            raise ValueError(f"address 0x{address:x} is outside the 64-bit range")
        if not 0 <= count <= MAX_SIZE:
            raise ValueError(f"count must be between 0 and 0x{MAX_SIZE:x}, got {count}")

        requested = self._config.clamp_count(count)
        if requested != count:
            logger.debug(f"Instruction count {count} clamped to {requested}")

        data = bytes(code)
        buffer = (ctypes.c_ubyte * len(data)).from_buffer_copy(data)
        insn_ptr = ctypes.POINTER(self._library.insn_struct)()

        decoded = self._library.cs_disasm(
            self._handle, buffer, len(data), address, requested, ctypes.pointer(insn_ptr)
        )
        if decoded == 0:
            status = self.errno()
            if status == ErrorCode.OK:
                # Empty input or an undecodable first byte leaves errno untouched
                raise EngineError(status, "no instruction decoded")
            raise EngineError.from_status(status, self._library)

        instructions = materialize(insn_ptr, decoded, self._library)
        logger.debug(f"Disassembled {decoded} instruction(s) from {len(data)} byte(s) at 0x{address:x}")
        return instructions

    def errno(self) -> int:
        """
        Return the engine's last error code (cs_errno).

        Raises:
            EngineClosedError: If the engine has been closed
        """
        self._check_open()
        return self._library.cs_errno(self._handle)

    def close(self) -> None:
        """
        Release the native handle.

        Calling close() again, or letting the Engine be collected afterwards,
        does nothing.
        """
        if self._finalizer.detach() is not None:
            _release_handle(self._library, self._handle, False)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _check_open(self) -> None:
        if not self._finalizer.alive:
            raise EngineClosedError()

    def __enter__(self) -> "Engine":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __copy__(self):
        raise TypeError("Engine handles cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError("Engine handles cannot be copied")

    def __reduce_ex__(self, protocol):
        raise TypeError("Engine handles cannot be pickled")

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"Engine(arch={self._arch.name}, mode=0x{int(self._mode):x}, {state})"
