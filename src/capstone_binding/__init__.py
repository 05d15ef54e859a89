"""
Capstone Binding - Memory-Safe Python API for the Capstone Disassembler
=======================================================================

This package exposes the Capstone disassembly engine (a native shared
library) through ctypes, with the native resources it hands out managed
on the Python side:

- Engine handles are owned by exactly one Engine object and closed exactly
  once, explicitly, on ``with`` exit, or on garbage collection
- Instruction arrays returned by the engine are copied into immutable
  Instruction objects and freed inside the same call
- Native status codes become EngineError exceptions carrying the
  engine's own error text

Main Components
---------------
- **engine**: Engine handle (open, set_option, disassemble, close)
- **instruction**: Instruction records and native array materialization
- **metadata**: Library version and architecture support queries
- **constants**: Architecture, mode, option and status code tables
- **native**: Shared library loading and C signatures

Quick Start
-----------
Disassemble some x86 code:
    >>> from capstone_binding import Engine, Arch, Mode
    >>> with Engine(Arch.X86, Mode.MODE_32) as engine:
    ...     for insn in engine.disassemble(b"\\x90\\xc3", address=0x1000):
    ...         print(insn.address, insn.mnemonic, insn.op_str)

Check what the installed library supports:
    >>> from capstone_binding import version, supports
    >>> version()
    (5, 0)
    >>> supports(Arch.ARM64)
    True

Or use the command-line tools:
    $ csdisasm code.bin --arch x86 --mode 32 --address 0x1000
    $ csinfo

Reference Documentation
-----------------------
- Capstone: https://www.capstone-engine.org/
- C API: https://github.com/capstone-engine/capstone/blob/v5/include/capstone/capstone.h

Version History
---------------
1.0.0 - Initial release with engine handle, options, disassembly and metadata
"""

__version__ = "1.0.0"
__author__ = "Hugo José Pinto & Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from capstone_binding.constants import (
    Arch,
    Mode,
    OptionType,
    OptionValue,
    ErrorCode,
    parse_arch,
    parse_mode,
)
from capstone_binding.errors import (
    CapstoneBindingError,
    EngineError,
    EngineClosedError,
    LibraryLoadError,
)
from capstone_binding.config import BindingConfig, get_default_config
from capstone_binding.instruction import Instruction, INVALID_UTF8
from capstone_binding.engine import Engine
from capstone_binding.metadata import (
    version,
    version_string,
    supports,
    supported_architectures,
    is_diet,
    is_x86_reduced,
)
from capstone_binding.native import NativeLibrary, load_library, get_library

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Code tables
    "Arch",
    "Mode",
    "OptionType",
    "OptionValue",
    "ErrorCode",
    "parse_arch",
    "parse_mode",
    # Exception hierarchy
    "CapstoneBindingError",
    "EngineError",
    "EngineClosedError",
    "LibraryLoadError",
    # Configuration
    "BindingConfig",
    "get_default_config",
    # Engine and results
    "Engine",
    "Instruction",
    "INVALID_UTF8",
    # Metadata
    "version",
    "version_string",
    "supports",
    "supported_architectures",
    "is_diet",
    "is_x86_reduced",
    # Native library
    "NativeLibrary",
    "load_library",
    "get_library",
]
