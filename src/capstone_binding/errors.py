"""
Capstone Binding Error Hierarchy
================================

This module defines the exception hierarchy for the binding. All
exceptions inherit from CapstoneBindingError, allowing callers to catch
every binding-related failure with a single except clause.

Exception Hierarchy
-------------------
CapstoneBindingError (base)
├── EngineError - native call reported a non-zero status
├── EngineClosedError - operation on an engine that was already closed
└── LibraryLoadError - native library missing or ABI not supported

Native Status Translation
-------------------------
Every failure the native engine reports is a small integer (cs_err). The
binding never subdivides these locally: EngineError carries the code as
reported and asks the library itself for the human-readable text via
cs_strerror(). The text is best-effort; if the library returns NULL or
bytes that are not valid UTF-8, the description is None.

Error messages follow this format:
    error: <description> (code <n>, <NAME>)

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from typing import Optional

from capstone_binding.constants import error_name


# =============================================================================
# Base Exception Class
# =============================================================================

class CapstoneBindingError(Exception):
    """
    Base exception for all binding errors.

        try:
            with Engine(Arch.X86, Mode.MODE_32) as engine:
                engine.disassemble(code, 0x1000)
        except CapstoneBindingError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Native Status Errors
# =============================================================================

def decode_c_string(raw: Optional[bytes]) -> Optional[str]:
    """
    Decode a NUL-terminated buffer returned by the native library.

    Returns None for a NULL pointer or for bytes that are not valid UTF-8.
    """
    if raw is None:
        return None
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return None


class EngineError(CapstoneBindingError):
    """
    A native call reported a non-zero status.

    Covers every failure the engine can signal: unsupported architecture,
    invalid mode combination, unknown option or value, undecodable input,
    out of memory, and any code added by future library versions.

    Attributes:
        code: The native status code, exactly as reported
        description: Text from cs_strerror(), or None if unavailable
    """

    def __init__(self, code: int, description: Optional[str] = None):
        self._code = int(code)
        self._description = description
        super().__init__(self._format_message())

    @property
    def code(self) -> int:
        return self._code

    @property
    def description(self) -> Optional[str]:
        return self._description

    @classmethod
    def from_status(cls, code: int, library=None) -> "EngineError":
        """
        Build an error for a native status code.

        Calls cs_strerror() on every invocation, so the description always
        reflects what the loaded library says about the code. Safe to call
        with any code, including ones unknown to this package.

        Args:
            code: Native status code
            library: Loaded native library (defaults to the process-wide one)
        """
        if library is None:
            from capstone_binding.native import get_library
            library = get_library()
        return cls(code, decode_c_string(library.cs_strerror(int(code))))

    def _format_message(self) -> str:
        text = self._description if self._description is not None else "unknown error"
        return f"{text} (code {self._code}, {error_name(self._code)})"

    def __reduce__(self):
        return (type(self), (self._code, self._description))


# =============================================================================
# Local Errors
# =============================================================================

class EngineClosedError(CapstoneBindingError):
    """
    Operation attempted on a closed engine.

    Raised before any native call is made: once an Engine has been closed
    its handle is never passed to the library again.
    """

    def __init__(self, message: str = "engine handle is closed"):
        super().__init__(message)


class LibraryLoadError(CapstoneBindingError):
    """
    The Capstone shared library could not be used.

    Raised when:
    - No library was found in any of the search locations
    - The file exists but cannot be loaded into the process
    - The library reports a major version whose ABI is not supported
    """

    def __init__(self, message: str, searched: Optional[list[str]] = None):
        self.searched = searched or []
        if self.searched:
            message = f"{message}\nsearched: {', '.join(self.searched)}"
        super().__init__(message)
