"""
Native Library Boundary
=======================

Loads the Capstone shared library with ctypes, declares the C signatures
of the functions the binding uses, and selects the cs_insn structure
layout that matches the loaded library.

Nothing outside this module touches the ctypes.CDLL object directly.
The rest of the package talks to a NativeLibrary, whose cs_* attributes
are the foreign functions with argtypes/restype set. Tests substitute an
object with the same attributes.

Library Search Order
--------------------
1. Explicit path passed to load_library()
2. BindingConfig.library_path (CAPSTONE_LIB_PATH)
3. BindingConfig.library_dir (CAPSTONE_LIB_DIR)
4. The shared library shipped inside an installed ``capstone`` wheel
   (found through importlib metadata only, its Python API is not imported)
5. ctypes.util.find_library("capstone")

cs_insn Layout
--------------
    struct cs_insn {
        unsigned int id;
        uint64_t address;
        uint16_t size;
        uint8_t bytes[16 or 24];   // 16 up to 4.x, 24 from 5.0
        char mnemonic[32];
        char op_str[160];
        cs_detail *detail;
    };

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import ctypes
import ctypes.util
import importlib.util
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple, Type

from capstone_binding.config import BindingConfig, get_default_config
from capstone_binding.errors import LibraryLoadError

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Structure Layouts
# =============================================================================

CS_MNEMONIC_SIZE = 32
CS_OP_STR_SIZE = 160


class CsInsnV4(ctypes.Structure):
    """cs_insn as laid out by Capstone 3.x and 4.x."""
    _fields_ = [
        ("id", ctypes.c_uint),
        ("address", ctypes.c_uint64),
        ("size", ctypes.c_uint16),
        ("bytes", ctypes.c_ubyte * 16),
        ("mnemonic", ctypes.c_char * CS_MNEMONIC_SIZE),
        ("op_str", ctypes.c_char * CS_OP_STR_SIZE),
        ("detail", ctypes.c_void_p),
    ]


class CsInsnV5(ctypes.Structure):
    """cs_insn as laid out by Capstone 5.x."""
    _fields_ = [
        ("id", ctypes.c_uint),
        ("address", ctypes.c_uint64),
        ("size", ctypes.c_uint16),
        ("bytes", ctypes.c_ubyte * 24),
        ("mnemonic", ctypes.c_char * CS_MNEMONIC_SIZE),
        ("op_str", ctypes.c_char * CS_OP_STR_SIZE),
        ("detail", ctypes.c_void_p),
    ]


# Major version -> instruction structure
INSN_LAYOUTS: dict[int, Type[ctypes.Structure]] = {
    3: CsInsnV4,
    4: CsInsnV4,
    5: CsInsnV5,
}


def insn_layout_for(major: int) -> Type[ctypes.Structure]:
    """
    Return the cs_insn structure for a library major version.

    Raises:
        LibraryLoadError: If the major version's layout is not known
    """
    try:
        return INSN_LAYOUTS[major]
    except KeyError:
        supported = ", ".join(str(v) for v in sorted(INSN_LAYOUTS))
        raise LibraryLoadError(
            f"Capstone {major}.x is not supported (supported major versions: {supported})"
        )


# =============================================================================
# Loaded Library
# =============================================================================

class NativeLibrary:
    """
    A loaded Capstone shared library with typed entry points.

    Attributes:
        path: File the library was loaded from
        insn_struct: cs_insn structure class matching the library version
        cs_open, cs_option, cs_disasm, cs_free, cs_close, cs_errno,
        cs_strerror, cs_version, cs_support: the foreign functions
    """

    def __init__(self, cdll: ctypes.CDLL, path: str):
        self.path = path
        self._cdll = cdll

        try:
            self.cs_version = cdll.cs_version
            self.cs_support = cdll.cs_support
            self.cs_open = cdll.cs_open
            self.cs_option = cdll.cs_option
            self.cs_disasm = cdll.cs_disasm
            self.cs_free = cdll.cs_free
            self.cs_close = cdll.cs_close
            self.cs_errno = cdll.cs_errno
            self.cs_strerror = cdll.cs_strerror
        except AttributeError as e:
            raise LibraryLoadError(f"'{path}' is not a Capstone library: {e}")

        self.cs_version.argtypes = [ctypes.POINTER(ctypes.c_int), ctypes.POINTER(ctypes.c_int)]
        self.cs_version.restype = ctypes.c_uint

        major, minor = self.version()
        self.insn_struct = insn_layout_for(major)
        insn_ptr = ctypes.POINTER(self.insn_struct)

        self.cs_support.argtypes = [ctypes.c_int]
        self.cs_support.restype = ctypes.c_bool

        self.cs_open.argtypes = [ctypes.c_int, ctypes.c_uint, ctypes.POINTER(ctypes.c_size_t)]
        self.cs_open.restype = ctypes.c_int

        self.cs_option.argtypes = [ctypes.c_size_t, ctypes.c_int, ctypes.c_size_t]
        self.cs_option.restype = ctypes.c_int

        self.cs_disasm.argtypes = [
            ctypes.c_size_t,
            ctypes.POINTER(ctypes.c_ubyte),
            ctypes.c_size_t,
            ctypes.c_uint64,
            ctypes.c_size_t,
            ctypes.POINTER(insn_ptr),
        ]
        self.cs_disasm.restype = ctypes.c_size_t

        self.cs_free.argtypes = [insn_ptr, ctypes.c_size_t]
        self.cs_free.restype = None

        self.cs_close.argtypes = [ctypes.POINTER(ctypes.c_size_t)]
        self.cs_close.restype = ctypes.c_int

        self.cs_errno.argtypes = [ctypes.c_size_t]
        self.cs_errno.restype = ctypes.c_int

        self.cs_strerror.argtypes = [ctypes.c_int]
        self.cs_strerror.restype = ctypes.c_char_p

        logger.debug(f"Loaded Capstone {major}.{minor} from {path}")

    def version(self) -> Tuple[int, int]:
        major = ctypes.c_int(0)
        minor = ctypes.c_int(0)
        self.cs_version(ctypes.pointer(major), ctypes.pointer(minor))
        return major.value, minor.value

    def __repr__(self) -> str:
        return f"NativeLibrary({self.path!r})"


# =============================================================================
# Library Search
# =============================================================================

def _library_filenames() -> List[str]:
    """Platform-specific file names of the shared library."""
    if os.name == "nt":
        return ["capstone.dll", "libcapstone.dll"]
    elif sys.platform == "darwin":
        return ["libcapstone.dylib", "libcapstone.5.dylib", "libcapstone.4.dylib"]
    else:
        return ["libcapstone.so", "libcapstone.so.5", "libcapstone.so.4"]


def _bundled_library_dirs() -> List[Path]:
    """Directories inside an installed capstone wheel that hold its library."""
    spec = importlib.util.find_spec("capstone")
    if spec is None or not spec.submodule_search_locations:
        return []
    dirs = []
    for location in spec.submodule_search_locations:
        base = Path(location)
        dirs.extend([base / "lib", base])
    return dirs


def candidate_paths(config: Optional[BindingConfig] = None) -> List[str]:
    """
    List the library locations to try, in priority order.

    Only the explicit configuration entries are returned even if the file
    does not exist, so that a mistyped CAPSTONE_LIB_PATH shows up in the
    error message instead of silently falling through.
    """
    config = config or get_default_config()
    candidates: List[str] = []

    if config.library_path is not None:
        candidates.append(str(config.library_path))

    search_dirs: List[Path] = []
    if config.library_dir is not None:
        search_dirs.append(config.library_dir)
    search_dirs.extend(_bundled_library_dirs())

    for directory in search_dirs:
        for name in _library_filenames():
            path = directory / name
            if path.is_file():
                candidates.append(str(path))

    system = ctypes.util.find_library("capstone")
    if system:
        candidates.append(system)

    return candidates


def load_library(
    path: Optional[str] = None,
    config: Optional[BindingConfig] = None,
) -> NativeLibrary:
    """
    Load the Capstone shared library.

    Args:
        path: Exact file to load; skips the search when given
        config: Search configuration (defaults to get_default_config())

    Returns:
        NativeLibrary for the first candidate that loads

    A searched candidate that loads but is not usable (missing symbols or
    an unsupported major version) is skipped in favour of the next one. An
    explicit ``path`` is used as-is and its errors are raised directly.

    Raises:
        LibraryLoadError: If no candidate could be loaded
    """
    candidates = [path] if path else candidate_paths(config)
    failures: List[str] = []

    for candidate in candidates:
        try:
            cdll = ctypes.CDLL(candidate)
        except OSError as e:
            logger.debug(f"Could not load {candidate}: {e}")
            failures.append(f"{candidate} ({e})")
            continue

        if path:
            return NativeLibrary(cdll, candidate)
        try:
            return NativeLibrary(cdll, candidate)
        except LibraryLoadError as e:
            logger.debug(f"Skipping {candidate}: {e}")
            failures.append(f"{candidate} ({e})")

    raise LibraryLoadError("could not load the Capstone shared library", searched=failures or candidates)


# Process-wide library (lazily loaded)
_LIBRARY: Optional[NativeLibrary] = None


def get_library() -> NativeLibrary:
    """
    Get the process-wide NativeLibrary, loading it on first use.

    Raises:
        LibraryLoadError: If the library cannot be loaded
    """
    global _LIBRARY
    if _LIBRARY is None:
        _LIBRARY = load_library()
    return _LIBRARY
