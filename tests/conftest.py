"""
Test Configuration
==================

pytest fixtures shared by the whole suite.

It provides:
- FakeCapstone, an in-process stand-in for the native library that hands
  out real ctypes cs_insn arrays and records every call made to it
- Fixtures for fake and real libraries and for open engines
- The requires_capstone marker, skipped automatically when the real
  shared library cannot be loaded

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import ctypes

import pytest

from capstone_binding import config as config_module
from capstone_binding import native
from capstone_binding.config import BindingConfig
from capstone_binding.constants import Arch, ErrorCode, Mode, OptionType
from capstone_binding.engine import Engine
from capstone_binding.errors import LibraryLoadError
from capstone_binding.native import CsInsnV5


# ═══════════════════════════════════════════════════════════════════════════════
# FAKE NATIVE LIBRARY
# ═══════════════════════════════════════════════════════════════════════════════

# First byte -> (instruction length, mnemonic, operand text)
DEFAULT_TABLE = {
    0x90: (1, b"nop", b""),
    0xC3: (1, b"ret", b""),
    0x55: (1, b"push", b"ebp"),
    0x89: (2, b"mov", b"ebp, esp"),
    0xB8: (5, b"mov", b"eax, 1"),
}

ERROR_STRINGS = {
    ErrorCode.OK: b"OK (CS_ERR_OK)",
    ErrorCode.MEM: b"Out-Of-Memory error (CS_ERR_MEM)",
    ErrorCode.ARCH: b"Invalid/unsupported architecture(CS_ERR_ARCH)",
    ErrorCode.HANDLE: b"Invalid handle (CS_ERR_HANDLE)",
    ErrorCode.CSH: b"Invalid csh (CS_ERR_CSH)",
    ErrorCode.MODE: b"Invalid mode (CS_ERR_MODE)",
    ErrorCode.OPTION: b"Invalid option (CS_ERR_OPTION)",
}

# Modes the fake accepts per architecture
VALID_MODES = {
    Arch.X86: {Mode.MODE_16, Mode.MODE_32, Mode.MODE_64},
    Arch.ARM: {Mode.ARM, Mode.THUMB, Mode.ARM | Mode.BIG_ENDIAN, Mode.THUMB | Mode.MCLASS},
    Arch.MIPS: {Mode.MIPS32, Mode.MIPS64, Mode.MIPS32 | Mode.BIG_ENDIAN},
}


class FakeCapstone:
    """
    Python stand-in for a loaded Capstone 5 library.

    Implements the same cs_* entry points as NativeLibrary. Instruction
    arrays are real ctypes arrays; cs_free() scribbles over them before
    dropping them so that any read-after-free shows up as garbage.

    Attributes:
        calls: (function name, args) for every native call made
        open_handles: Handles currently open
        closed: Handles passed to cs_close(), in order
        freed: (address, count) for every cs_free() call
        live_arrays: Arrays handed out and not yet freed, keyed by address
    """

    insn_struct = CsInsnV5
    path = "<fake libcapstone>"

    def __init__(self, major: int = 5, minor: int = 0, diet: bool = False):
        self.major = major
        self.minor = minor
        self.diet = diet
        self.table = dict(DEFAULT_TABLE)
        self.supported = set(VALID_MODES)
        self.known_options = {int(o) for o in OptionType}
        self.calls = []
        self.open_handles = set()
        self.closed = []
        self.freed = []
        self.live_arrays = {}
        self.errno = {}
        self.declared_size_override = None
        self._next_handle = 0x5000

    # --- metadata -------------------------------------------------------------

    def version(self):
        return self.major, self.minor

    def cs_version(self, major_ptr, minor_ptr):
        self.calls.append(("cs_version", ()))
        major_ptr[0] = self.major
        minor_ptr[0] = self.minor
        return (self.major << 8) + self.minor

    def cs_support(self, query):
        self.calls.append(("cs_support", (query,)))
        if query == 0xFFFF + 1:
            return self.diet
        if query > 0xFFFF:
            return False
        return query in self.supported

    # --- handle lifecycle -----------------------------------------------------

    def cs_open(self, arch, mode, handle_ptr):
        self.calls.append(("cs_open", (arch, mode)))
        if arch not in self.supported:
            return ErrorCode.ARCH
        if mode not in VALID_MODES[arch]:
            return ErrorCode.MODE
        handle = self._next_handle
        self._next_handle += 0x10
        handle_ptr[0] = handle
        self.open_handles.add(handle)
        return ErrorCode.OK

    def cs_close(self, handle_ptr):
        handle = handle_ptr[0]
        self.calls.append(("cs_close", (handle,)))
        self.closed.append(handle)
        if handle not in self.open_handles:
            return ErrorCode.CSH
        self.open_handles.remove(handle)
        handle_ptr[0] = 0
        return ErrorCode.OK

    def cs_option(self, handle, option, value):
        self.calls.append(("cs_option", (handle, option, value)))
        if handle not in self.open_handles:
            return ErrorCode.CSH
        if option not in self.known_options:
            return ErrorCode.OPTION
        return ErrorCode.OK

    def cs_errno(self, handle):
        self.calls.append(("cs_errno", (handle,)))
        return self.errno.get(handle, ErrorCode.OK)

    def cs_strerror(self, code):
        self.calls.append(("cs_strerror", (code,)))
        return ERROR_STRINGS.get(code, b"Unknown error code")

    # --- disassembly ----------------------------------------------------------

    def cs_disasm(self, handle, code, size, address, count, insn_out):
        self.calls.append(("cs_disasm", (handle, size, address, count)))
        if handle not in self.open_handles:
            return 0
        data = bytes(code)[:size]

        decoded = []
        offset = 0
        while offset < len(data) and (count == 0 or len(decoded) < count):
            entry = self.table.get(data[offset])
            if entry is None:
                break
            length, mnemonic, op_str = entry
            if offset + length > len(data):
                break
            decoded.append((address + offset, data[offset:offset + length], mnemonic, op_str))
            offset += length

        if not decoded:
            return 0

        array = (CsInsnV5 * len(decoded))()
        for insn, (insn_address, raw, mnemonic, op_str) in zip(array, decoded):
            insn.id = raw[0]
            insn.address = insn_address
            # Fill the whole buffer so reads past the declared size are visible
            for i in range(len(insn.bytes)):
                insn.bytes[i] = 0xCC
            for i, b in enumerate(raw):
                insn.bytes[i] = b
            insn.size = self.declared_size_override or len(raw)
            insn.mnemonic = mnemonic
            insn.op_str = op_str

        self.live_arrays[ctypes.addressof(array)] = array
        insn_out[0] = ctypes.cast(array, ctypes.POINTER(CsInsnV5))
        return len(decoded)

    def cs_free(self, insn_ptr, count):
        address = ctypes.addressof(insn_ptr.contents)
        self.calls.append(("cs_free", (address, count)))
        self.freed.append((address, count))
        array = self.live_arrays.pop(address)
        ctypes.memset(address, 0xAB, ctypes.sizeof(array))

    # --- helpers for assertions -----------------------------------------------

    def call_names(self):
        return [name for name, _ in self.calls]

    def count_calls(self, name):
        return sum(1 for call_name, _ in self.calls if call_name == name)


# ═══════════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Give every test a default configuration that ignores the environment."""
    config = BindingConfig()
    monkeypatch.setattr(config_module, "_default_config", config)
    return config


@pytest.fixture
def fake_library():
    """A fresh FakeCapstone."""
    return FakeCapstone()


@pytest.fixture
def installed_fake(monkeypatch, fake_library):
    """Install the fake as the process-wide library (for CLI and default-arg paths)."""
    monkeypatch.setattr(native, "_LIBRARY", fake_library)
    return fake_library


@pytest.fixture
def x86_engine(fake_library):
    """An open 32-bit x86 engine on the fake library."""
    engine = Engine(Arch.X86, Mode.MODE_32, library=fake_library)
    yield engine
    engine.close()


@pytest.fixture(scope="session")
def real_library():
    """The real Capstone shared library; skips the test when unavailable."""
    try:
        return native.load_library()
    except LibraryLoadError as e:
        pytest.skip(f"Capstone library not available: {e}")


def _real_library_available() -> bool:
    try:
        native.load_library()
    except LibraryLoadError:
        return False
    return True


def pytest_collection_modifyitems(config, items):
    """
    Skip tests marked requires_capstone when the shared library is missing.
    """
    if not any("requires_capstone" in item.keywords for item in items):
        return
    if _real_library_available():
        return

    skip_marker = pytest.mark.skip(reason="Capstone shared library not available")
    for item in items:
        if "requires_capstone" in item.keywords:
            item.add_marker(skip_marker)
