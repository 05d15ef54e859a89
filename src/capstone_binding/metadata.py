"""
Library Metadata Queries
========================

Stateless queries about the loaded Capstone library. None of these can
fail once the library is loaded: the underlying native functions have no
error return.
"""

from typing import List, Tuple

from capstone_binding.constants import Arch, SUPPORT_DIET, SUPPORT_X86_REDUCE
from capstone_binding.native import get_library


def version(library=None) -> Tuple[int, int]:
    """Return the (major, minor) version of the native library."""
    library = library if library is not None else get_library()
    return library.version()


def version_string(library=None) -> str:
    """Return the native library version as "major.minor"."""
    major, minor = version(library)
    return f"{major}.{minor}"


def supports(arch: Arch, library=None) -> bool:
    """Return True if the native library was built with support for ``arch``."""
    library = library if library is not None else get_library()
    return bool(library.cs_support(int(Arch(arch))))


def supported_architectures(library=None) -> List[Arch]:
    """List the architectures compiled into the native library."""
    library = library if library is not None else get_library()
    return [arch for arch in Arch if supports(arch, library)]


def is_diet(library=None) -> bool:
    """
    Return True for a "diet" build.

    Diet builds drop mnemonic and operand text, so instructions decoded by
    them carry empty mnemonic/op_str fields.
    """
    library = library if library is not None else get_library()
    return bool(library.cs_support(SUPPORT_DIET))


def is_x86_reduced(library=None) -> bool:
    """Return True if the library was built with the reduced X86 instruction set."""
    library = library if library is not None else get_library()
    return bool(library.cs_support(SUPPORT_X86_REDUCE))
