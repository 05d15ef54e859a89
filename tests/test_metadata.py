"""
Unit Tests for Library Metadata Queries
=======================================
"""

from capstone_binding.constants import Arch
from capstone_binding.metadata import (
    is_diet,
    is_x86_reduced,
    supported_architectures,
    supports,
    version,
    version_string,
)


class TestVersion:
    """Tests for version() and version_string()."""

    def test_version(self, fake_library):
        assert version(fake_library) == (5, 0)

    def test_stable(self, fake_library):
        assert version(fake_library) == version(fake_library)

    def test_version_string(self, fake_library):
        fake_library.major, fake_library.minor = 4, 2

        assert version_string(fake_library) == "4.2"

    def test_default_library(self, installed_fake):
        assert version() == (5, 0)


class TestSupports:
    """Tests for supports() and the derived queries."""

    def test_supported(self, fake_library):
        assert supports(Arch.X86, fake_library) is True

    def test_not_supported(self, fake_library):
        assert supports(Arch.XCORE, fake_library) is False

    def test_pure(self, fake_library):
        results = {supports(Arch.ARM, fake_library) for _ in range(5)}

        assert results == {True}

    def test_passes_arch_code(self, fake_library):
        supports(Arch.MIPS, fake_library)

        assert ("cs_support", (2,)) in fake_library.calls

    def test_supported_architectures(self, fake_library):
        assert supported_architectures(fake_library) == [Arch.ARM, Arch.MIPS, Arch.X86]

    def test_diet(self, fake_library):
        assert is_diet(fake_library) is False
        fake_library.diet = True
        assert is_diet(fake_library) is True

    def test_x86_reduce(self, fake_library):
        assert is_x86_reduced(fake_library) is False
