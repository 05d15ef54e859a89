#!/usr/bin/env python3
"""
Capstone Binding Demo
=====================

This script demonstrates how to use the binding to:
1. Inspect the loaded Capstone library
2. Open engines for several architectures
3. Switch output syntax
4. Handle engine errors

Usage:
    source .venv/bin/activate
    python examples/disassembly_demo.py

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from capstone_binding import (
    Arch,
    Engine,
    EngineError,
    Mode,
    OptionType,
    OptionValue,
    supported_architectures,
    version_string,
)


X86_64_CODE = b"\x55\x48\x8b\x05\xb8\x13\x00\x00\xe9\x14\x9e\x08\x00\xc3"
ARM_CODE = b"\x04\xe0\x2d\xe5\x00\x00\x00\x00\xe0\x83\x22\xe5\xf1\x02\x03\x0e"
THUMB_CODE = b"\x70\x47\xeb\x46\x83\xb0\xc9\x68"


def main():
    # ==========================================================================
    # 1. Library information
    # ==========================================================================
    print(f"Capstone {version_string()}")
    print("Built with: " + ", ".join(arch.name for arch in supported_architectures()))

    # ==========================================================================
    # 2. Disassemble for several architectures
    # ==========================================================================
    samples = [
        ("x86-64", Arch.X86, Mode.MODE_64, X86_64_CODE),
        ("ARM", Arch.ARM, Mode.ARM, ARM_CODE),
        ("Thumb", Arch.ARM, Mode.THUMB, THUMB_CODE),
    ]

    for title, arch, mode, code in samples:
        print(f"\n{title}:")
        with Engine(arch, mode) as engine:
            for insn in engine.disassemble(code, address=0x1000):
                print(f"  {insn}")

    # ==========================================================================
    # 3. AT&T syntax
    # ==========================================================================
    print("\nx86-64 (AT&T):")
    with Engine(Arch.X86, Mode.MODE_64) as engine:
        engine.set_option(OptionType.SYNTAX, OptionValue.SYNTAX_ATT)
        for insn in engine.disassemble(X86_64_CODE, address=0x1000):
            print(f"  {insn}")

    # ==========================================================================
    # 4. Errors come from the engine itself
    # ==========================================================================
    print("\nOpening x86 in Thumb mode:")
    try:
        Engine(Arch.X86, Mode.THUMB)
    except EngineError as e:
        print(f"  rejected: {e}")


if __name__ == "__main__":
    main()
