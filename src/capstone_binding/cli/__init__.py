"""
Capstone Binding Command-Line Interface
=======================================

This package provides command-line tools built on the binding:

- **csdisasm**: Disassemble a binary file
- **csinfo**: Show library version and architecture support

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["csdisasm", "csinfo"]
