"""
Binding Configuration
=====================

Settings for locating the native library and for the local safety limits
applied around it. Configuration can come from:
- Default values (defined here)
- Environment variables
- Explicit BindingConfig instances passed to Engine / load_library()

Environment variables (all optional):
    CAPSTONE_LIB_PATH: Full path to the Capstone shared library
    CAPSTONE_LIB_DIR: Directory containing the shared library
    CAPSTONE_MAX_INSTRUCTIONS: Upper bound on instructions per disassemble call

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import os


@dataclass
class BindingConfig:
    """
    Configuration for the native binding.

    Attributes:
        library_path: Exact shared library file to load (highest priority)
        library_dir: Directory searched for the shared library
        max_instructions: Cap on instructions requested per disassemble call.
            0 disables the cap and lets the engine decide when the caller
            passes count=0.
    """

    library_path: Optional[Path] = None
    library_dir: Optional[Path] = None
    max_instructions: int = 0

    @classmethod
    def from_env(cls) -> "BindingConfig":
        """
        Create BindingConfig from environment variables.

        Invalid numeric values are ignored and the default is kept.
        """
        config = cls()

        if lib_path := os.environ.get("CAPSTONE_LIB_PATH"):
            config.library_path = Path(lib_path)

        if lib_dir := os.environ.get("CAPSTONE_LIB_DIR"):
            config.library_dir = Path(lib_dir)

        if limit := os.environ.get("CAPSTONE_MAX_INSTRUCTIONS"):
            try:
                value = int(limit)
            except ValueError:
                value = -1
            if value >= 0:
                config.max_instructions = value

        return config

    def clamp_count(self, count: int) -> int:
        """
        Apply max_instructions to a requested instruction count.

        A count of 0 means "no limit" to the engine, so it is replaced by
        the cap when one is configured.
        """
        if self.max_instructions <= 0:
            return count
        if count == 0 or count > self.max_instructions:
            return self.max_instructions
        return count


# Global default configuration (lazily initialized)
_default_config: Optional[BindingConfig] = None


def get_default_config() -> BindingConfig:
    """
    Get the process-wide default configuration.

    Built from environment variables on first use and cached afterwards.
    """
    global _default_config
    if _default_config is None:
        _default_config = BindingConfig.from_env()
    return _default_config


def set_default_config(config: Optional[BindingConfig]) -> None:
    """Replace the default configuration (None resets to environment-derived)."""
    global _default_config
    _default_config = config
