"""
Unit Tests for Binding Configuration
====================================
"""

from pathlib import Path

from capstone_binding import config as config_module
from capstone_binding.config import BindingConfig, get_default_config, set_default_config


class TestFromEnv:
    """Tests for BindingConfig.from_env()."""

    def test_defaults(self, monkeypatch):
        for name in ("CAPSTONE_LIB_PATH", "CAPSTONE_LIB_DIR", "CAPSTONE_MAX_INSTRUCTIONS"):
            monkeypatch.delenv(name, raising=False)

        config = BindingConfig.from_env()

        assert config.library_path is None
        assert config.library_dir is None
        assert config.max_instructions == 0

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("CAPSTONE_LIB_PATH", "/opt/cs/libcapstone.so")
        monkeypatch.setenv("CAPSTONE_LIB_DIR", "/opt/cs")
        monkeypatch.setenv("CAPSTONE_MAX_INSTRUCTIONS", "1000")

        config = BindingConfig.from_env()

        assert config.library_path == Path("/opt/cs/libcapstone.so")
        assert config.library_dir == Path("/opt/cs")
        assert config.max_instructions == 1000

    def test_invalid_limit_ignored(self, monkeypatch):
        monkeypatch.setenv("CAPSTONE_MAX_INSTRUCTIONS", "lots")
        assert BindingConfig.from_env().max_instructions == 0

        monkeypatch.setenv("CAPSTONE_MAX_INSTRUCTIONS", "-5")
        assert BindingConfig.from_env().max_instructions == 0


class TestClampCount:
    """Tests for BindingConfig.clamp_count()."""

    def test_no_cap(self):
        config = BindingConfig()

        assert config.clamp_count(0) == 0
        assert config.clamp_count(10_000) == 10_000

    def test_cap(self):
        config = BindingConfig(max_instructions=100)

        assert config.clamp_count(0) == 100
        assert config.clamp_count(500) == 100
        assert config.clamp_count(7) == 7


class TestDefaultConfig:
    """Tests for the process-wide configuration."""

    def test_cached(self, monkeypatch):
        monkeypatch.setattr(config_module, "_default_config", None)

        assert get_default_config() is get_default_config()

    def test_set_default(self, monkeypatch):
        monkeypatch.setattr(config_module, "_default_config", None)
        custom = BindingConfig(max_instructions=5)

        set_default_config(custom)

        assert get_default_config() is custom
