"""Tests for configuration management."""
from __future__ import annotations

import pytest

from src.shared.config import HostSettings, SharedConfig


class TestSharedConfig:
    def test_default_values(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        config = SharedConfig()
        assert config.log_level == "info"

    def test_env_override_log_level(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        config = SharedConfig()
        assert config.log_level == "debug"


class TestHostSettings:
    def test_default_values(self, settings: HostSettings):
        assert settings.build_command == "dotnet"
        assert settings.build_configuration == "Debug"
        assert settings.build_timeout is None
        assert settings.launch_mode_variable == "ASPNETCORE_ENVIRONMENT"
        assert settings.launch_mode == "Development"

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("APPHOST_BUILD_COMMAND", "/usr/bin/dotnet")
        monkeypatch.setenv("APPHOST_BUILD_CONFIGURATION", "Release")
        monkeypatch.setenv("APPHOST_BUILD_TIMEOUT", "120")
        monkeypatch.setenv("APPHOST_LAUNCH_MODE", "Staging")
        config = HostSettings()
        assert config.build_command == "/usr/bin/dotnet"
        assert config.build_configuration == "Release"
        assert config.build_timeout == 120.0
        assert config.launch_mode == "Staging"

    def test_populate_by_name(self, settings: HostSettings):
        config = HostSettings(build_configuration="Release")
        assert config.build_configuration == "Release"

    def test_inherits_shared_defaults(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        assert HostSettings().log_level == "info"
