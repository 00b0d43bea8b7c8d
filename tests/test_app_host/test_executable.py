"""Tests for Godot executable resolution."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from src.app_host.exceptions import UnsupportedPlatformError
from src.app_host.executable import (
    GODOT_ENV_VAR,
    PLATFORM_DEFAULTS,
    get_godot_executable_path,
    resolve_executable,
)


class TestResolveExecutable:
    @pytest.mark.parametrize(
        "system, expected",
        [("Darwin", "godot"), ("Windows", "godot.exe"), ("Linux", "godot")],
    )
    def test_platform_defaults(self, system: str, expected: str) -> None:
        assert resolve_executable(None, system) == expected

    @pytest.mark.parametrize("system", ["Darwin", "Windows", "Linux", "FreeBSD", "Java"])
    def test_override_wins_on_every_platform(self, system: str) -> None:
        assert resolve_executable("/custom/Godot_v4", system) == "/custom/Godot_v4"

    def test_override_returned_verbatim(self) -> None:
        # No trimming, no existence check.
        assert resolve_executable(" ./does-not-exist ", "Linux") == " ./does-not-exist "

    @pytest.mark.parametrize("blank", ["", "   ", "\t\n"])
    def test_blank_override_falls_back(self, blank: str) -> None:
        assert resolve_executable(blank, "Windows") == "godot.exe"

    @pytest.mark.parametrize("override", [None, "", "  "])
    @pytest.mark.parametrize("system", ["FreeBSD", "AIX", ""])
    def test_unknown_platform_raises(self, override: str | None, system: str) -> None:
        with pytest.raises(UnsupportedPlatformError) as exc_info:
            resolve_executable(override, system)
        assert exc_info.value.system == system
        assert "not supported" in str(exc_info.value)

    @pytest.mark.parametrize("override", [None, "", "/bin/godot4"])
    @pytest.mark.parametrize("system", list(PLATFORM_DEFAULTS))
    def test_deterministic(self, override: str | None, system: str) -> None:
        results = {resolve_executable(override, system) for _ in range(5)}
        assert len(results) == 1
        assert results.pop()


class TestGetGodotExecutablePath:
    def test_reads_override_from_mapping(self) -> None:
        assert get_godot_executable_path({GODOT_ENV_VAR: "/x/godot"}, "Linux") == "/x/godot"

    def test_uses_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(GODOT_ENV_VAR, "/env/godot")
        assert get_godot_executable_path(system="Darwin") == "/env/godot"

    def test_uses_current_platform(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(GODOT_ENV_VAR, raising=False)
        with patch("src.app_host.executable.platform.system", return_value="Windows"):
            assert get_godot_executable_path() == "godot.exe"

    def test_unsupported_current_platform(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(GODOT_ENV_VAR, raising=False)
        with patch("src.app_host.executable.platform.system", return_value="Plan9"):
            with pytest.raises(UnsupportedPlatformError):
                get_godot_executable_path()
