"""Godot executable resolution.

The ``GODOT`` environment variable overrides everything; otherwise a
fixed per-platform default is used.  Resolution never touches the
filesystem, so the same (override, platform) pair always resolves to
the same value.
"""

from __future__ import annotations

import os
import platform
from collections.abc import Mapping

from src.app_host.exceptions import UnsupportedPlatformError

GODOT_ENV_VAR = "GODOT"

# platform.system() value -> executable name
PLATFORM_DEFAULTS: dict[str, str] = {
    "Darwin": "godot",
    "Windows": "godot.exe",
    "Linux": "godot",
}


def resolve_executable(override: str | None, system: str) -> str:
    """Resolve the Godot executable from an override and an OS family.

    Args:
        override: Value of the override variable, if any.  Returned
            verbatim when it is not blank.
        system: Operating system family as reported by
            :func:`platform.system`.

    Returns:
        The executable path or name to invoke.

    Raises:
        UnsupportedPlatformError: If there is no override and *system*
            is not a known platform.
    """
    if override is not None and override.strip():
        return override

    try:
        return PLATFORM_DEFAULTS[system]
    except KeyError:
        raise UnsupportedPlatformError(system) from None


def get_godot_executable_path(
    environ: Mapping[str, str] | None = None,
    system: str | None = None,
) -> str:
    """Resolve the Godot executable for the current process."""
    if environ is None:
        environ = os.environ
    if system is None:
        system = platform.system()
    return resolve_executable(environ.get(GODOT_ENV_VAR), system)
