"""Custom exceptions for the application host."""

from __future__ import annotations


class AppHostError(Exception):
    """Base exception for all application host errors."""

    pass


class UnsupportedPlatformError(AppHostError):
    """Raised when no executable default exists for the current platform."""

    def __init__(self, system: str) -> None:
        self.system = system
        super().__init__(
            f"Current platform '{system}' is not supported for Godot execution."
        )


class ConfigurationError(AppHostError):
    """Raised for invalid composition files or settings."""

    pass


class DuplicateResourceError(AppHostError):
    """Raised when a resource name is registered twice in one model."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Resource '{name}' is already registered")


class ResourceNotFoundError(AppHostError):
    """Raised when a resource lookup by name fails."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Resource '{name}' not found")


class BuildFailure(AppHostError):
    """Raised inside a hook when the build phase does not succeed."""

    def __init__(self, resource: str, exit_code: int, stderr: str = "") -> None:
        self.resource = resource
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(
            f"Build failed for resource '{resource}' (exit code {exit_code})"
        )


class LaunchFault(AppHostError):
    """Raised when the engine process cannot be started."""

    def __init__(self, resource: str, executable: str, reason: str = "") -> None:
        self.resource = resource
        self.executable = executable
        self.reason = reason
        super().__init__(
            f"Failed to launch '{executable}' for resource '{resource}': {reason}"
        )


class OperationCancelledError(AppHostError):
    """Raised when an awaited process wait is cancelled."""

    pass


class ProcessTimeoutError(AppHostError):
    """Raised when an awaited process exceeds its timeout."""

    def __init__(self, command: str, timeout: float) -> None:
        self.command = command
        self.timeout = timeout
        super().__init__(f"Process '{command}' timed out after {timeout}s")
