"""Shared configuration management using pydantic-settings."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class SharedConfig(BaseSettings):
    """Base configuration shared across all host components."""
    log_level: str = Field(default="info", validation_alias="LOG_LEVEL")

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }


class HostSettings(SharedConfig):
    """Settings for the application host and its Godot hooks."""
    build_command: str = Field(
        default="dotnet", validation_alias="APPHOST_BUILD_COMMAND"
    )
    build_configuration: str = Field(
        default="Debug", validation_alias="APPHOST_BUILD_CONFIGURATION"
    )
    build_timeout: float | None = Field(
        default=None, validation_alias="APPHOST_BUILD_TIMEOUT"
    )
    launch_mode_variable: str = Field(
        default="ASPNETCORE_ENVIRONMENT",
        validation_alias="APPHOST_LAUNCH_MODE_VARIABLE",
    )
    launch_mode: str = Field(
        default="Development", validation_alias="APPHOST_LAUNCH_MODE"
    )
