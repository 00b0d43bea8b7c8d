"""Distributed application host with Godot project orchestration."""

__version__ = "0.3.0"
