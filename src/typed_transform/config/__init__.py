"""Configuration management for the transformation engine."""

from typed_transform.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
