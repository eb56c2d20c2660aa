"""Configuration module for Heritage Risk."""

from heritage_risk.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
