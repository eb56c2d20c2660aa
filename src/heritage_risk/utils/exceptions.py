"""Custom exceptions for Heritage Risk."""


class HeritageRiskError(Exception):
    """Base exception for all Heritage Risk errors."""

    pass


class ConfigurationError(HeritageRiskError):
    """Error in configuration or settings."""

    pass
