"""Utility modules for Heritage Risk."""

from heritage_risk.utils.exceptions import ConfigurationError, HeritageRiskError

__all__ = [
    "HeritageRiskError",
    "ConfigurationError",
]
