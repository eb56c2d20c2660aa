"""Core services and utilities for Heritage Risk."""

from .exceptions import (
    InsufficientDataError,
    InvalidAssessmentError,
    InvalidComponentError,
    InvalidMagnitudeError,
    NoDataError,
)
from .logging import LogContext, get_logger, setup_logging

__all__ = [
    # Exceptions
    "InsufficientDataError",
    "InvalidAssessmentError",
    "InvalidComponentError",
    "InvalidMagnitudeError",
    "NoDataError",
    # Logging
    "LogContext",
    "get_logger",
    "setup_logging",
]
