"""Configuration validation for startup checks.

Field-level bounds are enforced by the Settings model itself. This module
checks combinations of settings that are individually valid but produce
meaningless analyses together.

Usage:
    from heritage_risk.config.validation import validate_or_raise

    validate_or_raise()
"""

from dataclasses import dataclass
from enum import Enum

from heritage_risk.config.settings import Settings, get_settings
from heritage_risk.core.logging import get_logger
from heritage_risk.utils.exceptions import ConfigurationError

logger = get_logger(__name__)


class ValidationSeverity(str, Enum):
    """Severity of configuration validation issues."""

    ERROR = "error"  # Must be fixed, analyses would be wrong
    WARNING = "warning"  # Analyses run but may be misleading


@dataclass
class ValidationResult:
    """Result of a configuration validation check."""

    field: str
    severity: ValidationSeverity
    message: str
    suggestion: str | None = None

    def __str__(self) -> str:
        prefix = "ERROR" if self.severity == ValidationSeverity.ERROR else "WARNING"
        result = f"[{prefix}] {self.field}: {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result


def validate_configuration(settings: Settings | None = None) -> list[ValidationResult]:
    """Validate application configuration.

    Args:
        settings: Settings to validate (default: global settings)

    Returns:
        List of validation results (empty if all checks pass)
    """
    if settings is None:
        settings = get_settings()

    results: list[ValidationResult] = []
    results.extend(_validate_trend(settings))
    results.extend(_validate_evolution(settings))
    results.extend(_validate_environment(settings))
    return results


def validate_or_raise(settings: Settings | None = None) -> None:
    """Validate configuration and raise if errors found.

    Args:
        settings: Settings to validate

    Raises:
        ConfigurationError: If any validation errors are found
    """
    results = validate_configuration(settings)
    errors = [r for r in results if r.severity == ValidationSeverity.ERROR]

    if errors:
        error_messages = "\n".join(str(e) for e in errors)
        raise ConfigurationError(f"Configuration validation failed:\n{error_messages}")

    for warning in (r for r in results if r.severity == ValidationSeverity.WARNING):
        logger.warning("configuration_warning", detail=str(warning))


# =============================================================================
# Validators
# =============================================================================


def _validate_trend(settings: Settings) -> list[ValidationResult]:
    """Validate trend analysis settings."""
    results: list[ValidationResult] = []

    if settings.trend_stable_ratio == 0.0:
        results.append(
            ValidationResult(
                field="trend_stable_ratio",
                severity=ValidationSeverity.WARNING,
                message="A zero stable band classifies any non-zero slope as a trend",
                suggestion="Use a ratio between 0.1 and 0.3",
            )
        )

    forecast_span = settings.forecast_horizon * settings.forecast_interval_days
    if forecast_span > 730:
        results.append(
            ValidationResult(
                field="forecast_horizon",
                severity=ValidationSeverity.WARNING,
                message=f"Forecast extends {forecast_span} days beyond the last observation",
                suggestion="Keep linear forecasts within two years",
            )
        )

    return results


def _validate_evolution(settings: Settings) -> list[ValidationResult]:
    """Validate threat evolution settings."""
    results: list[ValidationResult] = []

    if settings.critical_magnitude_threshold <= 3:
        results.append(
            ValidationResult(
                field="critical_magnitude_threshold",
                severity=ValidationSeverity.ERROR,
                message="Every assessment would fall inside a critical period",
                suggestion="Use a threshold of 7 (high) or above",
            )
        )
    elif settings.critical_magnitude_threshold < 7:
        results.append(
            ValidationResult(
                field="critical_magnitude_threshold",
                severity=ValidationSeverity.WARNING,
                message="Threshold is below the high priority band",
            )
        )

    if settings.evolution_margin == 0.0:
        results.append(
            ValidationResult(
                field="evolution_margin",
                severity=ValidationSeverity.WARNING,
                message="Any change in mean magnitude will be reported as escalating or improving",
            )
        )

    return results


def _validate_environment(settings: Settings) -> list[ValidationResult]:
    """Validate environment-specific settings."""
    results: list[ValidationResult] = []

    if settings.ENVIRONMENT == "production" and settings.log_level == "DEBUG":
        results.append(
            ValidationResult(
                field="log_level",
                severity=ValidationSeverity.WARNING,
                message="DEBUG logging in production logs every scored assessment",
                suggestion="Set HERITAGE_RISK_LOG_LEVEL=INFO",
            )
        )

    return results
