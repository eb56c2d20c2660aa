"""Pytest fixtures for Heritage Risk tests."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest
import structlog

from heritage_risk.config.settings import Settings
from heritage_risk.risk.assessment import RiskAssessment
from heritage_risk.risk.types import ThreatType, UncertaintyLevel

BASE_DATE = datetime(2024, 1, 1, tzinfo=UTC)


# =============================================================================
# Structlog Configuration Fixture
# =============================================================================


@pytest.fixture(scope="function", autouse=True)
def reset_structlog_after_test():
    """Reset structlog configuration after each test.

    This ensures tests that modify structlog global state
    don't affect other tests.
    """
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Create settings for testing."""
    return Settings(ENVIRONMENT="test", log_level="DEBUG")


# =============================================================================
# Assessment Fixtures
# =============================================================================


AssessmentFactory = Callable[..., RiskAssessment]


@pytest.fixture
def make_assessment() -> AssessmentFactory:
    """Factory for assessments with sensible defaults.

    Components default to 2/2/2 (magnitude 6); ``magnitude`` spreads a
    target magnitude evenly over the three components instead. ``days``
    offsets the assessment date from 2024-01-01 UTC.
    """

    def _make(
        site_id: str = "site-001",
        threat_type: ThreatType | str = ThreatType.WEATHERING,
        probability: int = 2,
        loss_of_value: int = 2,
        fraction_affected: int = 2,
        uncertainty_level: UncertaintyLevel | str = UncertaintyLevel.LOW,
        days: float = 0,
        magnitude: int | None = None,
        **kwargs,
    ) -> RiskAssessment:
        if magnitude is not None:
            base, rest = divmod(magnitude, 3)
            probability = base + (1 if rest >= 1 else 0)
            loss_of_value = base + (1 if rest == 2 else 0)
            fraction_affected = base
        return RiskAssessment(
            site_id=site_id,
            threat_type=threat_type,
            probability=probability,
            loss_of_value=loss_of_value,
            fraction_affected=fraction_affected,
            uncertainty_level=uncertainty_level,
            assessment_date=BASE_DATE + timedelta(days=days),
            **kwargs,
        )

    return _make
