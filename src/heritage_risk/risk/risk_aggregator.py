"""Site Risk Aggregator for combining assessments of a heritage site.

This module provides the SiteRiskAggregator that:
1. Derives a site's overall risk from its highest-priority assessment
2. Escalates overall risk when most assessments carry high uncertainty
3. Produces threat-specific recommendations with urgency prefixes
4. Summarises a site's risk profile (overall risk, active threats)
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from heritage_risk.config.settings import Settings, get_settings
from heritage_risk.core.logging import get_logger
from heritage_risk.risk.assessment import RiskAssessment
from heritage_risk.risk.risk_scorer import PolicyArg
from heritage_risk.risk.types import Priority, ThreatType, UncertaintyLevel, to_utc

logger = get_logger(__name__)


# =============================================================================
# Constants
# =============================================================================


THREAT_RECOMMENDATIONS: dict[ThreatType, tuple[str, str, str]] = {
    ThreatType.EARTHQUAKE: (
        "Conduct structural engineering assessment for seismic vulnerability",
        "Implement seismic retrofitting measures for critical structures",
        "Develop emergency response plan for seismic events",
    ),
    ThreatType.FLOODING: (
        "Install flood monitoring and early warning systems",
        "Improve drainage systems and water management infrastructure",
        "Develop flood emergency response and recovery procedures",
    ),
    ThreatType.WEATHERING: (
        "Implement regular conservation treatments for exposed surfaces",
        "Install protective shelters or coverings where appropriate",
        "Monitor environmental conditions and material deterioration rates",
    ),
    ThreatType.VEGETATION: (
        "Develop vegetation management plan balancing conservation and site protection",
        "Regular removal of invasive plant species",
        "Monitor root systems impact on structural elements",
    ),
    ThreatType.URBAN_DEVELOPMENT: (
        "Engage with local planning authorities to establish protective buffer zones",
        "Conduct environmental impact assessments for nearby developments",
        "Advocate for heritage-sensitive development policies",
    ),
    ThreatType.TOURISM_PRESSURE: (
        "Implement visitor management system with capacity limits",
        "Develop sustainable tourism infrastructure and pathways",
        "Create visitor education programs about heritage conservation",
    ),
    ThreatType.LOOTING: (
        "Enhance site security measures and surveillance systems",
        "Collaborate with law enforcement and customs authorities",
        "Implement community engagement programs for site protection",
    ),
    ThreatType.CONFLICT: (
        "Develop emergency protection protocols for heritage assets",
        "Coordinate with international heritage protection organizations",
        "Document and digitally preserve heritage information",
    ),
    ThreatType.CLIMATE_CHANGE: (
        "Develop climate adaptation strategies specific to heritage conservation",
        "Monitor changing environmental conditions and their impacts",
        "Implement resilient conservation techniques for changing climate",
    ),
}

URGENCY_PREFIXES: dict[Priority, str] = {
    Priority.EXTREMELY_HIGH: "URGENT",
    Priority.VERY_HIGH: "HIGH PRIORITY",
    Priority.HIGH: "PRIORITY",
}

# Lower magnitude bound of each follow-up action, evaluated high to low
MAGNITUDE_ACTIONS: tuple[tuple[int, str], ...] = (
    (12, "Activate emergency protection protocol for the site"),
    (9, "Schedule a detailed risk assessment within 30 days"),
    (6, "Review this threat at the next quarterly risk review"),
)

ROUTINE_MONITORING = "Continue routine monitoring and maintenance"
MAX_RECOMMENDATIONS = 5
ACTIVE_THREAT_YEARS = 2


# =============================================================================
# Data Models
# =============================================================================


@dataclass(frozen=True)
class SiteRiskProfile:
    """Risk summary of one site.

    Attributes:
        site_id: Site identifier.
        overall_risk: Aggregated priority of the site.
        last_updated: Date of the latest assessment, None without assessments.
        active_threats: Threats assessed within two years of the reference date.
        assessment_count: Number of assessments of the site.
        high_uncertainty_share: Share of assessments with high uncertainty.
    """

    site_id: str
    overall_risk: Priority
    last_updated: datetime | None = None
    active_threats: tuple[ThreatType, ...] = field(default_factory=tuple)
    assessment_count: int = 0
    high_uncertainty_share: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "site_id": self.site_id,
            "overall_risk": self.overall_risk.value,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
            "active_threats": [t.value for t in self.active_threats],
            "assessment_count": self.assessment_count,
            "high_uncertainty_share": self.high_uncertainty_share,
        }


# =============================================================================
# Configuration
# =============================================================================


class AggregatorConfig(BaseModel):
    """Configuration for site risk aggregator."""

    precautionary_uncertainty_ratio: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Share of high-uncertainty assessments above which risk is escalated",
    )
    max_recommendations: int = Field(
        default=MAX_RECOMMENDATIONS, ge=1, le=10, description="Recommendations returned"
    )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "AggregatorConfig":
        """Build a config from application settings."""
        settings = settings or get_settings()
        return cls(precautionary_uncertainty_ratio=settings.precautionary_uncertainty_ratio)


# =============================================================================
# Site Risk Aggregator
# =============================================================================


class SiteRiskAggregator:
    """Aggregates a site's assessments into an overall risk.

    The maximum priority governs, not the average. A precautionary step is
    added when most assessments are highly uncertain.

    Example:
        ```python
        aggregator = SiteRiskAggregator()
        overall = aggregator.overall_risk(site_assessments)
        worst = max(site_assessments, key=lambda a: a.magnitude)
        for line in aggregator.recommendations(overall, worst.threat_type, worst.magnitude):
            print(line)
        ```
    """

    def __init__(self, config: AggregatorConfig | None = None) -> None:
        """Initialize aggregator.

        Args:
            config: Aggregator configuration.
        """
        self.config = config or AggregatorConfig()

    def overall_risk(
        self,
        assessments: Iterable[RiskAssessment],
        policy: PolicyArg | None = None,
    ) -> Priority:
        """Overall risk of a set of assessments.

        Args:
            assessments: Assessments of one site.
            policy: Uncertainty policy applied per assessment before taking
                the maximum. Base priorities are used when omitted.

        Returns:
            The highest priority, escalated one step when more than the
            configured share of assessments has high uncertainty. ``low``
            for an empty input.
        """
        snapshot = tuple(assessments)
        if not snapshot:
            return Priority.LOW

        if policy is None:
            priorities = [a.priority for a in snapshot]
        else:
            priorities = [a.adjusted_priority(policy) for a in snapshot]

        highest = max(priorities, key=lambda p: p.weight)
        share = _high_uncertainty_share(snapshot)

        overall = highest
        if share > self.config.precautionary_uncertainty_ratio and highest.weight < 5:
            overall = highest.escalate(1)

        logger.debug(
            "Aggregated site risk",
            assessments=len(snapshot),
            highest=highest.value,
            overall=overall.value,
            high_uncertainty_share=share,
        )

        return overall

    def recommendations(
        self,
        priority: Priority | str,
        threat_type: ThreatType | str,
        magnitude: int,
    ) -> list[str]:
        """Recommended actions for a threat.

        Args:
            priority: Priority of the threat (base or adjusted).
            threat_type: Threat the guidance is for.
            magnitude: Magnitude of the assessment.

        Returns:
            Ordered actions, at most ``max_recommendations`` long. A single
            routine monitoring item when neither the priority nor the
            magnitude calls for action.
        """
        priority = Priority(priority)
        threat = ThreatType(threat_type)

        prefix = URGENCY_PREFIXES.get(priority)
        action = next((text for bound, text in MAGNITUDE_ACTIONS if magnitude >= bound), None)
        if prefix is None and action is None:
            return [ROUTINE_MONITORING]

        items = list(THREAT_RECOMMENDATIONS[threat])
        if prefix is not None:
            items[0] = f"{prefix}: {items[0]}"
        if action is not None:
            items.append(action)

        return items[: self.config.max_recommendations]

    def site_risk_profile(
        self,
        site_id: str,
        assessments: Iterable[RiskAssessment],
        as_of: datetime | None = None,
    ) -> SiteRiskProfile:
        """Summarise the risk of one site.

        Args:
            site_id: Site to profile; other sites' assessments are ignored.
            assessments: Assessments to draw from.
            as_of: Reference date for active threats (default: latest
                assessment of the site).

        Returns:
            SiteRiskProfile for the site.
        """
        site_assessments = sorted(
            (a for a in tuple(assessments) if a.site_id == site_id),
            key=lambda a: a.assessment_date,
        )
        if not site_assessments:
            return SiteRiskProfile(site_id=site_id, overall_risk=Priority.LOW)

        last_updated = site_assessments[-1].assessment_date
        reference = to_utc(as_of) if as_of is not None else last_updated
        cutoff = _years_before(reference, ACTIVE_THREAT_YEARS)

        active: list[ThreatType] = []
        for assessment in site_assessments:
            if assessment.assessment_date >= cutoff and assessment.threat_type not in active:
                active.append(assessment.threat_type)

        profile = SiteRiskProfile(
            site_id=site_id,
            overall_risk=self.overall_risk(site_assessments),
            last_updated=last_updated,
            active_threats=tuple(active),
            assessment_count=len(site_assessments),
            high_uncertainty_share=_high_uncertainty_share(site_assessments),
        )

        logger.info(
            "Profiled site risk",
            site_id=site_id,
            overall_risk=profile.overall_risk.value,
            active_threats=len(active),
        )

        return profile


def _high_uncertainty_share(assessments: Iterable[RiskAssessment]) -> float:
    items = tuple(assessments)
    if not items:
        return 0.0
    high = sum(1 for a in items if a.uncertainty_level == UncertaintyLevel.HIGH)
    return high / len(items)


def _years_before(value: datetime, years: int) -> datetime:
    try:
        return value.replace(year=value.year - years)
    except ValueError:
        # 29 February in a non-leap target year
        return value.replace(year=value.year - years, day=28)


# =============================================================================
# Factory Function
# =============================================================================


def create_site_risk_aggregator(config: AggregatorConfig | None = None) -> SiteRiskAggregator:
    """Create a site risk aggregator with optional config.

    Args:
        config: Aggregator configuration.

    Returns:
        Configured SiteRiskAggregator instance.
    """
    return SiteRiskAggregator(config=config)
