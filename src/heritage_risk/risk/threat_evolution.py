"""Threat evolution analysis for a single site and threat.

Builds the chronological timeline of one threat at one site, classifies
whether the threat is escalating or improving, and finds critical periods
where magnitude stays at or above a high-risk threshold.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from statistics import fmean
from typing import Any

from pydantic import BaseModel, Field

from heritage_risk.config.settings import Settings, get_settings
from heritage_risk.core.exceptions import NoDataError
from heritage_risk.core.logging import get_logger
from heritage_risk.risk.assessment import RiskAssessment
from heritage_risk.risk.formatting import format_threat_label
from heritage_risk.risk.time_series import SiteNameResolver, resolve_site_name
from heritage_risk.risk.types import Priority, ThreatType, UncertaintyLevel

logger = get_logger(__name__)


# =============================================================================
# Enums
# =============================================================================


class EvolutionPattern(str, Enum):
    """Direction a threat has moved over its timeline."""

    ESCALATING = "escalating"
    IMPROVING = "improving"
    STABLE = "stable"


# =============================================================================
# Data Models
# =============================================================================


@dataclass(frozen=True)
class TimelineEntry:
    """One assessment of the threat, in chronological order."""

    date: datetime
    magnitude: int
    priority: Priority
    uncertainty_level: UncertaintyLevel
    assessor: str = ""
    notes: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "date": self.date.isoformat(),
            "magnitude": self.magnitude,
            "priority": self.priority.value,
            "uncertainty_level": self.uncertainty_level.value,
            "assessor": self.assessor,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class CriticalPeriod:
    """Maximal run of timeline entries at or above the critical threshold."""

    start: datetime
    end: datetime
    reason: str
    peak_magnitude: int
    entries: int = 1

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "reason": self.reason,
            "peak_magnitude": self.peak_magnitude,
            "entries": self.entries,
        }


@dataclass(frozen=True)
class ThreatEvolution:
    """Timeline, evolution pattern and critical periods of one threat."""

    threat_type: ThreatType
    site_id: str
    site_name: str
    timeline: tuple[TimelineEntry, ...]
    evolution: EvolutionPattern
    critical_periods: tuple[CriticalPeriod, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "threat_type": self.threat_type.value,
            "site_id": self.site_id,
            "site_name": self.site_name,
            "timeline": [e.to_dict() for e in self.timeline],
            "evolution": self.evolution.value,
            "critical_periods": [p.to_dict() for p in self.critical_periods],
        }


# =============================================================================
# Configuration
# =============================================================================


class ThreatEvolutionConfig(BaseModel):
    """Configuration for threat evolution analyzer."""

    critical_magnitude_threshold: int = Field(
        default=9, ge=3, le=15, description="Magnitude at or above which an entry is critical"
    )
    evolution_margin: float = Field(
        default=1.0,
        ge=0.0,
        le=12.0,
        description="Mean magnitude difference needed to call a threat escalating or improving",
    )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ThreatEvolutionConfig":
        """Build a config from application settings."""
        settings = settings or get_settings()
        return cls(
            critical_magnitude_threshold=settings.critical_magnitude_threshold,
            evolution_margin=settings.evolution_margin,
        )


# =============================================================================
# Threat Evolution Analyzer
# =============================================================================


class ThreatEvolutionAnalyzer:
    """Tracks how one threat develops at one site.

    Example:
        ```python
        analyzer = ThreatEvolutionAnalyzer()
        evolution = analyzer.analyze(
            assessments, "site-001", threat_type="flooding", site_name="Venice"
        )
        print(evolution.evolution)
        for period in evolution.critical_periods:
            print(period.start.date(), period.end.date(), period.peak_magnitude)
        ```
    """

    def __init__(self, config: ThreatEvolutionConfig | None = None) -> None:
        """Initialize analyzer.

        Args:
            config: Threat evolution configuration.
        """
        self.config = config or ThreatEvolutionConfig()

    def analyze(
        self,
        assessments: Iterable[RiskAssessment],
        site_id: str,
        *,
        threat_type: ThreatType | str,
        site_name: str | None = None,
        site_names: SiteNameResolver | None = None,
    ) -> ThreatEvolution:
        """Analyze the evolution of a threat at a site.

        Args:
            assessments: Assessments to draw from.
            site_id: Site to analyze.
            threat_type: Threat to analyze.
            site_name: Display name of the site. Takes precedence over
                ``site_names``.
            site_names: Mapping or callable resolving the site's display name.

        Returns:
            ThreatEvolution with timeline, pattern and critical periods.

        Raises:
            NoDataError: If no assessment matches the site and threat.
        """
        threat = ThreatType(threat_type)
        matching = sorted(
            (a for a in tuple(assessments) if a.site_id == site_id and a.threat_type == threat),
            key=lambda a: a.assessment_date,
        )
        if not matching:
            raise NoDataError(f"No {threat.value} assessments for site {site_id}")

        timeline = tuple(
            TimelineEntry(
                date=a.assessment_date,
                magnitude=a.magnitude,
                priority=a.priority,
                uncertainty_level=a.uncertainty_level,
                assessor=a.assessor,
                notes=a.notes,
            )
            for a in matching
        )

        evolution = self._classify_evolution(timeline)
        periods = self._find_critical_periods(timeline, threat)

        logger.info(
            "Analyzed threat evolution",
            site_id=site_id,
            threat_type=threat.value,
            entries=len(timeline),
            evolution=evolution.value,
            critical_periods=len(periods),
        )

        return ThreatEvolution(
            threat_type=threat,
            site_id=site_id,
            site_name=site_name or resolve_site_name(site_id, site_names),
            timeline=timeline,
            evolution=evolution,
            critical_periods=periods,
        )

    def _classify_evolution(self, timeline: tuple[TimelineEntry, ...]) -> EvolutionPattern:
        """Compare the mean of the latest third with the earliest third."""
        if len(timeline) < 2:
            return EvolutionPattern.STABLE

        third = max(1, len(timeline) // 3)
        early = fmean(e.magnitude for e in timeline[:third])
        recent = fmean(e.magnitude for e in timeline[-third:])
        margin = self.config.evolution_margin

        if recent - early > margin:
            return EvolutionPattern.ESCALATING
        if early - recent > margin:
            return EvolutionPattern.IMPROVING
        return EvolutionPattern.STABLE

    def _find_critical_periods(
        self,
        timeline: tuple[TimelineEntry, ...],
        threat: ThreatType,
    ) -> tuple[CriticalPeriod, ...]:
        """Collect maximal runs at or above the critical threshold."""
        threshold = self.config.critical_magnitude_threshold
        label = format_threat_label(threat)
        periods: list[CriticalPeriod] = []
        run: list[TimelineEntry] = []

        def close_run(ongoing: bool) -> None:
            reason = (
                f"Ongoing high risk period for {label}"
                if ongoing
                else f"High risk period for {label}"
            )
            periods.append(
                CriticalPeriod(
                    start=run[0].date,
                    end=run[-1].date,
                    reason=reason,
                    peak_magnitude=max(e.magnitude for e in run),
                    entries=len(run),
                )
            )

        for entry in timeline:
            if entry.magnitude >= threshold:
                run.append(entry)
            elif run:
                close_run(ongoing=False)
                run = []

        if run:
            close_run(ongoing=True)

        return tuple(periods)


# =============================================================================
# Factory Function
# =============================================================================


def create_threat_evolution_analyzer(
    config: ThreatEvolutionConfig | None = None,
) -> ThreatEvolutionAnalyzer:
    """Create a threat evolution analyzer with optional config.

    Args:
        config: Threat evolution configuration.

    Returns:
        Configured ThreatEvolutionAnalyzer instance.
    """
    return ThreatEvolutionAnalyzer(config=config)
