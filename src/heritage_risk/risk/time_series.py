"""Time series construction from risk assessments.

Assessments are filtered to one site (and optionally one threat), grouped
into UTC day buckets and reduced to a single value per day. The resulting
points are strictly ascending in date.
"""

from collections import defaultdict
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from statistics import fmean
from typing import Any

from heritage_risk.core.logging import get_logger
from heritage_risk.risk.assessment import RiskAssessment
from heritage_risk.risk.types import ThreatType, day_bucket, to_utc

logger = get_logger(__name__)


# =============================================================================
# Enums
# =============================================================================


class SeriesMetric(str, Enum):
    """Per-day reduction applied to assessment magnitudes."""

    AVG_MAGNITUDE = "avg-magnitude"
    MAX_MAGNITUDE = "max-magnitude"


# =============================================================================
# Site Names
# =============================================================================


SiteNameResolver = Mapping[str, str] | Callable[[str], str | None]


def resolve_site_name(site_id: str, resolver: SiteNameResolver | None = None) -> str:
    """Look up a display name for a site.

    Args:
        site_id: Site identifier.
        resolver: Mapping of site id to name, or a callable returning the
            name (or None when unknown).

    Returns:
        The resolved name, or ``"Site <id>"`` when the site is unknown.
    """
    name: str | None = None
    if isinstance(resolver, Mapping):
        name = resolver.get(site_id)
    elif resolver is not None:
        name = resolver(site_id)
    return name or f"Site {site_id}"


# =============================================================================
# Data Models
# =============================================================================


@dataclass(frozen=True)
class TimeSeriesPoint:
    """One aggregated sample of a site's risk metric."""

    date: datetime
    value: float
    site_id: str
    site_name: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", to_utc(self.date))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "date": self.date.isoformat(),
            "value": self.value,
            "site_id": self.site_id,
            "site_name": self.site_name,
        }


_REDUCERS: dict[SeriesMetric, Callable[[list[int]], float]] = {
    SeriesMetric.AVG_MAGNITUDE: fmean,
    SeriesMetric.MAX_MAGNITUDE: lambda values: float(max(values)),
}


# =============================================================================
# Time Series Builder
# =============================================================================


class TimeSeriesBuilder:
    """Builds day-bucketed time series for a single site.

    Example:
        ```python
        builder = TimeSeriesBuilder()
        series = builder.build_series(assessments, "site-001", site_name="Petra")
        for point in series:
            print(point.date.date(), point.value)
        ```
    """

    def build_series(
        self,
        assessments: Iterable[RiskAssessment],
        site_id: str,
        metric: SeriesMetric | str = SeriesMetric.AVG_MAGNITUDE,
        threat_type: ThreatType | str | None = None,
        site_name: str | None = None,
    ) -> tuple[TimeSeriesPoint, ...]:
        """Build an ordered series for one site.

        Args:
            assessments: Assessments to draw from; other sites are ignored.
            site_id: Site to build the series for.
            metric: Per-day reduction (default mean magnitude).
            threat_type: Restrict to one threat when given.
            site_name: Display name stored on each point.

        Returns:
            Points in ascending date order, one per UTC day. Empty when no
            assessment matches; callers decide whether that is usable.
        """
        reducer = _REDUCERS[SeriesMetric(metric)]
        threat = ThreatType(threat_type) if threat_type is not None else None
        name = site_name or resolve_site_name(site_id)

        buckets: dict[datetime, list[int]] = defaultdict(list)
        for assessment in tuple(assessments):
            if assessment.site_id != site_id:
                continue
            if threat is not None and assessment.threat_type != threat:
                continue
            buckets[day_bucket(assessment.assessment_date)].append(assessment.magnitude)

        series = tuple(
            TimeSeriesPoint(
                date=date,
                value=reducer(buckets[date]),
                site_id=site_id,
                site_name=name,
            )
            for date in sorted(buckets)
        )

        logger.debug(
            "Built time series",
            site_id=site_id,
            metric=SeriesMetric(metric).value,
            threat_type=threat.value if threat else None,
            points=len(series),
        )

        return series


def create_time_series_builder() -> TimeSeriesBuilder:
    """Create a time series builder.

    Returns:
        TimeSeriesBuilder instance.
    """
    return TimeSeriesBuilder()
