"""Comparative trend analysis across heritage sites.

Runs the trend analyzer per site, votes an overall trend and correlates
every pair of site series on a shared date grid. Sites without enough data
are excluded and logged rather than failing the comparison.
"""

from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from itertools import combinations
from typing import Any

import numpy as np
from pydantic import BaseModel, Field

from heritage_risk.config.settings import Settings, get_settings
from heritage_risk.core.exceptions import InsufficientDataError, NoDataError
from heritage_risk.core.logging import get_logger
from heritage_risk.risk.assessment import RiskAssessment
from heritage_risk.risk.time_series import (
    SeriesMetric,
    SiteNameResolver,
    TimeSeriesBuilder,
    TimeSeriesPoint,
    resolve_site_name,
)
from heritage_risk.risk.trends import MIN_TREND_POINTS, TrendAnalyzer, TrendDirection

logger = get_logger(__name__)

MIN_COMPARED_SITES = 2


# =============================================================================
# Data Models
# =============================================================================


@dataclass(frozen=True)
class SiteTrend:
    """Trend summary of one site in a comparison."""

    site_id: str
    site_name: str
    trend: TrendDirection
    trend_strength: float = 0.0
    change_rate: float = 0.0
    data_points: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "site_id": self.site_id,
            "site_name": self.site_name,
            "trend": self.trend.value,
            "trend_strength": self.trend_strength,
            "change_rate": self.change_rate,
            "data_points": self.data_points,
        }


@dataclass(frozen=True)
class SiteCorrelation:
    """Pearson correlation between two site series."""

    site_a: str
    site_a_name: str
    site_b: str
    site_b_name: str
    correlation: float
    aligned_points: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "site_a": self.site_a,
            "site_a_name": self.site_a_name,
            "site_b": self.site_b,
            "site_b_name": self.site_b_name,
            "correlation": self.correlation,
            "aligned_points": self.aligned_points,
        }


@dataclass(frozen=True)
class TimeRange:
    """Earliest and latest assessment date of the compared data."""

    start: datetime
    end: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass(frozen=True)
class ComparativeTrendAnalysis:
    """Result of comparing trends across sites."""

    metric: str
    time_range: TimeRange
    sites: tuple[SiteTrend, ...]
    overall_trend: TrendDirection
    correlations: tuple[SiteCorrelation, ...] = field(default_factory=tuple)
    excluded_sites: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "metric": self.metric,
            "time_range": self.time_range.to_dict(),
            "sites": [s.to_dict() for s in self.sites],
            "overall_trend": self.overall_trend.value,
            "correlations": [c.to_dict() for c in self.correlations],
            "excluded_sites": list(self.excluded_sites),
        }


# =============================================================================
# Configuration
# =============================================================================


class ComparativeAnalyzerConfig(BaseModel):
    """Configuration for comparative analyzer."""

    min_correlation_points: int = Field(
        default=3, ge=3, le=100, description="Aligned points required to report a correlation"
    )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ComparativeAnalyzerConfig":
        """Build a config from application settings."""
        settings = settings or get_settings()
        return cls(min_correlation_points=settings.min_correlation_points)


# =============================================================================
# Comparative Analyzer
# =============================================================================


class ComparativeAnalyzer:
    """Compares risk trends across several sites.

    Example:
        ```python
        analyzer = ComparativeAnalyzer()
        result = analyzer.compare(
            assessments,
            sites={"site-001": "Petra", "site-002": "Angkor Wat"},
        )
        print(result.overall_trend)
        for corr in result.correlations:
            print(corr.site_a_name, corr.site_b_name, corr.correlation)
        ```
    """

    def __init__(
        self,
        config: ComparativeAnalyzerConfig | None = None,
        trend_analyzer: TrendAnalyzer | None = None,
        builder: TimeSeriesBuilder | None = None,
    ) -> None:
        """Initialize analyzer.

        Args:
            config: Comparative analyzer configuration.
            trend_analyzer: Analyzer used per site.
            builder: Builder used to derive each site's series.
        """
        self.config = config or ComparativeAnalyzerConfig()
        self.trend_analyzer = trend_analyzer or TrendAnalyzer()
        self.builder = builder or TimeSeriesBuilder()

    def compare(
        self,
        assessments: Iterable[RiskAssessment],
        sites: Mapping[str, str] | Iterable[str],
        metric: SeriesMetric | str = SeriesMetric.AVG_MAGNITUDE,
        site_names: SiteNameResolver | None = None,
    ) -> ComparativeTrendAnalysis:
        """Compare trends of the given sites.

        Args:
            assessments: Assessments covering the sites.
            sites: Site ids to compare, or a mapping of site id to name.
            metric: Series metric to compare on.
            site_names: Name resolver used for ids not named in ``sites``.

        Returns:
            ComparativeTrendAnalysis over the sites with enough data.

        Raises:
            NoDataError: If no assessments are given.
            InsufficientDataError: If fewer than two sites have at least two
                points.
            TypeError: If ``sites`` is a single string.
        """
        snapshot = tuple(assessments)
        if not snapshot:
            raise NoDataError("No assessments to compare", required=MIN_COMPARED_SITES)

        metric = SeriesMetric(metric)
        names = self._site_names(sites, site_names)

        series_by_site: dict[str, tuple[TimeSeriesPoint, ...]] = {}
        site_trends: list[SiteTrend] = []
        excluded: list[str] = []

        for site_id, name in names.items():
            series = self.builder.build_series(snapshot, site_id, metric, site_name=name)
            if len(series) < MIN_TREND_POINTS:
                logger.info(
                    "Excluded site from comparison",
                    site_id=site_id,
                    points=len(series),
                    required=MIN_TREND_POINTS,
                )
                excluded.append(site_id)
                continue

            analysis = self.trend_analyzer.analyze(series, metric)
            series_by_site[site_id] = series
            site_trends.append(
                SiteTrend(
                    site_id=site_id,
                    site_name=name,
                    trend=analysis.trend,
                    trend_strength=analysis.trend_strength,
                    change_rate=analysis.change_rate,
                    data_points=len(series),
                )
            )

        if len(site_trends) < MIN_COMPARED_SITES:
            raise InsufficientDataError(
                "Comparison needs at least two sites with two or more data points",
                required=MIN_COMPARED_SITES,
                actual=len(site_trends),
            )

        correlations = self._correlate(site_trends, series_by_site)
        overall = _vote_overall_trend(st.trend for st in site_trends)

        dates = [a.assessment_date for a in snapshot if a.site_id in series_by_site]
        time_range = TimeRange(start=min(dates), end=max(dates))

        logger.info(
            "Compared site trends",
            metric=metric.value,
            sites=len(site_trends),
            excluded=len(excluded),
            correlations=len(correlations),
            overall_trend=overall.value,
        )

        return ComparativeTrendAnalysis(
            metric=metric.value,
            time_range=time_range,
            sites=tuple(site_trends),
            overall_trend=overall,
            correlations=correlations,
            excluded_sites=tuple(excluded),
        )

    def _site_names(
        self,
        sites: Mapping[str, str] | Iterable[str],
        resolver: SiteNameResolver | None,
    ) -> dict[str, str]:
        """Resolve display names, keeping input order and dropping duplicates."""
        if isinstance(sites, str):
            raise TypeError("sites must be a mapping or a collection of site ids, not a string")
        if isinstance(sites, Mapping):
            return {
                site_id: name or resolve_site_name(site_id, resolver)
                for site_id, name in sites.items()
            }
        return {site_id: resolve_site_name(site_id, resolver) for site_id in sites}

    def _correlate(
        self,
        site_trends: list[SiteTrend],
        series_by_site: dict[str, tuple[TimeSeriesPoint, ...]],
    ) -> tuple[SiteCorrelation, ...]:
        """Correlate every unordered pair of included sites."""
        correlations: list[SiteCorrelation] = []
        for first, second in combinations(site_trends, 2):
            a_values, b_values = align_series(
                series_by_site[first.site_id], series_by_site[second.site_id]
            )
            if len(a_values) < self.config.min_correlation_points:
                logger.debug(
                    "Skipped correlation",
                    site_a=first.site_id,
                    site_b=second.site_id,
                    aligned_points=len(a_values),
                )
                continue

            coefficient = pearson_correlation(a_values, b_values)
            if coefficient is None:
                logger.debug(
                    "Skipped correlation of constant series",
                    site_a=first.site_id,
                    site_b=second.site_id,
                )
                continue

            correlations.append(
                SiteCorrelation(
                    site_a=first.site_id,
                    site_a_name=first.site_name,
                    site_b=second.site_id,
                    site_b_name=second.site_name,
                    correlation=coefficient,
                    aligned_points=len(a_values),
                )
            )
        return tuple(correlations)


# =============================================================================
# Helpers
# =============================================================================


def align_series(
    first: tuple[TimeSeriesPoint, ...],
    second: tuple[TimeSeriesPoint, ...],
) -> tuple[list[float], list[float]]:
    """Align two ascending series on the union of their dates.

    Each series is forward-filled with its nearest prior sample, but only
    within its own first and last date. Dates where either series has no
    value are dropped.

    Returns:
        Two equally long value lists.
    """
    grid = sorted({p.date for p in first} | {p.date for p in second})
    a_filled = _forward_fill(first, grid)
    b_filled = _forward_fill(second, grid)

    a_values: list[float] = []
    b_values: list[float] = []
    for a, b in zip(a_filled, b_filled, strict=True):
        if a is not None and b is not None:
            a_values.append(a)
            b_values.append(b)
    return a_values, b_values


def _forward_fill(series: tuple[TimeSeriesPoint, ...], grid: list[datetime]) -> list[float | None]:
    start, end = series[0].date, series[-1].date
    filled: list[float | None] = []
    index = 0
    current: float | None = None
    for date in grid:
        while index < len(series) and series[index].date <= date:
            current = series[index].value
            index += 1
        filled.append(current if start <= date <= end else None)
    return filled


def pearson_correlation(a_values: list[float], b_values: list[float]) -> float | None:
    """Pearson coefficient of two equally long samples.

    Returns:
        Coefficient in [-1, 1], or None when either sample has zero variance.
    """
    a = np.asarray(a_values, dtype=float)
    b = np.asarray(b_values, dtype=float)
    if np.ptp(a) == 0.0 or np.ptp(b) == 0.0:
        return None
    coefficient = float(np.corrcoef(a, b)[0, 1])
    return max(-1.0, min(1.0, coefficient))


def _vote_overall_trend(trends: Iterable[TrendDirection]) -> TrendDirection:
    """Plurality vote; any tie for first place resolves to stable."""
    ranked = Counter(trends).most_common()
    if not ranked:
        return TrendDirection.STABLE
    if len(ranked) > 1 and ranked[0][1] == ranked[1][1]:
        return TrendDirection.STABLE
    return ranked[0][0]


# =============================================================================
# Factory Function
# =============================================================================


def create_comparative_analyzer(
    config: ComparativeAnalyzerConfig | None = None,
    trend_analyzer: TrendAnalyzer | None = None,
) -> ComparativeAnalyzer:
    """Create a comparative analyzer with optional configs.

    Args:
        config: Comparative analyzer configuration.
        trend_analyzer: Analyzer used per site.

    Returns:
        Configured ComparativeAnalyzer instance.
    """
    return ComparativeAnalyzer(config=config, trend_analyzer=trend_analyzer)
