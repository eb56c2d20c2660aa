"""Risk Trend Analysis for heritage site time series.

This module fits a least-squares line to a site's risk series and derives:
- Trend direction from the per-day slope, with a stable band that scales
  with the spread of the values around the fitted line
- Signed trend strength normalised by the average value
- Change rate between the fitted first and last values
- A short forecast extrapolated from the fitted line
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

import numpy as np
from pydantic import BaseModel, Field

from heritage_risk.config.settings import Settings, get_settings
from heritage_risk.core.exceptions import InsufficientDataError, NoDataError
from heritage_risk.core.logging import get_logger
from heritage_risk.risk.risk_scorer import MAX_MAGNITUDE, MIN_MAGNITUDE
from heritage_risk.risk.time_series import SeriesMetric, TimeSeriesPoint

logger = get_logger(__name__)

MIN_TREND_POINTS = 2
SECONDS_PER_DAY = 86400.0


# =============================================================================
# Enums
# =============================================================================


class TrendDirection(str, Enum):
    """Direction of a fitted risk trend."""

    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


# =============================================================================
# Data Models
# =============================================================================


@dataclass(frozen=True)
class TrendAnalysis:
    """Linear trend analysis of one site's series.

    Attributes:
        metric: Label of the analysed metric.
        site_id: Site the series belongs to.
        site_name: Display name of the site.
        data_points: Observed points, ascending by date.
        trend: Direction of the fitted line.
        trend_strength: Fitted change over the span divided by max(1, average).
            Signed; presentation shows ``abs(trend_strength) * 100`` as a percentage.
        average_value: Mean of the observed values.
        change_rate: Percentage change between fitted first and last values.
        forecast: Extrapolated points after the last observation.
        slope: Fitted change per day.
        intercept: Fitted value at the first observation.
    """

    metric: str
    site_id: str
    site_name: str
    data_points: tuple[TimeSeriesPoint, ...]
    trend: TrendDirection
    trend_strength: float
    average_value: float
    change_rate: float
    forecast: tuple[TimeSeriesPoint, ...] = field(default_factory=tuple)
    slope: float = 0.0
    intercept: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "metric": self.metric,
            "site_id": self.site_id,
            "site_name": self.site_name,
            "data_points": [p.to_dict() for p in self.data_points],
            "trend": self.trend.value,
            "trend_strength": self.trend_strength,
            "average_value": self.average_value,
            "change_rate": self.change_rate,
            "forecast": [p.to_dict() for p in self.forecast],
            "slope": self.slope,
            "intercept": self.intercept,
        }


# =============================================================================
# Configuration
# =============================================================================


class TrendAnalyzerConfig(BaseModel):
    """Configuration for trend analyzer."""

    # Classification
    stable_ratio: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description=(
            "Projected change over the forecast window, as a share of "
            "max(residual range, 1), treated as stable"
        ),
    )

    # Forecast
    forecast_horizon: int = Field(
        default=3, ge=1, le=24, description="Number of forecast points"
    )
    forecast_interval_days: int = Field(
        default=30, ge=1, le=366, description="Days between forecast points"
    )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "TrendAnalyzerConfig":
        """Build a config from application settings."""
        settings = settings or get_settings()
        return cls(
            stable_ratio=settings.trend_stable_ratio,
            forecast_horizon=settings.forecast_horizon,
            forecast_interval_days=settings.forecast_interval_days,
        )


# =============================================================================
# Trend Analyzer
# =============================================================================


class TrendAnalyzer:
    """Fits and classifies linear trends in risk series.

    Example:
        ```python
        builder = TimeSeriesBuilder()
        analyzer = TrendAnalyzer()

        series = builder.build_series(assessments, "site-001", site_name="Petra")
        analysis = analyzer.analyze(series)
        print(analysis.trend, analysis.change_rate)
        for point in analysis.forecast:
            print(point.date.date(), point.value)
        ```
    """

    def __init__(self, config: TrendAnalyzerConfig | None = None) -> None:
        """Initialize analyzer.

        Args:
            config: Trend analyzer configuration.
        """
        self.config = config or TrendAnalyzerConfig()

    def analyze(
        self,
        series: Sequence[TimeSeriesPoint],
        metric: SeriesMetric | str = SeriesMetric.AVG_MAGNITUDE,
    ) -> TrendAnalysis:
        """Analyze the trend of a single site's series.

        Args:
            series: Points for one site. Sorted by date before fitting.
            metric: Label recorded on the result.

        Returns:
            TrendAnalysis with direction, strength, change rate and forecast.

        Raises:
            NoDataError: If the series is empty.
            InsufficientDataError: If fewer than two points are given, or all
                points share the same date.
        """
        points = tuple(sorted(series, key=lambda p: p.date))
        if not points:
            raise NoDataError("Cannot analyze trend of an empty series", required=MIN_TREND_POINTS)
        if len(points) < MIN_TREND_POINTS:
            raise InsufficientDataError(
                "Trend analysis needs at least two points",
                required=MIN_TREND_POINTS,
                actual=len(points),
            )

        first_date = points[0].date
        x = np.array([_days_between(first_date, p.date) for p in points], dtype=float)
        y = np.array([p.value for p in points], dtype=float)
        span_days = float(x[-1])
        if span_days <= 0.0:
            raise InsufficientDataError(
                "Trend analysis needs points on at least two distinct dates",
                required=MIN_TREND_POINTS,
                actual=1,
            )

        slope, intercept = (float(v) for v in np.polyfit(x, y, 1))
        average = float(np.mean(y))
        fitted_first = intercept
        fitted_last = slope * span_days + intercept
        fitted_change = fitted_last - fitted_first

        residuals = y - (slope * x + intercept)
        trend = self._classify(slope, float(np.ptp(residuals)))
        strength = fitted_change / max(1.0, average)

        if fitted_first == 0.0:
            change_rate = float(y[-1] - y[0])
        else:
            change_rate = fitted_change / fitted_first * 100.0

        forecast = self._forecast(points, slope, intercept, span_days)
        metric_label = metric.value if isinstance(metric, SeriesMetric) else str(metric)

        logger.info(
            "Analyzed risk trend",
            site_id=points[0].site_id,
            metric=metric_label,
            points=len(points),
            trend=trend.value,
            change_rate=change_rate,
        )

        return TrendAnalysis(
            metric=metric_label,
            site_id=points[0].site_id,
            site_name=points[0].site_name,
            data_points=points,
            trend=trend,
            trend_strength=strength,
            average_value=average,
            change_rate=change_rate,
            forecast=forecast,
            slope=slope,
            intercept=intercept,
        )

    def _classify(self, slope: float, residual_range: float) -> TrendDirection:
        """Classify the per-day slope against a band scaled by the residual spread.

        The slope is projected over the forecast window rather than the
        observed span, so the result does not depend on how long the series
        is. Points lying on the fitted line, such as the analyzer's own
        forecast, change neither the slope nor the residual range.
        """
        window_days = self.config.forecast_horizon * self.config.forecast_interval_days
        projected = slope * window_days
        epsilon = self.config.stable_ratio * max(residual_range, 1.0)
        if projected > epsilon:
            return TrendDirection.INCREASING
        if projected < -epsilon:
            return TrendDirection.DECREASING
        return TrendDirection.STABLE

    def _forecast(
        self,
        points: tuple[TimeSeriesPoint, ...],
        slope: float,
        intercept: float,
        span_days: float,
    ) -> tuple[TimeSeriesPoint, ...]:
        """Extrapolate the fitted line past the last point, clamped to [3, 15]."""
        last = points[-1]
        interval = self.config.forecast_interval_days
        forecast: list[TimeSeriesPoint] = []
        for step in range(1, self.config.forecast_horizon + 1):
            offset = step * interval
            value = slope * (span_days + offset) + intercept
            forecast.append(
                TimeSeriesPoint(
                    date=last.date + timedelta(days=offset),
                    value=min(float(MAX_MAGNITUDE), max(float(MIN_MAGNITUDE), value)),
                    site_id=last.site_id,
                    site_name=last.site_name,
                )
            )
        return tuple(forecast)


def _days_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / SECONDS_PER_DAY


# =============================================================================
# Factory Function
# =============================================================================


def create_trend_analyzer(config: TrendAnalyzerConfig | None = None) -> TrendAnalyzer:
    """Create a trend analyzer with optional config.

    Args:
        config: Trend analyzer configuration.

    Returns:
        Configured TrendAnalyzer instance.
    """
    return TrendAnalyzer(config=config)
