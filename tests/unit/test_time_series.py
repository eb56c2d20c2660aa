"""Tests for time series construction."""

from datetime import UTC, datetime

import pytest

from heritage_risk.risk.time_series import (
    SeriesMetric,
    TimeSeriesBuilder,
    TimeSeriesPoint,
    create_time_series_builder,
    resolve_site_name,
)


@pytest.fixture
def builder() -> TimeSeriesBuilder:
    """Create a default builder."""
    return create_time_series_builder()


class TestResolveSiteName:
    """Tests for site name resolution."""

    def test_mapping(self):
        """Test names resolve from a mapping."""
        assert resolve_site_name("site-001", {"site-001": "Petra"}) == "Petra"

    def test_callable(self):
        """Test names resolve from a callable."""
        assert resolve_site_name("site-001", lambda site_id: site_id.upper()) == "SITE-001"

    def test_unknown_site(self):
        """Test unknown sites get a placeholder name."""
        assert resolve_site_name("site-404", {}) == "Site site-404"
        assert resolve_site_name("site-404", lambda _: None) == "Site site-404"
        assert resolve_site_name("site-404") == "Site site-404"


class TestBuildSeries:
    """Tests for TimeSeriesBuilder.build_series."""

    def test_empty_input_returns_empty(self, builder):
        """Test zero input yields an empty series rather than an error."""
        assert builder.build_series([], "site-001") == ()

    def test_filters_by_site(self, builder, make_assessment):
        """Test other sites are ignored."""
        assessments = [
            make_assessment(site_id="site-001", days=0),
            make_assessment(site_id="site-002", days=1),
        ]

        series = builder.build_series(assessments, "site-001")

        assert len(series) == 1
        assert series[0].site_id == "site-001"

    def test_mean_per_day(self, builder, make_assessment):
        """Test same-day assessments are averaged, never left as ties."""
        assessments = [
            make_assessment(magnitude=6, days=0),
            make_assessment(magnitude=9, days=0.5),
            make_assessment(magnitude=12, days=1),
        ]

        series = builder.build_series(assessments, "site-001")

        assert [p.value for p in series] == [7.5, 12.0]

    def test_max_per_day(self, builder, make_assessment):
        """Test the max-magnitude metric keeps the daily peak."""
        assessments = [
            make_assessment(magnitude=6, days=0),
            make_assessment(magnitude=9, days=0.25),
        ]

        series = builder.build_series(assessments, "site-001", metric="max-magnitude")

        assert [p.value for p in series] == [9.0]

    def test_ascending_unique_dates(self, builder, make_assessment):
        """Test output is ascending with no repeated dates."""
        assessments = [make_assessment(days=d) for d in (10, 2, 7, 2.5, 0, 10.9)]

        series = builder.build_series(assessments, "site-001")
        dates = [p.date for p in series]

        assert dates == sorted(dates)
        assert len(set(dates)) == len(dates) == 4

    def test_points_at_midnight_utc(self, builder, make_assessment):
        """Test points are stamped at the start of the UTC day."""
        series = builder.build_series([make_assessment(days=3.75)], "site-001")

        assert series[0].date == datetime(2024, 1, 4, tzinfo=UTC)

    def test_threat_filter(self, builder, make_assessment):
        """Test optional threat filtering."""
        assessments = [
            make_assessment(threat_type="flooding", magnitude=12, days=0),
            make_assessment(threat_type="looting", magnitude=3, days=0),
        ]

        series = builder.build_series(assessments, "site-001", threat_type="flooding")

        assert [p.value for p in series] == [12.0]

    def test_site_name(self, builder, make_assessment):
        """Test the supplied site name is carried on every point."""
        assessments = [make_assessment(days=d) for d in range(3)]

        named = builder.build_series(assessments, "site-001", site_name="Petra")
        unnamed = builder.build_series(assessments, "site-001")

        assert {p.site_name for p in named} == {"Petra"}
        assert {p.site_name for p in unnamed} == {"Site site-001"}

    def test_accepts_generator(self, builder, make_assessment):
        """Test single-pass iterables are supported."""
        series = builder.build_series(
            (make_assessment(days=d) for d in range(3)), "site-001"
        )

        assert len(series) == 3

    def test_point_to_dict(self):
        """Test point dictionary conversion."""
        point = TimeSeriesPoint(
            date=datetime(2024, 1, 1, tzinfo=UTC), value=6.0, site_id="s", site_name="S"
        )

        assert point.to_dict()["date"] == "2024-01-01T00:00:00+00:00"
        assert SeriesMetric("avg-magnitude") is SeriesMetric.AVG_MAGNITUDE

    def test_point_naive_date_is_utc(self):
        """Test a naive point date is stored as UTC."""
        point = TimeSeriesPoint(
            date=datetime(2024, 1, 1, 12), value=6.0, site_id="s", site_name="S"
        )

        assert point.date == datetime(2024, 1, 1, 12, tzinfo=UTC)
        assert point.date.tzinfo is UTC
