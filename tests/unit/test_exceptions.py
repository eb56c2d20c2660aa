"""Tests for the exception hierarchy."""

import pytest

from heritage_risk.core.exceptions import (
    InsufficientDataError,
    InvalidAssessmentError,
    InvalidComponentError,
    InvalidMagnitudeError,
    NoDataError,
)
from heritage_risk.utils.exceptions import ConfigurationError, HeritageRiskError


class TestExceptionHierarchy:
    """Tests for exception relationships."""

    @pytest.mark.parametrize(
        "error",
        [
            InvalidAssessmentError("bad"),
            InvalidComponentError("probability", 7),
            InvalidMagnitudeError(20),
            InsufficientDataError("short", required=2, actual=1),
            NoDataError("empty"),
            ConfigurationError("bad config"),
        ],
    )
    def test_all_derive_from_base(self, error):
        """Test every error is a HeritageRiskError."""
        assert isinstance(error, HeritageRiskError)

    def test_no_data_is_insufficient_data(self):
        """Test no data can be caught as insufficient data but told apart."""
        error = NoDataError("empty", required=2)

        assert isinstance(error, InsufficientDataError)
        assert error.actual == 0
        assert error.required == 2

    def test_component_error_is_assessment_error(self):
        """Test component errors are assessment errors."""
        assert issubclass(InvalidComponentError, InvalidAssessmentError)

    def test_magnitude_error_is_assertion(self):
        """Test magnitude errors are assert-like."""
        assert issubclass(InvalidMagnitudeError, AssertionError)


class TestExceptionMessages:
    """Tests for exception string forms."""

    def test_assessment_error_with_field(self):
        """Test the field is included when given."""
        assert str(InvalidAssessmentError("unknown", field="threat_type")) == (
            "InvalidAssessmentError(threat_type): unknown"
        )
        assert str(InvalidAssessmentError("unknown")) == "InvalidAssessmentError: unknown"

    def test_component_error(self):
        """Test component errors name the component and value."""
        text = str(InvalidComponentError("loss_of_value", 0))

        assert "loss_of_value=0" in text
        assert "between 1 and 5" in text

    def test_magnitude_error(self):
        """Test magnitude errors include the magnitude."""
        assert "16" in str(InvalidMagnitudeError(16))

    def test_insufficient_data_counts(self):
        """Test insufficient data errors include counts."""
        text = str(InsufficientDataError("short", required=2, actual=1))

        assert "required=2" in text
        assert "actual=1" in text

    def test_no_data_message(self):
        """Test no data errors read distinctly."""
        assert str(NoDataError("nothing")) == "NoDataError: nothing"
