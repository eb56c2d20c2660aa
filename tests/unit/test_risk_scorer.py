"""Tests for the ABC-scale Risk Scorer.

Tests cover:
- Magnitude calculation and component validation
- Priority banding over the full magnitude range
- Uncertainty policies (single step and matrix)
- Descriptions and the memoised calculate_risk
"""

import pytest

from heritage_risk.core.exceptions import (
    InvalidAssessmentError,
    InvalidComponentError,
    InvalidMagnitudeError,
)
from heritage_risk.risk.risk_scorer import (
    RiskCalculation,
    RiskScorer,
    SingleStepPolicy,
    UncertaintyMatrixPolicy,
    UncertaintyPolicy,
    UncertaintyPolicyName,
    create_risk_scorer,
    get_uncertainty_policy,
)
from heritage_risk.risk.types import Priority, UncertaintyLevel


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def scorer() -> RiskScorer:
    """Create a default scorer."""
    return create_risk_scorer()


# =============================================================================
# Magnitude Tests
# =============================================================================


class TestCalculateMagnitude:
    """Tests for magnitude calculation."""

    def test_sum_for_all_valid_components(self, scorer):
        """Test magnitude is A + B + C over the whole valid grid."""
        for a in range(1, 6):
            for b in range(1, 6):
                for c in range(1, 6):
                    magnitude = scorer.calculate_magnitude(a, b, c)
                    assert magnitude == a + b + c
                    assert 3 <= magnitude <= 15

    @pytest.mark.parametrize(
        "components,bad_field",
        [
            ((0, 3, 3), "probability"),
            ((3, 6, 3), "loss_of_value"),
            ((3, 3, -1), "fraction_affected"),
        ],
    )
    def test_out_of_range_component(self, scorer, components, bad_field):
        """Test out-of-range components are rejected, never clamped."""
        with pytest.raises(InvalidComponentError) as exc_info:
            scorer.calculate_magnitude(*components)

        assert exc_info.value.component == bad_field
        assert exc_info.value.field == bad_field

    @pytest.mark.parametrize("value", [2.5, "3", None, True])
    def test_non_integer_component(self, scorer, value):
        """Test non-integer components are rejected."""
        with pytest.raises(InvalidComponentError):
            scorer.calculate_magnitude(value, 3, 3)

    def test_component_error_is_assessment_error(self, scorer):
        """Test component errors belong to the assessment error family."""
        with pytest.raises(InvalidAssessmentError):
            scorer.calculate_magnitude(9, 1, 1)


# =============================================================================
# Priority Tests
# =============================================================================


class TestCategorizePriority:
    """Tests for priority banding."""

    @pytest.mark.parametrize(
        "magnitude,expected",
        [
            (3, Priority.LOW),
            (4, Priority.MEDIUM_HIGH),
            (6, Priority.MEDIUM_HIGH),
            (7, Priority.HIGH),
            (9, Priority.HIGH),
            (10, Priority.VERY_HIGH),
            (12, Priority.VERY_HIGH),
            (13, Priority.EXTREMELY_HIGH),
            (15, Priority.EXTREMELY_HIGH),
        ],
    )
    def test_band_boundaries(self, scorer, magnitude, expected):
        """Test band lower bounds are inclusive."""
        assert scorer.categorize_priority(magnitude) == expected

    def test_bands_partition_range(self, scorer):
        """Test every magnitude maps to exactly one band, monotonically."""
        weights = [scorer.categorize_priority(m).weight for m in range(3, 16)]
        assert weights == sorted(weights)
        assert set(weights) == {1, 2, 3, 4, 5}

    @pytest.mark.parametrize("magnitude", [2, 16, 0, -3])
    def test_out_of_range_magnitude(self, scorer, magnitude):
        """Test out-of-range magnitudes signal a logic error."""
        with pytest.raises(InvalidMagnitudeError) as exc_info:
            scorer.categorize_priority(magnitude)

        assert exc_info.value.magnitude == magnitude

    def test_magnitude_error_is_assertion(self, scorer):
        """Test magnitude errors are assert-like."""
        with pytest.raises(AssertionError):
            scorer.categorize_priority(99)


# =============================================================================
# Uncertainty Tests
# =============================================================================


class TestUncertaintyPolicies:
    """Tests for uncertainty adjustment strategies."""

    def test_policies_satisfy_protocol(self):
        """Test both policies implement the protocol."""
        assert isinstance(SingleStepPolicy(), UncertaintyPolicy)
        assert isinstance(UncertaintyMatrixPolicy(), UncertaintyPolicy)

    @pytest.mark.parametrize(
        "policy,expected",
        [
            ("single-step", SingleStepPolicy),
            (UncertaintyPolicyName.MATRIX, UncertaintyMatrixPolicy),
        ],
    )
    def test_resolve_by_name(self, policy, expected):
        """Test policies resolve from names."""
        assert isinstance(get_uncertainty_policy(policy), expected)

    def test_resolve_instance_passthrough(self):
        """Test an instance is returned unchanged."""
        policy = UncertaintyMatrixPolicy()
        assert get_uncertainty_policy(policy) is policy

    def test_unknown_policy(self):
        """Test unknown policy names are rejected."""
        with pytest.raises(ValueError, match="Unknown uncertainty policy"):
            get_uncertainty_policy("optimistic")

    def test_single_step_only_on_high(self, scorer):
        """Test single-step uplift applies to high uncertainty only."""
        assert scorer.adjust_for_uncertainty(Priority.HIGH, "low", "single-step") == Priority.HIGH
        assert (
            scorer.adjust_for_uncertainty(Priority.HIGH, "medium", "single-step") == Priority.HIGH
        )
        assert (
            scorer.adjust_for_uncertainty(Priority.HIGH, "high", "single-step")
            == Priority.VERY_HIGH
        )

    def test_matrix_uplifts_medium_and_high(self, scorer):
        """Test the matrix uplifts one band for medium, two for high."""
        assert (
            scorer.adjust_for_uncertainty(Priority.LOW, UncertaintyLevel.MEDIUM, "matrix")
            == Priority.MEDIUM_HIGH
        )
        assert (
            scorer.adjust_for_uncertainty(Priority.LOW, UncertaintyLevel.HIGH, "matrix")
            == Priority.HIGH
        )
        assert (
            scorer.adjust_for_uncertainty(Priority.VERY_HIGH, UncertaintyLevel.HIGH, "matrix")
            == Priority.EXTREMELY_HIGH
        )

    @pytest.mark.parametrize("policy", ["single-step", "matrix"])
    def test_never_decreases_or_exceeds_top(self, scorer, policy):
        """Test adjustment is monotone and capped for every combination."""
        for priority in Priority:
            for uncertainty in UncertaintyLevel:
                adjusted = scorer.adjust_for_uncertainty(priority, uncertainty, policy)
                assert adjusted.weight >= priority.weight
                assert adjusted.weight <= Priority.EXTREMELY_HIGH.weight

    def test_custom_policy_cannot_decrease(self, scorer):
        """Test a misbehaving custom policy is held to no-decrease."""

        class Downgrade:
            @property
            def name(self) -> UncertaintyPolicyName:
                return UncertaintyPolicyName.SINGLE_STEP

            def adjust(self, priority, uncertainty):
                return Priority.LOW

        assert (
            scorer.adjust_for_uncertainty(Priority.VERY_HIGH, "high", Downgrade())
            == Priority.VERY_HIGH
        )

    def test_unknown_uncertainty(self, scorer):
        """Test unknown uncertainty labels are rejected."""
        with pytest.raises(InvalidAssessmentError) as exc_info:
            scorer.adjust_for_uncertainty(Priority.HIGH, "extreme", "matrix")

        assert exc_info.value.field == "uncertainty_level"


# =============================================================================
# Description Tests
# =============================================================================


class TestDescriptions:
    """Tests for weights and guidance text."""

    def test_priority_weights(self, scorer):
        """Test ordinal weights run from 1 to 5."""
        assert scorer.priority_weight(Priority.LOW) == 1
        assert scorer.priority_weight(Priority.EXTREMELY_HIGH) == 5
        assert scorer.priority_weight("high") == 3

    def test_priority_description(self, scorer):
        """Test each priority has guidance."""
        for priority in Priority:
            assert scorer.priority_description(priority)
        assert "routine monitoring" in scorer.priority_description(Priority.LOW)

    def test_component_description(self, scorer):
        """Test component guidance lookups."""
        assert "100 years" in scorer.component_description("A", 3)
        assert scorer.component_description("B", 5) == "Complete loss of heritage value"
        assert scorer.component_description("C", 6) == "Invalid value"
        assert scorer.component_description("D", 1) == "Invalid value"


# =============================================================================
# Calculate Risk Tests
# =============================================================================


class TestCalculateRisk:
    """Tests for the complete risk calculation."""

    def test_full_calculation(self, scorer):
        """Test magnitude, base and adjusted priority together."""
        calc = scorer.calculate_risk(4, 5, 3, "high", policy="matrix")

        assert isinstance(calc, RiskCalculation)
        assert calc.magnitude == 12
        assert calc.base_priority == Priority.VERY_HIGH
        assert calc.adjusted_priority == Priority.EXTREMELY_HIGH
        assert calc.weight == 5
        assert calc.policy == UncertaintyPolicyName.MATRIX

    def test_memoised_result(self, scorer):
        """Test identical arguments return the identical cached result."""
        first = scorer.calculate_risk(2, 3, 4, "medium", policy="single-step")
        second = scorer.calculate_risk(2, 3, 4, UncertaintyLevel.MEDIUM, policy="single-step")

        assert first is second

    def test_validates_before_cache(self, scorer):
        """Test invalid components raise rather than being cached."""
        with pytest.raises(InvalidComponentError):
            scorer.calculate_risk(6, 1, 1, "low", policy="matrix")

    def test_to_dict(self, scorer):
        """Test dictionary conversion uses enum values."""
        data = scorer.calculate_risk(1, 1, 1, "low", policy="single-step").to_dict()

        assert data["magnitude"] == 3
        assert data["base_priority"] == "low"
        assert data["adjusted_priority"] == "low"
        assert data["policy"] == "single-step"
