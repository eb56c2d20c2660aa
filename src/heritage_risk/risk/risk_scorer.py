"""Risk Scorer for the ABC-scale heritage risk methodology.

This module provides the RiskScorer that:
1. Calculates risk magnitude (A + B + C, range 3-15) from validated components
2. Maps magnitude onto the five priority bands
3. Adjusts priority for assessment uncertainty under an explicit policy
4. Provides priority weights, descriptions and component guidance

Two uncertainty policies exist and neither is the default: callers must
choose one. ``SingleStepPolicy`` raises priority one band for high
uncertainty only. ``UncertaintyMatrixPolicy`` raises it one band for
medium uncertainty and two bands for high uncertainty.
"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Literal, Protocol, runtime_checkable

from heritage_risk.core.exceptions import (
    InvalidAssessmentError,
    InvalidComponentError,
    InvalidMagnitudeError,
)
from heritage_risk.core.logging import get_logger
from heritage_risk.risk.types import Priority, UncertaintyLevel

logger = get_logger(__name__)


# =============================================================================
# Constants
# =============================================================================


MIN_COMPONENT = 1
MAX_COMPONENT = 5
MIN_MAGNITUDE = 3
MAX_MAGNITUDE = 15

# Lower bound of each band, evaluated high to low
PRIORITY_THRESHOLDS: tuple[tuple[int, Priority], ...] = (
    (13, Priority.EXTREMELY_HIGH),
    (10, Priority.VERY_HIGH),
    (7, Priority.HIGH),
    (4, Priority.MEDIUM_HIGH),
)

PRIORITY_DESCRIPTIONS: dict[Priority, str] = {
    Priority.EXTREMELY_HIGH: "Immediate action required - critical threat to heritage value",
    Priority.VERY_HIGH: "Urgent action needed - significant threat requiring prompt response",
    Priority.HIGH: "Action required - notable threat that should be addressed soon",
    Priority.MEDIUM_HIGH: "Moderate concern - should be monitored and planned for",
    Priority.LOW: "Low priority - routine monitoring sufficient",
}

Component = Literal["A", "B", "C"]

COMPONENT_DESCRIPTIONS: dict[str, dict[int, str]] = {
    "A": {  # Probability
        1: "Very unlikely to occur in the next 100 years",
        2: "Unlikely to occur in the next 100 years",
        3: "Possible to occur in the next 100 years",
        4: "Likely to occur in the next 100 years",
        5: "Very likely or certain to occur in the next 100 years",
    },
    "B": {  # Loss of value
        1: "Negligible loss of heritage value",
        2: "Minor loss of heritage value",
        3: "Moderate loss of heritage value",
        4: "Major loss of heritage value",
        5: "Complete loss of heritage value",
    },
    "C": {  # Fraction affected
        1: "Less than 1% of the site affected",
        2: "1-10% of the site affected",
        3: "10-50% of the site affected",
        4: "50-90% of the site affected",
        5: "More than 90% of the site affected",
    },
}


# =============================================================================
# Uncertainty Policies
# =============================================================================


class UncertaintyPolicyName(str, Enum):
    """Named uncertainty adjustment strategies."""

    SINGLE_STEP = "single-step"
    MATRIX = "matrix"


@runtime_checkable
class UncertaintyPolicy(Protocol):
    """Strategy that escalates a priority according to uncertainty.

    Implementations must never lower a priority and never go past
    extremely high.
    """

    @property
    def name(self) -> UncertaintyPolicyName:
        """Identifier of the policy."""
        ...

    def adjust(self, priority: Priority, uncertainty: UncertaintyLevel) -> Priority:
        """Return the adjusted priority."""
        ...


@dataclass(frozen=True)
class SingleStepPolicy:
    """One band up for high uncertainty, unchanged otherwise."""

    @property
    def name(self) -> UncertaintyPolicyName:
        return UncertaintyPolicyName.SINGLE_STEP

    def adjust(self, priority: Priority, uncertainty: UncertaintyLevel) -> Priority:
        if uncertainty == UncertaintyLevel.HIGH:
            return priority.escalate(1)
        return priority


# Matrix of (uncertainty -> base priority -> adjusted priority)
UNCERTAINTY_MATRIX: dict[UncertaintyLevel, dict[Priority, Priority]] = {
    UncertaintyLevel.LOW: {p: p for p in Priority},
    UncertaintyLevel.MEDIUM: {
        Priority.EXTREMELY_HIGH: Priority.EXTREMELY_HIGH,
        Priority.VERY_HIGH: Priority.EXTREMELY_HIGH,
        Priority.HIGH: Priority.VERY_HIGH,
        Priority.MEDIUM_HIGH: Priority.HIGH,
        Priority.LOW: Priority.MEDIUM_HIGH,
    },
    UncertaintyLevel.HIGH: {
        Priority.EXTREMELY_HIGH: Priority.EXTREMELY_HIGH,
        Priority.VERY_HIGH: Priority.EXTREMELY_HIGH,
        Priority.HIGH: Priority.EXTREMELY_HIGH,
        Priority.MEDIUM_HIGH: Priority.VERY_HIGH,
        Priority.LOW: Priority.HIGH,
    },
}


@dataclass(frozen=True)
class UncertaintyMatrixPolicy:
    """Full uncertainty matrix: medium raises one band, high raises two."""

    @property
    def name(self) -> UncertaintyPolicyName:
        return UncertaintyPolicyName.MATRIX

    def adjust(self, priority: Priority, uncertainty: UncertaintyLevel) -> Priority:
        return UNCERTAINTY_MATRIX[uncertainty][priority]


_POLICIES: dict[UncertaintyPolicyName, UncertaintyPolicy] = {
    UncertaintyPolicyName.SINGLE_STEP: SingleStepPolicy(),
    UncertaintyPolicyName.MATRIX: UncertaintyMatrixPolicy(),
}

PolicyArg = UncertaintyPolicy | UncertaintyPolicyName | str


def get_uncertainty_policy(policy: PolicyArg) -> UncertaintyPolicy:
    """Resolve a policy instance or name to a policy.

    Args:
        policy: Policy instance, UncertaintyPolicyName, or its string value.

    Returns:
        The matching UncertaintyPolicy.

    Raises:
        ValueError: If the name is not a known policy.
    """
    if isinstance(policy, UncertaintyPolicy):
        return policy
    try:
        return _POLICIES[UncertaintyPolicyName(policy)]
    except ValueError:
        known = ", ".join(p.value for p in UncertaintyPolicyName)
        raise ValueError(f"Unknown uncertainty policy {policy!r} (expected one of: {known})") from None


# =============================================================================
# Data Models
# =============================================================================


@dataclass(frozen=True)
class RiskCalculation:
    """Complete ABC risk calculation.

    Attributes:
        magnitude: A + B + C (3-15).
        base_priority: Priority band of the magnitude.
        adjusted_priority: Priority after uncertainty adjustment.
        description: Guidance for the adjusted priority.
        weight: Ordinal weight of the adjusted priority (1-5).
        policy: Uncertainty policy that produced the adjustment.
    """

    magnitude: int
    base_priority: Priority
    adjusted_priority: Priority
    description: str
    weight: int
    policy: UncertaintyPolicyName

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "magnitude": self.magnitude,
            "base_priority": self.base_priority.value,
            "adjusted_priority": self.adjusted_priority.value,
            "description": self.description,
            "weight": self.weight,
            "policy": self.policy.value,
        }


# =============================================================================
# Risk Scorer
# =============================================================================


def _is_valid_component(value: object) -> bool:
    # bool is an int subclass but never a valid score
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and MIN_COMPONENT <= value <= MAX_COMPONENT
    )


def _coerce_uncertainty(value: UncertaintyLevel | str) -> UncertaintyLevel:
    try:
        return UncertaintyLevel(value)
    except ValueError:
        raise InvalidAssessmentError(
            f"Unknown uncertainty level {value!r}", field="uncertainty_level"
        ) from None


class RiskScorer:
    """Scores assessments on the ABC scale.

    All methods are pure; ``calculate_risk`` results are memoised on the
    argument tuple.

    Example:
        ```python
        scorer = RiskScorer()

        calc = scorer.calculate_risk(4, 5, 3, "high", policy="matrix")
        print(calc.magnitude)          # 12
        print(calc.base_priority)      # Priority.VERY_HIGH
        print(calc.adjusted_priority)  # Priority.EXTREMELY_HIGH
        ```
    """

    def calculate_magnitude(
        self,
        probability: int,
        loss_of_value: int,
        fraction_affected: int,
    ) -> int:
        """Calculate risk magnitude.

        Args:
            probability: A component (1-5).
            loss_of_value: B component (1-5).
            fraction_affected: C component (1-5).

        Returns:
            Magnitude in [3, 15].

        Raises:
            InvalidComponentError: If any component is not an integer in [1, 5].
        """
        for name, value in (
            ("probability", probability),
            ("loss_of_value", loss_of_value),
            ("fraction_affected", fraction_affected),
        ):
            if not _is_valid_component(value):
                raise InvalidComponentError(name, value)

        return probability + loss_of_value + fraction_affected

    def categorize_priority(self, magnitude: int) -> Priority:
        """Map a magnitude to its priority band.

        Args:
            magnitude: Risk magnitude.

        Returns:
            Priority band (lower bounds inclusive).

        Raises:
            InvalidMagnitudeError: If magnitude is outside [3, 15].
        """
        if (
            isinstance(magnitude, bool)
            or not isinstance(magnitude, int)
            or not MIN_MAGNITUDE <= magnitude <= MAX_MAGNITUDE
        ):
            raise InvalidMagnitudeError(magnitude)

        for threshold, priority in PRIORITY_THRESHOLDS:
            if magnitude >= threshold:
                return priority
        return Priority.LOW

    def adjust_for_uncertainty(
        self,
        priority: Priority,
        uncertainty: UncertaintyLevel | str,
        policy: PolicyArg,
    ) -> Priority:
        """Escalate a priority according to uncertainty.

        Args:
            priority: Base priority.
            uncertainty: Uncertainty level of the assessment.
            policy: Uncertainty policy to apply (required, no default).

        Returns:
            Adjusted priority, never lower than ``priority``.
        """
        resolved = get_uncertainty_policy(policy)
        adjusted = resolved.adjust(Priority(priority), _coerce_uncertainty(uncertainty))
        # Policies are pluggable; hold them to the no-decrease guarantee
        return adjusted if adjusted.weight >= Priority(priority).weight else Priority(priority)

    def priority_weight(self, priority: Priority) -> int:
        """Ordinal weight of a priority (higher = more urgent)."""
        return Priority(priority).weight

    def priority_description(self, priority: Priority) -> str:
        """Human-readable guidance for a priority."""
        return PRIORITY_DESCRIPTIONS[Priority(priority)]

    def component_description(self, component: Component, value: int) -> str:
        """Guidance text for an A, B or C score.

        Args:
            component: "A" (probability), "B" (loss of value) or "C" (fraction affected).
            value: Component value.

        Returns:
            Description, or "Invalid value" when the pair is unknown.
        """
        return COMPONENT_DESCRIPTIONS.get(component, {}).get(value, "Invalid value")

    def calculate_risk(
        self,
        probability: int,
        loss_of_value: int,
        fraction_affected: int,
        uncertainty: UncertaintyLevel | str,
        policy: PolicyArg,
    ) -> RiskCalculation:
        """Calculate a complete risk result from ABC components.

        Args:
            probability: A component (1-5).
            loss_of_value: B component (1-5).
            fraction_affected: C component (1-5).
            uncertainty: Uncertainty level.
            policy: Uncertainty policy to apply.

        Returns:
            RiskCalculation with magnitude, base and adjusted priority.
        """
        for name, value in (
            ("probability", probability),
            ("loss_of_value", loss_of_value),
            ("fraction_affected", fraction_affected),
        ):
            if not _is_valid_component(value):
                raise InvalidComponentError(name, value)

        return _calculate_risk_cached(
            probability,
            loss_of_value,
            fraction_affected,
            _coerce_uncertainty(uncertainty),
            get_uncertainty_policy(policy),
        )


@lru_cache(maxsize=1024)
def _calculate_risk_cached(
    probability: int,
    loss_of_value: int,
    fraction_affected: int,
    uncertainty: UncertaintyLevel,
    policy: UncertaintyPolicy,
) -> RiskCalculation:
    scorer = _DEFAULT_SCORER
    magnitude = scorer.calculate_magnitude(probability, loss_of_value, fraction_affected)
    base_priority = scorer.categorize_priority(magnitude)
    adjusted = scorer.adjust_for_uncertainty(base_priority, uncertainty, policy)

    logger.debug(
        "Risk calculated",
        magnitude=magnitude,
        base_priority=base_priority.value,
        adjusted_priority=adjusted.value,
        uncertainty=uncertainty.value,
        policy=policy.name.value,
    )

    return RiskCalculation(
        magnitude=magnitude,
        base_priority=base_priority,
        adjusted_priority=adjusted,
        description=scorer.priority_description(adjusted),
        weight=adjusted.weight,
        policy=policy.name,
    )


_DEFAULT_SCORER = RiskScorer()


def create_risk_scorer() -> RiskScorer:
    """Create a risk scorer.

    Returns:
        RiskScorer instance.
    """
    return RiskScorer()
