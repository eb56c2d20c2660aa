"""Risk assessment records.

A RiskAssessment is created once by an assessor workflow and never changed.
Magnitude and priority are derived at construction, so an invalid record is
rejected at ingestion rather than discovered during analysis.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from heritage_risk.core.exceptions import InvalidAssessmentError
from heritage_risk.risk.risk_scorer import PolicyArg, RiskScorer
from heritage_risk.risk.types import Priority, ThreatType, UncertaintyLevel, to_utc

_scorer = RiskScorer()


@dataclass(frozen=True)
class RiskAssessment:
    """A single ABC-scale assessment of one threat at one site.

    Attributes:
        site_id: Heritage site identifier.
        threat_type: Threat being assessed.
        probability: A component (1-5).
        loss_of_value: B component (1-5).
        fraction_affected: C component (1-5).
        uncertainty_level: Assessor confidence.
        assessment_date: When the assessment was made (UTC).
        assessor: Free text, not interpreted.
        notes: Free text, not interpreted.
        assessment_id: Optional identifier from the assessment source.
        magnitude: Derived A + B + C.
        priority: Derived base priority of the magnitude.
    """

    site_id: str
    threat_type: ThreatType
    probability: int
    loss_of_value: int
    fraction_affected: int
    uncertainty_level: UncertaintyLevel
    assessment_date: datetime
    assessor: str = ""
    notes: str = ""
    assessment_id: str | None = None
    magnitude: int = field(init=False)
    priority: Priority = field(init=False)

    def __post_init__(self) -> None:
        try:
            threat_type = ThreatType(self.threat_type)
        except ValueError:
            raise InvalidAssessmentError(
                f"Unknown threat type {self.threat_type!r}", field="threat_type"
            ) from None
        try:
            uncertainty = UncertaintyLevel(self.uncertainty_level)
        except ValueError:
            raise InvalidAssessmentError(
                f"Unknown uncertainty level {self.uncertainty_level!r}",
                field="uncertainty_level",
            ) from None
        if not isinstance(self.assessment_date, datetime):
            raise InvalidAssessmentError(
                "Assessment date must be a datetime", field="assessment_date"
            )

        magnitude = _scorer.calculate_magnitude(
            self.probability, self.loss_of_value, self.fraction_affected
        )

        # Frozen dataclass: derived fields are set once here
        object.__setattr__(self, "threat_type", threat_type)
        object.__setattr__(self, "uncertainty_level", uncertainty)
        object.__setattr__(self, "assessment_date", to_utc(self.assessment_date))
        object.__setattr__(self, "magnitude", magnitude)
        object.__setattr__(self, "priority", _scorer.categorize_priority(magnitude))

    def adjusted_priority(self, policy: PolicyArg) -> Priority:
        """Priority after uncertainty adjustment under ``policy``."""
        return _scorer.adjust_for_uncertainty(self.priority, self.uncertainty_level, policy)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "assessment_id": self.assessment_id,
            "site_id": self.site_id,
            "threat_type": self.threat_type.value,
            "probability": self.probability,
            "loss_of_value": self.loss_of_value,
            "fraction_affected": self.fraction_affected,
            "magnitude": self.magnitude,
            "priority": self.priority.value,
            "uncertainty_level": self.uncertainty_level.value,
            "assessment_date": self.assessment_date.isoformat(),
            "assessor": self.assessor,
            "notes": self.notes,
        }
