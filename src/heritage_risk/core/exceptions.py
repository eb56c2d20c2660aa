"""Core exceptions for risk scoring and temporal analysis."""

from heritage_risk.utils.exceptions import HeritageRiskError


class InvalidAssessmentError(HeritageRiskError):
    """Raised when an assessment record cannot be ingested.

    Covers unknown threat types, unknown uncertainty levels and other
    malformed fields. Component range violations use the more specific
    InvalidComponentError.
    """

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field

    def __str__(self) -> str:
        if self.field:
            return f"InvalidAssessmentError({self.field}): {self.args[0]}"
        return f"InvalidAssessmentError: {self.args[0]}"


class InvalidComponentError(InvalidAssessmentError):
    """Raised when an ABC component is not an integer in [1, 5].

    Attributes:
        component: Component name ("probability", "loss_of_value", "fraction_affected")
        value: The rejected value
    """

    def __init__(self, component: str, value: object):
        super().__init__(
            "All ABC components must be integers between 1 and 5",
            field=component,
        )
        self.component = component
        self.value = value

    def __str__(self) -> str:
        return f"InvalidComponentError({self.component}={self.value!r}): {self.args[0]}"


class InvalidMagnitudeError(HeritageRiskError, AssertionError):
    """Raised when a magnitude falls outside [3, 15].

    Magnitudes are derived, never entered, so this indicates a logic error
    upstream rather than bad user input. Callers should not recover from it.

    Attributes:
        magnitude: The out-of-range magnitude
    """

    def __init__(self, magnitude: object):
        super().__init__(f"Risk magnitude must be between 3 and 15, got {magnitude!r}")
        self.magnitude = magnitude

    def __str__(self) -> str:
        return f"InvalidMagnitudeError: {self.args[0]}"


class InsufficientDataError(HeritageRiskError):
    """Raised when an analysis has too few data points.

    Attributes:
        required: Minimum number of points the analysis needs
        actual: Number of points that were supplied
    """

    def __init__(self, message: str, required: int, actual: int):
        super().__init__(message)
        self.required = required
        self.actual = actual

    def __str__(self) -> str:
        return (
            f"InsufficientDataError: {self.args[0]} "
            f"(required={self.required}, actual={self.actual})"
        )


class NoDataError(InsufficientDataError):
    """Raised when an analysis receives no data at all.

    Distinguishes an empty input (likely a data pipeline problem) from a
    short one (more assessments need to be collected).
    """

    def __init__(self, message: str, required: int = 1):
        super().__init__(message, required=required, actual=0)

    def __str__(self) -> str:
        return f"NoDataError: {self.args[0]}"
