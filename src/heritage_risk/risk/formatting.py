"""Human-readable labels for threat and priority values."""

from heritage_risk.risk.types import Priority, ThreatType


def _title_case(value: str) -> str:
    return " ".join(word.capitalize() for word in value.split("-") if word)


def format_threat_label(threat_type: ThreatType | str) -> str:
    """Format a threat type for display.

    Args:
        threat_type: ThreatType or its string value.

    Returns:
        Title-cased label, e.g. "tourism-pressure" -> "Tourism Pressure".
    """
    value = threat_type.value if isinstance(threat_type, ThreatType) else str(threat_type)
    return _title_case(value)


def format_priority_label(priority: Priority | str) -> str:
    """Format a priority for display, e.g. "very-high" -> "Very High"."""
    value = priority.value if isinstance(priority, Priority) else str(priority)
    return _title_case(value)
