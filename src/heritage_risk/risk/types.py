"""Shared enumerations for the ABC-scale risk methodology."""

from datetime import UTC, datetime, time
from enum import Enum


class Priority(str, Enum):
    """Risk priority derived from magnitude, ordered low to extremely high."""

    LOW = "low"  # 3
    MEDIUM_HIGH = "medium-high"  # 4-6
    HIGH = "high"  # 7-9
    VERY_HIGH = "very-high"  # 10-12
    EXTREMELY_HIGH = "extremely-high"  # 13-15

    @property
    def weight(self) -> int:
        """Ordinal weight, 1 (low) to 5 (extremely high)."""
        return _PRIORITY_WEIGHTS[self]

    @classmethod
    def from_weight(cls, weight: int) -> "Priority":
        """Priority for an ordinal weight, clamped to the scale."""
        clamped = max(1, min(len(_PRIORITY_ORDER), weight))
        return _PRIORITY_ORDER[clamped - 1]

    def escalate(self, steps: int = 1) -> "Priority":
        """Move up the scale by ``steps``, never past extremely high."""
        return Priority.from_weight(self.weight + max(0, steps))


_PRIORITY_ORDER: tuple[Priority, ...] = (
    Priority.LOW,
    Priority.MEDIUM_HIGH,
    Priority.HIGH,
    Priority.VERY_HIGH,
    Priority.EXTREMELY_HIGH,
)

_PRIORITY_WEIGHTS: dict[Priority, int] = {p: i + 1 for i, p in enumerate(_PRIORITY_ORDER)}


class UncertaintyLevel(str, Enum):
    """Assessor confidence attached to an assessment."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ThreatType(str, Enum):
    """Threats that can affect a heritage site."""

    EARTHQUAKE = "earthquake"
    FLOODING = "flooding"
    WEATHERING = "weathering"
    VEGETATION = "vegetation"
    URBAN_DEVELOPMENT = "urban-development"
    TOURISM_PRESSURE = "tourism-pressure"
    LOOTING = "looting"
    CONFLICT = "conflict"
    CLIMATE_CHANGE = "climate-change"


def to_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime.

    Naive datetimes are taken to already be in UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def day_bucket(value: datetime) -> datetime:
    """Midnight UTC of the day ``value`` falls on."""
    return datetime.combine(to_utc(value).date(), time.min, tzinfo=UTC)
