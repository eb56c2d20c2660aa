"""Assessment sources feeding the risk analyzers."""

from .memory import InMemoryAssessmentSource
from .protocol import AssessmentSource

__all__ = [
    "AssessmentSource",
    "InMemoryAssessmentSource",
]
