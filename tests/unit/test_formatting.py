"""Tests for label formatting."""

import pytest

from heritage_risk.risk.formatting import format_priority_label, format_threat_label
from heritage_risk.risk.types import Priority, ThreatType


class TestFormatThreatLabel:
    """Tests for threat labels."""

    @pytest.mark.parametrize(
        "threat,expected",
        [
            ("tourism-pressure", "Tourism Pressure"),
            (ThreatType.CLIMATE_CHANGE, "Climate Change"),
            (ThreatType.EARTHQUAKE, "Earthquake"),
            ("urban-development", "Urban Development"),
        ],
    )
    def test_labels(self, threat, expected):
        """Test hyphenated values become title-cased words."""
        assert format_threat_label(threat) == expected

    def test_every_threat_has_label(self):
        """Test every threat formats to a non-empty label without hyphens."""
        for threat in ThreatType:
            label = format_threat_label(threat)
            assert label
            assert "-" not in label


class TestFormatPriorityLabel:
    """Tests for priority labels."""

    def test_labels(self):
        """Test priority labels."""
        assert format_priority_label(Priority.EXTREMELY_HIGH) == "Extremely High"
        assert format_priority_label("medium-high") == "Medium High"
        assert format_priority_label(Priority.LOW) == "Low"
