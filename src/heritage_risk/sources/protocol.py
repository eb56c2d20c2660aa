"""Assessment source protocol.

An assessment source supplies RiskAssessment records to the analyzers. The
analyzers only read from it; any storage, seeding or import concern lives
behind this interface.
"""

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from heritage_risk.risk.assessment import RiskAssessment


@runtime_checkable
class AssessmentSource(Protocol):
    """Interface all assessment sources must implement.

    Example implementation:
        class CsvAssessmentSource:
            def __init__(self, rows: list[RiskAssessment]) -> None:
                self._rows = tuple(rows)

            def get_assessments(
                self, site_ids: Iterable[str] | None = None
            ) -> tuple[RiskAssessment, ...]:
                if site_ids is None:
                    return self._rows
                wanted = set(site_ids)
                return tuple(a for a in self._rows if a.site_id in wanted)
    """

    def get_assessments(
        self,
        site_ids: Iterable[str] | None = None,
    ) -> tuple[RiskAssessment, ...]:
        """Get an immutable snapshot of assessments.

        Args:
            site_ids: Restrict to these sites (default: all sites).

        Returns:
            Assessments in insertion order. Later additions to the source
            never appear in a snapshot already returned.
        """
        ...
