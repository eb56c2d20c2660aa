"""In-memory assessment source."""

import threading
from collections.abc import Iterable

from heritage_risk.core.logging import get_logger
from heritage_risk.risk.assessment import RiskAssessment

logger = get_logger(__name__)


class InMemoryAssessmentSource:
    """Append-only assessment store returning copy-on-read snapshots.

    Appends and reads are serialised by a lock, so an analysis running on a
    snapshot never observes a partially applied batch.

    Example:
        ```python
        source = InMemoryAssessmentSource()
        source.add_many(assessments)
        snapshot = source.get_assessments(["site-001"])
        analysis = TrendAnalyzer().analyze(
            TimeSeriesBuilder().build_series(snapshot, "site-001")
        )
        ```
    """

    def __init__(self, assessments: Iterable[RiskAssessment] = ()) -> None:
        self._lock = threading.Lock()
        self._assessments: list[RiskAssessment] = list(assessments)

    def add(self, assessment: RiskAssessment) -> None:
        """Append one assessment."""
        self.add_many((assessment,))

    def add_many(self, assessments: Iterable[RiskAssessment]) -> int:
        """Append a batch of assessments atomically.

        Returns:
            Number of assessments added.
        """
        batch = list(assessments)
        with self._lock:
            self._assessments.extend(batch)
            total = len(self._assessments)
        logger.debug("Added assessments", added=len(batch), total=total)
        return len(batch)

    def get_assessments(
        self,
        site_ids: Iterable[str] | None = None,
    ) -> tuple[RiskAssessment, ...]:
        """Get an immutable snapshot, optionally restricted to some sites."""
        with self._lock:
            snapshot = tuple(self._assessments)
        if site_ids is None:
            return snapshot
        wanted = set(site_ids)
        return tuple(a for a in snapshot if a.site_id in wanted)

    def site_ids(self) -> tuple[str, ...]:
        """Distinct site ids in insertion order."""
        return tuple(dict.fromkeys(a.site_id for a in self.get_assessments()))

    def __len__(self) -> int:
        with self._lock:
            return len(self._assessments)
