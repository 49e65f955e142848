"""Protocol definitions for TableStat collaborators.

These protocols describe the seams between the collector and the plugin
runtime. The collector produces a metric map; everything that needs state
across invocations (previous snapshots, rate computation) sits behind the
protocols below so it can be swapped out in tests.

Classes:
    MetricSource: Anything that can produce a metric map
    RateCalculator: Computes a rate from a current and previous value
    SnapshotStore: Persists the previous invocation's raw values
"""

from typing import TYPE_CHECKING, Any, Dict, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..runtime.snapshot import Snapshot


@runtime_checkable
class MetricSource(Protocol):
    """Protocol for metric producers consumed by the plugin runtime."""

    def metric_key_prefix(self) -> str:
        """Return the namespace prefix for all produced keys."""
        ...

    def graph_definition(self) -> Dict[str, Any]:
        """Return the static graph definitions."""
        ...

    async def fetch_metrics(self) -> Dict[str, float]:
        """Collect one metric map."""
        ...


@runtime_checkable
class RateCalculator(Protocol):
    """Protocol for differential (rate) computation.

    Given the current value, the previous value (if any) and the number of
    seconds between both samples, return the rate or None when no rate is
    available for this round.
    """

    def rate(
        self,
        current: float,
        previous: Optional[float],
        interval: float,
    ) -> Optional[float]:
        """Compute the rate between two samples."""
        ...


@runtime_checkable
class SnapshotStore(Protocol):
    """Protocol for prior-value snapshot persistence."""

    def load(self) -> Optional["Snapshot"]:
        """Load the previous snapshot, or None if there is none."""
        ...

    def save(self, snapshot: "Snapshot") -> None:
        """Persist the snapshot for the next invocation."""
        ...
