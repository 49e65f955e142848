"""Rate calculation between consecutive snapshots."""

from typing import Optional

# Samples further apart than this are considered stale.
MAX_INTERVAL_SECONDS = 600.0


class PerMinuteRateCalculator:
    """Per-minute rate of a monotonically increasing counter.

    No rate is produced when there is no previous sample, when the samples
    are not in chronological order or too far apart, or when the counter
    went down (typically after a server restart or statistics reset).
    """

    def __init__(self, *, max_interval: float = MAX_INTERVAL_SECONDS) -> None:
        self.max_interval = max_interval

    def rate(
        self,
        current: float,
        previous: Optional[float],
        interval: float,
    ) -> Optional[float]:
        """Compute the per-minute rate between two samples.

        Args:
            current: Current counter value
            previous: Previous counter value, or None
            interval: Seconds between both samples

        Returns:
            Rate per minute, or None when no rate is available this round
        """
        if previous is None:
            return None
        if interval <= 0 or interval > self.max_interval:
            return None
        if current < previous:
            return None
        return (current - previous) * 60.0 / interval
