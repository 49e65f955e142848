"""Single-invocation plugin runner.

One run fetches the current metric map, turns counter fields into
per-minute rates against the previous snapshot, stores the new raw values
and writes the result in the plugin protocol.
"""

import os
import time
from typing import Callable, Dict, Optional

from ..core.protocols import MetricSource, RateCalculator, SnapshotStore
from ..logging import get_logger
from ..metrics.graphs import find_metric
from .output import META_ENV_VAR, PluginEmitter
from .rate import PerMinuteRateCalculator
from .snapshot import Snapshot


def meta_requested() -> bool:
    """Whether the agent asked for graph definitions instead of values."""
    return bool(os.environ.get(META_ENV_VAR))


class PluginRunner:
    """Drives a :class:`MetricSource` through one plugin invocation.

    Attributes:
        source: Metric producer
        store: Snapshot persistence for counter fields
        calculator: Rate computation for counter fields
        emitter: Protocol output writer
    """

    def __init__(
        self,
        source: MetricSource,
        store: SnapshotStore,
        *,
        calculator: Optional[RateCalculator] = None,
        emitter: Optional[PluginEmitter] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.source = source
        self.store = store
        self.calculator = calculator or PerMinuteRateCalculator()
        self.emitter = emitter or PluginEmitter()
        self._clock = clock
        self.logger = get_logger("tablestat.runtime")

    def apply_rates(
        self,
        metrics: Dict[str, float],
        previous: Optional[Snapshot],
        now: float,
    ) -> Dict[str, float]:
        """Replace counter fields with their rates, pass gauges through.

        Keys no graph covers and counters without a rate this round are
        left out of the result.
        """
        interval = now - previous.timestamp if previous else 0.0
        results: Dict[str, float] = {}
        skipped = 0

        for key, value in metrics.items():
            metric = find_metric(key)
            if metric is None:
                self.logger.debug("No graph covers metric key", key=key)
                continue
            if not metric.diff:
                results[key] = value
                continue

            prior = previous.values.get(key) if previous else None
            rate = self.calculator.rate(value, prior, interval)
            if rate is None:
                skipped += 1
                continue
            results[key] = rate

        if skipped:
            self.logger.debug("Counters without a rate this round", count=skipped)
        return results

    async def collect(self) -> Dict[str, float]:
        """Fetch metrics and return the values to report.

        The new snapshot is only saved after a successful fetch.

        Raises:
            TableStatException: If the fetch or the snapshot save fails
        """
        metrics = await self.source.fetch_metrics()
        now = self._clock()

        previous = self.store.load()
        results = self.apply_rates(metrics, previous, now)
        self.store.save(Snapshot(timestamp=now, values=dict(metrics)))
        return results

    async def run(self) -> None:
        """Run one plugin invocation."""
        prefix = self.source.metric_key_prefix()

        if meta_requested():
            self.emitter.emit_meta(prefix, self.source.graph_definition())
            return

        values = await self.collect()
        self.emitter.emit_metrics(prefix, values, int(self._clock()))
        self.logger.info("Metrics reported", prefix=prefix, count=len(values))
