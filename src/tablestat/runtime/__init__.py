"""Plugin runtime.

Everything that lives outside a single metric collection: rate
computation, snapshots kept between invocations and the protocol output
read by the monitoring agent.
"""

from .output import META_ENV_VAR, META_HEADER, PluginEmitter, meta_document, qualify
from .rate import MAX_INTERVAL_SECONDS, PerMinuteRateCalculator
from .runner import PluginRunner, meta_requested
from .snapshot import (
    FileSnapshotStore,
    MemorySnapshotStore,
    Snapshot,
    default_snapshot_path,
)

__all__ = [
    # Output
    "META_ENV_VAR",
    "META_HEADER",
    "PluginEmitter",
    "meta_document",
    "qualify",

    # Rates
    "MAX_INTERVAL_SECONDS",
    "PerMinuteRateCalculator",

    # Runner
    "PluginRunner",
    "meta_requested",

    # Snapshots
    "FileSnapshotStore",
    "MemorySnapshotStore",
    "Snapshot",
    "default_snapshot_path",
]
