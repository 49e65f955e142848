"""Prior-value snapshots kept between plugin invocations.

Exactly one snapshot is retained: the raw values of the previous successful
collection and the time it was taken.
"""

import json
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..core.exceptions import ErrorCodes, OutputError
from ..logging import get_logger

WORKDIR_ENV_VAR = "MACKEREL_PLUGIN_WORKDIR"
TIMESTAMP_KEY = "_lastTime"


@dataclass
class Snapshot:
    """Raw metric values of one collection.

    Attributes:
        timestamp: Unix time of the collection
        values: Metric key to raw value
    """
    timestamp: float
    values: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.values)
        data[TIMESTAMP_KEY] = self.timestamp
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Snapshot":
        """Rebuild a snapshot from its serialized form.

        Raises:
            ValueError: If the timestamp is missing or a value is not numeric
        """
        if TIMESTAMP_KEY not in data:
            raise ValueError(f"snapshot has no {TIMESTAMP_KEY} entry")
        values = {
            key: float(value)
            for key, value in data.items()
            if key != TIMESTAMP_KEY
        }
        return cls(timestamp=float(data[TIMESTAMP_KEY]), values=values)


def default_snapshot_path(prefix: str) -> Path:
    """Default state file location for a metric key prefix."""
    workdir = os.environ.get(WORKDIR_ENV_VAR) or tempfile.gettempdir()
    return Path(workdir) / f"mackerel-plugin-{prefix}"


class MemorySnapshotStore:
    """Snapshot store that lives only as long as the process."""

    def __init__(self, snapshot: Optional[Snapshot] = None) -> None:
        self.snapshot = snapshot

    def load(self) -> Optional[Snapshot]:
        return self.snapshot

    def save(self, snapshot: Snapshot) -> None:
        self.snapshot = snapshot


class FileSnapshotStore:
    """JSON state file holding the previous snapshot.

    A missing or unreadable state file means there is no previous
    snapshot; the following save replaces it.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def load(self) -> Optional[Snapshot]:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            return Snapshot.from_dict(data)
        except FileNotFoundError:
            return None
        except (OSError, ValueError, TypeError, AttributeError) as e:
            get_logger(__name__).warning(
                "Ignoring unreadable snapshot file",
                path=str(self.path),
                error=str(e),
            )
            return None

    def save(self, snapshot: Snapshot) -> None:
        """Write the snapshot atomically.

        Raises:
            OutputError: If the state file cannot be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", dir=str(self.path.parent)
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(snapshot.to_dict(), f)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise OutputError(
                f"Failed to save snapshot: {e}",
                code=ErrorCodes.STATE_FILE_FAILED,
                context={"path": str(self.path)},
                cause=e,
            ) from e
