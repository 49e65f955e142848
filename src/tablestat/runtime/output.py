"""Plugin protocol output.

Metric values are written as ``<prefix>.<key>\\t<value>\\t<epoch>`` lines.
Graph definitions are written as a ``# mackerel-agent-plugin`` header line
followed by one JSON document.
"""

import json
import sys
from typing import Any, Dict, Mapping, Optional, TextIO

from ..core.exceptions import ErrorCodes, OutputError
from ..metrics.graphs import GraphDef

META_ENV_VAR = "MACKEREL_AGENT_PLUGIN_META"
META_HEADER = "# mackerel-agent-plugin"


def qualify(prefix: str, name: str) -> str:
    """Join the metric key prefix and a key or graph name."""
    if not name:
        return prefix
    return f"{prefix}.{name}"


def meta_document(prefix: str, graphs: Mapping[str, GraphDef]) -> Dict[str, Any]:
    """Render graph definitions in the agent's meta format."""
    return {
        "graphs": {
            qualify(prefix, name): {
                "label": graph.label,
                "unit": graph.unit,
                "metrics": [
                    {"name": metric.name, "label": metric.label, "stacked": False}
                    for metric in graph.metrics
                ],
            }
            for name, graph in graphs.items()
        }
    }


class PluginEmitter:
    """Writes plugin protocol output to a text stream (stdout by default)."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def emit_metrics(
        self,
        prefix: str,
        values: Mapping[str, float],
        timestamp: int,
    ) -> None:
        """Write one line per metric, in key order."""
        lines = [
            f"{qualify(prefix, key)}\t{value:f}\t{timestamp}\n"
            for key, value in sorted(values.items())
        ]
        self._write("".join(lines))

    def emit_meta(self, prefix: str, graphs: Mapping[str, GraphDef]) -> None:
        document = json.dumps(meta_document(prefix, graphs))
        self._write(f"{META_HEADER}\n{document}\n")

    def _write(self, text: str) -> None:
        try:
            self.stream.write(text)
            self.stream.flush()
        except OSError as e:
            raise OutputError(
                f"Failed to write plugin output: {e}",
                code=ErrorCodes.OUTPUT_FAILED,
                cause=e,
            ) from e
