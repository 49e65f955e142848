"""Static graph definitions for table statistics.

The graph definitions describe how the dynamic per-relation keys are grouped
for display and which fields the agent must turn into rates. They are the
single source of truth for group and field names: the normalizer derives its
key layout from :data:`GROUP_METRICS`.

Example:
    >>> graphs = graph_definition("postgres")
    >>> graphs["table.scan.#"].label
    'Postgres Table Scans'
    >>> [m.name for m in graphs["table.row.#"].metrics if not m.diff]
    ['n_live_tup', 'n_dead_tup']
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Pattern, Tuple

KEY_ROOT = "table"
WILDCARD = "#"
UNIT = "integer"

# Characters allowed in one segment of a metric key.
KEY_SEGMENT_PATTERN = r"[-a-zA-Z0-9_]+"


@dataclass(frozen=True)
class MetricDef:
    """One field of a graph.

    Attributes:
        name: Field name, last segment of the metric key
        label: Display label
        diff: Whether the agent reports the field as a rate of change
    """
    name: str
    label: str
    diff: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "label": self.label, "diff": self.diff}


@dataclass(frozen=True)
class GraphDef:
    """A graph template covering one group of fields for every relation."""
    label: str
    unit: str
    metrics: Tuple[MetricDef, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "unit": self.unit,
            "metrics": [metric.to_dict() for metric in self.metrics],
        }


# group -> (label suffix, fields)
GROUP_METRICS: Dict[str, Tuple[str, Tuple[MetricDef, ...]]] = {
    "scan": ("Table Scans", (
        MetricDef("seq_scan", "Sequential Scans", diff=True),
        MetricDef("seq_tup_read", "Rows Fetched by Sequential Scan", diff=True),
        MetricDef("idx_scan", "Index Scans", diff=True),
        MetricDef("idx_tup_fetch", "Rows Fetched by Index Scan", diff=True),
    )),
    "row": ("Table Rows", (
        MetricDef("n_tup_ins", "Inserted Rows", diff=True),
        MetricDef("n_tup_upd", "Updated Rows", diff=True),
        MetricDef("n_tup_del", "Deleted Rows", diff=True),
        MetricDef("n_tup_hot_upd", "HOT Updated Rows", diff=True),
        MetricDef("n_live_tup", "Estimated Live Rows"),
        MetricDef("n_dead_tup", "Estimated Dead Rows"),
    )),
    "vacuum": ("Table Vacuum Counts", (
        MetricDef("vacuum_count", "Vacuum Counts", diff=True),
        MetricDef("autovacuum_count", "Auto Vacuum Counts", diff=True),
    )),
    "analyze": ("Table Analyze Counts", (
        MetricDef("analyze_count", "Analyze Counts", diff=True),
        MetricDef("autoanalyze_count", "Auto Analyze Counts", diff=True),
    )),
}

GROUPS: Tuple[str, ...] = tuple(GROUP_METRICS)


def graph_name(group: str) -> str:
    """Return the wildcard graph name for a group, e.g. ``table.scan.#``."""
    return f"{KEY_ROOT}.{group}.{WILDCARD}"


def title_prefix(prefix: str) -> str:
    """Upper-case the first letter of every word of the prefix.

    Letters after the first one keep their case, so ``myPg`` stays ``MyPg``.
    """
    return re.sub(r"\b[a-z]", lambda m: m.group().upper(), prefix)


def graph_definition(prefix: str) -> Dict[str, GraphDef]:
    """Build the graph definitions, labelled with the given key prefix.

    Args:
        prefix: Resolved metric key prefix

    Returns:
        Mapping of wildcard graph name to definition, in group order
    """
    label_prefix = title_prefix(prefix)
    return {
        graph_name(group): GraphDef(
            label=f"{label_prefix} {suffix}",
            unit=UNIT,
            metrics=metrics,
        )
        for group, (suffix, metrics) in GROUP_METRICS.items()
    }


def _compile_key_patterns() -> Tuple[Tuple[Pattern[str], MetricDef], ...]:
    patterns = []
    for group, (_, metrics) in GROUP_METRICS.items():
        graph = re.escape(graph_name(group)).replace(re.escape(WILDCARD), KEY_SEGMENT_PATTERN)
        for metric in metrics:
            patterns.append((re.compile(rf"^{graph}\.{re.escape(metric.name)}$"), metric))
    return tuple(patterns)


_KEY_PATTERNS = _compile_key_patterns()


def find_metric(key: str) -> Optional[MetricDef]:
    """Return the field definition a flat metric key belongs to.

    Matching follows the agent's wildcard rule: ``#`` stands for exactly
    one key segment.

    Args:
        key: Flat metric key such as ``table.scan.orders.seq_scan``

    Returns:
        The matching MetricDef, or None if no graph covers the key
    """
    for pattern, metric in _KEY_PATTERNS:
        if pattern.match(key):
            return metric
    return None
