"""Metric normalization and graph definitions.

Modules:
    graphs: Static graph templates and field metadata
    normalizer: Row expansion into the two-level container and flat keys
"""

from .graphs import (
    GROUP_METRICS,
    GROUPS,
    GraphDef,
    MetricDef,
    find_metric,
    graph_definition,
    graph_name,
    title_prefix,
)
from .normalizer import (
    MetricMap,
    MetricNormalizer,
    TableMetrics,
    escape_relation,
    flatten,
    metric_key,
    relation_segments,
)

__all__ = [
    # Graphs
    "GROUP_METRICS",
    "GROUPS",
    "GraphDef",
    "MetricDef",
    "find_metric",
    "graph_definition",
    "graph_name",
    "title_prefix",

    # Normalizer
    "MetricMap",
    "MetricNormalizer",
    "TableMetrics",
    "escape_relation",
    "flatten",
    "metric_key",
    "relation_segments",
]
