"""Row-to-metric normalization.

Each statistics row expands into one fixed record per group. Records are
kept in a two-level container, group -> relation -> {field: value}, and only
turned into flat dotted keys by :func:`flatten` at the boundary to the agent.

Relation names made only of ``[-a-zA-Z0-9_]`` are used verbatim as the
relation segment of a key. Any other name is escaped and tagged with a short
digest of the original name, so distinct relations never share keys.

Example:
    >>> normalizer = MetricNormalizer()
    >>> normalizer.add_row(StatRow(relname="orders", seq_scan=5))
    >>> normalizer.table_metrics["scan"]["orders"]["seq_scan"]
    5.0
    >>> normalizer.flatten()["table.scan.orders.seq_scan"]
    5.0
    >>> escape_relation("a.b")
    'a_b-69f6642c'
"""

import hashlib
import re
from collections import defaultdict
from typing import AsyncIterable, Dict, Iterable, List

from ..database.models import StatRow
from ..logging import get_logger
from .graphs import GROUP_METRICS, KEY_ROOT

# group -> relation -> field -> value
TableMetrics = Dict[str, Dict[str, Dict[str, float]]]
MetricMap = Dict[str, float]

_SAFE_SEGMENT = re.compile(r"[-a-zA-Z0-9_]+")
_UNSAFE_SEGMENT_CHARS = re.compile(r"[^-a-zA-Z0-9_]")

# Hex digits of the name digest appended to escaped segments.
DIGEST_LENGTH = 8


def relation_digest(relation: str, length: int = DIGEST_LENGTH) -> str:
    return hashlib.sha1(relation.encode("utf-8")).hexdigest()[:length]


def escape_relation(relation: str) -> str:
    """Make a relation name safe to use as a single key segment.

    Safe names are returned unchanged. Otherwise every character outside
    ``[-a-zA-Z0-9_]``, including the ``.`` key separator, is replaced with
    ``_`` and ``-<digest>`` of the original name is appended.
    """
    if _SAFE_SEGMENT.fullmatch(relation):
        return relation
    escaped = _UNSAFE_SEGMENT_CHARS.sub("_", relation)
    return f"{escaped}-{relation_digest(relation)}"


def relation_segments(relations: Iterable[str]) -> Dict[str, str]:
    """Assign every relation name its own key segment.

    The result depends only on the set of names, not on their order. When
    two names still map to the same segment (a verbatim name that looks like
    an escaped one), each of them gets the full digest instead, with a
    counter appended if even that is taken.
    """
    claims: Dict[str, List[str]] = defaultdict(list)
    for relation in sorted(set(relations)):
        claims[escape_relation(relation)].append(relation)

    segments: Dict[str, str] = {}
    taken = set(claims)
    for segment, owners in sorted(claims.items()):
        if len(owners) == 1:
            segments[owners[0]] = segment
            continue

        get_logger(__name__).warning(
            "Relation names collide after escaping",
            segment=segment,
            relations=owners,
        )
        for relation in owners:
            base = f"{_UNSAFE_SEGMENT_CHARS.sub('_', relation)}-{relation_digest(relation, 40)}"
            candidate, n = base, 1
            while candidate in taken:
                n += 1
                candidate = f"{base}-{n}"
            taken.add(candidate)
            segments[relation] = candidate
    return segments


def metric_key(group: str, segment: str, field: str) -> str:
    """Build the flat key ``table.<group>.<segment>.<field>``."""
    return f"{KEY_ROOT}.{group}.{segment}.{field}"


def flatten(table_metrics: TableMetrics) -> MetricMap:
    """Convert the two-level container into a flat metric map.

    Distinct relation names always produce disjoint key sets.
    """
    segments = relation_segments(
        relation for relations in table_metrics.values() for relation in relations
    )
    metrics: MetricMap = {}
    for group, relations in table_metrics.items():
        for relation, record in relations.items():
            for field, value in record.items():
                metrics[metric_key(group, segments[relation], field)] = value
    return metrics


class MetricNormalizer:
    """Accumulates statistics rows into per-group, per-relation records.

    Every row produces all fields of every group; counters the database did
    not report are emitted as 0.0. A relation seen twice keeps the values
    of its last row.
    """

    def __init__(self) -> None:
        self._metrics: TableMetrics = {group: {} for group in GROUP_METRICS}
        self._rows = 0

    @property
    def table_metrics(self) -> TableMetrics:
        return self._metrics

    @property
    def relation_count(self) -> int:
        return len(self._metrics["scan"])

    @property
    def rows_seen(self) -> int:
        return self._rows

    def add_row(self, row: StatRow) -> None:
        """Expand one row into its group records."""
        relation = row.relname or ""
        for group, (_, fields) in GROUP_METRICS.items():
            self._metrics[group][relation] = {
                field.name: float(row.get(field.name) or 0)
                for field in fields
            }
        self._rows += 1

    def normalize(self, rows: Iterable[StatRow]) -> TableMetrics:
        for row in rows:
            self.add_row(row)
        return self._metrics

    async def consume(self, rows: AsyncIterable[StatRow]) -> TableMetrics:
        """Drain an async row stream into the container."""
        async for row in rows:
            self.add_row(row)
        return self._metrics

    def flatten(self) -> MetricMap:
        return flatten(self._metrics)
