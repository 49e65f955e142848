"""Property-based tests for metric normalization."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tablestat.database.models import STAT_COLUMNS, StatRow
from tablestat.metrics.graphs import find_metric
from tablestat.metrics.normalizer import MetricNormalizer, escape_relation

pytestmark = pytest.mark.property

relation_names = st.text(min_size=1, max_size=20)
counters = st.one_of(st.none(), st.integers(min_value=0, max_value=2**53))


@st.composite
def stat_rows(draw, min_size=0, max_size=20):
    names = draw(st.lists(relation_names, min_size=min_size, max_size=max_size, unique=True))
    return [
        StatRow(relname=name, **{column: draw(counters) for column in STAT_COLUMNS})
        for name in names
    ]


def flatten_rows(rows):
    normalizer = MetricNormalizer()
    normalizer.normalize(rows)
    return normalizer.flatten()


@given(stat_rows())
@settings(max_examples=50)
def test_fourteen_metrics_per_relation(rows):
    assert len(flatten_rows(rows)) == 14 * len(rows)


@given(stat_rows())
@settings(max_examples=50)
def test_every_key_is_covered_by_a_graph(rows):
    for key, value in flatten_rows(rows).items():
        metric = find_metric(key)
        assert metric is not None
        assert key.endswith("." + metric.name)
        assert value >= 0


@given(st.data())
@settings(max_examples=50)
def test_row_order_does_not_matter(data):
    rows = data.draw(stat_rows(min_size=1))
    shuffled = data.draw(st.permutations(rows))

    assert flatten_rows(rows) == flatten_rows(shuffled)


@given(stat_rows(min_size=1, max_size=1))
def test_values_match_row(rows):
    row = rows[0]
    metrics = flatten_rows(rows)

    for column in STAT_COLUMNS:
        matching = [value for key, value in metrics.items() if key.endswith("." + column)]
        assert matching == [float(row.get(column) or 0)]


@given(stat_rows())
@settings(max_examples=50)
def test_relations_have_disjoint_key_sets(rows):
    keys_by_segment = {}
    for key in flatten_rows(rows):
        segment = key.split(".")[2]
        keys_by_segment.setdefault(segment, set()).add(key)

    assert len(keys_by_segment) == len(rows)
    assert all(len(keys) == 14 for keys in keys_by_segment.values())


@given(st.lists(relation_names, min_size=1, max_size=10, unique=True))
@settings(max_examples=50)
def test_names_alongside_their_escaped_forms(names):
    candidates = sorted(set(names) | {escape_relation(name) for name in names})
    rows = [StatRow(relname=name, seq_scan=i) for i, name in enumerate(candidates)]

    metrics = flatten_rows(rows)

    assert len(metrics) == 14 * len(candidates)
    scans = sorted(value for key, value in metrics.items() if key.endswith(".seq_scan"))
    assert scans == [float(i) for i in range(len(candidates))]
