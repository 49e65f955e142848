"""Tests for graph definitions."""

import pytest

from tablestat.metrics.graphs import (
    GROUP_METRICS,
    GROUPS,
    GraphDef,
    MetricDef,
    find_metric,
    graph_definition,
    graph_name,
    title_prefix,
)

EXPECTED_FIELDS = {
    "table.scan.#": ["seq_scan", "seq_tup_read", "idx_scan", "idx_tup_fetch"],
    "table.row.#": [
        "n_tup_ins", "n_tup_upd", "n_tup_del", "n_tup_hot_upd", "n_live_tup", "n_dead_tup",
    ],
    "table.vacuum.#": ["vacuum_count", "autovacuum_count"],
    "table.analyze.#": ["analyze_count", "autoanalyze_count"],
}


class TestGraphDefinition:

    def test_graph_names_and_fields(self):
        graphs = graph_definition("postgres")

        assert list(graphs) == list(EXPECTED_FIELDS)
        for name, fields in EXPECTED_FIELDS.items():
            assert [metric.name for metric in graphs[name].metrics] == fields

    def test_labels_use_title_cased_prefix(self):
        graphs = graph_definition("postgres")

        assert graphs["table.scan.#"].label == "Postgres Table Scans"
        assert graphs["table.row.#"].label == "Postgres Table Rows"
        assert graphs["table.vacuum.#"].label == "Postgres Table Vacuum Counts"
        assert graphs["table.analyze.#"].label == "Postgres Table Analyze Counts"

    def test_custom_prefix_label(self):
        assert graph_definition("app-db")["table.scan.#"].label == "App-Db Table Scans"

    def test_unit_is_integer(self):
        assert {graph.unit for graph in graph_definition("postgres").values()} == {"integer"}

    def test_only_live_and_dead_tuples_are_gauges(self):
        gauges = [
            metric.name
            for graph in graph_definition("postgres").values()
            for metric in graph.metrics
            if not metric.diff
        ]

        assert gauges == ["n_live_tup", "n_dead_tup"]

    def test_metric_labels(self):
        labels = {
            metric.name: metric.label
            for graph in graph_definition("postgres").values()
            for metric in graph.metrics
        }

        assert labels["seq_tup_read"] == "Rows Fetched by Sequential Scan"
        assert labels["n_tup_hot_upd"] == "HOT Updated Rows"
        assert labels["autovacuum_count"] == "Auto Vacuum Counts"
        assert labels["autoanalyze_count"] == "Auto Analyze Counts"

    def test_to_dict(self):
        graph = GraphDef("L", "integer", (MetricDef("a", "A", diff=True),))

        assert graph.to_dict() == {
            "label": "L",
            "unit": "integer",
            "metrics": [{"name": "a", "label": "A", "diff": True}],
        }

    def test_groups_follow_definition_order(self):
        assert GROUPS == ("scan", "row", "vacuum", "analyze")
        assert [graph_name(group) for group in GROUP_METRICS] == list(EXPECTED_FIELDS)


class TestTitlePrefix:

    @pytest.mark.parametrize("prefix, expected", [
        ("postgres", "Postgres"),
        ("my pg", "My Pg"),
        ("app-db", "App-Db"),
        ("myPg", "MyPg"),
        ("pg_main", "Pg_main"),
    ])
    def test_title_prefix(self, prefix, expected):
        assert title_prefix(prefix) == expected


class TestFindMetric:

    def test_counter_key(self):
        metric = find_metric("table.scan.orders.seq_scan")

        assert metric.name == "seq_scan"
        assert metric.diff is True

    def test_gauge_key(self):
        assert find_metric("table.row.orders.n_live_tup").diff is False

    @pytest.mark.parametrize("key", [
        "table.scan.orders.n_live_tup",
        "table.scan.public.orders.seq_scan",
        "table.scan..seq_scan",
        "table.index.orders.seq_scan",
        "postgres.table.scan.orders.seq_scan",
    ])
    def test_unmatched_keys(self, key):
        assert find_metric(key) is None
