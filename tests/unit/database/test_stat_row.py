"""Tests for the statistics row model."""

from tablestat.database.models import STAT_COLUMNS, StatRow


class TestStatRow:

    def test_from_mapping(self, sample_record):
        row = StatRow.from_mapping(sample_record)

        assert row.relname == "orders"
        assert row.seq_scan == 5
        assert row.idx_scan is None
        assert row.autoanalyze_count == 2

    def test_unknown_columns_ignored(self):
        row = StatRow.from_mapping({"relname": "t", "n_mod_since_analyze": 7, "last_vacuum": None})

        assert row == StatRow(relname="t")

    def test_missing_columns_stay_none(self):
        row = StatRow.from_mapping({"relname": "t", "seq_scan": 1})

        assert row.get("seq_scan") == 1
        assert all(row.get(column) is None for column in STAT_COLUMNS if column != "seq_scan")

    def test_stat_columns(self):
        assert len(STAT_COLUMNS) == 14
        assert "relname" not in STAT_COLUMNS
