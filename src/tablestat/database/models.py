# src/tablestat/database/models.py
"""Database models for the table statistics collector."""

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional, Tuple


@dataclass
class StatRow:
    """One row of ``pg_stat_user_tables``.

    Counters the statistics view did not return stay None.
    """
    relname: Optional[str] = None

    # scan
    seq_scan: Optional[int] = None
    seq_tup_read: Optional[int] = None
    idx_scan: Optional[int] = None
    idx_tup_fetch: Optional[int] = None

    # row
    n_tup_ins: Optional[int] = None
    n_tup_upd: Optional[int] = None
    n_tup_del: Optional[int] = None
    n_tup_hot_upd: Optional[int] = None
    n_live_tup: Optional[int] = None
    n_dead_tup: Optional[int] = None

    # vacuum
    vacuum_count: Optional[int] = None
    autovacuum_count: Optional[int] = None

    # analyze
    analyze_count: Optional[int] = None
    autoanalyze_count: Optional[int] = None

    @classmethod
    def from_mapping(cls, record: Mapping[str, Any]) -> "StatRow":
        """Build a row from any column-name keyed mapping.

        Columns that do not correspond to a field are ignored, so extra or
        renamed columns in newer server versions do not break collection.
        """
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in record.items() if key in known})

    def get(self, field_name: str) -> Optional[int]:
        return getattr(self, field_name)


STAT_COLUMNS: Tuple[str, ...] = tuple(f.name for f in fields(StatRow) if f.name != "relname")
