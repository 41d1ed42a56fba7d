"""
Row count and catch-up comparison logic for sync validation.

This submodule provides:
- Row counting through the query engine (HiveServer2) or an in-memory stub
- Catch-up record counting from commit metadata
- SQL injection protection via identifier quoting
"""

from .catchup import count_new_records
from .counts import (
    HiveRowCounter,
    RowCounter,
    StaticRowCounter,
    hive_connection_factory,
    latest_partitions_window,
)
from .quoting import quote_hive_identifier, quote_qualified_table

__all__ = [
    'RowCounter',
    'HiveRowCounter',
    'StaticRowCounter',
    'hive_connection_factory',
    'latest_partitions_window',
    'count_new_records',
    'quote_hive_identifier',
    'quote_qualified_table',
]
