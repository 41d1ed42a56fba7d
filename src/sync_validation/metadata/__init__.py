"""
Table metadata: commit write statistics and the loader that reads them.

This submodule provides:
- HoodieTable / CommitMetadata / WriteStat: in-memory metadata model
- MetadataLoader: reads a table's `.hoodie` folder from local storage
"""

from .loader import MetadataLoader, load_table, parse_properties
from .table import CommitMetadata, HoodieTable, WriteStat

__all__ = [
    'HoodieTable',
    'CommitMetadata',
    'WriteStat',
    'MetadataLoader',
    'load_table',
    'parse_properties',
]
