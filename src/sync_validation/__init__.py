"""
Sync validation for replicated Hudi tables

Checks that a downstream-synced target table is consistent with its source
by comparing row counts and the commits the lagging table has not yet
caught up to.

Components:
- timeline: commit timeline of a table
- metadata: table metadata model and loader
- compare: row counting and catch-up record counting
- reconciler: lag decision and reconciliation result
- report: console and JSON output
- cli: command-line front end

Usage:
    from src.sync_validation import Mode, SyncReconciler, MetadataLoader
"""

from .exceptions import ConfigError, MetadataError, QueryError, SyncValidationError
from .metadata import HoodieTable, MetadataLoader
from .modes import Mode
from .reconciler import ReconciliationResult, SyncReconciler, reconcile
from .timeline import EMPTY_COMMIT, CommitTimeline

__version__ = "1.0.0"
__all__ = [
    "CommitTimeline",
    "EMPTY_COMMIT",
    "HoodieTable",
    "MetadataLoader",
    "Mode",
    "ReconciliationResult",
    "SyncReconciler",
    "reconcile",
    "SyncValidationError",
    "QueryError",
    "MetadataError",
    "ConfigError",
]
