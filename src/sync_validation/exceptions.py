"""
Exception hierarchy for sync validation.

Every failure raised by this package derives from SyncValidationError so the
CLI can report it uniformly. None of these are retried by the reconciler.
"""


class SyncValidationError(Exception):
    """Base class for all sync validation failures."""

    pass


class QueryError(SyncValidationError):
    """Raised when a row-count or catch-up query against the engine fails."""

    pass


class MetadataError(SyncValidationError):
    """Raised when a table's commit timeline or commit metadata is unusable."""

    pass


class ConfigError(SyncValidationError):
    """Raised for invalid run parameters (mode, partition limit, connection settings)."""

    pass
