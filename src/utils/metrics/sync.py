"""
Metrics for sync validation runs.

Tracks validation runs, count differences and outstanding catch-up work
between a source table and its synced target.
"""

import logging
import time

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
)

logger = logging.getLogger(__name__)

TABLE_LABELS = ["source_table", "target_table"]


class SyncValidationMetrics:
    """
    Metrics for sync validation runs

    All metrics are labelled with the source and target table names.
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """
        Initialize sync validation metrics

        Args:
            registry: Custom Prometheus registry (default: global REGISTRY)
        """
        self.registry = registry or REGISTRY

        self.runs_total = Counter(
            "sync_validation_runs_total",
            "Total number of sync validation runs",
            TABLE_LABELS + ["status"],
            registry=self.registry,
        )

        self.duration_seconds = Histogram(
            "sync_validation_duration_seconds",
            "Duration of sync validation runs in seconds",
            TABLE_LABELS,
            buckets=(1, 5, 10, 30, 60, 120, 300, 600, 1800, 3600),
            registry=self.registry,
        )

        self.last_run_timestamp = Gauge(
            "sync_validation_last_run_timestamp",
            "Timestamp of last sync validation run",
            TABLE_LABELS,
            registry=self.registry,
        )

        self.count_difference = Gauge(
            "sync_validation_count_difference",
            "Row count difference (ahead table - behind table)",
            TABLE_LABELS,
            registry=self.registry,
        )

        self.pending_commits = Gauge(
            "sync_validation_pending_commits",
            "Commits the behind table has not caught up to",
            TABLE_LABELS,
            registry=self.registry,
        )

        self.catch_up_records = Gauge(
            "sync_validation_catch_up_records",
            "Records inserted by the pending commits",
            TABLE_LABELS,
            registry=self.registry,
        )

    def record_run(
        self,
        source_table: str,
        target_table: str,
        success: bool,
        duration: float,
    ) -> None:
        """
        Record a validation run

        Args:
            source_table: Source table name
            target_table: Target table name
            success: Whether the run produced a result
            duration: Duration in seconds
        """
        status = "success" if success else "failed"
        labels = {"source_table": source_table, "target_table": target_table}

        self.runs_total.labels(status=status, **labels).inc()
        self.duration_seconds.labels(**labels).observe(duration)
        self.last_run_timestamp.labels(**labels).set(time.time())

        logger.debug(
            f"Recorded sync validation run: {source_table} -> {target_table}, "
            f"status={status}, duration={duration:.2f}s"
        )

    def record_result(self, result) -> None:
        """
        Record the figures of a ReconciliationResult

        Args:
            result: ReconciliationResult of a completed run
        """
        labels = {
            "source_table": result.source_table,
            "target_table": result.target_table,
        }

        self.count_difference.labels(**labels).set(result.count_difference)
        self.pending_commits.labels(**labels).set(len(result.pending_commits))
        self.catch_up_records.labels(**labels).set(result.catch_up_record_count or 0)
