"""
Sync-lag reconciliation between a source table and its synced target.

Compares both tables' row counts, works out which table is behind from
their commit timelines, and sums the inserts of the commits the lagging
table has not absorbed yet.
"""

from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from src.utils.logging import ContextLogger
from src.utils.tracing import trace_operation

from .compare import RowCounter, count_new_records
from .metadata import HoodieTable
from .modes import Mode, validate_partition_limit

SOURCE = "source"
TARGET = "target"


@dataclass(frozen=True)
class ReconciliationResult:
    """
    Outcome of one reconciliation run

    `count_difference` is count(ahead) - count(behind).
    `catch_up_record_count` is set iff `pending_commits` is non-empty.
    """

    source_table: str
    target_table: str
    behind: str
    source_count: int
    target_count: int
    count_difference: int
    pending_commits: tuple[str, ...] = ()
    catch_up_record_count: int | None = None
    mode: Mode = Mode.COMPLETE
    partition_limit: int | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def ahead(self) -> str:
        return SOURCE if self.behind == TARGET else TARGET

    @property
    def behind_table(self) -> str:
        return self.target_table if self.behind == TARGET else self.source_table

    @property
    def ahead_table(self) -> str:
        return self.source_table if self.behind == TARGET else self.target_table

    @property
    def in_sync(self) -> bool:
        """True when counts match and no commits are pending"""
        return self.count_difference == 0 and not self.pending_commits

    def summary(self) -> str:
        """Human-readable one-line summary"""
        text = (
            f"Count difference now is (count({self.ahead_table}) - "
            f"count({self.behind_table})) == {self.count_difference}"
        )
        if self.catch_up_record_count is not None:
            text += f". Catch up count is {self.catch_up_record_count}"
        return text

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "source_table": self.source_table,
            "target_table": self.target_table,
            "behind": self.behind,
            "behind_table": self.behind_table,
            "ahead_table": self.ahead_table,
            "source_count": self.source_count,
            "target_count": self.target_count,
            "count_difference": self.count_difference,
            "pending_commits": list(self.pending_commits),
            "catch_up_record_count": self.catch_up_record_count,
            "mode": self.mode.value,
            "partition_limit": self.partition_limit,
            "in_sync": self.in_sync,
            "timestamp": self.timestamp.isoformat(),
        }


class SyncReconciler:
    """
    Reconciles a source table against its synced target

    Usage:
        reconciler = SyncReconciler(row_counter=HiveRowCounter(connect))
        result = reconciler.reconcile(source, target, Mode.COMPLETE)
        print(result.summary())
    """

    def __init__(
        self,
        row_counter: RowCounter,
        catch_up_counter: Callable[[HoodieTable, Sequence[str]], int] = count_new_records,
        parallel_counts: bool = False,
    ):
        """
        Initialize reconciler

        Args:
            row_counter: Counts rows of a table in the query engine
            catch_up_counter: Sums the inserts of a table's pending commits
            parallel_counts: Run the two row counts concurrently
        """
        self.row_counter = row_counter
        self.catch_up_counter = catch_up_counter
        self.parallel_counts = parallel_counts

    def count_rows(
        self,
        source: HoodieTable,
        target: HoodieTable,
        mode: Mode,
        partition_limit: int | None,
    ) -> tuple[int, int]:
        """
        Count both tables as one matched pair

        Returns:
            (source_count, target_count)

        Raises:
            QueryError: If either count fails
        """
        if not self.parallel_counts:
            return (
                self._count(source, SOURCE, mode, partition_limit),
                self._count(target, TARGET, mode, partition_limit),
            )

        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="row-count") as executor:
            source_future = executor.submit(self._count, source, SOURCE, mode, partition_limit)
            target_future = executor.submit(self._count, target, TARGET, mode, partition_limit)
            return source_future.result(), target_future.result()

    def _count(
        self,
        table: HoodieTable,
        side: str,
        mode: Mode,
        partition_limit: int | None,
    ) -> int:
        with trace_operation("count_rows", table=table.name, side=side, mode=mode.value) as span:
            count = self.row_counter.count(table, mode, partition_limit)
            span.set_attribute("row_count", count)
            return count

    def reconcile(
        self,
        source: HoodieTable,
        target: HoodieTable,
        mode: Mode | str = Mode.COMPLETE,
        partition_limit: int | None = None,
    ) -> ReconciliationResult:
        """
        Reconcile source and target

        Args:
            source: Authoritative table
            target: Downstream-synced table
            mode: Complete or latest-partitions counting
            partition_limit: Number of recent partitions (latest-partitions only)

        Returns:
            ReconciliationResult

        Raises:
            ConfigError: If mode or partition limit is invalid
            QueryError: If a row count or catch-up query fails
            MetadataError: If a pending commit has no metadata
        """
        mode = Mode.parse(mode)
        partition_limit = validate_partition_limit(mode, partition_limit)

        log = ContextLogger(__name__, source_table=source.name, target_table=target.name)
        log.info(f"Reconciling {source.name} against {target.name} (mode={mode.value})")

        source_count, target_count = self.count_rows(source, target, mode, partition_limit)

        source_last = source.timeline.last_commit()
        target_last = target.timeline.last_commit()

        # Ties and empty timelines resolve to "source ahead"
        if target.timeline.is_after(target_last, source_last):
            behind, lagging, reference = SOURCE, source, target
            lagging_count, reference_count = source_count, target_count
        else:
            behind, lagging, reference = TARGET, target, source
            lagging_count, reference_count = target_count, source_count

        pending = reference.timeline.commits_since(lagging.timeline.last_commit())

        log.info(
            f"{lagging.name} ({behind}) is behind {reference.name}: "
            f"last commits {lagging.timeline.last_commit()} vs {reference.timeline.last_commit()}, "
            f"{len(pending)} pending commit(s)",
            source_count=source_count,
            target_count=target_count,
        )

        catch_up = None
        if pending:
            with trace_operation(
                "count_catch_up_records",
                table=reference.name,
                pending_commits=len(pending),
            ) as span:
                catch_up = self.catch_up_counter(reference, pending)
                span.set_attribute("catch_up_records", catch_up)

        result = ReconciliationResult(
            source_table=source.name,
            target_table=target.name,
            behind=behind,
            source_count=source_count,
            target_count=target_count,
            count_difference=reference_count - lagging_count,
            pending_commits=pending,
            catch_up_record_count=catch_up,
            mode=mode,
            partition_limit=partition_limit,
        )

        log.info(result.summary())
        return result


def reconcile(
    source: HoodieTable,
    target: HoodieTable,
    mode: Mode | str,
    partition_limit: int | None,
    row_counter: RowCounter,
    catch_up_counter: Callable[[HoodieTable, Sequence[str]], int] = count_new_records,
    parallel_counts: bool = False,
) -> ReconciliationResult:
    """
    Reconcile a source table against its synced target

    Convenience wrapper around SyncReconciler.reconcile().
    """
    reconciler = SyncReconciler(
        row_counter=row_counter,
        catch_up_counter=catch_up_counter,
        parallel_counts=parallel_counts,
    )
    return reconciler.reconcile(source, target, mode, partition_limit)

