"""
In-memory model of a Hudi table's metadata.

Holds the table name, its commit timeline and the per-commit write
statistics read from the table's `.hoodie` folder.
"""

from dataclasses import dataclass, field, replace
from typing import Any

from ..exceptions import MetadataError
from ..timeline import CommitTimeline


@dataclass(frozen=True)
class WriteStat:
    """Write statistics for one file written by a commit."""

    file_id: str
    path: str | None = None
    prev_commit: str | None = None
    num_writes: int = 0
    num_update_writes: int = 0
    num_deletes: int = 0
    total_write_bytes: int = 0
    total_write_errors: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WriteStat":
        """
        Build a write stat from its JSON representation

        Raises:
            MetadataError: If a counter is not an integer
        """
        if not isinstance(data, dict):
            raise MetadataError(f"Write stat must be an object, got {type(data).__name__}")

        counters = {}
        for key, attr in (
            ("numWrites", "num_writes"),
            ("numUpdateWrites", "num_update_writes"),
            ("numDeletes", "num_deletes"),
            ("totalWriteBytes", "total_write_bytes"),
            ("totalWriteErrors", "total_write_errors"),
        ):
            value = data.get(key, 0)
            # bool is an int subclass but never a valid counter
            if isinstance(value, bool) or not isinstance(value, int):
                raise MetadataError(f"Write stat field {key} must be an integer, got {value!r}")
            counters[attr] = value

        return cls(
            file_id=str(data.get("fileId", "")),
            path=data.get("fullPath") or data.get("path"),
            prev_commit=data.get("prevCommit"),
            **counters,
        )


@dataclass(frozen=True)
class CommitMetadata:
    """Write statistics of a single completed commit, grouped by partition path."""

    commit_id: str
    partition_to_write_stats: dict[str, tuple[WriteStat, ...]] = field(default_factory=dict)
    extra_metadata: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, commit_id: str, data: dict[str, Any]) -> "CommitMetadata":
        """
        Build commit metadata from the decoded contents of a `.commit` file

        Raises:
            MetadataError: If the document does not have the expected shape
        """
        if not isinstance(data, dict):
            raise MetadataError(f"Commit {commit_id}: metadata must be a JSON object")

        raw_stats = data.get("partitionToWriteStats")
        if not isinstance(raw_stats, dict):
            raise MetadataError(f"Commit {commit_id}: missing partitionToWriteStats mapping")

        partitions = {}
        for partition, stats in raw_stats.items():
            if not isinstance(stats, list):
                raise MetadataError(
                    f"Commit {commit_id}: write stats for partition {partition} must be a list"
                )
            try:
                partitions[partition] = tuple(WriteStat.from_dict(s) for s in stats)
            except MetadataError as e:
                raise MetadataError(f"Commit {commit_id}, partition {partition}: {e}") from e

        extra = data.get("extraMetadata") or {}
        if not isinstance(extra, dict):
            raise MetadataError(f"Commit {commit_id}: extraMetadata must be an object")

        return cls(
            commit_id=commit_id,
            partition_to_write_stats=partitions,
            extra_metadata={str(k): str(v) for k, v in extra.items()},
        )

    def _all_stats(self):
        for stats in self.partition_to_write_stats.values():
            yield from stats

    def total_records_written(self) -> int:
        return sum(s.num_writes for s in self._all_stats())

    def total_update_records_written(self) -> int:
        return sum(s.num_update_writes for s in self._all_stats())

    def total_records_deleted(self) -> int:
        return sum(s.num_deletes for s in self._all_stats())

    def total_bytes_written(self) -> int:
        return sum(s.total_write_bytes for s in self._all_stats())

    def total_records_inserted(self) -> int:
        """Records this commit inserted: everything written minus the updates"""
        return self.total_records_written() - self.total_update_records_written()

    def partitions(self) -> list[str]:
        return sorted(self.partition_to_write_stats)


@dataclass(frozen=True)
class HoodieTable:
    """
    Snapshot of a table's metadata for the duration of one reconciliation

    Attributes:
        name: Table name (as registered in the query engine)
        timeline: Completed commits
        commit_metadata: Commit id -> write statistics
        base_path: Storage location the metadata was read from
        database: Query-engine database holding the table (None = engine default)
    """

    name: str
    timeline: CommitTimeline = field(default_factory=CommitTimeline)
    commit_metadata: dict[str, CommitMetadata] = field(default_factory=dict)
    base_path: str | None = None
    database: str | None = None

    def in_database(self, database: str | None) -> "HoodieTable":
        """Copy of this table registered under another query-engine database"""
        return replace(self, database=database)

    def insert_count_of(self, commit_id: str) -> int:
        """
        Number of records a commit inserted into this table

        Raises:
            MetadataError: If the commit has no recorded metadata
        """
        metadata = self.commit_metadata.get(commit_id)
        if metadata is None:
            raise MetadataError(f"No commit metadata for {commit_id} in table {self.name}")
        return metadata.total_records_inserted()

    @classmethod
    def from_insert_counts(
        cls,
        name: str,
        insert_counts: dict[str, int],
        database: str | None = None,
    ) -> "HoodieTable":
        """
        Build a table whose commits each inserted a known number of records

        Useful for callers that already know per-commit insert counts and for tests.
        """
        metadata = {
            commit_id: CommitMetadata(
                commit_id=commit_id,
                partition_to_write_stats={
                    "default": (WriteStat(file_id=f"{commit_id}-0", num_writes=count),)
                },
            )
            for commit_id, count in insert_counts.items()
        }
        return cls(
            name=name,
            timeline=CommitTimeline(insert_counts),
            commit_metadata=metadata,
            database=database,
        )
