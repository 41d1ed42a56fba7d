"""
Catch-up record counting from commit metadata.

A raw count difference mixes deletes, updates and genuine inserts. The
catch-up count isolates the inserts recorded by the commits a lagging table
has not absorbed yet, i.e. the work remaining to replicate.
"""

import logging
from collections.abc import Sequence

from ..metadata import HoodieTable

logger = logging.getLogger(__name__)


def count_new_records(table: HoodieTable, commit_ids: Sequence[str]) -> int:
    """
    Sum the records inserted by the given commits of a table

    Uses the insert counts recorded at commit time, not a live row count,
    so later compaction or deletion does not change the result.

    Args:
        table: Table whose commit metadata is read
        commit_ids: Commits to sum over (0 for an empty sequence)

    Returns:
        Total records inserted by those commits

    Raises:
        MetadataError: If a commit has no recorded metadata
    """
    total = 0
    for commit_id in commit_ids:
        inserted = table.insert_count_of(commit_id)
        logger.debug(f"Commit {commit_id} of {table.name} inserted {inserted} record(s)")
        total += inserted
    return total
