"""
Commit timeline for a Hudi table.

A timeline is the ordered, immutable history of a table's completed commits.
Commit ids are fixed-width timestamps (e.g. "20200101000000"), so string
order is chronological order.
"""

from collections.abc import Iterable, Iterator

# Stands in for "no commit yet"; precedes every real commit id
EMPTY_COMMIT = "0"


def is_commit_after(commit1: str, commit2: str) -> bool:
    """
    Check whether commit1 is strictly later than commit2

    Args:
        commit1: Commit id (or EMPTY_COMMIT)
        commit2: Commit id (or EMPTY_COMMIT)

    Returns:
        True if commit1 denotes a later commit than commit2
    """
    if commit1 == EMPTY_COMMIT:
        return False
    if commit2 == EMPTY_COMMIT:
        return True
    return commit1 > commit2


class CommitTimeline:
    """
    Ordered view of completed commit ids

    Ids are sorted and de-duplicated on construction. The timeline is never
    mutated afterwards.
    """

    def __init__(self, commits: Iterable[str] = ()):
        self._commits: tuple[str, ...] = tuple(sorted(set(commits)))

    @property
    def commits(self) -> tuple[str, ...]:
        return self._commits

    def is_empty(self) -> bool:
        return not self._commits

    def last_commit(self) -> str:
        """Latest completed commit id, or EMPTY_COMMIT for an empty timeline"""
        if not self._commits:
            return EMPTY_COMMIT
        return self._commits[-1]

    def is_after(self, commit1: str, commit2: str) -> bool:
        """True iff commit1 is strictly later than commit2"""
        return is_commit_after(commit1, commit2)

    def commits_since(self, ts: str) -> tuple[str, ...]:
        """
        Get commits strictly after a given commit id

        Args:
            ts: Commit id to start after (exclusive); EMPTY_COMMIT means
                "from the beginning"

        Returns:
            Commit ids after ts in ascending order (empty tuple if none)
        """
        return tuple(c for c in self._commits if is_commit_after(c, ts))

    def __len__(self) -> int:
        return len(self._commits)

    def __iter__(self) -> Iterator[str]:
        return iter(self._commits)

    def __contains__(self, commit: object) -> bool:
        return commit in self._commits

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CommitTimeline):
            return NotImplemented
        return self._commits == other._commits

    def __hash__(self) -> int:
        return hash(self._commits)

    def __repr__(self) -> str:
        return f"CommitTimeline(commits={len(self._commits)}, last={self.last_commit()!r})"
