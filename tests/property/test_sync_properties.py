"""
Property-based tests for sync-lag reconciliation.

Tests properties related to:
- Commit timeline ordering and commits_since
- Catch-up counts as sums of per-commit inserts
- Determinism of the lag decision
"""

import pytest
from hypothesis import assume, given, settings
from hypothesis import strategies as st

from src.sync_validation.compare import StaticRowCounter, count_new_records
from src.sync_validation.metadata import HoodieTable
from src.sync_validation.modes import Mode
from src.sync_validation.reconciler import SyncReconciler
from src.sync_validation.timeline import EMPTY_COMMIT, CommitTimeline, is_commit_after

pytestmark = pytest.mark.property

# Commit ids are fixed-width timestamps, so string order is time order
commit_ids = st.integers(min_value=20200101000000, max_value=20301231235959).map(str)

insert_counts = st.dictionaries(commit_ids, st.integers(min_value=0, max_value=10**6), max_size=20)


@given(commits=st.lists(commit_ids, max_size=30), ts=commit_ids)
def test_commits_since_is_ordered_and_strictly_after(commits, ts):
    """Every returned commit is after ts, in ascending order."""
    timeline = CommitTimeline(commits)

    pending = timeline.commits_since(ts)

    assert list(pending) == sorted(pending)
    assert all(is_commit_after(c, ts) for c in pending)
    assert set(pending) == {c for c in commits if c > ts}


@given(commits=st.lists(commit_ids, max_size=30), ts=commit_ids)
def test_commits_since_is_idempotent(commits, ts):
    timeline = CommitTimeline(commits)

    assert timeline.commits_since(ts) == timeline.commits_since(ts)


@given(commits=st.lists(commit_ids, max_size=30))
def test_nothing_is_after_last_commit(commits):
    timeline = CommitTimeline(commits)

    assert timeline.commits_since(timeline.last_commit()) == ()


@given(commit=commit_ids)
def test_sentinel_is_never_after(commit):
    assert not is_commit_after(EMPTY_COMMIT, commit)
    assert is_commit_after(commit, EMPTY_COMMIT)


@given(counts=insert_counts, data=st.data())
def test_catch_up_count_is_sum_of_inserts(counts, data):
    """The catch-up count is the plain sum over the chosen commits."""
    table = HoodieTable.from_insert_counts("trips", counts)
    chosen = data.draw(st.lists(st.sampled_from(sorted(counts)), unique=True) if counts else st.just([]))

    assert count_new_records(table, chosen) == sum(counts[c] for c in chosen)


@given(
    source_counts=insert_counts,
    target_counts=insert_counts,
    source_rows=st.integers(min_value=0, max_value=10**9),
    target_rows=st.integers(min_value=0, max_value=10**9),
)
@settings(max_examples=50)
def test_lag_decision_is_deterministic(source_counts, target_counts, source_rows, target_rows):
    """Same inputs give the same result, and the difference is ahead - behind."""
    source = HoodieTable.from_insert_counts("src", source_counts)
    target = HoodieTable.from_insert_counts("dst", target_counts)
    reconciler = SyncReconciler(StaticRowCounter({"src": source_rows, "dst": target_rows}))

    first = reconciler.reconcile(source, target, Mode.COMPLETE)
    second = reconciler.reconcile(source, target, Mode.COMPLETE)

    assert first.to_dict() | {"timestamp": None} == second.to_dict() | {"timestamp": None}
    if first.behind == "target":
        assert first.count_difference == source_rows - target_rows
        assert first.pending_commits == source.timeline.commits_since(target.timeline.last_commit())
    else:
        assert first.count_difference == target_rows - source_rows
        assert first.pending_commits == target.timeline.commits_since(source.timeline.last_commit())
    assert (first.catch_up_record_count is None) == (not first.pending_commits)


@given(shared=insert_counts)
def test_equal_last_commits_have_nothing_pending(shared):
    assume(shared)
    source = HoodieTable.from_insert_counts("src", shared)
    target = HoodieTable.from_insert_counts("dst", shared)
    reconciler = SyncReconciler(StaticRowCounter({"src": 1, "dst": 1}))

    result = reconciler.reconcile(source, target, Mode.COMPLETE)

    assert result.behind == "target"
    assert result.pending_commits == ()
    assert result.catch_up_record_count is None
