"""
Unit tests for catch-up record counting
"""

import pytest

from src.sync_validation.compare import count_new_records
from src.sync_validation.exceptions import MetadataError


class TestCountNewRecords:
    """Test count_new_records"""

    def test_sums_inserts_of_given_commits(self, make_table):
        table = make_table("trips", {"1": 100, "2": 50, "3": 25})

        assert count_new_records(table, ["1", "2", "3"]) == 175

    def test_only_given_commits_are_counted(self, make_table):
        table = make_table("trips", {"1": 100, "2": 50, "3": 25})

        assert count_new_records(table, ("2", "3")) == 75

    def test_empty_sequence_is_zero(self, make_table):
        assert count_new_records(make_table("trips", {"1": 100}), []) == 0

    def test_updates_are_excluded(self, hoodie_table_dir):
        """Commit files written with updates contribute only their inserts"""
        from src.sync_validation.metadata import load_table

        base = hoodie_table_dir("trips")
        meta_dir = base / ".hoodie"
        (meta_dir / "20200101000000.commit").write_text(
            '{"partitionToWriteStats": {"2020/01/01": ['
            '{"fileId": "a", "numWrites": 60, "numUpdateWrites": 20},'
            '{"fileId": "b", "numWrites": 15, "numUpdateWrites": 15}]}}'
        )

        table = load_table(base)

        assert count_new_records(table, ["20200101000000"]) == 40

    def test_missing_commit_metadata_raises(self, make_table):
        table = make_table("trips", {"1": 100})

        with pytest.raises(MetadataError, match="No commit metadata for 2"):
            count_new_records(table, ["1", "2"])
