"""
Pytest configuration and fixtures for sync validation tests.
Provides table builders and on-disk `.hoodie` folders.
"""

import json
import os
from pathlib import Path

import pytest

from src.sync_validation.metadata import HoodieTable


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "property: mark test as property-based test")


@pytest.fixture(autouse=True)
def set_test_env_vars() -> None:
    """Set default test environment variables if not already set."""
    defaults = {
        "HIVE_HOST": "localhost",
        "HIVE_PORT": "10000",
        "HIVE_USER": "hive",
        "HIVE_PASSWORD": "hive_test_password",
        "VAULT_ADDR": "http://localhost:8200",
        "VAULT_TOKEN": "dev-root-token",
    }

    for key, value in defaults.items():
        if key not in os.environ:
            os.environ[key] = value


@pytest.fixture
def make_table():
    """Factory for tables whose commits inserted known record counts."""

    def _make(name: str, insert_counts: dict[str, int] | None = None, database: str | None = None):
        return HoodieTable.from_insert_counts(name, insert_counts or {}, database=database)

    return _make


def write_commit(
    meta_dir: Path,
    commit_id: str,
    inserts: int,
    updates: int = 0,
    partition: str = "2020/01/01",
) -> Path:
    """Write a `<commit_id>.commit` file with a single write stat."""
    commit_file = meta_dir / f"{commit_id}.commit"
    commit_file.write_text(json.dumps({
        "partitionToWriteStats": {
            partition: [{
                "fileId": f"file-{commit_id}",
                "fullPath": f"{partition}/file-{commit_id}.parquet",
                "prevCommit": "null",
                "numWrites": inserts + updates,
                "numUpdateWrites": updates,
                "numDeletes": 0,
                "totalWriteBytes": 1024,
                "totalWriteErrors": 0,
            }]
        },
        "extraMetadata": {},
    }))
    return commit_file


@pytest.fixture
def hoodie_table_dir(tmp_path: Path):
    """
    Factory writing a table's `.hoodie` folder under tmp_path.

    `commits` maps commit id -> records inserted.
    """

    def _write(name: str, commits: dict[str, int] | None = None, inflight: tuple[str, ...] = ()) -> Path:
        base = tmp_path / name
        meta_dir = base / ".hoodie"
        meta_dir.mkdir(parents=True)
        (meta_dir / "hoodie.properties").write_text(
            "#Properties saved on Wed Jan 01 00:00:00 UTC 2020\n"
            f"hoodie.table.name={name}\n"
            "hoodie.table.type=COPY_ON_WRITE\n"
        )
        for commit_id, inserts in (commits or {}).items():
            write_commit(meta_dir, commit_id, inserts)
        for commit_id in inflight:
            (meta_dir / f"{commit_id}.inflight").write_text("")
        return base

    return _write
