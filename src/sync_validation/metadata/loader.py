"""
Load a Hudi table's metadata from its `.hoodie` folder.

Layout read by the loader:

    <base_path>/.hoodie/hoodie.properties   table properties (hoodie.table.name)
    <base_path>/.hoodie/<commit_id>.commit  JSON metadata of a completed commit
    <base_path>/.hoodie/<commit_id>.inflight  commit still in progress (ignored)

Metadata is loaded eagerly: a load either returns a complete HoodieTable or
raises MetadataError.
"""

import json
import logging
import re
from pathlib import Path

from ..exceptions import MetadataError
from ..timeline import CommitTimeline
from .table import CommitMetadata, HoodieTable

logger = logging.getLogger(__name__)

METAFOLDER_NAME = ".hoodie"
PROPERTIES_FILE = "hoodie.properties"
TABLE_NAME_PROPERTY = "hoodie.table.name"
COMMIT_EXTENSION = ".commit"

# Commit ids are timestamps, e.g. 20200101000000
VALID_COMMIT_ID_PATTERN = re.compile(r'^[0-9]+$')


def parse_properties(text: str) -> dict[str, str]:
    """
    Parse Java-style properties text

    Supports `key=value` and `key: value` lines; lines starting with # or !
    are comments.

    Args:
        text: Properties file contents

    Returns:
        Dictionary of property name to value
    """
    properties = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line[0] in "#!":
            continue
        match = re.match(r'^([^=:\s]+)\s*[=:]\s*(.*)$', line)
        if match:
            properties[match.group(1)] = match.group(2).strip()
        else:
            properties[line] = ""
    return properties


class MetadataLoader:
    """
    Reads table metadata from local storage

    Usage:
        loader = MetadataLoader()
        table = loader.load("/data/hoodie/trips")
    """

    def __init__(self, metafolder_name: str = METAFOLDER_NAME):
        self.metafolder_name = metafolder_name

    def load(self, base_path: str | Path) -> HoodieTable:
        """
        Load name, timeline and commit metadata of the table at base_path

        Args:
            base_path: Table base directory

        Returns:
            Fully loaded HoodieTable

        Raises:
            MetadataError: If the metadata folder is missing, unreadable or corrupt
        """
        base = Path(base_path)
        meta_dir = base / self.metafolder_name

        if not meta_dir.is_dir():
            raise MetadataError(f"No {self.metafolder_name} folder found under {base}")

        table_name = self._read_table_name(meta_dir)

        commit_metadata = {}
        for commit_file in sorted(meta_dir.glob(f"*{COMMIT_EXTENSION}")):
            commit_id = commit_file.name[: -len(COMMIT_EXTENSION)]
            if not VALID_COMMIT_ID_PATTERN.match(commit_id):
                raise MetadataError(f"Invalid commit id {commit_id!r} in {meta_dir}")
            commit_metadata[commit_id] = self._read_commit(commit_file, commit_id)

        # String order is time order only when every id has the same width
        widths = sorted({len(c) for c in commit_metadata})
        if len(widths) > 1:
            raise MetadataError(
                f"Commit ids of mixed width {widths} in {meta_dir}; timeline order would be wrong"
            )

        timeline = CommitTimeline(commit_metadata)

        logger.info(
            f"Loaded metadata for table {table_name}: "
            f"{len(timeline)} commit(s), last commit {timeline.last_commit()}"
        )

        return HoodieTable(
            name=table_name,
            timeline=timeline,
            commit_metadata=commit_metadata,
            base_path=str(base),
        )

    def _read_table_name(self, meta_dir: Path) -> str:
        properties_file = meta_dir / PROPERTIES_FILE
        try:
            properties = parse_properties(properties_file.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise MetadataError(f"Cannot read {properties_file}: {e}") from e

        table_name = properties.get(TABLE_NAME_PROPERTY)
        if not table_name:
            raise MetadataError(f"{TABLE_NAME_PROPERTY} is not set in {properties_file}")
        return table_name

    def _read_commit(self, commit_file: Path, commit_id: str) -> CommitMetadata:
        try:
            with open(commit_file, encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise MetadataError(f"Cannot read commit file {commit_file}: {e}") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MetadataError(f"Corrupt commit file {commit_file}: {e}") from e

        logger.debug(f"Read commit metadata {commit_id} from {commit_file}")
        return CommitMetadata.from_dict(commit_id, data)


def load_table(base_path: str | Path) -> HoodieTable:
    """Convenience wrapper around MetadataLoader().load()"""
    return MetadataLoader().load(base_path)
