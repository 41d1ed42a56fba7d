"""
Reconciliation mode enumeration.

Replaces the free-form mode string of the command line with a closed set of
values; unrecognized strings are rejected instead of silently counting nothing.
"""

from enum import Enum

from .exceptions import ConfigError


class Mode(str, Enum):
    """
    How rows are counted on both tables.

    Inherits from str for JSON serialization compatibility and
    easy comparison with string values.
    """

    COMPLETE = "complete"
    LATEST_PARTITIONS = "latest-partitions"

    @classmethod
    def parse(cls, value: "str | Mode") -> "Mode":
        """
        Parse a mode from user input.

        Accepts the enum values, and `latestPartitions` as an alias of
        `latest-partitions`. Matching is case-insensitive.

        Raises:
            ConfigError: If the value is not a known mode
        """
        if isinstance(value, cls):
            return value

        normalized = str(value).strip().lower().replace("_", "-")
        if normalized == "latestpartitions":
            normalized = cls.LATEST_PARTITIONS.value

        for mode in cls:
            if mode.value == normalized:
                return mode

        raise ConfigError(
            f"Unknown reconciliation mode: {value!r}. "
            f"Must be one of: {', '.join(m.value for m in cls)}"
        )

    @property
    def restricts_partitions(self) -> bool:
        return self is Mode.LATEST_PARTITIONS


def validate_partition_limit(mode: Mode, partition_limit: int | None) -> int | None:
    """
    Check the partition limit against the mode

    Returns:
        The limit to use for counting (None in complete mode)

    Raises:
        ConfigError: If latest-partitions mode has no positive limit
    """
    if not mode.restricts_partitions:
        return None
    if isinstance(partition_limit, bool) or not isinstance(partition_limit, int) or partition_limit <= 0:
        raise ConfigError(
            f"Mode {mode.value} requires a positive partition limit, got {partition_limit!r}"
        )
    return partition_limit
