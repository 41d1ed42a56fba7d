"""
Row counting against the query engine.

This module provides the RowCounter contract consumed by the reconciler,
a HiveServer2 implementation over a DB-API (pyodbc) connection, and an
in-memory implementation for dry runs and tests.
"""

import logging
from collections.abc import Callable
from datetime import date, timedelta
from typing import Any, Protocol

from src.utils.retry import retry_query

from ..exceptions import ConfigError, QueryError
from ..metadata import HoodieTable
from ..modes import Mode, validate_partition_limit
from .quoting import date_literal, quote_hive_identifier, quote_qualified_table

logger = logging.getLogger(__name__)

# Column present in every Hudi-managed table
COMMIT_TIME_FIELD = "_hoodie_commit_time"

DEFAULT_PARTITION_FIELD = "datestr"

# Read through the input format so Hive does not answer from stale table stats
SESSION_SETTINGS = (
    "set hive.input.format=org.apache.hadoop.hive.ql.io.HiveInputFormat",
    "set hive.stats.autogather=false",
)


class RowCounter(Protocol):
    """Counts rows of a table, optionally restricted to its latest partitions."""

    def count(
        self,
        table: HoodieTable,
        mode: Mode,
        partition_limit: int | None = None,
    ) -> int:
        ...


def latest_partitions_window(partition_limit: int, today: date) -> tuple[str, str]:
    """
    Date bounds covering the last `partition_limit` daily partitions

    Returns:
        (start, end) as YYYY-MM-DD strings; start is exclusive, end inclusive
    """
    start = today - timedelta(days=partition_limit)
    return start.isoformat(), today.isoformat()


class HiveRowCounter:
    """
    Counts rows through HiveServer2

    Every count opens its own connection from `connection_factory`, so two
    counts may run concurrently.
    """

    def __init__(
        self,
        connection_factory: Callable[[], Any],
        default_database: str = "default",
        partition_field: str = DEFAULT_PARTITION_FIELD,
        max_retries: int = 2,
        retry_base_delay: float = 1.0,
        today: Callable[[], date] = date.today,
    ):
        """
        Initialize Hive row counter

        Args:
            connection_factory: Callable returning a new DB-API connection
            default_database: Database used for tables without one
            partition_field: Date partition column used by latest-partitions mode
            max_retries: Retries for transient query failures
            retry_base_delay: Initial backoff delay in seconds
            today: Clock used to compute the partition window
        """
        if isinstance(max_retries, bool) or not isinstance(max_retries, int) or max_retries < 0:
            raise ConfigError(f"max_retries must be a non-negative integer, got {max_retries!r}")

        self.connection_factory = connection_factory
        self.default_database = default_database
        self.partition_field = partition_field
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self.today = today

    def build_count_query(
        self,
        table: HoodieTable,
        mode: Mode,
        partition_limit: int | None = None,
    ) -> str:
        """
        Build the count query for a table

        Raises:
            ConfigError: If identifiers are invalid or the partition limit is missing
        """
        mode = Mode.parse(mode)
        limit = validate_partition_limit(mode, partition_limit)
        database = table.database or self.default_database

        try:
            qualified = quote_qualified_table(database, table.name)
            query = (
                f"SELECT COUNT({quote_hive_identifier(COMMIT_TIME_FIELD)}) AS cnt "
                f"FROM {qualified}"
            )
            if limit is not None:
                start, end = latest_partitions_window(limit, self.today())
                field = quote_hive_identifier(self.partition_field)
                query += (
                    f" WHERE {field} > {date_literal(start)}"
                    f" AND {field} <= {date_literal(end)}"
                )
        except ValueError as e:
            raise ConfigError(str(e)) from e

        return query

    def count(
        self,
        table: HoodieTable,
        mode: Mode,
        partition_limit: int | None = None,
    ) -> int:
        """
        Count rows in a table

        Args:
            table: Table to count
            mode: Complete or latest-partitions
            partition_limit: Number of recent daily partitions (latest-partitions only)

        Returns:
            Row count

        Raises:
            ConfigError: If the query cannot be built
            QueryError: If the query fails (after retries)
        """
        query = self.build_count_query(table, mode, partition_limit)
        logger.debug(f"Counting rows of {table.name}: {query}")

        execute = retry_query(
            max_retries=self.max_retries,
            base_delay=self.retry_base_delay,
        )(self._execute_count)

        try:
            count = execute(query)
        except QueryError:
            raise
        except Exception as e:
            raise QueryError(f"Row count query failed for table {table.name}: {e}") from e

        logger.info(f"Total records in {table.name} is {count}")
        return count

    def _execute_count(self, query: str) -> int:
        connection = self.connection_factory()
        try:
            cursor = connection.cursor()
            try:
                for statement in SESSION_SETTINGS:
                    cursor.execute(statement)
                cursor.execute(query)
                row = cursor.fetchone()
            finally:
                cursor.close()
        finally:
            connection.close()

        if row is None:
            raise QueryError(f"Count query returned no rows: {query}")
        return int(row[0])


class StaticRowCounter:
    """
    In-memory row counter

    Counts are keyed by table name, or by (database, table name) when two
    tables share a name. Every call is recorded in `calls`.
    """

    def __init__(self, counts: dict[Any, int]):
        self.counts = dict(counts)
        self.calls: list[tuple[str, Mode, int | None]] = []

    def count(
        self,
        table: HoodieTable,
        mode: Mode,
        partition_limit: int | None = None,
    ) -> int:
        mode = Mode.parse(mode)
        limit = validate_partition_limit(mode, partition_limit)
        self.calls.append((table.name, mode, limit))

        for key in ((table.database, table.name), table.name):
            if key in self.counts:
                return self.counts[key]
        raise QueryError(f"Table not found: {table.name}")


def hive_connection_factory(
    host: str,
    port: int = 10000,
    username: str = "",
    password: str = "",
    driver: str = "Cloudera ODBC Driver for Apache Hive",
    timeout: int = 0,
) -> Callable[[], Any]:
    """
    Create a factory of pyodbc connections to HiveServer2

    Args:
        host: HiveServer2 host
        port: HiveServer2 port
        username: Login user (empty for no authentication)
        password: Login password
        driver: Installed Hive ODBC driver name
        timeout: Login timeout in seconds (0 = driver default)

    Returns:
        Zero-argument callable opening a new autocommit connection
    """
    auth_mech = 3 if username else 0
    connection_string = (
        f"DRIVER={{{driver}}};"
        f"HOST={host};"
        f"PORT={port};"
        f"AuthMech={auth_mech};"
        f"UID={username};"
        f"PWD={password};"
    )

    def connect() -> Any:
        import pyodbc

        # Hive has no transactions; the driver rejects manual commit mode
        return pyodbc.connect(connection_string, autocommit=True, timeout=timeout)

    return connect
