"""
HiveQL identifier quoting for SQL injection protection.

Database, table and column names are interpolated into count queries, so
they are validated against a strict pattern and quoted with backticks.
"""

import re

# Strict ASCII-only pattern for Hive identifiers
VALID_IDENTIFIER_PATTERN = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_]*$')

# Partition bounds are generated dates, never user input
VALID_DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def quote_hive_identifier(identifier: str) -> str:
    """
    Quote a single Hive identifier with backticks

    Args:
        identifier: Database, table or column name

    Returns:
        Backtick-quoted identifier

    Raises:
        ValueError: If identifier format is invalid
    """
    if not isinstance(identifier, str) or not VALID_IDENTIFIER_PATTERN.match(identifier):
        raise ValueError(f"Invalid identifier format: {identifier!r}")
    return f"`{identifier}`"


def quote_qualified_table(database: str, table: str) -> str:
    """
    Quote a database-qualified table name, e.g. `rawdata`.`trips`

    Raises:
        ValueError: If either part is invalid
    """
    return f"{quote_hive_identifier(database)}.{quote_hive_identifier(table)}"


def date_literal(value: str) -> str:
    """
    Render a YYYY-MM-DD date as a quoted string literal

    Raises:
        ValueError: If value is not a date string
    """
    if not VALID_DATE_PATTERN.match(value):
        raise ValueError(f"Invalid date literal: {value!r}")
    return f"'{value}'"
