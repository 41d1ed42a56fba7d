"""
Command-line argument parser configuration.

This module sets up the argument parser for the sync-validate CLI tool,
defining its commands and their options.
"""

import argparse

DEFAULT_SOURCE_DB = "rawdata"
DEFAULT_TARGET_DB = "dwh_hoodie"
DEFAULT_PARTITION_COUNT = 5


def non_negative_int(value: str) -> int:
    """argparse type for counts that may be zero but not negative"""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="sync-validate",
        description="Validate that a synced Hudi table has caught up with its source",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Compare full row counts
  sync-validate validate --source-path /data/raw/trips --target-path /data/dwh/trips \\
      --hive-host hive.example.com --hive-user etl

  # Cheaper check over the last 5 daily partitions
  sync-validate validate --source-path /data/raw/trips --target-path /data/dwh/trips \\
      --mode latest-partitions --partition-count 5

  # Credentials from Vault, JSON report, metrics pushed to a Pushgateway
  sync-validate validate --source-path /data/raw/trips --target-path /data/dwh/trips \\
      --use-vault --output report.json --pushgateway pushgateway:9091
        """
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default=None,
        help='Logging level (default: LOG_LEVEL or INFO)'
    )
    parser.add_argument(
        '--log-json',
        action='store_true',
        help='Emit logs as JSON'
    )
    parser.add_argument(
        '--log-file',
        help='Also write logs to this file (rotated)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # ========== Validate command ==========
    validate_parser = subparsers.add_parser(
        'validate',
        help='Validate the sync by counting the number of records'
    )
    validate_parser.add_argument(
        '--source-path',
        required=True,
        help='Base path of the source table'
    )
    validate_parser.add_argument(
        '--target-path',
        required=True,
        help='Base path of the synced target table'
    )
    validate_parser.add_argument(
        '--mode',
        default='complete',
        help='Check mode: complete or latest-partitions (default: complete)'
    )
    validate_parser.add_argument(
        '--source-db',
        default=DEFAULT_SOURCE_DB,
        help=f'Source database (default: {DEFAULT_SOURCE_DB})'
    )
    validate_parser.add_argument(
        '--target-db',
        default=DEFAULT_TARGET_DB,
        help=f'Target database (default: {DEFAULT_TARGET_DB})'
    )
    validate_parser.add_argument(
        '--partition-count',
        type=int,
        default=DEFAULT_PARTITION_COUNT,
        help=f'Number of recent partitions to validate (default: {DEFAULT_PARTITION_COUNT})'
    )
    validate_parser.add_argument(
        '--partition-field',
        default='datestr',
        help='Date partition column used by latest-partitions mode (default: datestr)'
    )
    validate_parser.add_argument(
        '--query-retries',
        type=non_negative_int,
        default=2,
        help='Retries for transient query failures (default: 2)'
    )
    validate_parser.add_argument(
        '--parallel-counts',
        action='store_true',
        help='Count source and target concurrently'
    )
    validate_parser.add_argument(
        '--format',
        choices=['console', 'json'],
        default='console',
        help='Output format (default: console)'
    )
    validate_parser.add_argument(
        '--output',
        help='Also write a JSON report to this path'
    )
    validate_parser.add_argument(
        '--fail-on-lag',
        action='store_true',
        help='Exit with status 1 when the tables are not in sync'
    )
    validate_parser.add_argument(
        '--pushgateway',
        help='Prometheus Pushgateway address to push run metrics to'
    )
    validate_parser.add_argument(
        '--otlp-endpoint',
        help='OTLP collector endpoint for traces (e.g. localhost:4317)'
    )
    # Query engine connection options
    validate_parser.add_argument(
        '--use-vault',
        action='store_true',
        help='Fetch Hive credentials from HashiCorp Vault'
    )
    validate_parser.add_argument(
        '--vault-secret',
        default='hive',
        help='Secret name under secret/hive (default: hive)'
    )
    validate_parser.add_argument('--hive-host', help='HiveServer2 host')
    validate_parser.add_argument('--hive-port', type=int, help='HiveServer2 port')
    validate_parser.add_argument('--hive-user', help='Hive username')
    validate_parser.add_argument('--hive-password', help='Hive password')
    validate_parser.add_argument('--hive-driver', help='Hive ODBC driver name')

    return parser
