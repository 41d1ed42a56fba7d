"""
CLI command implementations.
"""

import argparse
import logging
import sys
import time

from prometheus_client import CollectorRegistry

from src.utils.metrics import SyncValidationMetrics, push_metrics
from src.utils.tracing import initialize_tracing, shutdown_tracing

from ..compare import HiveRowCounter, hive_connection_factory
from ..exceptions import SyncValidationError
from ..metadata import MetadataLoader
from ..reconciler import SyncReconciler
from ..report import export_report_json, format_report_console, format_report_json
from .credentials import get_hive_config

logger = logging.getLogger(__name__)


def cmd_validate(args: argparse.Namespace) -> None:
    """
    Validate a synced table against its source and print the result

    Exit status is 1 when validation fails, or when the tables are not in
    sync and --fail-on-lag is set; 0 otherwise.

    Args:
        args: Parsed command-line arguments
    """
    logger.info("Starting sync validation")

    if args.otlp_endpoint:
        initialize_tracing(otlp_endpoint=args.otlp_endpoint)

    registry = CollectorRegistry()
    metrics = SyncValidationMetrics(registry=registry)

    hive_config = get_hive_config(args)

    source_name, target_name = args.source_path, args.target_path
    start = time.monotonic()

    try:
        loader = MetadataLoader()
        source = loader.load(args.source_path).in_database(args.source_db)
        target = loader.load(args.target_path).in_database(args.target_db)
        source_name, target_name = source.name, target.name

        row_counter = HiveRowCounter(
            hive_connection_factory(**hive_config),
            partition_field=args.partition_field,
            max_retries=args.query_retries,
        )
        reconciler = SyncReconciler(row_counter, parallel_counts=args.parallel_counts)
        result = reconciler.reconcile(source, target, args.mode, args.partition_count)

    except SyncValidationError as e:
        logger.error(f"Sync validation failed: {e}")
        metrics.record_run(source_name, target_name, success=False, duration=time.monotonic() - start)
        _finish(args, registry)
        sys.exit(1)

    metrics.record_run(source_name, target_name, success=True, duration=time.monotonic() - start)
    metrics.record_result(result)

    if args.format == "json":
        print(format_report_json(result))
    else:
        print(format_report_console(result))

    if args.output:
        export_report_json(result, args.output)
        logger.info(f"Report saved to {args.output}")

    _finish(args, registry)

    if args.fail_on_lag and not result.in_sync:
        logger.warning("Target is not in sync with source")
        sys.exit(1)

    logger.info("Sync validation completed")
    sys.exit(0)


def _finish(args: argparse.Namespace, registry: CollectorRegistry) -> None:
    if args.pushgateway:
        push_metrics(args.pushgateway, registry=registry)
    shutdown_tracing()
