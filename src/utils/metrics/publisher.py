"""
Metrics publishing to a Prometheus Pushgateway.

A validation run is a short-lived batch job, so its metrics are pushed
rather than scraped.
"""

import logging

from prometheus_client import REGISTRY, CollectorRegistry, push_to_gateway

logger = logging.getLogger(__name__)

DEFAULT_JOB_NAME = "sync_validate"


def push_metrics(
    gateway: str,
    registry: CollectorRegistry | None = None,
    job: str = DEFAULT_JOB_NAME,
    grouping_key: dict[str, str] | None = None,
    timeout: float = 10.0,
) -> bool:
    """
    Push all metrics of a registry to a Pushgateway

    Args:
        gateway: Pushgateway address (e.g. "pushgateway:9091")
        registry: Registry to push (default: global REGISTRY)
        job: Job label
        grouping_key: Extra grouping labels
        timeout: HTTP timeout in seconds

    Returns:
        True if the push succeeded. A failed push is logged and does not
        fail the validation run.
    """
    try:
        push_to_gateway(
            gateway,
            job=job,
            registry=registry or REGISTRY,
            grouping_key=grouping_key,
            timeout=timeout,
        )
    except OSError as e:
        logger.error(f"Failed to push metrics to {gateway}: {e}")
        return False

    logger.info(f"Pushed metrics to {gateway} (job={job})")
    return True
