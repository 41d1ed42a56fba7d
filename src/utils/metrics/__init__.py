"""
Custom metrics publishing to Prometheus

Usage:
    from prometheus_client import CollectorRegistry
    from src.utils.metrics import SyncValidationMetrics, push_metrics

    registry = CollectorRegistry()
    metrics = SyncValidationMetrics(registry=registry)
    metrics.record_run("trips", "trips_synced", success=True, duration=12.5)
    push_metrics("pushgateway:9091", registry=registry)
"""

from .publisher import push_metrics
from .sync import SyncValidationMetrics

__all__ = [
    "SyncValidationMetrics",
    "push_metrics",
]
