"""
Utility modules for sync validation

Provides:
- logging: console/JSON logging setup and ContextLogger
- metrics: Prometheus metrics and Pushgateway publishing
- tracing: OpenTelemetry spans
- retry: backoff for transient query failures
- vault_client: HashiCorp Vault credentials
"""

__version__ = "1.0.0"
__all__ = ["logging", "metrics", "tracing", "retry", "vault_client"]
