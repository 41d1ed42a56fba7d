"""
Structured logging configuration for sync validation

Usage:
    from src.utils.logging import setup_logging, get_logger

    # Setup logging (call once at application startup)
    setup_logging(level="INFO", json_format=True)

    logger = get_logger(__name__)
    logger.info("Counted rows", extra={"table_name": "trips", "row_count": 1000})
"""

from .config import configure_from_env, get_logger, setup_logging
from .formatters import ConsoleFormatter, JSONFormatter
from .handlers import ContextLogger

__all__ = [
    "setup_logging",
    "get_logger",
    "configure_from_env",
    "JSONFormatter",
    "ConsoleFormatter",
    "ContextLogger",
]
