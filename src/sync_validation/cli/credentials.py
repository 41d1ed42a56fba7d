"""
Credential management for the CLI.

Resolves HiveServer2 connection settings from Vault, command-line options
or environment variables.
"""

import argparse
import logging
import os
import sys
from typing import Any

from src.utils.vault_client import VaultClient

logger = logging.getLogger(__name__)

DEFAULT_HIVE_DRIVER = "Cloudera ODBC Driver for Apache Hive"


def get_hive_config(args: argparse.Namespace) -> dict[str, Any]:
    """
    Get HiveServer2 connection settings from Vault or args/environment

    Args:
        args: Parsed command-line arguments

    Returns:
        Dictionary with host, port, username, password, driver
    """
    driver = getattr(args, 'hive_driver', None) or os.getenv("HIVE_ODBC_DRIVER", DEFAULT_HIVE_DRIVER)

    if args.use_vault:
        try:
            creds = VaultClient().get_hive_credentials(getattr(args, 'vault_secret', 'hive'))
        except Exception as e:
            logger.error(f"Failed to fetch credentials from Vault: {e}")
            sys.exit(1)

        logger.info("Successfully fetched credentials from Vault")
        return {
            "host": creds["host"],
            "port": creds["port"],
            "username": creds["username"],
            "password": creds["password"],
            "driver": driver,
        }

    config = {
        "host": args.hive_host or os.getenv("HIVE_HOST", "localhost"),
        "port": int(args.hive_port or os.getenv("HIVE_PORT", "10000")),
        "username": args.hive_user or os.getenv("HIVE_USER", ""),
        "password": args.hive_password or os.getenv("HIVE_PASSWORD"),
        "driver": driver,
    }

    if config["password"] is None:
        logger.error("Hive password not provided (use --hive-password or HIVE_PASSWORD)")
        sys.exit(1)

    return config
