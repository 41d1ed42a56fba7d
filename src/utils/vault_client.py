"""
HashiCorp Vault client for fetching query-engine credentials

Reads secrets from the KV v2 secrets engine over the Vault HTTP API.
"""

import logging
import os
import re
from typing import Any

import requests

logger = logging.getLogger(__name__)

# Only alphanumeric characters, slashes, underscores and hyphens
VALID_SECRET_PATH_PATTERN = re.compile(r'^[a-zA-Z0-9/_-]+$')
VALID_SECRET_NAME_PATTERN = re.compile(r'^[a-zA-Z0-9_-]+$')

HIVE_REQUIRED_FIELDS = ("host", "username", "password")
DEFAULT_HIVE_PORT = 10000


class VaultClient:
    """
    HashiCorp Vault client for secrets management
    """

    def __init__(
        self,
        vault_addr: str | None = None,
        vault_token: str | None = None,
        namespace: str | None = None,
        timeout: float = 10.0,
    ):
        """
        Initialize Vault client

        Args:
            vault_addr: Vault server address (default: VAULT_ADDR env var)
            vault_token: Vault authentication token (default: VAULT_TOKEN env var)
            namespace: Vault namespace (Vault Enterprise only)
            timeout: HTTP timeout in seconds

        Raises:
            ValueError: If vault_addr or vault_token are not provided
        """
        vault_addr = vault_addr or os.getenv("VAULT_ADDR")
        self.vault_token = vault_token or os.getenv("VAULT_TOKEN")
        self.namespace = namespace
        self.timeout = timeout

        if not vault_addr:
            raise ValueError(
                "Vault address not provided. Set VAULT_ADDR environment variable "
                "or pass vault_addr parameter."
            )
        if not self.vault_token:
            raise ValueError(
                "Vault token not provided. Set VAULT_TOKEN environment variable "
                "or pass vault_token parameter."
            )

        self.vault_addr = vault_addr.rstrip("/")
        self.headers = {"X-Vault-Token": self.vault_token}
        if self.namespace:
            self.headers["X-Vault-Namespace"] = self.namespace

        logger.debug(f"Initialized Vault client for {self.vault_addr}")

    @staticmethod
    def kv2_data_path(secret_path: str) -> str:
        """
        Translate "mount/path" into the KV v2 API path "mount/data/path"

        Raises:
            ValueError: If the path is empty or contains unsafe characters
        """
        if not secret_path or not isinstance(secret_path, str):
            raise ValueError("secret_path must be a non-empty string")
        if '..' in secret_path or secret_path.startswith('/'):
            raise ValueError(
                f"Invalid secret_path: {secret_path}. "
                "Path traversal attempts are not allowed."
            )
        if not VALID_SECRET_PATH_PATTERN.match(secret_path):
            raise ValueError(
                f"Invalid secret_path: {secret_path}. "
                "Only alphanumeric characters, slashes, underscores, and hyphens are allowed."
            )

        if "/data/" in secret_path:
            return secret_path
        mount, _, rest = secret_path.partition("/")
        return f"{mount}/data/{rest}" if rest else f"{mount}/data"

    def get_secret(self, secret_path: str) -> dict[str, Any]:
        """
        Fetch secret data from the KV v2 secrets engine

        Args:
            secret_path: Path to secret (e.g., "secret/hive/prod")

        Returns:
            Dictionary containing secret data

        Raises:
            ValueError: If secret_path is invalid or the secret is missing/empty
            requests.RequestException: If the Vault request fails
        """
        api_path = self.kv2_data_path(secret_path)
        url = f"{self.vault_addr}/v1/{api_path}"

        logger.debug(f"Fetching secret from: {url}")
        response = requests.get(url, headers=self.headers, timeout=self.timeout)

        if response.status_code == 404:
            raise ValueError(f"Secret not found at path: {api_path}")
        response.raise_for_status()

        secret_data = response.json().get("data", {}).get("data", {})
        if not secret_data:
            raise ValueError(f"No data found in secret at path: {api_path}")

        return secret_data

    def get_hive_credentials(self, name: str = "hive") -> dict[str, Any]:
        """
        Fetch HiveServer2 credentials stored at secret/hive/<name>

        Args:
            name: Secret name under secret/hive

        Returns:
            Dictionary with host, port, username, password

        Raises:
            ValueError: If name is invalid or required fields are missing
        """
        if not name or not VALID_SECRET_NAME_PATTERN.match(name):
            raise ValueError(
                f"Invalid secret name: {name!r}. "
                "Only alphanumeric characters, underscores, and hyphens are allowed."
            )

        secret_data = dict(self.get_secret(f"secret/hive/{name}"))

        missing_fields = [f for f in HIVE_REQUIRED_FIELDS if f not in secret_data]
        if missing_fields:
            raise ValueError(
                f"Missing required fields in secret: {', '.join(missing_fields)}"
            )

        secret_data["port"] = int(secret_data.get("port", DEFAULT_HIVE_PORT))

        logger.info(f"Fetched Hive credentials '{name}' from Vault")
        return secret_data

    def health_check(self) -> bool:
        """
        Check if Vault is reachable, initialized and unsealed
        """
        try:
            response = requests.get(f"{self.vault_addr}/v1/sys/health", timeout=5)
        except requests.RequestException as e:
            logger.error(f"Vault health check failed: {e}")
            return False
        # 200 active, 429 standby, 472/473 replication/performance standby
        return response.status_code in (200, 429, 472, 473)
