"""Database credential lookup.

Sources are usually built from credentials rather than from an already open
handle. This module resolves those credentials from one of two places:

1. Direct environment variables (local dev) - Uses DB_* env vars from .env
2. AWS Secrets Manager (production) - Fetches a JSON secret by id

The module automatically loads environment variables from .env file if present.

Usage:
    from dbi_manager.config.secrets import get_source_credentials

    creds = get_source_credentials("prod/replica")
    source = Source.from_credentials(creds, name="reporting")
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import boto3
from botocore.exceptions import ClientError, NoCredentialsError
from dotenv import load_dotenv

from dbi_manager.exceptions import SecretsManagerError

logger = logging.getLogger(__name__)

# Load .env file from project root
_env_path = Path(__file__).resolve().parents[3] / ".env"
if _env_path.exists():
    load_dotenv(_env_path)
    logger.debug(f"Loaded environment from {_env_path}")


@dataclass(frozen=True)
class DatabaseCredentials:
    """PostgreSQL database connection credentials."""

    host: str
    port: int
    database: str
    username: str
    password: str

    @property
    def connection_string(self) -> str:
        """Return asyncpg-compatible connection string."""
        return (
            f"postgresql://{self.username}:{self.password}"
            f"@{self.host}:{self.port}/{self.database}"
        )

    @property
    def dsn(self) -> dict[str, Any]:
        """Return connection parameters as a dict for asyncpg.connect()."""
        return {
            "host": self.host,
            "port": self.port,
            "database": self.database,
            "user": self.username,
            "password": self.password,
        }

    def __repr__(self) -> str:
        return (
            f"DatabaseCredentials(host={self.host!r}, port={self.port}, "
            f"database={self.database!r}, username={self.username!r})"
        )


def _get_secrets_client() -> boto3.client:
    """Create boto3 Secrets Manager client.

    Uses credentials from environment variables or IAM role.
    """
    region = os.getenv("AWS_DEFAULT_REGION", "us-east-1")
    return boto3.client("secretsmanager", region_name=region)


def get_env_credentials() -> DatabaseCredentials | None:
    """Try to get database credentials from environment variables.

    Looks for DB_HOST, DB_PORT, DB_NAME, DB_USER, DB_PASSWORD.
    Returns None if required variables are not set.
    """
    host = os.getenv("DB_HOST")
    user = os.getenv("DB_USER")
    password = os.getenv("DB_PASSWORD")
    database = os.getenv("DB_NAME", os.getenv("DB_DATABASE"))

    if host and user and password and database:
        logger.info("Using database credentials from environment variables")
        return DatabaseCredentials(
            host=host,
            port=int(os.getenv("DB_PORT", "5432")),
            database=database,
            username=user,
            password=password,
        )
    return None


def _fetch_secret(secret_id: str) -> dict[str, Any]:
    """Fetch and decode a JSON secret from AWS Secrets Manager."""
    try:
        client = _get_secrets_client()
        response = client.get_secret_value(SecretId=secret_id)
        result: dict[str, Any] = json.loads(response["SecretString"])
        return result
    except NoCredentialsError as e:
        raise SecretsManagerError(
            "AWS credentials not found. Set AWS_ACCESS_KEY_ID and "
            "AWS_SECRET_ACCESS_KEY in .env file, or use DB_* variables for local dev.",
            cause=e,
        ) from e
    except ClientError as e:
        error_code = e.response.get("Error", {}).get("Code", "Unknown")
        raise SecretsManagerError(
            f"Failed to retrieve secret '{secret_id}': {error_code}", cause=e
        ) from e
    except json.JSONDecodeError as e:
        raise SecretsManagerError(
            f"Secret '{secret_id}' contains invalid JSON", cause=e
        ) from e


def _credentials_from_secret(
    secret_id: str, secret_data: dict[str, Any]
) -> DatabaseCredentials:
    """Map secret keys to our credential format.

    Supports both POSTGRES_* and standard naming conventions.
    """
    try:
        return DatabaseCredentials(
            host=secret_data.get("POSTGRES_HOST", secret_data.get("host", "")),
            port=int(secret_data.get("POSTGRES_PORT", secret_data.get("port", 5432))),
            database=secret_data.get("POSTGRES_DB", secret_data.get("database", "")),
            username=secret_data.get("POSTGRES_USER", secret_data.get("username", "")),
            password=secret_data.get(
                "POSTGRES_PASSWORD", secret_data.get("password", "")
            ),
        )
    except (KeyError, ValueError) as e:
        raise SecretsManagerError(
            f"Secret '{secret_id}' is missing required fields: {e}", cause=e
        ) from e


@lru_cache(maxsize=16)
def get_source_credentials(secret_id: str) -> DatabaseCredentials:
    """Retrieve credentials for a named source from AWS Secrets Manager.

    Each configured source maps to its own secret; DB_* environment
    variables are not consulted here (see get_env_credentials()).

    Args:
        secret_id: The secret name or ARN.

    Returns:
        DatabaseCredentials dataclass with connection info.

    Raises:
        SecretsManagerError: If the secret cannot be retrieved or parsed.
    """
    logger.info(f"Fetching credentials from AWS Secrets Manager: {secret_id}")
    return _credentials_from_secret(secret_id, _fetch_secret(secret_id))


def clear_credentials_cache() -> None:
    """Clear the cached credentials.

    Useful when credentials have been rotated and need to be refreshed.
    """
    get_source_credentials.cache_clear()
