"""
shurjoPay Client Configuration Module.

This module provides the configuration used by the shurjoPay client: merchant
credentials, the API base URL, the callback URL and the endpoint paths. Values
can be loaded from a shurjopay.properties file, environment variables, a plain
mapping or an AWS Secrets Manager secret.
"""

import json
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import boto3
from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from src.shurjopay.errors import ConfigurationError


logger = Logger(child=True)


class ShurjoPayEndpoint(str, Enum):
    """Default endpoint paths, relative to the API base URL."""
    TOKEN = "get_token"
    MAKE_PAYMENT = "secret-pay"
    VERIFICATION = "verification"
    PAYMENT_STATUS = "payment-status"


SANDBOX_API_URL = "https://sandbox.shurjopayment.com/api/"
DEFAULT_TIMEOUT = 30

# Property key -> attribute name
PROPERTY_KEYS = {
    "username": "username",
    "password": "password",
    "callback-url": "callback_url",
    "shurjopay-api": "api_base_url",
    "token-endpoint": "token_endpoint",
    "payment-endpoint": "payment_endpoint",
    "verification-endpoint": "verification_endpoint",
    "status-endpoint": "status_endpoint",
    "timeout": "timeout",
}

# Environment variable -> property key
ENVIRONMENT_KEYS = {
    "SP_USERNAME": "username",
    "SP_PASSWORD": "password",
    "SP_CALLBACK_URL": "callback-url",
    "SHURJOPAY_API": "shurjopay-api",
    "SP_TOKEN_ENDPOINT": "token-endpoint",
    "SP_PAYMENT_ENDPOINT": "payment-endpoint",
    "SP_VERIFICATION_ENDPOINT": "verification-endpoint",
    "SP_STATUS_ENDPOINT": "status-endpoint",
    "SP_TIMEOUT": "timeout",
}


def parse_properties(text: str) -> Dict[str, str]:
    """
    Parse the subset of the Java .properties format used by shurjopay.properties.

    Supports key=value and key: value lines, # and ! comments and blank lines.
    Line continuations and unicode escapes are not supported.
    """
    properties: Dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line[0] in "#!":
            continue

        separators = [i for i in (line.find("="), line.find(":")) if i >= 0]
        if not separators:
            properties[line] = ""
            continue

        index = min(separators)
        properties[line[:index].strip()] = line[index + 1:].strip()
    return properties


@dataclass
class ShurjoPayConfig:
    """
    Configuration for the shurjoPay client.

    Credentials, callback URL and API base URL are required but are only
    checked when first needed, through require(), so a partially configured
    client can still be constructed and inspected.
    """

    # Merchant credentials
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)

    # URLs
    callback_url: Optional[str] = None
    api_base_url: Optional[str] = None

    # Endpoint paths
    token_endpoint: str = ShurjoPayEndpoint.TOKEN.value
    payment_endpoint: str = ShurjoPayEndpoint.MAKE_PAYMENT.value
    verification_endpoint: str = ShurjoPayEndpoint.VERIFICATION.value
    status_endpoint: str = ShurjoPayEndpoint.PAYMENT_STATUS.value

    # Transport
    timeout: int = DEFAULT_TIMEOUT

    def require(self, key: str) -> str:
        """
        Return a required configuration value by its property key.

        Args:
            key: Property key, e.g. "callback-url"

        Returns:
            The configured value

        Raises:
            ConfigurationError: If the value is absent or blank
        """
        attribute = PROPERTY_KEYS.get(key)
        if attribute is None:
            raise ConfigurationError(f"Unknown configuration key: {key}")

        value = getattr(self, attribute)
        if value is None or (isinstance(value, str) and not value.strip()):
            logger.error(f"{key} value shouldn't be empty", extra={"key": key})
            raise ConfigurationError(f"{key} value shouldn't be empty")
        return value

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "ShurjoPayConfig":
        """
        Create configuration from a mapping keyed by property names.

        Unknown keys are ignored; endpoint paths and timeout fall back to defaults.
        """
        kwargs: Dict[str, Any] = {}
        for key, attribute in PROPERTY_KEYS.items():
            value = values.get(key)
            if value is None or value == "":
                continue
            kwargs[attribute] = value

        if "timeout" in kwargs:
            try:
                kwargs["timeout"] = int(kwargs["timeout"])
            except (TypeError, ValueError) as e:
                raise ConfigurationError(
                    f"timeout must be an integer, got {kwargs['timeout']!r}",
                    original_error=e,
                )

        return cls(**kwargs)

    @classmethod
    def from_properties(cls, path: Union[str, Path]) -> "ShurjoPayConfig":
        """
        Create configuration from a shurjopay.properties file.

        Raises:
            ConfigurationError: If the file cannot be read
        """
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            logger.error("Failed to read shurjoPay properties", extra={"path": str(path), "error": str(e)})
            raise ConfigurationError(f"Cannot read properties file {path}: {e}", original_error=e)

        return cls.from_mapping(parse_properties(text))

    @classmethod
    def from_environment(cls) -> "ShurjoPayConfig":
        """Create configuration from SP_* environment variables."""
        values = {
            key: os.environ[env_var]
            for env_var, key in ENVIRONMENT_KEYS.items()
            if env_var in os.environ
        }
        return cls.from_mapping(values)

    @classmethod
    def from_secret(cls, secret_id: str, secrets_client: Optional[Any] = None) -> "ShurjoPayConfig":
        """
        Create configuration from a JSON secret in AWS Secrets Manager.

        The secret holds the same keys as shurjopay.properties.

        Args:
            secret_id: Secret ARN or name
            secrets_client: Optional boto3 secretsmanager client

        Raises:
            ConfigurationError: If the secret cannot be read or is not a JSON object
        """
        if not secret_id:
            raise ConfigurationError("shurjoPay secret id not configured")

        client = secrets_client or boto3.client("secretsmanager")
        try:
            response = client.get_secret_value(SecretId=secret_id)
        except ClientError as e:
            logger.error("Failed to retrieve shurjoPay credentials", extra={"error": str(e)})
            raise ConfigurationError(f"Cannot read secret {secret_id}: {e}", original_error=e)

        try:
            secret_data = json.loads(response["SecretString"])
        except (KeyError, TypeError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Secret {secret_id} is not a JSON object", original_error=e)

        if not isinstance(secret_data, dict):
            raise ConfigurationError(f"Secret {secret_id} is not a JSON object")

        return cls.from_mapping(secret_data)
