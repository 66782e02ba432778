"""
shurjoPay session management.

The SessionManager owns the single authentication token of a client instance.
It acquires a token on first use, re-authenticates once the token has outlived
its declared lifetime, and serializes the check-then-refresh sequence so
concurrent callers share one authentication exchange.

Token creation times come from the gateway in the fixed format
``yyyy-MM-dd hh:mm:ssAM/PM`` (12-hour clock, marker case-insensitive) and are
compared against the local clock. Clock skew is not compensated.
"""

import re
import threading
from datetime import datetime
from typing import Any, Callable, Optional

from aws_lambda_powertools import Logger
from pydantic import ValidationError

from src.shurjopay.config import ShurjoPayConfig
from src.shurjopay.errors import (
    AuthenticationError,
    ConfigurationError,
    ProtocolError,
    TransportError,
)
from src.shurjopay.models import ShurjoPayToken
from src.shurjopay.request_builder import RequestBuilder


logger = Logger(child=True)

Clock = Callable[[], datetime]

TOKEN_TIME_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2}) (\d{2}):(\d{2}):(\d{2})\s*([ap]m)$",
    re.ASCII | re.IGNORECASE,
)


def parse_token_time(value: Optional[str]) -> datetime:
    """
    Parse a gateway token creation time such as ``2022-06-13 04:05:06pm``.

    Raises:
        ConfigurationError: If the value does not match the fixed format
    """
    match = TOKEN_TIME_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise ConfigurationError(f"Unparsable token creation time: {value!r}")

    year, month, day, hour, minute, second = (int(part) for part in match.groups()[:6])
    if not 1 <= hour <= 12:
        raise ConfigurationError(f"Hour out of range in token creation time: {value!r}")

    hour %= 12
    if match.group(7).lower() == "pm":
        hour += 12

    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError as e:
        raise ConfigurationError(f"Invalid token creation time {value!r}: {e}", original_error=e)


def is_token_expired(token: ShurjoPayToken, now: datetime) -> bool:
    """
    Check expiration of a token.

    Elapsed time is counted in whole seconds, truncated; a token whose age
    equals expires_in is already expired.
    """
    created_at = parse_token_time(token.token_create_time)
    elapsed = int((now - created_at).total_seconds())
    return token.expires_in <= elapsed


def _mask(token: Optional[str]) -> str:
    return (token or "")[:8] + "***"


class SessionManager:
    """
    Holds the current shurjoPay token and keeps it valid.

    ensure_valid_token() is the only way the held token changes. A failed
    authentication leaves no token installed.

    Attributes:
        config: Client configuration
        transport: Object with a post(OutboundRequest) method
        clock: Callable returning the current local time
    """

    def __init__(
        self,
        config: ShurjoPayConfig,
        transport: Any,
        request_builder: RequestBuilder,
        clock: Clock = datetime.now,
    ):
        self.config = config
        self.transport = transport
        self.request_builder = request_builder
        self.clock = clock
        self._token: Optional[ShurjoPayToken] = None
        self._lock = threading.Lock()

    @property
    def current_token(self) -> Optional[ShurjoPayToken]:
        """The token currently held, without checking or refreshing it."""
        with self._lock:
            return self._token

    def ensure_valid_token(self) -> ShurjoPayToken:
        """
        Return a non-expired token, authenticating first if needed.

        Raises:
            AuthenticationError: Credentials missing or rejected, or token endpoint unreachable
            ConfigurationError: Gateway token creation time cannot be parsed
            ProtocolError: Token response has an unexpected shape
        """
        with self._lock:
            if self._token is None or is_token_expired(self._token, self.clock()):
                self._token = None
                self._token = self._authenticate()
            return self._token

    def _get_credential(self, key: str) -> str:
        try:
            return self.config.require(key)
        except ConfigurationError as e:
            raise AuthenticationError(f"{key} value shouldn't be empty", original_error=e)

    def _authenticate(self) -> ShurjoPayToken:
        """Exchange the configured credentials for a new token. Caller holds the lock."""
        payload = {
            "username": self._get_credential("username"),
            "password": self._get_credential("password"),
        }
        request = self.request_builder.build_unauthenticated(self.config.token_endpoint, payload)

        try:
            response_data = self.transport.post(request)
        except TransportError as e:
            logger.error(
                "shurjoPay authentication request failed",
                extra={"error": str(e), "error_code": e.error_code},
            )
            raise AuthenticationError(
                "Invalid User name or Password due to shurjoPay authentication.",
                original_error=e,
            ) from e

        if not isinstance(response_data, dict):
            raise ProtocolError("Token response is not a JSON object")

        try:
            token = ShurjoPayToken.model_validate(response_data)
        except ValidationError as e:
            raise ProtocolError(f"Malformed token response: {e}", original_error=e) from e

        if not token.is_usable:
            logger.error(
                "shurjoPay rejected authentication",
                extra={"sp_code": token.sp_code, "gateway_message": token.message},
            )
            raise AuthenticationError("Invalid User name or Password due to shurjoPay authentication.")

        if not token.token or not token.token_create_time or token.expires_in is None:
            raise ProtocolError("Token response is missing token, token_create_time or expires_in")

        # Reject unparsable creation times before the token is installed
        parse_token_time(token.token_create_time)

        logger.info(
            "Authentication token has been generated successfully.",
            extra={"token": _mask(token.token), "store_id": token.store_id, "expires_in": token.expires_in},
        )
        return token
