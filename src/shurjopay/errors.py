"""
shurjoPay error taxonomy.

Every failure raised by the gateway client derives from ShurjoPayError so callers
can catch the whole family at once, or a single category when they need to.
"""

from typing import Optional


class ShurjoPayError(Exception):
    """Base exception for shurjoPay errors."""

    default_error_code = "SHURJOPAY_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.error_code = error_code or self.default_error_code
        self.original_error = original_error


class AuthenticationError(ShurjoPayError):
    """Invalid credentials, unreachable token endpoint or a non-success auth status."""

    default_error_code = "AUTHENTICATION_ERROR"


class ConfigurationError(ShurjoPayError):
    """Required configuration value absent, or a server timestamp that cannot be parsed."""

    default_error_code = "CONFIGURATION_ERROR"


class TransportError(ShurjoPayError):
    """Network level failure while talking to the gateway."""

    default_error_code = "NETWORK_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        original_error: Optional[Exception] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, error_code=error_code, original_error=original_error)
        self.status_code = status_code


class ProtocolError(ShurjoPayError):
    """Response JSON does not have the shape the gateway documents."""

    default_error_code = "PROTOCOL_ERROR"
