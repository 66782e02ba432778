"""shurjoPay payment gateway integration module."""

from src.shurjopay.client import ShurjoPayClient
from src.shurjopay.config import ShurjoPayConfig, ShurjoPayEndpoint
from src.shurjopay.errors import (
    AuthenticationError,
    ConfigurationError,
    ProtocolError,
    ShurjoPayError,
    TransportError,
)
from src.shurjopay.models import (
    PaymentRequest,
    PaymentResponse,
    ShurjoPayStatusCode,
    ShurjoPayToken,
    VerifiedOrder,
)
from src.shurjopay.results import GatewayResult
from src.shurjopay.session import SessionManager

__all__ = [
    "ShurjoPayClient",
    "ShurjoPayConfig",
    "ShurjoPayEndpoint",
    "SessionManager",
    "GatewayResult",
    "ShurjoPayError",
    "AuthenticationError",
    "ConfigurationError",
    "TransportError",
    "ProtocolError",
    "PaymentRequest",
    "PaymentResponse",
    "ShurjoPayStatusCode",
    "ShurjoPayToken",
    "VerifiedOrder",
]
