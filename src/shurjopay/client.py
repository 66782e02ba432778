"""
shurjoPay API client for payment integration.

This module provides the client class for the shurjoPay payment gateway:
payment initiation, order verification and payment status checks, each
running on top of an automatically refreshed session token.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional, Type, TypeVar, Union

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ValidationError

from src.shurjopay.config import ShurjoPayConfig
from src.shurjopay.errors import ProtocolError, TransportError
from src.shurjopay.models import PaymentRequest, PaymentResponse, VerifiedOrder
from src.shurjopay.request_builder import RequestBuilder
from src.shurjopay.results import GatewayResult
from src.shurjopay.session import Clock, SessionManager
from src.shurjopay.transport import OutboundRequest, UrllibTransport


logger = Logger(child=True)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _decode_object(data: Any, model: Type[ModelT]) -> ModelT:
    if not isinstance(data, dict):
        raise ProtocolError(f"Expected a JSON object for {model.__name__}, got {type(data).__name__}")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ProtocolError(f"Malformed {model.__name__} response: {e}", original_error=e) from e


def _decode_first(data: Any, model: Type[ModelT]) -> ModelT:
    """The verification endpoints wrap their single result in an array."""
    if not isinstance(data, list):
        raise ProtocolError(f"Expected a JSON array of {model.__name__}, got {type(data).__name__}")
    if not data:
        raise ProtocolError(f"Empty {model.__name__} array in gateway response")
    return _decode_object(data[0], model)


class ShurjoPayClient:
    """
    shurjoPay API client for payment operations.

    Every operation first obtains a valid session token, authenticating or
    re-authenticating as needed. Payment initiation carries the token in the
    request body; verification and status checks carry it in the
    Authorization header.

    make_payment, verify_order and check_payment_status return None when the
    gateway cannot be reached. The *_result variants return a GatewayResult
    that keeps the underlying TransportError instead.

    Example:
        client = ShurjoPayClient.from_properties("shurjopay.properties")

        response = client.make_payment(PaymentRequest(
            prefix="sp",
            amount=100.0,
            order_id="sp315689",
            customer_name="Jane Doe",
            customer_address="Dhaka",
            customer_phone="01711486915",
            customer_city="Dhaka",
        ))

        order = client.verify_order(response.sp_order_id)

    Attributes:
        config: Client configuration
        transport: Object with a post(OutboundRequest) method
        request_builder: Builds requests against the API base URL
        session: Session manager owning the token
    """

    def __init__(
        self,
        config: ShurjoPayConfig,
        transport: Optional[Any] = None,
        clock: Clock = datetime.now,
    ):
        """
        Initialize shurjoPay client.

        Args:
            config: Client configuration
            transport: Transport used for every request; defaults to UrllibTransport
            clock: Callable returning the current local time

        Raises:
            ConfigurationError: If the API base URL is not configured
        """
        self.config = config
        self.transport = transport or UrllibTransport(timeout=config.timeout)
        self.request_builder = RequestBuilder(config.require("shurjopay-api"))
        self.session = SessionManager(config, self.transport, self.request_builder, clock=clock)

    @classmethod
    def from_properties(cls, path: Union[str, Path], **kwargs: Any) -> "ShurjoPayClient":
        """Create a client configured from a shurjopay.properties file."""
        return cls(ShurjoPayConfig.from_properties(path), **kwargs)

    @classmethod
    def from_environment(cls, **kwargs: Any) -> "ShurjoPayClient":
        """Create a client configured from SP_* environment variables."""
        return cls(ShurjoPayConfig.from_environment(), **kwargs)

    def _send(
        self,
        request: OutboundRequest,
        decode: Callable[[Any], ModelT],
        failure_message: str,
        **log_fields: Any,
    ) -> GatewayResult[ModelT]:
        try:
            response_data = self.transport.post(request)
            result = GatewayResult.ok(decode(response_data))
        except (TransportError, ProtocolError) as e:
            result = GatewayResult.failure(e)
            logger.error(failure_message, extra={**result.to_dict(), **log_fields})
        return result

    @staticmethod
    def _unwrap(result: GatewayResult[ModelT]) -> Optional[ModelT]:
        if isinstance(result.error, ProtocolError):
            raise result.error
        return result.unwrap_or_none()

    def make_payment_result(self, request: PaymentRequest) -> GatewayResult[PaymentResponse]:
        """
        Initiate a payment.

        The configured callback URL is used as both return and cancel URL, and
        the current token and store id are written into the request body,
        overriding any values the caller set.

        Args:
            request: Payment request; modified in place

        Returns:
            GatewayResult with the PaymentResponse holding the checkout URL

        Raises:
            AuthenticationError: If a session cannot be established
            ConfigurationError: If callback-url is missing or the token time is unparsable
        """
        token = self.session.ensure_valid_token()
        callback_url = self.config.require("callback-url")

        self.request_builder.prepare_payment(request, callback_url, token)
        http_request = self.request_builder.build_unauthenticated(self.config.payment_endpoint, request)

        logger.info(
            "Initiating shurjoPay payment",
            extra={"order_id": request.order_id, "amount": request.amount, "currency": request.currency},
        )

        result = self._send(
            http_request,
            lambda data: _decode_object(data, PaymentResponse),
            "Payment request failed",
            order_id=request.order_id,
        )
        if result.success:
            logger.info(
                "Payment initiated successfully",
                extra={"order_id": request.order_id, "sp_order_id": result.value.sp_order_id},
            )
        return result

    def verify_order_result(self, order_id: str) -> GatewayResult[VerifiedOrder]:
        """
        Verify an order by the gateway order id returned from make_payment.

        Raises:
            AuthenticationError: If a session cannot be established
            ConfigurationError: If the token time is unparsable
        """
        return self._query_order(order_id, self.config.verification_endpoint, "Payment verification failed")

    def check_payment_status_result(self, order_id: str) -> GatewayResult[VerifiedOrder]:
        """
        Check the status of a paid order by gateway order id.

        Raises:
            AuthenticationError: If a session cannot be established
            ConfigurationError: If the token time is unparsable
        """
        return self._query_order(order_id, self.config.status_endpoint, "Payment status check failed")

    def _query_order(self, order_id: str, endpoint: str, failure_message: str) -> GatewayResult[VerifiedOrder]:
        token = self.session.ensure_valid_token()
        http_request = self.request_builder.build_authenticated(endpoint, {"order_id": order_id}, token)

        logger.info("Querying shurjoPay order", extra={"order_id": order_id, "endpoint": endpoint})

        return self._send(
            http_request,
            lambda data: _decode_first(data, VerifiedOrder),
            failure_message,
            order_id=order_id,
        )

    def make_payment(self, request: PaymentRequest) -> Optional[PaymentResponse]:
        """
        Initiate a payment, returning None if the gateway could not be reached.

        Raises:
            AuthenticationError: If a session cannot be established
            ConfigurationError: If required configuration is missing
            ProtocolError: If the gateway response has an unexpected shape
        """
        return self._unwrap(self.make_payment_result(request))

    def verify_order(self, order_id: str) -> Optional[VerifiedOrder]:
        """
        Verify an order, returning None if the gateway could not be reached.

        Raises:
            AuthenticationError: If a session cannot be established
            ProtocolError: If the gateway returns an empty or malformed array
        """
        return self._unwrap(self.verify_order_result(order_id))

    def check_payment_status(self, order_id: str) -> Optional[VerifiedOrder]:
        """
        Check payment status, returning None if the gateway could not be reached.

        Raises:
            AuthenticationError: If a session cannot be established
            ProtocolError: If the gateway returns an empty or malformed array
        """
        return self._unwrap(self.check_payment_status_result(order_id))
