"""
Outbound request construction for the shurjoPay gateway.
"""

import json
from typing import Any, Dict, Mapping, Union

from pydantic import BaseModel

from src.shurjopay.models import PaymentRequest, ShurjoPayToken
from src.shurjopay.transport import OutboundRequest


Payload = Union[BaseModel, Mapping[str, Any]]


class RequestBuilder:
    """
    Builds POST requests against the configured API base URL.

    The base URL is concatenated with the endpoint path as-is; shurjoPay
    documents its base URLs with a trailing slash.
    """

    def __init__(self, base_url: str):
        self.base_url = base_url

    def _serialize(self, payload: Payload) -> bytes:
        if isinstance(payload, BaseModel):
            data: Any = payload.model_dump(by_alias=True, exclude_none=True)
        else:
            data = dict(payload)
        return json.dumps(data).encode("utf-8")

    def _get_headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json"}

    def build_unauthenticated(self, endpoint: str, payload: Payload) -> OutboundRequest:
        """Build a JSON POST to base_url + endpoint without an Authorization header."""
        return OutboundRequest(
            url=f"{self.base_url}{endpoint}",
            body=self._serialize(payload),
            headers=self._get_headers(),
        )

    def build_authenticated(
        self,
        endpoint: str,
        payload: Payload,
        token: ShurjoPayToken,
    ) -> OutboundRequest:
        """Build a JSON POST carrying 'Authorization: <token_type> <token>'."""
        request = self.build_unauthenticated(endpoint, payload)
        request.headers["Authorization"] = token.authorization_header()
        return request

    @staticmethod
    def prepare_payment(
        request: PaymentRequest,
        callback_url: str,
        token: ShurjoPayToken,
    ) -> PaymentRequest:
        """
        Inject the callback URL, session token and store id into a payment request.

        The callback URL is used for both return and cancel URLs. Caller supplied
        values for these four fields are overwritten. The request is modified in
        place and returned.
        """
        request.return_url = callback_url
        request.cancel_url = callback_url
        request.auth_token = token.token
        request.store_id = token.store_id
        return request
