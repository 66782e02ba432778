"""
HTTP transport for the shurjoPay client.

Sends a prepared OutboundRequest as a JSON POST and returns the decoded body.
Every network or decoding failure surfaces as a TransportError; nothing is
retried here.
"""

import http.client
import json
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Any, Dict

from aws_lambda_powertools import Logger

from src.shurjopay.config import DEFAULT_TIMEOUT
from src.shurjopay.errors import TransportError


logger = Logger(child=True)


@dataclass
class OutboundRequest:
    """A fully formed POST request."""

    url: str
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)

    def json(self) -> Any:
        """Decode the body, mainly for inspection in tests and logs."""
        return json.loads(self.body.decode("utf-8"))


class UrllibTransport:
    """POSTs JSON requests with urllib and decodes JSON responses."""

    def __init__(self, timeout: int = DEFAULT_TIMEOUT):
        self.timeout = timeout

    def post(self, request: OutboundRequest) -> Any:
        """
        Send the request and decode the JSON response body.

        Args:
            request: Prepared request

        Returns:
            Decoded JSON value (object or array)

        Raises:
            TransportError: On HTTP error status, network failure or undecodable body
        """
        http_request = urllib.request.Request(
            request.url,
            data=request.body,
            headers=request.headers,
            method="POST",
        )

        try:
            with urllib.request.urlopen(http_request, timeout=self.timeout) as response:
                raw_bytes = response.read()
        except urllib.error.HTTPError as e:
            error_body = e.read().decode("utf-8", errors="replace") if e.fp else ""
            try:
                error_message = json.loads(error_body).get("message", str(e))
            except (json.JSONDecodeError, AttributeError):
                error_message = error_body or str(e)

            raise TransportError(
                f"HTTP error: {error_message}",
                error_code="HTTP_ERROR",
                original_error=e,
                status_code=e.code,
            )
        except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
            raise TransportError(f"Network error: {e}", original_error=e)

        try:
            return json.loads(raw_bytes.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(
                "Undecodable response body",
                extra={"url": request.url, "body_length": len(raw_bytes)},
            )
            raise TransportError(
                f"Invalid JSON response: {e}",
                error_code="DECODE_ERROR",
                original_error=e,
            )
