"""
Unit tests for the shurjoPay HTTP transport.
"""

import http.client
import io
import json
import urllib.error
from unittest.mock import MagicMock, Mock, patch

import pytest

from src.shurjopay.errors import TransportError
from src.shurjopay.transport import OutboundRequest, UrllibTransport


def _request():
    return OutboundRequest(
        url="https://sandbox.shurjopayment.com/api/verification",
        body=json.dumps({"order_id": "ORD1"}).encode("utf-8"),
        headers={"Content-Type": "application/json", "Authorization": "Bearer T1"},
    )


def _mock_response(body: bytes):
    mock_response = MagicMock()
    mock_response.read.return_value = body
    mock_response.__enter__ = Mock(return_value=mock_response)
    mock_response.__exit__ = Mock(return_value=False)
    return mock_response


class TestUrllibTransport:
    """Test the urllib transport."""

    @patch("urllib.request.urlopen")
    def test_post_decodes_json(self, mock_urlopen):
        """Test a successful POST returns the decoded body."""
        mock_urlopen.return_value = _mock_response(b'[{"order_id": "ORD1"}]')

        result = UrllibTransport(timeout=10).post(_request())

        assert result == [{"order_id": "ORD1"}]

    @patch("urllib.request.urlopen")
    def test_post_sends_request(self, mock_urlopen):
        """Test method, headers, body and timeout of the outgoing request."""
        mock_urlopen.return_value = _mock_response(b"{}")

        UrllibTransport(timeout=10).post(_request())

        http_request = mock_urlopen.call_args[0][0]
        assert http_request.get_method() == "POST"
        assert http_request.full_url == "https://sandbox.shurjopayment.com/api/verification"
        assert http_request.get_header("Authorization") == "Bearer T1"
        assert http_request.get_header("Content-type") == "application/json"
        assert json.loads(http_request.data) == {"order_id": "ORD1"}
        assert mock_urlopen.call_args[1]["timeout"] == 10

    @patch("urllib.request.urlopen")
    def test_http_error(self, mock_urlopen):
        """Test an HTTP error status becomes a TransportError with the status code."""
        mock_urlopen.side_effect = urllib.error.HTTPError(
            url="https://sandbox.shurjopayment.com/api/verification",
            code=502,
            msg="Bad Gateway",
            hdrs={},
            fp=io.BytesIO(b'{"message": "Upstream unavailable"}'),
        )

        with pytest.raises(TransportError, match="Upstream unavailable") as exc_info:
            UrllibTransport().post(_request())

        assert exc_info.value.status_code == 502
        assert exc_info.value.error_code == "HTTP_ERROR"

    @patch("urllib.request.urlopen")
    def test_network_error(self, mock_urlopen):
        """Test a connection failure becomes a TransportError."""
        mock_urlopen.side_effect = urllib.error.URLError("connection refused")

        with pytest.raises(TransportError, match="Network error") as exc_info:
            UrllibTransport().post(_request())

        assert exc_info.value.error_code == "NETWORK_ERROR"
        assert exc_info.value.status_code is None

    @patch("urllib.request.urlopen")
    def test_timeout(self, mock_urlopen):
        """Test a socket timeout becomes a TransportError."""
        mock_urlopen.side_effect = TimeoutError("timed out")

        with pytest.raises(TransportError):
            UrllibTransport().post(_request())

    @patch("urllib.request.urlopen")
    def test_invalid_json(self, mock_urlopen):
        """Test an undecodable body becomes a TransportError."""
        mock_urlopen.return_value = _mock_response(b"<html>maintenance</html>")

        with pytest.raises(TransportError) as exc_info:
            UrllibTransport().post(_request())

        assert exc_info.value.error_code == "DECODE_ERROR"

    @patch("urllib.request.urlopen")
    def test_bad_status_line(self, mock_urlopen):
        """Test a garbled status line becomes a TransportError."""
        mock_urlopen.side_effect = http.client.BadStatusLine("GARBAGE")

        with pytest.raises(TransportError, match="Network error") as exc_info:
            UrllibTransport().post(_request())

        assert isinstance(exc_info.value.original_error, http.client.BadStatusLine)

    @patch("urllib.request.urlopen")
    def test_truncated_body(self, mock_urlopen):
        """Test a body shorter than its Content-Length becomes a TransportError."""
        mock_response = _mock_response(b"")
        mock_response.read.side_effect = http.client.IncompleteRead(b"[{\"or", 95)
        mock_urlopen.return_value = mock_response

        with pytest.raises(TransportError) as exc_info:
            UrllibTransport().post(_request())

        assert exc_info.value.error_code == "NETWORK_ERROR"
        assert isinstance(exc_info.value.original_error, http.client.IncompleteRead)

    @patch("urllib.request.urlopen")
    def test_invalid_utf8(self, mock_urlopen):
        """Test a body that is not UTF-8 is rejected instead of being patched up."""
        mock_urlopen.return_value = _mock_response(b'{"message": "\xff\xfe"}')

        with pytest.raises(TransportError) as exc_info:
            UrllibTransport().post(_request())

        assert exc_info.value.error_code == "DECODE_ERROR"
        assert isinstance(exc_info.value.original_error, UnicodeDecodeError)
