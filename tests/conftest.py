"""
Pytest configuration and fixtures for shurjoPay client tests.
"""

import os
import time
from datetime import datetime, timedelta

import pytest
import boto3
from moto import mock_aws

from src.shurjopay.config import ShurjoPayConfig


BASE_URL = "https://sandbox.shurjopayment.com/api/"
NOW = datetime(2024, 1, 15, 10, 30, 0)


def format_token_time(moment: datetime) -> str:
    """Format a datetime the way the gateway does, e.g. 2024-01-15 10:30:00am."""
    hour = moment.hour % 12 or 12
    marker = "am" if moment.hour < 12 else "pm"
    return f"{moment:%Y-%m-%d} {hour:02d}:{moment:%M:%S}{marker}"


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


class FakeTransport:
    """
    Records outbound requests and replays scripted responses per endpoint.

    The last scripted response for an endpoint is reused once the queue is
    down to one entry. Exceptions are raised instead of returned.
    """

    def __init__(self, base_url: str = BASE_URL):
        self.base_url = base_url
        self.requests = []
        self.responses = {}
        self.delay = 0.0

    def respond(self, endpoint, *responses):
        self.responses.setdefault(endpoint, []).extend(responses)

    def post(self, request):
        self.requests.append(request)
        if self.delay:
            time.sleep(self.delay)

        endpoint = request.url[len(self.base_url):]
        queue = self.responses.get(endpoint)
        if not queue:
            raise AssertionError(f"Unexpected request to {endpoint}")

        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        return response

    def calls_to(self, endpoint):
        return [r for r in self.requests if r.url == f"{self.base_url}{endpoint}"]


def make_token_response(
    token="T1",
    created_at=NOW,
    expires_in=3600,
    message="Ok",
    store_id="S1",
):
    """Token endpoint body as returned by shurjoPay."""
    return {
        "token": token,
        "store_id": store_id,
        "execute_url": f"{BASE_URL}secret-pay",
        "token_type": "Bearer",
        "sp_code": "200",
        "message": message,
        "token_create_time": format_token_time(created_at),
        "expires_in": expires_in,
    }


@pytest.fixture(scope="session")
def aws_credentials():
    """Mocked AWS Credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def mock_aws_services(aws_credentials):
    """Mock AWS services for testing."""
    with mock_aws():
        yield


@pytest.fixture
def secrets_client(mock_aws_services):
    """Secrets Manager client for testing."""
    return boto3.client("secretsmanager", region_name="us-east-1")


@pytest.fixture
def sample_config():
    """Fully populated client configuration."""
    return ShurjoPayConfig.from_mapping({
        "username": "u",
        "password": "p",
        "callback-url": "https://cb",
        "shurjopay-api": BASE_URL,
    })


@pytest.fixture
def clock():
    """Frozen clock starting at NOW."""
    return FrozenClock()


@pytest.fixture
def transport():
    """Transport with a successful token response scripted."""
    fake = FakeTransport()
    fake.respond("get_token", make_token_response())
    return fake


@pytest.fixture
def token_response():
    """Factory for token endpoint bodies."""
    return make_token_response
