import json
from pathlib import Path

import httpx
import pytest

from freight_pricing.client import PricingApiClient

DATA_DIR = Path(__file__).parent / "data"


def load_fixture(name: str) -> dict:
    return json.loads((DATA_DIR / f"{name}.json").read_text(encoding="utf-8"))


class RecordingNotifier:
    def __init__(self):
        self.calls = []

    def notify(self, title, description, *, variant="default"):
        self.calls.append((title, description, variant))


class FakeBackend:
    """Routes requests by (method, path) to canned responses and records them."""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method, path, status_code=200, json_body=None, exc=None):
        self.routes[(method, path)] = (status_code, json_body, exc)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"message": f"No route for {key}"})
        status_code, json_body, exc = self.routes[key]
        if exc is not None:
            raise exc
        if json_body is None:
            return httpx.Response(status_code)
        return httpx.Response(status_code, json=json_body)

    def calls(self, method, path):
        return [r for r in self.requests if r.method == method and r.url.path == path]


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def client(backend):
    with PricingApiClient(
        base_url="http://pricing.test",
        token="test-token",
        transport=httpx.MockTransport(backend.handler),
    ) as api_client:
        yield api_client


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def price_list_body():
    return load_fixture("price_list")


@pytest.fixture
def vendor_price_lists_body():
    return load_fixture("vendor_price_lists")
