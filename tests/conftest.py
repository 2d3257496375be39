"""
Shared test fixtures for the irdata client tests.

HTTP traffic is served by an in-process httpx.MockTransport; nothing here
touches the network.
"""

import asyncio

import httpx
import pytest

from irdata.client import IRacingClient
from irdata.oauth import AuthConfig, AuthManager, HostContext
from irdata.utils.storage import InMemoryTokenStore

CLIENT_ID = "test-client"
REDIRECT_URI = "http://localhost/callback"
API_URL = "https://members-ng.iracing.com/data"
TOKEN_URL = "https://oauth.iracing.com/oauth2/token"


class MockBackend:
    """Serves canned responses and records every request it receives.

    Responses are taken from `routes` when the exact URL is registered,
    otherwise from the FIFO `queue`. Entries may be httpx.Response objects
    or callables taking the request (sync or async).
    """

    def __init__(self):
        self.requests = []
        self.queue = []
        self.routes = {}

    def enqueue(self, *responses):
        self.queue.extend(responses)

    def route(self, url, factory):
        self.routes[url] = factory

    def handler(self, request):
        self.requests.append(request)
        response = self.routes.get(str(request.url))
        if response is None:
            assert self.queue, f"Unexpected request: {request.method} {request.url}"
            response = self.queue.pop(0)
        if callable(response):
            return response(request)
        return response

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)


def token_response(access_token="new-access-token", refresh_token="new-refresh-token"):
    body = {"access_token": access_token, "expires_in": 3600, "token_type": "Bearer"}
    if refresh_token:
        body["refresh_token"] = refresh_token
    return httpx.Response(200, json=body)


def delayed_json(payload, delay, completed=None, name=None):
    """Async response factory that answers after `delay` seconds"""

    async def respond(request):
        await asyncio.sleep(delay)
        if completed is not None:
            completed.append(name)
        return httpx.Response(200, json=payload)

    return respond


@pytest.fixture
def backend():
    return MockBackend()


@pytest.fixture
def auth_config():
    return AuthConfig(client_id=CLIENT_ID, redirect_uri=REDIRECT_URI)


@pytest.fixture
def host():
    return HostContext()


@pytest.fixture
def auth(auth_config, backend, host):
    return AuthManager(
        config=auth_config,
        token_store=InMemoryTokenStore(),
        host=host,
        transport=backend.transport,
    )


@pytest.fixture
def make_client(auth_config, backend):
    def factory(**kwargs):
        kwargs.setdefault("api_url", API_URL)
        kwargs.setdefault("auth", auth_config)
        kwargs.setdefault("token_store", InMemoryTokenStore())
        return IRacingClient(transport=backend.transport, **kwargs)

    return factory


@pytest.fixture
def client(make_client):
    return make_client()
