"""Shared pytest fixtures for the alertrelay test suite.

Every notifier under test talks to an in-process mock receiver through
:class:`httpx.MockTransport`, so no test touches the network.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from alertrelay.main import app
from alertrelay.victorops import Notifier, VictorOpsConfig


class TrackedStream(httpx.SyncByteStream):
    """Response body that records whether it was closed."""

    def __init__(self, body: bytes):
        self._body = body
        self.closed = False

    def __iter__(self):
        yield self._body

    def close(self):
        self.closed = True


class Receiver:
    """Mock VictorOps endpoint.

    Records every request and answers with a fixed status and body.  When
    *error* is set, raises it instead of answering.
    """

    def __init__(self, status: int = 200, body: bytes = b'{"result":"success"}', error=None):
        self.status = status
        self.body = body
        self.error = error
        self.requests: list[httpx.Request] = []
        self.streams: list[TrackedStream] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error("connection refused", request=request)
        stream = TrackedStream(self.body)
        self.streams.append(stream)
        return httpx.Response(self.status, stream=stream)


@pytest.fixture()
def config():
    """An enabled config pointing at a fake base URL."""
    return VictorOpsConfig(
        enabled=True,
        api_key="api-key",
        routing_key="default-team",
        url="https://victorops.test/integrations/generic/20131114/alert",
        global_=False,
    )


@pytest.fixture()
def receiver():
    """A mock receiver that answers 200 until told otherwise."""
    return Receiver()


@pytest.fixture()
def http_client(receiver):
    """An :class:`httpx.Client` wired to :func:`receiver`.

    Yields:
        The client, closed when the test finishes.
    """
    client = httpx.Client(transport=httpx.MockTransport(receiver))
    yield client
    client.close()


@pytest.fixture()
def notifier(config, http_client):
    """A notifier delivering to the mock receiver."""
    return Notifier(config, client=http_client)


@pytest.fixture()
def client(notifier):
    """Return a FastAPI :class:`TestClient` bound to :func:`notifier`.

    The application lifespan is not run; the notifier is installed on
    ``app.state`` directly and removed afterwards.

    Yields:
        A :class:`httpx.Client`-like test client.
    """
    app.state.notifier = notifier
    yield TestClient(app)
    del app.state.notifier
