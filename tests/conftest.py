"""
Shared pytest fixtures for hubreg tests.

This module provides:
- stub_registry: An in-process HTTP server that scripts registry responses
  and records every request it receives
- credentials / submission: Values pointing a RegistrySession at the stub
- clean environment and container state between tests
"""

import base64
import json
import socket
import threading
from collections import defaultdict
from collections.abc import Iterator
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from hubreg.core.bootstrap import reset
from hubreg.core.models.trackhub import (
    Assembly,
    RegistryCredentials,
    TrackhubSubmission,
    TrackhubType,
    Visibility,
)
from hubreg.registry_client import RegistrySession

TEST_USER = "alice"
TEST_PASSWORD = "s3cret"


@dataclass
class RecordedRequest:
    """One request as received by the stub registry."""

    method: str
    path: str
    headers: dict[str, str]
    body: str

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())

    def json(self):
        return json.loads(self.body)


@dataclass
class StubResponse:
    status: int
    body: str = ""
    reason: str | None = None
    headers: dict[str, str] = field(default_factory=dict)


class StubRegistry:
    """Scripted stand-in for a Track Hub Registry server.

    Responses are queued per (method, path). The last queued response for a
    route is reused once the queue is down to one entry; unknown routes get
    a 404. When `basic_auth` is set, /api/login answers 401 with a Basic
    challenge until the matching Authorization header is sent.
    """

    def __init__(self) -> None:
        self.requests: list[RecordedRequest] = []
        self.basic_auth: tuple[str, str] | None = None
        self._routes: dict[tuple[str, str], list[StubResponse]] = defaultdict(list)
        self._lock = threading.Lock()
        self.url = ""

    def add(
        self,
        method: str,
        path: str,
        status: int,
        body: str | dict = "",
        reason: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        if isinstance(body, dict):
            body = json.dumps(body)
        self._routes[(method, path)].append(
            StubResponse(status=status, body=body, reason=reason, headers=headers or {})
        )

    def requests_to(self, path: str) -> list[RecordedRequest]:
        return [r for r in self.requests if r.path == path]

    def respond(self, request: RecordedRequest) -> StubResponse:
        with self._lock:
            self.requests.append(request)

            if request.path == "/api/login" and self.basic_auth is not None:
                user, password = self.basic_auth
                token = base64.b64encode(f"{user}:{password}".encode()).decode()
                if request.header("Authorization") != f"Basic {token}":
                    return StubResponse(
                        status=401,
                        body="Unauthorized",
                        headers={"WWW-Authenticate": 'Basic realm="registry"'},
                    )

            queue = self._routes.get((request.method, request.path))
            if not queue:
                return StubResponse(status=404, body="Not Found")
            if len(queue) > 1:
                return queue.pop(0)
            return queue[0]


class _StubHandler(BaseHTTPRequestHandler):
    def _handle(self) -> None:
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length).decode() if length else ""
        request = RecordedRequest(
            method=self.command,
            path=self.path,
            headers={k.lower(): v for k, v in self.headers.items()},
            body=body,
        )
        response = self.server.stub.respond(request)  # type: ignore[attr-defined]

        payload = response.body.encode()
        self.send_response(response.status, response.reason)
        for name, value in response.headers.items():
            self.send_header(name, value)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    do_GET = _handle
    do_POST = _handle

    def log_message(self, format, *args):  # noqa: A002
        pass


@pytest.fixture
def stub_registry() -> Iterator[StubRegistry]:
    """Run a stub registry on a free localhost port for the test."""
    stub = StubRegistry()
    server = ThreadingHTTPServer(("127.0.0.1", 0), _StubHandler)
    server.stub = stub  # type: ignore[attr-defined]
    stub.url = f"http://127.0.0.1:{server.server_address[1]}"

    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield stub
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


@pytest.fixture
def unused_url() -> str:
    """URL of a localhost port nothing is listening on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}"


@pytest.fixture
def credentials(stub_registry: StubRegistry) -> RegistryCredentials:
    return RegistryCredentials(server=stub_registry.url, user=TEST_USER, password=TEST_PASSWORD)


@pytest.fixture
def submission() -> TrackhubSubmission:
    return TrackhubSubmission(
        url="https://example.org/pride/hub.txt",
        hub_type=TrackhubType.PROTEOMICS,
        visibility=Visibility.PRIVATE,
        assemblies=(Assembly.HG38,),
    )


@pytest.fixture
def session(credentials: RegistryCredentials, submission: TrackhubSubmission) -> RegistrySession:
    """RegistrySession aimed at the stub registry, with proxies disabled."""
    return RegistrySession(credentials, submission, timeout=5, proxies={})


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep developer configuration and container state out of tests."""
    import os

    for name in list(os.environ):
        if name.startswith("HUBREG_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("TRACKHUB_REGISTRY_URL", raising=False)
    # Sessions built from configuration use environment proxies
    monkeypatch.setenv("NO_PROXY", "127.0.0.1,localhost")
    monkeypatch.setenv("no_proxy", "127.0.0.1,localhost")
    reset()
    yield
    reset()
