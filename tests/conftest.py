"""Pytest configuration - loads .env and serves a local stand-in for the Mollie API."""

import json
import threading
import urllib.parse
from collections.abc import Callable
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any

import pytest
from dotenv import load_dotenv

from mollie_cli.core.config import Config
from mollie_cli.sdk import MollieClient
from tests import testdata

# Load .env from project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

TEST_TOKEN = "token_X12b31ggg23"


# =============================================================================
# Mock API
# =============================================================================


@dataclass
class RecordedRequest:
    """A request received by the mock API."""

    method: str
    path: str
    query: dict[str, str]
    headers: dict[str, str]
    body: bytes = b""
    raw_query: str = ""

    def json(self) -> Any:
        return json.loads(self.body.decode("utf-8"))


Handler = Callable[[RecordedRequest], tuple[int, str]]


@dataclass
class MockAPI:
    """Route table keyed by path, answering with canned bodies."""

    base_url: str = ""
    routes: dict[str, Handler] = field(default_factory=dict)
    requests: list[RecordedRequest] = field(default_factory=list)

    def handle(self, path: str, handler: Handler) -> None:
        self.routes[path] = handler

    def respond(self, path: str, body: str, status: int = 200) -> None:
        self.handle(path, lambda _req: (status, body))

    def fail(self, path: str) -> None:
        self.respond(path, testdata.INTERNAL_SERVER_ERROR_RESPONSE, status=500)

    def corrupt(self, path: str) -> None:
        self.respond(path, testdata.CORRUPT_JSON)

    @property
    def last(self) -> RecordedRequest:
        return self.requests[-1]


def _make_handler(api: MockAPI) -> type[BaseHTTPRequestHandler]:
    class RequestHandler(BaseHTTPRequestHandler):
        def _dispatch(self) -> None:
            url = urllib.parse.urlsplit(self.path)
            length = int(self.headers.get("Content-Length") or 0)
            request = RecordedRequest(
                method=self.command,
                path=url.path,
                query=dict(urllib.parse.parse_qsl(url.query)),
                headers={k.lower(): v for k, v in self.headers.items()},
                body=self.rfile.read(length) if length else b"",
                raw_query=url.query,
            )
            api.requests.append(request)

            handler = api.routes.get(url.path)
            if handler is None:
                status, body = 404, testdata.NOT_FOUND_RESPONSE
            else:
                status, body = handler(request)

            payload = body.encode("utf-8")
            self.send_response(status)
            self.send_header("Content-Type", "application/hal+json")
            self.send_header("Content-Length", str(len(payload)))
            self.end_headers()
            self.wfile.write(payload)

        do_GET = _dispatch
        do_POST = _dispatch
        do_PATCH = _dispatch
        do_DELETE = _dispatch

        def log_message(self, format: str, *args: Any) -> None:
            pass

    return RequestHandler


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def api():
    """Start a mock Mollie API on a free local port."""
    mock = MockAPI()
    server = ThreadingHTTPServer(("127.0.0.1", 0), _make_handler(mock))
    mock.base_url = f"http://127.0.0.1:{server.server_address[1]}/"
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield mock
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def client(api):
    """MollieClient pointed at the mock API."""
    return MollieClient(token=TEST_TOKEN, base_url=api.base_url, config=Config())
