"""tests/crpt_api/conftest.py

Common fixtures for the entire test suite.
"""

import json
import os
import threading
import time

import httpx
import pytest
from typer.testing import CliRunner


@pytest.fixture(scope="session")
def runner() -> CliRunner:
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Drops CRPT_API_* variables so every test starts from the defaults."""
    for key in list(os.environ):
        if key.upper().startswith("CRPT_API_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def mock_httpx_client(monkeypatch):
    """
    Replaces httpx.Client with a mock that uses a MockTransport.

    Returns a handler function that tests can use to register mock responses.
    Every request seen by the transport is appended to ``add_response.requests``.
    """
    responses = {}
    requests_log: list[httpx.Request] = []
    lock = threading.Lock()
    original_client = httpx.Client

    def add_response(
        url: str,
        method: str = "POST",
        status_code: int = 200,
        json_payload: dict | list | None = None,
        content: bytes | None = None,
    ):
        """Register a mock response for a given URL and method."""
        if json_payload is not None:
            body = json.dumps(json_payload).encode("utf-8")
        else:
            body = content if content is not None else b""
        responses[(method.upper(), url)] = (status_code, body)

    def mock_transport(request: httpx.Request) -> httpx.Response:
        """The transport logic that returns registered responses or a 404."""
        request.read()
        with lock:
            requests_log.append(request)
        key = (request.method, str(request.url))
        if key in responses:
            status, body = responses[key]
            headers = {"Content-Length": str(len(body)), "Content-Type": "application/json"}
            return httpx.Response(status, content=body, headers=headers)

        return httpx.Response(404, text=f"Mock URL not found: {request.method} {request.url}")

    # Patch httpx.Client to always use our mock transport
    def patched_client(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(mock_transport)
        return original_client(*args, **kwargs)

    monkeypatch.setattr(httpx, "Client", patched_client)
    add_response.requests = requests_log  # type: ignore[attr-defined]
    return add_response


@pytest.fixture
def wait_until():
    """Polls ``predicate`` until it is true or ``timeout`` seconds pass."""

    def _wait_until(predicate, timeout: float = 2.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(0.005)
        return predicate()

    return _wait_until
