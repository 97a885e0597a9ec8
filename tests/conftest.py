# Pinot Controller MCP Server
# File: tests/conftest.py
# Version: v1

from __future__ import annotations

from typing import Any, Callable, List, Optional, Tuple

import httpx
import pytest

from pinot_controller_mcp.client import ClusterResourceClient
from pinot_controller_mcp.config import ControllerConfig
from pinot_controller_mcp.transport import ControllerTransport

CONTROLLER_URL = "http://controller.test:9000"


@pytest.fixture(autouse=True)
def _clean_pinot_env(monkeypatch):
    """Keep the developer's shell settings out of the tests."""
    for name in (
        "PINOT_CONTROLLER_URL",
        "PINOT_CONTROLLER_TOKEN",
        "PINOT_CONTROLLER_USERNAME",
        "PINOT_CONTROLLER_PASSWORD",
        "PINOT_MOCK_MODE",
        "PINOT_VERIFY_TLS",
        "PINOT_TIMEOUT_SECONDS",
        "PINOT_MCP_LOG_LEVEL",
        "PINOT_MCP_HTTP_HOST",
        "PINOT_MCP_HTTP_PORT",
    ):
        monkeypatch.delenv(name, raising=False)


class RecordingController:
    """httpx mock transport that remembers every request it answers."""

    def __init__(self, handler: Optional[Callable[[httpx.Request], httpx.Response]] = None) -> None:
        self.requests: List[httpx.Request] = []
        self._handler = handler or (lambda request: httpx.Response(200, json={}))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def _make_client(
    controller: RecordingController,
    **config_overrides: Any,
) -> ClusterResourceClient:
    settings: dict = {"controller_url": CONTROLLER_URL}
    settings.update(config_overrides)
    config = ControllerConfig(**settings)
    transport = ControllerTransport(config=config, http_transport=controller.transport())
    return ClusterResourceClient(transport)


@pytest.fixture
def controller() -> RecordingController:
    return RecordingController()


@pytest.fixture
def client(controller: RecordingController) -> ClusterResourceClient:
    return _make_client(controller)


@pytest.fixture
def client_factory():
    """Build (client, controller) pairs with a custom handler or config."""

    def factory(
        handler: Optional[Callable[[httpx.Request], httpx.Response]] = None,
        **config_overrides: Any,
    ) -> Tuple[ClusterResourceClient, RecordingController]:
        recorder = RecordingController(handler)
        return _make_client(recorder, **config_overrides), recorder

    return factory
