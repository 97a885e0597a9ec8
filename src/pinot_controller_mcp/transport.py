# Pinot Controller MCP Server
# File: transport.py
# Version: v3

"""HTTP transport for the Pinot controller.

The transport owns everything the resource client deliberately ignores:
base URL resolution, default and authentication headers, timeout and TLS
settings. It executes one :class:`RequestSpec` per call and hands back the
``httpx.Response`` as-is. Non-2xx answers raise ``httpx.HTTPStatusError``
and network failures raise ``httpx.RequestError``; neither is wrapped.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

import httpx

from .auth import ControllerAuth
from .config import ControllerConfig
from .descriptors import RequestSpec

logger = logging.getLogger(__name__)

DEFAULT_HEADERS: Dict[str, str] = {
    "Accept": "application/json, text/plain, */*",
}


class ControllerTransport:
    """Executes request specs against a configured controller."""

    def __init__(
        self,
        config: ControllerConfig,
        auth: Optional[ControllerAuth] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config
        self.auth = auth if auth is not None else ControllerAuth(config=config)
        self._http_transport = http_transport

    @property
    def base_url(self) -> str:
        if not self.config.controller_url:
            raise RuntimeError(
                "PINOT_CONTROLLER_URL is not set. "
                "Point it at the controller, e.g. http://localhost:9000, "
                "or enable PINOT_MOCK_MODE."
            )
        return self.config.controller_url.rstrip("/")

    def default_headers(self) -> Dict[str, str]:
        headers = dict(DEFAULT_HEADERS)
        headers.update(self.auth.headers())
        return headers

    async def send(self, request: RequestSpec) -> httpx.Response:
        """Issue ``request`` and return the controller's response."""
        base_url = self.base_url

        logger.debug("%s %s%s", request.method, base_url, request.url)

        async with httpx.AsyncClient(
            base_url=base_url,
            headers=self.default_headers(),
            timeout=self.config.timeout_seconds,
            verify=self.config.verify_tls,
            transport=self._http_transport,
        ) as http_client:
            response = await http_client.request(
                request.method,
                request.url,
                content=request.body,
                headers=dict(request.headers) or None,
            )

        if response.is_error:
            logger.debug(
                "%s %s failed with HTTP %s",
                request.method,
                request.url,
                response.status_code,
            )
        response.raise_for_status()
        return response
