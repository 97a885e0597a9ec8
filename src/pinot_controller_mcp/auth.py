# Pinot Controller MCP Server
# File: auth.py
# Version: v2

"""Static credential headers for the Pinot controller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict
import base64

from .config import ControllerConfig


@dataclass
class ControllerAuth:
    """Builds the Authorization header from configured credentials.

    Pinot controllers with access control enabled accept either a full
    header value (``Basic ...`` / ``Bearer ...``) or HTTP Basic credentials.
    A token is preferred over username/password when both are configured.
    """

    config: ControllerConfig

    def headers(self) -> Dict[str, str]:
        token = self.config.auth_token
        if token:
            # Already carries a scheme, e.g. "Basic YWRtaW46dmVyeXNlY3JldA=="
            if " " in token:
                return {"Authorization": token}
            return {"Authorization": f"Bearer {token}"}

        if self.config.username and self.config.password is not None:
            raw_credentials = f"{self.config.username}:{self.config.password}"
            basic_token = base64.b64encode(raw_credentials.encode("utf-8")).decode("ascii")
            return {"Authorization": f"Basic {basic_token}"}

        return {}

    @property
    def configured(self) -> bool:
        return bool(self.headers())
