# Pinot Controller MCP Server
# File: config.py
# Version: v4

"""Configuration loading for the Pinot Controller MCP Server."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Callable, TypeVar

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off"})

Number = TypeVar("Number", int, float)


def _optional_env(name: str) -> str | None:
    """Stripped value of ``name``, or None when unset or blank."""
    val = (os.getenv(name) or "").strip()
    return val or None


def _env_flag(name: str, default: bool) -> bool:
    """Read a switch such as PINOT_MOCK_MODE.

    Unrecognised words keep ``default`` so a typo never flips TLS off.
    """
    val = _optional_env(name)
    if val is None:
        return default
    word = val.lower()
    if word in _TRUTHY:
        return True
    if word in _FALSY:
        return False
    return default


def _env_number(name: str, default: Number, cast: Callable[[str], Number], lo: Number, hi: Number) -> Number:
    """Read a bounded number; unparsable values fall back to ``default``."""
    val = _optional_env(name)
    try:
        value = default if val is None else cast(val)
    except ValueError:
        value = default
    return min(max(value, lo), hi)


@dataclass
class ControllerConfig:
    """Connection settings for a Pinot controller.

    Only the transport reads these; the resource client never sees them.
    """

    controller_url: str | None
    auth_token: str | None = None
    username: str | None = None
    password: str | None = None
    mock_mode: bool = False

    verify_tls: bool = True
    timeout_seconds: float = 30.0

    # MCP server settings
    log_level: str = "WARNING"
    http_host: str = "127.0.0.1"
    http_port: int = 8000

    @classmethod
    def from_env(cls) -> "ControllerConfig":
        """Create configuration from environment variables."""
        return cls(
            controller_url=_optional_env("PINOT_CONTROLLER_URL"),
            auth_token=_optional_env("PINOT_CONTROLLER_TOKEN"),
            username=_optional_env("PINOT_CONTROLLER_USERNAME"),
            password=os.getenv("PINOT_CONTROLLER_PASSWORD") or None,
            mock_mode=_env_flag("PINOT_MOCK_MODE", False),
            verify_tls=_env_flag("PINOT_VERIFY_TLS", True),
            timeout_seconds=_env_number("PINOT_TIMEOUT_SECONDS", 30.0, float, 1.0, 600.0),
            log_level=(_optional_env("PINOT_MCP_LOG_LEVEL") or "WARNING").upper(),
            http_host=_optional_env("PINOT_MCP_HTTP_HOST") or "127.0.0.1",
            http_port=_env_number("PINOT_MCP_HTTP_PORT", 8000, int, 1, 65535),
        )
