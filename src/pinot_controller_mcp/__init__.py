# Pinot Controller MCP Server
# File: __init__.py
# Version: v2

"""Top-level package for the Pinot Controller MCP Server."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from .client import ClusterResourceClient
from .config import ControllerConfig
from .transport import ControllerTransport

__all__ = [
    "__version__",
    "ClusterResourceClient",
    "ControllerConfig",
    "ControllerTransport",
]


def _resolve_version() -> str:
    """Resolve installed distribution version.

    Falls back to the source version when running from a checkout without
    installed package metadata.
    """
    try:
        return version("pinot-controller-mcp")
    except PackageNotFoundError:
        return "0.1.0"


__version__ = _resolve_version()
