# Pinot Controller MCP Server
# File: servers/http_server.py
# Version: v2

"""Streamable-HTTP entrypoint for the Pinot Controller MCP server.

Binds to PINOT_MCP_HTTP_HOST / PINOT_MCP_HTTP_PORT (default 127.0.0.1:8000).
"""

from __future__ import annotations

from . import build_server


def main() -> None:
    mcp = build_server()
    mcp.run(transport="streamable-http")


if __name__ == "__main__":
    main()
