# Pinot Controller MCP Server
# File: servers/stdio_server.py
# Version: v2

"""STDIO entrypoint for the Pinot Controller MCP server.

This is the script behind the ``pinot-controller-mcp`` console command.
"""

from __future__ import annotations

from . import build_server


def main() -> None:
    """Synchronous entrypoint for console_scripts."""
    mcp = build_server()

    # Let FastMCP handle stdio + event loop setup.
    mcp.run()


if __name__ == "__main__":
    main()
