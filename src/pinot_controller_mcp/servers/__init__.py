# Pinot Controller MCP Server
# File: servers/__init__.py
# Version: v1

"""MCP server construction and transport entrypoints."""

from __future__ import annotations

import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP

from ..config import ControllerConfig
from ..tools import tasks

logger = logging.getLogger(__name__)

SERVER_NAME = "pinot-controller-mcp"


def build_server(config: Optional[ControllerConfig] = None) -> FastMCP:
    """Create a FastMCP server with every controller tool registered."""
    cfg = config or ControllerConfig.from_env()

    # MCP stdio owns stdout, so logs go to stderr (basicConfig default).
    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    mcp = FastMCP(SERVER_NAME, host=cfg.http_host, port=cfg.http_port)
    tasks.register_tools(mcp)

    if cfg.mock_mode:
        logger.info("PINOT_MOCK_MODE is on; controller calls are served in-process.")
    elif not cfg.controller_url:
        logger.warning("PINOT_CONTROLLER_URL is not set; tool calls will fail until it is.")

    return mcp
