# Pinot Controller MCP Server
# File: tools/__init__.py
# Version: v2

"""MCP tools exposing the controller operations."""

from __future__ import annotations

from .tasks import register_tools

__all__ = ["register_tools"]
