"""
FlashFind MCP Server

Usage as standalone server:
    python -m flashfind.presentation.mcp_server

Or in mcp.json:
    {
        "servers": {
            "flashfind": {
                "type": "stdio",
                "command": "python",
                "args": ["-m", "flashfind.presentation.mcp_server"],
                "env": {"FLASHFIND_CATALOG_URL": "http://localhost:8000"}
            }
        }
    }
"""

from __future__ import annotations

from .server import create_server, get_container, main
from .tools import register_all_tools

__all__ = ["create_server", "get_container", "main", "register_all_tools"]
