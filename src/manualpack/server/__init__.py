"""MCP server exposing a manual pack."""

from manualpack.server.mcp_server import create_mcp_server

__all__ = ["create_mcp_server"]
