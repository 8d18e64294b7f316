"""MCP services for AI Calendar."""

from .server import run_mcp_server

__all__ = ["run_mcp_server"]
