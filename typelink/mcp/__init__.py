"""
MCP server for typelink.

Exposes type conversion and dependency resolution to LLMs via the Model Context Protocol.

Tools:
    - typelink_convert: Convert signatures to target notation
    - typelink_parse: Show the parsed structure of a signature
    - typelink_types: List registered type mappings
    - typelink_resolve: Resolve every type referenced from a reference page

Usage:
    Install: pip install typelink
    Run: mcp-server-typelink
"""

import asyncio

from typelink.mcp.server import serve as _serve


def serve() -> None:
    """Entry point for the MCP server."""
    asyncio.run(_serve())


__all__ = ["serve"]
