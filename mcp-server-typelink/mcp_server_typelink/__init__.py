"""MCP server for typelink - C++ type signature translation and dependency resolution."""

from typelink.mcp import serve


def main() -> None:
    """Entry point for mcp-server-typelink."""
    serve()


__all__ = ["main", "serve"]
