"""MCP server implementation for typelink."""

from __future__ import annotations

import json
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from typelink.core.dependencies import resolve_document
from typelink.core.exceptions import TypelinkError
from typelink.signatures import parse_type
from typelink.typesystem import ResolverSettings, TypeMapper

server = Server("typelink")


def _get_mapper(config: str | None) -> TypeMapper:
    """Mapper for a configuration file, or the built-in defaults."""
    if config:
        return TypeMapper.from_config(config)
    return TypeMapper()


@server.list_tools()  # type: ignore[no-untyped-call, untyped-decorator]
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [
        Tool(
            name="typelink_convert",
            description=(
                "Convert C++-style type signatures (e.g. 'const QList<KWin::Window*>&') "
                "to TypeScript-style notation. Returns each target type with its category."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "signatures": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Type signatures to convert",
                    },
                    "config": {
                        "type": "string",
                        "description": "Path to a JSON type mapping configuration (optional)",
                    },
                },
                "required": ["signatures"],
            },
        ),
        Tool(
            name="typelink_parse",
            description=(
                "Parse a type signature into its structure: namespace, base type, "
                "generic arguments, and const/pointer/reference/array flags."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "signature": {
                        "type": "string",
                        "description": "Type signature to parse",
                    },
                },
                "required": ["signature"],
            },
        ),
        Tool(
            name="typelink_types",
            description="List registered type mappings, optionally filtered by category.",
            inputSchema={
                "type": "object",
                "properties": {
                    "category": {
                        "type": "string",
                        "description": "Category filter, e.g. 'primitive' or 'qt-basic' (optional)",
                    },
                    "config": {
                        "type": "string",
                        "description": "Path to a JSON type mapping configuration (optional)",
                    },
                },
            },
        ),
        Tool(
            name="typelink_resolve",
            description=(
                "Parse a reference documentation page (file path or URL) and follow links "
                "to every type it uses. Returns resolution statistics and the declarations found."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "document": {
                        "type": "string",
                        "description": "Path or URL of the seed reference page",
                    },
                    "primary_namespace": {
                        "type": "string",
                        "description": "Namespace tried for unqualified type names (optional)",
                    },
                    "max_iterations": {
                        "type": "integer",
                        "description": "Maximum resolution rounds (default: 50)",
                        "default": 50,
                    },
                    "collect_enums": {
                        "type": "boolean",
                        "description": "Also collect enums from linked namespace pages",
                        "default": True,
                    },
                },
                "required": ["document"],
            },
        ),
    ]


@server.call_tool()  # type: ignore[untyped-decorator]
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        if name == "typelink_convert":
            result = _handle_convert(arguments["signatures"], arguments.get("config"))
        elif name == "typelink_parse":
            result = _handle_parse(arguments["signature"])
        elif name == "typelink_types":
            result = _handle_types(arguments.get("category"), arguments.get("config"))
        elif name == "typelink_resolve":
            result = await _handle_resolve(
                arguments["document"],
                arguments.get("primary_namespace"),
                arguments.get("max_iterations", 50),
                arguments.get("collect_enums", True),
            )
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    except (TypelinkError, KeyError, ValueError) as e:
        return [TextContent(type="text", text=json.dumps({"error": str(e)}))]


def _handle_convert(signatures: list[str], config: str | None) -> dict[str, Any]:
    """Handle typelink_convert tool."""
    mapper = _get_mapper(config)
    return {
        "results": [
            {"signature": signature, **mapper.type_info(signature).to_dict()}
            for signature in signatures
        ]
    }


def _handle_parse(signature: str) -> dict[str, Any]:
    """Handle typelink_parse tool."""
    parsed = parse_type(signature)
    if parsed is None:
        return {"error": f"Could not parse '{signature}'"}
    return parsed.to_dict()


def _handle_types(category: str | None, config: str | None) -> dict[str, Any]:
    """Handle typelink_types tool."""
    registry = _get_mapper(config).registry
    definitions = (
        registry.types_by_category(category)
        if category
        else [registry.get_type(name) for name in registry.all_type_names()]
    )
    return {
        "results": [
            d.model_dump(by_alias=True, exclude_none=True)
            for d in _unique(definitions)
        ]
    }


async def _handle_resolve(
    document: str,
    primary_namespace: str | None,
    max_iterations: int,
    collect_enums: bool,
) -> dict[str, Any]:
    """Handle typelink_resolve tool."""
    settings = ResolverSettings(
        max_iterations=max_iterations, primary_namespace=primary_namespace
    )
    result = await resolve_document(document, settings=settings, collect_enums=collect_enums)
    return result.to_dict()


def _unique(definitions: list[Any]) -> list[Any]:
    seen: set[str] = set()
    unique = []
    for definition in definitions:
        if definition is not None and definition.name not in seen:
            seen.add(definition.name)
            unique.append(definition)
    return unique


async def serve() -> None:
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
