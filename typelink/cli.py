"""CLI entry point for typelink."""

import asyncio
import json
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from rich.console import Console
from rich.table import Table

from typelink.core.dependencies import resolve_document
from typelink.core.exceptions import TypelinkError
from typelink.log import setup_logging
from typelink.signatures import ParsedType, parse_type
from typelink.typesystem import ResolverSettings, TypeMapper

app = typer.Typer(
    name="typelink",
    help="Translate C++ type signatures and resolve type dependencies in reference docs.",
    no_args_is_help=True,
)
console = Console()

ConfigOption = Annotated[
    Path | None, typer.Option("--config", "-c", help="JSON type mapping configuration")
]
JsonOption = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")]


def get_mapper(config: Path | None) -> TypeMapper:
    """Mapper for a configuration file, or the built-in defaults."""
    try:
        return TypeMapper.from_config(config) if config else TypeMapper()
    except TypelinkError as e:
        fail(e)


def fail(error: Exception) -> NoReturn:
    console.print(f"[red]Error:[/red] {error}")
    raise typer.Exit(code=1)


def format_flags(parsed: ParsedType) -> str:
    """Qualifier annotations for tree output."""
    flags = [
        label
        for label, enabled in (
            ("const", parsed.is_const),
            ("pointer", parsed.is_pointer),
            ("reference", parsed.is_reference),
            ("array", parsed.is_array),
        )
        if enabled
    ]
    if flags:
        return f"[yellow]\\[{', '.join(flags)}][/]"
    return ""


@app.command()
def convert(
    signatures: Annotated[list[str], typer.Argument(help="Type signatures to convert")],
    config: ConfigOption = None,
    output_json: JsonOption = False,
) -> None:
    """Convert C++ type signatures to target notation."""
    mapper = get_mapper(config)

    if output_json:
        result = [
            {"signature": signature, **mapper.type_info(signature).to_dict()}
            for signature in signatures
        ]
        print(json.dumps(result))
        return

    for signature in signatures:
        info = mapper.type_info(signature)
        marker = "" if info.can_convert else " [dim](passthrough)[/]"
        console.print(f"[cyan]{signature}[/cyan] -> [green]{info.target_type}[/green]{marker}")


@app.command()
def parse(
    signature: Annotated[str, typer.Argument(help="Type signature to parse")],
    output_json: JsonOption = False,
) -> None:
    """Show the parsed structure of a type signature."""
    parsed = parse_type(signature)
    if parsed is None:
        fail(TypelinkError(f"Could not parse '{signature}'"))

    if output_json:
        print(json.dumps(parsed.to_dict()))
        return

    def print_tree(node: ParsedType, prefix: str = "", is_last: bool = True) -> None:
        connector = "└── " if is_last else "├── "
        namespace = f" [dim]in {node.namespace}[/]" if node.namespace else ""
        console.print(f"{prefix}{connector}[cyan]{node.base_type}[/cyan]{namespace} {format_flags(node)}")
        child_prefix = prefix + ("    " if is_last else "│   ")
        for i, arg in enumerate(node.template_args):
            print_tree(arg, child_prefix, i == len(node.template_args) - 1)

    console.print(f"[bold]{parsed.full_name}[/bold]")
    print_tree(parsed)


@app.command()
def types(
    category: Annotated[
        str | None, typer.Option("--category", "-t", help="Filter by category, e.g. primitive")
    ] = None,
    config: ConfigOption = None,
    output_json: JsonOption = False,
) -> None:
    """List registered type mappings."""
    registry = get_mapper(config).registry
    if category:
        definitions = registry.types_by_category(category)
    else:
        definitions = registry.export_config().mappings

    if output_json:
        print(json.dumps([d.model_dump(by_alias=True, exclude_none=True) for d in definitions]))
        return

    if not definitions:
        console.print(f"No types in category '[cyan]{category}[/cyan]'")
        return

    table = Table("Name", "Target", "Category", "Aliases")
    for definition in definitions:
        table.add_row(
            definition.name,
            definition.target_type,
            definition.category,
            ", ".join(definition.aliases),
        )
    console.print(table)


@app.command()
def resolve(
    document: Annotated[str, typer.Argument(help="Path or URL of the seed reference page")],
    config: ConfigOption = None,
    namespace: Annotated[
        str | None,
        typer.Option("--namespace", "-n", help="Namespace tried for unqualified type names"),
    ] = None,
    max_iterations: Annotated[
        int, typer.Option("--max-iterations", "-m", help="Maximum resolution rounds")
    ] = 50,
    document_root: Annotated[
        str | None,
        typer.Option("--document-root", "-r", help="Where to look for pages without a known source"),
    ] = None,
    enums: Annotated[
        bool, typer.Option("--enums/--no-enums", help="Collect enums from namespace pages")
    ] = True,
    output_json: JsonOption = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")] = False,
) -> None:
    """Resolve every type referenced from a reference page."""
    setup_logging(verbose)

    try:
        settings = ResolverSettings(
            max_iterations=max_iterations,
            primary_namespace=namespace,
            document_root=document_root,
        )
    except ValueError as e:
        fail(e)

    mapper = get_mapper(config)
    try:
        result = asyncio.run(
            resolve_document(
                document, settings=settings, registry=mapper.registry, collect_enums=enums
            )
        )
    except TypelinkError as e:
        fail(e)

    if output_json:
        print(json.dumps(result.to_dict()))
        return

    stats = result.stats
    console.print("[green]Done![/green]")
    console.print(f"  Resolved: {stats.resolved_types}")
    console.print(f"  Rounds: {stats.iterations}")
    if stats.unresolved_types:
        console.print(f"  [yellow]Unresolved: {stats.unresolved_types}[/yellow]")
    if stats.circular_references:
        console.print(f"  [yellow]Circular: {', '.join(sorted(result.circular_references))}[/]")
    if stats.deferred_namespaces:
        console.print(f"  [dim]Namespace pages: {stats.deferred_namespaces}[/]")
    if result.namespace_enums:
        console.print(f"  [dim]Namespace enums: {result.namespace_enums}[/]")
    if stats.cap_reached:
        console.print(f"  [red]Stopped after {max_iterations} rounds with work left[/red]")

    declarations = result.repository.get_all_declarations()
    if declarations:
        console.print()
        for name, declaration in sorted(declarations.items()):
            parents = f" [dim]: {', '.join(declaration.inheritance)}[/]" if declaration.inheritance else ""
            console.print(f"[cyan]{name}[/cyan]{parents}")
            console.print(
                f"  {len(declaration.methods)} methods, {len(declaration.slots)} slots, "
                f"{len(declaration.signals)} signals, {len(declaration.properties)} properties"
            )


if __name__ == "__main__":
    app()
