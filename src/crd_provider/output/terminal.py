"""Rich terminal output."""

from __future__ import annotations

from collections.abc import Mapping

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from crd_provider.provider.registry import RegistryResult
from crd_provider.provider.resource import ResourceSchema
from crd_provider.schema.attributes import (
    NESTED_TYPES,
    Attribute,
    ListAttribute,
    MapAttribute,
    walk,
)

SEVERITY_STYLES = {
    "error": ("ERROR", "red bold"),
    "warning": ("WARNING", "yellow"),
}


def render_resources(
    result: RegistryResult,
    provider_type_name: str,
    no_color: bool = False,
) -> None:
    """Print registered resource types and diagnostics."""
    console = Console(no_color=no_color)

    if result.resources:
        table = Table(title="Resource Types", show_header=True)
        table.add_column("Type Name", style="bold")
        table.add_column("Group")
        table.add_column("Version")
        table.add_column("Kind")
        for r in result.resources:
            table.add_row(f"{provider_type_name}_{r.name}", r.group, r.version, r.kind)
        console.print(table)
    else:
        console.print("[dim]No resource types registered.[/dim]")

    _render_diagnostics(console, result)

    summary = Table(title="Summary", show_header=False, box=None)
    summary.add_row("[green]Registered[/green]", str(len(result.resources)))
    if result.errors:
        summary.add_row("[red bold]Errors[/red bold]", str(len(result.errors)))
    console.print(summary)


def render_schema(
    type_name: str, schema: ResourceSchema, no_color: bool = False
) -> None:
    """Print a resource's attribute tree."""
    render_attributes(f"{type_name} (schema version {schema.version})", schema.attributes, no_color)


def render_attributes(
    title: str, attributes: Mapping[str, Attribute], no_color: bool = False
) -> None:
    console = Console(no_color=no_color)
    tree = Tree(Text(title, style="bold cyan"))
    _add_branch(tree, attributes)
    console.print(tree)

    nodes = [attr for _, attr in walk(attributes)]
    required = sum(1 for attr in nodes if attr.required)
    console.print(f"[dim]{len(nodes)} attribute(s), {required} required[/dim]")


def _add_branch(tree: Tree, attributes: Mapping[str, Attribute]) -> None:
    for name, attr in attributes.items():
        branch = tree.add(_label(name, attr))
        if isinstance(attr, NESTED_TYPES):
            _add_branch(branch, attr.attributes)


def _label(name: str, attr: Attribute) -> Text:
    label = Text()
    label.append(name, style="bold")
    type_desc = attr.type_name
    if isinstance(attr, (ListAttribute, MapAttribute)):
        type_desc += f"({attr.element_type.value})"
    label.append(f"  {type_desc}", style="magenta")
    if attr.required:
        label.append("  required", style="red")
    else:
        label.append("  optional", style="dim")
    if attr.description:
        label.append(f"  {_truncate(attr.description)}", style="dim italic")
    return label


def _render_diagnostics(console: Console, result: RegistryResult) -> None:
    if not result.diagnostics:
        return
    console.print()
    console.print("[bold red]Diagnostics:[/bold red]")
    for d in result.diagnostics:
        label, style = SEVERITY_STYLES.get(d.severity, ("INFO", "dim"))
        console.print(f"  [{style}]{label}[/{style}] {escape(d.summary)}")
        console.print(f"    [dim]{escape(d.detail)}[/dim]")
    console.print()


def _truncate(text: str, limit: int = 80) -> str:
    """First line of a description, shortened for display."""
    line = text.strip().splitlines()[0] if text.strip() else ""
    if len(line) > limit:
        line = line[: limit - 3] + "..."
    return line
