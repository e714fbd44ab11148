from collections.abc import Sequence
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from codegen_templates.core.files import load_templates_from_file
from codegen_templates.core.regions import build_region_tree
from codegen_templates.errors import TemplateError
from codegen_templates.models import ForeachRegion, LoadedTemplate, RegionNode, ReplaceRegion

console = Console()

PathArg = Annotated[str, typer.Argument(help="Path to the template file.")]
NamedOpt = Annotated[bool, typer.Option("--named", help="The file holds DEFINE(\"name\") templates.")]
NameOpt = Annotated[str | None, typer.Option("--name", help="Only show the template with this name.")]


def _render_table(title: str, headers: Sequence[str], rows: Sequence[tuple[Any, ...]]) -> None:
    table = Table(title=title, show_lines=False)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*(escape(str(v)) for v in row))
    console.print(table)
    console.print(f"({len(rows)} rows)")


def _load_selected(path: str, named: bool, name: str | None) -> list[LoadedTemplate]:
    try:
        templates = load_templates_from_file(path, named=named)
    except (TemplateError, FileNotFoundError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1) from None

    if name is None:
        return list(templates.values())
    if name not in templates:
        console.print(f"[red]No template named '{escape(name)}'. Available: {escape(str(sorted(templates)))}[/red]")
        raise typer.Exit(1)
    return [templates[name]]


def _title(template: LoadedTemplate) -> str:
    return f"Template '{template.name}'" if template.name else "Template"


def _describe_region(node: RegionNode) -> str:
    region = node.region
    if isinstance(region, ForeachRegion):
        return f"FOREACH {region.variable_name} : {region.collection_name}"
    if isinstance(region, ReplaceRegion):
        return f"REPLACE -> {region.variable_name} ({len(region.replace_ranges)} matches)"
    return f"INSERT {region.variable_name} (indentation {region.indentation})"


def _add_tree_nodes(parent: Tree, nodes: list[RegionNode]) -> None:
    for node in nodes:
        label = f"{_describe_region(node)}  ranges {node.range_begin}..{node.range_end}"
        _add_tree_nodes(parent.add(escape(label)), node.children)


def check(path: PathArg, named: NamedOpt = False) -> None:
    """Load a template file and report whether it is valid."""
    templates = _load_selected(path, named, None)
    for template in templates:
        console.print(
            f"[green]OK[/green] {escape(_title(template))}: {len(template.ranges)} ranges, "
            f"{len(template.region_markers)} region markers, {template.replace_range_count} replace ranges"
        )


def ranges(path: PathArg, named: NamedOpt = False, name: NameOpt = None) -> None:
    """List the text ranges of each template."""
    for template in _load_selected(path, named, name):
        rows = [
            (
                index,
                "match" if text_range.is_replace_match else "text",
                text_range.begin,
                text_range.end,
                "" if text_range.indentation is None else text_range.indentation,
                "yes" if text_range.starts_new_line else "",
                repr(template.text_of(text_range)),
            )
            for index, text_range in enumerate(template.ranges)
        ]
        _render_table(_title(template), ["#", "kind", "begin", "end", "indent", "newline", "text"], rows)


def markers(path: PathArg, named: NamedOpt = False, name: NameOpt = None) -> None:
    """List the region markers of each template."""
    for template in _load_selected(path, named, name):
        rows = [
            (
                index,
                "begin" if marker.is_begin else "end",
                marker.range_index,
                marker.replace_range_index,
                "" if marker.region is None else marker.region.kind,
            )
            for index, marker in enumerate(template.region_markers)
        ]
        _render_table(_title(template), ["#", "event", "range", "replace", "region"], rows)


def tree(path: PathArg, named: NamedOpt = False, name: NameOpt = None) -> None:
    """Show the region nesting of each template."""
    for template in _load_selected(path, named, name):
        root = Tree(escape(_title(template)))
        _add_tree_nodes(root, build_region_tree(template))
        console.print(root)


def preview(path: PathArg, named: NamedOpt = False, name: NameOpt = None) -> None:
    """Print each template with [variable] placeholders for replace matches."""
    for template in _load_selected(path, named, name):
        console.rule(escape(_title(template)))
        console.print(Text(template.debug_text()))
