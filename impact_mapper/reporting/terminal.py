"""Rich terminal rendering for scan, impact and graph results."""
from collections import Counter
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..analyzer.graph_builder import DependencyGraph
from ..analyzer.impact import ImpactReport, LocatedEntity, ScanResult
from ..utils.logger import sanitize_for_terminal

SEVERITY_STYLES = {
    'NONE': 'green',
    'LOW': 'yellow',
    'MEDIUM': 'dark_orange',
    'HIGH': 'red',
}

REF_KIND_ICONS = {
    'definition': '◆',
    'import': '⬇',
    'call': '▶',
    'instantiation': '✦',
    'member-access': '•',
    'reference': '○',
}

REF_KIND_STYLES = {
    'definition': 'cyan',
    'import': 'blue',
    'call': 'green',
    'instantiation': 'magenta',
    'member-access': 'yellow',
    'reference': 'bright_black',
}

ENTITY_KIND_LABELS = {
    'function': ('[green]ƒ func[/green]', 'ƒ Function'),
    'class': ('[magenta]◇ class[/magenta]', '◇ Class'),
    'variable': ('[yellow]▪ var[/yellow]', '▪ Variable'),
}


def _header(console: Console, title: str):
    console.print()
    console.print(Panel(sanitize_for_terminal(title), style="bold cyan", expand=False))


def print_scan_results(console: Console, result: ScanResult, verbose: bool = False):
    """Print every discovered entity, grouped by module."""
    _header(console, "⚡ IMPACT MAPPER - Scan Results")
    console.print(f"[dim]Scanned[/dim] [bold]{result.file_count}[/bold] [dim]files[/dim]\n")

    total_entities = 0
    for module, entities in result.entity_map.items():
        if not entities:
            continue

        table = Table(title=sanitize_for_terminal(f"📄 {module}"), title_justify="left",
                      show_header=False, box=None, padding=(0, 2))
        table.add_column("Kind")
        table.add_column("Name", style="bold")
        table.add_column("Export")
        table.add_column("Line", style="dim", justify="right")

        for entity in entities:
            total_entities += 1
            kind_label = ENTITY_KIND_LABELS.get(entity.kind, (entity.kind, entity.kind))[0]
            export_label = "[cyan]⬆ exported[/cyan]" if entity.exported else "[dim]⬚ local[/dim]"
            table.add_row(
                sanitize_for_terminal(kind_label),
                escape(entity.name),
                sanitize_for_terminal(export_label),
                f":{entity.line}",
            )

        console.print(table)
        console.print()

    if result.failed_modules:
        console.print(f"[yellow]Skipped {len(result.failed_modules)} unparseable file(s)[/yellow]")
        if verbose:
            for module in result.failed_modules:
                console.print(f"  [dim]- {escape(module)}[/dim]")

    console.print(f"[dim]Total:[/dim] [bold]{total_entities}[/bold] [dim]entities across[/dim] "
                  f"[bold]{result.file_count}[/bold] [dim]files[/dim]\n")


def print_impact_results(console: Console, impact: ImpactReport, max_references: int = 50,
                         other_candidates: Optional[List[LocatedEntity]] = None):
    """Print the impact report: target summary, then references grouped by module."""
    entity = impact.entity
    severity_style = SEVERITY_STYLES.get(impact.severity, 'white')

    _header(console, "💥 IMPACT MAPPER - Impact Report")

    kind_label = ENTITY_KIND_LABELS.get(entity.kind, (entity.kind, entity.kind))[1]
    console.print(sanitize_for_terminal(
        f"[dim]Target:  [/dim] [bold]{escape(entity.name)}[/bold] [dim]({kind_label})[/dim]"))
    console.print(f"[dim]Defined: [/dim] [blue]{escape(entity.module)}[/blue][dim]:{entity.line}[/dim]")
    console.print("[dim]Exported:[/dim] " + ("[green]Yes[/green]" if entity.exported else "[red]No[/red]"))
    console.print(sanitize_for_terminal(
        f"[dim]Severity:[/dim] [bold {severity_style}]■ {impact.severity}[/bold {severity_style}] "
        f"[dim]({len(impact.affected_modules)} modules affected)[/dim]"))

    if other_candidates:
        console.print(f"\n[yellow]Warning:[/yellow] '{escape(entity.name)}' is also declared in:")
        for candidate in other_candidates:
            console.print(f"  [dim]- {escape(candidate.module)}:{candidate.line}[/dim]")
        console.print("[dim]  Use --file to pick a different declaration.[/dim]")

    console.print("\n[bold]References:[/bold]\n")

    by_module = {}
    for ref in impact.references:
        by_module.setdefault(ref.module, []).append(ref)

    for module, refs in by_module.items():
        if module == entity.module:
            console.print(sanitize_for_terminal(f"[cyan]📄 {escape(module)}[/cyan] [dim](definition)[/dim]"))
        else:
            console.print(sanitize_for_terminal(f"[yellow]📄 {escape(module)}[/yellow] [red]← AFFECTED[/red]"))

        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("Kind")
        table.add_column("Line", justify="right", style="dim")
        table.add_column("Code", style="dim", overflow="ellipsis", no_wrap=True)

        for ref in refs[:max_references]:
            style = REF_KIND_STYLES.get(ref.kind, 'bright_black')
            icon = REF_KIND_ICONS.get(ref.kind, '○')
            table.add_row(
                sanitize_for_terminal(f"[{style}]{icon} {ref.kind}[/{style}]"),
                f":{ref.line}",
                escape(ref.source_text),
            )
        console.print(table)

        hidden = len(refs) - max_references
        if hidden > 0:
            console.print(f"  [dim]... {hidden} more[/dim]")
        console.print()

    if not impact.affected_modules:
        console.print("[green]No other module depends on this entity.[/green]\n")


def print_graph_summary(console: Console, graph: DependencyGraph, output_path: str, top: int = 5):
    """Print node/edge counts and the most imported modules."""
    _header(console, "📊 IMPACT MAPPER - Graph Export")
    console.print(f"[dim]Nodes:[/dim] [bold]{len(graph.nodes)}[/bold] [dim]modules[/dim]")
    console.print(f"[dim]Edges:[/dim] [bold]{len(graph.edges)}[/bold] [dim]dependencies[/dim]\n")

    nx_graph = graph.to_networkx()
    in_degrees = Counter(dict(nx_graph.in_degree()))
    most_imported = [(module, count) for module, count in in_degrees.most_common(top) if count > 0]

    if most_imported:
        table = Table(title="Most Imported Modules", header_style="bold magenta")
        table.add_column("Module", style="cyan")
        table.add_column("Imported by", justify="right", style="yellow")
        for module, count in most_imported:
            table.add_row(escape(module), str(count))
        console.print(table)
        console.print()

    console.print(sanitize_for_terminal(f"[green]✓ Graph saved to:[/green] {escape(output_path)}"))
