"""Impact Mapper CLI - what breaks if I change this symbol?"""
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from impact_mapper.analyzer.impact import ImpactEngine
from impact_mapper.config import __version__, get_config
from impact_mapper.reporting.html_graph import generate_html_graph
from impact_mapper.reporting.json_export import dumps, write_json
from impact_mapper.reporting.terminal import (
    print_graph_summary,
    print_impact_results,
    print_scan_results,
)
from impact_mapper.utils.safe_console import SafeConsole

app = typer.Typer(
    name="impact-mapper",
    help="Static analysis dependency mapper for JavaScript and TypeScript codebases",
    add_completion=False
)
# Use SafeConsole for Windows Unicode compatibility
console = SafeConsole(force_terminal=True)

GRAPH_FORMATS = ('html', 'json')


def _resolve_project(project_path: str) -> Path:
    """Resolve the project directory or exit with an error."""
    path = Path(project_path).resolve()
    if not path.is_dir():
        console.print(f"[bold red]Error:[/bold red] Project path does not exist: {escape(str(path))}")
        raise typer.Exit(1)
    return path


def _make_engine(project_root: Path) -> ImpactEngine:
    return ImpactEngine(project_root, extra_exclude_dirs=get_config().extra_exclude_dirs)


@app.command()
def scan(
    project_path: str = typer.Argument(".", help="Path to the JavaScript/TypeScript project"),
    json_output: bool = typer.Option(False, "--json", help="Print the entity map as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="List files that could not be parsed"),
):
    """Scan a project and list all discovered entities."""
    engine = _make_engine(_resolve_project(project_path))
    result = engine.scan()

    if json_output:
        typer.echo(dumps(result.to_dict()))
        return

    print_scan_results(console, result, verbose=verbose)


@app.command()
def impact(
    project_path: str = typer.Argument(".", help="Path to the JavaScript/TypeScript project"),
    entity: str = typer.Option(..., "--entity", "-e", help="Name of the entity (function, class, or variable)"),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="File where the entity is defined (for disambiguation)"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Generate an HTML dependency graph with impact highlighted"),
    json_output: bool = typer.Option(False, "--json", help="Print the impact report as JSON"),
):
    """Analyze the impact of changing a specific entity."""
    engine = _make_engine(_resolve_project(project_path))
    engine.scan()

    report = engine.get_impact(entity, file)
    if report is None:
        console.print(f"\n[red]✗ Entity \"{escape(entity)}\" not found.[/red]")
        if file:
            console.print(f"[dim]  Searched in files matching: {escape(file)}[/dim]")
        console.print("[dim]  Run \"impact-mapper scan <dir>\" to see all entities.[/dim]\n")
        raise typer.Exit(1)

    if json_output:
        typer.echo(dumps(report.to_dict()))
    else:
        # first-match lookup: surface the other declarations sharing the name
        candidates = engine.find_candidates(entity, file)
        others = [c for c in candidates if (c.module, c.line) != (report.entity.module, report.entity.line)]
        print_impact_results(console, report, max_references=get_config().max_references,
                             other_candidates=others)

    if output:
        config = get_config()
        output_path = generate_html_graph(engine.get_dependency_graph(), output, impact=report,
                                          d3_url=config.d3_url)
        if not json_output:
            console.print(f"[green]✓ HTML graph saved to:[/green] {escape(str(output_path))}\n")


@app.command()
def graph(
    project_path: str = typer.Argument(".", help="Path to the JavaScript/TypeScript project"),
    output: str = typer.Option(..., "--output", "-o", help="Output path for the graph file"),
    fmt: str = typer.Option("html", "--format", help="Output format: html or json"),
):
    """Generate a full dependency graph of the project."""
    if fmt not in GRAPH_FORMATS:
        console.print(f"[bold red]Error:[/bold red] Unknown format '{escape(fmt)}' (expected html or json)")
        raise typer.Exit(1)

    engine = _make_engine(_resolve_project(project_path))
    dependency_graph = engine.get_dependency_graph()

    if fmt == 'json':
        output_path = write_json(dependency_graph.to_dict(), output)
    else:
        output_path = generate_html_graph(dependency_graph, output, d3_url=get_config().d3_url)

    print_graph_summary(console, dependency_graph, str(output_path))


def _version_callback(value: bool):
    if value:
        typer.echo(f"impact-mapper {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True,
                                 help="Show the version and exit"),
):
    """Impact Mapper - trace what breaks when a symbol changes."""
    pass


if __name__ == "__main__":
    app()
