"""Typer-based CLI for DepGraph dependency analysis."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__, config
from .analyzer import DependencyAnalyzer
from .cli_validate import validate
from .config_manager import load_config, save_default_config
from .errors import ConfigError, MalformedReportError, MissingReportError
from .graph_export import export_graph
from .sink import JsonlMemorySink
from .storage import ReportStore
from .type_usage import build_type_report

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="🔗 DepGraph CLI: dependency graph, cycle and unused-export analysis with a commit gate.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register the commit gate as a direct command
app.command("validate")(validate)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"DepGraph CLI v{__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
):
    """DepGraph CLI: static import analysis for TypeScript source trees."""
    _configure_logging(verbose)


def _load_settings(project_root: Path, config_file: Optional[Path]):
    try:
        return load_config(project_root, config_file)
    except ConfigError as exc:
        raise typer.BadParameter(str(exc))


@app.command("analyze")
def analyze(
    project_root: Path = typer.Argument(
        Path("."), exists=True, file_okay=False, help="Project root containing src/."
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Report path (default: docs/DEPENDENCIES.json under the root)."
    ),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Explicit depgraph.toml."),
    memory_sink: Optional[Path] = typer.Option(
        None, "--memory-sink", help="Also publish a knowledge-graph projection to this JSONL file."
    ),
):
    """🔍 Build the dependency graph and write the report.

    Example:
      dg analyze
      dg analyze ./web --output build/deps.json
    """
    root = project_root.resolve()
    settings, _ = _load_settings(root, config_file)
    if output is not None:
        settings.report_path = str(output.resolve())

    analyzer = DependencyAnalyzer(
        root,
        settings=settings,
        publish=JsonlMemorySink(memory_sink) if memory_sink else None,
    )
    if not analyzer.source_dir.is_dir():
        err_console.print(f"[red]❌ Source directory not found:[/red] {escape(str(analyzer.source_dir))}")
        err_console.print("   This tool is designed for projects with a src/ directory structure.")
        raise typer.Exit(1)

    console.print(f"[bold cyan]📂 Analyzing dependencies in {escape(str(root))}...[/bold cyan]\n")
    run = analyzer.run()
    report = run.report

    files_table = Table(title="Files found", show_header=True)
    files_table.add_column("Subtree", style="cyan")
    files_table.add_column("Files", justify="right")
    for label, files in run.discovery.by_subtree.items():
        files_table.add_row(label, str(len(files)))
    files_table.add_row("[bold]Total[/bold]", str(run.discovery.total))
    console.print(files_table)

    summary = report.summary
    console.print(f"\n📄 Report saved: {escape(str(run.report_path))}")
    console.print(f"   🔗 Nodes (files): {summary.total_nodes}")
    console.print(f"   ➡️  Edges (imports): {summary.total_edges}")

    names = {node.id: Path(node.name).stem for node in report.nodes}
    if report.cycles:
        console.print(f"   🔄 Cyclic dependencies: {len(report.cycles)}")
        for i, cycle in enumerate(report.cycles[:3], 1):
            chain = " → ".join(names.get(node_id, "unknown") for node_id in cycle)
            console.print(f"      Cycle {i}: {escape(chain)}")

    if report.unused_exports:
        console.print(f"   🗑️  Unused exports: {len(report.unused_exports)}")
        for unused in report.unused_exports[:5]:
            console.print(
                f"      - {escape(Path(unused.file).name)}: export '{escape(unused.export)}' (line {unused.line})"
            )

    console.print("\n[green]✅ Dependency analysis completed.[/green] Validate with: dg validate")


@app.command("types")
def types_report(
    project_root: Path = typer.Argument(
        Path("."), exists=True, file_okay=False, help="Project root containing src/types."
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Report path (default: docs/TYPES_REPORT.json under the root)."
    ),
):
    """🧬 Report how exported types and interfaces are used across the project."""
    root = project_root.resolve()
    try:
        report = build_type_report(root)
    except FileNotFoundError as exc:
        err_console.print(f"[red]❌ {escape(str(exc))}[/red]")
        raise typer.Exit(1)

    target = output or root / config.TYPES_REPORT_PATH
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(report, indent=2), encoding="utf-8")

    summary = report["summary"]
    console.print(f"📊 Total types analyzed: {summary['totalTypes']}")
    console.print(f"   ✅ Used types: {summary['usedTypes']}")
    console.print(f"   ⚠️  Unused types: {summary['unusedTypes']}")
    console.print(f"   📊 Usage rate: {summary['usageRate']:.1f}%")
    for unused in report["unusedTypes"][:10]:
        console.print(f"   └─ {escape(unused['name'])} ({unused['kind']}) in {escape(unused['file'])}:{unused['line']}")
    console.print(f"\n📄 Report saved: {escape(str(target))}")


@app.command("export")
def export(
    report_path: Optional[Path] = typer.Option(
        None, "--report-path", "-r", help="Path to DEPENDENCIES.json (default: report_path from depgraph.toml)."
    ),
    fmt: str = typer.Option("dot", "--format", "-f", help="Export format: dot or mermaid."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file path."),
):
    """🎨 Export the dependency graph to Graphviz DOT or Mermaid."""
    fmt = fmt.lower()
    if fmt not in {"dot", "mermaid"}:
        raise typer.BadParameter("Format must be one of: dot, mermaid")

    if report_path is None:
        settings, _ = _load_settings(Path.cwd(), None)
        report_path = Path.cwd() / settings.report_path

    try:
        report = ReportStore(report_path).load()
    except (MissingReportError, MalformedReportError) as exc:
        err_console.print(f"[red]❌ {escape(str(exc))}[/red]")
        raise typer.Exit(1)

    suffix = "dot" if fmt == "dot" else "mmd"
    if output is None:
        output = Path.cwd() / f"dependencies.{suffix}"
    export_graph(report, output, fmt)
    console.print(f"Exported graph to {escape(str(output))}")


@app.command("init")
def init(
    project_root: Path = typer.Argument(Path("."), exists=True, file_okay=False, help="Project root."),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing depgraph.toml."),
):
    """⚙️  Write a depgraph.toml with the default settings."""
    written = save_default_config(project_root.resolve(), overwrite=force)
    if written is None:
        console.print(f"{config.CONFIG_FILE_NAME} already exists (use --force to overwrite).")
        raise typer.Exit(0)
    console.print(f"Wrote {escape(str(written))}")


if __name__ == "__main__":
    app()
