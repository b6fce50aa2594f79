"""Command-line interface for allocprep."""

import json
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from allocprep.config.settings import AppConfig
    from allocprep.workspace import Workspace

app = typer.Typer(
    name="allocprep",
    help="Ingest, validate and export client/worker/task spreadsheets.",
    no_args_is_help=True,
)

console = Console()

ConfigOption = Annotated[
    Path,
    typer.Option(
        "--config",
        "-c",
        help="Path to configuration YAML file.",
        exists=True,
        dir_okay=False,
    ),
]


def _load(config: Path) -> tuple["AppConfig", "Workspace"]:
    """Load config, configure logging and build the workspace."""
    from allocprep.config.loader import load_config
    from allocprep.utils.logging import configure_logging
    from allocprep.workspace import Workspace

    try:
        app_config = load_config(config)
        configure_logging(app_config.logging.level, app_config.logging.json_output)
        return app_config, Workspace.from_config(app_config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e


@app.command()
def ingest(config: ConfigOption) -> None:
    """Load the configured files and show header mapping and issues."""
    from allocprep.validation import ConsoleReporter

    app_config, workspace = _load(config)
    reporter = ConsoleReporter(console)

    if not workspace.ingest_results:
        console.print("[yellow]No input files configured under 'data'.[/yellow]")

    for result in workspace.ingest_results.values():
        reporter.print_header_map(result)

    table = Table(title=f"Loaded records ({app_config.project})")
    table.add_column("Entity", style="cyan")
    table.add_column("Rows", justify="right", style="green")
    table.add_row("clients", str(len(workspace.clients)))
    table.add_row("workers", str(len(workspace.workers)))
    table.add_row("tasks", str(len(workspace.tasks)))
    console.print(table)

    reporter.print_summary(workspace.combined_validation)


@app.command()
def validate(
    config: ConfigOption,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the summary as JSON instead of tables."),
    ] = False,
) -> None:
    """Validate the configured files, missing identifiers included.

    Exits with code 1 on any error.
    """
    from allocprep.validation import ConsoleReporter

    _, workspace = _load(config)
    summary = workspace.combined_validation

    if as_json:
        typer.echo(json.dumps(summary.to_dict(), indent=2))
    else:
        ConsoleReporter(console).print_summary(summary)

    if summary.has_errors:
        raise typer.Exit(code=1)


@app.command()
def export(
    config: ConfigOption,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output directory. Default: {output.root}/{project}.",
        ),
    ] = None,
    rule: Annotated[
        list[str] | None,
        typer.Option(
            "--rule",
            "-r",
            help="Rule in plain words, e.g. 'co-run T1 T2'. Repeatable.",
        ),
    ] = None,
    preset: Annotated[
        str | None,
        typer.Option(
            "--preset",
            "-p",
            help="Priority preset: maximizeFulfillment, fairDistribution, minimizeWorkload.",
        ),
    ] = None,
) -> None:
    """Write cleaned CSVs and rules.json."""
    import pandera.pandas as pa

    from allocprep.export import write_bundle
    from allocprep.rules import apply_preset, describe_rule, rules_from_text

    app_config, workspace = _load(config)

    for text in rule or []:
        parsed = rules_from_text(text)
        if not parsed:
            console.print(f"[yellow]Warning: no rule recognized in '{text}'[/yellow]")
        for item in parsed:
            workspace.add_rule(item)
            console.print(f"[dim]Added rule: {describe_rule(item)}[/dim]")

    if preset is not None:
        try:
            workspace.set_priorities(apply_preset(workspace.priorities, preset))
        except KeyError as e:
            console.print(f"[red]Error: {e.args[0]}[/red]")
            raise typer.Exit(code=1) from e

    out_dir = output or app_config.export_dir
    try:
        written = write_bundle(workspace.export_bundle(), out_dir)
    except (pa.errors.SchemaError, OSError) as e:
        console.print(f"[red]Export failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    counts = workspace.combined_validation.counts
    if counts["error"]:
        console.print(
            f"[yellow]⚠ Exporting with {counts['error']} validation error(s); "
            "invalid rows are kept for fixing.[/yellow]"
        )
    for role, path in written.items():
        console.print(f"[green]Saved {role}: {path}[/green]")


@app.command()
def search(
    config: ConfigOption,
    query: Annotated[str, typer.Argument(help="e.g. 'duration > 2 phase 3'")],
) -> None:
    """Filter tasks with a plain-words query."""
    from allocprep.rules import filter_tasks, parse_task_query

    _, workspace = _load(config)
    parsed = parse_task_query(query)
    if parsed.is_empty:
        console.print("[yellow]Query not understood; showing all tasks.[/yellow]")

    results = filter_tasks(workspace.tasks, query)
    table = Table(title=f"Tasks matching '{query}'")
    table.add_column("TaskID", style="cyan")
    table.add_column("TaskName")
    table.add_column("Duration", justify="right")
    table.add_column("PreferredPhases")
    for task in results:
        table.add_row(
            task.TaskID,
            task.TaskName,
            str(task.Duration),
            ", ".join(str(p) for p in task.PreferredPhases),
        )
    console.print(table)
    console.print(f"[dim]{len(results)}/{len(workspace.tasks)} tasks[/dim]")


@app.command()
def rule(
    text: Annotated[str, typer.Argument(help="e.g. 'phase window T3 phases 1-3'")],
) -> None:
    """Convert a sentence into rules and print them as JSON."""
    from allocprep.rules import RulesBundle, rules_from_text

    parsed = rules_from_text(text)
    if not parsed:
        console.print(f"[yellow]No rule recognized in '{text}'[/yellow]")
        raise typer.Exit(code=1)

    rules = RulesBundle(rules=parsed).to_json_dict()["rules"]
    typer.echo(json.dumps(rules, indent=2))


@app.command()
def version() -> None:
    """Show version information."""
    from allocprep import __version__

    console.print(f"allocprep version {__version__}")


if __name__ == "__main__":
    app()
