"""
Console reporter for ingestion and validation results.

Formats results using Rich for clear, colored output.
"""

from rich.console import Console
from rich.table import Table

from allocprep.normalization.records import ColumnMapResult
from allocprep.schemas.issues import EntityKind, IssueLevel, ValidationSummary

_LEVEL_STYLES: dict[IssueLevel, str] = {
    IssueLevel.ERROR: "red",
    IssueLevel.WARNING: "yellow",
    IssueLevel.INFO: "blue",
}


class ConsoleReporter:
    """Formats and displays validation results to the console."""

    def __init__(self, console: Console) -> None:
        """
        Initialize console reporter.

        Args:
            console: Rich Console instance for output.
        """
        self.console = console

    def print_header_map(self, result: ColumnMapResult) -> None:
        """
        Print how uploaded headers were mapped for one entity.

        Args:
            result: Normalization result of one upload.
        """
        entity = result.entity.value if result.entity else "upload"
        table = Table(title=f"Header mapping ({entity})", show_header=True)
        table.add_column("Uploaded header", style="cyan")
        table.add_column("Field")

        unmapped = set(result.unmapped_headers)
        for original, canonical in result.header_map.items():
            field = f"[yellow]{canonical} (unmapped)[/yellow]" if original in unmapped else canonical
            table.add_row(original, field)

        self.console.print(table)
        if result.issues:
            self.console.print(
                f"[red]{len(result.issues)} ingestion issue(s) detected.[/red]"
            )

    def print_summary(self, summary: ValidationSummary) -> None:
        """
        Print issue counts per entity and level, then the issue list.

        Args:
            summary: Validation summary to display.
        """
        table = Table(title="Validation Summary", show_header=True)
        table.add_column("Entity", style="cyan", no_wrap=True)
        for level in IssueLevel:
            table.add_column(level.value.capitalize(), justify="right")

        for entity in EntityKind:
            issues = summary.for_entity(entity)
            table.add_row(
                entity.value,
                *(str(sum(1 for i in issues if i.level is level)) for level in IssueLevel),
            )

        self.console.print(table)
        self._print_counts(summary)
        self._print_issues(summary)

    def _print_counts(self, summary: ValidationSummary) -> None:
        counts = summary.counts
        self.console.print()
        self.console.print("[bold]Summary:[/bold]")
        for level in IssueLevel:
            style = _LEVEL_STYLES[level]
            self.console.print(
                f"  [{style}]{level.value.capitalize()}s: {counts[level.value]}[/{style}]"
            )

    def _print_issues(self, summary: ValidationSummary) -> None:
        if not summary.issues:
            self.console.print("\n[green]No issues found.[/green]")
            return

        table = Table(title="Issues", show_header=True)
        table.add_column("Level")
        table.add_column("Entity", style="cyan")
        table.add_column("Row", style="dim")
        table.add_column("Column", style="dim")
        table.add_column("Message")

        for issue in summary.issues:
            style = _LEVEL_STYLES[issue.level]
            table.add_row(
                f"[{style}]{issue.level.value}[/{style}]",
                issue.entity.value,
                issue.row_id or "-",
                issue.column or "-",
                issue.message,
            )

        self.console.print()
        self.console.print(table)
