"""Rich terminal formatter for Ultra Debugger."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..models import BatchReport, DebugReport, Finding
from .base import BaseFormatter, Result


def _health_label(score: int) -> str:
    if score >= 90:
        return f"[green bold]{score}%[/green bold]"
    elif score >= 70:
        return f"[green]{score}%[/green]"
    elif score >= 50:
        return f"[yellow]{score}%[/yellow]"
    else:
        return f"[red bold]{score}%[/red bold]"


def _status_label(status: Optional[str]) -> str:
    if status == "passed":
        return "[green]passed[/green]"
    elif status == "failed":
        return "[red]failed[/red]"
    return "[dim]-[/dim]"


class RichFormatter(BaseFormatter):
    """Rich terminal output: summary panel, findings table, telemetry and fixes."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)

    def render(self, result: Result) -> None:
        if isinstance(result, BatchReport):
            self._print_batch(result)
        else:
            self._print_report(result)

    def format(self, result: Result) -> str:
        # Rich output goes directly to console; return empty string
        self.render(result)
        return ""

    # -- single file --

    def _print_report(self, report: DebugReport) -> None:
        console = self.console
        s = report.summary

        console.print(
            Panel(
                f"[bold]{escape(report.file_path)}[/bold]\n"
                f"Code health: {_health_label(s.code_health)}   "
                f"Issues: [red]{s.total_issues}[/red]   "
                f"Warnings: [yellow]{s.total_warnings}[/yellow]   "
                f"Execution errors: {s.execution_errors}   "
                f"Fixes: [cyan]{s.fixes_applied}[/cyan]",
                title=f"[bold cyan]ULTRA-DEBUGGER[/bold cyan] ({report.analysis.engine})",
                expand=False,
            )
        )

        findings = report.analysis.issues + report.analysis.warnings
        if findings:
            console.print(self._findings_table(findings))
        else:
            console.print("[green]No issues or warnings detected.[/green]")
        console.print()

        self._print_telemetry(report)

        if report.remediation.fixes_applied:
            console.print("[bold]Fixes applied:[/bold]")
            for fix in report.remediation.fixes_applied:
                console.print(f"  [cyan]+[/cyan] {escape(fix.message)}")
            console.print()

        if report.remediation.suggestions:
            console.print("[bold]Suggestions:[/bold]")
            for suggestion in report.remediation.suggestions:
                console.print(f"  [yellow]>[/yellow] {escape(suggestion.message)}")
            console.print()

    def _findings_table(self, findings: list[Finding]) -> Table:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Severity", width=8)
        table.add_column("Type", style="cyan")
        table.add_column("Pos", justify="right")
        table.add_column("Message")

        for f in findings:
            severity = "[red]issue[/red]" if f.severity.value == "issue" else "[yellow]warning[/yellow]"
            position = "-" if f.offset is None else str(f.offset)
            table.add_row(severity, escape(f.kind), position, escape(f.message))
        return table

    def _print_telemetry(self, report: DebugReport) -> None:
        console = self.console
        execution = report.execution

        console.print("[bold]Simulated execution[/bold] [dim](synthetic telemetry)[/dim]")
        for error in execution.execution_errors:
            console.print(f"  [red]![/red] {escape(error.message)}")
        for name, status in execution.suite_outcomes().items():
            console.print(f"  {name:28s} {_status_label(status)}")
        if execution.memory_usage:
            peak = max(sample.heap_used for sample in execution.memory_usage)
            console.print(
                f"  [dim]{len(execution.memory_usage)} memory samples, "
                f"peak {peak / (1024 * 1024):.1f} MiB[/dim]"
            )
        console.print()

    # -- batch --

    def _print_batch(self, batch: BatchReport) -> None:
        console = self.console
        s = batch.summary

        console.print(
            Panel(
                f"Files: {s.total_files}   Successful: [green]{s.successful}[/green]   "
                f"Failed: [red]{s.failed}[/red]\n"
                f"Overall code health: {_health_label(s.code_health)}   "
                f"Issues: {s.total_issues}   Warnings: {s.total_warnings}   "
                f"Fixes: {s.total_fixes}",
                title="[bold cyan]ULTRA-DEBUGGER[/bold cyan] batch",
                expand=False,
            )
        )

        table = Table(show_header=True, header_style="bold")
        table.add_column("File")
        table.add_column("Health", justify="right")
        table.add_column("Issues", justify="right")
        table.add_column("Warnings", justify="right")
        table.add_column("Fixes", justify="right")

        for entry in batch.files:
            if isinstance(entry, DebugReport):
                table.add_row(
                    escape(entry.file_path),
                    _health_label(entry.summary.code_health),
                    str(entry.summary.total_issues),
                    str(entry.summary.total_warnings),
                    str(entry.summary.fixes_applied),
                )
            else:
                table.add_row(escape(entry.file_path), f"[red]{entry.error_kind} error[/red]", "-", "-", "-")
        console.print(table)

        for error in batch.errors:
            console.print(f"  [red]![/red] {escape(error.file_path)}: {escape(error.error)}")
        console.print()
