# llm_renamer/ui_utils.py
import sys
from typing import Any, Iterable, Tuple

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .enums import ProcessingStatus
from .models import RunSummary

STATUS_STYLES = {
    ProcessingStatus.RENAMED: "green",
    ProcessingStatus.MOVED: "blue",
    ProcessingStatus.DRY_RUN: "cyan",
    ProcessingStatus.FAILED: "bold red",
}


def make_console(quiet: bool = False) -> Console:
    return Console(quiet=quiet)


def print_stderr_message(message: Any, is_quiet: bool = False) -> None:
    """Errors always reach stderr; styling is dropped in quiet mode."""
    if is_quiet:
        plain = message.plain if isinstance(message, Text) else str(message)
        print(plain, file=sys.stderr)
        return
    Console(file=sys.stderr, highlight=False).print(message, markup=False)


def build_actions_table(summary: RunSummary, include_skipped: bool = False) -> Table:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Status", min_width=10)
    table.add_column("Original")
    table.add_column("New")
    for action in summary.actions:
        if not include_skipped and action.status not in STATUS_STYLES:
            continue
        style = STATUS_STYLES.get(action.status, "dim")
        new_path = str(action.new_path) if action.new_path else (action.message or "-")
        table.add_row(Text(str(action.status), style=style), Text(str(action.original_path)), Text(new_path))
    return table


def print_run_summary(console: Console, summary: RunSummary) -> None:
    mode = "LIVE" if summary.live else "DRY RUN"
    console.print(f"\n[bold]--- {mode} Summary ({summary.strategy}) ---[/bold]")
    if any(a.status in STATUS_STYLES for a in summary.actions):
        console.print(build_actions_table(summary))
    console.print(f"  Directories visited: {summary.directories_visited} "
                  f"({summary.directories_conformant} already canonical)")
    console.print(f"  Files seen: {summary.files_seen}")
    label = "Renamed/Moved" if summary.live else "Would rename/move"
    console.print(f"  {label}: [green]{summary.changed}[/green]")
    console.print(f"  Skipped: {summary.skipped}")
    if summary.failed:
        console.print(f"  Failed: [bold red]{summary.failed}[/bold red] (see log for details)")
    if not summary.live and summary.changed:
        console.print("[yellow]Dry run only. Re-run with --live to apply these changes.[/yellow]")


def print_key_value_table(console: Console, title: str, columns: Tuple[str, ...], rows: Iterable[Tuple[Any, ...]]) -> None:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*(Text(str(cell)) for cell in row))
    console.print(table)
