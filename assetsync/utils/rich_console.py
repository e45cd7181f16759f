from rich.console import Console
from rich.table import Table
from typing import Any, Protocol


# Singleton Console instance
def get_console() -> Console:
    if not hasattr(get_console, "_console"):
        get_console._console = Console()
    return get_console._console


def print_table(headers: list[str], rows: list[list[Any]], title: str | None = None, console: Console | None = None):
    """Print a formatted table using Rich library.

    Args:
        headers (list[str]): Column headers for the table.
        rows (list[list[Any]]): Data rows to display in the table.
        title (str | None, optional): Title of the table. Defaults to None.
        console (Console | None, optional): Console to print to. Defaults to the shared console.
    """
    console = console or get_console()
    table = Table(title=title)
    for index, header in enumerate(headers):
        # First column holds the row key; keep it on one line
        table.add_column(header, no_wrap=index == 0)
    for row in rows:
        table.add_row(*[str(cell) for cell in row])
    console.print(table)


class Reporter(Protocol):
    """Receives the outcome of asset synchronization."""

    def report_group(self, summary) -> None: ...

    def report_error(self, package_id: str, error: Exception) -> None: ...

    def report_info(self, message: str) -> None: ...


class ConsoleReporter:
    """Reports synchronization results on a rich console."""

    def __init__(self, console: Console | None = None):
        self.console = console or get_console()

    def report_group(self, summary) -> None:
        """Print a group tally; full and partial copies are styled differently.

        Args:
            summary: A GroupSummary with ``complete`` and a printable form.
        """
        if summary.complete:
            self.console.print(f"✓ {summary}", style="green", markup=False)
        else:
            self.console.print(f"⚠ {summary}", style="bold yellow", markup=False)

    def report_error(self, package_id: str, error: Exception) -> None:
        self.console.print(f"✗ {error}", style="bold red", markup=False)

    def report_info(self, message: str) -> None:
        self.console.print(message, style="cyan", markup=False)
