"""Console output for the pycivic CLI."""

import json
from collections.abc import Sequence
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .utils import format_kb


class OutputFormatter:
    """Formats CLI output as text or JSON.

    Messages go to stdout, errors and warnings to stderr. In quiet mode only
    errors and requested data are printed.
    """

    def __init__(self, json_output: bool = False, quiet: bool = False):
        self.json_output = json_output
        self.quiet = quiet
        self.console = Console(highlight=False, soft_wrap=True)
        self.err_console = Console(stderr=True, highlight=False, soft_wrap=True)

    def print(self, message: str) -> None:
        self.console.print(escape(message))

    def info(self, message: str) -> None:
        if not self.quiet and not self.json_output:
            self.console.print(escape(message))

    def success(self, message: str) -> None:
        if not self.quiet and not self.json_output:
            self.console.print(f"[green]{escape(message)}[/green]")

    def warning(self, message: str) -> None:
        if not self.quiet:
            self.err_console.print(f"[yellow]{escape(message)}[/yellow]")

    def error(self, message: str) -> None:
        self.err_console.print(f"[bold red]Error:[/bold red] {escape(message)}")

    def output_json(self, data: Any) -> None:
        self.console.print_json(json.dumps(data, default=str))

    def output_table(
        self,
        rows: Sequence[dict[str, Any]],
        columns: Sequence[str],
        headers: Sequence[str] | None = None,
    ) -> None:
        """Print rows as a table.

        Args:
            rows: Row dictionaries
            columns: Keys to show, in order
            headers: Column titles (defaults to the keys)
        """
        table = Table(*(headers or columns))
        for row in rows:
            table.add_row(*(escape(str(row.get(col, ""))) for col in columns))
        self.console.print(table)

    def print_summary(self, title: str, items: Sequence[tuple[str, Any]]) -> None:
        if self.json_output:
            self.output_json({key: value for key, value in items})
            return
        if self.quiet:
            return
        self.console.print(f"\n[bold]{escape(title)}[/bold]")
        for key, value in items:
            self.console.print(f"  {escape(key)}: {escape(str(value))}")

    @staticmethod
    def format_size(size_kb: float) -> str:
        return format_kb(size_kb)
