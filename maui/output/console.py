"""Console output abstraction.

Commands talk to a `ConsoleProtocol` rather than to rich directly, so the
check report can be asserted on in tests through `MockConsole`.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "Style",
    "ConsoleProtocol",
    "RichConsole",
    "MockConsole",
    "OutputRecord",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()  # Green, component OK
    ERROR = auto()  # Red, component missing or too old
    WARNING = auto()  # Yellow, usable but not recommended
    INFO = auto()  # Cyan, informational
    DIM = auto()  # Muted text (details, n/a)
    BOLD = auto()
    HEADER = auto()  # Section header

    def __str__(self) -> str:
        return self.name.lower()


_RICH_STYLES = {
    Style.DEFAULT: "",
    Style.SUCCESS: "green",
    Style.ERROR: "red bold",
    Style.WARNING: "yellow",
    Style.INFO: "cyan",
    Style.DIM: "dim",
    Style.BOLD: "bold",
    Style.HEADER: "blue bold",
}


class ConsoleProtocol(Protocol):
    """Styled console output."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def header(self, message: str) -> None: ...

    def newline(self) -> None: ...

    def table(self, columns: Sequence[str], rows: Sequence[tuple[Sequence[str], Style]]) -> None:
        """Print a table; each row carries the style of its status cell.

        Args:
            columns: Column titles
            rows: (cells, style) pairs, cells in column order
        """
        ...

    def detail(self, key: str, value: str) -> None:
        """Print an indented `key: value` line."""
        ...


class RichConsole:
    """Console implementation using Rich library."""

    def __init__(self, *, stderr: bool = False) -> None:
        from rich.console import Console

        self._console = Console(stderr=stderr, highlight=False)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        rich_style = _RICH_STYLES.get(style, "")
        if rich_style:
            self._console.print(message, style=rich_style, markup=False)
        else:
            self._console.print(message, markup=False)

    def success(self, message: str) -> None:
        self._console.print(f"[green]OK[/green] {_escape(message)}")

    def error(self, message: str) -> None:
        self._console.print(f"[red bold]error:[/red bold] {_escape(message)}")

    def warning(self, message: str) -> None:
        self._console.print(f"[yellow]warning:[/yellow] {_escape(message)}")

    def info(self, message: str) -> None:
        self._console.print(f"[cyan]info:[/cyan] {_escape(message)}")

    def header(self, message: str) -> None:
        self._console.print(f"\n[blue bold]{_escape(message)}[/blue bold]")

    def newline(self) -> None:
        self._console.print()

    def table(self, columns: Sequence[str], rows: Sequence[tuple[Sequence[str], Style]]) -> None:
        from rich.table import Table
        from rich.text import Text

        table = Table(show_header=True, header_style="bold", show_edge=False, pad_edge=False)
        for column in columns:
            table.add_column(column)
        for cells, style in rows:
            rich_style = _RICH_STYLES.get(style, "")
            # Second column is the status cell.
            table.add_row(
                *(
                    Text(cell, style=rich_style if i == 1 else "")
                    for i, cell in enumerate(cells)
                )
            )
        self._console.print(table)

    def detail(self, key: str, value: str) -> None:
        self._console.print(f"    [dim]{_escape(key)}:[/dim] {_escape(value)}")


def _escape(text: str) -> str:
    from rich.markup import escape

    return escape(text)


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console implementation that captures output for testing.

    Table rows are flattened to one `OutputRecord` each, cells joined by
    ` | `, so tests can search them like any other line.
    """

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"OK {message}", Style.SUCCESS))

    def error(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"error: {message}", Style.ERROR))

    def warning(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"warning: {message}", Style.WARNING))

    def info(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"info: {message}", Style.INFO))

    def header(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.HEADER))

    def newline(self) -> None:
        self.outputs.append(OutputRecord("", Style.DEFAULT))

    def table(self, columns: Sequence[str], rows: Sequence[tuple[Sequence[str], Style]]) -> None:
        self.outputs.append(OutputRecord(" | ".join(columns), Style.BOLD))
        for cells, style in rows:
            self.outputs.append(OutputRecord(" | ".join(cells), style))

    def detail(self, key: str, value: str) -> None:
        self.outputs.append(OutputRecord(f"{key}: {value}", Style.DIM))

    # Test helpers

    def clear(self) -> None:
        self.outputs.clear()

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        """All output as a single newline-separated string."""
        return "\n".join(self.messages)

    def find(self, substring: str) -> list[OutputRecord]:
        return [o for o in self.outputs if substring in o.message]

    def count(self, style: Style) -> int:
        return sum(1 for o in self.outputs if o.style == style)
