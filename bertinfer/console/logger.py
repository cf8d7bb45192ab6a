"""Rich-based logger with bertinfer theming.

A classification run is short but chatty: stage timings, file locations,
download hints, and a ranked probability table per inference. This logger
keeps that readable with:
- Semantic colors (cyan=info, green=success, amber=warning, red=error)
- Structured output (tables, panels, key-value pairs)
- Inference-specific helpers for timings and ranked predictions
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme


BERTINFER_THEME = Theme(
    {
        "info": "bold #7dcfff",
        "success": "bold #9ece6a",
        "warning": "bold #e0af68",
        "error": "bold #f7768e",
        "highlight": "bold #bb9af7",
        "muted": "dim #565f89",
        "metric": "#7aa2f7",
        "path": "italic #73daca",
        "step": "#ff9e64",
    }
)


class Logger:
    """Unified logging interface with rich console output.

    Wraps Rich Console to provide semantic log levels, structured data
    display, and inference result tables, all with consistent theming.
    """

    def __init__(self) -> None:
        """Initialize with the bertinfer theme."""
        self.console = Console(theme=BERTINFER_THEME)

    # ─────────────────────────────────────────────────────────────────────
    # Basic Logging
    # ─────────────────────────────────────────────────────────────────────

    def info(self, message: str) -> None:
        """Log an informational message (cyan ℹ)."""
        self.console.print(f"[info]ℹ[/info] {message}")

    def success(self, message: str) -> None:
        """Log a success message (green ✓)."""
        self.console.print(f"[success]✓[/success] {message}")

    def warning(self, message: str) -> None:
        """Log a warning message (amber ⚠)."""
        self.console.print(f"[warning]⚠[/warning] {message}")

    def error(self, message: str) -> None:
        """Log an error message (red ✗)."""
        self.console.print(f"[error]✗[/error] {message}")

    # ─────────────────────────────────────────────────────────────────────
    # Structured Output
    # ─────────────────────────────────────────────────────────────────────

    def header(self, title: str, subtitle: str | None = None) -> None:
        """Print a prominent section header."""
        header_text = Text()
        header_text.append("━" * 3 + " ", style="muted")
        header_text.append(title, style="highlight")
        if subtitle:
            header_text.append(f" • {subtitle}", style="muted")
        header_text.append(" " + "━" * 40, style="muted")
        self.console.print()
        self.console.print(header_text)
        self.console.print()

    def panel(
        self, content: str, title: str | None = None, style: str = "muted"
    ) -> None:
        """Display content in a bordered panel."""
        self.console.print(Panel(content, title=title, border_style=style))

    def table(
        self,
        title: str | None = None,
        columns: list[str] | None = None,
        rows: list[list[str]] | None = None,
    ) -> Table:
        """Create and optionally populate a styled table.

        If columns and rows are provided, prints immediately. Otherwise
        returns the Table for manual population.
        """
        table = Table(
            title=title,
            title_style="highlight",
            header_style="info",
            border_style="muted",
            row_styles=["", "dim"],
        )

        if columns and rows:
            for col in columns:
                table.add_column(col)
            for row in rows:
                table.add_row(*row)
            self.console.print(table)

        return table

    def key_value(self, data: dict[str, Any], title: str | None = None) -> None:
        """Display key-value pairs in a clean format."""
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("Key", style="muted")
        table.add_column("Value", style="metric")

        for key, value in data.items():
            table.add_row(f"{key}:", str(value))

        if title:
            self.console.print(f"[muted]──[/muted] [highlight]{title}[/highlight]")
        self.console.print(table)

    def path(self, filepath: str, label: str = "") -> None:
        """Display a file path with optional label."""
        if label:
            self.console.print(f"  [muted]{label}:[/muted] [path]{filepath}[/path]")
        else:
            self.console.print(f"  [path]{filepath}[/path]")

    # ─────────────────────────────────────────────────────────────────────
    # Inference-Specific Helpers
    # ─────────────────────────────────────────────────────────────────────

    def elapsed(self, stage: str, seconds: float) -> None:
        """Log how long a stage took, in milliseconds."""
        self.console.print(
            f"[step]{stage}[/step] [metric]{seconds * 1000.0:.2f}[/metric]ms"
        )

    def predictions(
        self,
        ranked: Sequence[tuple[str, float]],
        title: str | None = None,
    ) -> None:
        """Print ranked (label, probability) pairs as a table."""
        self.table(
            title=title,
            columns=["rank", "label", "probability"],
            rows=[
                [str(i + 1), label, f"{prob:.6f}"]
                for i, (label, prob) in enumerate(ranked)
            ],
        )


# ─────────────────────────────────────────────────────────────────────────────
# Module-Level Singleton
# ─────────────────────────────────────────────────────────────────────────────

_logger: Logger | None = None


def get_logger() -> Logger:
    """Get or create the singleton Logger instance."""
    global _logger
    if _logger is None:
        _logger = Logger()
    return _logger
