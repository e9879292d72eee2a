"""Terminal UI utilities using Rich library for command output.

Every command reports one line per unit of work (skill, target, link) and a
closing summary, all routed through the module-level ``console``.
"""

from dataclasses import dataclass
from typing import Iterable

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from config import Config


@dataclass(frozen=True)
class ThemeColors:
    """Color palette for terminal output."""

    primary: str
    secondary: str
    success: str
    warning: str
    error: str
    text_secondary: str
    text_muted: str


DARK_THEME = ThemeColors(
    primary="#00D9FF",  # Bright cyan
    secondary="#A78BFA",  # Soft purple
    success="#10B981",  # Emerald green
    warning="#F59E0B",  # Amber
    error="#EF4444",  # Red
    text_secondary="#8B949E",  # Gray
    text_muted="#484F58",  # Dark gray
)

LIGHT_THEME = ThemeColors(
    primary="#0969DA",  # Blue
    secondary="#8250DF",  # Purple
    success="#1A7F37",  # Green
    warning="#9A6700",  # Amber
    error="#CF222E",  # Red
    text_secondary="#57606A",  # Medium gray
    text_muted="#8C959F",  # Light gray
)

# Global console instance
console = Console(highlight=False)


def _get_colors() -> ThemeColors:
    """Get current theme colors."""
    return LIGHT_THEME if Config.TUI_THEME == "light" else DARK_THEME


def print_error(message: str, title: str = "Error") -> None:
    """Print an error message.

    Args:
        message: Error message
        title: Error title (default: "Error")
    """
    colors = _get_colors()
    console.print(
        Panel(
            Text(message, style=colors.error),
            title=f"[bold {colors.error}]{title}[/bold {colors.error}]",
            border_style=colors.error,
            box=box.ROUNDED,
        )
    )


def print_warning(message: str) -> None:
    colors = _get_colors()
    console.print(Text(message, style=colors.warning))


def print_success(message: str, indent: int = 0) -> None:
    """Print a success line prefixed with a check mark."""
    colors = _get_colors()
    console.print(Text(f"{' ' * indent}✓ {message}", style=colors.success))


def print_failure(message: str, indent: int = 0) -> None:
    """Print a failure line prefixed with a cross."""
    colors = _get_colors()
    console.print(Text(f"{' ' * indent}✗ {message}", style=colors.error))


def print_skipped(message: str, indent: int = 0) -> None:
    colors = _get_colors()
    console.print(Text(f"{' ' * indent}⊘ {message}", style=colors.warning))


def print_info(message: str) -> None:
    colors = _get_colors()
    console.print(Text(f"ℹ {message}", style=colors.primary))


def print_log_location(log_file: str) -> None:
    """Print log file location.

    Args:
        log_file: Path to log file
    """
    colors = _get_colors()
    console.print()
    console.print(Text(f"Detailed logs: {log_file}", style=colors.text_muted))


def print_divider(width: int = 50) -> None:
    colors = _get_colors()
    console.print(Text("─" * width, style=colors.text_muted))


def print_summary(succeeded: int, failed: int, skipped: int = 0) -> None:
    """Print the closing count line of a multi-unit command."""
    colors = _get_colors()
    parts = [f"{succeeded} succeeded", f"{failed} failed"]
    if skipped:
        parts.append(f"{skipped} skipped")
    style = colors.error if failed else colors.success
    console.print()
    console.print(Text(f"Summary: {', '.join(parts)}", style=f"bold {style}"))


def print_links_table(title: str, rows: Iterable[tuple[str, str, str, bool, str]]) -> None:
    """Print links as a table.

    Args:
        title: Table title (target and scope)
        rows: (name, type, source, enabled, description) tuples
    """
    colors = _get_colors()
    table = Table(title=title, box=box.SIMPLE, border_style=colors.text_muted)
    table.add_column("Name", style=f"{colors.primary} bold")
    table.add_column("Type", style=colors.secondary)
    table.add_column("Source")
    table.add_column("Enabled")
    table.add_column("Description", style=colors.text_secondary)

    for name, kind, source, enabled, description in rows:
        status = Text("yes", style=colors.success) if enabled else Text("no", style=colors.warning)
        table.add_row(name, kind, source, status, description)

    console.print(table)
