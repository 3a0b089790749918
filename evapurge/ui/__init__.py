# evapurge/ui/__init__.py
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

# ─── EVA colour scheme ─────────────────────────────────────────────────
EVA_THEME = Theme(
    {
        "primary": "bold #7aa2f7",
        "secondary": "#bb9af7",
        "success": "#9ece6a",
        "warning": "bold #e0af68",
        "error": "bold #f7768e",
        "info": "dim #7dcfff",
        "highlight": "bold #ff9e64",
        # stats table
        "stat.label": "bold #c0caf5",
        "stat.value": "#e0af68",
        "repr.number": "#e0af68",
        "repr.str": "#9ece6a",
    }
)

# Shared console instance using the EVA theme
console = Console(theme=EVA_THEME)


# ─── Helper Print Functions ─────────────────────────────────────────────
def print_primary(message: str, **kwargs) -> None:
    """Print a message in the primary brand color."""
    console.print(f"[primary]{message}[/primary]", **kwargs)


def print_info(message: str, **kwargs) -> None:
    """Print an informational message."""
    console.print(f"[info]{message}[/info]", **kwargs)


def print_success(message: str, **kwargs) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/success]", **kwargs)


def print_warning(message: str, **kwargs) -> None:
    """Print a warning message."""
    console.print(f"[warning]{message}[/warning]", **kwargs)


def print_error(message: str, **kwargs) -> None:
    """Print an error message."""
    console.print(f"[error]{message}[/error]", **kwargs)


def print_highlight(message: str, **kwargs) -> None:
    """Print a highlighted message."""
    console.print(f"[highlight]{message}[/highlight]", **kwargs)


def print_stats_table(title: str, rows: list[tuple[str, str]]) -> None:
    """Render a two-column label/value table."""
    table = Table(title=title, show_header=False, title_style="primary")
    table.add_column("Metric", style="stat.label")
    table.add_column("Value", style="stat.value", justify="right")
    for label, value in rows:
        table.add_row(label, value)
    console.print(table)

