"""Rich-based console output utilities.

Only the health check and other interactive commands print to the terminal.
The language server itself must keep stdout free for the protocol.
"""

from rich.console import Console
from rich.theme import Theme

from commit_lsp import __version__

custom_theme = Theme(
    {
        "error": "bold red",
        "success": "bold green",
        "warning": "bold yellow",
        "info": "bold blue",
        "header": "bold magenta",
    }
)

# Global console instance
console = Console(theme=custom_theme)


def print_header(title: str, width: int = 80, target: Console | None = None) -> None:
    """Print a section header centered between dashes."""
    target = target or console
    padding = "-" * max((width - len(title) - 2) // 2, 0)
    target.print()
    target.print(f"{padding} [header]{title}[/header] {padding}")


def show_version() -> None:
    """Display version information."""
    console.print(f"[bold]commit-lsp[/bold] v{__version__}")


__all__ = [
    "console",
    "custom_theme",
    "print_header",
    "show_version",
]
