"""
Shared utilities for CLI commands.
"""
from typing import Optional

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

# Global console instances
console = Console()
err_console = Console(stderr=True)

def create_progress() -> Progress:
    """Create a spinner for long-running calls."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=True,
        console=console,
    )

def format_price(value: Optional[float]) -> str:
    return f"${value:,.0f}" if value else "-"

def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓ {message}[/green]")

def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[red]✗ {message}[/red]")

def print_info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[blue]ℹ {message}[/blue]")
