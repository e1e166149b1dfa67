"""Console helpers for command line tools."""

import functools
import sys
from typing import Any, Callable

from rich.console import Console
from rich.markup import escape

console = Console(soft_wrap=True, highlight=False)
err_console = Console(stderr=True, soft_wrap=True, highlight=False)


def info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[cyan]ℹ[/cyan] {escape(message)}")


def success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]✓[/bold green] {escape(message)}")


def error(message: str) -> None:
    """Print an error on stderr."""
    err_console.print(f"[bold red]✗[/bold red] {escape(message)}")


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorate a command so an interrupt exits cleanly.

    Click's own exceptions and ``SystemExit`` pass through untouched.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            error("Interrupted")
            sys.exit(130)

    return wrapper
