"""Rich console helpers shared by the CLI commands."""

import json
from typing import Any

from rich.console import Console

console = Console()


def print_success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    console.print(f"[yellow]⚠[/yellow] {message}")


def print_info(message: str) -> None:
    console.print(f"[blue]ℹ[/blue] {message}")


def print_json(data: Any) -> None:
    """Print data as highlighted JSON; enums and paths are stringified."""
    console.print_json(json.dumps(data, default=str))
