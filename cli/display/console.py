"""Shared Rich console for schedule output."""

from rich.console import Console

console = Console()
