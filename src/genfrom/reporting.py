"""User facing output of a generator run."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Mapping

from rich.console import Console
from rich.markup import escape

from .rewrite import OccurrenceStat

__all__ = ["ConsoleReporter", "Reporter"]


class Reporter(ABC):
    """Receives progress from the pipeline and decides how to present it."""

    @abstractmethod
    def banner(self, version: str) -> None:
        """Announce the tool at start-up."""

    @abstractmethod
    def step(self, message: str) -> None:
        """Report a stage that is about to start."""

    @abstractmethod
    def success(self, message: str) -> None:
        """Report a stage that finished."""

    @abstractmethod
    def warning(self, message: str) -> None:
        """Report a recoverable problem."""

    @abstractmethod
    def summary(self, stats: Mapping[str, OccurrenceStat]) -> None:
        """Show the placeholder occurrences found before rewriting."""

    @abstractmethod
    def cancelled(self, message: str) -> None:
        """Report that the user stopped the run."""

    @abstractmethod
    def failed(self, stage: str, reason: str) -> None:
        """Report a fatal error and the stage it happened in."""

    @abstractmethod
    def completed(self, target_dir: Path, *, here: bool) -> None:
        """Report a successful run and what to do next."""


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


class ConsoleReporter(Reporter):
    """Reporter printing to the terminal with :mod:`rich`."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def banner(self, version: str) -> None:
        self.console.print(f"[cyan]Welcome to gen-from v{version}![/cyan]")
        self.console.print("[dim]Generate projects from GitHub template repositories[/dim]\n")

    def step(self, message: str) -> None:
        self.console.print(f"[dim]{escape(message)}[/dim]")

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓ {escape(message)}[/green]")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠ Warning: {escape(message)}[/yellow]")

    def summary(self, stats: Mapping[str, OccurrenceStat]) -> None:
        self.console.print("\n[yellow]Placeholder replacement summary:[/yellow]")
        found = False
        for key, stat in stats.items():
            if stat.count <= 0:
                continue
            found = True
            self.console.print(
                f"  [cyan]{escape(key)}[/cyan][dim] => Found {_plural(stat.count, 'occurrence')} "
                f"=> Replacing with[/dim] [green]\"{escape(stat.replacement)}\"[/green]",
                highlight=False,
            )
        if not found:
            self.console.print("[dim]  No placeholders found in template files[/dim]")
        self.console.print()

    def cancelled(self, message: str) -> None:
        self.console.print(f"[yellow]✗ {escape(message)}[/yellow]")

    def failed(self, stage: str, reason: str) -> None:
        self.console.print(f"[red]✗ Error during {stage}:[/red] {escape(reason)}", highlight=False)

    def completed(self, target_dir: Path, *, here: bool) -> None:
        self.console.print("[green]✓ Project generated successfully![/green]")
        self.console.print("\n[yellow]Next steps:[/yellow]")
        if not here:
            self.console.print(f"  cd {escape(target_dir.name)}")
        self.console.print("  pnpm install")
        self.console.print("  pnpm build")
        self.console.print("  pnpm test\n")
