"""Interactive question asking, behind an interface the pipeline can fake."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, Sequence, TypeVar

from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt

__all__ = ["Choice", "Prompter", "Question", "RichPrompter"]

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Question:
    """A free text question."""

    key: str
    message: str
    default: str = ""
    required: bool = False


@dataclass(frozen=True)
class Choice(Generic[T]):
    """One entry of a selection list."""

    title: str
    value: T
    description: str = ""


class Prompter(ABC):
    """Source of user answers.

    Every method returns ``None`` when the user cancels. Cancellation is
    distinct from an empty answer to an optional question, which is ``""``.
    """

    @abstractmethod
    def ask(self, question: Question) -> str | None:
        """Ask a free text question."""

    @abstractmethod
    def select(self, message: str, choices: Sequence[Choice[Any]], *, initial: int = 0) -> Any | None:
        """Let the user pick one of ``choices`` and return its value."""

    @abstractmethod
    def confirm(self, message: str, *, default: bool = False) -> bool | None:
        """Ask a yes/no question."""


class RichPrompter(Prompter):
    """Prompter reading from the terminal through :mod:`rich.prompt`."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def ask(self, question: Question) -> str | None:
        try:
            while True:
                answer = Prompt.ask(question.message, default=question.default, console=self.console)
                if question.required and not answer.strip():
                    self.console.print(f"[red]{question.key} is required[/red]")
                    continue
                return answer
        except (KeyboardInterrupt, EOFError):
            return None

    def select(self, message: str, choices: Sequence[Choice[Any]], *, initial: int = 0) -> Any | None:
        if not choices:
            return None
        for index, choice in enumerate(choices, start=1):
            suffix = f" [dim]- {choice.description}[/dim]" if choice.description else ""
            self.console.print(f"  [cyan]{index}[/cyan]. {choice.title}{suffix}")
        try:
            picked = IntPrompt.ask(
                message,
                choices=[str(index) for index in range(1, len(choices) + 1)],
                default=initial + 1,
                console=self.console,
            )
        except (KeyboardInterrupt, EOFError):
            return None
        return choices[picked - 1].value

    def confirm(self, message: str, *, default: bool = False) -> bool | None:
        try:
            return Confirm.ask(message, default=default, console=self.console)
        except (KeyboardInterrupt, EOFError):
            return None
