"""Deterministic stand-ins for the prompter, fetcher and reporter."""

from __future__ import annotations

from collections import deque
from pathlib import Path
from typing import Any, Deque, Iterable, Mapping, Sequence

from genfrom.errors import DownloadError, RepositoryCheckError
from genfrom.fetcher import RemoteFetcher
from genfrom.prompter import Choice, Prompter, Question
from genfrom.reporting import Reporter
from genfrom.rewrite import OccurrenceStat

CANCEL = object()


class ScriptedPrompter(Prompter):
    """Replays queued answers.

    ``answers`` maps question keys to text answers (``CANCEL`` cancels).
    Selections and confirmations are consumed from their own queues; a
    selection answer is an index into the offered choices or ``CANCEL``.
    """

    def __init__(
        self,
        answers: Mapping[str, Any] | None = None,
        *,
        selections: Iterable[Any] = (),
        confirmations: Iterable[bool | None] = (),
    ) -> None:
        self.answers = dict(answers or {})
        self.selections: Deque[Any] = deque(selections)
        self.confirmations: Deque[bool | None] = deque(confirmations)
        self.questions: list[Question] = []
        self.select_calls: list[tuple[str, list[Choice[Any]], int]] = []
        self.confirm_calls: list[str] = []

    def ask(self, question: Question) -> str | None:
        self.questions.append(question)
        answer = self.answers.get(question.key, question.default)
        if answer is CANCEL:
            return None
        return answer

    def select(self, message: str, choices: Sequence[Choice[Any]], *, initial: int = 0) -> Any | None:
        self.select_calls.append((message, list(choices), initial))
        picked = self.selections.popleft() if self.selections else initial
        if picked is CANCEL:
            return None
        return choices[picked].value

    def confirm(self, message: str, *, default: bool = False) -> bool | None:
        self.confirm_calls.append(message)
        if not self.confirmations:
            return default
        return self.confirmations.popleft()


class InMemoryFetcher(RemoteFetcher):
    """Serves repositories from a mapping of repo id to ``{relative path: content}``."""

    def __init__(
        self,
        repositories: Mapping[str, Mapping[str, str | bytes]] | None = None,
        *,
        check_error: str | None = None,
        download_error: str | None = None,
    ) -> None:
        self.repositories = {repo: dict(files) for repo, files in (repositories or {}).items()}
        self.check_error = check_error
        self.download_error = download_error
        self.materialized: list[tuple[str, Path]] = []

    def exists(self, repo: str) -> bool:
        if self.check_error:
            raise RepositoryCheckError(self.check_error)
        return repo in self.repositories

    def materialize(self, repo: str, destination: Path) -> None:
        if self.download_error:
            raise DownloadError(self.download_error)
        self.materialized.append((repo, destination))
        for relative, content in self.repositories[repo].items():
            path = destination / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")


class RecordingReporter(Reporter):
    """Collects every report as ``(kind, payload)`` tuples."""

    def __init__(self) -> None:
        self.events: list[tuple[str, Any]] = []

    def kinds(self) -> list[str]:
        return [kind for kind, _ in self.events]

    def payloads(self, kind: str) -> list[Any]:
        return [payload for event_kind, payload in self.events if event_kind == kind]

    def banner(self, version: str) -> None:
        self.events.append(("banner", version))

    def step(self, message: str) -> None:
        self.events.append(("step", message))

    def success(self, message: str) -> None:
        self.events.append(("success", message))

    def warning(self, message: str) -> None:
        self.events.append(("warning", message))

    def summary(self, stats: Mapping[str, OccurrenceStat]) -> None:
        self.events.append(("summary", {key: stat.count for key, stat in stats.items()}))

    def cancelled(self, message: str) -> None:
        self.events.append(("cancelled", message))

    def failed(self, stage: str, reason: str) -> None:
        self.events.append(("failed", (stage, reason)))

    def completed(self, target_dir: Path, *, here: bool) -> None:
        self.events.append(("completed", (target_dir, here)))
