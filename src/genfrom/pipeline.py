"""Sequencing of a generator run, from template selection to the rewritten tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Sequence

from pydantic import ValidationError

from .config import GeneratorContext
from .errors import ConfigurationError, GenFromError, RepositoryNotFoundError
from .fetcher import RemoteFetcher
from .files import list_files
from .interpolate import DefaultRenderer
from .manifest import PACKAGE_NAME, PROJECT_NAME, USERNAME
from .naming import scoped_package_name, suggest_package_names
from .prompter import Choice, Prompter, Question
from .reporting import Reporter
from .rewrite import OccurrenceStat, rewrite_files, scan_files
from .schema import PlaceholderDefinition, Template

__all__ = [
    "Pipeline",
    "RunResult",
    "RunState",
    "choose_package_name",
    "collect_inputs",
    "has_existing_files",
    "resolve_target",
    "select_template",
    "validate_template",
]

LOGGER = logging.getLogger(__name__)

_CUSTOM_PACKAGE_NAME = object()
_IGNORED_ENTRIES = frozenset({"node_modules", "package-lock.json", "pnpm-lock.yaml", "yarn.lock"})


class RunState(str, Enum):
    """States of a generator run. ``DONE``, ``CANCELLED`` and ``FAILED`` are final."""

    IDLE = "idle"
    TEMPLATE_SELECTED = "template_selected"
    VALIDATED = "validated"
    INPUTS_COLLECTED = "inputs_collected"
    TARGET_RESOLVED = "target_resolved"
    DOWNLOADED = "downloaded"
    SCANNED = "scanned"
    REWRITTEN = "rewritten"
    DONE = "done"
    CANCELLED = "cancelled"
    FAILED = "failed"


_NEXT_STATE = {
    RunState.IDLE: RunState.TEMPLATE_SELECTED,
    RunState.TEMPLATE_SELECTED: RunState.VALIDATED,
    RunState.VALIDATED: RunState.INPUTS_COLLECTED,
    RunState.INPUTS_COLLECTED: RunState.TARGET_RESOLVED,
    RunState.TARGET_RESOLVED: RunState.DOWNLOADED,
    RunState.DOWNLOADED: RunState.SCANNED,
    RunState.SCANNED: RunState.REWRITTEN,
    RunState.REWRITTEN: RunState.DONE,
}

# Name of the work in progress while a run sits in a given state.
STAGE_LABELS = {
    RunState.IDLE: "template selection",
    RunState.TEMPLATE_SELECTED: "template validation",
    RunState.VALIDATED: "input collection",
    RunState.INPUTS_COLLECTED: "target resolution",
    RunState.TARGET_RESOLVED: "download",
    RunState.DOWNLOADED: "scan",
    RunState.SCANNED: "rewrite",
    RunState.REWRITTEN: "completion",
}


@dataclass(slots=True)
class RunResult:
    """Structured outcome of :meth:`Pipeline.run`; presentation is up to the caller."""

    state: RunState = RunState.IDLE
    template: Template | None = None
    inputs: Mapping[str, str] = field(default_factory=dict)
    target_dir: Path | None = None
    stats: dict[str, OccurrenceStat] = field(default_factory=dict)
    files_modified: int = 0
    warnings: list[str] = field(default_factory=list)
    failed_stage: RunState | None = None
    error: GenFromError | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is RunState.DONE

    @property
    def found_placeholders(self) -> bool:
        return any(stat.count > 0 for stat in self.stats.values())

    def advance(self, state: RunState) -> None:
        """Move to ``state``, which must be the successor of the current state."""

        expected = _NEXT_STATE.get(self.state)
        if state is not expected:
            raise RuntimeError(f"invalid transition {self.state.value} -> {state.value}")
        LOGGER.debug("run state %s -> %s", self.state.value, state.value)
        self.state = state


def select_template(
    context: GeneratorContext,
    prompter: Prompter,
    template_arg: str | None = None,
) -> Template | None:
    """Resolve the template named on the command line or ask for one.

    ``owner/name`` is used as is and a bare name is looked up under the
    configured default owner. Repositories that are not configured are
    still accepted as ad-hoc templates.
    """

    if template_arg:
        if "/" in template_arg:
            repo = template_arg
        else:
            repo = f"{context.settings.default_owner}/{template_arg}"
        found = context.find_template(template_arg, repo)
        if found is not None:
            return found
        try:
            return Template(name=template_arg, description=f"Template from {repo}", repo=repo)
        except ValidationError as exc:
            reason = exc.errors()[0]["msg"]
            raise ConfigurationError(f"invalid template '{template_arg}': {reason}") from exc

    if not context.templates:
        raise ConfigurationError("no templates are configured and none was given")

    choices = [
        Choice(title=template.name, value=template, description=template.description)
        for template in context.templates
    ]
    return prompter.select("Select a template", choices)


def validate_template(template: Template, fetcher: RemoteFetcher, forge_host: str = "github.com") -> None:
    """Raise :class:`RepositoryNotFoundError` when the template repository is missing."""

    if not fetcher.exists(template.repo):
        raise RepositoryNotFoundError(f'Template repository "{template.repo}" not found on {forge_host}')


def collect_inputs(
    definitions: Sequence[PlaceholderDefinition],
    prompter: Prompter,
    renderer: DefaultRenderer | None = None,
) -> dict[str, str] | None:
    """Ask every placeholder question in order.

    Returns ``None`` as soon as the user cancels or leaves a required
    question empty; a partially filled mapping is never returned. Defaults
    may reference earlier answers, see :mod:`genfrom.interpolate`.
    """

    renderer = renderer or DefaultRenderer()
    results: dict[str, str] = {}
    for definition in definitions:
        question = Question(
            key=definition.key,
            message=definition.prompt,
            default=renderer.render(definition.default, results),
            required=definition.required,
        )
        answer = prompter.ask(question)
        if answer is None:
            return None
        answer = answer.strip()
        if definition.required and not answer:
            return None
        results[definition.key] = answer
    return results


def choose_package_name(inputs: Mapping[str, str], prompter: Prompter) -> str | None:
    """Offer package name suggestions derived from the username and project name."""

    username = inputs.get(USERNAME, "")
    project_name = inputs.get(PROJECT_NAME, "")
    suggestions = suggest_package_names(username, project_name)

    choices: list[Choice[object]] = [Choice(title=name, value=name) for name in suggestions]
    choices.append(Choice(title="Use different name", value=_CUSTOM_PACKAGE_NAME))

    picked = prompter.select("Choose package name", choices, initial=len(suggestions) - 1)
    if picked is None:
        return None
    if picked is not _CUSTOM_PACKAGE_NAME:
        return str(picked)

    answer = prompter.ask(
        Question(
            key=PACKAGE_NAME,
            message="Enter package name",
            default=scoped_package_name(username, project_name),
            required=True,
        )
    )
    if answer is None or not answer.strip():
        return None
    return answer.strip()


def has_existing_files(directory: Path) -> bool:
    """Whether ``directory`` holds anything besides hidden files and lockfiles."""

    try:
        entries = list(directory.iterdir())
    except OSError:
        return False
    return any(
        not entry.name.startswith(".") and entry.name not in _IGNORED_ENTRIES for entry in entries
    )


def resolve_target(
    inputs: Mapping[str, str],
    prompter: Prompter,
    *,
    here: bool = False,
    cwd: Path | None = None,
) -> Path | None:
    """Decide where the project goes and confirm overwriting existing content.

    Returns ``None`` when the user declines to overwrite.
    """

    base = Path(cwd) if cwd is not None else Path.cwd()
    if here:
        if has_existing_files(base):
            confirmed = prompter.confirm(
                "Current directory contains files. This will overwrite existing files. Continue?"
            )
            if not confirmed:
                return None
        return base

    project_name = inputs.get(PROJECT_NAME, "").strip()
    if not project_name:
        raise ConfigurationError(f"a {PROJECT_NAME} placeholder is needed to name the target directory")

    target = base / project_name
    if target.exists():
        confirmed = prompter.confirm(
            f'Directory "{project_name}" already exists. This will overwrite existing files. Continue?'
        )
        if not confirmed:
            return None
    return target


class Pipeline:
    """Run the generator against explicit collaborators.

    Parameters
    ----------
    context:
        Templates, placeholder definitions and settings loaded at start-up.
    prompter:
        Source of interactive answers.
    fetcher:
        Access to the forge hosting the templates.
    reporter:
        Receives progress, warnings and the final outcome.
    """

    def __init__(
        self,
        context: GeneratorContext,
        prompter: Prompter,
        fetcher: RemoteFetcher,
        reporter: Reporter,
        renderer: DefaultRenderer | None = None,
    ) -> None:
        self.context = context
        self.prompter = prompter
        self.fetcher = fetcher
        self.reporter = reporter
        self.renderer = renderer or DefaultRenderer()

    def run(
        self,
        template_arg: str | None = None,
        *,
        here: bool = False,
        cwd: Path | None = None,
    ) -> RunResult:
        result = RunResult()
        try:
            self._run(result, template_arg, here=here, cwd=cwd)
        except (GenFromError, OSError) as exc:
            error = exc if isinstance(exc, GenFromError) else GenFromError(str(exc))
            result.failed_stage = result.state
            result.error = error
            result.state = RunState.FAILED
            stage = STAGE_LABELS.get(result.failed_stage, result.failed_stage.value)
            LOGGER.debug("run failed during %s", stage, exc_info=exc)
            self.reporter.failed(stage, str(error))
        return result

    def _cancel(self, result: RunResult, message: str) -> RunResult:
        result.state = RunState.CANCELLED
        self.reporter.cancelled(message)
        return result

    def _run(self, result: RunResult, template_arg: str | None, *, here: bool, cwd: Path | None) -> RunResult:
        settings = self.context.settings

        template = select_template(self.context, self.prompter, template_arg)
        if template is None:
            return self._cancel(result, "Template selection cancelled")
        result.template = template
        result.advance(RunState.TEMPLATE_SELECTED)

        self.reporter.step(f"Checking template: {template.repo}...")
        validate_template(template, self.fetcher, settings.forge_host)
        result.advance(RunState.VALIDATED)

        inputs = collect_inputs(self.context.placeholders, self.prompter, self.renderer)
        if inputs is None:
            return self._cancel(result, "Setup cancelled")
        if PACKAGE_NAME not in inputs:
            package_name = choose_package_name(inputs, self.prompter)
            if package_name is None:
                return self._cancel(result, "Setup cancelled")
            inputs[PACKAGE_NAME] = package_name
        result.inputs = MappingProxyType(inputs)
        result.advance(RunState.INPUTS_COLLECTED)

        target = resolve_target(result.inputs, self.prompter, here=here, cwd=cwd)
        if target is None:
            return self._cancel(result, "Operation cancelled")
        result.target_dir = target
        result.advance(RunState.TARGET_RESOLVED)

        self.reporter.step(f"Downloading template from {template.repo}...")
        self.fetcher.materialize(template.repo, target)
        self.reporter.success("Template downloaded")
        result.advance(RunState.DOWNLOADED)

        self.reporter.step("Processing template files...")
        files = list_files(target)
        result.stats = scan_files(files, result.inputs, settings)
        self.reporter.summary(result.stats)
        result.advance(RunState.SCANNED)

        report = rewrite_files(files, result.inputs, settings)
        result.files_modified = report.files_modified
        result.warnings.extend(report.warnings)
        for warning in report.warnings:
            self.reporter.warning(warning)
        result.advance(RunState.REWRITTEN)

        if result.found_placeholders and result.files_modified > 0:
            noun = "file" if result.files_modified == 1 else "files"
            self.reporter.success(f"{result.files_modified} {noun} processed")
        else:
            self.reporter.success("Template files copied")
        result.advance(RunState.DONE)
        self.reporter.completed(target, here=here)
        return result
