"""The two sweeps over a downloaded template: a read-only scan and the rewrite."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping

from .errors import ManifestError
from .files import is_binary, read_text, write_text
from .manifest import rewrite_manifest_text
from .placeholders import count_occurrences, rewrite_text
from .schema import GeneratorSettings

__all__ = [
    "FileOutcome",
    "OccurrenceStat",
    "RewriteReport",
    "process_file",
    "rewrite_files",
    "scan_files",
]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class OccurrenceStat:
    """How often a placeholder was seen before rewriting, and its value."""

    count: int
    replacement: str


@dataclass(frozen=True, slots=True)
class FileOutcome:
    path: Path
    modified: bool = False
    warning: str | None = None


@dataclass(slots=True)
class RewriteReport:
    """Aggregated result of :func:`rewrite_files`."""

    files_modified: int = 0
    warnings: list[str] = field(default_factory=list)


def scan_files(
    files: Iterable[Path],
    inputs: Mapping[str, str],
    settings: GeneratorSettings,
) -> dict[str, OccurrenceStat]:
    """Count placeholder occurrences across ``files`` without touching them."""

    stats = {key: OccurrenceStat(count=0, replacement=value) for key, value in inputs.items()}
    for path in files:
        if is_binary(path):
            continue
        try:
            content = read_text(path)
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.debug("skipping %s during scan: %s", path, exc)
            continue
        for key, stat in stats.items():
            stat.count += count_occurrences(content, key, settings.placeholder_style)
    return stats


def process_file(
    path: Path,
    inputs: Mapping[str, str],
    settings: GeneratorSettings,
) -> FileOutcome:
    """Rewrite a single file in place and report whether it changed.

    The manifest is rewritten structurally first; if it cannot be parsed the
    problem is reported and only the generic rewrite applies. The file is
    written only when its text actually differs.
    """

    if is_binary(path):
        return FileOutcome(path)

    original = read_text(path)
    content = original
    warning: str | None = None

    if path.name == settings.manifest_filename:
        try:
            content, _ = rewrite_manifest_text(content, inputs, settings)
        except ManifestError as exc:
            warning = f"Could not parse {path}, using string replacement ({exc})"
            LOGGER.warning(warning)

    content, _ = rewrite_text(content, inputs, settings.placeholder_style)

    if content == original:
        return FileOutcome(path, warning=warning)

    write_text(path, content)
    return FileOutcome(path, modified=True, warning=warning)


def rewrite_files(
    files: Iterable[Path],
    inputs: Mapping[str, str],
    settings: GeneratorSettings,
) -> RewriteReport:
    """Apply :func:`process_file` to every path, isolating per-file failures."""

    report = RewriteReport()
    for path in files:
        try:
            outcome = process_file(path, inputs, settings)
        except (OSError, UnicodeDecodeError) as exc:
            message = f"Could not process file {path}: {exc}"
            LOGGER.warning(message)
            report.warnings.append(message)
            continue
        if outcome.warning:
            report.warnings.append(outcome.warning)
        if outcome.modified:
            report.files_modified += 1
    return report
