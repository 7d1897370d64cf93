"""Generate projects from template repositories hosted on a code forge.

A template repository is downloaded into the target directory and the
placeholders it contains (project name, package name, author, ...) are
replaced with the answers collected from the user. ``package.json`` is
rewritten structurally so its metadata stays valid JSON.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import GeneratorContext, load_context
from .errors import (
    ConfigurationError,
    DownloadError,
    GenFromError,
    ManifestError,
    RepositoryCheckError,
    RepositoryNotFoundError,
)
from .files import is_binary, list_files
from .manifest import rewrite_manifest, rewrite_manifest_text
from .pipeline import Pipeline, RunResult, RunState
from .placeholders import count_occurrences, rewrite_file, rewrite_text
from .schema import GeneratorSettings, PlaceholderDefinition, PlaceholderStyle, Template

__all__ = [
    "ConfigurationError",
    "DownloadError",
    "GenFromError",
    "GeneratorContext",
    "GeneratorSettings",
    "ManifestError",
    "Pipeline",
    "PlaceholderDefinition",
    "PlaceholderStyle",
    "RepositoryCheckError",
    "RepositoryNotFoundError",
    "RunResult",
    "RunState",
    "Template",
    "count_occurrences",
    "is_binary",
    "list_files",
    "load_context",
    "rewrite_file",
    "rewrite_manifest",
    "rewrite_manifest_text",
    "rewrite_text",
]
