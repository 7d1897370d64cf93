"""Custom exception types raised by the gen-from pipeline."""

from __future__ import annotations


class GenFromError(RuntimeError):
    """Base class for failures that abort a generator run."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigurationError(GenFromError):
    """Raised when the static template or placeholder configuration is unusable."""


class RepositoryNotFoundError(GenFromError):
    """Raised when the template repository does not exist on the forge."""


class RepositoryCheckError(GenFromError):
    """Raised when the existence check fails for a reason other than "not found"."""


class DownloadError(GenFromError):
    """Raised when a template cannot be materialized into the target directory."""


class ManifestError(GenFromError):
    """Raised when a manifest file cannot be parsed as a JSON object.

    The pipeline never lets this escape a single file: the manifest is then
    rewritten as plain text only.
    """


__all__ = [
    "ConfigurationError",
    "DownloadError",
    "GenFromError",
    "ManifestError",
    "RepositoryCheckError",
    "RepositoryNotFoundError",
]
