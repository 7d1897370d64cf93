"""Filesystem helpers: binary detection, tree walking and scoped text I/O."""

from __future__ import annotations

import logging
from pathlib import Path

__all__ = [
    "BINARY_EXTENSIONS",
    "EXCLUDED_DIRECTORIES",
    "is_binary",
    "list_files",
    "read_text",
    "write_text",
]

LOGGER = logging.getLogger(__name__)


BINARY_EXTENSIONS = frozenset(
    {
        ".png",
        ".jpg",
        ".jpeg",
        ".gif",
        ".ico",
        ".svg",
        ".pdf",
        ".zip",
        ".tar",
        ".gz",
        ".7z",
        ".exe",
        ".dll",
        ".so",
        ".dylib",
        ".woff",
        ".woff2",
        ".ttf",
        ".otf",
    }
)

EXCLUDED_DIRECTORIES = frozenset({".git", "node_modules"})


def is_binary(path: str | Path) -> bool:
    """Return ``True`` when ``path`` should be copied without text rewriting.

    The decision only looks at the (case-insensitive) extension. It is a
    heuristic: a text file with an image extension is skipped and a binary
    file with an unknown extension is treated as text.
    """

    return Path(path).suffix.lower() in BINARY_EXTENSIONS


def list_files(root: str | Path) -> list[Path]:
    """Return every file below ``root`` in a stable depth-first order.

    Directories named in :data:`EXCLUDED_DIRECTORIES` are not entered and
    symlinked directories are not followed.
    """

    root_path = Path(root)
    files: list[Path] = []
    visited: set[Path] = set()
    stack: list[Path] = [root_path]

    while stack:
        directory = stack.pop()
        resolved = directory.resolve()
        if resolved in visited:
            continue
        visited.add(resolved)

        try:
            entries = sorted(directory.iterdir(), key=lambda item: item.name)
        except OSError as exc:
            LOGGER.warning("skipping unreadable directory %s: %s", directory, exc)
            continue

        subdirectories: list[Path] = []
        for entry in entries:
            if entry.is_dir() and not entry.is_symlink():
                if entry.name not in EXCLUDED_DIRECTORIES:
                    subdirectories.append(entry)
            elif entry.is_file():
                files.append(entry)

        # reversed so the first subdirectory is walked first
        stack.extend(reversed(subdirectories))

    return files


def read_text(path: Path, encoding: str = "utf-8") -> str:
    with path.open("r", encoding=encoding, newline="") as handle:
        return handle.read()


def write_text(path: Path, content: str, encoding: str = "utf-8") -> None:
    with path.open("w", encoding=encoding, newline="") as handle:
        handle.write(content)
