"""Counting and replacing placeholder tokens in template text."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Mapping

from .schema import PlaceholderStyle

__all__ = [
    "count_occurrences",
    "placeholder_pattern",
    "placeholder_token",
    "rewrite_file",
    "rewrite_text",
]


def placeholder_token(key: str, style: PlaceholderStyle = PlaceholderStyle.BARE) -> str:
    """Return the literal text that stands for ``key`` in template files."""

    if style is PlaceholderStyle.BRACES:
        return "{{" + key + "}}"
    return key


def placeholder_pattern(key: str, style: PlaceholderStyle = PlaceholderStyle.BARE) -> re.Pattern[str]:
    """Compile a pattern matching the token for ``key`` literally."""

    return re.compile(re.escape(placeholder_token(key, style)))


def count_occurrences(
    content: str,
    key: str,
    style: PlaceholderStyle = PlaceholderStyle.BARE,
) -> int:
    """Count non-overlapping occurrences of the token for ``key`` in ``content``.

    Regex metacharacters in ``key`` carry no special meaning. The same
    pattern is used by :func:`rewrite_text`, so a count of zero means the
    rewrite leaves ``content`` untouched for that key.
    """

    if not key:
        return 0
    return len(placeholder_pattern(key, style).findall(content))


def rewrite_text(
    content: str,
    inputs: Mapping[str, str],
    style: PlaceholderStyle = PlaceholderStyle.BARE,
) -> tuple[str, bool]:
    """Replace every placeholder token in ``content`` with its value.

    Keys are processed in the iteration order of ``inputs``. A replacement
    can create or destroy occurrences of a later key when keys overlap.
    """

    changed = False
    for key, value in inputs.items():
        if not key:
            continue
        token = placeholder_token(key, style)
        if token not in content:
            continue
        replacement = str(value)
        content = placeholder_pattern(key, style).sub(lambda _match: replacement, content)
        changed = True
    return content, changed


def rewrite_file(
    path: str | Path,
    content: str,
    inputs: Mapping[str, str],
    style: PlaceholderStyle = PlaceholderStyle.BARE,
) -> tuple[str, bool]:
    """Rewrite the already loaded ``content`` of ``path``.

    Binary files must be filtered out by the caller with
    :func:`genfrom.files.is_binary`.
    """

    return rewrite_text(content, inputs, style)
