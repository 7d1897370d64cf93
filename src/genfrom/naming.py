"""String normalisation helpers used for package name suggestions."""

from __future__ import annotations

import re
import unicodedata

__all__ = ["scoped_package_name", "slugify", "suggest_package_names"]


_SEPARATORS = re.compile(r"[\s_\-]+")
_INVALID_CHARACTERS = re.compile(r"[^a-z0-9\-._~ ]")


def slugify(value: str, *, separator: str = "-") -> str:
    """Create a lowercase, URL friendly slug from ``value``.

    The result only contains characters allowed in npm package names.
    Unicode is folded to ASCII where possible and dropped otherwise.
    """

    text = unicodedata.normalize("NFKD", str(value))
    text = text.encode("ascii", "ignore").decode("ascii").lower()
    text = _INVALID_CHARACTERS.sub("", text).strip()
    if not text:
        return ""

    collapsed = _SEPARATORS.sub(separator, text)
    collapsed = re.sub(rf"{re.escape(separator)}+", separator, collapsed)
    return collapsed.strip(separator + ".")


def scoped_package_name(username: str, project_name: str) -> str:
    """Return ``@username/project`` with both parts slugified."""

    scope = slugify(username)
    name = slugify(project_name) or "project"
    if not scope:
        return name
    return f"@{scope}/{name}"


def suggest_package_names(username: str, project_name: str) -> list[str]:
    """Candidate package names offered after the placeholders are collected.

    The plain project slug comes first, then the scoped variant. Duplicates
    are dropped when no username is known.
    """

    suggestions: list[str] = []
    for candidate in (slugify(project_name) or "project", scoped_package_name(username, project_name)):
        if candidate not in suggestions:
            suggestions.append(candidate)
    return suggestions
