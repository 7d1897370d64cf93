"""Render placeholder defaults that refer to answers given earlier.

A placeholder default such as ``"@{{ USERNAME }}/{{ PROJECT_NAME|slug }}"``
is expanded with the values collected so far before it is offered to the
user. References to keys that have not been answered yet are left as they
are.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Mapping, MutableMapping

from .errors import ConfigurationError
from .naming import slugify

__all__ = ["DefaultRenderer", "InterpolationError"]


_REFERENCE_PATTERN = re.compile(r"{{\s*(?P<expression>[^{}]+?)\s*}}")


class InterpolationError(ConfigurationError):
    """Raised when a default uses a filter that does not exist."""


@dataclass(slots=True)
class DefaultRenderer:
    """Expand ``{{ KEY|filter }}`` references against collected answers."""

    filters: MutableMapping[str, Callable[[str], str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.filters:
            self.filters.update(
                {
                    "upper": str.upper,
                    "lower": str.lower,
                    "title": str.title,
                    "strip": str.strip,
                    "slug": slugify,
                }
            )

    def render(self, template: str, answers: Mapping[str, str]) -> str:
        """Return ``template`` with every resolvable reference substituted."""

        def substitute(match: re.Match[str]) -> str:
            parts = [part.strip() for part in match.group("expression").split("|") if part.strip()]
            if not parts:
                return match.group(0)

            key, *filter_names = parts
            if key not in answers:
                return match.group(0)

            value = str(answers[key])
            for name in filter_names:
                try:
                    value = self.filters[name](value)
                except KeyError as exc:
                    raise InterpolationError(f"unknown filter '{name}'") from exc
            return value

        return _REFERENCE_PATTERN.sub(substitute, template)
