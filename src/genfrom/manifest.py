"""Structured rewriting of ``package.json`` manifests.

Plain string substitution would corrupt nested values (for example a key
that also appears inside a URL) and cannot merge list fields, so the
manifest is parsed, updated field by field and serialised again. Generic
text rewriting still runs afterwards to catch tokens in fields that are not
handled here.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, MutableMapping

from .errors import ManifestError
from .schema import GeneratorSettings

__all__ = [
    "AUTHOR_NAME",
    "KEYWORDS",
    "ObjectForm",
    "PACKAGE_NAME",
    "PROJECT_NAME",
    "StringForm",
    "USERNAME",
    "classify_field",
    "generated_keywords",
    "merge_keywords",
    "rewrite_manifest",
    "rewrite_manifest_text",
]

LOGGER = logging.getLogger(__name__)

PROJECT_NAME = "PROJECT_NAME"
PACKAGE_NAME = "PACKAGE_NAME"
USERNAME = "USERNAME"
AUTHOR_NAME = "AUTHOR_NAME"
KEYWORDS = "KEYWORDS"


@dataclass(frozen=True, slots=True)
class StringForm:
    """A manifest field written as a plain string."""

    value: str


@dataclass(frozen=True, slots=True)
class ObjectForm:
    """A manifest field written as an object; ``fields`` is the live mapping."""

    fields: MutableMapping[str, Any]

    def has(self, name: str) -> bool:
        return name in self.fields


FieldForm = StringForm | ObjectForm | None


def classify_field(value: Any) -> FieldForm:
    """Tag ``value`` by its shape. Shapes the rewriter does not handle give ``None``."""

    if isinstance(value, str):
        return StringForm(value)
    if isinstance(value, MutableMapping):
        return ObjectForm(value)
    return None


def _value(inputs: Mapping[str, str], key: str) -> str:
    return str(inputs.get(key) or "").strip()


def generated_keywords(inputs: Mapping[str, str], settings: GeneratorSettings) -> list[str]:
    """Keywords contributed by the generator, in the order they are appended."""

    keywords = list(settings.ecosystem_keywords)
    keywords.append(_value(inputs, PROJECT_NAME).lower())
    keywords.extend(settings.extra_keywords)
    keywords.extend(part.strip() for part in _value(inputs, KEYWORDS).split(",") if part.strip())
    return keywords


def merge_keywords(existing: list[Any], generated: list[str]) -> list[Any]:
    """Union of ``existing`` and ``generated``; first occurrence wins."""

    merged: list[Any] = []
    for keyword in [*existing, *generated]:
        if keyword not in merged:
            merged.append(keyword)
    return merged


def _rewrite_link(
    document: MutableMapping[str, Any],
    field_name: str,
    url: str,
) -> bool:
    form = classify_field(document.get(field_name))
    if isinstance(form, StringForm):
        document[field_name] = url
        return True
    if isinstance(form, ObjectForm) and form.has("url"):
        form.fields["url"] = url
        return True
    return False


def _rewrite_author(
    document: MutableMapping[str, Any],
    inputs: Mapping[str, str],
    settings: GeneratorSettings,
) -> bool:
    author_name = _value(inputs, AUTHOR_NAME)
    username = _value(inputs, USERNAME)
    form = classify_field(document.get("author"))

    if isinstance(form, ObjectForm):
        changed = False
        if author_name and form.has("name"):
            form.fields["name"] = author_name
            changed = True
        if username and form.has("url"):
            form.fields["url"] = f"https://{settings.forge_host}/{username}"
            changed = True
        return changed

    if isinstance(form, StringForm):
        replacement = author_name or username
        if replacement:
            document["author"] = replacement
            return True
    return False


def rewrite_manifest(
    document: MutableMapping[str, Any],
    inputs: Mapping[str, str],
    settings: GeneratorSettings | None = None,
) -> tuple[MutableMapping[str, Any], bool]:
    """Update the well-known fields of a parsed manifest in place.

    Every update checks its own precondition; one update firing or not has
    no influence on the others. Returns the document and whether any update
    fired.
    """

    settings = settings or GeneratorSettings()
    changed = False

    package_name = _value(inputs, PACKAGE_NAME)
    if package_name:
        document["name"] = package_name
        changed = True

    if _rewrite_author(document, inputs, settings):
        changed = True

    username = _value(inputs, USERNAME)
    project_name = _value(inputs, PROJECT_NAME)
    if username and project_name:
        repo_url = f"https://{settings.forge_host}/{username}/{project_name}"
        if "repository" in document and _rewrite_link(document, "repository", repo_url):
            changed = True
        if "bugs" in document and _rewrite_link(document, "bugs", f"{repo_url}/issues"):
            changed = True
        if "homepage" in document:
            document["homepage"] = repo_url
            changed = True

    keywords = document.get("keywords")
    if isinstance(keywords, list) and project_name:
        document["keywords"] = merge_keywords(keywords, generated_keywords(inputs, settings))
        changed = True

    return document, changed


def rewrite_manifest_text(
    content: str,
    inputs: Mapping[str, str],
    settings: GeneratorSettings | None = None,
) -> tuple[str, bool]:
    """Parse ``content``, apply :func:`rewrite_manifest` and serialise it back.

    Raises :class:`ManifestError` when ``content`` is not a JSON object. When
    no update fires the original text is returned untouched.
    """

    try:
        document = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ManifestError(f"invalid JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise ManifestError("manifest root is not a JSON object")

    document, changed = rewrite_manifest(document, inputs, settings)
    if not changed:
        return content, False

    rendered = json.dumps(document, indent=2, ensure_ascii=False)
    if content.endswith("\n"):
        rendered += "\n"
    LOGGER.debug("rewrote manifest for package %r", document.get("name"))
    return rendered, True
