"""Schemas for the static configuration documents shipped with gen-from."""

from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class PlaceholderStyle(str, Enum):
    """How placeholder keys appear inside template files."""

    BARE = "bare"
    BRACES = "braces"


class Template(BaseModel):
    """A named remote repository that projects can be generated from."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., description="Short name used to pick the template on the command line.")
    description: str = Field("", description="One line summary shown in the selection list.")
    repo: str = Field(..., description="Forge repository identifier in owner/name form, optionally with a #ref suffix.")

    @field_validator("repo")
    @classmethod
    def _require_owner(cls, value: str) -> str:
        owner, _, name = value.partition("/")
        if not owner or not name:
            raise ValueError(f"repo must look like 'owner/name', got '{value}'")
        return value


class PlaceholderDefinition(BaseModel):
    """A substitutable variable and the question used to collect it."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    key: str = Field(..., min_length=1, description="Token searched for in template files.")
    prompt: str = Field(..., description="Question presented to the user.")
    default: str = Field("", description="Suggested answer; may reference earlier answers as {{ KEY }}.")
    required: bool = Field(False, description="Whether an empty answer cancels the run.")


class GeneratorSettings(BaseModel):
    """Deployment level knobs, read from an optional ``settings.json``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    forge_host: str = Field("github.com", description="Host used when building repository URLs.")
    default_owner: str = Field("phucbm", description="Owner assumed for bare template names.")
    placeholder_style: PlaceholderStyle = Field(
        PlaceholderStyle.BARE, description="Token form searched for in template files."
    )
    manifest_filename: str = Field("package.json", description="File name rewritten structurally.")
    ecosystem_keywords: List[str] = Field(
        default_factory=lambda: ["typescript", "javascript"],
        description="Keywords always merged into the manifest before the project name.",
    )
    extra_keywords: List[str] = Field(
        default_factory=lambda: ["utility"],
        description="Keywords merged into the manifest after the project name.",
    )


TEMPLATE_LIST = TypeAdapter(List[Template])
PLACEHOLDER_LIST = TypeAdapter(List[PlaceholderDefinition])


__all__ = [
    "GeneratorSettings",
    "PLACEHOLDER_LIST",
    "PlaceholderDefinition",
    "PlaceholderStyle",
    "TEMPLATE_LIST",
    "Template",
]
