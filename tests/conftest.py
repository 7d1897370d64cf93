from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from genfrom.config import GeneratorContext  # noqa: E402
from genfrom.schema import GeneratorSettings, PlaceholderDefinition, Template  # noqa: E402


@pytest.fixture()
def settings() -> GeneratorSettings:
    return GeneratorSettings()


@pytest.fixture()
def context(settings: GeneratorSettings) -> GeneratorContext:
    return GeneratorContext(
        templates=(
            Template(name="lib", description="Library starter", repo="acme/lib-template"),
            Template(name="app", description="App starter", repo="acme/app-template"),
        ),
        placeholders=(
            PlaceholderDefinition(key="PROJECT_NAME", prompt="Project name:", default="my-project", required=True),
            PlaceholderDefinition(key="USERNAME", prompt="GitHub username:", default="", required=True),
            PlaceholderDefinition(key="AUTHOR_NAME", prompt="Author name:", default="{{ USERNAME }}"),
            PlaceholderDefinition(key="DESCRIPTION", prompt="Description:", default=""),
        ),
        settings=settings,
    )
