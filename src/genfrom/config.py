"""Loading of the static configuration into an explicit run context."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from .errors import ConfigurationError
from .schema import (
    PLACEHOLDER_LIST,
    TEMPLATE_LIST,
    GeneratorSettings,
    PlaceholderDefinition,
    Template,
)

__all__ = [
    "DEFAULT_CONFIG_DIR",
    "GeneratorContext",
    "load_context",
]

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent / "data"

TEMPLATES_FILENAME = "templates.json"
PLACEHOLDERS_FILENAME = "placeholders.json"
SETTINGS_FILENAME = "settings.json"


@dataclass(frozen=True, slots=True)
class GeneratorContext:
    """Everything a run needs that is decided before the first prompt.

    Attributes
    ----------
    templates:
        Templates offered when no template is named on the command line.
    placeholders:
        Placeholder definitions in the order they are asked.
    settings:
        Deployment settings such as the forge host and placeholder style.
    """

    templates: tuple[Template, ...]
    placeholders: tuple[PlaceholderDefinition, ...]
    settings: GeneratorSettings

    def find_template(self, *candidates: str) -> Template | None:
        """Return the first template whose name or repo matches a candidate."""

        for template in self.templates:
            if template.name in candidates or template.repo in candidates:
                return template
        return None


def _read_json(path: Path, label: str) -> object:
    if not path.is_file():
        raise ConfigurationError(f"{label} configuration file not found: {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"{label} configuration file is unreadable: {exc}") from exc


def load_context(config_dir: str | Path | None = None) -> GeneratorContext:
    """Load templates, placeholders and optional settings from ``config_dir``.

    ``templates.json`` and ``placeholders.json`` are required;
    ``settings.json`` falls back to :class:`GeneratorSettings` defaults.
    """

    directory = Path(config_dir) if config_dir is not None else DEFAULT_CONFIG_DIR
    LOGGER.debug("loading configuration from %s", directory)

    templates_raw = _read_json(directory / TEMPLATES_FILENAME, "Templates")
    placeholders_raw = _read_json(directory / PLACEHOLDERS_FILENAME, "Placeholders")
    settings_path = directory / SETTINGS_FILENAME

    try:
        templates = TEMPLATE_LIST.validate_python(templates_raw)
        placeholders = PLACEHOLDER_LIST.validate_python(placeholders_raw)
        if settings_path.exists():
            settings = GeneratorSettings.model_validate(_read_json(settings_path, "Settings"))
        else:
            settings = GeneratorSettings()
    except ValidationError as exc:
        raise ConfigurationError(f"invalid configuration in {directory}: {exc}") from exc

    keys = [placeholder.key for placeholder in placeholders]
    duplicates = sorted({key for key in keys if keys.count(key) > 1})
    if duplicates:
        raise ConfigurationError(f"duplicate placeholder keys: {', '.join(duplicates)}")

    return GeneratorContext(
        templates=tuple(templates),
        placeholders=tuple(placeholders),
        settings=settings,
    )
