"""Configuration loading for ``.ultragrep.yml``.

Example::

    types:
      app:
        glob: /var/log/app/*/production.log-*
        format: app
      work:
        glob: /var/log/work/*/work.log-*
        format: json
    default_type: app
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ultragrep.core.errors import ConfigError, ConfigNotFound

LOGGER = logging.getLogger(__name__)

CONFIG_NAME = ".ultragrep.yml"
DEFAULT_LOCATIONS: tuple[str, ...] = (
    CONFIG_NAME,
    os.path.join("~", CONFIG_NAME),
    "/etc/ultragrep.yml",
)


class LogType(BaseModel):
    """A named log family: where its shards live and how records look."""

    model_config = ConfigDict(frozen=True)

    name: str
    glob: str | None = Field(default=None, description="Glob matching the dated shards.")
    format: str | None = Field(default=None, description="Registered format identifier.")


class UltragrepConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    types: dict[str, LogType] = Field(default_factory=dict)
    default_type: str | None = None
    source: Path | None = None

    @model_validator(mode="before")
    @classmethod
    def _name_types(cls, data: object) -> object:
        if isinstance(data, dict) and isinstance(data.get("types"), dict):
            named = {}
            for name, body in data["types"].items():
                if body is None:
                    body = {}
                if isinstance(body, dict):
                    body = {"name": str(name), **body}
                named[str(name)] = body
            data = {**data, "types": named}
        return data

    def type_names(self) -> list[str]:
        return sorted(self.types)

    def resolve_type(self, name: str | None = None) -> LogType:
        """Return the requested type, the default type, or the only configured type."""
        known = ", ".join(self.type_names()) or "(none)"
        chosen = name or self.default_type
        if chosen is None and len(self.types) == 1:
            chosen = next(iter(self.types))
        if chosen is None:
            raise ConfigError(f"No --type given and no default_type configured. Types: {known}")
        try:
            log_type = self.types[chosen]
        except KeyError:
            raise ConfigError(f"Unknown type '{chosen}'. Types: {known}") from None
        if not log_type.glob or not log_type.format:
            raise ConfigError(f"Type '{chosen}' needs both 'glob' and 'format'")
        return log_type


def find_config(explicit: str | Path | None = None, locations: Sequence[str] = DEFAULT_LOCATIONS) -> Path:
    """Return the config file to use, raising ConfigNotFound when none exists."""
    if explicit is not None:
        path = Path(explicit).expanduser()
        if not path.is_file():
            raise ConfigNotFound(f"Config file not found: {path}")
        return path

    for loc in locations:
        path = Path(loc).expanduser()
        if path.is_file():
            return path
    raise ConfigNotFound(
        f"Please configure {CONFIG_NAME}, searched: {', '.join(locations)}"
    )


def load_config(explicit: str | Path | None = None) -> UltragrepConfig:
    """Load and validate the YAML configuration."""
    path = find_config(explicit)
    LOGGER.debug("Loading config from %s", path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    try:
        return UltragrepConfig.model_validate({**data, "source": path})
    except ValidationError as exc:
        raise ConfigError(f"{path}: invalid configuration\n{exc}") from exc
