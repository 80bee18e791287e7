"""
Settings loading for hubreg.

Merges, highest priority first:
1. Values passed to HubregSettings() directly
2. HUBREG_<SECTION>__<FIELD> environment variables
3. .hubreg/config.toml, or [tool.hubreg] in pyproject.toml
4. Model defaults

`TRACKHUB_REGISTRY_URL` is honoured as a fallback for registry.url.
"""

from __future__ import annotations

import os
from contextvars import ContextVar
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib

from pydantic import PrivateAttr, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from .exceptions import ConfigFileError
from .models.config import LoggingConfig, RegistryConfig

CONFIG_DIR_NAME = ".hubreg"
CONFIG_FILE_NAME = "config.toml"
PYPROJECT_FILE_NAME = "pyproject.toml"

# Older deployment scripts export the registry address under this name.
LEGACY_URL_ENV = "TRACKHUB_REGISTRY_URL"

# Sections of the config file being loaded, visible to TomlConfigSource.
_file_sections: ContextVar[dict[str, Any]] = ContextVar("hubreg_file_sections", default={})


def _get_logger():
    from ..services.logging import NullLogger
    from .di import resolve_or_default
    from .interfaces.logger import ILogger

    return resolve_or_default(ILogger, NullLogger)


def _has_hubreg_table(pyproject: Path) -> bool:
    try:
        with open(pyproject, "rb") as f:
            return "hubreg" in tomllib.load(f).get("tool", {})
    except (tomllib.TOMLDecodeError, OSError) as e:
        _get_logger().debug("Skipping %s: %s", pyproject, e)
        return False


def find_config_file(start_dir: str | None = None) -> Path | None:
    """
    Look for hubreg configuration in start_dir (or cwd) and its parents.

    In each directory .hubreg/config.toml wins over a pyproject.toml with a
    [tool.hubreg] table.

    Returns:
        Path to the config file, or None if there is none.
    """
    start = Path(start_dir) if start_dir else Path.cwd()

    for directory in (start, *start.parents):
        candidate = directory / CONFIG_DIR_NAME / CONFIG_FILE_NAME
        if candidate.exists():
            return candidate
        pyproject = directory / PYPROJECT_FILE_NAME
        if pyproject.exists() and _has_hubreg_table(pyproject):
            return pyproject

    return None


def read_config_file(path: Path) -> dict[str, Any]:
    """
    Parse a config file into its sections.

    For pyproject.toml only the [tool.hubreg] table is returned.

    Raises:
        ConfigFileError: The file cannot be read or is not valid TOML
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigFileError(
            f"Failed to parse config file: {e}", file_path=str(path), cause=e
        ) from e
    except OSError as e:
        raise ConfigFileError(
            f"Failed to read config file: {e}", file_path=str(path), cause=e
        ) from e

    if path.name == PYPROJECT_FILE_NAME:
        return data.get("tool", {}).get("hubreg", {})
    return data


class TomlConfigSource(PydanticBaseSettingsSource):
    """Settings source serving the sections of the config file being loaded."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return _file_sections.get().get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        sections = _file_sections.get()
        return {name: sections[name] for name in self.settings_cls.model_fields if name in sections}


class HubregSettings(BaseSettings):
    """Registry connection and logging settings."""

    model_config = SettingsConfigDict(
        env_prefix="HUBREG_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    registry: RegistryConfig = RegistryConfig()
    logging: LoggingConfig = LoggingConfig()

    _config_file: str | None = PrivateAttr(default=None)
    _config_error: str | None = PrivateAttr(default=None)

    @model_validator(mode="before")
    @classmethod
    def apply_legacy_url(cls, data: Any) -> Any:
        """Use TRACKHUB_REGISTRY_URL when no other source sets registry.url."""
        legacy_url = os.environ.get(LEGACY_URL_ENV)
        if not legacy_url or not isinstance(data, dict):
            return data
        registry = data.get("registry")
        if registry is None:
            registry = {}
        if isinstance(registry, dict) and registry.get("url") is None:
            data["registry"] = {**registry, "url": legacy_url}
        return data

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, TomlConfigSource(settings_cls))

    @property
    def config_file(self) -> str | None:
        """Config file the settings were read from, if any."""
        return self._config_file

    @property
    def config_error(self) -> str | None:
        """Why the config file was skipped, if it could not be loaded."""
        return self._config_error

    def to_dict(self) -> dict[str, Any]:
        """Nested dict of all sections, plus _config_file/_config_error when set."""
        result: dict[str, Any] = {
            "registry": self.registry.model_dump(),
            "logging": self.logging.model_dump(),
        }
        if self._config_file:
            result["_config_file"] = self._config_file
        if self._config_error:
            result["_config_error"] = self._config_error
        return result


def load_settings(config_path: Path | None = None, start_dir: str | None = None) -> HubregSettings:
    """Load hubreg settings from the config file and environment.

    A config file that cannot be parsed is logged and skipped; environment
    variables and defaults still apply. The problem is kept on
    `HubregSettings.config_error`.

    Args:
        config_path: Explicit path to a config file
        start_dir: Directory to search from when config_path is not given
    """
    path = config_path or find_config_file(start_dir)
    sections: dict[str, Any] = {}
    error: str | None = None

    if path is not None:
        try:
            sections = read_config_file(path)
        except ConfigFileError as e:
            _get_logger().warning("%s", e)
            error = e.message

    token = _file_sections.set(sections)
    try:
        settings = HubregSettings()
    finally:
        _file_sections.reset(token)

    if path is not None and error is None:
        settings._config_file = str(path)
    settings._config_error = error
    return settings
