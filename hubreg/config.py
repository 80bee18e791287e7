"""Reading and writing hubreg configuration, as used by `hubreg config`."""

from pathlib import Path
from typing import Any, get_args

from pydantic import ValidationError

from .core.exceptions import ConfigValidationError
from .core.models.config import HubregConfig, LogLevel
from .core.settings import CONFIG_DIR_NAME, CONFIG_FILE_NAME, find_config_file, load_settings

VALID_LOG_LEVELS = set(get_args(LogLevel))

# Keys `hubreg config set` accepts. registry.password is not one of them:
# it comes from HUBREG_REGISTRY__PASSWORD or a prompt and is never stored.
CONFIGURABLE_KEYS = {
    "registry.url": "Track Hub Registry server URL",
    "registry.user": "Registry account name",
    "registry.timeout": "Seconds to wait for each registry request",
    "logging.level": "Log level (debug, info, warning, error)",
    "logging.console": "Copy the diagnostic log to stderr",
    "logging.file": "Write the diagnostic log to ~/.hubreg/hubreg.log",
}

_NEVER_SAVED = {"registry.password"}


def _get_default_config() -> dict:
    """Defaults of every section, taken from the Pydantic models."""
    return HubregConfig().to_dict()


def _get_nested(d: dict, key: str, default=None):
    """Look up a dotted key like 'registry.url'."""
    for part in key.split("."):
        if not isinstance(d, dict) or part not in d:
            return default
        d = d[part]
    return d


def _set_nested(d: dict, key: str, value) -> None:
    *sections, field = key.split(".")
    for section in sections:
        d = d.setdefault(section, {})
    d[field] = value


def _toml_value(val: Any) -> str:
    if isinstance(val, bool):
        return "true" if val else "false"
    if isinstance(val, str):
        escaped = val.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return repr(val)


def load_config(config_path: Path | None = None, start_dir: str | None = None) -> dict:
    """
    Load configuration from file and environment.

    Args:
        config_path: Explicit path to config file
        start_dir: Directory to start searching from (if config_path not given)

    Returns:
        Nested dict of every section with defaults filled in
    """
    return load_settings(config_path=config_path, start_dir=start_dir).to_dict()


def get_config_path_for_write(start_dir: str | None = None) -> Path:
    """
    Pick the file `hubreg config set` writes to.

    An existing .hubreg/config.toml is reused; otherwise one is created in
    start_dir (or cwd). pyproject.toml is never written.
    """
    existing = find_config_file(start_dir)
    if existing is not None and existing.name == CONFIG_FILE_NAME:
        return existing

    config_dir = (Path(start_dir) if start_dir else Path.cwd()) / CONFIG_DIR_NAME
    config_dir.mkdir(exist_ok=True)
    return config_dir / CONFIG_FILE_NAME


def save_config(config: dict, config_path: Path) -> None:
    """
    Write the values of config that differ from the defaults.

    registry.password is left out even when set.
    """
    # Written by hand to avoid a TOML writer dependency
    lines: list[str] = []

    for section, defaults in _get_default_config().items():
        changed = [
            (field, value)
            for field, value in config.get(section, {}).items()
            if f"{section}.{field}" not in _NEVER_SAVED
            and value is not None
            and value != defaults.get(field)
        ]
        if not changed:
            continue
        lines.append(f"[{section}]")
        lines.extend(f"{field} = {_toml_value(value)}" for field, value in changed)
        lines.append("")

    config_path.write_text("\n".join(lines))


def config_get(key: str, start_dir: str | None = None):
    """Get a config value by dotted key, or None."""
    return _get_nested(load_config(start_dir=start_dir), key)


def _validate_value(key: str, value: str) -> Any:
    """Convert a command-line string with the section model's rules."""
    section, field = key.split(".")
    try:
        validated = HubregConfig.model_validate({section: {field: value}})
    except ValidationError as e:
        reason = e.errors()[0]["msg"]
        raise ConfigValidationError(
            f"Invalid value for {key}: {reason}", key=key, value=value, cause=e
        ) from e
    return getattr(getattr(validated, section), field)


def config_set(key: str, value: str, start_dir: str | None = None) -> tuple[Path, Any]:
    """
    Set a config value and save it to .hubreg/config.toml.

    Returns:
        The file written and the value as stored

    Raises:
        ConfigValidationError: Unknown key or invalid value
    """
    if key not in CONFIGURABLE_KEYS:
        raise ConfigValidationError(
            f"Unknown config key: {key}. Valid keys: {', '.join(CONFIGURABLE_KEYS)}",
            key=key,
        )

    typed_value = _validate_value(key, value)

    config = load_config(start_dir=start_dir)
    _set_nested(config, key, typed_value)

    config_path = get_config_path_for_write(start_dir)
    save_config(config, config_path)
    return config_path, typed_value


def config_list() -> dict[str, dict[str, Any]]:
    """Describe each configurable key with its default."""
    defaults = _get_default_config()
    return {
        key: {"description": description, "default": _get_nested(defaults, key)}
        for key, description in CONFIGURABLE_KEYS.items()
    }
