"""
Application bootstrap for hubreg.

The CLI calls bootstrap() once before running a command; it registers the
ILogger configured in the [logging] section. Library users can skip it and
get a NullLogger.
"""

from __future__ import annotations

from pathlib import Path

from .container import ServiceContainer, get_container
from .interfaces.logger import ILogger
from .settings import HubregSettings, load_settings

_initialized = False


def _create_logger(settings: HubregSettings) -> ILogger:
    from ..services.logging import HubregLogger

    try:
        logger = HubregLogger.from_config(settings.logging)
    except OSError as e:
        logger = HubregLogger.from_config(settings.logging.model_copy(update={"file": False}))
        logger.warning("Cannot write %s, file logging disabled: %s", HubregLogger.LOG_FILE_PATH, e)

    if settings.config_error:
        logger.warning("Ignored %s", settings.config_error)
    return logger


def bootstrap(start_dir: Path | None = None) -> ServiceContainer:
    """
    Register hubreg's shared services. Calling it again is a no-op.

    Args:
        start_dir: Directory to search for configuration from (default: cwd)
    """
    global _initialized

    container = get_container()
    if _initialized:
        return container

    # Read settings before ILogger is registered; problems found while
    # loading are logged through the fallback NullLogger.
    settings = load_settings(start_dir=str(start_dir) if start_dir else None)
    container.register_singleton(ILogger, factory=lambda: _create_logger(settings))  # type: ignore[type-abstract]

    _initialized = True
    return container


def reset() -> None:
    """Forget the container and bootstrap state (tests)."""
    global _initialized
    ServiceContainer.reset()
    _initialized = False


def is_initialized() -> bool:
    return _initialized
