"""
Diagnostic logging for hubreg.

Registry requests, responses and failures go to a rotating file under
~/.hubreg and, optionally, to stderr. What the CLI prints for the user is
not logged here.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from ..core.interfaces.logger import ILogger
from ..core.models.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _to_level(name: str) -> int:
    return _LEVELS.get(name.lower(), logging.WARNING)


class HubregLogger(ILogger):
    """
    ILogger on top of a stdlib logger that does not propagate to the root.

    Handlers filter by level; the logger itself passes everything through.
    Creating a second HubregLogger with the same name replaces the first
    one's handlers.
    """

    LOG_FILE_PATH = Path.home() / ".hubreg" / "hubreg.log"
    MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
    BACKUP_COUNT = 3

    def __init__(
        self,
        name: str = "hubreg",
        level: str = "warning",
        console_enabled: bool = False,
        file_enabled: bool = True,
        log_file: Path | None = None,
    ) -> None:
        """
        Args:
            name: stdlib logger name
            level: debug, info, warning or error
            console_enabled: Also write to stderr
            file_enabled: Write to log_file
            log_file: Defaults to ~/.hubreg/hubreg.log

        Raises:
            OSError: The log file's directory cannot be created
        """
        self._logger = logging.getLogger(name)
        self.close()
        self._logger.setLevel(logging.DEBUG)
        self._logger.propagate = False
        self._log_file = log_file or self.LOG_FILE_PATH

        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
        for handler in self._build_handlers(console_enabled, file_enabled):
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)
        self.set_level(level)

    @classmethod
    def from_config(cls, config: LoggingConfig, log_file: Path | None = None) -> HubregLogger:
        """Build a logger from the [logging] config section."""
        return cls(
            level=config.level,
            console_enabled=config.console,
            file_enabled=config.file,
            log_file=log_file,
        )

    def _build_handlers(self, console_enabled: bool, file_enabled: bool) -> list[logging.Handler]:
        handlers: list[logging.Handler] = []
        if console_enabled:
            handlers.append(logging.StreamHandler(sys.stderr))
        if file_enabled:
            self._log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(
                RotatingFileHandler(
                    self._log_file,
                    maxBytes=self.MAX_FILE_SIZE,
                    backupCount=self.BACKUP_COUNT,
                    encoding="utf-8",
                )
            )
        return handlers

    @property
    def log_file(self) -> Path:
        return self._log_file

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.error(message, *args, **kwargs)

    def set_level(self, level: str) -> None:
        for handler in self._logger.handlers:
            handler.setLevel(_to_level(level))

    def close(self) -> None:
        """Detach and close all handlers."""
        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.close()


class NullLogger(ILogger):
    """Discards everything; used when hubreg runs without bootstrap()."""

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        pass

    def set_level(self, level: str) -> None:
        pass
