"""
Logger interface for registry diagnostics.

Messages written through ILogger describe what hubreg did on the wire
(requests, status codes, tokens issued). They end up in ~/.hubreg/hubreg.log
and are not shown to CLI users unless logging.console is set.
"""

from abc import ABC, abstractmethod
from typing import Any


class ILogger(ABC):
    """
    Interface for hubreg's diagnostic log.

    Arguments follow stdlib logging: a %-format message plus its args.
    """

    @abstractmethod
    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Request and response details."""

    @abstractmethod
    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Progress through login, post and logout."""

    @abstractmethod
    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Failures that were handled, such as a refused logout."""

    @abstractmethod
    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Rejected calls and unusable submissions."""

    @abstractmethod
    def set_level(self, level: str) -> None:
        """
        Change the lowest level that is written.

        Args:
            level: One of 'debug', 'info', 'warning', 'error'
        """
