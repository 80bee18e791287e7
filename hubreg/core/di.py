"""
Dependency lookup with a fallback.

Lets RegistrySession and the registration service run as a plain library:
without bootstrap() they get the default implementation instead of the
configured one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from .container import get_container

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")


def resolve_or_default(
    interface: type[T],
    default_factory: Callable[[], T],
) -> T:
    """Resolve a service from the container, or build the default.

    Example:
        >>> from hubreg.core.interfaces.logger import ILogger
        >>> from hubreg.services.logging import NullLogger
        >>> logger = resolve_or_default(ILogger, NullLogger)
    """
    instance = get_container().try_resolve(interface)
    return default_factory() if instance is None else instance
