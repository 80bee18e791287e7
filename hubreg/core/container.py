"""
Service container for hubreg.

Shared services (today the ILogger the CLI configures) are registered by
interface type and handed out by dependency-injector providers kept in a
DynamicContainer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar, TypeVar

from dependency_injector import containers, providers

T = TypeVar("T")


def _provider_name(interface: type) -> str:
    return f"{interface.__module__}.{interface.__qualname__}".replace(".", "__")


class ServiceContainer:
    """
    Interface -> provider table, one per process.

    Library users who never call bootstrap() get an empty container, and
    components fall back to their defaults.
    """

    _instance: ClassVar[ServiceContainer | None] = None

    def __init__(self) -> None:
        self._container = containers.DynamicContainer()

    @classmethod
    def get_instance(cls) -> ServiceContainer:
        """Get the process-wide container, creating it on first use."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the process-wide container and its singletons."""
        if cls._instance is not None:
            cls._instance._container.reset_singletons()
        cls._instance = None

    def _provider(self, interface: type) -> providers.Provider | None:
        return self._container.providers.get(_provider_name(interface))

    def register_singleton(
        self,
        interface: type[T],
        implementation: T | None = None,
        factory: Callable[[], T] | None = None,
    ) -> None:
        """
        Register one shared instance of a service.

        Args:
            interface: Type the service is looked up by
            implementation: Ready-made instance
            factory: Called on first resolve when no instance is given
        """
        if implementation is not None:
            provider: providers.Provider = providers.Object(implementation)
        elif factory is not None:
            provider = providers.Singleton(factory)
        else:
            raise ValueError("Must provide either implementation or factory")
        self._container.set_provider(_provider_name(interface), provider)

    def register_transient(self, interface: type[T], factory: Callable[..., T]) -> None:
        """Register a service that is built anew on every resolve."""
        self._container.set_provider(_provider_name(interface), providers.Factory(factory))

    def resolve(self, interface: type[T]) -> T:
        """
        Resolve a service by interface.

        Raises:
            KeyError: Nothing is registered for the interface
        """
        provider = self._provider(interface)
        if provider is None:
            raise KeyError(f"No provider registered for: {interface.__qualname__}")
        return provider()

    def try_resolve(self, interface: type[T]) -> T | None:
        """Resolve a service, or None when nothing is registered."""
        provider = self._provider(interface)
        return None if provider is None else provider()

    def override(self, interface: type[T], provider: providers.Provider) -> None:
        """Make resolve() use provider instead of the registered one (tests)."""
        current = self._provider(interface)
        if current is None:
            self._container.set_provider(_provider_name(interface), provider)
        else:
            current.override(provider)

    def is_registered(self, interface: type) -> bool:
        return self._provider(interface) is not None


def get_container() -> ServiceContainer:
    """Get the process-wide service container."""
    return ServiceContainer.get_instance()


def resolve(interface: type[T]) -> T:
    return get_container().resolve(interface)


def try_resolve(interface: type[T]) -> T | None:
    return get_container().try_resolve(interface)
