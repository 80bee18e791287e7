"""
Registration services for the Track Hub Registry.

Wrap a RegistrySession in the login -> post -> logout cycle.
"""

from .register_service import TrackhubRegistrationService, create_registry_session

__all__ = [
    "TrackhubRegistrationService",
    "create_registry_session",
]
