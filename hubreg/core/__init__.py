"""
Core infrastructure for hubreg.

This module provides:
- ServiceContainer: DI container using dependency-injector
- Application bootstrap for initialization
- Protocol definitions for service interfaces
- Custom exception hierarchy
"""

from .bootstrap import bootstrap, is_initialized, reset
from .container import ServiceContainer, get_container, resolve, try_resolve
from .exceptions import (
    AuthenticationError,
    ConfigFileError,
    ConfigValidationError,
    HubregConfigError,
    HubregException,
    HubregValidationError,
    InvalidArgumentError,
    LogoutError,
    ProtocolError,
    RegistrationValidationError,
    RegistryHTTPError,
    RegistryNetworkError,
    SessionStateError,
    SubmissionError,
    TransportError,
)

__all__ = [
    "AuthenticationError",
    "ConfigFileError",
    "ConfigValidationError",
    "HubregConfigError",
    "HubregException",
    "HubregValidationError",
    "InvalidArgumentError",
    "LogoutError",
    "ProtocolError",
    "RegistrationValidationError",
    "RegistryHTTPError",
    "RegistryNetworkError",
    "ServiceContainer",
    "SessionStateError",
    "SubmissionError",
    "TransportError",
    "bootstrap",
    "get_container",
    "is_initialized",
    "reset",
    "resolve",
    "try_resolve",
]
