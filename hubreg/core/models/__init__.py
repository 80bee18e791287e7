"""
Pydantic models for hubreg.

Typed, validated models for configuration and track hub submissions.
"""

from .base import HubregBaseModel, ImmutableModel
from .config import (
    DEFAULT_REGISTRY_URL,
    HubregConfig,
    LoggingConfig,
    RegistryConfig,
)
from .trackhub import (
    ASSEMBLY_ACCESSIONS,
    Assembly,
    RegistryCredentials,
    TrackhubSubmission,
    TrackhubType,
    Visibility,
)

__all__ = [
    "ASSEMBLY_ACCESSIONS",
    "DEFAULT_REGISTRY_URL",
    "Assembly",
    "HubregBaseModel",
    "HubregConfig",
    "ImmutableModel",
    "LoggingConfig",
    "RegistryConfig",
    "RegistryCredentials",
    "TrackhubSubmission",
    "TrackhubType",
    "Visibility",
]
