"""Abstract interfaces shared across hubreg services."""

from .logger import ILogger
from .registration import ITrackhubRegistrar, RegisterResult

__all__ = [
    "ILogger",
    "ITrackhubRegistrar",
    "RegisterResult",
]
