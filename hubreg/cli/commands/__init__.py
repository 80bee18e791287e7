"""
Click command implementations for hubreg CLI.

Each module corresponds to a hubreg command (e.g., register.py
implements 'hubreg register').
"""

from .auth import auth
from .config import config
from .register import register

COMMANDS = [
    auth,
    config,
    register,
]

__all__ = [
    "COMMANDS",
    "auth",
    "config",
    "register",
]
