"""
hubreg - register genomic track hubs with a Track Hub Registry.

Typical use:

    from hubreg import RegistryCredentials, RegistrySession, TrackhubSubmission

    session = RegistrySession(credentials, submission)
    session.login()
    session.post_trackhub()
    session.logout()
"""

from .core.exceptions import (
    AuthenticationError,
    HubregException,
    LogoutError,
    ProtocolError,
    SessionStateError,
    SubmissionError,
    TransportError,
)
from .core.models.trackhub import (
    Assembly,
    RegistryCredentials,
    TrackhubSubmission,
    TrackhubType,
    Visibility,
)
from .registry_client import RegistrySession, SessionState

__all__ = [
    "Assembly",
    "AuthenticationError",
    "HubregException",
    "LogoutError",
    "ProtocolError",
    "RegistryCredentials",
    "RegistrySession",
    "SessionState",
    "SessionStateError",
    "SubmissionError",
    "TrackhubSubmission",
    "TrackhubType",
    "TransportError",
    "Visibility",
]
