"""
Protocol interfaces for track hub registration services.

A registration runs the registry's fixed three-step protocol:
1. Login - Exchange account credentials for an auth token
2. Post - Submit the track hub description
3. Logout - Invalidate the auth token
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..exceptions import HubregException
    from ..models.trackhub import TrackhubSubmission


@dataclass
class RegisterResult:
    """Result of one registration attempt."""

    success: bool
    payload: dict[str, Any] = field(default_factory=dict)
    registry_response: str | None = None
    error: str | None = None
    exception: HubregException | None = field(default=None, repr=False)
    logged_out: bool = False
    dry_run: bool = False


@runtime_checkable
class ITrackhubRegistrar(Protocol):
    """Protocol for services that register track hubs with a registry."""

    def register(
        self,
        submission: TrackhubSubmission,
        dry_run: bool = False,
    ) -> RegisterResult:
        """Register a track hub, logging in and out around the post."""
        ...

    def check_credentials(self) -> RegisterResult:
        """Log in and straight back out to verify the account."""
        ...
