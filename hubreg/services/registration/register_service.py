"""
Register service for submitting track hubs to a Track Hub Registry.

Orchestrates the workflow:
1. Build the track hub payload
2. Log in and obtain an auth token
3. Post the track hub
4. Log out, even when the post failed
"""

from __future__ import annotations

from pydantic import ValidationError

from ...config import load_config
from ...core.di import resolve_or_default
from ...core.exceptions import HubregException, InvalidArgumentError
from ...core.interfaces.logger import ILogger
from ...core.interfaces.registration import ITrackhubRegistrar, RegisterResult
from ...core.models.trackhub import RegistryCredentials, TrackhubSubmission
from ...registry_client import DEFAULT_TIMEOUT, RegistrySession


def create_registry_session(
    server: str | None = None,
    user: str | None = None,
    password: str | None = None,
    start_dir: str | None = None,
    logger: ILogger | None = None,
) -> RegistrySession:
    """
    Create a RegistrySession from configuration.

    Explicit arguments win over configuration; configuration comes from
    HUBREG_REGISTRY__* environment variables and .hubreg/config.toml.

    Args:
        server: Registry URL override
        user: Account name override
        password: Account password override
        start_dir: Directory to search for configuration from
        logger: Logger passed to the session
    """
    registry = load_config(start_dir=start_dir).get("registry", {})
    try:
        credentials = RegistryCredentials(
            server=server or registry.get("url") or "",
            user=user or registry.get("user") or "",
            password=password or registry.get("password") or "",
        )
    except ValidationError as e:
        raise InvalidArgumentError(
            "Invalid registry server", argument="server", value=server, cause=e
        ) from e
    return RegistrySession(
        credentials,
        timeout=registry.get("timeout") or DEFAULT_TIMEOUT,
        logger=logger,
    )


class TrackhubRegistrationService(ITrackhubRegistrar):
    """
    Service for registering track hubs.

    Runs one login -> post -> logout cycle per call. A failed post still
    logs out, so the token is never left open on the server. Errors are
    reported in the RegisterResult rather than raised.
    """

    def __init__(self, session: RegistrySession, logger: ILogger | None = None):
        """
        Initialize the register service.

        Args:
            session: Registry session used for all calls
            logger: Logger instance. If None, resolves from DI container.
        """
        self._session = session
        from ..logging import NullLogger

        self._logger = logger or resolve_or_default(ILogger, NullLogger)  # type: ignore[type-abstract]

    @property
    def session(self) -> RegistrySession:
        return self._session

    def register(
        self,
        submission: TrackhubSubmission,
        dry_run: bool = False,
    ) -> RegisterResult:
        """
        Register a track hub with the registry.

        Args:
            submission: Track hub to register
            dry_run: Build the payload without contacting the registry

        Returns:
            RegisterResult with the payload sent and the registry's response
        """
        try:
            payload = self._session.build_payload(submission)
        except HubregException as e:
            return RegisterResult(success=False, error=str(e), exception=e)

        if dry_run:
            self._logger.info("Dry run, not posting %s", submission.url)
            return RegisterResult(success=True, payload=payload, dry_run=True)

        try:
            self._session.login()
        except HubregException as e:
            self._logger.warning("Login failed: %s", e)
            return RegisterResult(success=False, payload=payload, error=str(e), exception=e)

        result = RegisterResult(success=False, payload=payload)
        try:
            result.registry_response = self._session.post_trackhub(submission)
            result.success = True
        except HubregException as e:
            self._logger.warning("Posting track hub failed: %s", e)
            result.error = str(e)
            result.exception = e
        finally:
            result.logged_out = self._logout()

        return result

    def check_credentials(self) -> RegisterResult:
        """
        Verify the account by logging in and out.

        Returns:
            RegisterResult with success True when both calls succeed
        """
        try:
            self._session.login()
        except HubregException as e:
            return RegisterResult(success=False, error=str(e), exception=e)

        logged_out = self._logout()
        if not logged_out:
            return RegisterResult(
                success=False,
                error="Logged in but the registry refused the logout",
                logged_out=False,
            )
        return RegisterResult(success=True, logged_out=True)

    def _logout(self) -> bool:
        """Log out, reporting failure instead of raising it."""
        try:
            self._session.logout()
        except HubregException as e:
            self._logger.warning("Logout failed: %s", e)
            return False
        return True
