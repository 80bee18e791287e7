"""Registry client for registering track hubs with a Track Hub Registry server."""

from __future__ import annotations

import contextlib
import http.client
import json
import re
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from enum import Enum
from http import HTTPStatus
from typing import Any

from .core.di import resolve_or_default
from .core.exceptions import (
    AuthenticationError,
    LogoutError,
    ProtocolError,
    RegistrationValidationError,
    SessionStateError,
    SubmissionError,
    TransportError,
)
from .core.interfaces.logger import ILogger
from .core.models.trackhub import RegistryCredentials, TrackhubSubmission

LOGIN_PATH = "/api/login"
TRACKHUB_PATH = "/api/trackhub"
LOGOUT_PATH = "/api/logout"

DEFAULT_TIMEOUT = 30.0


class SessionState(str, Enum):
    """Where a RegistrySession is in its login/post/logout cycle."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"
    CLOSED = "closed"


@dataclass
class RegistryResponse:
    """Status line and decoded body of one registry exchange."""

    status: int
    reason: str
    body: str


def _hostname(uri: str) -> str:
    if "://" not in uri:
        uri = f"//{uri}"
    return (urllib.parse.urlsplit(uri).hostname or "").lower()


class HostScopedPasswordMgr(urllib.request.HTTPPasswordMgr):
    """Password manager that matches on host name alone.

    Credentials registered for a host are offered for any port, path and
    realm on that host.
    """

    def __init__(self) -> None:
        super().__init__()
        self._by_host: dict[str, tuple[str, str]] = {}

    def add_password(self, realm, uri, user, passwd) -> None:
        uris = [uri] if isinstance(uri, str) else list(uri)
        for u in uris:
            self._by_host[_hostname(u)] = (user, passwd)

    def find_user_password(self, realm, authuri):
        return self._by_host.get(_hostname(authuri), (None, None))


_BASIC_CHALLENGE = re.compile(r"(?:^|,)\s*basic(?:\s|,|$)", re.IGNORECASE)


class BasicOnlyAuthHandler(urllib.request.HTTPBasicAuthHandler):
    """Answers Basic challenges and leaves any other 401 to the caller.

    A 401 offering only Digest, Bearer or Negotiate is passed on as the
    plain HTTPError instead of failing inside urllib.
    """

    def http_error_401(self, req, fp, code, msg, headers):
        challenges = headers.get_all("www-authenticate") or []
        if not any(_BASIC_CHALLENGE.search(c) for c in challenges):
            return None
        return super().http_error_401(req, fp, code, msg, headers)


def _is_header_safe(value: str) -> bool:
    """True when value can be sent as an HTTP header value as is."""
    try:
        value.encode("latin-1")
    except UnicodeEncodeError:
        return False
    return value.isprintable()


def _mask(value: str) -> str:
    if len(value) <= 4:
        return "****"
    return f"{value[:4]}****"


class RegistrySession:
    """Logs into a Track Hub Registry, posts a track hub and logs out.

    One session covers one registration attempt. The calls must be made in
    order; the auth token obtained by login() is the only state that
    changes over the session's lifetime:

        session = RegistrySession(credentials, submission)
        session.login()
        session.post_trackhub()
        session.logout()

    Every call opens its own connection and releases it before returning.
    Nothing is retried.
    """

    def __init__(
        self,
        credentials: RegistryCredentials,
        submission: TrackhubSubmission | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        proxies: dict[str, str] | None = None,
        logger: ILogger | None = None,
    ):
        """
        Initialize a session.

        Args:
            credentials: Registry server address and account
            submission: Track hub to post. Can also be passed to post_trackhub().
            timeout: Socket timeout in seconds for each request
            proxies: Explicit proxy map for urllib. None uses the environment,
                an empty dict disables proxies.
            logger: Logger instance. If None, resolves from DI container.
        """
        self._credentials = credentials
        self._submission = submission
        self._timeout = timeout
        self._proxies = proxies
        self._auth_token: str | None = None
        self._state = SessionState.UNAUTHENTICATED
        from .services.logging import NullLogger

        self._logger = logger or resolve_or_default(ILogger, NullLogger)  # type: ignore[type-abstract]

    # -------------------------------------------------------------------------
    # Session state
    # -------------------------------------------------------------------------

    @property
    def credentials(self) -> RegistryCredentials:
        return self._credentials

    @property
    def server(self) -> str:
        return self._credentials.server

    @property
    def user(self) -> str:
        return self._credentials.user

    @property
    def submission(self) -> TrackhubSubmission | None:
        return self._submission

    @property
    def auth_token(self) -> str | None:
        return self._auth_token

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_authenticated(self) -> bool:
        return self._state is SessionState.AUTHENTICATED

    def _url(self, path: str) -> str:
        return f"{self.server}{path}"

    def _require_credentials(self) -> None:
        missing = []
        if not self.server:
            missing.append("server")
        if not self.user:
            missing.append("user")
        if not self._credentials.password.get_secret_value():
            missing.append("password")
        if missing:
            raise RegistrationValidationError(
                f"Cannot log in without {', '.join(missing)}",
                validation_errors=[f"{name} is empty" for name in missing],
            )
        if not _is_header_safe(self.user):
            raise RegistrationValidationError(
                "Cannot log in: user cannot be sent in a request header",
                validation_errors=["user must be printable latin-1 text"],
            )

    def _require_token(self, operation: str) -> str:
        if self._state is not SessionState.AUTHENTICATED or not self._auth_token:
            raise SessionStateError(
                f"Cannot {operation} before logging in",
                state=self._state.value,
                operation=operation,
            )
        return self._auth_token

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _build_opener(self, with_credentials: bool = False) -> urllib.request.OpenerDirector:
        handlers: list[urllib.request.BaseHandler] = []
        if self._proxies is not None:
            handlers.append(urllib.request.ProxyHandler(self._proxies))
        if with_credentials:
            password_mgr = HostScopedPasswordMgr()
            password_mgr.add_password(
                None,
                self.server,
                self.user,
                self._credentials.password.get_secret_value(),
            )
            handlers.append(BasicOnlyAuthHandler(password_mgr))
        return urllib.request.build_opener(*handlers)

    def _exchange(
        self,
        request: urllib.request.Request,
        with_credentials: bool = False,
    ) -> RegistryResponse:
        """Perform one request/response cycle and release the connection.

        Non-2xx statuses are returned, not raised; only network level
        failures raise TransportError.
        """
        url = request.full_url
        self._logger.debug("API request: %s %s", request.get_method(), url)

        try:
            with contextlib.closing(self._build_opener(with_credentials)) as opener:
                try:
                    with opener.open(request, timeout=self._timeout) as resp:
                        response = RegistryResponse(
                            status=resp.status,
                            reason=resp.reason or "",
                            body=resp.read().decode("utf-8", errors="replace"),
                        )
                except urllib.error.HTTPError as e:
                    try:
                        error_body = e.read().decode("utf-8", errors="replace") if e.fp else ""
                    finally:
                        e.close()
                    response = RegistryResponse(status=e.code, reason=str(e.reason), body=error_body)
        except urllib.error.URLError as e:
            self._logger.debug("Registry connection error to %s: %s", url, e)
            raise TransportError(f"Connection error: {e.reason}", url=url, cause=e) from e
        except (http.client.HTTPException, OSError) as e:
            self._logger.debug("Registry request to %s failed: %s", url, e)
            raise TransportError(f"Connection error: {e}", url=url, cause=e) from e

        self._logger.debug(
            "API response: %s %s -> HTTP %d (%d bytes)",
            request.get_method(),
            url,
            response.status,
            len(response.body),
        )
        return response

    def _parse_auth_token(self, response: RegistryResponse, url: str) -> str:
        body = response.body
        if not body.strip():
            raise ProtocolError(
                f"Server returned empty login response (HTTP {response.status})", url=url
            )

        stripped = body.strip()
        if stripped.startswith("<!") or stripped.lower().startswith("<html"):
            raise ProtocolError("Server returned HTML instead of JSON", url=url, body=body)

        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise ProtocolError(
                f"Invalid JSON in login response at position {e.pos}",
                url=url,
                body=body,
                cause=e,
            ) from e

        token = data.get("auth_token") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            raise ProtocolError("Login response has no auth_token", url=url, body=body)
        if not _is_header_safe(token):
            raise ProtocolError(
                "Login response auth_token cannot be sent as a header", url=url, body=body
            )
        return token

    # -------------------------------------------------------------------------
    # Registry operations
    # -------------------------------------------------------------------------

    def login(self) -> None:
        """
        Log into the registry and store the auth token it issues.

        Credentials are sent with HTTP Basic auth when the server asks for
        them, for any port on the server's host. Logging in again replaces
        the stored token.

        Raises:
            RegistrationValidationError: server, user or password is empty
            AuthenticationError: the server answered with a non-200 status
            ProtocolError: the body is not JSON or has no auth_token
            TransportError: the server could not be reached
        """
        self._require_credentials()
        self._logger.info("Attempting to log into the registry.")

        url = self._url(LOGIN_PATH)
        request = urllib.request.Request(url, method="GET")
        self._logger.info("Executing request GET %s", url)

        response = self._exchange(request, with_credentials=True)
        if response.status != HTTPStatus.OK:
            self._logger.error("Error when logging in, status code: %d", response.status)
            self._logger.error("Reason: %s", response.reason)
            raise AuthenticationError(
                f"Login failed: {response.reason}",
                status_code=response.status,
                reason=response.reason,
                url=url,
            )

        self._auth_token = self._parse_auth_token(response, url)
        self._state = SessionState.AUTHENTICATED
        self._logger.info("Successfully obtained auth token.")

    def build_payload(self, submission: TrackhubSubmission | None = None) -> dict[str, Any]:
        """Build the JSON body for a track hub post.

        An empty assembly list is logged as an error and the
        `assembliesNames` field is left out; the registry decides whether
        to accept such a hub.
        """
        submission = submission or self._submission
        if submission is None:
            raise RegistrationValidationError("No track hub submission to post")
        if not submission.assemblies:
            self._logger.error("Unable to read assemblies for track hub %s.", submission.url)
        return submission.to_payload()

    def post_trackhub(self, submission: TrackhubSubmission | None = None) -> str:
        """
        Post a track hub to the registry using the token from login().

        Args:
            submission: Track hub to post. Defaults to the session's submission.

        Returns:
            The registry's response body, a link to the registered hub.

        Raises:
            SessionStateError: not logged in (no request is made)
            RegistrationValidationError: no submission available
            SubmissionError: the server answered with anything but 201
            TransportError: the server could not be reached
        """
        token = self._require_token("post a track hub")
        payload = self.build_payload(submission)
        self._logger.info("Attempting to post track hub.")

        url = self._url(TRACKHUB_PATH)
        request = urllib.request.Request(
            url,
            data=json.dumps(payload).encode("utf-8"),
            method="POST",
        )
        request.add_header("User", self.user)
        request.add_header("Auth-Token", token)
        request.add_header("Content-Type", "application/json")
        for name, value in request.header_items():
            shown = _mask(value) if name.lower() == "auth-token" else value
            self._logger.info("%s : %s", name, shown)

        response = self._exchange(request)
        if response.status != HTTPStatus.CREATED:
            self._logger.error(
                "Error when posting track hub to registry, status code: %d", response.status
            )
            self._logger.error("ReasonPhrase: %s", response.reason)
            self._logger.error("Content: %s", response.body)
            raise SubmissionError(
                f"Track hub was not registered: {response.reason}",
                status_code=response.status,
                reason=response.reason,
                body=response.body,
                url=url,
            )

        self._logger.info("Successfully posted track hub to registry.")
        self._logger.debug("ReasonPhrase: %s", response.reason)
        self._logger.debug("Content: %s", response.body)
        return response.body

    def logout(self) -> None:
        """
        Invalidate the auth token on the registry.

        On success the stored token is cleared and the session is closed;
        call login() again to start over.

        Raises:
            SessionStateError: not logged in (no request is made)
            LogoutError: the server answered with a non-200 status
            TransportError: the server could not be reached
        """
        token = self._require_token("log out")
        self._logger.info("Attempting to log out")

        url = self._url(LOGOUT_PATH)
        request = urllib.request.Request(url, method="GET")
        request.add_header("user", self.user)
        request.add_header("Auth-Token", token)

        response = self._exchange(request)
        if response.status != HTTPStatus.OK:
            self._logger.error("Error when logging out, status code: %d", response.status)
            self._logger.error("Reason: %s", response.reason)
            raise LogoutError(
                f"Logout failed: {response.reason}",
                status_code=response.status,
                reason=response.reason,
                url=url,
            )

        self._auth_token = None
        self._state = SessionState.CLOSED
        self._logger.info("Successfully logged out.")
