"""
Exception hierarchy for hubreg.

Every failure of a registry call surfaces as one of these typed exceptions.
Nothing is retried; the caller decides whether to run the whole
login -> post -> logout cycle again.

    HubregException
    ├── HubregConfigError
    │   ├── ConfigFileError
    │   └── ConfigValidationError (ValueError)
    ├── HubregValidationError (ValueError)
    │   ├── RegistrationValidationError
    │   └── InvalidArgumentError
    ├── SessionStateError
    └── RegistryNetworkError
        ├── TransportError
        ├── ProtocolError
        └── RegistryHTTPError
            ├── AuthenticationError
            ├── SubmissionError
            └── LogoutError
"""

from __future__ import annotations

from typing import Any

# Response bodies can be whole HTML pages; keep the rendered message readable.
_BODY_PREVIEW = 200


def _merge_context(context: dict | None, **fields: Any) -> dict:
    """Add the non-empty fields to a copy of context."""
    merged = dict(context or {})
    merged.update({k: v for k, v in fields.items() if v is not None and v != ""})
    return merged


class HubregException(Exception):
    """
    Base exception for all hubreg errors.

    Attributes:
        message: Human-readable error description
        context: Values that locate the failure (url, status_code, key, ...)
        exit_code: Exit code the CLI uses for this error
        recoverable: Whether running the same call again can succeed
    """

    exit_code: int = 1
    recoverable: bool = True

    def __init__(
        self,
        message: str,
        *,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.message = message
        self.context = context or {}
        if cause is not None:
            self.__cause__ = cause
        super().__init__(message)

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{name}={value!r}" for name, value in self.context.items())
        return f"{self.message} ({details})"


# =============================================================================
# Configuration
# =============================================================================


class HubregConfigError(HubregException):
    """Problem with .hubreg/config.toml or a HUBREG_* variable."""

    recoverable: bool = False


class ConfigFileError(HubregConfigError):
    """A config file exists but cannot be read or is not valid TOML."""

    def __init__(
        self,
        message: str,
        *,
        file_path: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, context=_merge_context(context, file_path=file_path), cause=cause)
        self.file_path = file_path


class ConfigValidationError(HubregConfigError, ValueError):
    """
    A config key is unknown or its value is invalid.

    Also a ValueError, so `hubreg config set` reports it like any bad value.
    """

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        value: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message, context=_merge_context(context, key=key, value=value), cause=cause
        )
        self.key = key
        self.value = value


# =============================================================================
# Input validation
# =============================================================================


class HubregValidationError(HubregException, ValueError):
    """Input rejected before anything was sent to the registry."""

    recoverable: bool = False


class RegistrationValidationError(HubregValidationError):
    """
    Data needed for a registry call is missing.

    For example an empty password at login, or a post with no track hub
    submission to send.
    """

    def __init__(
        self,
        message: str,
        *,
        validation_errors: list[str] | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            context=_merge_context(context, validation_errors=validation_errors or None),
            cause=cause,
        )
        self.validation_errors = validation_errors or []


class InvalidArgumentError(HubregValidationError):
    """A function argument or CLI option has an unusable value."""

    exit_code: int = 2

    def __init__(
        self,
        message: str,
        *,
        argument: str | None = None,
        value: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message, context=_merge_context(context, argument=argument, value=value), cause=cause
        )
        self.argument = argument


# =============================================================================
# Session state
# =============================================================================


class SessionStateError(HubregException):
    """
    A registry operation was called out of order.

    Posting or logging out without a token raises this before any request
    is made.
    """

    recoverable: bool = False

    def __init__(
        self,
        message: str,
        *,
        state: str | None = None,
        operation: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message, context=_merge_context(context, state=state, operation=operation), cause=cause
        )
        self.state = state
        self.operation = operation


# =============================================================================
# Registry communication
# =============================================================================


class RegistryNetworkError(HubregException):
    """A call to the registry did not complete as expected."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, context=_merge_context(context, url=url), cause=cause)
        self.url = url


class TransportError(RegistryNetworkError):
    """
    The registry could not be reached.

    DNS failures, TLS errors, refused or reset connections and timeouts
    all end up here.
    """


class ProtocolError(RegistryNetworkError):
    """The registry's login response is not JSON or has no auth_token."""

    recoverable: bool = False

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        body: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        preview = body[:_BODY_PREVIEW] if body else None
        super().__init__(message, url=url, context=_merge_context(context, body=preview), cause=cause)
        self.body = body


class RegistryHTTPError(RegistryNetworkError):
    """The registry answered with a status the operation does not accept."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        reason: str | None = None,
        url: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            url=url,
            context=_merge_context(context, status_code=status_code, reason=reason),
            cause=cause,
        )
        self.status_code = status_code
        self.reason = reason


class AuthenticationError(RegistryHTTPError):
    """Login did not return 200."""

    recoverable: bool = False


class SubmissionError(RegistryHTTPError):
    """
    The track hub post did not return 201.

    `body` holds the registry's explanation, e.g. an unreachable hub.txt.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        reason: str | None = None,
        body: str | None = None,
        url: str | None = None,
        context: dict | None = None,
        cause: Exception | None = None,
    ) -> None:
        preview = body[:_BODY_PREVIEW] if body else None
        super().__init__(
            message,
            status_code=status_code,
            reason=reason,
            url=url,
            context=_merge_context(context, body=preview),
            cause=cause,
        )
        self.body = body


class LogoutError(RegistryHTTPError):
    """Logout did not return 200; the token may still be valid."""
