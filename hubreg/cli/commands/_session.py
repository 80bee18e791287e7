"""
Shared helpers for commands that talk to the registry.

Resolves credentials from options, configuration and prompts, and wraps
the resulting session in a TrackhubRegistrationService.
"""

from __future__ import annotations

import click

from ...config import config_get
from ...core.exceptions import HubregException
from ...services.registration import TrackhubRegistrationService, create_registry_session
from ..context import HubregContext


def resolve_password(ctx: HubregContext, password: str | None) -> str:
    """Return the password from the option, configuration or a prompt."""
    if password:
        return password
    configured = config_get("registry.password", start_dir=ctx.start_dir)
    if configured:
        return configured
    if not ctx.is_interactive:
        raise click.ClickException(
            "No registry password. Pass --password or set HUBREG_REGISTRY__PASSWORD."
        )
    return click.prompt("Registry password", hide_input=True)


def build_service(
    ctx: HubregContext,
    server: str | None,
    user: str | None,
    password: str | None,
) -> TrackhubRegistrationService:
    """Create a registration service, turning setup errors into CLI errors."""
    try:
        session = create_registry_session(
            server=server,
            user=user,
            password=password,
            start_dir=ctx.start_dir,
        )
    except HubregException as e:
        raise click.ClickException(str(e)) from e
    return TrackhubRegistrationService(session)
