"""
`hubreg auth`: check registry credentials without registering anything.

Usage: hubreg auth test [--server URL] [--user USER] [--password PW]
"""

import click

from ..context import HubregContext
from ._session import build_service, resolve_password


@click.group("auth", invoke_without_command=True)
@click.pass_context
def auth(ctx: click.Context) -> None:
    """Check your Track Hub Registry account.

    \b
    Examples:
        hubreg auth test                     # Log in and out
        hubreg auth test --user alice        # Override the configured user
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@auth.command("test")
@click.option("--server", help="Registry URL (default: registry.url)")
@click.option("--user", help="Registry account (default: registry.user)")
@click.option("--password", help="Registry password (default: HUBREG_REGISTRY__PASSWORD)")
@click.pass_obj
def auth_test(ctx: HubregContext, server: str | None, user: str | None, password: str | None) -> None:
    """Log into the registry and straight back out."""
    password = resolve_password(ctx, password)
    service = build_service(ctx, server, user, password)

    click.echo(f"Testing credentials against {service.session.server}...")
    result = service.check_credentials()
    if not result.success:
        raise click.ClickException(result.error or "Credential check failed")

    click.echo(f"Logged in and out as {service.session.user}.")
