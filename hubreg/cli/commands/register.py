"""
`hubreg register`: register one track hub with a Track Hub Registry.

Usage: hubreg register [options] <hub_url>
"""

import json

import click
from pydantic import ValidationError

from ...core.models.trackhub import Assembly, TrackhubSubmission, TrackhubType, Visibility
from ..context import HubregContext
from ._session import build_service, resolve_password


@click.command("register")
@click.argument("hub_url")
@click.option(
    "--type",
    "-t",
    "hub_type",
    required=True,
    type=click.Choice([t.value for t in TrackhubType], case_sensitive=False),
    help="The -omics category of the track hub",
)
@click.option(
    "--assembly",
    "-a",
    "assemblies",
    multiple=True,
    type=click.Choice([a.value for a in Assembly]),
    help="Genome assembly in the hub (repeatable)",
)
@click.option("--private", is_flag=True, help="Hide the hub from registry search results")
@click.option("--server", help="Registry URL (default: registry.url)")
@click.option("--user", help="Registry account (default: registry.user)")
@click.option("--password", help="Registry password (default: HUBREG_REGISTRY__PASSWORD)")
@click.option(
    "--dry-run",
    is_flag=True,
    help="Print the request body without contacting the registry",
)
@click.pass_obj
def register(
    ctx: HubregContext,
    hub_url: str,
    hub_type: str,
    assemblies: tuple[str, ...],
    private: bool,
    server: str | None,
    user: str | None,
    password: str | None,
    dry_run: bool,
) -> None:
    """Register a track hub with the registry.

    Logs in, posts the hub and logs out again. HUB_URL is the address of
    the hub's hub.txt, HTTP preferred over FTP.

    \b
    Examples:

        hubreg register https://example.org/hub.txt -t PROTEOMICS -a hg38

        hubreg register https://example.org/hub.txt -t GENOMICS --private

        hubreg register https://example.org/hub.txt -t GENOMICS --dry-run
    """
    try:
        submission = TrackhubSubmission(
            url=hub_url,
            hub_type=TrackhubType(hub_type.upper()),
            visibility=Visibility.PRIVATE if private else Visibility.PUBLIC,
            assemblies=tuple(Assembly(a) for a in assemblies),
        )
    except ValidationError as e:
        raise click.BadParameter(str(e), param_hint="HUB_URL") from e

    if not submission.assemblies:
        click.echo("Warning: no --assembly given, the registry may reject the hub.", err=True)

    if not dry_run:
        password = resolve_password(ctx, password)
    service = build_service(ctx, server, user, password)
    result = service.register(submission, dry_run=dry_run)

    if dry_run:
        click.echo(f"Dry run - would post to {service.session.server}/api/trackhub:")
        click.echo(json.dumps(result.payload, indent=2))
        return

    if not result.success:
        if not result.logged_out and service.session.is_authenticated:
            click.echo("Warning: could not log out of the registry.", err=True)
        raise click.ClickException(result.error or "Registration failed")

    click.echo(f"Registered track hub: {hub_url}")
    if result.registry_response:
        click.echo(f"  Registry: {result.registry_response.strip()}")
    if not result.logged_out:
        click.echo("Warning: could not log out of the registry.", err=True)
