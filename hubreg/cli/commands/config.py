"""
`hubreg config`: inspect and change .hubreg/config.toml.

Usage: hubreg config [list|get|set] [key] [value]
"""

import click

from ...config import config_get, config_list, config_set
from ..context import HubregContext

_SECRET_KEYS = {"registry.password"}


@click.group("config", invoke_without_command=True)
@click.pass_context
def config(ctx: click.Context) -> None:
    """View or set configuration.

    Values are saved to .hubreg/config.toml. HUBREG_<SECTION>__<FIELD>
    environment variables take precedence over the file.

    \b
    Examples:

        hubreg config list                        # List all options

        hubreg config get registry.url            # Show the effective value

        hubreg config set registry.user alice     # Save a value
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@config.command("list")
def config_list_cmd() -> None:
    """List the keys that can be set."""
    click.echo("Available config options:")
    for key, info in config_list().items():
        click.echo("")
        click.echo(f"  {key}")
        click.echo(f"    {info['description']} (default: {info['default']})")


@config.command("get")
@click.argument("key")
@click.pass_obj
def config_get_cmd(ctx: HubregContext, key: str) -> None:
    """Show the effective value of KEY, e.g. registry.url."""
    if key in _SECRET_KEYS:
        raise click.ClickException(f"{key} is not shown")
    value = config_get(key, start_dir=ctx.start_dir)
    click.echo(f"{key}: {'(not set)' if value is None else value}")


@config.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_obj
def config_set_cmd(ctx: HubregContext, key: str, value: str) -> None:
    """Save VALUE for KEY in .hubreg/config.toml."""
    try:
        config_path, typed_value = config_set(key, value, start_dir=ctx.start_dir)
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Set {key} = {typed_value}")
    click.echo(f"Saved to {config_path}")
