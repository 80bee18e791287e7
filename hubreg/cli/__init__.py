"""
Click command group for hubreg.

`hubreg` is installed as a console script; `python -m hubreg` runs the same
group.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

import click

from .context import HubregContext

try:
    __version__ = version("hubreg")
except PackageNotFoundError:
    # Running from a source tree that was never installed
    __version__ = "0.1.0"


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="hubreg")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """hubreg - register track hubs with a Track Hub Registry

    \b
    Quick Start:
        hubreg config set registry.user alice    Store your account name
        hubreg auth test                         Check your credentials
        hubreg register <hub.txt URL> --type GENOMICS -a hg38

    \b
    The password is read from HUBREG_REGISTRY__PASSWORD or prompted for.
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)

    from ..core.bootstrap import bootstrap

    hubreg_ctx = HubregContext.create()
    bootstrap(hubreg_ctx.cwd)
    ctx.obj = hubreg_ctx


def register_commands() -> None:
    from .commands import COMMANDS

    for cmd in COMMANDS:
        cli.add_command(cmd)


register_commands()


__all__ = [
    "HubregContext",
    "__version__",
    "cli",
    "register_commands",
]
