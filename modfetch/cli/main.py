"""modfetch CLI"""

import click

from modfetch import __version__
from modfetch.cli.cache import cache
from modfetch.cli.get import get

from .debug import add_debug_option


@click.group()
@click.version_option(__version__, prog_name="modfetch")
@click.pass_context
def cli(ctx):
    """
    Resolve Go modules to the local module cache.
    """
    ctx.ensure_object(dict)


cli.add_command(add_debug_option(get))
cli.add_command(add_debug_option(cache))

add_debug_option(cli)

if __name__ == "__main__":
    cli(obj={})
