"""CLI command to resolve a module into the cache"""

import sys
from pathlib import Path

import click

from modfetch.cli.utils.logging import logger
from modfetch.config import ConfigAccessor, FetchConfig
from modfetch.env import GopEnv
from modfetch.exceptions import ModFetchError
from modfetch.fetch.protocol import FetchProtocol
from modfetch.fetch.resolver import Resolver


@click.command(name="get")
@click.argument("modref")
@click.option(
    "--no-cache",
    is_flag=True,
    help="Always run the go command, even if the module is cached.",
)
@click.option(
    "--protocol",
    type=click.Choice(["install", "get"]),
    default=None,
    help="How the go command fetches the module (default: from config, else install).",
)
@click.option(
    "--cache-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Module cache root (default: GOMODCACHE).",
)
@click.option("--go", "go_command", default=None, help="go executable to run.")
@click.option("--gop-version", default=None, help="Go+ version to prepare go.mod for.")
@click.option(
    "--gop-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Go+ source tree, used for development builds.",
)
def get(modref, no_cache, protocol, cache_dir, go_command, gop_version, gop_root):
    """Resolve MODREF (path or path@version) to a cached module.

    Prints the module path and version; "class" is appended for Go+
    class-type modules.

    Example:

      modfetch get github.com/goplus/spx@v1.0.0
    """
    accessor = ConfigAccessor()
    env = GopEnv(version=gop_version, root=gop_root) if gop_version else GopEnv.from_config(accessor)

    try:
        config = FetchConfig.from_config(
            accessor,
            cache_dir=cache_dir,
            go_command=go_command,
            protocol=FetchProtocol.named(protocol) if protocol else None,
        )
        logger.debug(f"Module cache: {config.cache_dir}")
        mod = Resolver(config).get(modref, env=env, no_cache=no_cache)
    except ModFetchError as e:
        logger.error(f"Failed to get {modref}: {e}")
        sys.exit(1)

    line = f"{mod.path} {mod.version}"
    if mod.is_class_type:
        line += " class"
    click.echo(line)
