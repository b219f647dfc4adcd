"""CLI commands for module cache inspection"""

import sys
from pathlib import Path

import click

from modfetch.cli.utils.logging import logger
from modfetch.config import ConfigAccessor, get_mod_cache_dir
from modfetch.exceptions import ModFetchError
from modfetch.modcache import CacheLocator

cache_dir_option = click.option(
    "--cache-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Module cache root (default: GOMODCACHE).",
)


@click.group(name="cache")
def cache():
    """Inspect the module cache."""
    pass


@cache.command("path")
@cache_dir_option
@click.option(
    "--set",
    "new_root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Store this directory as [dirs] modcache in the config file.",
)
def path(cache_dir, new_root):
    """Print the module cache root.

    With --set, the directory is saved to the config file first. GOMODCACHE
    still takes precedence when it is set.
    """
    accessor = ConfigAccessor()
    if new_root is not None:
        root = str(new_root.expanduser().absolute())
        accessor.set("dirs", "modcache", root)
        accessor.save()
        logger.info(f"Module cache set to {root} in {accessor.config_path}")
    click.echo(str(cache_dir or get_mod_cache_dir(accessor)))


@cache.command("list")
@click.argument("modpath")
@cache_dir_option
def list_versions(modpath, cache_dir):
    """List cached versions of MODPATH, lowest first."""
    root = cache_dir or get_mod_cache_dir(ConfigAccessor())
    try:
        versions = CacheLocator(root).versions(modpath)
    except ModFetchError as e:
        logger.error(f"Failed to list {modpath}: {e}")
        sys.exit(1)

    if not versions:
        logger.info(f"No cached versions of {modpath} in {root}")
        return
    for version in versions:
        click.echo(version)
