import click

from .utils.logging import configure_logging


def add_debug_option(cmd: click.Command) -> click.Command:
    """Add an eager ``--debug/--no-debug`` option to a command or group."""
    if any(param.name == "debug" for param in cmd.params):
        return cmd

    cmd.params.insert(
        0,
        click.Option(
            ["--debug/--no-debug"],
            is_eager=True,
            expose_value=False,
            callback=_set_debug,
            help="Enable debug mode",
        ),
    )
    return cmd


def _set_debug(ctx: click.Context, param: click.Parameter, value: bool) -> bool:
    root_ctx = ctx.find_root()
    root_ctx.ensure_object(dict)
    current = root_ctx.obj.get("DEBUG", False)

    # a subcommand may switch debug on, but only the top level may switch it off
    if value or ctx.parent is None:
        current = value
    root_ctx.obj["DEBUG"] = current

    configure_logging(current)
    return current
