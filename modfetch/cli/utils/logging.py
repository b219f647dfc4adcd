import logging

import click


logger = logging.getLogger("modfetch")


class ClickEchoHandler(logging.Handler):
    """Writes records to stderr through click, so redirected streams are honored."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def configure_logging(debug: bool):
    """
    Configure the ``modfetch`` logger for command line use.

    Log records go to stderr so that command results printed on stdout stay
    machine-readable. Debug mode adds the logger name.
    """
    log_level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(log_level)

    handler = next((h for h in logger.handlers if isinstance(h, ClickEchoHandler)), None)
    if handler is None:
        handler = ClickEchoHandler()
        logger.addHandler(handler)

    fmt = "%(name)s: %(message)s" if debug else "%(message)s"
    handler.setFormatter(logging.Formatter(fmt))
