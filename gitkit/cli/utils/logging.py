import logging
import sys


logger = logging.getLogger("gitkit")


class _LevelPrefixFormatter(logging.Formatter):
    """Plain messages for INFO and below, level-prefixed above."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno > logging.INFO:
            return f"[{record.levelname}] {message}"
        return message


def configure_logging(debug: bool):
    """
    Route gitkit log records to stderr, at DEBUG level if ``debug`` is set.
    """
    log_level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(log_level)

    if not logger.handlers:
        # stdout is reserved for command output
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(_LevelPrefixFormatter("%(message)s"))
        logger.addHandler(handler)


def debug_option(cmd):
    """Add a ``--debug/--no-debug`` flag that configures logging before ``cmd`` runs."""
    import click

    def _callback(ctx, param, value):
        root = ctx.find_root()
        root.ensure_object(dict)
        # a subcommand may switch debug on, never off
        if value or "DEBUG" not in root.obj:
            root.obj["DEBUG"] = value
        configure_logging(root.obj["DEBUG"])
        return value

    return click.option(
        "--debug/--no-debug",
        default=False,
        is_eager=True,
        expose_value=False,
        callback=_callback,
        help="Enable debug mode",
    )(cmd)
