"""CLI module for teacrush."""

import logging
from pathlib import Path

import click

from teacrush.cli.exit_codes import ExitCode
from teacrush.exceptions import ConfigurationError

_logging_configured: bool = False

logger = logging.getLogger(__name__)


def _configure_logging(
    base,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Configure logging from CLI options.

    Args:
        base: LoggingConfig from the config file and environment.
        log_level: Override log level (debug, info, warning, error).
        log_file: Override log file path.
        log_json: Use JSON log format.
    """
    global _logging_configured
    if _logging_configured:
        return

    from teacrush.config.logging_factory import build_logging_config
    from teacrush.logging import configure_logging

    configure_logging(
        build_logging_config(
            base,
            level=log_level,
            file=log_file,
            format="json" if log_json else None,
        )
    )
    _logging_configured = True


@click.group()
@click.version_option(package_name="teacrush")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: warning).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Config file (default: ~/.teacrush/config.toml).",
)
@click.option(
    "--ffmpeg",
    "ffmpeg_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to the ffmpeg executable.",
)
@click.option(
    "--ffprobe",
    "ffprobe_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to the ffprobe executable.",
)
@click.pass_context
def main(
    ctx: click.Context,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
    config_path: Path | None,
    ffmpeg_path: Path | None,
    ffprobe_path: Path | None,
) -> None:
    """teacrush - Compress videos to a size budget with ffmpeg."""
    from teacrush.config import get_config

    ctx.ensure_object(dict)
    try:
        config = get_config(
            config_path,
            ffmpeg_path=ffmpeg_path,
            ffprobe_path=ffprobe_path,
            strict=config_path is not None,
        )
        _configure_logging(config.logging, log_level, log_file, log_json)
    except (ConfigurationError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(ExitCode.CONFIG_ERROR)

    ctx.obj["config"] = config
    logger.debug("Loaded configuration", extra={"config_path": str(config_path)})


# Defer import to avoid circular dependency
def _register_commands():
    from teacrush.cli.codecs import codecs_command
    from teacrush.cli.encode import encode_command

    main.add_command(encode_command)
    main.add_command(codecs_command)


_register_commands()
