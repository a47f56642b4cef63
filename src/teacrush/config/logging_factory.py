"""Merge CLI logging flags over the configured LoggingConfig."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from teacrush.config.models import LoggingConfig


def build_logging_config(
    base: LoggingConfig,
    *,
    level: str | None = None,
    file: Path | None = None,
    format: str | None = None,
    include_stderr: bool | None = None,
) -> LoggingConfig:
    """Return base with every flag that was actually given applied.

    None means "not given on the command line". Rotation settings only come
    from the config file. The result is validated again by
    LoggingConfig.__post_init__, so a bad --log-level raises ValueError.
    """
    flags = {
        "level": level,
        "file": file,
        "format": format,
        "include_stderr": include_stderr,
    }
    return replace(base, **{k: v for k, v in flags.items() if v is not None})
