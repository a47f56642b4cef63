"""Configuration builder with explicit layering.

This module provides ConfigBuilder for building TeacrushConfig by composing
multiple configuration sources with explicit precedence handling.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from teacrush.config.env import EnvReader
from teacrush.config.models import (
    BehaviorConfig,
    LoggingConfig,
    TeacrushConfig,
    ToolPathsConfig,
)


@dataclass
class ConfigSource:
    """Configuration values from a single source.

    None values indicate "not specified in this source" and will not
    override values from lower-precedence sources.
    """

    # Tool paths
    ffmpeg_path: Path | None = None
    ffprobe_path: Path | None = None

    # Behavior config
    temp_directory: Path | None = None
    probe_timeout_seconds: float | None = None

    # Logging config
    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_include_stderr: bool | None = None
    logging_max_bytes: int | None = None
    logging_backup_count: int | None = None


class ConfigBuilder:
    """Builds TeacrushConfig by layering ConfigSources with precedence.

    Later sources override earlier ones (for non-None values).

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(file_config))
        builder.apply(source_from_env(reader))
        builder.apply(cli_source)
        config = builder.build()
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def apply(self, source: ConfigSource) -> None:
        """Apply configuration source, overriding existing values.

        Args:
            source: Configuration source to apply.
        """
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value

    def _get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def build(self) -> TeacrushConfig:
        """Build the final TeacrushConfig with defaults for unset values.

        Raises:
            ValueError: If a layered value fails dataclass validation.
        """
        tools = ToolPathsConfig(
            ffmpeg=self._get("ffmpeg_path", None),
            ffprobe=self._get("ffprobe_path", None),
        )

        behavior = BehaviorConfig(
            temp_directory=self._get("temp_directory", None),
            probe_timeout_seconds=self._get("probe_timeout_seconds", 60.0),
        )

        logging_config = LoggingConfig(
            level=self._get("logging_level", "warning"),
            file=self._get("logging_file", None),
            format=self._get("logging_format", "text"),
            include_stderr=self._get("logging_include_stderr", False),
            max_bytes=self._get("logging_max_bytes", 10_485_760),
            backup_count=self._get("logging_backup_count", 5),
        )

        return TeacrushConfig(tools=tools, behavior=behavior, logging=logging_config)


def source_from_file(file_config: dict[str, Any]) -> ConfigSource:
    """Create ConfigSource from parsed TOML config file.

    Args:
        file_config: Parsed configuration dictionary from TOML file.

    Returns:
        ConfigSource with values from the config file.
    """
    tools = file_config.get("tools", {})
    behavior = file_config.get("behavior", {})
    logging_conf = file_config.get("logging", {})

    temp_dir_str = behavior.get("temp_directory")
    log_file_str = logging_conf.get("file")

    return ConfigSource(
        ffmpeg_path=Path(tools["ffmpeg"]) if tools.get("ffmpeg") else None,
        ffprobe_path=Path(tools["ffprobe"]) if tools.get("ffprobe") else None,
        temp_directory=Path(temp_dir_str).expanduser() if temp_dir_str else None,
        probe_timeout_seconds=behavior.get("probe_timeout_seconds"),
        logging_level=logging_conf.get("level"),
        logging_file=Path(log_file_str).expanduser() if log_file_str else None,
        logging_format=logging_conf.get("format"),
        logging_include_stderr=logging_conf.get("include_stderr"),
        logging_max_bytes=logging_conf.get("max_bytes"),
        logging_backup_count=logging_conf.get("backup_count"),
    )


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create ConfigSource from TEACRUSH_* environment variables.

    Args:
        reader: Environment reader to use.

    Returns:
        ConfigSource with values from the environment.
    """
    return ConfigSource(
        ffmpeg_path=reader.get_path("TEACRUSH_FFMPEG_PATH"),
        ffprobe_path=reader.get_path("TEACRUSH_FFPROBE_PATH"),
        temp_directory=reader.get_path("TEACRUSH_TEMP_DIR"),
        probe_timeout_seconds=reader.get_float("TEACRUSH_PROBE_TIMEOUT"),
        logging_level=reader.get_str("TEACRUSH_LOG_LEVEL"),
        logging_file=reader.get_path("TEACRUSH_LOG_FILE", must_exist=False),
        logging_format=reader.get_str("TEACRUSH_LOG_FORMAT"),
        logging_include_stderr=reader.get_bool("TEACRUSH_LOG_STDERR"),
    )
