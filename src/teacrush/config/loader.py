"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (TEACRUSH_*)
3. Config file (~/.teacrush/config.toml)
4. Default values

Environment variables:
- TEACRUSH_FFMPEG_PATH: Path to ffmpeg executable
- TEACRUSH_FFPROBE_PATH: Path to ffprobe executable
- TEACRUSH_TEMP_DIR: Directory for intermediate artifacts
- TEACRUSH_PROBE_TIMEOUT: Probe timeout in seconds
- TEACRUSH_LOG_LEVEL / TEACRUSH_LOG_FILE / TEACRUSH_LOG_FORMAT: Logging
- TEACRUSH_LOG_STDERR: Also log to stderr when a log file is set
- TEACRUSH_CONFIG_PATH: Path to config file (overrides default location)
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from teacrush.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from teacrush.config.env import EnvReader
from teacrush.config.models import TeacrushConfig
from teacrush.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Default config location
DEFAULT_CONFIG_DIR = Path.home() / ".teacrush"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"


def get_default_config_path() -> Path:
    """Get the default config file path.

    Can be overridden by TEACRUSH_CONFIG_PATH environment variable.
    """
    env_path = os.environ.get("TEACRUSH_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_FILE


def load_config_file(path: Path | None = None, *, strict: bool = False) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        path: Path to config file. If None, uses default location.
        strict: If True, raise ConfigurationError on parse failures.
                If False (default), log a warning and return an empty dict.

    Returns:
        Parsed configuration dict. Empty dict if file doesn't exist.

    Raises:
        ConfigurationError: When strict=True and the file cannot be parsed.
    """
    if path is None:
        path = get_default_config_path()

    if not path.exists():
        return {}

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        if strict:
            raise ConfigurationError(f"Could not parse config file {path}: {e}") from e
        logger.warning("Ignoring unreadable config file %s: %s", path, e)
        return {}


def get_config(
    config_path: Path | None = None,
    # CLI overrides (highest precedence)
    ffmpeg_path: Path | None = None,
    ffprobe_path: Path | None = None,
    temp_directory: Path | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> TeacrushConfig:
    """Get teacrush configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides TEACRUSH_CONFIG_PATH).
        ffmpeg_path: CLI override for ffmpeg path.
        ffprobe_path: CLI override for ffprobe path.
        temp_directory: CLI override for the intermediate artifact directory.
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: If True, raise on config file parse failures.

    Returns:
        TeacrushConfig with merged configuration.

    Raises:
        ConfigurationError: If the merged configuration is invalid, or the
            config file is unparseable and strict=True.
    """
    reader = env_reader or EnvReader()

    file_config = load_config_file(config_path, strict=strict)

    cli_source = ConfigSource(
        ffmpeg_path=ffmpeg_path,
        ffprobe_path=ffprobe_path,
        temp_directory=temp_directory,
    )

    # Build with precedence: file < env < cli
    builder = ConfigBuilder()
    builder.apply(source_from_file(file_config))
    builder.apply(source_from_env(reader))
    builder.apply(cli_source)

    try:
        return builder.build()
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
