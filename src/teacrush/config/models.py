"""Configuration data models.

This module defines dataclasses for teacrush configuration options.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ToolPathsConfig:
    """Configuration for external tool paths.

    All paths are optional. If not specified, tools are looked up in PATH.
    """

    ffmpeg: Path | None = None
    ffprobe: Path | None = None


@dataclass
class BehaviorConfig:
    """Configuration for job runtime behavior."""

    # Directory for two-pass logs and palette images (None = system temp)
    temp_directory: Path | None = None

    # Maximum time for the probe step in seconds
    probe_timeout_seconds: float = 60.0

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.probe_timeout_seconds <= 0:
            raise ValueError(
                "probe_timeout_seconds must be positive, "
                f"got {self.probe_timeout_seconds}"
            )


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "warning"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class TeacrushConfig:
    """Top-level teacrush configuration."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    behavior: BehaviorConfig = field(default_factory=BehaviorConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
