"""Configuration management for teacrush.

Configuration is loaded with precedence handling:
1. CLI flags (highest priority)
2. Environment variables (TEACRUSH_*)
3. Config file (~/.teacrush/config.toml)
4. Default values (lowest priority)
"""

from teacrush.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from teacrush.config.env import EnvReader
from teacrush.config.loader import (
    get_config,
    get_default_config_path,
    load_config_file,
)
from teacrush.config.logging_factory import build_logging_config
from teacrush.config.models import (
    BehaviorConfig,
    LoggingConfig,
    TeacrushConfig,
    ToolPathsConfig,
)

__all__ = [
    # Models
    "BehaviorConfig",
    "LoggingConfig",
    "TeacrushConfig",
    "ToolPathsConfig",
    # Loader
    "get_config",
    "get_default_config_path",
    "load_config_file",
    # Builder
    "ConfigBuilder",
    "ConfigSource",
    "EnvReader",
    "source_from_env",
    "source_from_file",
    "build_logging_config",
]
