"""External tool resolution.

Locates the ffmpeg and ffprobe executables, preferring configured paths
over a PATH lookup.
"""

import logging
import shutil
from pathlib import Path

from teacrush.config.models import ToolPathsConfig
from teacrush.exceptions import ToolNotFoundError

logger = logging.getLogger(__name__)

KNOWN_TOOLS = ("ffmpeg", "ffprobe")


def find_tool(name: str, configured_path: Path | None = None) -> Path | None:
    """Find a tool executable.

    Args:
        name: Tool name (e.g., "ffmpeg").
        configured_path: Optional configured path override.

    Returns:
        Path to tool executable, or None if not found.
    """
    if configured_path:
        if configured_path.is_file():
            return configured_path
        logger.warning(
            "Configured path for %s is not a file: %s", name, configured_path
        )

    which_result = shutil.which(name)
    if which_result:
        return Path(which_result)

    return None


def require_tool(name: str, tools: ToolPathsConfig | None = None) -> Path:
    """Get path to a required tool, raising an error if not available.

    Args:
        name: One of KNOWN_TOOLS.
        tools: Configured tool paths, or None to search PATH only.

    Returns:
        Path to the tool executable.

    Raises:
        ToolNotFoundError: If the tool cannot be located.
    """
    if name not in KNOWN_TOOLS:
        raise ValueError(f"Unknown tool: {name}")

    configured = getattr(tools, name) if tools is not None else None
    path = find_tool(name, configured)
    if path is None:
        raise ToolNotFoundError(name)

    logger.debug("Resolved %s at %s", name, path, extra={"tool": name})
    return path
