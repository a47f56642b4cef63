"""Pure parsing functions for ffprobe JSON output.

These functions transform ffprobe JSON data into teacrush domain objects.
They perform no I/O, so they can be tested directly with dict fixtures.
"""

import logging
from typing import Any

from teacrush.domain.models import MediaInfo
from teacrush.exceptions import ProbeError

logger = logging.getLogger(__name__)


def parse_duration(value: Any) -> float:
    """Parse an ffprobe duration field into seconds.

    Returns 0.0 (unknown) for missing, "N/A", malformed or negative values.
    """
    if value is None or value == "N/A":
        return 0.0
    try:
        duration = float(value)
    except (TypeError, ValueError):
        logger.warning("Unparseable duration in ffprobe output: %r", value)
        return 0.0
    if duration < 0:
        return 0.0
    return duration


def parse_probe_output(data: dict[str, Any], source: str | None = None) -> MediaInfo:
    """Convert an ffprobe JSON document into MediaInfo.

    Args:
        data: Decoded output of ``ffprobe -show_format -show_streams``.
        source: Path of the probed file, used in error messages.

    Returns:
        MediaInfo for the file.

    Raises:
        ProbeError: If the document lacks the streams or format sections.
    """
    where = f" for {source}" if source else ""
    if not isinstance(data, dict):
        raise ProbeError(f"Unexpected ffprobe output{where}: not a JSON object")
    if "streams" not in data:
        raise ProbeError(
            f"Missing 'streams' in ffprobe output{where}. "
            "File may be corrupted or not a valid media file."
        )
    if "format" not in data:
        raise ProbeError(
            f"Missing 'format' in ffprobe output{where}. "
            "File may be corrupted or not a valid media file."
        )

    stream_types = frozenset(
        stream["codec_type"]
        for stream in data["streams"] or []
        if isinstance(stream, dict) and stream.get("codec_type")
    )
    fmt = data["format"] or {}
    duration = parse_duration(fmt.get("duration"))

    return MediaInfo(
        duration=duration,
        has_audio="audio" in stream_types,
        stream_types=stream_types,
    )
