"""FFprobe-based implementation of the MediaProber protocol."""

import asyncio
import json
import logging
from pathlib import Path

from teacrush.domain.models import MediaInfo
from teacrush.exceptions import ProbeError
from teacrush.introspector.parsers import parse_probe_output

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 60.0


class FFprobeIntrospector:
    """ffprobe-based implementation of MediaProber.

    Runs ffprobe as an asyncio subprocess and extracts the container
    duration and stream-type presence.
    """

    def __init__(
        self, ffprobe_path: Path, timeout: float = DEFAULT_PROBE_TIMEOUT
    ) -> None:
        self._ffprobe_path = ffprobe_path
        self._timeout = timeout

    def build_args(self, path: Path) -> list[str]:
        """Build the ffprobe argument vector for a file."""
        return [
            str(self._ffprobe_path),
            "-v",
            "error",
            "-print_format",
            "json",
            "-show_format",
            "-show_streams",
            str(path),
        ]

    async def probe(self, path: Path) -> MediaInfo:
        """Extract duration and stream presence from a media file.

        Args:
            path: Path to the media file.

        Returns:
            MediaInfo for the file.

        Raises:
            ProbeError: If ffprobe fails, times out or emits unusable output.
        """
        if not path.exists():
            raise ProbeError(f"File not found: {path}")

        try:
            process = await asyncio.create_subprocess_exec(
                *self.build_args(path),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ProbeError(f"Could not start ffprobe: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self._timeout
            )
        except asyncio.TimeoutError as e:
            process.kill()
            await process.wait()
            raise ProbeError(
                f"ffprobe timed out for {path} after {self._timeout}s"
            ) from e
        except asyncio.CancelledError:
            if process.returncode is None:
                process.kill()
                await process.wait()
            raise

        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            raise ProbeError(f"ffprobe failed for {path}: {message}")

        try:
            data = json.loads(stdout.decode("utf-8", errors="replace"))
        except json.JSONDecodeError as e:
            raise ProbeError(f"Invalid ffprobe output for {path}: {e}") from e

        info = parse_probe_output(data, str(path))
        logger.debug(
            "Probed %s",
            path,
            extra={
                "duration": info.duration,
                "has_audio": info.has_audio,
                "stream_types": sorted(info.stream_types),
            },
        )
        return info
