"""MediaProber interface for media inspection."""

from pathlib import Path
from typing import Protocol

from teacrush.domain.models import MediaInfo


class MediaProber(Protocol):
    """Protocol for media inspection implementations.

    The pipeline only needs the container duration and which stream types
    are present. Tests substitute an in-memory prober.
    """

    async def probe(self, path: Path) -> MediaInfo:
        """Inspect a media file.

        Args:
            path: Path to the media file.

        Returns:
            MediaInfo with duration and stream presence.

        Raises:
            ProbeError: If the file cannot be inspected.
        """
        ...
